"""
Execution history repository

Read-only SQLAlchemy implementation of the history store the dependency
engine consults. Every lookup answers "not found" with None or an empty list;
database failures are raised as StorageError.
"""

from typing import Callable, List, Optional, TypeVar

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from depflow.core.dependency.types import (
    IN_FLIGHT_STATES,
    DateInterval,
    ExecutionRecord,
    RunMode,
    TaskExecutionRecord,
)
from depflow.core.execution.errors import StorageError
from depflow.core.storage.sqlalchemy.models import ProcessInstanceModel, TaskInstanceModel
from depflow.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ExecutionHistoryRepository:
    """
    Execution history repository for dependency checks

    Provides methods for:
    - Finding the in-flight process instance of a definition inside a window
    - Finding the latest scheduled and the latest manual run inside a window
    - Listing the valid task instances of a process instance

    Example:
        repo = ExecutionHistoryRepository(create_session_factory("sqlite:///history.db"))
        record = repo.find_running_execution(7, interval)
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def find_running_execution(
        self, definition_id: int, interval: DateInterval
    ) -> Optional[ExecutionRecord]:
        """
        Latest-started in-flight process instance whose schedule time or
        start time falls inside the interval.
        """
        model = ProcessInstanceModel
        stmt = (
            select(model)
            .where(model.process_definition_id == definition_id)
            .where(model.state.in_([state.value for state in IN_FLIGHT_STATES]))
            .where(
                or_(
                    model.schedule_time.between(interval.start_time, interval.end_time),
                    model.start_time.between(interval.start_time, interval.end_time),
                )
            )
            .order_by(model.start_time.desc(), model.id.desc())
            .limit(1)
        )
        return self._run("find_running_execution", lambda session: self._first(session, stmt))

    def find_latest_scheduled_execution(
        self, definition_id: int, interval: DateInterval
    ) -> Optional[ExecutionRecord]:
        """Latest-finished scheduled run whose schedule time falls inside the interval."""
        model = ProcessInstanceModel
        stmt = (
            select(model)
            .where(
                and_(
                    model.process_definition_id == definition_id,
                    model.run_mode == RunMode.scheduled.value,
                    model.schedule_time.between(interval.start_time, interval.end_time),
                )
            )
            .order_by(model.end_time.desc(), model.id.desc())
            .limit(1)
        )
        return self._run(
            "find_latest_scheduled_execution", lambda session: self._first(session, stmt)
        )

    def find_latest_manual_execution(
        self, definition_id: int, interval: DateInterval
    ) -> Optional[ExecutionRecord]:
        """Latest-finished manual run whose end time falls inside the interval."""
        model = ProcessInstanceModel
        stmt = (
            select(model)
            .where(
                and_(
                    model.process_definition_id == definition_id,
                    model.run_mode == RunMode.manual.value,
                    model.end_time.between(interval.start_time, interval.end_time),
                )
            )
            .order_by(model.end_time.desc(), model.id.desc())
            .limit(1)
        )
        return self._run(
            "find_latest_manual_execution", lambda session: self._first(session, stmt)
        )

    def list_valid_task_executions(self, process_instance_id: int) -> List[TaskExecutionRecord]:
        """Valid task instances of a process instance, latest-started first."""
        model = TaskInstanceModel
        stmt = (
            select(model)
            .where(model.process_instance_id == process_instance_id)
            .where(model.flag == True)  # noqa: E712
            .order_by(model.start_time.desc(), model.id.desc())
        )

        def query(session: Session) -> List[TaskExecutionRecord]:
            return [task.to_record() for task in session.execute(stmt).scalars().all()]

        return self._run("list_valid_task_executions", query)

    @staticmethod
    def _first(session: Session, stmt) -> Optional[ExecutionRecord]:
        model = session.execute(stmt).scalars().first()
        return model.to_record() if model is not None else None

    def _run(self, operation: str, query: Callable[[Session], T]) -> T:
        try:
            with self._session_factory() as session:
                return query(session)
        except SQLAlchemyError as e:
            logger.error(f"Error in {operation}: {str(e)}")
            raise StorageError(
                f"History query {operation} failed: {e}",
                what="Execution history query failed",
                why=str(e),
                how_to_fix="Check that the history database is reachable and migrated",
                context={"operation": operation},
            ) from e
        except ValueError as e:
            logger.error(f"Invalid history row in {operation}: {str(e)}")
            raise StorageError(
                f"History query {operation} returned an invalid row: {e}",
                context={"operation": operation},
            ) from e
