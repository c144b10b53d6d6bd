"""Fixtures for the SQLAlchemy history store."""

from datetime import datetime

import pytest

from depflow.core.dependency.types import ExecutionStatus, RunMode
from depflow.core.storage.sqlalchemy import (
    ExecutionHistoryRepository,
    ProcessInstanceModel,
    TaskInstanceModel,
    create_session_factory,
)


@pytest.fixture
def session_factory():
    """In-memory SQLite session factory with history tables created."""
    factory = create_session_factory("sqlite:///:memory:", create_tables=True)
    yield factory
    factory.kw["bind"].dispose()


@pytest.fixture
def repository(session_factory) -> ExecutionHistoryRepository:
    return ExecutionHistoryRepository(session_factory)


@pytest.fixture
def add_process(session_factory):
    """Insert a process instance row and return its id."""

    def _add(
        definition_id: int = 7,
        state: ExecutionStatus = ExecutionStatus.success,
        run_mode: RunMode = RunMode.scheduled,
        schedule_time: datetime | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> int:
        with session_factory() as session:
            row = ProcessInstanceModel(
                process_definition_id=definition_id,
                state=state.value if isinstance(state, ExecutionStatus) else state,
                run_mode=run_mode.value,
                schedule_time=schedule_time,
                start_time=start_time,
                end_time=end_time,
            )
            session.add(row)
            session.commit()
            return row.id

    return _add


@pytest.fixture
def add_task(session_factory):
    """Insert a task instance row and return its id."""

    def _add(
        process_instance_id: int,
        name: str,
        state: ExecutionStatus = ExecutionStatus.success,
        flag: bool = True,
        start_time: datetime | None = None,
    ) -> int:
        with session_factory() as session:
            row = TaskInstanceModel(
                process_instance_id=process_instance_id,
                name=name,
                state=state.value,
                flag=flag,
                start_time=start_time,
            )
            session.add(row)
            session.commit()
            return row.id

    return _add
