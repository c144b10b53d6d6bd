"""
Dependency item evaluation

Resolves one dependency item at an evaluation time into a single verdict by
walking the item's intervals in the order the interval resolver emits them.
"""

from __future__ import annotations

from datetime import datetime

from depflow.core.dependency.selector import HistoryRecordSelector
from depflow.core.dependency.status import depend_result_by_state
from depflow.core.dependency.types import (
    DateInterval,
    DependentItem,
    DependResult,
    ExecutionHistoryStore,
    ExecutionRecord,
    IntervalResolver,
)
from depflow.core.execution.errors import collaborator_errors
from depflow.logger import get_logger

logger = get_logger(__name__)


class DependencyItemEvaluator:
    """
    Evaluates dependency items against execution history.

    Collaborators are injected so that the evaluator holds no global state:
    the interval resolver turns ``item.date_value`` into intervals and the
    history store answers record lookups.
    """

    def __init__(
        self,
        interval_resolver: IntervalResolver,
        history_store: ExecutionHistoryStore,
        selector: HistoryRecordSelector | None = None,
    ) -> None:
        self.interval_resolver = interval_resolver
        self.history_store = history_store
        self.selector = selector or HistoryRecordSelector(history_store)

    def evaluate(self, item: DependentItem, evaluation_time: datetime) -> DependResult:
        """
        Evaluate one dependency item.

        Args:
            item: Dependency item
            evaluation_time: Reference time for the item's date expression

        Returns:
            success only if every interval succeeded; otherwise the verdict of
            the first interval that did not succeed

        Raises:
            CollaboratorUnavailableError: If the resolver or the store fails
        """
        with collaborator_errors(
            "interval resolver", key=item.key, date_value=item.date_value
        ):
            intervals = self.interval_resolver.resolve(evaluation_time, item.date_value)
        return self.evaluate_intervals(item, intervals)

    def evaluate_intervals(
        self, item: DependentItem, intervals: list[DateInterval]
    ) -> DependResult:
        result = DependResult.failed
        for interval in intervals:
            record = self.selector.select_authoritative(item.definition_id, interval)
            if record is None:
                logger.error(
                    "cannot find the right process instance: definition id:%s, start:%s, end:%s",
                    item.definition_id,
                    interval.start_time.isoformat(),
                    interval.end_time.isoformat(),
                )
                return DependResult.failed

            if item.depends_on_all:
                result = depend_result_by_state(record.state)
            else:
                result = self._result_for_task(item, record)

            if result is not DependResult.success:
                break
        return result

    def _result_for_task(self, item: DependentItem, record: ExecutionRecord) -> DependResult:
        with collaborator_errors(
            "history store", key=item.key, process_instance_id=record.id
        ):
            task_executions = self.history_store.list_valid_task_executions(record.id)

        for task in task_executions:
            if task.name == item.dep_tasks:
                return depend_result_by_state(task.state)

        # Task not spawned yet (process still running) or the process failed
        # before reaching it: fall back to the process state.
        logger.debug(
            "Task %s not found in process instance %s, using process state %s",
            item.dep_tasks,
            record.id,
            record.state,
        )
        return depend_result_by_state(record.state)


__all__ = ["DependencyItemEvaluator"]
