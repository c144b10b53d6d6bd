"""
Authoritative history record selection

For one process definition and one interval, pick the single process
execution that represents the interval's outcome:

1. a running execution inside the interval always wins
2. otherwise the later-finished of the latest scheduled run and the latest
   manual run
3. otherwise nothing
"""

from __future__ import annotations

from depflow.core.dependency.types import DateInterval, ExecutionHistoryStore, ExecutionRecord
from depflow.core.execution.errors import collaborator_errors
from depflow.logger import get_logger

logger = get_logger(__name__)


class HistoryRecordSelector:
    """Selects the authoritative process execution for an interval."""

    def __init__(self, history_store: ExecutionHistoryStore) -> None:
        self._history_store = history_store

    @property
    def history_store(self) -> ExecutionHistoryStore:
        return self._history_store

    def select_authoritative(
        self, definition_id: int, interval: DateInterval
    ) -> ExecutionRecord | None:
        """
        Select the authoritative process execution.

        Args:
            definition_id: Process definition ID
            interval: Window the execution must belong to

        Returns:
            The selected ExecutionRecord, or None when the interval has no history

        Raises:
            CollaboratorUnavailableError: If the history store fails
        """
        context = {
            "definition_id": definition_id,
            "start_time": interval.start_time.isoformat(),
            "end_time": interval.end_time.isoformat(),
        }
        with collaborator_errors("history store", **context):
            running = self._history_store.find_running_execution(definition_id, interval)
            if running is not None:
                logger.debug(
                    "Running process instance %s selected for definition %s",
                    running.id,
                    definition_id,
                )
                return running

            scheduled = self._history_store.find_latest_scheduled_execution(
                definition_id, interval
            )
            manual = self._history_store.find_latest_manual_execution(definition_id, interval)

        return self.pick_later_finished(scheduled, manual)

    @staticmethod
    def pick_later_finished(
        scheduled: ExecutionRecord | None, manual: ExecutionRecord | None
    ) -> ExecutionRecord | None:
        """
        Pick whichever of two executions finished later.

        The manual run only wins when it finished strictly later; equal end
        times keep the scheduled run. A missing end time counts as earliest.
        """
        if manual is None:
            return scheduled
        if scheduled is None:
            return manual
        if manual.end_time is None:
            return scheduled
        if scheduled.end_time is None:
            return manual
        return manual if manual.end_time > scheduled.end_time else scheduled


__all__ = ["HistoryRecordSelector"]
