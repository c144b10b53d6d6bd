"""
Execution status classification

Maps raw execution statuses into the three categories the dependency engine
cares about, and from there into a dependency verdict.
"""

from depflow.core.dependency.types import (
    DependResult,
    ExecutionStatus,
    ExecutionStatusCategory,
)


def classify(state: ExecutionStatus) -> ExecutionStatusCategory:
    """
    Classify a raw execution status.

    Submitted-but-not-dispatched and waiting-for-thread executions count as
    running: they have been accepted and will make progress on their own.

    Args:
        state: Raw execution status

    Returns:
        running_like, success_like or other
    """
    if (
        state.type_is_running()
        or state is ExecutionStatus.submitted_success
        or state is ExecutionStatus.waiting_thread
    ):
        return ExecutionStatusCategory.running_like
    if state.type_is_success():
        return ExecutionStatusCategory.success_like
    return ExecutionStatusCategory.other


_CATEGORY_RESULTS = {
    ExecutionStatusCategory.running_like: DependResult.waiting,
    ExecutionStatusCategory.success_like: DependResult.success,
    ExecutionStatusCategory.other: DependResult.failed,
}


def depend_result_by_state(state: ExecutionStatus) -> DependResult:
    """Map a raw execution status to a dependency verdict."""
    return _CATEGORY_RESULTS[classify(state)]


__all__ = ["classify", "depend_result_by_state"]
