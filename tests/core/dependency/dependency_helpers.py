"""Record builders and fixed intervals for dependency engine tests."""

from datetime import datetime

from depflow.core.dependency.types import (
    DateInterval,
    ExecutionRecord,
    ExecutionStatus,
    RunMode,
    TaskExecutionRecord,
)

DAY_1 = DateInterval(datetime(2024, 5, 1, 0, 0, 0), datetime(2024, 5, 1, 23, 59, 59, 999999))
DAY_2 = DateInterval(datetime(2024, 5, 2, 0, 0, 0), datetime(2024, 5, 2, 23, 59, 59, 999999))
EVALUATION_TIME = datetime(2024, 5, 3, 8, 0, 0)


def make_record(
    record_id: int = 1,
    definition_id: int = 7,
    state: ExecutionStatus = ExecutionStatus.success,
    run_mode: RunMode = RunMode.scheduled,
    end_time: datetime | None = datetime(2024, 5, 1, 2, 0, 0),
) -> ExecutionRecord:
    """Create a process execution record."""
    return ExecutionRecord(
        id=record_id,
        definition_id=definition_id,
        state=state,
        run_mode=run_mode,
        start_time=datetime(2024, 5, 1, 1, 0, 0),
        end_time=end_time,
        schedule_time=datetime(2024, 5, 1, 1, 0, 0) if run_mode is RunMode.scheduled else None,
    )


def make_task(
    name: str,
    state: ExecutionStatus = ExecutionStatus.success,
    process_instance_id: int = 1,
    task_id: int = 100,
) -> TaskExecutionRecord:
    """Create a task execution record."""
    return TaskExecutionRecord(
        id=task_id,
        process_instance_id=process_instance_id,
        name=name,
        state=state,
    )


