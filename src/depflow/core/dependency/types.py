"""
Type definitions for dependency evaluation

Closed enums for verdicts, relations and execution statuses, immutable value
types for declarations and history records, and the protocols of the two
collaborators the engine reads from (interval resolver, history store).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum, auto
from typing import Any, Mapping, Protocol, Sequence

# Target task sentinel meaning "the whole process instance"
DEPENDENT_ALL = "ALL"


class DependResult(StrEnum):
    """Tri-state verdict for one dependency item or a whole declaration."""

    waiting = auto()
    success = auto()
    failed = auto()

    @property
    def is_terminal(self) -> bool:
        return self is not DependResult.waiting


class DependentRelation(StrEnum):
    """Boolean relation used to combine several verdicts into one."""

    AND = "and"
    OR = "or"

    @classmethod
    def parse(cls, value: "str | DependentRelation") -> "DependentRelation":
        """Parse a relation case-insensitively ("AND", "and", "Or", ...)."""
        if isinstance(value, DependentRelation):
            return value
        return cls(str(value).strip().lower())


class ExecutionStatus(StrEnum):
    """Raw status of a process or task execution as reported by the store."""

    submitted_success = auto()
    running_execution = auto()
    ready_pause = auto()
    pause = auto()
    ready_stop = auto()
    stop = auto()
    failure = auto()
    success = auto()
    need_fault_tolerance = auto()
    kill = auto()
    waiting_thread = auto()
    waiting_depend = auto()

    def type_is_running(self) -> bool:
        return self in (ExecutionStatus.running_execution, ExecutionStatus.waiting_depend)

    def type_is_success(self) -> bool:
        return self is ExecutionStatus.success


# States the history store treats as "currently running" when looking for
# an in-flight process instance
IN_FLIGHT_STATES: tuple[ExecutionStatus, ...] = (
    ExecutionStatus.submitted_success,
    ExecutionStatus.running_execution,
    ExecutionStatus.ready_pause,
    ExecutionStatus.need_fault_tolerance,
    ExecutionStatus.ready_stop,
)


class ExecutionStatusCategory(StrEnum):
    running_like = auto()
    success_like = auto()
    other = auto()


class RunMode(StrEnum):
    """How a process instance was started."""

    scheduled = auto()
    manual = auto()


@dataclass(frozen=True)
class DateInterval:
    """Inclusive [start_time, end_time] window."""

    start_time: datetime
    end_time: datetime

    def __post_init__(self) -> None:
        if self.start_time > self.end_time:
            raise ValueError(
                f"Interval start {self.start_time.isoformat()} is after end {self.end_time.isoformat()}"
            )

    def contains(self, moment: datetime | None) -> bool:
        return moment is not None and self.start_time <= moment <= self.end_time


@dataclass(frozen=True)
class DependentItem:
    """
    One declared upstream condition.

    ``dep_tasks`` is either DEPENDENT_ALL (the process instance as a whole)
    or the name of a single task inside the process instance.
    """

    key: str
    definition_id: int
    dep_tasks: str
    date_value: str

    @property
    def depends_on_all(self) -> bool:
        return self.dep_tasks == DEPENDENT_ALL

    @staticmethod
    def default_key(definition_id: Any, dep_tasks: Any, date_value: Any) -> str:
        return f"{definition_id}-{dep_tasks}-{date_value}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DependentItem":
        """
        Build an item from a JSON-compatible mapping.

        Accepts camelCase keys (``definitionId``, ``depTasks``, ``dateValue``)
        as well as their snake_case forms. ``key`` defaults to
        ``"{definitionId}-{depTasks}-{dateValue}"``.

        Raises:
            KeyError: If a required field is missing
        """
        definition_id = _pick(data, "definitionId", "definition_id")
        dep_tasks = _pick(data, "depTasks", "dep_tasks")
        date_value = _pick(data, "dateValue", "date_value")
        key = data.get("key") or cls.default_key(definition_id, dep_tasks, date_value)
        return cls(
            key=str(key),
            definition_id=definition_id,
            dep_tasks=dep_tasks,
            date_value=date_value,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "definitionId": self.definition_id,
            "depTasks": self.dep_tasks,
            "dateValue": self.date_value,
        }


@dataclass(frozen=True)
class DependentDeclaration:
    """Ordered dependency items combined by one relation."""

    items: tuple[DependentItem, ...]
    relation: DependentRelation = DependentRelation.AND

    def __post_init__(self) -> None:
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, "items", tuple(self.items))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DependentDeclaration":
        raw_items = _pick(data, "dependItemList", "items")
        return cls(
            items=tuple(DependentItem.from_dict(item) for item in raw_items),
            relation=DependentRelation.parse(data.get("relation", DependentRelation.AND)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "relation": self.relation.value.upper(),
            "dependItemList": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class DependentParameters:
    """Several declarations combined by an outer relation."""

    declarations: tuple[DependentDeclaration, ...]
    relation: DependentRelation = DependentRelation.AND

    def __post_init__(self) -> None:
        object.__setattr__(self, "declarations", tuple(self.declarations))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DependentParameters":
        raw_declarations = _pick(data, "dependTaskList", "declarations")
        return cls(
            declarations=tuple(DependentDeclaration.from_dict(d) for d in raw_declarations),
            relation=DependentRelation.parse(data.get("relation", DependentRelation.AND)),
        )


@dataclass(frozen=True)
class ExecutionRecord:
    """A process execution as seen by the dependency engine."""

    id: int
    definition_id: int
    state: ExecutionStatus
    run_mode: RunMode
    start_time: datetime | None = None
    end_time: datetime | None = None
    schedule_time: datetime | None = None
    name: str | None = None


@dataclass(frozen=True)
class TaskExecutionRecord:
    """A task execution inside a process execution."""

    id: int
    process_instance_id: int
    name: str
    state: ExecutionStatus
    start_time: datetime | None = None
    end_time: datetime | None = None


class IntervalResolver(Protocol):
    """Turns a relative date expression into concrete, ordered intervals."""

    def resolve(self, reference_time: datetime, date_value: str) -> list[DateInterval]: ...

    def is_supported(self, date_value: str) -> bool: ...


class ExecutionHistoryStore(Protocol):
    """Read-only access to process and task execution history."""

    def find_running_execution(
        self, definition_id: int, interval: DateInterval
    ) -> ExecutionRecord | None: ...

    def find_latest_scheduled_execution(
        self, definition_id: int, interval: DateInterval
    ) -> ExecutionRecord | None: ...

    def find_latest_manual_execution(
        self, definition_id: int, interval: DateInterval
    ) -> ExecutionRecord | None: ...

    def list_valid_task_executions(
        self, process_instance_id: int
    ) -> Sequence[TaskExecutionRecord]: ...


def _pick(data: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        if name in data:
            return data[name]
    raise KeyError(names[0])
