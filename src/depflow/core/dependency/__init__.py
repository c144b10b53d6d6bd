# Dependency module exports
from .types import (
    DEPENDENT_ALL,
    DateInterval,
    DependentDeclaration,
    DependentItem,
    DependentParameters,
    DependentRelation,
    DependResult,
    ExecutionHistoryStore,
    ExecutionRecord,
    ExecutionStatus,
    ExecutionStatusCategory,
    IntervalResolver,
    RunMode,
    TaskExecutionRecord,
)
from .status import classify, depend_result_by_state
from .relation import combine
from .selector import HistoryRecordSelector
from .evaluator import DependencyItemEvaluator
from .validator import parse_parameters, validate_declaration, validate_parameters
from .dependent_execute import DependentExecute
from .date_intervals import DateIntervalResolver
from .dependent_task import DependentTask

__all__ = [
    # Types
    "DEPENDENT_ALL",
    "DateInterval",
    "DependentDeclaration",
    "DependentItem",
    "DependentParameters",
    "DependentRelation",
    "DependResult",
    "ExecutionHistoryStore",
    "ExecutionRecord",
    "ExecutionStatus",
    "ExecutionStatusCategory",
    "IntervalResolver",
    "RunMode",
    "TaskExecutionRecord",
    # Evaluation
    "classify",
    "depend_result_by_state",
    "combine",
    "HistoryRecordSelector",
    "DependencyItemEvaluator",
    "DependentExecute",
    "DependentTask",
    # Validation
    "parse_parameters",
    "validate_declaration",
    "validate_parameters",
    # Intervals
    "DateIntervalResolver",
]
