"""
depflow - Dependency gate for scheduled process execution

Decides whether a dependent task may start by checking that its declared
upstream processes/tasks succeeded inside relative date windows.

Core modules:
- core.dependency: Dependency engine (DependentExecute, DependentTask)
- core.storage: SQLAlchemy execution history store
- core.config_manager: Environment-driven configuration
- cli: Command line tools
"""

__version__ = "0.1.0"

# Lazy imports to keep package import fast
# Core exports are loaded on first access via __getattr__
__all__ = [
    "DependentExecute",
    "DependentTask",
    "DependencyItemEvaluator",
    "DateIntervalResolver",
    "DependentDeclaration",
    "DependentItem",
    "DependentParameters",
    "DependentRelation",
    "DependResult",
    "ExecutionHistoryRepository",
    "create_session_factory",
    "__version__",
]


def __getattr__(name):
    """Lazy import to avoid loading SQLAlchemy at package import time"""

    if name in (
        "DependentExecute",
        "DependentTask",
        "DependencyItemEvaluator",
        "DateIntervalResolver",
        "DependentDeclaration",
        "DependentItem",
        "DependentParameters",
        "DependentRelation",
        "DependResult",
    ):
        from depflow.core.dependency import (
            DependentExecute,  # noqa: F401
            DependentTask,  # noqa: F401
            DependencyItemEvaluator,  # noqa: F401
            DateIntervalResolver,  # noqa: F401
            DependentDeclaration,  # noqa: F401
            DependentItem,  # noqa: F401
            DependentParameters,  # noqa: F401
            DependentRelation,  # noqa: F401
            DependResult,  # noqa: F401
        )

        return locals()[name]

    if name in ("ExecutionHistoryRepository", "create_session_factory"):
        from depflow.core.storage.sqlalchemy import (
            ExecutionHistoryRepository,  # noqa: F401
            create_session_factory,  # noqa: F401
        )

        return locals()[name]

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
