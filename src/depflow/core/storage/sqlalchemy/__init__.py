"""
SQLAlchemy storage implementation
"""

from depflow.core.storage.sqlalchemy.models import Base, ProcessInstanceModel, TaskInstanceModel
from depflow.core.storage.sqlalchemy.history_repository import ExecutionHistoryRepository
from depflow.core.storage.sqlalchemy.factory import create_history_engine, create_session_factory

__all__ = [
    "Base",
    "ProcessInstanceModel",
    "TaskInstanceModel",
    "ExecutionHistoryRepository",
    "create_history_engine",
    "create_session_factory",
]
