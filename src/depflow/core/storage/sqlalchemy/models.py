"""
SQLAlchemy models for execution history storage
"""

from sqlalchemy import Column, String, Integer, DateTime, Boolean
from sqlalchemy.orm import declarative_base
from typing import Dict, Any
import os

from depflow.core.dependency.types import (
    ExecutionRecord,
    ExecutionStatus,
    RunMode,
    TaskExecutionRecord,
)

Base = declarative_base()

# Table name configuration - supports environment variable override
PROCESS_INSTANCE_TABLE_NAME = os.getenv(
    "DEPFLOW_PROCESS_INSTANCE_TABLE_NAME", "depflow_process_instances"
)
TASK_INSTANCE_TABLE_NAME = os.getenv("DEPFLOW_TASK_INSTANCE_TABLE_NAME", "depflow_task_instances")


def _isoformat(value) -> Any:
    return value.isoformat() if value else None


class ProcessInstanceModel(Base):
    """
    Process Instance Model - one execution of a process definition

    Scheduled runs carry the logical schedule_time they were triggered for;
    manual runs leave it empty and are placed in time by their end_time.

    Table name: Configurable via DEPFLOW_PROCESS_INSTANCE_TABLE_NAME environment variable.
    """

    __tablename__ = PROCESS_INSTANCE_TABLE_NAME

    id = Column(Integer, primary_key=True, autoincrement=True)
    process_definition_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=True)

    state = Column(
        String(50), nullable=False, default=ExecutionStatus.submitted_success.value
    )  # ExecutionStatus value
    run_mode = Column(
        String(20), nullable=False, default=RunMode.scheduled.value, index=True
    )  # RunMode value

    schedule_time = Column(DateTime(timezone=True), nullable=True, index=True)
    start_time = Column(DateTime(timezone=True), nullable=True, index=True)
    end_time = Column(DateTime(timezone=True), nullable=True, index=True)

    def to_record(self) -> ExecutionRecord:
        """Convert to an immutable ExecutionRecord.

        Raises:
            ValueError: If state or run_mode holds an unknown value
        """
        return ExecutionRecord(
            id=self.id,
            definition_id=self.process_definition_id,
            state=ExecutionStatus(self.state),
            run_mode=RunMode(self.run_mode),
            start_time=self.start_time,
            end_time=self.end_time,
            schedule_time=self.schedule_time,
            name=self.name,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary"""
        return {
            "id": self.id,
            "process_definition_id": self.process_definition_id,
            "name": self.name,
            "state": self.state,
            "run_mode": self.run_mode,
            "schedule_time": _isoformat(self.schedule_time),
            "start_time": _isoformat(self.start_time),
            "end_time": _isoformat(self.end_time),
        }

    def __repr__(self):
        return (
            f"<ProcessInstanceModel(id={self.id}, definition_id={self.process_definition_id}, "
            f"state='{self.state}')>"
        )


class TaskInstanceModel(Base):
    """
    Task Instance Model - one execution of a task inside a process instance

    flag=False marks a superseded attempt (e.g., a task that was retried);
    only flagged rows are visible to dependency checks.

    Table name: Configurable via DEPFLOW_TASK_INSTANCE_TABLE_NAME environment variable.
    """

    __tablename__ = TASK_INSTANCE_TABLE_NAME

    id = Column(Integer, primary_key=True, autoincrement=True)
    process_instance_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    state = Column(String(50), nullable=False, default=ExecutionStatus.submitted_success.value)
    flag = Column(Boolean, nullable=False, default=True)

    start_time = Column(DateTime(timezone=True), nullable=True)
    end_time = Column(DateTime(timezone=True), nullable=True)

    def to_record(self) -> TaskExecutionRecord:
        return TaskExecutionRecord(
            id=self.id,
            process_instance_id=self.process_instance_id,
            name=self.name,
            state=ExecutionStatus(self.state),
            start_time=self.start_time,
            end_time=self.end_time,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary"""
        return {
            "id": self.id,
            "process_instance_id": self.process_instance_id,
            "name": self.name,
            "state": self.state,
            "flag": self.flag,
            "start_time": _isoformat(self.start_time),
            "end_time": _isoformat(self.end_time),
        }

    def __repr__(self):
        return f"<TaskInstanceModel(id={self.id}, name='{self.name}', state='{self.state}')>"
