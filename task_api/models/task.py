"""Task model."""
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import Column, DateTime, Integer, String, Text, Uuid

from task_api.database import Base


class TaskStatus(str, enum.Enum):
    """Task lifecycle status."""

    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"


@dataclass
class Task:
    """A task as stored in any backend."""

    id: UUID
    owner_id: int
    title: str
    description: str
    # None when the stored row has no status column set
    status: Optional[TaskStatus]
    created_at: datetime
    updated_at: datetime


class TaskRecord(Base):
    """Task row for the SQL store backend."""

    __tablename__ = "tasks"

    id = Column(Uuid(), primary_key=True)
    owner_id = Column(Integer, nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default=TaskStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
