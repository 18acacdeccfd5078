"""Task schemas."""
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, field_validator
from datetime import datetime

from task_api.models.task import TaskStatus
from task_api.store.base import is_task_id_text


class TaskInsert(BaseModel):
    """Task creation payload.

    Fields are optional here so that missing values reach the explicit
    validators in ``task_api.validation`` instead of failing the parse.
    """

    owner_id: Optional[StrictInt] = None
    title: Optional[StrictStr] = None
    description: Optional[StrictStr] = None


class TaskUpdate(TaskInsert):
    """Task update payload."""

    id: Optional[UUID] = None
    status: Optional[StrictStr] = None

    @field_validator("id", mode="before")
    @classmethod
    def id_must_be_plain_uuid_text(cls, value):
        if isinstance(value, str) and not is_task_id_text(value):
            raise ValueError("Invalid ID")
        return value


class TaskResponse(BaseModel):
    """Task response schema."""

    id: UUID
    owner_id: int
    title: str
    description: str
    status: Optional[TaskStatus] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
