"""Backend-independent task store contract."""
from __future__ import annotations

import re
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, List, NamedTuple, Optional, Union
from uuid import UUID

from task_api.core.exceptions import InvalidIdentifier, ValidationFailed
from task_api.models.task import Task, TaskStatus

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScanPage(NamedTuple):
    """One bounded scan result; ``next_token`` is None when no page follows."""

    rows: List[Task]
    count: int
    next_token: Optional[bytes]


# Hyphenated or bare hex only; braces and urn:uuid: prefixes are rejected.
_UUID_TEXT = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}|[0-9a-f]{32}",
    re.IGNORECASE | re.ASCII,
)


def is_task_id_text(value: str) -> bool:
    return _UUID_TEXT.fullmatch(value) is not None


def parse_task_id(value: Union[str, UUID]) -> UUID:
    """Parse a task identifier or raise ``InvalidIdentifier``."""
    if isinstance(value, UUID):
        return value
    if not is_task_id_text(str(value)):
        raise InvalidIdentifier("Invalid ID")
    return UUID(str(value))


def coerce_status(value: Union[str, TaskStatus]) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValidationFailed(
            f"[status]: '{value}' | Needs to implement 'oneof'"
        )


class TaskStore(ABC):
    """
    Task persistence keyed by a time-ordered UUID.

    Writes are single-row and unconditional. Subclasses implement the
    ``_write``/``_delete``/``_update``/``scan_page`` primitives; id and
    timestamp generation happens here.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or utcnow

    async def insert(self, owner_id: int, title: str, description: str) -> Task:
        """Create a Pending task with a fresh id and return it."""
        now = self._clock()
        task = Task(
            id=uuid.uuid1(),
            owner_id=owner_id,
            title=title,
            description=description,
            status=TaskStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        await self._write(task)
        return task

    async def delete_by_id(self, task_id: Union[str, UUID]) -> None:
        """Delete a task. Deleting a missing id is not an error."""
        await self._delete(parse_task_id(task_id))

    async def update_by_id(
        self,
        task_id: Union[str, UUID],
        owner_id: int,
        title: str,
        description: str,
        status: Union[str, TaskStatus],
    ) -> None:
        """Overwrite every mutable field of a task and refresh ``updated_at``."""
        parsed_id = parse_task_id(task_id)
        parsed_status = coerce_status(status)
        await self._update(
            parsed_id,
            owner_id=owner_id,
            title=title,
            description=description,
            status=parsed_status,
            updated_at=self._clock(),
        )

    @abstractmethod
    async def scan_page(self, page_size: int, token: Optional[bytes] = None) -> ScanPage:
        """Read up to ``page_size`` rows resuming from ``token``."""

    @abstractmethod
    async def ensure_schema(self) -> None:
        """Create the backing table if it does not exist."""

    @abstractmethod
    async def ping(self) -> None:
        """Issue a trivial query; raise on failure."""

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""

    @abstractmethod
    async def _write(self, task: Task) -> None:
        ...

    @abstractmethod
    async def _delete(self, task_id: UUID) -> None:
        ...

    @abstractmethod
    async def _update(
        self,
        task_id: UUID,
        *,
        owner_id: int,
        title: str,
        description: str,
        status: TaskStatus,
        updated_at: datetime,
    ) -> None:
        ...
