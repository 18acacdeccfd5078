"""In-memory fakes for unit tests."""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from task_api.core.exceptions import StoreUnavailable
from task_api.models.task import Task, TaskStatus
from task_api.store.base import ScanPage, TaskStore


class FakeTaskStore(TaskStore):
    """
    Dict-backed TaskStore.

    - Tokens are the next offset encoded as ASCII bytes.
    - ``trailing_token`` mimics Cassandra, which hands back a paging state
      after a full page even when no rows follow.
    - ``fail`` makes every operation raise StoreUnavailable.
    - ``scan_calls`` records ``(page_size, token)`` for assertions.
    """

    def __init__(self, *, trailing_token: bool = False, fail: bool = False, clock=None) -> None:
        super().__init__(clock)
        self.rows: Dict[UUID, Task] = {}
        self.trailing_token = trailing_token
        self.fail = fail
        self.scan_calls: List[Tuple[int, Optional[bytes]]] = []
        self.closed = False

    def _check(self, message: str) -> None:
        if self.fail:
            raise StoreUnavailable(message)

    async def ensure_schema(self) -> None:
        return None

    async def ping(self) -> None:
        self._check("Store unavailable")

    async def close(self) -> None:
        self.closed = True

    async def _write(self, task: Task) -> None:
        self._check("Failed to insert")
        self.rows[task.id] = task

    async def _delete(self, task_id: UUID) -> None:
        self._check("Failed to delete")
        self.rows.pop(task_id, None)

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
        self._check("Failed to update")
        if task_id in self.rows:
            self.rows[task_id] = replace(
                self.rows[task_id],
                owner_id=owner_id,
                title=title,
                description=description,
                status=status,
                updated_at=updated_at,
            )

    async def scan_page(self, page_size: int, token: Optional[bytes] = None) -> ScanPage:
        self.scan_calls.append((page_size, token))
        self._check("Failed to scan")

        start = int(token.decode()) if token else 0
        ordered = list(self.rows.values())
        rows = ordered[start:start + page_size]
        end = start + len(rows)

        has_more = end < len(ordered) or (self.trailing_token and len(rows) == page_size)
        next_token = str(end).encode() if has_more else None
        return ScanPage(rows=rows, count=len(rows), next_token=next_token)
