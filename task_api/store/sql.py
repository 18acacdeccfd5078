"""SQLAlchemy task store, used for local development and tests."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from task_api.core.exceptions import StoreUnavailable
from task_api.database import Base, create_engine_for, create_session_factory
from task_api.models.task import Task, TaskRecord, TaskStatus
from task_api.store.base import Clock, ScanPage, TaskStore

logger = logging.getLogger(__name__)


def _ensure_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo on the way back; values are always stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_task(record: TaskRecord) -> Task:
    return Task(
        id=record.id,
        owner_id=record.owner_id,
        title=record.title,
        description=record.description,
        status=TaskStatus(record.status),
        created_at=_ensure_utc(record.created_at),
        updated_at=_ensure_utc(record.updated_at),
    )


class SqlTaskStore(TaskStore):
    """
    Task store on a relational database.

    Scans walk the primary key in keyset fashion; the continuation token is
    the raw bytes of the last UUID returned.
    """

    def __init__(self, engine: AsyncEngine, clock: Optional[Clock] = None) -> None:
        super().__init__(clock)
        self._engine = engine
        self._session_factory = create_session_factory(engine)

    @classmethod
    def from_url(cls, url: str, echo: bool = False, clock: Optional[Clock] = None) -> "SqlTaskStore":
        return cls(create_engine_for(url, echo=echo), clock=clock)

    async def ensure_schema(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_schema(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def ping(self) -> None:
        async with self._engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def close(self) -> None:
        await self._engine.dispose()

    async def _write(self, task: Task) -> None:
        record = TaskRecord(
            id=task.id,
            owner_id=task.owner_id,
            title=task.title,
            description=task.description,
            status=task.status.value,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )
        try:
            async with self._session_factory() as db:
                db.add(record)
                await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert task {task.id}: {e}", exc_info=True)
            raise StoreUnavailable("Failed to insert")

    async def _delete(self, task_id: UUID) -> None:
        try:
            async with self._session_factory() as db:
                await db.execute(delete(TaskRecord).where(TaskRecord.id == task_id))
                await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete task {task_id}: {e}", exc_info=True)
            raise StoreUnavailable("Failed to delete")

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
        query = (
            update(TaskRecord)
            .where(TaskRecord.id == task_id)
            .values(
                owner_id=owner_id,
                title=title,
                description=description,
                status=status.value,
                updated_at=updated_at,
            )
        )
        try:
            async with self._session_factory() as db:
                await db.execute(query)
                await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to update task {task_id}: {e}", exc_info=True)
            raise StoreUnavailable("Failed to update")

    async def scan_page(self, page_size: int, token: Optional[bytes] = None) -> ScanPage:
        # One extra row tells us whether another page exists.
        query = select(TaskRecord).order_by(TaskRecord.id).limit(page_size + 1)
        if token:
            query = query.where(TaskRecord.id > UUID(bytes=token))

        try:
            async with self._session_factory() as db:
                result = await db.execute(query)
                records = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to scan tasks: {e}", exc_info=True)
            raise StoreUnavailable("Failed to scan")

        rows = [_to_task(r) for r in records[:page_size]]
        next_token = rows[-1].id.bytes if len(records) > page_size else None
        return ScanPage(rows=rows, count=len(rows), next_token=next_token)
