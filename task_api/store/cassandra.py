"""Cassandra / ScyllaDB task store."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from cassandra import DriverException
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import EXEC_PROFILE_DEFAULT, Cluster, ExecutionProfile, NoHostAvailable
from cassandra.policies import DCAwareRoundRobinPolicy
from cassandra.query import SimpleStatement, dict_factory
from starlette.concurrency import run_in_threadpool

from task_api.config import Settings
from task_api.core.exceptions import StoreUnavailable
from task_api.models.task import Task, TaskStatus
from task_api.store.base import Clock, ScanPage, TaskStore

logger = logging.getLogger(__name__)

STORE_ERRORS = (DriverException, NoHostAvailable)

COLUMNS = "id, owner_id, title, description, status, created_at, updated_at"


# Read in place of a null timestamp.
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def _as_utc(value: Optional[datetime]) -> datetime:
    if value is None:
        return ZERO_TIME
    # The driver returns timestamps as naive UTC datetimes.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _row_to_task(row: Dict[str, Any]) -> Task:
    # An UPDATE of an unknown id creates a row with only the updated columns set,
    # so any column other than the key may come back null.
    status = row["status"]
    return Task(
        id=row["id"],
        owner_id=row["owner_id"] or 0,
        title=row["title"] or "",
        description=row["description"] or "",
        status=TaskStatus(status) if status else None,
        created_at=_as_utc(row["created_at"]),
        updated_at=_as_utc(row["updated_at"]),
    )


class CassandraTaskStore(TaskStore):
    """
    Task store on a single Cassandra table keyed by ``id uuid``.

    One driver session is shared by every request. The driver is blocking,
    so each call runs in the Starlette thread pool. Scans use the driver's
    native paging: ``fetch_size`` bounds the page and ``paging_state`` is
    passed back untouched as the continuation token.
    """

    def __init__(
        self,
        session,
        *,
        keyspace: str,
        table: str,
        cluster: Optional[Cluster] = None,
        replication_class: str = "NetworkTopologyStrategy",
        replication_factor: int = 3,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(clock)
        self._session = session
        self._cluster = cluster
        self.keyspace = keyspace
        self.table = table
        self.replication_class = replication_class
        self.replication_factor = replication_factor

    @property
    def qualified_table(self) -> str:
        return f"{self.keyspace}.{self.table}"

    @classmethod
    def connect(cls, settings: Settings, clock: Optional[Clock] = None) -> "CassandraTaskStore":
        """Open the cluster connection described by ``settings``."""
        profile_kwargs: Dict[str, Any] = {"row_factory": dict_factory}
        if settings.CASSANDRA_LOCAL_DC:
            profile_kwargs["load_balancing_policy"] = DCAwareRoundRobinPolicy(
                local_dc=settings.CASSANDRA_LOCAL_DC
            )

        auth_provider = None
        if settings.CASSANDRA_USERNAME:
            auth_provider = PlainTextAuthProvider(
                username=settings.CASSANDRA_USERNAME,
                password=settings.CASSANDRA_PASSWORD or "",
            )

        cluster = Cluster(
            contact_points=settings.CASSANDRA_CONTACT_POINTS,
            port=settings.CASSANDRA_PORT,
            auth_provider=auth_provider,
            execution_profiles={EXEC_PROFILE_DEFAULT: ExecutionProfile(**profile_kwargs)},
        )
        session = cluster.connect()
        logger.info(
            f"Connected to Cassandra cluster at {', '.join(settings.CASSANDRA_CONTACT_POINTS)}"
        )
        return cls(
            session,
            keyspace=settings.CASSANDRA_KEYSPACE,
            table=settings.TASKS_TABLE,
            cluster=cluster,
            replication_class=settings.CASSANDRA_REPLICATION_CLASS,
            replication_factor=settings.CASSANDRA_REPLICATION_FACTOR,
            clock=clock,
        )

    async def _execute(self, statement, params: Optional[Tuple] = None, **kwargs):
        return await run_in_threadpool(self._session.execute, statement, params, **kwargs)

    async def ensure_schema(self) -> None:
        await self._execute(
            f"CREATE KEYSPACE IF NOT EXISTS {self.keyspace} WITH replication = "
            f"{{'class': '{self.replication_class}', "
            f"'replication_factor': '{self.replication_factor}'}} AND durable_writes = true"
        )
        await self._execute(
            f"CREATE TABLE IF NOT EXISTS {self.qualified_table} ("
            "id uuid PRIMARY KEY, owner_id int, title text, description text, "
            "status text, created_at timestamp, updated_at timestamp)"
        )

    async def ping(self) -> None:
        await self._execute("SELECT release_version FROM system.local")

    async def close(self) -> None:
        if self._cluster is not None:
            await run_in_threadpool(self._cluster.shutdown)

    async def _write(self, task: Task) -> None:
        try:
            await self._execute(
                f"INSERT INTO {self.qualified_table} ({COLUMNS}) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s)",
                (
                    task.id,
                    task.owner_id,
                    task.title,
                    task.description,
                    task.status.value,
                    task.created_at,
                    task.updated_at,
                ),
            )
        except STORE_ERRORS as e:
            logger.error(f"Failed to insert task {task.id}: {e}", exc_info=True)
            raise StoreUnavailable("Failed to insert")

    async def _delete(self, task_id: UUID) -> None:
        try:
            await self._execute(
                f"DELETE FROM {self.qualified_table} WHERE id = %s",
                (task_id,),
            )
        except STORE_ERRORS as e:
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
        try:
            await self._execute(
                f"UPDATE {self.qualified_table} SET owner_id = %s, title = %s, "
                "description = %s, status = %s, updated_at = %s WHERE id = %s",
                (owner_id, title, description, status.value, updated_at, task_id),
            )
        except STORE_ERRORS as e:
            logger.error(f"Failed to update task {task_id}: {e}", exc_info=True)
            raise StoreUnavailable("Failed to update")

    async def scan_page(self, page_size: int, token: Optional[bytes] = None) -> ScanPage:
        statement = SimpleStatement(
            f"SELECT {COLUMNS} FROM {self.qualified_table}",
            fetch_size=page_size,
        )
        try:
            result = await self._execute(statement, paging_state=token or None)
            rows = [_row_to_task(row) for row in result.current_rows]
        except STORE_ERRORS as e:
            logger.error(f"Failed to scan tasks: {e}", exc_info=True)
            raise StoreUnavailable("Failed to scan")
        return ScanPage(rows=rows, count=len(rows), next_token=result.paging_state or None)
