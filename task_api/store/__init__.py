"""Task store backends."""
from task_api.config import Settings
from task_api.store.base import ScanPage, TaskStore, parse_task_id


async def open_task_store(settings: Settings) -> TaskStore:
    """Build the backend selected by ``STORE_BACKEND`` and ensure its schema."""
    if settings.STORE_BACKEND == "sql":
        from task_api.store.sql import SqlTaskStore

        store = SqlTaskStore.from_url(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    elif settings.STORE_BACKEND == "cassandra":
        from starlette.concurrency import run_in_threadpool
        from task_api.store.cassandra import CassandraTaskStore

        store = await run_in_threadpool(CassandraTaskStore.connect, settings)
    else:
        raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")

    await store.ensure_schema()
    return store
