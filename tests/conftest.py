"""Pytest configuration and fixtures."""
import os
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

os.environ.setdefault("STORE_BACKEND", "sql")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test_tasks.db")
os.environ.setdefault("SEED_SAMPLE_TASKS", "0")
os.environ.setdefault("LOG_FORMAT", "text")

from task_api.main import app  # noqa: E402
from task_api.config import settings  # noqa: E402
from task_api.store.sql import SqlTaskStore  # noqa: E402


class TickingClock:
    """Clock that advances one second on every call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


@pytest.fixture
def clock():
    return TickingClock()


@pytest_asyncio.fixture(scope="function")
async def sql_store(tmp_path, clock):
    """SQL store on a fresh SQLite file."""
    store = SqlTaskStore.from_url(f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}", clock=clock)
    await store.ensure_schema()
    yield store
    await store.drop_schema()
    await store.close()


@pytest.fixture(scope="function")
def client(tmp_path, monkeypatch):
    """Test client whose lifespan opens a SQL store on a fresh SQLite file."""
    monkeypatch.setattr(settings, "STORE_BACKEND", "sql")
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setattr(settings, "SEED_SAMPLE_TASKS", 0)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def insert_tasks(client):
    """Insert ``n`` tasks through the API and return their JSON bodies."""

    def _insert(n: int):
        created = []
        for i in range(n):
            response = client.post(
                "/insert/",
                json={"owner_id": i + 1, "title": f"Title {i}", "description": f"Description {i}"},
            )
            assert response.status_code == 200
            created.append(response.json())
        return created

    return _insert
