"""Bootstrap utilities for seeding sample tasks."""
from __future__ import annotations

import logging
from typing import List

from task_api.models.task import Task
from task_api.store.base import TaskStore

logger = logging.getLogger(__name__)


async def seed_sample_tasks(store: TaskStore, *, count: int) -> List[Task]:
    """Insert ``count`` numbered sample tasks and return them."""
    created: List[Task] = []
    for i in range(count):
        created.append(
            await store.insert(
                owner_id=i,
                title=f"Title {i}",
                description=f"Description {i}",
            )
        )
    if created:
        logger.info(f"Seeded {len(created)} sample tasks")
    return created
