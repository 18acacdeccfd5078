"""Script to insert sample tasks into the configured store."""
import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from task_api.config import settings
from task_api.services.bootstrap_service import seed_sample_tasks
from task_api.store import open_task_store


async def seed(count: int) -> None:
    """Open the store, seed ``count`` tasks and close it again."""
    store = await open_task_store(settings)
    try:
        created = await seed_sample_tasks(store, count=count)
    finally:
        await store.close()

    print(f"✓ Inserted {len(created)} tasks into the {settings.STORE_BACKEND} store")
    for task in created:
        print(f"  {task.id}  {task.title}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--count", type=int, default=settings.SEED_SAMPLE_TASKS)
    args = parser.parse_args()
    asyncio.run(seed(args.count))
