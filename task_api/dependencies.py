"""FastAPI dependencies for the task store and pagination."""
from fastapi import Depends, Request

from task_api.config import settings
from task_api.services.pagination import PaginationWalker
from task_api.store.base import TaskStore


def get_task_store(request: Request) -> TaskStore:
    """Return the store opened by the application lifespan."""
    return request.app.state.task_store


def get_pagination_walker(store: TaskStore = Depends(get_task_store)) -> PaginationWalker:
    """Build a walker over the shared store using the configured page sizes."""
    return PaginationWalker(
        store,
        default_page_size=settings.DEFAULT_PAGE_SIZE,
        max_page_size=settings.MAX_PAGE_SIZE,
    )
