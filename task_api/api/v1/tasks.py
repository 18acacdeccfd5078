"""Tasks API endpoints."""
import json
from typing import Optional, Type, TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ValidationError

from task_api.core.exceptions import ValidationFailed
from task_api.dependencies import get_pagination_walker, get_task_store
from task_api.schemas.task import TaskInsert, TaskResponse, TaskUpdate
from task_api.services.pagination import PaginationWalker, parse_page_params
from task_api.store.base import TaskStore
from task_api.validation import raise_for_violations, validate_task_insert, validate_task_update

router = APIRouter()

PayloadT = TypeVar("PayloadT", bound=BaseModel)


async def parse_body(request: Request, model: Type[PayloadT]) -> PayloadT:
    """Decode the JSON body into ``model``; type mismatches count as parse failures."""
    try:
        return model.model_validate(await request.json())
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError):
        raise ValidationFailed("Failed to parse JSON")


@router.post("/insert/", response_model=TaskResponse)
async def insert_task(
    request: Request,
    store: TaskStore = Depends(get_task_store),
):
    """Create a task. Status is always Pending on creation."""
    payload = await parse_body(request, TaskInsert)
    raise_for_violations(validate_task_insert(payload))

    return await store.insert(
        owner_id=payload.owner_id,
        title=payload.title,
        description=payload.description,
    )


@router.delete("/delete", response_class=PlainTextResponse)
async def delete_task(
    id: Optional[str] = None,
    store: TaskStore = Depends(get_task_store),
):
    """Delete a task by id. Unknown ids are reported as deleted too."""
    if not id:
        raise ValidationFailed("ID is required")

    await store.delete_by_id(id)
    return "Deleted"


@router.put("/update", response_class=PlainTextResponse)
async def update_task(
    request: Request,
    store: TaskStore = Depends(get_task_store),
):
    """Replace every mutable field of a task."""
    payload = await parse_body(request, TaskUpdate)
    raise_for_violations(validate_task_update(payload))

    await store.update_by_id(
        payload.id,
        owner_id=payload.owner_id,
        title=payload.title,
        description=payload.description,
        status=payload.status,
    )
    return "Updated"


@router.get("/get")
async def get_tasks(
    limit: Optional[str] = None,
    page: Optional[str] = None,
    walker: PaginationWalker = Depends(get_pagination_walker),
):
    """Return one page of tasks. Page 0 yields a plain-text placeholder."""
    page_size, page_number = parse_page_params(limit, page)

    result = await walker.get_page(page_size, page_number)
    if isinstance(result, str):
        return PlainTextResponse(result)
    return [TaskResponse.model_validate(t) for t in result]
