"""Schema modules."""
from task_api.schemas.task import TaskInsert, TaskUpdate, TaskResponse
