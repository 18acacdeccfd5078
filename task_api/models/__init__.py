"""Model modules."""
from task_api.models.task import Task, TaskRecord, TaskStatus
