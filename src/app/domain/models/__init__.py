from src.app.domain.models.backend import Backend
from src.app.domain.models.payloads import CreateTaskPayload, UpdateTaskPayload
from src.app.domain.models.task import Task
from src.app.domain.models.task_changes import TaskChanges
from src.app.domain.models.task_status import TaskStatus

__all__ = [
    "Backend",
    "Task",
    "TaskChanges",
    "TaskStatus",
    "CreateTaskPayload",
    "UpdateTaskPayload",
]
