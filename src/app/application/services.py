import logging
import re

from src.app.domain.exceptions import BackendError, TaskNotFoundError, TaskValidationError
from src.app.domain.models import (
    Backend,
    CreateTaskPayload,
    Task,
    TaskChanges,
    TaskStatus,
    UpdateTaskPayload,
)
from src.app.domain.repositories import TaskRepository

logger = logging.getLogger(__name__)

# Both schemas key tasks on a signed 32-bit integer.
MAX_TASK_ID = 2**31 - 1
_TASK_ID_PATTERN = re.compile(r"[0-9]+")
INVALID_STATUS_MESSAGE = f"Invalid status. Must be one of: {', '.join(TaskStatus.values())}"


def parse_task_id(raw_id: str) -> int:
    """Turn a path parameter into a task id, rejecting anything but plain digits."""
    if not _TASK_ID_PATTERN.fullmatch(raw_id):
        raise TaskValidationError("Invalid task ID")
    task_id = int(raw_id)
    if task_id > MAX_TASK_ID:
        raise TaskNotFoundError(raw_id)
    return task_id


def parse_status(raw_status: str | None) -> TaskStatus:
    if raw_status not in TaskStatus.values():
        raise TaskValidationError(INVALID_STATUS_MESSAGE)
    return TaskStatus(raw_status)


class TaskService:
    """Validates task requests and runs them against one backend's repository."""

    def __init__(self, repository: TaskRepository, backend: Backend) -> None:
        self._repository = repository
        self._backend = backend

    @property
    def backend(self) -> Backend:
        return self._backend

    async def list_tasks(self) -> list[Task]:
        try:
            return await self._repository.list_all()
        except Exception as exc:
            raise self._backend_error("fetch tasks", exc) from exc

    async def get_task(self, raw_id: str) -> Task:
        task_id = parse_task_id(raw_id)
        try:
            task = await self._repository.get_by_id(task_id)
        except Exception as exc:
            raise self._backend_error("fetch task", exc) from exc
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def create_task(self, payload: CreateTaskPayload) -> Task:
        if not payload.title:
            raise TaskValidationError("Title is required")
        status = None
        if payload.status is not None:
            status = parse_status(payload.status)

        try:
            task = await self._repository.create(
                payload.title,
                description=payload.description or None,
                status=status,
            )
        except Exception as exc:
            raise self._backend_error("create task", exc) from exc
        logger.info("Task created", extra={"backend": self._backend.value, "task_id": task.id})
        return task

    async def update_task(self, raw_id: str, payload: UpdateTaskPayload) -> Task:
        changes = self.build_changes(payload)
        task_id = parse_task_id(raw_id)
        try:
            task = await self._repository.update(task_id, changes)
        except Exception as exc:
            raise self._backend_error("update task", exc) from exc
        if task is None:
            raise TaskNotFoundError(task_id)
        logger.info(
            "Task updated",
            extra={"backend": self._backend.value, "task_id": task_id, "fields": list(changes.fields())},
        )
        return task

    async def delete_task(self, raw_id: str) -> None:
        task_id = parse_task_id(raw_id)
        try:
            deleted = await self._repository.delete_by_id(task_id)
        except Exception as exc:
            raise self._backend_error("delete task", exc) from exc
        if not deleted:
            raise TaskNotFoundError(task_id)
        logger.info("Task deleted", extra={"backend": self._backend.value, "task_id": task_id})

    @staticmethod
    def build_changes(payload: UpdateTaskPayload) -> TaskChanges:
        """
        Convert an update body into ``TaskChanges``. Only keys the client sent
        are carried over, so an explicit ``"description": null`` clears the
        column while an omitted key leaves it alone.
        """
        present = payload.model_fields_set
        changes: dict[str, object] = {}

        if "status" in present:
            changes["status"] = parse_status(payload.status)
        if "title" in present:
            if not payload.title:
                raise TaskValidationError("Title cannot be empty")
            changes["title"] = payload.title
        if "description" in present:
            changes["description"] = payload.description

        task_changes = TaskChanges(**changes)
        if task_changes.is_empty:
            raise TaskValidationError("No fields to update")
        return task_changes

    def _backend_error(self, action: str, exc: Exception) -> BackendError:
        logger.exception(
            "Backend call failed",
            extra={"backend": self._backend.value, "action": action},
        )
        return BackendError(action, exc)
