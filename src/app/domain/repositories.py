from __future__ import annotations

from abc import ABC, abstractmethod

from src.app.domain.models.task import Task
from src.app.domain.models.task_changes import TaskChanges
from src.app.domain.models.task_status import TaskStatus


class TaskRepository(ABC):
    """
    Storage contract for tasks. One implementation exists per SQL dialect;
    they share this interface and nothing else.
    """

    @abstractmethod
    async def list_all(self) -> list[Task]:
        """Return every task, newest first."""

    @abstractmethod
    async def get_by_id(self, task_id: int) -> Task | None:
        """Return the task with ``task_id`` or ``None`` if no row matches."""

    @abstractmethod
    async def create(
        self,
        title: str,
        description: str | None = None,
        status: TaskStatus | None = None,
    ) -> Task:
        """Insert a task and return it with backend-assigned id and timestamps."""

    @abstractmethod
    async def update(self, task_id: int, changes: TaskChanges) -> Task | None:
        """Apply the present fields of ``changes``; ``None`` if no row matches."""

    @abstractmethod
    async def delete_by_id(self, task_id: int) -> bool:
        """Remove the row; ``False`` if it did not exist."""
