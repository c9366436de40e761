from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from src.app.domain.models.task_status import TaskStatus

_UPDATABLE_FIELDS = ("title", "description", "status")


class TaskChanges(BaseModel):
    """
    Partial update for a task.

    A field counts as present only when it was explicitly set, so
    ``TaskChanges(description=None)`` clears the description while
    ``TaskChanges()`` leaves it untouched.
    """

    title: str | None = Field(default=None, description="New title, if present.")
    description: str | None = Field(
        default=None, description="New description, if present (may be null)."
    )
    status: TaskStatus | None = Field(default=None, description="New status, if present.")

    def fields(self) -> dict[str, Any]:
        """Return the present fields in column order."""
        present = self.model_fields_set
        changes: dict[str, Any] = {}
        for name in _UPDATABLE_FIELDS:
            if name not in present:
                continue
            value = getattr(self, name)
            changes[name] = value.value if isinstance(value, TaskStatus) else value
        return changes

    @property
    def is_empty(self) -> bool:
        return not self.fields()
