from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from src.app.domain.models.task import Task
from src.app.domain.models.task_status import TaskStatus


class TaskRowMapper:
    @staticmethod
    def to_domain_task(row: Mapping[str, Any]) -> Task:
        return Task(
            id=int(row["id"]),
            title=row["title"],
            description=row.get("description"),
            status=TaskStatus(row["status"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def to_domain_tasks(rows: list[Mapping[str, Any]]) -> list[Task]:
        return [TaskRowMapper.to_domain_task(row) for row in rows]
