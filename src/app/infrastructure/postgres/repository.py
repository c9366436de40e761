from __future__ import annotations

from src.app.domain.models.task import Task
from src.app.domain.models.task_changes import TaskChanges
from src.app.domain.models.task_status import TaskStatus
from src.app.domain.repositories import TaskRepository
from src.app.infrastructure.mappers import TaskRowMapper
from src.app.infrastructure.postgres.pool import PostgresPool

_COLUMNS = "id, title, description, status, created_at, updated_at"


class PostgresTaskRepository(TaskRepository):
    """PostgreSQL task storage. Writes use RETURNING to get the row in one round trip."""

    def __init__(self, pool: PostgresPool) -> None:
        self._pool = pool

    async def list_all(self) -> list[Task]:
        result = await self._pool.execute(
            f"SELECT {_COLUMNS} FROM tasks ORDER BY created_at DESC, id DESC"
        )
        return TaskRowMapper.to_domain_tasks(result.rows)

    async def get_by_id(self, task_id: int) -> Task | None:
        result = await self._pool.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE id = $1",
            (task_id,),
        )
        if not result.rows:
            return None
        return TaskRowMapper.to_domain_task(result.rows[0])

    async def create(
        self,
        title: str,
        description: str | None = None,
        status: TaskStatus | None = None,
    ) -> Task:
        status = status or TaskStatus.PENDING
        result = await self._pool.execute(
            "INSERT INTO tasks (title, description, status) "
            f"VALUES ($1, $2, $3) RETURNING {_COLUMNS}",
            (title, description, status.value),
        )
        return TaskRowMapper.to_domain_task(result.rows[0])

    async def update(self, task_id: int, changes: TaskChanges) -> Task | None:
        fields = changes.fields()
        if not fields:
            raise ValueError("TaskChanges must contain at least one field.")

        assignments = [
            f"{column} = ${position}" for position, column in enumerate(fields, start=1)
        ]
        assignments.append("updated_at = CURRENT_TIMESTAMP")
        id_position = len(fields) + 1
        params = [*fields.values(), task_id]

        result = await self._pool.execute(
            f"UPDATE tasks SET {', '.join(assignments)} "
            f"WHERE id = ${id_position} RETURNING {_COLUMNS}",
            params,
        )
        if not result.rows:
            return None
        return TaskRowMapper.to_domain_task(result.rows[0])

    async def delete_by_id(self, task_id: int) -> bool:
        result = await self._pool.execute(
            "DELETE FROM tasks WHERE id = $1 RETURNING id",
            (task_id,),
        )
        return bool(result.rows)
