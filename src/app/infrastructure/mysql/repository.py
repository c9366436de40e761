from __future__ import annotations

from src.app.domain.models.task import Task
from src.app.domain.models.task_changes import TaskChanges
from src.app.domain.models.task_status import TaskStatus
from src.app.domain.repositories import TaskRepository
from src.app.infrastructure.mappers import TaskRowMapper
from src.app.infrastructure.mysql.pool import MySqlPool

_COLUMNS = "id, title, description, status, created_at, updated_at"


class MySqlTaskRepository(TaskRepository):
    """
    MySQL task storage. MySQL cannot return the affected row from INSERT or
    UPDATE, so writes are followed by a re-select of the row.
    """

    def __init__(self, pool: MySqlPool) -> None:
        self._pool = pool

    async def list_all(self) -> list[Task]:
        result = await self._pool.execute(
            f"SELECT {_COLUMNS} FROM tasks ORDER BY created_at DESC, id DESC"
        )
        return TaskRowMapper.to_domain_tasks(result.rows)

    async def get_by_id(self, task_id: int) -> Task | None:
        result = await self._pool.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE id = %s",
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
            "INSERT INTO tasks (title, description, status) VALUES (%s, %s, %s)",
            (title, description, status.value),
        )
        if result.lastrowid is None:
            raise RuntimeError("MySQL did not report the generated task id.")
        task = await self.get_by_id(result.lastrowid)
        if task is None:
            raise RuntimeError(f"Task {result.lastrowid} vanished right after insert.")
        return task

    async def update(self, task_id: int, changes: TaskChanges) -> Task | None:
        fields = changes.fields()
        if not fields:
            raise ValueError("TaskChanges must contain at least one field.")

        assignments = [f"{column} = %s" for column in fields]
        # ON UPDATE CURRENT_TIMESTAMP skips writes that change nothing; set it explicitly.
        assignments.append("updated_at = CURRENT_TIMESTAMP(6)")
        params = [*fields.values(), task_id]

        result = await self._pool.execute(
            f"UPDATE tasks SET {', '.join(assignments)} WHERE id = %s",
            params,
        )
        if result.rowcount == 0:
            return None
        return await self.get_by_id(task_id)

    async def delete_by_id(self, task_id: int) -> bool:
        result = await self._pool.execute("DELETE FROM tasks WHERE id = %s", (task_id,))
        return result.rowcount > 0
