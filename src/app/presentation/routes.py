from __future__ import annotations

from collections.abc import Callable

import inject
from fastapi import APIRouter, Body, Depends, status

from src.app.application.services import TaskService
from src.app.domain.models import Backend, CreateTaskPayload, UpdateTaskPayload
from src.app.domain.repositories import TaskRepository
from src.app.infrastructure.mysql.repository import MySqlTaskRepository
from src.app.infrastructure.postgres.repository import PostgresTaskRepository

REPOSITORY_TYPES: dict[Backend, type[TaskRepository]] = {
    Backend.MYSQL: MySqlTaskRepository,
    Backend.POSTGRESQL: PostgresTaskRepository,
}


def _service_provider(backend: Backend) -> Callable[[], TaskService]:
    repository_type = REPOSITORY_TYPES[backend]

    def provide() -> TaskService:
        return TaskService(inject.instance(repository_type), backend)

    return provide


def build_task_router(backend: Backend) -> APIRouter:
    """
    Build the task CRUD router for one backend. Every backend gets the same
    paths, payloads and status codes; only the repository behind it differs.
    """
    router = APIRouter(prefix=f"/api/{backend.value}", tags=[backend.value])
    get_service = _service_provider(backend)

    @router.get("/tasks", summary="List tasks, newest first")
    async def list_tasks(service: TaskService = Depends(get_service)):
        tasks = await service.list_tasks()
        return {
            "success": True,
            "data": [task.model_dump(mode="json") for task in tasks],
            "count": len(tasks),
        }

    @router.get("/tasks/{task_id}", summary="Get one task")
    async def get_task(task_id: str, service: TaskService = Depends(get_service)):
        task = await service.get_task(task_id)
        return {"success": True, "data": task.model_dump(mode="json")}

    @router.post("/tasks", status_code=status.HTTP_201_CREATED, summary="Create a task")
    async def create_task(
        payload: CreateTaskPayload | None = Body(default=None),
        service: TaskService = Depends(get_service),
    ):
        task = await service.create_task(payload or CreateTaskPayload())
        return {
            "success": True,
            "data": task.model_dump(mode="json"),
            "message": "Task created successfully",
        }

    @router.put("/tasks/{task_id}", summary="Partially update a task")
    async def update_task(
        task_id: str,
        payload: UpdateTaskPayload | None = Body(default=None),
        service: TaskService = Depends(get_service),
    ):
        task = await service.update_task(task_id, payload or UpdateTaskPayload())
        return {
            "success": True,
            "data": task.model_dump(mode="json"),
            "message": "Task updated successfully",
        }

    @router.delete("/tasks/{task_id}", summary="Delete a task")
    async def delete_task(task_id: str, service: TaskService = Depends(get_service)):
        await service.delete_task(task_id)
        return {"success": True, "message": "Task deleted successfully"}

    return router
