from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timedelta
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app.application.health import HealthService
from src.app.domain.models import Backend, Task, TaskChanges, TaskStatus
from src.app.domain.repositories import TaskRepository
from src.app.infrastructure.mysql.repository import MySqlTaskRepository
from src.app.infrastructure.pool import QueryResult
from src.app.infrastructure.postgres.repository import PostgresTaskRepository
from src.setup.api_config import ApiSettings


class Clock:
    """Monotonic fake clock so every write gets a strictly later timestamp."""

    def __init__(self) -> None:
        self._now = datetime(2024, 1, 1, 12, 0, 0)

    def tick(self) -> datetime:
        self._now += timedelta(milliseconds=5)
        return self._now


class InMemoryTaskRepository(TaskRepository):
    """Dict-backed TaskRepository replacement for route and service tests."""

    def __init__(self) -> None:
        self.rows: dict[int, Task] = {}
        self.calls: list[str] = []
        self._next_id = 1
        self._clock = Clock()

    async def list_all(self) -> list[Task]:
        self.calls.append("list_all")
        return sorted(
            self.rows.values(),
            key=lambda task: (task.created_at, task.id),
            reverse=True,
        )

    async def get_by_id(self, task_id: int) -> Task | None:
        self.calls.append("get_by_id")
        return self.rows.get(task_id)

    async def create(
        self,
        title: str,
        description: str | None = None,
        status: TaskStatus | None = None,
    ) -> Task:
        self.calls.append("create")
        now = self._clock.tick()
        task = Task(
            id=self._next_id,
            title=title,
            description=description,
            status=status or TaskStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        self.rows[task.id] = task
        self._next_id += 1
        return task

    async def update(self, task_id: int, changes: TaskChanges) -> Task | None:
        self.calls.append("update")
        task = self.rows.get(task_id)
        if task is None:
            return None
        updated = task.model_copy(update={**changes.fields(), "updated_at": self._clock.tick()})
        updated.status = TaskStatus(updated.status)
        self.rows[task_id] = updated
        return updated

    async def delete_by_id(self, task_id: int) -> bool:
        self.calls.append("delete_by_id")
        return self.rows.pop(task_id, None) is not None


class FailingTaskRepository(TaskRepository):
    """Every call fails the way a dropped connection would."""

    def __init__(self, message: str = "connection lost") -> None:
        self._message = message

    async def list_all(self) -> list[Task]:
        raise ConnectionError(self._message)

    async def get_by_id(self, task_id: int) -> Task | None:
        raise ConnectionError(self._message)

    async def create(self, title, description=None, status=None) -> Task:
        raise ConnectionError(self._message)

    async def update(self, task_id: int, changes: TaskChanges) -> Task | None:
        raise ConnectionError(self._message)

    async def delete_by_id(self, task_id: int) -> bool:
        raise ConnectionError(self._message)


class RecordingPool:
    """Pool stand-in that records statements and replays queued results."""

    def __init__(self, *results: QueryResult) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self._results = list(results)

    def queue(self, *results: QueryResult) -> None:
        self._results.extend(results)

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        self.calls.append((" ".join(sql.split()), tuple(params)))
        if not self._results:
            return QueryResult()
        return self._results.pop(0)


class StubPool:
    def __init__(self, name: str, healthy: bool = True) -> None:
        self.name = name
        self.healthy = healthy
        self.probes = 0

    async def probe(self) -> bool:
        self.probes += 1
        return self.healthy


def task_row(task_id: int = 1, **overrides: Any) -> dict[str, Any]:
    row = {
        "id": task_id,
        "title": f"Task {task_id}",
        "description": None,
        "status": "pending",
        "created_at": datetime(2024, 1, 1, 12, 0, 0),
        "updated_at": datetime(2024, 1, 1, 12, 0, 0),
    }
    row.update(overrides)
    return row


@pytest.fixture
def env_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Provide environment variables for ApiSettings."""
    monkeypatch.setenv("APP_NAME", "Test API")
    monkeypatch.setenv("APP_VERSION", "0.1.0")
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("FRONTEND_URL", "http://localhost:3000")


def _patch_inject_instance(
    monkeypatch: pytest.MonkeyPatch,
    bindings: dict[type, object],
) -> Callable[[object], object]:
    """Patch `inject.instance` to resolve from ``bindings`` only."""
    import inject

    def fake_instance(interface: object) -> object:
        if interface in bindings:
            return bindings[interface]
        raise RuntimeError(f"Unexpected dependency request: {interface}")

    monkeypatch.setattr(inject, "instance", fake_instance)
    return fake_instance


@pytest.fixture
def client_factory(env_settings: None, monkeypatch: pytest.MonkeyPatch):
    """Build a TestClient whose dependencies resolve to the given stubs."""

    def build(
        *,
        mysql: TaskRepository | None = None,
        postgresql: TaskRepository | None = None,
        health: HealthService | None = None,
        settings: ApiSettings | None = None,
        raise_server_exceptions: bool = True,
    ) -> tuple[TestClient, FastAPI]:
        from src.app.presentation.app import create_app

        if health is None:
            health = HealthService(
                {
                    Backend.MYSQL: StubPool("mysql"),
                    Backend.POSTGRESQL: StubPool("postgresql"),
                }
            )
        _patch_inject_instance(
            monkeypatch,
            {
                MySqlTaskRepository: mysql or InMemoryTaskRepository(),
                PostgresTaskRepository: postgresql or InMemoryTaskRepository(),
                HealthService: health,
            },
        )
        app = create_app(settings or ApiSettings())
        return TestClient(app, raise_server_exceptions=raise_server_exceptions), app

    return build


@pytest.fixture
def api_client(client_factory):
    """Client with an in-memory repository behind each backend prefix."""
    repositories = {
        Backend.MYSQL.value: InMemoryTaskRepository(),
        Backend.POSTGRESQL.value: InMemoryTaskRepository(),
    }
    client, _ = client_factory(
        mysql=repositories[Backend.MYSQL.value],
        postgresql=repositories[Backend.POSTGRESQL.value],
    )
    return client, repositories


@pytest.fixture
def recording_pool() -> RecordingPool:
    return RecordingPool()


@pytest.fixture
def make_task_row() -> Callable[..., dict[str, Any]]:
    return task_row


@pytest.fixture
def failing_repository() -> FailingTaskRepository:
    return FailingTaskRepository()


@pytest.fixture
def stub_pools() -> Callable[..., dict[Backend, StubPool]]:
    """Build one StubPool per backend with the given probe outcomes."""

    def build(*, mysql: bool = True, postgresql: bool = True) -> dict[Backend, StubPool]:
        return {
            Backend.MYSQL: StubPool("mysql", healthy=mysql),
            Backend.POSTGRESQL: StubPool("postgresql", healthy=postgresql),
        }

    return build


@pytest.fixture
def in_memory_repository() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()
