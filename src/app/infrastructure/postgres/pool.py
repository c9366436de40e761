from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import create_async_engine

from src.app.domain.models.backend import Backend
from src.app.infrastructure.pool import QueryResult, SqlPool
from src.setup.db_config import PostgresSettings

logger = logging.getLogger(__name__)


class PostgresPool(SqlPool):
    """asyncpg-backed pool. Statements use ``$1, $2, ...`` placeholders."""

    PROBE_SQL = "SELECT NOW() AS now"

    @classmethod
    def from_settings(cls, settings: PostgresSettings) -> "PostgresPool":
        engine = create_async_engine(
            settings.database_url,
            pool_size=settings.POSTGRES_POOL_SIZE,
            max_overflow=0,
            pool_timeout=settings.POSTGRES_POOL_TIMEOUT,
            pool_recycle=settings.POSTGRES_IDLE_TIMEOUT,
            pool_pre_ping=True,
            connect_args={"timeout": settings.POSTGRES_CONNECT_TIMEOUT},
        )
        pool = cls(
            engine,
            name=Backend.POSTGRESQL.value,
            probe_timeout=settings.POSTGRES_PROBE_TIMEOUT,
        )
        pool.watch_idle_errors()
        return pool

    def _log_probe(self, result: QueryResult) -> None:
        server_time = result.rows[0]["now"] if result.rows else None
        logger.info(
            "Database connected",
            extra={"backend": self.name, "server_time": str(server_time)},
        )
