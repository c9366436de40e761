from __future__ import annotations

from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import create_async_engine

from src.app.domain.models.backend import Backend
from src.app.infrastructure.pool import SqlPool
from src.setup.db_config import MySqlSettings


class MySqlPool(SqlPool):
    """aiomysql-backed pool. Statements use ``%s`` placeholders."""

    PROBE_SQL = "SELECT 1"

    @classmethod
    def from_settings(cls, settings: MySqlSettings) -> "MySqlPool":
        engine = create_async_engine(
            settings.database_url,
            pool_size=settings.MYSQL_POOL_SIZE,
            max_overflow=0,
            pool_timeout=settings.MYSQL_POOL_TIMEOUT,
            pool_recycle=settings.MYSQL_IDLE_TIMEOUT,
            pool_pre_ping=True,
            connect_args={"connect_timeout": settings.MYSQL_CONNECT_TIMEOUT},
        )
        pool = cls(
            engine,
            name=Backend.MYSQL.value,
            probe_timeout=settings.MYSQL_PROBE_TIMEOUT,
        )
        pool.watch_idle_errors()
        return pool

    def _generated_id(self, result: CursorResult) -> int | None:
        # 0 means the statement did not generate an AUTO_INCREMENT value.
        return result.lastrowid or None
