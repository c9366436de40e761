from __future__ import annotations

import asyncio
import logging
import os
import signal
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import event, exc
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

_CHECKED_OUT = "task_api_checked_out"


@dataclass
class QueryResult:
    """Raw outcome of one statement, materialised before the connection is released."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    rowcount: int = 0
    lastrowid: int | None = None


def terminate_process(exc: BaseException | None) -> None:
    """Default fatal handler: the pool is no longer trustworthy, stop the process."""
    logger.critical("Fatal error on idle database connection, shutting down", exc_info=exc)
    os.kill(os.getpid(), signal.SIGTERM)


class SqlPool:
    """
    Bounded pool of reusable connections to one database engine.

    Subclasses pick the driver URL and the liveness statement. Statements are
    handed to the driver as-is, so SQL text must use the driver's own
    placeholder syntax.
    """

    PROBE_SQL = "SELECT 1"

    def __init__(
        self,
        engine: AsyncEngine,
        *,
        name: str,
        probe_timeout: float = 2.0,
        on_fatal: Callable[[BaseException | None], None] | None = None,
    ) -> None:
        self._engine = engine
        self._name = name
        self._probe_timeout = probe_timeout
        self._on_fatal = on_fatal or terminate_process

    @property
    def name(self) -> str:
        return self._name

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        """Run one parameterised statement on a pooled connection and commit it."""
        async with self._engine.connect() as connection:
            result = await connection.exec_driver_sql(sql, tuple(params))
            query_result = QueryResult(
                rows=[dict(row) for row in result.mappings().all()] if result.returns_rows else [],
                rowcount=result.rowcount,
                lastrowid=self._generated_id(result),
            )
            await connection.commit()
        return query_result

    async def probe(self) -> bool:
        """Round-trip a trivial query; report failure instead of raising."""
        try:
            result = await asyncio.wait_for(self.execute(self.PROBE_SQL), self._probe_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Database probe timed out",
                extra={"backend": self._name, "timeout": self._probe_timeout},
            )
            return False
        except Exception as exc:
            logger.warning(
                "Database probe failed",
                extra={"backend": self._name, "error": str(exc)},
            )
            return False
        self._log_probe(result)
        return True

    async def dispose(self) -> None:
        await self._engine.dispose()
        logger.info("Database pool closed", extra={"backend": self._name})

    def watch_idle_errors(self) -> None:
        """Treat errors on idle (checked-in) connections as fatal to the process."""
        sync_engine = self._engine.sync_engine
        event.listen(sync_engine, "checkout", self._on_checkout)
        event.listen(sync_engine, "checkin", self._on_checkin)
        event.listen(sync_engine, "invalidate", self._on_invalidate)

    def _on_checkout(self, dbapi_connection, connection_record, connection_proxy) -> None:
        connection_record.info[_CHECKED_OUT] = True

    def _on_checkin(self, dbapi_connection, connection_record) -> None:
        connection_record.info[_CHECKED_OUT] = False

    def _on_invalidate(self, dbapi_connection, connection_record, exception) -> None:
        if exception is None or connection_record.info.get(_CHECKED_OUT):
            return
        # Raised while a request is checking the connection out (pre-ping or a
        # checkout listener). The pool reconnects and the request carries on.
        if isinstance(exception, exc.DisconnectionError):
            logger.info(
                "Stale connection replaced on checkout",
                extra={"backend": self._name, "error": repr(exception)},
            )
            return
        logger.error(
            "Unexpected error on idle connection",
            extra={"backend": self._name, "error": str(exception)},
        )
        self._on_fatal(exception)

    def _generated_id(self, result: CursorResult) -> int | None:
        return None

    def _log_probe(self, result: QueryResult) -> None:
        logger.info("Database connected", extra={"backend": self._name})
