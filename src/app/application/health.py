from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from src.app.domain.models.backend import Backend
from src.app.infrastructure.pool import SqlPool

logger = logging.getLogger(__name__)

CONNECTED = "connected"
DISCONNECTED = "disconnected"


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthReport(BaseModel):
    status: HealthStatus = Field(description="Overall verdict.")
    timestamp: datetime = Field(description="When the probes ran.")
    databases: dict[str, str] = Field(description="Per-backend connectivity.")
    healthy: bool = Field(description="Whether the service should be reported as live.")


class HealthService:
    """
    Probes every database pool and reduces the outcomes to one verdict.

    With ``require_all_backends`` every pool must answer. Without it only the
    primary backend decides liveness and a failing secondary marks the
    service as degraded.
    """

    def __init__(
        self,
        pools: Mapping[Backend, SqlPool],
        *,
        require_all_backends: bool = True,
        primary_backend: Backend = Backend.POSTGRESQL,
    ) -> None:
        if not require_all_backends and primary_backend not in pools:
            raise ValueError(f"Primary backend '{primary_backend.value}' has no pool.")
        self._pools = dict(pools)
        self._require_all = require_all_backends
        self._primary = primary_backend

    async def check_health(self) -> HealthReport:
        backends = list(self._pools)
        outcomes = await asyncio.gather(
            *(self._pools[backend].probe() for backend in backends),
            return_exceptions=True,
        )
        # probe() reports failures itself; anything raised here is still a failure.
        results = {
            backend: outcome is True for backend, outcome in zip(backends, outcomes)
        }

        if all(results.values()):
            status = HealthStatus.HEALTHY
        elif self._require_all or not results[self._primary]:
            status = HealthStatus.UNHEALTHY
        else:
            status = HealthStatus.DEGRADED

        report = HealthReport(
            status=status,
            timestamp=datetime.now(timezone.utc),
            databases={
                backend.value: CONNECTED if ok else DISCONNECTED
                for backend, ok in results.items()
            },
            healthy=status is not HealthStatus.UNHEALTHY,
        )
        if status is not HealthStatus.HEALTHY:
            logger.warning(
                "Health check reported %s",
                status.value,
                extra={"databases": report.databases},
            )
        return report
