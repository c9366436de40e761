import logging

import inject

from src.app.application.health import HealthService
from src.app.domain.models.backend import Backend
from src.app.infrastructure.mysql.pool import MySqlPool
from src.app.infrastructure.mysql.repository import MySqlTaskRepository
from src.app.infrastructure.pool import SqlPool
from src.app.infrastructure.postgres.pool import PostgresPool
from src.app.infrastructure.postgres.repository import PostgresTaskRepository
from src.setup.api_config import ApiSettings, get_api_settings
from src.setup.db_config import get_mysql_settings, get_postgres_settings

logger = logging.getLogger(__name__)

_pools: dict[Backend, SqlPool] = {}


def build_pools() -> dict[Backend, SqlPool]:
    """Create one pool per backend. No connection is opened until first use."""
    return {
        Backend.MYSQL: MySqlPool.from_settings(get_mysql_settings()),
        Backend.POSTGRESQL: PostgresPool.from_settings(get_postgres_settings()),
    }


def configure_di(settings: ApiSettings | None = None) -> None:
    """Build the process-wide pools once and bind them, with their consumers, into inject."""
    if settings is None:
        settings = get_api_settings()
    if not _pools:
        _pools.update(build_pools())

    mysql_pool = _pools[Backend.MYSQL]
    postgres_pool = _pools[Backend.POSTGRESQL]
    health_service = HealthService(
        _pools,
        require_all_backends=settings.HEALTH_REQUIRE_ALL_BACKENDS,
        primary_backend=settings.HEALTH_PRIMARY_BACKEND,
    )

    def _config(binder: inject.Binder) -> None:
        binder.bind(MySqlPool, mysql_pool)
        binder.bind(PostgresPool, postgres_pool)
        binder.bind(MySqlTaskRepository, MySqlTaskRepository(mysql_pool))
        binder.bind(PostgresTaskRepository, PostgresTaskRepository(postgres_pool))
        binder.bind(HealthService, health_service)

    inject.clear_and_configure(_config)
    logger.info(
        "Dependencies configured",
        extra={"backends": [backend.value for backend in _pools]},
    )


async def dispose_pools() -> None:
    """Close every pooled connection; called once at shutdown."""
    while _pools:
        _, pool = _pools.popitem()
        await pool.dispose()
