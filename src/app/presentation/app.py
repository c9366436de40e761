from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import inject
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.app.application.health import HealthService
from src.app.domain.models.backend import Backend
from src.app.presentation.errors import register_exception_handlers
from src.app.presentation.health_routes import router as health_router
from src.app.presentation.routes import build_task_router
from src.setup.api_config import ApiSettings
from src.setup.app_config import dispose_pools

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # A backend that is down at boot is reported, not fatal; /health keeps reporting it.
    report = await inject.instance(HealthService).check_health()
    logger.info(
        "Startup database check: %s",
        report.status.value,
        extra={"databases": report.databases},
    )
    try:
        yield
    finally:
        await dispose_pools()


async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s -> %s",
            request.method,
            request.url.path,
            status_code,
            extra={"duration_ms": round(elapsed_ms, 2)},
        )


def create_app(settings: ApiSettings) -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Task CRUD API served from MySQL and PostgreSQL side by side",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)

    register_exception_handlers(app, expose_details=settings.expose_error_details)

    for backend in Backend:
        app.include_router(build_task_router(backend))
    app.include_router(health_router)
    return app
