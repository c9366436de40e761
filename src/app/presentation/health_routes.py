from __future__ import annotations

import inject
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from src.app.application.health import HealthService
from src.app.domain.models.backend import Backend

router = APIRouter(tags=["health"])


@router.get("/health", summary="Probe both databases")
async def health() -> JSONResponse:
    report = await inject.instance(HealthService).check_health()
    return JSONResponse(
        status_code=status.HTTP_200_OK if report.healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=report.model_dump(mode="json", exclude={"healthy"}),
    )


@router.get("/", summary="Service metadata")
async def root(request: Request) -> dict:
    return {
        "message": request.app.title,
        "version": request.app.version,
        "endpoints": {
            "health": "/health",
            **{
                backend.value: {
                    "tasks": f"/api/{backend.value}/tasks",
                    "task": f"/api/{backend.value}/tasks/:id",
                }
                for backend in Backend
            },
        },
        "documentation": "/docs",
    }
