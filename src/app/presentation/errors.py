from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.app.domain.exceptions import BackendError, TaskNotFoundError, TaskValidationError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI, *, expose_details: bool) -> None:
    """Map every failure onto the ``{"success": false, ...}`` envelope."""

    async def validation_error(request: Request, exc: TaskValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": exc.message},
        )

    async def request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        content: dict = {"success": False, "error": "Invalid request body"}
        if expose_details:
            content["details"] = [
                {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
                for error in exc.errors()
            ]
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)

    async def not_found(request: Request, exc: TaskNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "error": "Task not found"},
        )

    async def backend_error(request: Request, exc: BackendError) -> JSONResponse:
        content: dict = {"success": False, "error": exc.error}
        if expose_details:
            content["message"] = exc.diagnostic
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)

    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unmatched paths and unsupported methods both mean "no such endpoint".
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={
                    "success": False,
                    "error": "Endpoint not found",
                    "path": request.url.path,
                    "method": request.method,
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error",
            exc_info=exc,
            extra={"path": request.url.path, "method": request.method},
        )
        content: dict = {"success": False, "error": "Internal server error"}
        if expose_details:
            content["message"] = str(exc)
            content["stack"] = "".join(traceback.format_exception(exc))
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)

    app.add_exception_handler(TaskValidationError, validation_error)
    app.add_exception_handler(RequestValidationError, request_validation_error)
    app.add_exception_handler(TaskNotFoundError, not_found)
    app.add_exception_handler(BackendError, backend_error)
    app.add_exception_handler(StarletteHTTPException, http_error)
    app.add_exception_handler(Exception, unhandled_error)
