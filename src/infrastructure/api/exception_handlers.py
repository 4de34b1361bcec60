"""Map domain errors to `{"error": message}` JSON responses."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.domain.exceptions import GatewayError
from src.infrastructure.logging import get_logger

logger = get_logger("errors")


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    logger.warning(
        "Upstream call failed",
        extra={
            "error_type": type(exc).__name__,
            "error_message": exc.message,
            "status_code": exc.status_code,
            "path": request.url.path,
        },
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def unhandled_exception_handler(request: Request, _exc: Exception) -> JSONResponse:
    # Full traceback goes to the log, the caller gets a generic message
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
