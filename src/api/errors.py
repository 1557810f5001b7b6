"""Exception handlers rendering ``{error, message, details?}`` bodies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from utils.errors import AppError, InfrastructureError

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = {
    "error": "Internal server error",
    "message": "Something went wrong",
}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": exc.error,
                "cause_type": type(exc.__cause__).__name__ if exc.__cause__ else None,
            },
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]),
            "message": error.get("msg", ""),
            "value": error.get("input"),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation failed",
            "message": "Request parameters failed validation",
            "details": details,
        },
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        content = {
            "error": "Route not found",
            "message": f"Cannot {request.method} {request.url.path}",
        }
    else:
        content = {"error": str(exc.detail), "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


async def infrastructure_error_handler(request: Request, exc: InfrastructureError) -> JSONResponse:
    # Adapter messages may carry provider detail: never echoed to the caller
    logger.error(
        "dependency_failure",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error": str(exc),
        },
    )
    return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_request_error",
        extra={"path": request.url.path, "method": request.method, "error_type": type(exc).__name__},
    )
    return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(InfrastructureError, infrastructure_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
