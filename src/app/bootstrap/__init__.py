"""Application bootstrap: the composition root.

Configures logging, validates settings, installs the process-wide error
handlers and builds the service container.

Usage:
    from app.bootstrap import initialize_app, build_container

    initialize_app()
    container = build_container()
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
import threading
from typing import TYPE_CHECKING, Any

from app.bootstrap.container import Collections, ServiceContainer
from app.bootstrap.dependencies import build_container
from app.observability import log_context
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_email_settings,
    get_firebase_settings,
    get_recommendation_settings,
)

if TYPE_CHECKING:
    from types import TracebackType

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)

__all__ = [
    "Collections",
    "ServiceContainer",
    "build_container",
    "initialize_app",
    "install_loop_exception_handler",
    "install_process_error_handlers",
    "validate_runtime_settings",
]


def initialize_app() -> None:
    """Configure JSON logging with the request context. Call once at startup."""
    settings = get_base_settings()
    configure_logging(
        level=settings.log_level,
        service_name=settings.service_name,
        environment=settings.environment,
        context_getter=log_context,
    )


def validate_runtime_settings() -> None:
    """Validate required settings at startup.

    Fails fast in ``staging``/``production``; development only logs.
    """
    base = get_base_settings()
    strict_mode = base.environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(
        f"firebase: {error}" for error in get_firebase_settings().validate(base.is_development)
    )
    errors.extend(f"email: {error}" for error in get_email_settings().validate())
    errors.extend(f"recommendations: {error}" for error in get_recommendation_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Invalid configuration for {base.environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Process-wide error handlers
# ──────────────────────────────────────────────────────────────────────────────


def _log_fatal(exc_type: type[BaseException], exc: BaseException, tb: TracebackType | None) -> None:
    logger.critical(
        "uncaught_exception",
        exc_info=(exc_type, exc, tb),
        extra={"error_type": exc_type.__name__},
    )


def _fatal_excepthook(
    exc_type: type[BaseException],
    exc: BaseException,
    tb: TracebackType | None,
) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc, tb)
        return
    _log_fatal(exc_type, exc, tb)
    sys.exit(1)


def _fatal_thread_excepthook(args: threading.ExceptHookArgs) -> None:
    if args.exc_type is SystemExit:
        return
    _log_fatal(args.exc_type, args.exc_value or args.exc_type(), args.exc_traceback)
    # sys.exit in a worker thread only ends that thread
    os._exit(1)


def _loop_exception_handler(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    exc = context.get("exception")
    logger.error(
        "unhandled_async_error",
        exc_info=exc,
        extra={
            "error_type": type(exc).__name__ if exc else None,
            "context_message": context.get("message"),
        },
    )


def install_process_error_handlers() -> None:
    """Unrecoverable synchronous faults are logged and terminate the process."""
    sys.excepthook = _fatal_excepthook
    threading.excepthook = _fatal_thread_excepthook


def install_loop_exception_handler(loop: asyncio.AbstractEventLoop | None = None) -> None:
    """Unhandled asynchronous failures are logged and the loop keeps running."""
    (loop or asyncio.get_running_loop()).set_exception_handler(_loop_exception_handler)
