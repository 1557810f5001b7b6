"""Logging setup and event helpers.

``configure_logging`` installs one JSON handler on the root logger; the
level comes from LOG_LEVEL.

The event helpers used by the routes emit plain records with a fixed
``event_kind`` (business, security, performance) so they can be filtered
downstream.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from config.logging.filters import RequestContextFilter
from config.logging.formatters import create_json_formatter
from config.settings.base import VALID_LOG_LEVELS

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

DEFAULT_SERVICE_NAME = "smartagrinet-backend"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    environment: str = "development",
    context_getter: Callable[[], Mapping[str, str]] | None = None,
) -> None:
    """Configure JSON structured logging for the service.

    Must be called once at startup (app/bootstrap/).

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Service name attached to every record.
        environment: Environment name stamped on every record.
        context_getter: Callable returning the request fields
            (correlation_id, user_id) for the current task.

    Raises:
        ValueError: If the level is invalid.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level: {level}. "
            f"Valid: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    formatter = create_json_formatter(environment)

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(formatter)
    handler.addFilter(RequestContextFilter(service_name, context_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Replace existing handlers to avoid duplicated records
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (usually ``__name__``)."""
    return logging.getLogger(name)


def log_business_event(
    logger: logging.Logger,
    module: str,
    action: str,
    **data: Any,
) -> None:
    """Log a business event (user registered, crop plan created...).

    Args:
        logger: Logger instance.
        module: Route family emitting the event (e.g. "auth", "crops").
        action: Event name (e.g. "user_registered").
        **data: Event attributes.

    Example:
        log_business_event(logger, "crops", "crop_plan_created", farm_id="f1")
    """
    logger.info(
        "business_event",
        extra={
            "event_kind": "business",
            "business_module": module,
            "action": action,
            "event_at": datetime.now(UTC).isoformat(),
            **data,
        },
    )


def log_security_event(
    logger: logging.Logger,
    event: str,
    **details: Any,
) -> None:
    """Log a security event at WARNING level.

    Args:
        logger: Logger instance.
        event: Event name (e.g. "token_expired", "farm_access_denied").
        **details: Event attributes (never raw tokens).
    """
    logger.warning(
        "security_event",
        extra={
            "event_kind": "security",
            "event": event,
            "event_at": datetime.now(UTC).isoformat(),
            **details,
        },
    )


def log_performance(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    **metadata: Any,
) -> None:
    """Log the duration of an operation.

    Args:
        logger: Logger instance.
        operation: Operation name (e.g. "http_request").
        duration_ms: Elapsed time in milliseconds.
        **metadata: Extra attributes.
    """
    logger.info(
        "performance",
        extra={
            "event_kind": "performance",
            "operation": operation,
            "duration_ms": round(duration_ms, 2),
            **metadata,
        },
    )
