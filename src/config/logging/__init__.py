"""Structured JSON logging.

Usage:
    from config.logging import configure_logging, get_logger

    # At startup (app/bootstrap/)
    configure_logging(level="INFO", environment="production", context_getter=log_context)

    # In any module
    logger = get_logger(__name__)
    logger.info("crop_plan_created", extra={"farm_id": "farm-1"})

Every record carries level, logger, message, timestamp, service,
environment, correlation_id and user_id.
"""

from config.logging.config import (
    configure_logging,
    get_logger,
    log_business_event,
    log_performance,
    log_security_event,
)
from config.logging.filters import CONTEXT_DEFAULTS, RequestContextFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "CONTEXT_DEFAULTS",
    "FIELD_RENAME_MAP",
    "LOG_FIELDS",
    "RequestContextFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_business_event",
    "log_performance",
    "log_security_event",
]
