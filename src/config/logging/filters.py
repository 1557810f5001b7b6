"""Logging filter injecting the request context."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

CONTEXT_DEFAULTS: dict[str, str] = {"correlation_id": "", "user_id": "anonymous"}


class RequestContextFilter(logging.Filter):
    """Stamp ``service``, ``correlation_id`` and ``user_id`` on each record.

    ``context_getter`` returns the current request fields; values given
    explicitly through ``extra`` are kept. Records outside a request get
    ``CONTEXT_DEFAULTS``.
    """

    def __init__(
        self,
        service_name: str,
        context_getter: Callable[[], Mapping[str, str]] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._context_getter = context_getter

    def filter(self, record: logging.LogRecord) -> bool:
        context = dict(CONTEXT_DEFAULTS)
        if self._context_getter is not None:
            context.update(self._context_getter())
        for field, value in context.items():
            if not getattr(record, field, None):
                setattr(record, field, value)
        record.service = self._service_name
        return True
