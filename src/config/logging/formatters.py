"""JSON formatter for the service logs.

Example record:
    {
        "level": "INFO",
        "logger": "app.use_cases.crops.planning",
        "message": "business_event",
        "correlation_id": "5f0c...",
        "user_id": "u-42",
        "service": "smartagrinet-backend",
        "environment": "production",
        "timestamp": "2026-03-01T08:15:00.120000+00:00",
        "action": "crop_plan_created"
    }
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

LOG_FIELDS = ("levelname", "name", "message", "correlation_id", "user_id", "service")

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter(environment: str = "development") -> JsonFormatter:
    """JSON formatter with an ISO-8601 UTC ``timestamp`` and the environment."""
    return JsonFormatter(
        " ".join(f"%({field})s" for field in LOG_FIELDS),
        rename_fields=FIELD_RENAME_MAP,
        static_fields={"environment": environment},
        timestamp=True,
        # Names and addresses are frequently non-ASCII (yo, ha, ar)
        json_ensure_ascii=False,
    )
