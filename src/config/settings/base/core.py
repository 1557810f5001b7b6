"""Base settings for the SmartAgriNet backend.

Settings shared by every route family and adapter.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class BaseSettings:
    """Process-wide settings.

    Attributes:
        environment: Execution environment (development|staging|production)
        service_name: Service name used in logs
        debug: Debug mode
        log_level: Root log level
        frontend_url: Frontend origin used in email links; a comma-separated
            list allows several CORS origins, the first one being canonical
        port: HTTP port for direct execution
        external_call_timeout_seconds: Upper bound for identity/store calls
        max_body_bytes: Largest accepted JSON request body
    """

    environment: Environment = "development"
    service_name: str = "smartagrinet-backend"
    debug: bool = False
    log_level: str = "INFO"
    frontend_url: str = "http://localhost:3000"
    port: int = 5000
    external_call_timeout_seconds: float = 10.0
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.frontend_url.split(",") if origin.strip()]

    @property
    def public_url(self) -> str:
        """Origin used when building links sent to users."""
        origins = self.cors_origins
        return origins[0] if origins else ""

    @property
    def is_production(self) -> bool:
        """Return True in production."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Return True in development."""
        return self.environment == "development"

    def validate(self) -> list[str]:
        """Validate base settings.

        Returns:
            List of problems (empty = OK).
        """
        errors: list[str] = []

        if self.environment not in ("development", "staging", "production"):
            errors.append(f"invalid ENVIRONMENT: {self.environment}")

        if not self.service_name:
            errors.append("SERVICE_NAME must not be empty")

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"invalid LOG_LEVEL: {self.log_level}")

        if not self.frontend_url:
            errors.append("FRONTEND_URL must not be empty")

        if self.external_call_timeout_seconds <= 0:
            errors.append("EXTERNAL_CALL_TIMEOUT_SECONDS must be > 0")

        if self.max_body_bytes <= 0:
            errors.append("MAX_BODY_BYTES must be > 0")

        return errors


def _parse_environment(env_str: str) -> Environment:
    """Map an environment string to Environment."""
    env_lower = env_str.lower()
    if env_lower in ("production", "prod"):
        return "production"
    if env_lower in ("staging", "stage"):
        return "staging"
    return "development"


def _load_base_from_env() -> BaseSettings:
    """Load BaseSettings from environment variables."""
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "smartagrinet-backend"),
        debug=os.getenv("DEBUG", "").lower() in ("true", "1", "yes"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        frontend_url=os.getenv("FRONTEND_URL", "http://localhost:3000"),
        port=int(os.getenv("PORT", "5000")),
        external_call_timeout_seconds=float(os.getenv("EXTERNAL_CALL_TIMEOUT_SECONDS", "10")),
        max_body_bytes=int(os.getenv("MAX_BODY_BYTES", str(DEFAULT_MAX_BODY_BYTES))),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Return the cached BaseSettings instance."""
    return _load_base_from_env()
