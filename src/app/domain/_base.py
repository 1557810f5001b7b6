"""Base model for documents persisted in the document store."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(UTC)


class StoreDocument(BaseModel):
    """Pydantic model stored with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_store_dict(self) -> dict[str, Any]:
        """Convert to a store-compatible dict (camelCase keys)."""
        return self.model_dump(by_alias=True)

    def to_response_dict(self) -> dict[str, Any]:
        """Convert to a JSON-safe dict for API responses."""
        return self.model_dump(by_alias=True, mode="json")
