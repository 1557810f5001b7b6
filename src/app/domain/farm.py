"""Farm - ownership and membership for farm-scoped operations."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from app.domain._base import StoreDocument


class Farm(StoreDocument):
    """Farm document stored under ``farms/<id>``."""

    id: str = ""
    owner_id: str = ""
    members: list[str] = Field(default_factory=list)
    crop_plans: list[str] = Field(default_factory=list)
    total_planned_area: float = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def grants_access_to(self, uid: str, role: str) -> bool:
        """Owner, member and admin are each sufficient."""
        return self.owner_id == uid or uid in self.members or role == "admin"

    @classmethod
    def from_store_dict(cls, farm_id: str, data: dict[str, Any]) -> Farm:
        return cls.model_validate({**data, "id": farm_id})
