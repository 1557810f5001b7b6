"""CropPlan - planting plan of one crop on one farm.

Progress flags and cost accumulators are only ever changed through
field-level updates (``progress.<stage>`` assignment and ``costs.<bucket>``
increments); the document is written whole exactly once, at creation.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from app.domain._base import StoreDocument, utcnow

PlanStatus = Literal["planned", "planted", "growing", "harvesting", "completed", "cancelled"]

PROGRESS_STAGES: tuple[str, ...] = (
    "planted",
    "fertilized",
    "irrigated",
    "pestControl",
    "harvested",
)
COST_BUCKETS: tuple[str, ...] = (
    "seeds",
    "fertilizers",
    "irrigation",
    "pestControl",
    "labor",
)


class Progress(StoreDocument):
    planted: bool = False
    fertilized: bool = False
    irrigated: bool = False
    pest_control: bool = False
    harvested: bool = False


class Costs(StoreDocument):
    seeds: float = 0
    fertilizers: float = 0
    irrigation: float = 0
    pest_control: float = 0
    labor: float = 0
    total: float = 0


class Yields(StoreDocument):
    expected: float = 0
    actual: float = 0
    quality: str = "pending"


def build_plan_id(farm_id: str, crop_id: str, created_at: datetime) -> str:
    """Composite id: ``<farmId>_<cropId>_<epoch millis>``."""
    return f"{farm_id}_{crop_id}_{int(created_at.timestamp() * 1000)}"


class CropPlan(StoreDocument):
    """Plan stored under ``cropPlans/<id>``."""

    id: str
    farm_id: str
    crop_id: str
    crop_name: str | None = None
    user_id: str
    area: float = 0
    planting_date: datetime
    expected_harvest_date: datetime
    seed_quantity: float = 0
    fertilizer_plan: object | None = None
    irrigation_plan: object | None = None
    pest_management_plan: object | None = None
    budget: float = 0
    notes: str | None = None
    season: str | None = None
    status: PlanStatus = "planned"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    progress: Progress = Field(default_factory=Progress)
    costs: Costs = Field(default_factory=Costs)
    yields: Yields = Field(default_factory=Yields)
