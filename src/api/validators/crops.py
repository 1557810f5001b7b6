"""Rule tables for the /api/crops routes."""

from __future__ import annotations

from api.validators.rules import (
    FieldRule,
    is_amount_map,
    is_bool,
    is_float,
    is_in,
    is_iso_date,
    is_object,
    is_string,
    not_empty,
    to_float,
)
from app.domain.crop_plan import COST_BUCKETS, PROGRESS_STAGES

SEASONS: tuple[str, ...] = ("spring", "summer", "autumn", "winter", "rainy", "dry")
LEVELS: tuple[str, ...] = ("low", "medium", "high")
PEST_TYPES: tuple[str, ...] = ("insects", "diseases", "weeds")

SOIL_ANALYSIS_RULES: tuple[FieldRule, ...] = (
    FieldRule("location", (is_object(),)),
    FieldRule("location.lat", (is_float(),), normalize=to_float),
    FieldRule("location.lng", (is_float(),), normalize=to_float),
    FieldRule("soilType", (is_string(),)),
    FieldRule("phLevel", (is_float(0, 14),), normalize=to_float),
    FieldRule("nitrogen", (is_float(0),), normalize=to_float),
    FieldRule("phosphorus", (is_float(0),), normalize=to_float),
    FieldRule("potassium", (is_float(0),), normalize=to_float),
    FieldRule("organicMatter", (is_float(0, 100),), normalize=to_float),
    FieldRule("moisture", (is_float(0, 100),), normalize=to_float),
    FieldRule("season", (is_in(SEASONS),), optional=True),
    FieldRule("budget", (is_float(0),), optional=True, normalize=to_float),
)

CROP_PLANNING_RULES: tuple[FieldRule, ...] = (
    FieldRule("farmId", (is_string(), not_empty())),
    FieldRule("season", (is_in(SEASONS),)),
    FieldRule("availableWater", (is_float(0),), normalize=to_float),
    FieldRule("budget", (is_float(0),), normalize=to_float),
    FieldRule("laborAvailability", (is_in(LEVELS),)),
    FieldRule("marketDemand", (is_object(),)),
    FieldRule("cropId", (is_string(), not_empty())),
    FieldRule("area", (is_float(0),), normalize=to_float),
    FieldRule("plantingDate", (is_iso_date(),)),
    FieldRule("expectedHarvestDate", (is_iso_date(),)),
    FieldRule("seedQuantity", (is_float(0),), optional=True, normalize=to_float),
    FieldRule("notes", (is_string(),), optional=True),
)

PESTICIDE_RULES: tuple[FieldRule, ...] = (
    FieldRule("cropId", (is_string(), not_empty())),
    FieldRule("pestType", (is_in(PEST_TYPES),)),
    FieldRule("severity", (is_in(LEVELS),)),
    FieldRule("budget", (is_float(0),), normalize=to_float),
)

PROGRESS_UPDATE_RULES: tuple[FieldRule, ...] = (
    FieldRule("stage", (is_in(PROGRESS_STAGES),)),
    FieldRule("completed", (is_bool(),)),
    FieldRule("notes", (is_string(),), optional=True),
    FieldRule("costs", (is_amount_map(COST_BUCKETS),), optional=True),
)
