"""Read-only crop use cases: details, calendar and statistics."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from app.services.crop_statistics import build_crop_calendar, compute_crop_statistics
from config.logging import log_performance
from utils.errors import InfrastructureError, InternalError, NotFoundError, ValidationFailure

if TYPE_CHECKING:
    from app.bootstrap.container import Collections
    from app.protocols.document_store import DocumentStoreProtocol

logger = logging.getLogger(__name__)

GROWING_GUIDE_FIELDS = (
    "plantingTime",
    "harvestTime",
    "waterRequirements",
    "soilRequirements",
    "pestManagement",
    "diseaseManagement",
    "harvestingTips",
    "storageTips",
)


class CropDetailsUseCase:
    def __init__(self, store: DocumentStoreProtocol, collections: Collections) -> None:
        self._store = store
        self._collections = collections

    async def execute(self, crop_id: str) -> dict[str, Any]:
        try:
            crop = await self._store.get(self._collections.crops, crop_id)
        except InfrastructureError as exc:
            logger.error("crop_details_failed", extra={"crop_id": crop_id, "error_type": type(exc).__name__})
            raise InternalError(
                "Unable to fetch crop information",
                error="Failed to retrieve crop details",
            ) from exc

        if crop is None:
            raise NotFoundError("The specified crop does not exist", error="Crop not found")

        return {
            "message": "Crop details retrieved successfully",
            "crop": crop,
            "growingGuide": {field: crop.get(field) for field in GROWING_GUIDE_FIELDS},
        }


class _FarmPlansReader:
    def __init__(self, store: DocumentStoreProtocol, collections: Collections) -> None:
        self._store = store
        self._collections = collections

    async def _plans(self, farm_id: str, *, failure: str, message: str) -> list[tuple[str, dict[str, Any]]]:
        try:
            return await self._store.find_by_field(self._collections.crop_plans, "farmId", farm_id)
        except InfrastructureError as exc:
            logger.error("farm_plans_read_failed", extra={"farm_id": farm_id, "error_type": type(exc).__name__})
            raise InternalError(message, error=failure) from exc


class CropCalendarUseCase(_FarmPlansReader):
    async def execute(self, farm_id: str, year: str | None = None) -> dict[str, Any]:
        year_filter: int | None = None
        if year:
            try:
                year_filter = int(year)
            except ValueError as exc:
                raise ValidationFailure(
                    details=[{"field": "year", "message": "Must be an integer", "value": year}]
                ) from exc

        plans = await self._plans(
            farm_id,
            failure="Failed to retrieve crop calendar",
            message="Unable to fetch calendar data",
        )
        return {
            "message": "Crop calendar retrieved successfully",
            "calendar": build_crop_calendar(plans, year_filter),
        }


class CropStatisticsUseCase(_FarmPlansReader):
    """Scans every plan of the farm and folds it into the statistics."""

    async def execute(self, farm_id: str, period: str | None = None) -> dict[str, Any]:
        started_at = time.perf_counter()
        plans = await self._plans(
            farm_id,
            failure="Failed to retrieve crop statistics",
            message="Unable to fetch statistics data",
        )
        stats = compute_crop_statistics(data for _, data in plans)
        log_performance(
            logger,
            "crop_statistics",
            (time.perf_counter() - started_at) * 1000,
            farm_id=farm_id,
            plan_count=stats["totalPlans"],
        )
        return {
            "message": "Crop statistics retrieved successfully",
            "period": period,
            "stats": stats,
        }
