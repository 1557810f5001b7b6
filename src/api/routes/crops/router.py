"""Crop endpoints.

Every route is authenticated. Farm-scoped routes add the farm access
guard, which resolves ``farmId`` from the path, then the body, then the
query string.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from api.dependencies import guarded
from app.services.guards import GuardContext, require_farm_access
from app.use_cases.crops import (
    CreateCropPlanUseCase,
    CropCalendarUseCase,
    CropDetailsUseCase,
    CropRecommendationsUseCase,
    CropStatisticsUseCase,
    PesticideRecommendationsUseCase,
    UpdatePlanProgressUseCase,
)

router = APIRouter()

authenticated = guarded()
farm_scoped = guarded(require_farm_access())


@router.post("/recommendations")
async def crop_recommendations(guard: GuardContext = Depends(authenticated)) -> dict[str, Any]:
    use_case = CropRecommendationsUseCase(guard.services.recommendations)
    return await use_case.execute(guard.claims, dict(guard.body))


@router.post("/plan", status_code=status.HTTP_201_CREATED)
async def create_crop_plan(guard: GuardContext = Depends(farm_scoped)) -> dict[str, Any]:
    """Create a plan on a farm the caller may access.

    The farm guard runs before the rule table, so a body without ``farmId``
    is answered with "Farm ID required" alone, whatever else is wrong with it.
    """
    services = guard.services
    use_case = CreateCropPlanUseCase(services.store, services.collections)
    return await use_case.execute(guard.claims, guard.farm, dict(guard.body))


@router.put("/plan/{plan_id}/progress")
async def update_plan_progress(
    plan_id: str,
    guard: GuardContext = Depends(authenticated),
) -> dict[str, Any]:
    services = guard.services
    use_case = UpdatePlanProgressUseCase(services.store, services.collections)
    return await use_case.execute(guard.claims, plan_id, dict(guard.body))


@router.post("/pesticides")
async def pesticide_recommendations(guard: GuardContext = Depends(authenticated)) -> dict[str, Any]:
    use_case = PesticideRecommendationsUseCase(guard.services.recommendations)
    return await use_case.execute(guard.claims, dict(guard.body))


@router.get("/calendar/{farmId}")
async def crop_calendar(guard: GuardContext = Depends(farm_scoped)) -> dict[str, Any]:
    services = guard.services
    use_case = CropCalendarUseCase(services.store, services.collections)
    return await use_case.execute(guard.farm.id, guard.query.get("year"))


@router.get("/stats/{farmId}")
async def crop_statistics(guard: GuardContext = Depends(farm_scoped)) -> dict[str, Any]:
    services = guard.services
    use_case = CropStatisticsUseCase(services.store, services.collections)
    return await use_case.execute(guard.farm.id, guard.query.get("period"))


# Declared last: "/{crop_id}" would otherwise shadow the static GET paths
@router.get("/{crop_id}")
async def crop_details(
    crop_id: str,
    guard: GuardContext = Depends(authenticated),
) -> dict[str, Any]:
    services = guard.services
    return await CropDetailsUseCase(services.store, services.collections).execute(crop_id)
