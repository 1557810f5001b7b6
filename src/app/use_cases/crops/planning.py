"""Use cases that write crop plans.

Plans are written whole once, at creation. Afterwards progress flags are
assigned and cost buckets incremented field by field, so concurrent
updates from different workflow stages add up instead of overwriting
each other.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from api.validators.crops import CROP_PLANNING_RULES, PROGRESS_UPDATE_RULES
from api.validators.rules import validate_or_raise
from app.domain._base import utcnow
from app.domain.crop_plan import CropPlan, build_plan_id
from app.protocols.document_store import DocumentWrite
from config.logging import log_business_event
from utils.errors import AccessDenied, InfrastructureError, InternalError, NotFoundError

if TYPE_CHECKING:
    from app.bootstrap.container import Collections
    from app.domain.claims import Claims
    from app.domain.farm import Farm
    from app.protocols.document_store import DocumentStoreProtocol

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class CreateCropPlanUseCase:
    """Creates the plan and folds it into the farm aggregates in one batch."""

    def __init__(self, store: DocumentStoreProtocol, collections: Collections) -> None:
        self._store = store
        self._collections = collections

    async def execute(self, claims: Claims, farm: Farm, payload: dict[str, Any]) -> dict[str, Any]:
        values = validate_or_raise(payload, CROP_PLANNING_RULES)
        now = utcnow()
        plan = CropPlan(
            id=build_plan_id(farm.id, values["cropId"], now),
            farm_id=farm.id,
            crop_id=values["cropId"],
            user_id=claims.uid,
            area=values["area"],
            planting_date=_parse_date(values["plantingDate"]),
            expected_harvest_date=_parse_date(values["expectedHarvestDate"]),
            seed_quantity=values.get("seedQuantity", 0),
            fertilizer_plan=payload.get("fertilizerPlan"),
            irrigation_plan=payload.get("irrigationPlan"),
            pest_management_plan=payload.get("pestManagementPlan"),
            budget=values["budget"],
            notes=values.get("notes"),
            season=values["season"],
            crop_name=payload.get("cropName"),
            created_at=now,
            updated_at=now,
        )

        try:
            await self._store.write_batch(
                [
                    DocumentWrite(self._collections.crop_plans, plan.id, data=plan.to_store_dict()),
                    DocumentWrite(
                        self._collections.farms,
                        farm.id,
                        fields={"updatedAt": now},
                        increments={"totalPlannedArea": plan.area},
                        array_unions={"cropPlans": [plan.id]},
                    ),
                ]
            )
        except NotFoundError as exc:
            raise NotFoundError("The specified farm does not exist", error="Farm not found") from exc
        except InfrastructureError as exc:
            logger.error(
                "crop_plan_create_failed",
                extra={"farm_id": farm.id, "error_type": type(exc).__name__},
            )
            raise InternalError("Unable to create crop plan", error="Crop planning failed") from exc

        log_business_event(
            logger,
            "crops",
            "crop_plan_created",
            user_id=claims.uid,
            farm_id=farm.id,
            crop_id=plan.crop_id,
            area=plan.area,
            budget=plan.budget,
        )
        return {"message": "Crop plan created successfully", "cropPlan": plan.to_response_dict()}


class UpdatePlanProgressUseCase:
    """Sets one progress flag and adds cost increments.

    ``costs.total`` grows by the sum of the bucket increments in the same
    update. Access: plan owner, caller bound to the plan's farm, or admin.
    """

    def __init__(self, store: DocumentStoreProtocol, collections: Collections) -> None:
        self._store = store
        self._collections = collections

    async def execute(self, claims: Claims, plan_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        values = validate_or_raise(payload, PROGRESS_UPDATE_RULES)
        stage = values["stage"]
        completed = values["completed"]

        try:
            plan = await self._store.get(self._collections.crop_plans, plan_id)
            if plan is None:
                raise NotFoundError(
                    "The specified crop plan does not exist",
                    error="Crop plan not found",
                )
            if not self._can_update(claims, plan):
                raise AccessDenied("You do not have access to this crop plan")

            now = utcnow()
            fields: dict[str, Any] = {"updatedAt": now, f"progress.{stage}": completed}
            if values.get("notes"):
                fields["notes"] = f"{plan.get('notes') or ''}\n{now.isoformat()}: {values['notes']}"

            increments = {
                f"costs.{bucket}": float(amount)
                for bucket, amount in (values.get("costs") or {}).items()
            }
            if increments:
                increments["costs.total"] = sum(increments.values())

            await self._store.update(
                self._collections.crop_plans,
                plan_id,
                fields=fields,
                increments=increments or None,
            )
        except InfrastructureError as exc:
            logger.error(
                "crop_plan_update_failed",
                extra={"plan_id": plan_id, "error_type": type(exc).__name__},
            )
            raise InternalError("Unable to update crop plan progress", error="Update failed") from exc

        log_business_event(
            logger,
            "crops",
            "crop_plan_updated",
            user_id=claims.uid,
            plan_id=plan_id,
            stage=stage,
            completed=completed,
        )
        return {"message": "Crop plan progress updated successfully"}

    @staticmethod
    def _can_update(claims: Claims, plan: dict[str, Any]) -> bool:
        if claims.is_admin or plan.get("userId") == claims.uid:
            return True
        return claims.farm_id is not None and plan.get("farmId") == claims.farm_id
