"""Crop plan aggregation: statistics and calendar.

Both functions fold over the plans of one farm in store iteration order.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

TOP_CROPS_LIMIT = 5


def as_datetime(value: Any) -> datetime | None:
    """Coerce a stored date (datetime or ISO string) to datetime."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def top_crops(crop_ids: Iterable[str], limit: int = TOP_CROPS_LIMIT) -> list[dict[str, Any]]:
    """Most frequent crop ids, descending; ties keep first-seen order."""
    counts = Counter(crop_ids)
    # Counter preserves insertion order and sorted() is stable
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [{"cropId": crop_id, "count": count} for crop_id, count in ranked[:limit]]


def compute_crop_statistics(
    plans: Iterable[Mapping[str, Any]],
    top_n: int = TOP_CROPS_LIMIT,
) -> dict[str, Any]:
    """Fold crop plans into totals, top crops and a monthly breakdown.

    Months are keyed ``"0"``..``"11"`` from the planting date.
    """
    total_plans = 0
    completed_plans = 0
    total_area = 0.0
    total_costs = 0.0
    total_yield = 0.0
    crop_ids: list[str] = []
    monthly: dict[str, dict[str, float]] = {}

    for plan in plans:
        area = _number(plan.get("area"))
        costs = _number((plan.get("costs") or {}).get("total"))
        total_plans += 1
        total_area += area
        total_costs += costs
        total_yield += _number((plan.get("yields") or {}).get("actual"))

        if plan.get("status") == "completed":
            completed_plans += 1

        if plan.get("cropId"):
            crop_ids.append(plan["cropId"])

        planted = as_datetime(plan.get("plantingDate"))
        if planted is not None:
            bucket = monthly.setdefault(str(planted.month - 1), {"plans": 0, "area": 0, "costs": 0})
            bucket["plans"] += 1
            bucket["area"] += area
            bucket["costs"] += costs

    return {
        "totalPlans": total_plans,
        "completedPlans": completed_plans,
        "totalArea": total_area,
        "totalCosts": total_costs,
        "totalYield": total_yield,
        "averageYield": total_yield / total_plans if total_plans else 0,
        "topCrops": top_crops(crop_ids, top_n),
        "monthlyBreakdown": monthly,
    }


def build_crop_calendar(
    plans: Iterable[tuple[str, Mapping[str, Any]]],
    year: int | None = None,
) -> list[dict[str, Any]]:
    """Calendar entries for the plans, optionally restricted to a planting year."""
    calendar: list[dict[str, Any]] = []
    for plan_id, plan in plans:
        start = as_datetime(plan.get("plantingDate"))
        if year is not None and (start is None or start.year != year):
            continue
        end = as_datetime(plan.get("expectedHarvestDate"))
        calendar.append(
            {
                "id": plan_id,
                "cropId": plan.get("cropId"),
                "title": plan.get("cropName") or plan.get("cropId"),
                "start": start.isoformat() if start else None,
                "end": end.isoformat() if end else None,
                "status": plan.get("status"),
                "area": plan.get("area"),
            }
        )
    return calendar
