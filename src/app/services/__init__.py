"""Application services.

Reusable orchestration units; concrete IO lives in app/infra/.
"""

from app.services.credential_verifier import CredentialVerifier, extract_bearer_token
from app.services.crop_statistics import build_crop_calendar, compute_crop_statistics
from app.services.guards import (
    PROCEED,
    GuardContext,
    GuardResult,
    authenticate,
    require_farm_access,
    require_role,
    run_guards,
)
from app.services.notifications import DeliveryOutcome, NotificationDispatcher
from app.services.rooms import RoomHub
from app.services.side_effects import SideEffectResult, SideEffectRunner

__all__ = [
    "PROCEED",
    "CredentialVerifier",
    "DeliveryOutcome",
    "GuardContext",
    "GuardResult",
    "NotificationDispatcher",
    "RoomHub",
    "SideEffectResult",
    "SideEffectRunner",
    "authenticate",
    "build_crop_calendar",
    "compute_crop_statistics",
    "extract_bearer_token",
    "require_farm_access",
    "require_role",
    "run_guards",
]
