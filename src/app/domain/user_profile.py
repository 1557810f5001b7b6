"""UserProfile - profile document created at registration."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, get_args

from pydantic import Field

from app.domain._base import StoreDocument, utcnow
from app.domain.claims import DEFAULT_ROLE, Role

Language = Literal["en", "fr", "sw", "ha", "yo", "ar"]
Experience = Literal["beginner", "intermediate", "expert"]

LANGUAGES: tuple[Language, ...] = get_args(Language)
DEFAULT_LANGUAGE: Language = "en"

EXPERIENCE_LEVELS: tuple[Experience, ...] = get_args(Experience)
DEFAULT_EXPERIENCE: Experience = "beginner"


class Location(StoreDocument):
    lat: float
    lng: float
    address: str = ""


class NotificationPreferences(StoreDocument):
    email: bool = True
    push: bool = True
    sms: bool = False


class PrivacyPreferences(StoreDocument):
    share_data: bool = False
    public_profile: bool = False


class Preferences(StoreDocument):
    notifications: NotificationPreferences = Field(default_factory=NotificationPreferences)
    privacy: PrivacyPreferences = Field(default_factory=PrivacyPreferences)


class UserStats(StoreDocument):
    total_harvests: int = 0
    total_revenue: float = 0
    crops_planted: int = 0


class UserProfile(StoreDocument):
    """Profile stored under ``users/<uid>``."""

    uid: str
    email: str
    first_name: str
    last_name: str
    phone_number: str
    location: Location
    language: Language = DEFAULT_LANGUAGE
    role: Role = DEFAULT_ROLE
    farm_size: float = 0
    crops: list[str] = Field(default_factory=list)
    experience: Experience = DEFAULT_EXPERIENCE
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    last_login_at: datetime | None = None
    preferences: Preferences = Field(default_factory=Preferences)
    stats: UserStats = Field(default_factory=UserStats)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
