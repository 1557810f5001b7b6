"""Rule tables for the /api/auth routes."""

from __future__ import annotations

from api.validators.rules import (
    FieldRule,
    is_email,
    is_float,
    is_in,
    is_mobile_phone,
    is_object,
    is_string,
    is_string_list,
    min_length,
    normalize_email,
    not_empty,
    to_float,
    trim,
    trim_items,
)
from app.domain.claims import ROLES
from app.domain.user_profile import EXPERIENCE_LEVELS, LANGUAGES

REGISTRATION_RULES: tuple[FieldRule, ...] = (
    FieldRule("email", (is_email(),), normalize=normalize_email),
    FieldRule("password", (is_string(), min_length(8))),
    FieldRule("firstName", (is_string(), min_length(2)), normalize=trim),
    FieldRule("lastName", (is_string(), min_length(2)), normalize=trim),
    FieldRule("phoneNumber", (is_mobile_phone(),), normalize=trim),
    FieldRule("location", (is_object(),)),
    FieldRule("location.lat", (is_float(),), normalize=to_float),
    FieldRule("location.lng", (is_float(),), normalize=to_float),
    FieldRule("location.address", (is_string(),)),
    FieldRule("language", (is_in(LANGUAGES),), optional=True),
    FieldRule("role", (is_in(ROLES),), optional=True),
    FieldRule("farmSize", (is_float(minimum=0),), optional=True, normalize=to_float),
    FieldRule("crops", (is_string_list(),), optional=True, normalize=trim_items),
    FieldRule("experience", (is_in(EXPERIENCE_LEVELS),), optional=True),
)

LOGIN_RULES: tuple[FieldRule, ...] = (
    FieldRule("email", (is_email(),), normalize=normalize_email),
    FieldRule("password", (not_empty(),)),
)

FORGOT_PASSWORD_RULES: tuple[FieldRule, ...] = (
    FieldRule("email", (is_email(),), normalize=normalize_email),
)
