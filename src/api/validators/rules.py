"""Declarative field rules.

A rule table is a sequence of ``FieldRule``: a dotted path into the payload,
the checks it must pass and an optional normalizer. ``evaluate`` runs the
whole table and collects every violation; it never stops at the first one.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from utils.errors import ValidationFailure

_MISSING = object()

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
# E.164-ish: optional +, 7 to 15 digits, spaces and dashes tolerated
_PHONE_RE = re.compile(r"^\+?[0-9][0-9\s\-]{6,18}$")

Predicate = Callable[[Any], bool]


@dataclass(frozen=True, slots=True)
class Check:
    predicate: Predicate
    message: str


@dataclass(frozen=True, slots=True)
class FieldRule:
    """Checks for one (possibly nested) payload field.

    Attributes:
        path: Dotted path (``"location.lat"``)
        checks: Evaluated in order; the first failure is reported
        optional: Absent or null values skip the checks
        normalize: Applied to the value once all checks pass
    """

    path: str
    checks: tuple[Check, ...] = ()
    optional: bool = False
    normalize: Callable[[Any], Any] | None = None


@dataclass(slots=True)
class Evaluation:
    values: dict[str, Any] = field(default_factory=dict)
    violations: list[dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations


# ──────────────────────────────────────────────────────────────────────────────
# Predicates
# ──────────────────────────────────────────────────────────────────────────────


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    if isinstance(value, str):
        try:
            return math.isfinite(float(value))
        except ValueError:
            return False
    return False


def is_string() -> Check:
    return Check(lambda v: isinstance(v, str), "Must be a string")


def not_empty() -> Check:
    return Check(lambda v: v is not None and str(v).strip() != "", "Must not be empty")


def min_length(size: int) -> Check:
    return Check(
        lambda v: isinstance(v, str) and len(v.strip()) >= size,
        f"Must be at least {size} characters",
    )


def is_email() -> Check:
    return Check(lambda v: isinstance(v, str) and bool(_EMAIL_RE.match(v.strip())), "Invalid email")


def is_mobile_phone() -> Check:
    return Check(
        lambda v: isinstance(v, str) and bool(_PHONE_RE.match(v.strip())),
        "Invalid mobile phone number",
    )


def is_float(minimum: float | None = None, maximum: float | None = None) -> Check:
    def _check(value: Any) -> bool:
        if not _is_number(value):
            return False
        number = float(value)
        if minimum is not None and number < minimum:
            return False
        return maximum is None or number <= maximum

    if minimum is not None and maximum is not None:
        message = f"Must be a number between {minimum:g} and {maximum:g}"
    elif minimum is not None:
        message = f"Must be a number >= {minimum:g}"
    else:
        message = "Must be a number"
    return Check(_check, message)


def is_in(options: Sequence[str]) -> Check:
    return Check(lambda v: v in options, f"Must be one of: {', '.join(options)}")


def is_string_list() -> Check:
    return Check(
        lambda v: isinstance(v, list) and all(isinstance(i, str) and i.strip() for i in v),
        "Must be a list of non-empty strings",
    )


def is_object() -> Check:
    return Check(lambda v: isinstance(v, Mapping), "Must be an object")


def is_bool() -> Check:
    return Check(lambda v: isinstance(v, bool), "Must be a boolean")


def is_iso_date() -> Check:
    def _check(value: Any) -> bool:
        if not isinstance(value, str):
            return False
        try:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return False
        return True

    return Check(_check, "Must be an ISO 8601 date")


def is_amount_map(keys: Sequence[str]) -> Check:
    """Mapping of allowed keys to non-negative numbers."""

    def _check(value: Any) -> bool:
        if not isinstance(value, Mapping):
            return False
        return all(
            key in keys and _is_number(amount) and float(amount) >= 0
            for key, amount in value.items()
        )

    return Check(_check, f"Must map {', '.join(keys)} to non-negative numbers")


# ──────────────────────────────────────────────────────────────────────────────
# Normalizers
# ──────────────────────────────────────────────────────────────────────────────


def normalize_email(value: str) -> str:
    return value.strip().lower()


def trim(value: str) -> str:
    return value.strip()


def to_float(value: Any) -> float:
    return float(value)


def trim_items(values: list[str]) -> list[str]:
    return [value.strip() for value in values]


# ──────────────────────────────────────────────────────────────────────────────
# Evaluation
# ──────────────────────────────────────────────────────────────────────────────


def _lookup(payload: Mapping[str, Any], path: str) -> Any:
    current: Any = payload
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def evaluate(payload: Mapping[str, Any], table: Sequence[FieldRule]) -> Evaluation:
    """Run every rule of ``table`` against ``payload``.

    Required fields that are absent produce a ``"Field is required"``
    violation; otherwise the first failing check of each field is reported.
    Normalized values are keyed by path in ``Evaluation.values``.
    """
    result = Evaluation()
    for rule in table:
        value = _lookup(payload, rule.path)
        if value is _MISSING or value is None:
            if not rule.optional:
                result.violations.append(
                    {"field": rule.path, "message": "Field is required", "value": None}
                )
            continue

        failed = next((check for check in rule.checks if not check.predicate(value)), None)
        if failed is not None:
            result.violations.append({"field": rule.path, "message": failed.message, "value": value})
            continue

        result.values[rule.path] = rule.normalize(value) if rule.normalize else value
    return result


def validate_or_raise(payload: Mapping[str, Any], table: Sequence[FieldRule]) -> dict[str, Any]:
    """Evaluate and raise ``ValidationFailure`` listing all violations.

    Returns:
        Normalized values keyed by dotted path.
    """
    result = evaluate(payload, table)
    if not result.ok:
        raise ValidationFailure(
            "One or more fields are invalid",
            details=result.violations,
        )
    return result.values
