"""Field-level validation of candidate sensor readings."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Callable, List, Mapping, Optional, Tuple

from models.records import FieldViolation, ValidatedRecord, ViolationKind
from services.errors import RecordValidationError

INTEGER_FIELDS = ("soil_moisture", "light_level", "relative_humidity", "temperature")
DATE_FIELD = "date"
ORGANIZATION_FIELD = "organization_id"
RECORD_FIELDS = INTEGER_FIELDS + (DATE_FIELD, ORGANIZATION_FIELD)

_Checked = Tuple[Any, Optional[FieldViolation]]

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _missing(field: str) -> FieldViolation:
    return FieldViolation(field=field, kind=ViolationKind.missing, message=f"{field} is required")


def _check_integer(field: str, value: Any) -> _Checked:
    wrong_type = FieldViolation(
        field=field,
        kind=ViolationKind.wrong_type,
        message=f"{field} must be an integer",
    )
    if isinstance(value, bool):
        return None, wrong_type
    if isinstance(value, int):
        return value, None
    if isinstance(value, float):
        if value.is_integer():
            return int(value), None
        return None, wrong_type
    if isinstance(value, str):
        candidate = value.strip()
        if _INTEGER_PATTERN.fullmatch(candidate) is None:
            return None, wrong_type
        return int(candidate), None
    return None, wrong_type


def _check_date(field: str, value: Any) -> _Checked:
    if isinstance(value, datetime):
        return value.date(), None
    if isinstance(value, date):
        return value, None
    if not isinstance(value, str):
        return None, FieldViolation(
            field=field,
            kind=ViolationKind.wrong_type,
            message=f"{field} must be a calendar date",
        )

    candidate = value.strip()
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        return date.fromisoformat(candidate), None
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(candidate).date(), None
    except ValueError:
        return None, FieldViolation(
            field=field,
            kind=ViolationKind.wrong_format,
            message=f"{field} must be an ISO date (YYYY-MM-DD)",
        )


def _check_organization(field: str, value: Any) -> _Checked:
    if not isinstance(value, str):
        return None, FieldViolation(
            field=field,
            kind=ViolationKind.wrong_type,
            message=f"{field} must be a string identifier",
        )
    return value.strip(), None


_CHECKS: Tuple[Tuple[str, Callable[[str, Any], _Checked]], ...] = tuple(
    [(name, _check_integer) for name in INTEGER_FIELDS]
    + [(DATE_FIELD, _check_date), (ORGANIZATION_FIELD, _check_organization)]
)


def collect_violations(candidate: Mapping[str, Any]) -> Tuple[dict, List[FieldViolation]]:
    """Check every field of ``candidate`` and return cleaned values plus all violations."""
    cleaned: dict = {}
    violations: List[FieldViolation] = []
    for field, check in _CHECKS:
        raw = candidate.get(field)
        if _is_missing(raw):
            violations.append(_missing(field))
            continue
        value, violation = check(field, raw)
        if violation is not None:
            violations.append(violation)
            continue
        cleaned[field] = value
    return cleaned, violations


def validate(candidate: Mapping[str, Any]) -> ValidatedRecord:
    """Return the validated caller-settable fields or raise ``RecordValidationError``.

    Keys outside the record's mutable fields (``id``, ``created_at`` and so on)
    are ignored.
    """
    cleaned, violations = collect_violations(candidate)
    if violations:
        raise RecordValidationError(violations)
    return ValidatedRecord(**cleaned)
