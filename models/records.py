"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date as CalendarDate
from enum import Enum
from typing import Any, Dict


class ViolationKind(str, Enum):
    """Why a single field was rejected."""

    missing = "missing"
    wrong_type = "wrong_type"
    wrong_format = "wrong_format"
    unknown_reference = "unknown_reference"


@dataclass(frozen=True, slots=True)
class FieldViolation:
    """One rejected field of a candidate record."""

    field: str
    kind: ViolationKind
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "kind": self.kind.value, "message": self.message}


@dataclass(frozen=True, slots=True)
class ValidatedRecord:
    """The caller-settable fields of a sensor reading, after validation."""

    soil_moisture: int
    light_level: int
    relative_humidity: int
    temperature: int
    date: CalendarDate
    organization_id: str

    def as_fields(self) -> Dict[str, Any]:
        return asdict(self)
