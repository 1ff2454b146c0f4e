"""Exceptions raised by the validation and persistence services."""

from __future__ import annotations

from typing import Iterable, List

from models.records import FieldViolation, ViolationKind


class DataServiceError(Exception):
    """Base class for every error surfaced by the service layer."""


class RecordValidationError(DataServiceError):
    """One or more fields of a candidate record were rejected."""

    def __init__(self, violations: Iterable[FieldViolation]) -> None:
        self.violations: List[FieldViolation] = list(violations)
        fields = ", ".join(violation.field for violation in self.violations)
        super().__init__(f"Invalid fields: {fields}.")

    @property
    def fields(self) -> List[str]:
        return [violation.field for violation in self.violations]


class OrganizationReferenceError(DataServiceError):
    """The referenced organization does not exist."""

    def __init__(self, organization_id: str) -> None:
        self.organization_id = organization_id
        super().__init__(f"Organization {organization_id!r} does not exist.")

    @property
    def violations(self) -> List[FieldViolation]:
        return [
            FieldViolation(
                field="organization_id",
                kind=ViolationKind.unknown_reference,
                message=str(self),
            )
        ]


class RecordNotFoundError(DataServiceError, KeyError):
    """No stored record has the requested id."""

    def __init__(self, entity: str, record_id: str) -> None:
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity.capitalize()} record {record_id!r} not found.")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class StoreError(DataServiceError):
    """The backing store failed to read or write."""
