"""Organization lookups used to keep sensor readings referentially sound."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable, Optional, Protocol
from uuid import uuid4

from app.schemas import Organization
from datastore.json_table import JsonTable, build_default_organization_table
from models.records import FieldViolation, ViolationKind
from services.errors import RecordNotFoundError, RecordValidationError

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


class OrganizationDirectory(Protocol):
    """Anything that can answer whether an organization exists."""

    def exists(self, organization_id: str) -> bool:
        ...


class OrganizationService:

    def __init__(
        self,
        table: JsonTable[Organization],
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        self.table = table
        self._clock = clock
        self._id_factory = id_factory

    def exists(self, organization_id: str) -> bool:
        return self.table.get_item(organization_id) is not None

    def create(self, name: str, description: Optional[str] = None) -> Organization:
        cleaned = (name or "").strip()
        if not cleaned:
            raise RecordValidationError(
                [FieldViolation(field="name", kind=ViolationKind.missing, message="name is required")]
            )
        now = self._clock()
        organization = Organization(
            id=self._id_factory(),
            name=cleaned,
            description=(description or "").strip() or None,
            created_at=now,
            updated_at=now,
        )
        self.table.put_item(organization)
        logger.info(
            "Created organization",
            extra={"entity": "organization", "operation": "create", "record_id": organization.id},
        )
        return organization

    def get_by_id(self, organization_id: str) -> Organization:
        organization = self.table.get_item(organization_id)
        if organization is None:
            raise RecordNotFoundError("organization", organization_id)
        return organization

    def list(self) -> list[Organization]:
        return sorted(self.table.scan(), key=lambda org: (org.name.lower(), org.id))


@lru_cache
def build_default_organization_service() -> OrganizationService:
    return OrganizationService(table=build_default_organization_table())
