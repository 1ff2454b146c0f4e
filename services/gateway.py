"""Persistence gateway for sensor readings."""

from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from typing import Any, Callable, Mapping, Optional

from app.schemas import DataQuery, DataRecord
from datastore.json_table import JsonTable, build_default_data_table
from models.records import ValidatedRecord
from services.errors import (
    OrganizationReferenceError,
    RecordNotFoundError,
    RecordValidationError,
)
from services.organizations import (
    OrganizationDirectory,
    build_default_organization_service,
    new_id,
    utc_now,
)
from services.validation import validate
from settings import get_settings

logger = logging.getLogger(__name__)


class DataGateway:
    """Validates candidate readings and mediates every read and write of them."""

    def __init__(
        self,
        table: JsonTable[DataRecord],
        organizations: OrganizationDirectory,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_id,
        max_limit: int = 100,
    ) -> None:
        self.table = table
        self.organizations = organizations
        self.max_limit = max_limit
        self._clock = clock
        self._id_factory = id_factory

    def create(self, candidate: Mapping[str, Any]) -> DataRecord:
        """Validate ``candidate`` and persist it as a new record."""
        fields = self._validate(candidate, operation="create")
        self._ensure_organization(fields.organization_id, operation="create")

        now = self._clock()
        record = DataRecord(
            id=self._id_factory(),
            created_at=now,
            updated_at=now,
            **fields.as_fields(),
        )
        self.table.put_item(record)
        logger.info(
            "Created data record",
            extra={
                "entity": "data",
                "operation": "create",
                "record_id": record.id,
                "organization_id": record.organization_id,
            },
        )
        return record

    def get_by_id(self, record_id: str) -> DataRecord:
        record = self.table.get_item(record_id)
        if record is None:
            raise RecordNotFoundError("data", record_id)
        return record

    def update_by_id(self, record_id: str, candidate: Mapping[str, Any]) -> DataRecord:
        """Replace the mutable fields of an existing record.

        ``id`` and ``created_at`` are kept; ``updated_at`` never moves backwards.
        """
        existing = self.get_by_id(record_id)
        fields = self._validate(candidate, operation="update", record_id=record_id)
        self._ensure_organization(fields.organization_id, operation="update", record_id=record_id)

        now = self._clock()
        record = DataRecord(
            id=existing.id,
            created_at=existing.created_at,
            updated_at=max(now, existing.updated_at),
            **fields.as_fields(),
        )
        if not self.table.replace_item(record):
            # Deleted between the read above and this write.
            raise RecordNotFoundError("data", record_id)
        logger.info(
            "Updated data record",
            extra={
                "entity": "data",
                "operation": "update",
                "record_id": record.id,
                "organization_id": record.organization_id,
            },
        )
        return record

    def delete_by_id(self, record_id: str) -> DataRecord:
        removed = self.table.delete_item(record_id)
        if removed is None:
            raise RecordNotFoundError("data", record_id)
        logger.info(
            "Deleted data record",
            extra={"entity": "data", "operation": "delete", "record_id": record_id},
        )
        return removed

    def list(self, query: Optional[DataQuery] = None) -> list[DataRecord]:
        """Return records matching the query's filters, oldest first."""
        query = query or DataQuery()
        records = [
            record
            for record in self.table.scan()
            if (query.id is None or record.id == query.id)
            and (query.organization_id is None or record.organization_id == query.organization_id)
        ]
        records.sort(key=lambda record: record.created_at)

        limit = min(query.limit or self.max_limit, self.max_limit)
        page = records[query.offset : query.offset + limit]
        logger.debug(
            "Listed data records",
            extra={
                "entity": "data",
                "operation": "list",
                "organization_id": query.organization_id,
                "result_count": len(page),
            },
        )
        return page

    def _validate(
        self,
        candidate: Mapping[str, Any],
        operation: str,
        record_id: Optional[str] = None,
    ) -> ValidatedRecord:
        try:
            return validate(candidate)
        except RecordValidationError as exc:
            logger.warning(
                "Rejected invalid data record",
                extra={
                    "entity": "data",
                    "operation": operation,
                    "record_id": record_id,
                    "field": ",".join(exc.fields),
                    "error_count": len(exc.violations),
                },
            )
            raise

    def _ensure_organization(
        self,
        organization_id: str,
        operation: str,
        record_id: Optional[str] = None,
    ) -> None:
        if self.organizations.exists(organization_id):
            return
        logger.warning(
            "Rejected data record for unknown organization",
            extra={
                "entity": "data",
                "operation": operation,
                "record_id": record_id,
                "organization_id": organization_id,
                "reason": "unknown_reference",
            },
        )
        raise OrganizationReferenceError(organization_id)


@lru_cache
def build_default_gateway() -> DataGateway:
    """Factory that wires the gateway with the configured tables."""
    settings = get_settings()
    return DataGateway(
        table=build_default_data_table(),
        organizations=build_default_organization_service(),
        max_limit=settings.list_max_limit,
    )
