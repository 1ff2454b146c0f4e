"""Pydantic schemas for the HTTP API layer and the backing tables."""

from __future__ import annotations

from datetime import date as CalendarDate, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class DataRecord(BaseModel):
    """A persisted sensor reading."""

    id: str = Field(..., description="Store-assigned identifier.")
    soil_moisture: int
    light_level: int
    relative_humidity: int
    temperature: int
    date: CalendarDate = Field(..., description="Observation date.")
    organization_id: str
    created_at: datetime
    updated_at: datetime


class Organization(BaseModel):
    """The owner of sensor readings."""

    id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class OrganizationCreate(BaseModel):
    name: str = Field(..., description="Display name of the organization.")
    description: Optional[str] = None


class DataQuery(BaseModel):
    """Filters accepted when listing sensor readings."""

    id: Optional[str] = None
    organization_id: Optional[str] = None
    offset: int = Field(default=0, ge=0)
    limit: Optional[int] = Field(default=None, ge=1)


class FieldErrorDetail(BaseModel):
    field: str
    kind: str
    message: str


class ErrorResponse(BaseModel):
    """Body returned for rejected requests."""

    detail: str
    errors: List[FieldErrorDetail] = Field(default_factory=list)
