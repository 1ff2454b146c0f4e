"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from app.schemas import DataQuery, DataRecord, ErrorResponse, Organization, OrganizationCreate
from services.errors import (
    OrganizationReferenceError,
    RecordNotFoundError,
    RecordValidationError,
    StoreError,
)
from services.gateway import DataGateway, build_default_gateway
from services.organizations import OrganizationService, build_default_organization_service

router = APIRouter()

_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
}


def get_gateway() -> DataGateway:
    return build_default_gateway()


def get_organizations() -> OrganizationService:
    return build_default_organization_service()


def rejected_write_response(
    exc: RecordValidationError | OrganizationReferenceError,
) -> JSONResponse:
    body = ErrorResponse(
        detail=str(exc),
        errors=[violation.to_dict() for violation in exc.violations],
    )
    return JSONResponse(
        status_code=422,
        content=body.model_dump(),
    )


def _not_found(exc: RecordNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _store_unavailable(exc: StoreError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


@router.get(
    "/data",
    response_model=List[DataRecord],
    summary="List sensor readings, optionally filtered by id or organization.",
)
async def list_data(
    id: Optional[str] = Query(None, description="Only return the record with this id."),
    organization_id: Optional[str] = Query(None, description="Only return this organization's records."),
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    gateway: DataGateway = Depends(get_gateway),
) -> List[DataRecord]:
    query = DataQuery(id=id, organization_id=organization_id, offset=offset, limit=limit)
    return gateway.list(query)


@router.post(
    "/data",
    status_code=status.HTTP_201_CREATED,
    response_model=DataRecord,
    responses=_ERROR_RESPONSES,
    summary="Create a sensor reading.",
)
async def create_data(
    payload: Dict[str, Any] = Body(..., description="Field values of the new reading."),
    gateway: DataGateway = Depends(get_gateway),
) -> DataRecord | JSONResponse:
    try:
        return gateway.create(payload)
    except (RecordValidationError, OrganizationReferenceError) as exc:
        return rejected_write_response(exc)
    except StoreError as exc:
        raise _store_unavailable(exc) from exc


@router.get(
    "/data/{record_id}",
    response_model=DataRecord,
    responses=_ERROR_RESPONSES,
    summary="Fetch a single sensor reading.",
)
async def get_data(
    record_id: str,
    gateway: DataGateway = Depends(get_gateway),
) -> DataRecord:
    try:
        return gateway.get_by_id(record_id)
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc


@router.put(
    "/data/{record_id}",
    response_model=DataRecord,
    responses=_ERROR_RESPONSES,
    summary="Replace the field values of a sensor reading.",
)
async def update_data(
    record_id: str,
    payload: Dict[str, Any] = Body(..., description="Replacement field values."),
    gateway: DataGateway = Depends(get_gateway),
) -> DataRecord | JSONResponse:
    try:
        return gateway.update_by_id(record_id, payload)
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc
    except (RecordValidationError, OrganizationReferenceError) as exc:
        return rejected_write_response(exc)
    except StoreError as exc:
        raise _store_unavailable(exc) from exc


@router.delete(
    "/data/{record_id}",
    response_model=DataRecord,
    responses=_ERROR_RESPONSES,
    summary="Delete a sensor reading.",
)
async def delete_data(
    record_id: str,
    gateway: DataGateway = Depends(get_gateway),
) -> DataRecord:
    try:
        return gateway.delete_by_id(record_id)
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc
    except StoreError as exc:
        raise _store_unavailable(exc) from exc


@router.get(
    "/organizations",
    response_model=List[Organization],
    summary="List organizations by name.",
)
async def list_organizations(
    organizations: OrganizationService = Depends(get_organizations),
) -> List[Organization]:
    return organizations.list()


@router.post(
    "/organizations",
    status_code=status.HTTP_201_CREATED,
    response_model=Organization,
    responses=_ERROR_RESPONSES,
    summary="Register an organization.",
)
async def create_organization(
    payload: OrganizationCreate,
    organizations: OrganizationService = Depends(get_organizations),
) -> Organization | JSONResponse:
    try:
        return organizations.create(payload.name, payload.description)
    except RecordValidationError as exc:
        return rejected_write_response(exc)
    except StoreError as exc:
        raise _store_unavailable(exc) from exc


@router.get(
    "/organizations/{organization_id}",
    response_model=Organization,
    responses=_ERROR_RESPONSES,
    summary="Fetch a single organization.",
)
async def get_organization(
    organization_id: str,
    organizations: OrganizationService = Depends(get_organizations),
) -> Organization:
    try:
        return organizations.get_by_id(organization_id)
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
