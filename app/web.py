from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from app.schemas import DataQuery, DataRecord
from models.records import FieldViolation
from services.errors import (
    OrganizationReferenceError,
    RecordNotFoundError,
    RecordValidationError,
    StoreError,
)
from services.gateway import DataGateway, build_default_gateway
from services.organizations import OrganizationService, build_default_organization_service
from services.validation import RECORD_FIELDS


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


def get_gateway() -> DataGateway:
    return build_default_gateway()


def get_organizations() -> OrganizationService:
    return build_default_organization_service()


def _errors_by_field(violations: Iterable[FieldViolation]) -> Dict[str, str]:
    return {violation.field: violation.message for violation in violations}


def _form_values(form: Mapping[str, Any]) -> Dict[str, Any]:
    return {field: form.get(field) for field in RECORD_FIELDS}


def _record_values(record: DataRecord) -> Dict[str, Any]:
    values = record.model_dump(include=set(RECORD_FIELDS))
    values["date"] = record.date.isoformat()
    return values


def _render_form(
    request: Request,
    organizations: OrganizationService,
    values: Mapping[str, Any],
    action: str,
    title: str,
    errors: Optional[Dict[str, str]] = None,
    form_error: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "ui/form.html",
        {
            "title": title,
            "action": action,
            "values": values,
            "errors": errors or {},
            "form_error": form_error,
            "organizations": organizations.list(),
        },
        status_code=status_code,
    )


def _redirect_to_index() -> RedirectResponse:
    return RedirectResponse(url="/ui/data", status_code=status.HTTP_303_SEE_OTHER)


router = APIRouter(include_in_schema=False)


@router.get("/ui/data", name="ui_data_index", response_class=HTMLResponse)
async def ui_data_index(
    request: Request,
    organization_id: Optional[str] = None,
    gateway: DataGateway = Depends(get_gateway),
    organizations: OrganizationService = Depends(get_organizations),
) -> HTMLResponse:
    records = gateway.list(DataQuery(organization_id=organization_id or None))
    names = {org.id: org.name for org in organizations.list()}
    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {
            "records": records,
            "organization_names": names,
        },
    )


@router.get("/ui/data/create", name="ui_data_create", response_class=HTMLResponse)
async def ui_data_create(
    request: Request,
    organization_id: Optional[str] = None,
    organizations: OrganizationService = Depends(get_organizations),
) -> HTMLResponse:
    values = {
        "soil_moisture": 0,
        "light_level": 0,
        "relative_humidity": 0,
        "temperature": 0,
        "date": date.today().isoformat(),
        "organization_id": organization_id,
    }
    return _render_form(request, organizations, values, action="/ui/data/create", title="Create Data")


@router.post("/ui/data/create", name="ui_data_create_submit", response_class=HTMLResponse)
async def ui_data_create_submit(
    request: Request,
    gateway: DataGateway = Depends(get_gateway),
    organizations: OrganizationService = Depends(get_organizations),
) -> Response:
    values = _form_values(await request.form())
    render = dict(
        request=request,
        organizations=organizations,
        values=values,
        action="/ui/data/create",
        title="Create Data",
        status_code=422,
    )
    try:
        gateway.create(values)
    except (RecordValidationError, OrganizationReferenceError) as exc:
        return _render_form(errors=_errors_by_field(exc.violations), **render)
    except StoreError as exc:
        render["status_code"] = status.HTTP_503_SERVICE_UNAVAILABLE
        return _render_form(form_error=str(exc), **render)
    return _redirect_to_index()


@router.get("/ui/data/{record_id}/edit", name="ui_data_edit", response_class=HTMLResponse)
async def ui_data_edit(
    request: Request,
    record_id: str,
    gateway: DataGateway = Depends(get_gateway),
    organizations: OrganizationService = Depends(get_organizations),
) -> HTMLResponse:
    try:
        record = gateway.get_by_id(record_id)
    except RecordNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return _render_form(
        request,
        organizations,
        _record_values(record),
        action=f"/ui/data/{record_id}/edit",
        title="Edit Data",
    )


@router.post("/ui/data/{record_id}/edit", name="ui_data_edit_submit", response_class=HTMLResponse)
async def ui_data_edit_submit(
    request: Request,
    record_id: str,
    gateway: DataGateway = Depends(get_gateway),
    organizations: OrganizationService = Depends(get_organizations),
) -> Response:
    values = _form_values(await request.form())
    render = dict(
        request=request,
        organizations=organizations,
        values=values,
        action=f"/ui/data/{record_id}/edit",
        title="Edit Data",
        status_code=422,
    )
    try:
        gateway.update_by_id(record_id, values)
    except RecordNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except (RecordValidationError, OrganizationReferenceError) as exc:
        return _render_form(errors=_errors_by_field(exc.violations), **render)
    except StoreError as exc:
        render["status_code"] = status.HTTP_503_SERVICE_UNAVAILABLE
        return _render_form(form_error=str(exc), **render)
    return _redirect_to_index()


@router.post("/ui/data/{record_id}/delete", name="ui_data_delete")
async def ui_data_delete(
    record_id: str,
    gateway: DataGateway = Depends(get_gateway),
) -> RedirectResponse:
    try:
        gateway.delete_by_id(record_id)
    except RecordNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except StoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    return _redirect_to_index()
