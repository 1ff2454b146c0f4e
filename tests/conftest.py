from typing import Iterator, Tuple

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.schemas import DataRecord, Organization
from datastore.json_table import JsonTable
from services.gateway import DataGateway
from services.organizations import OrganizationService

_MODULES = ("app.main", "app.api", "app.web")


@pytest.fixture
def services(tmp_path) -> Tuple[DataGateway, OrganizationService]:
    organizations = OrganizationService(
        table=JsonTable(
            name="organizations",
            model=Organization,
            persistence_path=tmp_path / "organizations.json",
        )
    )
    gateway = DataGateway(
        table=JsonTable(name="data", model=DataRecord, persistence_path=tmp_path / "data.json"),
        organizations=organizations,
    )
    return gateway, organizations


@pytest.fixture
def api_client(services, monkeypatch) -> Iterator[TestClient]:
    gateway, organizations = services

    def build_test_gateway() -> DataGateway:
        return gateway

    def build_test_organizations() -> OrganizationService:
        return organizations

    build_test_gateway.cache_clear = lambda: None  # type: ignore[attr-defined]
    build_test_organizations.cache_clear = lambda: None  # type: ignore[attr-defined]

    for module in _MODULES:
        monkeypatch.setattr(f"{module}.build_default_gateway", build_test_gateway)
        monkeypatch.setattr(
            f"{module}.build_default_organization_service", build_test_organizations
        )

    app = create_app()
    with TestClient(app) as client:
        yield client
