from __future__ import annotations

from fastapi.testclient import TestClient

from services.gateway import DataGateway


def _form(org_id: str, **overrides) -> dict:
    form = {
        "soil_moisture": "42",
        "light_level": "10",
        "relative_humidity": "55",
        "temperature": "21",
        "date": "2024-01-01",
        "organization_id": org_id,
    }
    form.update(overrides)
    return form


def _org_id(services) -> str:
    _gateway, organizations = services
    return organizations.create("Greenhouse One").id


def test_create_form_renders_defaults(api_client: TestClient, services) -> None:
    org_id = _org_id(services)

    response = api_client.get("/ui/data/create", params={"organization_id": org_id})

    assert response.status_code == 200
    assert "Create Data" in response.text
    assert 'name="soil_moisture" value="0"' in response.text
    assert f'<option value="{org_id}" selected>Greenhouse One</option>' in response.text


def test_create_form_submission_redirects(api_client: TestClient, services) -> None:
    gateway: DataGateway = services[0]
    org_id = _org_id(services)

    response = api_client.post("/ui/data/create", data=_form(org_id), follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/ui/data"
    [record] = gateway.list()
    assert record.soil_moisture == 42
    assert record.organization_id == org_id

    index = api_client.get("/ui/data")
    assert index.status_code == 200
    assert "Greenhouse One" in index.text
    assert f"/ui/data/{record.id}/edit" in index.text


def test_create_form_shows_field_errors(api_client: TestClient, services) -> None:
    gateway: DataGateway = services[0]
    org_id = _org_id(services)

    response = api_client.post(
        "/ui/data/create",
        data=_form(org_id, light_level="2.5", organization_id=""),
    )

    assert response.status_code == 422
    assert "light_level must be an integer" in response.text
    assert "organization_id is required" in response.text
    assert 'name="light_level" value="2.5"' in response.text
    assert gateway.list() == []


def test_edit_form_prefills_and_updates(api_client: TestClient, services) -> None:
    gateway: DataGateway = services[0]
    org_id = _org_id(services)
    record = gateway.create(_form(org_id))

    page = api_client.get(f"/ui/data/{record.id}/edit")
    assert page.status_code == 200
    assert "Edit Data" in page.text
    assert 'value="2024-01-01"' in page.text

    response = api_client.post(
        f"/ui/data/{record.id}/edit",
        data=_form(org_id, temperature="18"),
        follow_redirects=False,
    )

    assert response.status_code == 303
    updated = gateway.get_by_id(record.id)
    assert updated.temperature == 18
    assert updated.created_at == record.created_at


def test_edit_unknown_record_returns_not_found(api_client: TestClient, services) -> None:
    org_id = _org_id(services)

    assert api_client.get("/ui/data/missing/edit").status_code == 404
    assert api_client.post("/ui/data/missing/edit", data=_form(org_id)).status_code == 404


def test_delete_from_index(api_client: TestClient, services) -> None:
    gateway: DataGateway = services[0]
    record = gateway.create(_form(_org_id(services)))

    response = api_client.post(f"/ui/data/{record.id}/delete", follow_redirects=False)

    assert response.status_code == 303
    assert gateway.list() == []


def _fail_replace(*_args, **_kwargs):
    raise OSError("read-only file system")


def test_store_failures_return_service_unavailable(
    api_client: TestClient, services, monkeypatch
) -> None:
    gateway: DataGateway = services[0]
    org_id = _org_id(services)
    record = gateway.create(_form(org_id))
    monkeypatch.setattr("datastore.json_table.os.replace", _fail_replace)

    created = api_client.post("/ui/data/create", data=_form(org_id))
    edited = api_client.post(f"/ui/data/{record.id}/edit", data=_form(org_id, temperature="18"))
    deleted = api_client.post(f"/ui/data/{record.id}/delete", follow_redirects=False)

    assert created.status_code == 503
    assert "Could not write table" in created.text
    assert edited.status_code == 503
    assert "Could not write table" in edited.text
    assert deleted.status_code == 503
    assert "Could not write table" in deleted.json()["detail"]
    assert [r.id for r in gateway.list()] == [record.id]
    assert gateway.get_by_id(record.id).temperature == 21
