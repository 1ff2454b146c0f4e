from __future__ import annotations

from typing import Iterable

from datastore.json_table import build_default_data_table, build_default_organization_table
from services.gateway import build_default_gateway
from services.organizations import build_default_organization_service
from settings import get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


_CACHES = (
    get_settings,
    build_default_data_table,
    build_default_organization_table,
    build_default_organization_service,
    build_default_gateway,
)


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    data_path = tmp_path / "data.json"
    org_path = tmp_path / "orgs.json"

    monkeypatch.setenv("DATA_TABLE_NAME", "readings")
    monkeypatch.setenv("DATA_TABLE_PERSISTENCE_PATH", str(data_path))
    monkeypatch.setenv("ORGANIZATION_TABLE_NAME", "tenants")
    monkeypatch.setenv("ORGANIZATION_TABLE_PERSISTENCE_PATH", str(org_path))
    monkeypatch.setenv("DATA_LIST_MAX_LIMIT", "25")
    monkeypatch.setenv("LOG_LEVEL", " debug ")

    _clear_caches(_CACHES)
    try:
        gateway = build_default_gateway()
        organizations = build_default_organization_service()

        assert gateway.table.name == "readings"
        assert gateway.table.persistence_path == data_path
        assert organizations.table.name == "tenants"
        assert organizations.table.persistence_path == org_path
        assert gateway.organizations is organizations
        assert gateway.max_limit == 25
        assert get_settings().log_level == "DEBUG"
    finally:
        _clear_caches(_CACHES)


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("DATA_LIST_MAX_LIMIT", "-4")
    monkeypatch.setenv("DATA_TABLE_NAME", "   ")
    monkeypatch.setenv("DATA_TABLE_PERSISTENCE_PATH", "")

    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.list_max_limit == 100
        assert settings.data_table_name == "data"
        assert settings.data_table_path is None
    finally:
        get_settings.cache_clear()
