from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_DATA_TABLE_NAME_ENV = "DATA_TABLE_NAME"
_DATA_TABLE_PATH_ENV = "DATA_TABLE_PERSISTENCE_PATH"
_ORG_TABLE_NAME_ENV = "ORGANIZATION_TABLE_NAME"
_ORG_TABLE_PATH_ENV = "ORGANIZATION_TABLE_PERSISTENCE_PATH"
_LIST_MAX_LIMIT_ENV = "DATA_LIST_MAX_LIMIT"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    data_table_name: str
    data_table_path: Optional[str]
    organization_table_name: str
    organization_table_path: Optional[str]
    list_max_limit: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        data_table_name=_read_str_env(_DATA_TABLE_NAME_ENV, "data"),
        data_table_path=_read_optional_env(_DATA_TABLE_PATH_ENV, "./tmp/data.json"),
        organization_table_name=_read_str_env(_ORG_TABLE_NAME_ENV, "organizations"),
        organization_table_path=_read_optional_env(
            _ORG_TABLE_PATH_ENV, "./tmp/organizations.json"
        ),
        list_max_limit=_read_positive_int(_LIST_MAX_LIMIT_ENV, 100),
        log_level=_read_log_level("INFO"),
    )
