from __future__ import annotations
import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Dict, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.schemas import DataRecord, Organization
from services.errors import StoreError
from settings import get_settings

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class JsonTable(Generic[ModelT]):
    """Thread-safe keyed table of pydantic models, optionally mirrored to a JSON file."""

    def __init__(
        self,
        name: str,
        model: Type[ModelT],
        key: str = "id",
        persistence_path: Optional[Path] = None,
    ) -> None:
        self.name = name
        self.model = model
        self.key = key
        self._items: Dict[str, ModelT] = {}
        self.persistence_path = persistence_path
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def put_item(self, item: ModelT) -> None:
        item_key = getattr(item, self.key)
        with self._lock:
            previous = self._items.get(item_key)
            self._items[item_key] = item.model_copy(deep=True)
            try:
                self._persist()
            except StoreError:
                if previous is None:
                    self._items.pop(item_key, None)
                else:
                    self._items[item_key] = previous
                raise

    def replace_item(self, item: ModelT) -> bool:
        """Overwrite an item only if its key is still present; return whether it was written."""

        item_key = getattr(item, self.key)
        with self._lock:
            previous = self._items.get(item_key)
            if previous is None:
                return False
            self._items[item_key] = item.model_copy(deep=True)
            try:
                self._persist()
            except StoreError:
                self._items[item_key] = previous
                raise
            return True

    def get_item(self, key: str) -> Optional[ModelT]:
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            return item.model_copy(deep=True)

    def delete_item(self, key: str) -> Optional[ModelT]:
        """Remove and return the item stored under ``key``, if any."""

        with self._lock:
            removed = self._items.pop(key, None)
            if removed is None:
                return None
            try:
                self._persist()
            except StoreError:
                self._items[key] = removed
                raise
            return removed

    def scan(self) -> list[ModelT]:
        """Return deep copies of all stored items in insertion order."""

        with self._lock:
            return [item.model_copy(deep=True) for item in self._items.values()]

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        payload = {key: item.model_dump(mode="json") for key, item in self._items.items()}
        scratch = self.persistence_path.with_name(self.persistence_path.name + ".tmp")
        try:
            scratch.write_text(json.dumps(payload, indent=2))
            os.replace(scratch, self.persistence_path)
        except OSError as exc:
            raise StoreError(
                f"Could not write table {self.name!r} to {self.persistence_path}."
            ) from exc

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "{}"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            data = {}
        if not isinstance(data, dict):
            data = {}

        for key, payload in data.items():
            try:
                self._items[key] = self.model.model_validate(payload)
            except ValidationError:
                logger.warning(
                    "Skipped unreadable stored item",
                    extra={"entity": self.name, "record_id": key, "reason": "invalid_payload"},
                )


def _resolve_path(path: Optional[str]) -> Optional[Path]:
    return Path(path) if path else None


@lru_cache
def build_default_data_table(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> JsonTable[DataRecord]:
    settings = get_settings()
    table_name = settings.data_table_name if name is None else name
    table_path = settings.data_table_path if path is None else path
    return JsonTable(
        name=table_name, model=DataRecord, persistence_path=_resolve_path(table_path)
    )


@lru_cache
def build_default_organization_table(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> JsonTable[Organization]:
    settings = get_settings()
    table_name = settings.organization_table_name if name is None else name
    table_path = settings.organization_table_path if path is None else path
    return JsonTable(
        name=table_name, model=Organization, persistence_path=_resolve_path(table_path)
    )
