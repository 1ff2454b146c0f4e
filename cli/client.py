from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the sensor data service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def list_data(
        self,
        organization_id: Optional[str] = None,
        record_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params = {
            key: value
            for key, value in (("organization_id", organization_id), ("id", record_id))
            if value
        }
        return self._request("GET", "/data", params=params)

    def get_data(self, record_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/data/{record_id}")

    def create_data(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/data", json=fields)

    def update_data(self, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/data/{record_id}", json=fields)

    def delete_data(self, record_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/data/{record_id}")

    def list_organizations(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/organizations")

    def create_organization(self, name: str, description: Optional[str] = None) -> Dict[str, Any]:
        return self._request(
            "POST", "/organizations", json={"name": name, "description": description}
        )

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        field_errors: list = []
        try:
            data = exc.response.json()
            detail = data.get("detail")
            field_errors = data.get("errors") or []
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        for error in field_errors:
            typer.secho(
                f"  - {error.get('field')}: {error.get('message')}",
                fg=typer.colors.RED,
                err=True,
            )
        raise typer.Exit(code=1)
