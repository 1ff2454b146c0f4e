from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer

RECORD_COLUMNS = (
    "id",
    "date",
    "soil_moisture",
    "light_level",
    "relative_humidity",
    "temperature",
    "organization_id",
)


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_record(payload: Dict[str, Any]) -> None:
    echo_heading("Data Record")
    echo_key_values(
        (key, payload.get(key)) for key in RECORD_COLUMNS + ("created_at", "updated_at")
    )


def render_records(records: List[Dict[str, Any]]) -> None:
    echo_heading("Data")
    if not records:
        typer.echo("No records found.")
        return
    typer.echo("  ".join(RECORD_COLUMNS))
    for record in records:
        typer.echo("  ".join(str(record.get(column)) for column in RECORD_COLUMNS))


def render_organizations(organizations: List[Dict[str, Any]]) -> None:
    echo_heading("Organizations")
    if not organizations:
        typer.echo("No organizations registered.")
        return
    for organization in organizations:
        typer.echo(f"  - {organization.get('id')}: {organization.get('name')}")
