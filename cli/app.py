from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_organizations, render_record, render_records


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for managing sensor readings through the data service API.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


def _record_fields(
    soil_moisture: int,
    light_level: int,
    relative_humidity: int,
    temperature: int,
    date: datetime,
    organization_id: str,
) -> Dict[str, Any]:
    return {
        "soil_moisture": soil_moisture,
        "light_level": light_level,
        "relative_humidity": relative_humidity,
        "temperature": temperature,
        "date": date.date().isoformat(),
        "organization_id": organization_id,
    }


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Data service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each API request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("list")
def list_command(
    ctx: typer.Context,
    organization_id: Optional[str] = typer.Option(
        None, "--organization-id", "-o", help="Only show this organization's readings."
    ),
    record_id: Optional[str] = typer.Option(None, "--id", help="Only show the reading with this id."),
) -> None:
    """List sensor readings."""
    state = _get_state(ctx)
    render_records(state.client.list_data(organization_id=organization_id, record_id=record_id))


@app.command("get")
def get_command(
    ctx: typer.Context,
    record_id: str = typer.Argument(..., help="Identifier of the reading."),
) -> None:
    """Show a single sensor reading."""
    state = _get_state(ctx)
    render_record(state.client.get_data(record_id))


@app.command("create")
def create_command(
    ctx: typer.Context,
    organization_id: str = typer.Option(..., "--organization-id", "-o", help="Owning organization."),
    date: datetime = typer.Option(..., "--date", formats=["%Y-%m-%d"], help="Observation date."),
    soil_moisture: int = typer.Option(..., "--soil-moisture"),
    light_level: int = typer.Option(..., "--light-level"),
    relative_humidity: int = typer.Option(..., "--relative-humidity"),
    temperature: int = typer.Option(..., "--temperature"),
) -> None:
    """Record a new sensor reading."""
    state = _get_state(ctx)
    fields = _record_fields(
        soil_moisture, light_level, relative_humidity, temperature, date, organization_id
    )
    payload = state.client.create_data(fields)
    typer.secho(f"Created data record id={payload.get('id')}", fg=typer.colors.GREEN)
    render_record(payload)


@app.command("update")
def update_command(
    ctx: typer.Context,
    record_id: str = typer.Argument(..., help="Identifier of the reading to replace."),
    organization_id: str = typer.Option(..., "--organization-id", "-o", help="Owning organization."),
    date: datetime = typer.Option(..., "--date", formats=["%Y-%m-%d"], help="Observation date."),
    soil_moisture: int = typer.Option(..., "--soil-moisture"),
    light_level: int = typer.Option(..., "--light-level"),
    relative_humidity: int = typer.Option(..., "--relative-humidity"),
    temperature: int = typer.Option(..., "--temperature"),
) -> None:
    """Replace every field of an existing sensor reading."""
    state = _get_state(ctx)
    fields = _record_fields(
        soil_moisture, light_level, relative_humidity, temperature, date, organization_id
    )
    payload = state.client.update_data(record_id, fields)
    typer.secho(f"Updated data record id={payload.get('id')}", fg=typer.colors.GREEN)
    render_record(payload)


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    record_id: str = typer.Argument(..., help="Identifier of the reading to delete."),
) -> None:
    """Delete a sensor reading."""
    state = _get_state(ctx)
    payload = state.client.delete_data(record_id)
    typer.secho(f"Deleted data record id={payload.get('id')}", fg=typer.colors.GREEN)


@app.command("organizations")
def organizations_command(ctx: typer.Context) -> None:
    """List registered organizations."""
    state = _get_state(ctx)
    render_organizations(state.client.list_organizations())


@app.command("add-organization")
def add_organization_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Display name of the organization."),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
) -> None:
    """Register an organization that readings can belong to."""
    state = _get_state(ctx)
    payload = state.client.create_organization(name, description)
    typer.secho(
        f"Created organization id={payload.get('id')} name={payload.get('name')}",
        fg=typer.colors.GREEN,
    )


if __name__ == "__main__":
    app()
