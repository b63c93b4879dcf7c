from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_descriptors, render_ingest_result
from models.fields import build_field_table
from services.derived import (
    DerivedMetricEngine,
    WIND_CHILL_MAX_TEMP_F,
    WIND_CHILL_MIN_SPEED_MPH,
    apparent_temperature,
    wind_chill,
)
from services.discovery import build_descriptors
from services.formatting import format_decimal
from settings import get_settings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for exercising the weather-station MQTT bridge.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


def _parse_assignments(assignments: List[str]) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for item in assignments:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got {item!r}.")
        fields[key] = value
    return fields


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Bridge base URL (defaults to BRIDGE_BASE_URL env or http://localhost:8090).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for the bridge to respond.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("send")
def send_command(
    ctx: typer.Context,
    fields: List[str] = typer.Argument(..., help="Station fields as KEY=VALUE, e.g. tempf=72.5."),
) -> None:
    """Send one station report to the bridge."""
    state = _get_state(ctx)
    params = _parse_assignments(fields)
    typer.echo(f"Sending {len(params)} field(s) to {state.config.base_url} ...")
    payload = state.client.send_report(params)
    render_ingest_result(payload)


@app.command("health")
def health_command(ctx: typer.Context) -> None:
    """Check that the bridge is up."""
    state = _get_state(ctx)
    payload = state.client.health()
    typer.secho(f"status: {payload.get('status')}", fg=typer.colors.GREEN)


@app.command("feels-like")
def feels_like_command(
    temperature: float = typer.Option(..., "--temperature", "-t", help="Air temperature in °F."),
    humidity: float = typer.Option(..., "--humidity", "-r", help="Relative humidity in %."),
) -> None:
    """Compute the apparent temperature locally."""
    typer.echo(f"{format_decimal(apparent_temperature(temperature, humidity), 1)} °F")


@app.command("wind-chill")
def wind_chill_command(
    temperature: float = typer.Option(..., "--temperature", "-t", help="Air temperature in °F."),
    wind_speed: float = typer.Option(..., "--wind-speed", "-w", help="Wind speed in mph."),
) -> None:
    """Compute the wind chill locally."""
    value = wind_chill(temperature, wind_speed)
    if value is None:
        typer.secho(
            (
                "Wind chill is undefined above "
                f"{WIND_CHILL_MAX_TEMP_F:g} °F or at wind speeds of {WIND_CHILL_MIN_SPEED_MPH:g} mph or less."
            ),
            fg=typer.colors.YELLOW,
            err=True,
        )
        raise typer.Exit(code=1)
    typer.echo(f"{format_decimal(value, 1)} °F")


@app.command("discovery")
def discovery_command() -> None:
    """Print the discovery descriptors the bridge publishes at startup."""
    settings = get_settings()
    engine = DerivedMetricEngine(settings.base_topic, settings.publish_computed_wind_chill)
    descriptors = build_descriptors(
        settings.base_topic,
        build_field_table(settings.include_indoor_temperature),
        engine.published_metrics,
    )
    render_descriptors(descriptors)
