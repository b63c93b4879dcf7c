from __future__ import annotations

from typing import Any, Dict, Iterable, Sequence, Tuple

import typer

from app.schemas import DiscoveryDescriptor


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_ingest_result(payload: Dict[str, Any]) -> None:
    echo_heading("Report Result")
    echo_key_values(
        [
            ("status", payload.get("status")),
            ("published", payload.get("published")),
            ("publish_failures", payload.get("publish_failures")),
        ]
    )

    skipped = payload.get("skipped") or []
    typer.echo()
    echo_heading("Skipped Fields")
    if skipped:
        for item in skipped:
            raw_value = item.get("raw_value")
            suffix = f" (raw={raw_value!r})" if raw_value is not None else ""
            typer.echo(f"  - {item.get('source_key')}: {item.get('reason')}{suffix}")
    else:
        typer.echo("No fields skipped.")


def render_descriptors(descriptors: Sequence[Tuple[str, DiscoveryDescriptor]]) -> None:
    echo_heading(f"Discovery Descriptors ({len(descriptors)})")
    for topic, descriptor in descriptors:
        typer.echo(topic)
        typer.echo(f"  {descriptor.to_payload()}")
