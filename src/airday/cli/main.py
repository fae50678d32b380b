"""
Main CLI application using Typer.

Provides the operator command line for airday: running the station server
and previewing the day a playlist file would produce.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import typer

from ..infra.exceptions import AirdayError
from ..infra.logging import configure_logging
from ..runtime.broadcast_day import to_epoch_ms
from ..runtime.clock import SteppedMasterClock, SystemMasterClock
from ..runtime.scheduler_service import SchedulerService
from ..web.server import run_server

app = typer.Typer(help="airday station operator CLI")


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Override LOG_LEVEL for this run"),
):
    """Configure logging before any command runs."""
    configure_logging(log_level)


def _parse_at(at: str | None) -> datetime:
    if at is None:
        return datetime.fromtimestamp(SystemMasterClock().now(), tz=timezone.utc)
    try:
        moment = datetime.fromisoformat(at)
    except ValueError as e:
        raise ValueError(f"Invalid --at value. Use ISO 8601: {e}")
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _parse_hhmm(value: str) -> tuple[int, int]:
    if not isinstance(value, str):
        raise ValueError(f"Invalid override {value!r}. Use HH:MM")
    try:
        hour, minute = value.split(":")
        return int(hour), int(minute)
    except ValueError:
        raise ValueError(f"Invalid override '{value}'. Use HH:MM")


def _fmt(epoch_seconds: float) -> str:
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def load_playlist(service: SchedulerService, path: Path) -> None:
    """Feed a JSON list of track payloads into ``service``.

    A payload may carry ``"override": "HH:MM"`` to pin that track.
    """
    payloads = json.loads(path.read_text())
    if not isinstance(payloads, list):
        raise ValueError("Playlist file must contain a JSON list of tracks")
    for payload in payloads:
        override = payload.pop("override", None) if isinstance(payload, dict) else None
        result = service.add(payload)
        if override is not None:
            hour, minute = _parse_hhmm(override)
            service.set_override(result.track.id, hour, minute)


@app.command("serve")
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from HOST)"),
    port: int = typer.Option(None, "--port", "-p", help="Listen port (default from PORT)"),
):
    """Run the station HTTP server."""
    run_server(host=host, port=port)


@app.command("preview")
def preview(
    playlist_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of tracks"),
    at: str = typer.Option(None, "--at", help="Instant to preview (ISO 8601, default now, naive = UTC)"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Print the day a playlist produces and what would be on air at --at.

    Examples:
        airday preview tracks.json
        airday preview tracks.json --at 2026-03-01T09:05:00Z --json
    """
    try:
        moment = _parse_at(at)
        clock = SteppedMasterClock.at(moment)
        service = SchedulerService(clock=clock)
        load_playlist(service, playlist_file)
        events = service.full_schedule()
        state = service.currently_playing()
    except (AirdayError, ValueError) as e:
        if json_output:
            code = getattr(e, "code", "VALIDATION_ERROR")
            typer.echo(json.dumps({"status": "error", "code": code, "message": str(e)}, indent=2))
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if json_output:
        payload = {
            "status": "ok",
            "now": to_epoch_ms(state.now),
            "live": {
                "status": state.status.value,
                "track_id": state.event.track.id if state.event else None,
                "elapsed": state.elapsed,
            },
            "events": [
                {
                    "track_id": e.track.id,
                    "title": e.track.title,
                    "start": to_epoch_ms(e.start),
                    "duration": e.duration,
                    "pinned": e.pinned,
                }
                for e in events
            ],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    typer.echo(f"Schedule for {_fmt(state.now)[:10]} ({len(events)} events)")
    for event in events:
        marker = "*" if event.pinned else " "
        typer.echo(f" {marker} {_fmt(event.start)}  {event.duration:>7.1f}s  {event.track.title}")
    if state.event is not None:
        typer.echo(
            f"On air at {_fmt(state.now)}: {state.event.track.title} "
            f"({state.status.value}, elapsed {state.elapsed:.1f}s)"
        )
    else:
        typer.echo(f"On air at {_fmt(state.now)}: nothing ({state.status.value})")


if __name__ == "__main__":
    app()
