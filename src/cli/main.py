"""posthaste CLI (Typer).

Commands:
- `run`: dispatch one POST per target of the input list.
- `doctor run`: show effective settings and probe the allowed destinations.
- `doctor setup`: persist settings in the user config `.env`.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.dispatcher import DispatchHooks
from cli import doctor
from cli.ui_components import build_summary_table, print_banner
from core.config import AppSettings
from core.domain.errors import DispatchError, InvalidURL
from core.domain.models import DispatchOutcome, Target
from core.domain.urls import validate_url
from core.log_setup import configure_logging
from core.services.dispatch_pipeline import run_dispatch

app = typer.Typer(no_args_is_help=True, help="Bounded-concurrency HTTP dispatcher.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def _load_settings(overrides: dict[str, object]) -> AppSettings:
    try:
        return AppSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command(name="run")
def run_command(
    input_path: Optional[Path] = typer.Argument(
        None,
        help="JSON list of targets ([{\"location\": ...}]). Defaults to POSTHASTE_INPUT_PATH.",
    ),
    concurrency: Optional[int] = typer.Option(
        None, "--concurrency", "-c", min=1, help="Maximum requests in flight."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Per-request deadline in seconds."
    ),
    allow: Optional[List[str]] = typer.Option(
        None, "--allow", help="Destination to contact (repeatable). Replaces the configured list."
    ),
    allow_any: bool = typer.Option(False, "--allow-any", help="Contact every valid target."),
    data: Optional[str] = typer.Option(None, "--data", help="Value sent as `data` in the body."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ..."),
    banner: bool = typer.Option(False, "--banner/--no-banner", help="Print the banner first."),
    summary: bool = typer.Option(True, "--summary/--no-summary", help="Print per-outcome totals."),
) -> None:
    """Dispatch one request per target and wait for all of them."""

    allowed: list[str] | None = None
    if allow:
        try:
            allowed = [validate_url(url) for url in allow]
        except InvalidURL as exc:
            raise typer.BadParameter(str(exc), param_hint="--allow") from exc

    settings = _load_settings(
        {
            "input_path": input_path,
            "max_concurrency": concurrency,
            "request_timeout_seconds": timeout,
            "allowed_destinations": allowed,
            "allow_any_destination": allow_any or None,
            "payload_data": data,
            "log_level": log_level,
        }
    )
    try:
        configure_logging(settings.log_level, console=_err_console)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

    if banner:
        print_banner(_err_console)

    counts: Counter[DispatchOutcome] = Counter()

    def on_received(url: str, status: int, body: str) -> None:
        _console.print(f"Received data: {body}", markup=False, highlight=False, soft_wrap=True)

    def on_finished(target: Target, outcome: DispatchOutcome) -> None:
        counts[outcome] += 1

    hooks = DispatchHooks(received=on_received, finished=on_finished)

    try:
        asyncio.run(run_dispatch(settings=settings, hooks=hooks))
    except DispatchError as exc:
        _err_console.print(f"[bold red]Fatal:[/bold red] {exc}", highlight=False)
        raise typer.Exit(code=1) from exc

    if summary:
        _err_console.print(build_summary_table(counts))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
