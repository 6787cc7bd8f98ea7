"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from cli.ui_components import build_settings_table
from core.config import AppSettings, get_user_env_file, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await asyncio.wait_for(
                client.get(url),
                settings.request_timeout_seconds,
            )
        return True, f"HTTP {response.status_code}"
    except asyncio.TimeoutError:
        return False, f"timed out after {settings.request_timeout_seconds:g}s"
    except Exception as exc:
        return False, str(exc) or exc.__class__.__name__


@app.command()
def run() -> None:
    """Show the effective settings and probe every allowed destination."""

    settings = AppSettings()
    _console.print(build_settings_table(settings))

    table = Table(title="posthaste Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    env_file = get_user_env_file()
    table.add_row("User config", "OK" if env_file.exists() else "OPTIONAL", str(env_file))

    input_path = settings.input_path
    table.add_row("Input file", "OK" if input_path.is_file() else "MISSING", str(input_path))

    # Connectivity (best-effort)
    if settings.allow_any_destination:
        table.add_row("Destinations", "OK", "allow-list disabled, nothing to probe")
    else:
        for url in settings.allowed_destinations:
            ok, detail = asyncio.run(_check_http(url, settings))
            table.add_row(f"HTTP {url}", "OK" if ok else "FAIL", detail)

    _console.print(table)


@app.command(name="setup")
def setup(
    assignments: List[str] = typer.Argument(..., help="KEY=VALUE pairs, e.g. max_concurrency=20."),
    env_file: Optional[Path] = typer.Option(
        None, "--env-file", help="Target .env (defaults to the user config dir)."
    ),
) -> None:
    """Store settings in the user config .env (no manual editing needed)."""

    values: dict[str, str] = {}
    for item in assignments:
        key, sep, value = item.partition("=")
        key = key.strip().lower()
        if not sep or key not in AppSettings.model_fields:
            raise typer.BadParameter(f"expected KEY=VALUE with a known setting, got {item!r}")
        values[f"POSTHASTE_{key.upper()}"] = value.strip()

    env_path = write_user_env_vars(values, env_path=env_file)
    _console.print(f"[green]Saved config to:[/green] {env_path}")
