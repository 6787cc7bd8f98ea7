"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Lets several commands reuse the same tables/panels.
"""

from __future__ import annotations

from typing import Mapping

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import AppSettings
from core.domain.models import DispatchOutcome


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped in non-interactive/pipeline modes)."""

    title = Text("posthaste", style="bold cyan")
    subtitle = Text("Bounded-concurrency HTTP dispatch", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_settings_table(settings: AppSettings) -> Table:
    table = Table(title="Effective settings")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    if settings.allow_any_destination:
        destinations = "any"
    else:
        destinations = ", ".join(settings.allowed_destinations) or "(none)"

    table.add_row("Input file", str(settings.input_path))
    table.add_row("Max concurrency", str(settings.max_concurrency))
    table.add_row("Request timeout", f"{settings.request_timeout_seconds:g}s")
    table.add_row("Allowed destinations", destinations)
    table.add_row("Idle connections", str(settings.max_idle_connections))
    table.add_row("Idle timeout", f"{settings.idle_connection_timeout_seconds:g}s")
    table.add_row("Handshake timeout", f"{settings.handshake_timeout_seconds:g}s")
    table.add_row("Log level", settings.log_level)
    return table


def build_summary_table(counts: Mapping[DispatchOutcome, int]) -> Table:
    """Per-outcome totals for a finished run."""

    table = Table(title="Dispatch summary")
    table.add_column("Outcome", style="cyan", no_wrap=True)
    table.add_column("Targets", justify="right")
    for outcome in DispatchOutcome:
        count = counts.get(outcome, 0)
        style = "red" if outcome.failed and count else None
        table.add_row(outcome.value, str(count), style=style)
    return table
