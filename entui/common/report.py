"""Shared terminal output helpers for the entropy viewer.

Terminal output goes through a single module-level ``rich`` console so
that banners, progress bars, log records and the live chart all share
one writer and never tear each other's output.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.text import Text

# A module-level console instance used by all printing helpers.
_console: Console = Console()


def get_console() -> Console:
    """Return the shared :class:`rich.console.Console`."""
    return _console


# ---------------------------------------------------------------------------
# Terminal output
# ---------------------------------------------------------------------------

def print_banner(tool_name: str, version: str = "0.1.0") -> None:
    """Print a styled banner identifying the tool and its version."""
    title_text = Text(tool_name, style="bold white")
    subtitle = Text(f"v{version}", style="dim")
    panel = Panel(
        title_text,
        subtitle=subtitle,
        border_style="bright_blue",
        expand=False,
        padding=(1, 4),
    )
    _console.print(panel)


def print_summary(title: str, stats: dict[str, Any]) -> None:
    """Print a summary box with key statistics."""
    lines: list[str] = []
    for key, value in stats.items():
        lines.append(f"[bold]{key}:[/bold] {value}")
    body = "\n".join(lines)
    panel = Panel(body, title=title, border_style="green", expand=False)
    _console.print(panel)


def create_progress(console: Console | None = None, disable: bool = False) -> Progress:
    """Create a configured :class:`rich.progress.Progress` bar.

    Shows a spinner, description, bar, count, elapsed time and estimated
    time remaining.  The bar is transient so it does not linger once
    the scan has finished.  A disabled bar still accepts tasks and
    updates but draws nothing.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
        console=console or _console,
        transient=True,
        disable=disable,
    )


# ---------------------------------------------------------------------------
# Formatting utilities
# ---------------------------------------------------------------------------

_BYTE_UNITS: list[tuple[int, str]] = [
    (1 << 40, "TiB"),
    (1 << 30, "GiB"),
    (1 << 20, "MiB"),
    (1 << 10, "KiB"),
]


def format_bytes(n: int) -> str:
    """Return a human-readable byte-size string using IEC binary units.

    Examples: ``"1.5 GiB"``, ``"256 MiB"``, ``"0 B"``.
    """
    if n < 0:
        raise ValueError(f"Byte count must be non-negative, got {n}")

    for threshold, unit in _BYTE_UNITS:
        if n >= threshold:
            value = n / threshold
            # Drop the decimal when it would be ".0".
            if value == int(value):
                return f"{int(value)} {unit}"
            return f"{value:.1f} {unit}"

    return f"{n} B"


def format_duration(seconds: float) -> str:
    """Return a human-readable duration string.

    Sub-second durations are shown in milliseconds, since small files
    are analysed almost instantly.  Examples: ``"12ms"``, ``"2m 34s"``,
    ``"1h 5m 0s"``.
    """
    if seconds < 0:
        raise ValueError(f"Duration must be non-negative, got {seconds}")

    if seconds < 1:
        return f"{int(seconds * 1000)}ms"

    total = int(seconds)
    h, remainder = divmod(total, 3600)
    m, s = divmod(remainder, 60)

    if h > 0:
        return f"{h}h {m}m {s}s"
    if m > 0:
        return f"{m}m {s}s"
    return f"{s}s"


def format_percent(value: float, total: float) -> str:
    """Return a percentage string with one decimal place.

    A zero *total* returns ``"0.0%"``.
    """
    if total == 0:
        return "0.0%"
    return f"{(value / total) * 100:.1f}%"
