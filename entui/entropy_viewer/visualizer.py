"""Chart rendering for the entropy viewer.

Two outputs are produced from the same analysis:

    Live chart:  A braille line chart of entropy against file offset,
                 restricted to the viewport's window, with a status line
                 and a command help footer.  Built as ``rich``
                 renderables and redrawn every frame.

    Text map:    A one-line character heatmap plus region table for
                 non-interactive use (``--text``).  Each character
                 represents a proportional slice of the file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from entui.common.entropy import (
    COMPRESSED,
    ENCRYPTED,
    MAX_ENTROPY,
    PLAINTEXT,
    ZEROED,
    classify_entropy,
)
from entui.common.report import format_bytes, format_duration, format_percent

from .analyzer import Dataset
from .viewport import Viewport

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Character / colour mappings
# ---------------------------------------------------------------------------

_TEXT_CHARS: dict[str, str] = {
    ENCRYPTED: "█",    # Full block
    COMPRESSED: "▓",   # Dark shade
    PLAINTEXT: "░",    # Light shade
    ZEROED: "·",       # Middle dot
}

_STYLES: dict[str, str] = {
    ENCRYPTED: "red",
    COMPRESSED: "dark_orange",
    PLAINTEXT: "green",
    ZEROED: "grey50",
}

_CLASSIFICATION_LABELS: dict[str, str] = {
    ENCRYPTED: "Encrypted",
    COMPRESSED: "Compressed",
    PLAINTEXT: "Plaintext",
    ZEROED: "Zeroed/Sparse",
}

HELP_TEXT = "Commands: [-/+] Zoom | [Arrows] Scroll | [h] Toggle Hex Offsets | [q] Quit"

Y_BOUNDS: tuple[float, float] = (0.0, MAX_ENTROPY)
Y_LABELS: tuple[str, ...] = ("0", "4", "8")

# Braille dot bits indexed by [row][column] inside a 2x4 cell.
_BRAILLE_BASE = 0x2800
_BRAILLE_DOTS = (
    (0x01, 0x08),
    (0x02, 0x10),
    (0x04, 0x20),
    (0x40, 0x80),
)


# ---------------------------------------------------------------------------
# Chart model
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ChartModel:
    """Everything the renderer needs to draw one frame.

    The series is not filtered to the window; the renderer clips it.
    """

    series: list[tuple[float, float]]
    x_bounds: tuple[float, float]
    y_bounds: tuple[float, float]
    x_labels: list[str]
    title: str = "Shannon Entropy"
    x_title: str = "File Offset"
    y_title: str = "Entropy"


def build_chart_model(viewport: Viewport, dataset: Dataset) -> ChartModel:
    return ChartModel(
        series=dataset.points,
        x_bounds=(viewport.window_start, viewport.window_end),
        y_bounds=Y_BOUNDS,
        x_labels=viewport.axis_labels(),
    )


# ---------------------------------------------------------------------------
# Braille canvas
# ---------------------------------------------------------------------------


class BrailleCanvas:
    """A monochrome pixel grid packed into braille characters.

    Each terminal cell holds 2 x 4 pixels, so a canvas of *width* x
    *height* cells has ``2 * width`` x ``4 * height`` pixels.  Pixel row 0
    is the top of the canvas.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = max(width, 1)
        self.height = max(height, 1)
        self._cells = [[0] * self.width for _ in range(self.height)]

    @property
    def pixel_width(self) -> int:
        return self.width * 2

    @property
    def pixel_height(self) -> int:
        return self.height * 4

    def set(self, px: int, py: int) -> None:
        if 0 <= px < self.pixel_width and 0 <= py < self.pixel_height:
            self._cells[py // 4][px // 2] |= _BRAILLE_DOTS[py % 4][px % 2]

    def line(self, x0: int, y0: int, x1: int, y1: int) -> None:
        """Draw a line with Bresenham's algorithm."""
        dx = abs(x1 - x0)
        dy = -abs(y1 - y0)
        sx = 1 if x0 < x1 else -1
        sy = 1 if y0 < y1 else -1
        err = dx + dy
        while True:
            self.set(x0, y0)
            if x0 == x1 and y0 == y1:
                break
            e2 = 2 * err
            if e2 >= dy:
                err += dy
                x0 += sx
            if e2 <= dx:
                err += dx
                y0 += sy

    def rows(self) -> list[str]:
        return ["".join(chr(_BRAILLE_BASE + bits) for bits in row) for row in self._cells]


def plot_series(model: ChartModel, width: int, height: int) -> list[str]:
    """Draw the model's series as a braille line chart of *width* x *height* cells."""
    canvas = BrailleCanvas(width, height)
    x_min, x_max = model.x_bounds
    y_min, y_max = model.y_bounds
    x_span = x_max - x_min
    y_span = y_max - y_min
    if x_span <= 0 or y_span <= 0:
        return canvas.rows()

    def to_pixel(x: float, y: float) -> tuple[int, int]:
        px = round((x - x_min) / x_span * (canvas.pixel_width - 1))
        py = round((y_max - y) / y_span * (canvas.pixel_height - 1))
        return px, py

    series = model.series
    if len(series) == 1:
        x, y = series[0]
        if x_min <= x <= x_max:
            canvas.set(*to_pixel(x, y))
        return canvas.rows()

    for (xa, ya), (xb, yb) in zip(series, series[1:]):
        # Segment entirely outside the window on one side.
        if xb < x_min or xa > x_max:
            continue
        # Clip the segment to the window so off-screen points do not
        # produce huge pixel coordinates.
        if xa < x_min:
            ya = ya + (yb - ya) * (x_min - xa) / (xb - xa)
            xa = x_min
        if xb > x_max:
            yb = ya + (yb - ya) * (x_max - xa) / (xb - xa)
            xb = x_max
        canvas.line(*to_pixel(xa, ya), *to_pixel(xb, yb))

    return canvas.rows()


def _x_axis_line(labels: list[str], width: int) -> str:
    """Spread three labels across *width* columns: left, centre, right."""
    if width <= 0:
        return ""
    line = [" "] * width
    left, middle, right = labels

    def place(text: str, start: int) -> None:
        start = max(0, min(start, width - len(text)))
        for i, ch in enumerate(text[: width - start]):
            line[start + i] = ch

    place(left, 0)
    place(middle, (width - len(middle)) // 2)
    place(right, width - len(right))
    return "".join(line)


def render_chart(model: ChartModel, width: int, height: int) -> RenderableType:
    """Render *model* as a bordered ``rich`` panel of *width* x *height* cells."""
    y_label_width = max(len(label) for label in Y_LABELS) + 1
    # Panel border (2) + y-axis gutter + axis rule column.
    plot_width = max(width - 2 - y_label_width - 1, 1)
    # Panel border (2) + x-axis rule + labels + axis title.
    plot_height = max(height - 2 - 3, 1)

    rows = plot_series(model, plot_width, plot_height)

    text = Text()
    for i, row in enumerate(rows):
        if i == 0:
            label = Y_LABELS[-1]
        elif i == len(rows) - 1:
            label = Y_LABELS[0]
        elif i == len(rows) // 2:
            label = Y_LABELS[len(Y_LABELS) // 2]
        else:
            label = ""
        text.append(f"{label:>{y_label_width}}", style="grey70")
        text.append("│", style="grey50")
        text.append(row, style="cyan")
        text.append("\n")

    gutter = " " * y_label_width
    text.append(gutter + "└" + "─" * plot_width + "\n", style="grey50")
    text.append(gutter + " " + _x_axis_line(model.x_labels, plot_width) + "\n", style="grey70")
    text.append(gutter + " " + model.x_title.center(plot_width), style="grey70")

    return Panel(
        text,
        title=Text(model.title, style="bold cyan"),
        subtitle=Text(model.y_title, style="grey70"),
        subtitle_align="left",
        border_style="grey50",
        padding=0,
        width=width,
        height=height,
    )


def render_status(viewport: Viewport, dataset: Dataset) -> Text:
    """One-line summary of the samples under the visible window."""
    visible = viewport.visible_samples(dataset)
    status = Text(no_wrap=True, overflow="ellipsis")
    status.append(f"{dataset.file_path.name} ", style="bold")
    status.append(
        f"[{viewport.format_offset(viewport.window_start)} - "
        f"{viewport.format_offset(viewport.window_end)}] "
    )
    if not visible:
        status.append("no samples in view", style="grey50")
        return status

    entropies = [s.entropy for s in visible]
    avg = sum(entropies) / len(entropies)
    cls = classify_entropy(avg, dataset.entropy_threshold)
    status.append(
        f"blocks {len(visible)} | avg {avg:.3f} min {min(entropies):.3f} "
        f"max {max(entropies):.3f} | "
    )
    status.append(_CLASSIFICATION_LABELS[cls], style=_STYLES[cls])
    return status


def render_frame(
    viewport: Viewport,
    dataset: Dataset,
    width: int,
    height: int,
) -> RenderableType:
    """Compose the full screen: chart, status line and command help."""
    chart_height = max(height - 2, 6)
    chart = render_chart(build_chart_model(viewport, dataset), width, chart_height)
    return Group(
        chart,
        render_status(viewport, dataset),
        Text(HELP_TEXT, style="white", no_wrap=True, overflow="ellipsis"),
    )


# ---------------------------------------------------------------------------
# Text map
# ---------------------------------------------------------------------------


def render_text_map(dataset: Dataset, width: int = 100) -> Text:
    """Generate a text-based entropy map of the file.

    Each character represents a proportional slice of the offset range;
    its glyph is the classification of the block at the slice midpoint.

    Parameters
    ----------
    dataset:
        Analysis result from :class:`EntropyAnalyzer`.
    width:
        Number of characters in the map.
    """
    text = Text()
    rule = "=" * width + "\n"

    text.append(rule)
    text.append(f"Entropy Map: {dataset.file_path.name}\n", style="bold")
    text.append(
        f"File size: {format_bytes(dataset.file_size)} | "
        f"Block size: {format_bytes(dataset.block_size)} | "
        f"Blocks: {len(dataset.samples)} | "
        f"Scan time: {format_duration(dataset.scan_duration_seconds)}\n"
    )
    text.append(rule)
    text.append("\n")

    if dataset.samples:
        bytes_per_char = dataset.total_size / width
        block_size = dataset.block_size
        for i in range(width):
            midpoint = int((i + 0.5) * bytes_per_char)
            index = min(midpoint // block_size, len(dataset.samples) - 1)
            sample = dataset.samples[index]
            cls = classify_entropy(sample.entropy, dataset.entropy_threshold)
            text.append(_TEXT_CHARS[cls], style=_STYLES[cls])
        text.append("\n")
    else:
        text.append("(empty file)\n")

    text.append("\nLegend:")
    for cls, char in _TEXT_CHARS.items():
        text.append("  ")
        text.append(char, style=_STYLES[cls])
        text.append(f" = {_CLASSIFICATION_LABELS[cls]}")
    text.append("\n")
    return text


def render_region_table(dataset: Dataset) -> Table:
    """Tabulate the contiguous regions of equal classification."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Start Offset", justify="right")
    table.add_column("End Offset", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Classification", no_wrap=True)
    table.add_column("Avg Entropy", justify="right")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")

    for idx, region in enumerate(dataset.regions(), 1):
        table.add_row(
            str(idx),
            f"{region.start_offset:,}",
            f"{region.end_offset:,}",
            format_bytes(region.size),
            Text(
                _CLASSIFICATION_LABELS[region.classification],
                style=_STYLES[region.classification],
            ),
            f"{region.avg_entropy:.4f}",
            f"{region.min_entropy:.3f}",
            f"{region.max_entropy:.3f}",
        )
    return table


def summary_stats(dataset: Dataset) -> dict[str, str]:
    """Key statistics for the closing summary panel."""
    return {
        "File size": format_bytes(dataset.file_size),
        "Blocks": str(len(dataset.samples)),
        "Mean entropy": f"{dataset.mean_entropy:.3f}",
        "Min / max": f"{dataset.min_entropy:.3f} / {dataset.max_entropy:.3f}",
        "High entropy": (
            f"{format_bytes(dataset.total_encrypted)} "
            f"({format_percent(dataset.total_encrypted, dataset.file_size)})"
        ),
        "Regions": str(len(dataset.regions())),
    }
