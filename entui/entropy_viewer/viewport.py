"""Navigation state for the entropy chart.

The :class:`Viewport` is the window over the full offset range that the
chart displays.  It is mutated only through discrete :class:`Command`
values, each applied by :meth:`Viewport.apply`, so the navigation logic
can be exercised without a terminal or a timer.

Every transition re-establishes::

    0 <= window_start
    window_start + window_width <= total_size
    window_width >= min_window_width

Clamps are applied after the unclamped arithmetic, which makes repeated
pans or zooms at an edge idempotent.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from entui.common.entropy import Sample

from .analyzer import Dataset

logger = logging.getLogger(__name__)

# Fraction of the visible width moved by one pan step.
PAN_FRACTION: float = 0.1
ZOOM_IN_FACTOR: float = 0.9
ZOOM_OUT_FACTOR: float = 1.1
# Narrowest zoom, in blocks.
MIN_WINDOW_BLOCKS: int = 10


class DisplayMode(enum.Enum):
    """How offsets are formatted in axis labels."""

    DECIMAL = "decimal"
    HEXADECIMAL = "hexadecimal"


class Command(enum.Enum):
    """A single navigation request from the input dispatcher."""

    PAN_LEFT = "pan_left"
    PAN_RIGHT = "pan_right"
    ZOOM_IN = "zoom_in"
    ZOOM_OUT = "zoom_out"
    TOGGLE_HEX = "toggle_hex"
    QUIT = "quit"


@dataclass(slots=True)
class Viewport:
    """Mutable window over ``[0, total_size]``.

    ``block_size`` and ``total_size`` are fixed for the session; the
    remaining fields change only through the transition methods.
    """

    block_size: int
    total_size: float
    window_start: float = 0.0
    window_width: float = 0.0
    display_mode: DisplayMode = DisplayMode.DECIMAL
    quit_requested: bool = False

    def __post_init__(self) -> None:
        if self.block_size <= 0:
            raise ValueError(f"block_size must be positive, got {self.block_size}")
        if self.total_size <= 0:
            raise ValueError(f"total_size must be positive, got {self.total_size}")
        if self.window_width <= 0:
            self.window_width = self.total_size

    @classmethod
    def from_dataset(cls, dataset: Dataset) -> Viewport:
        """Initial state: the whole offset range is visible."""
        return cls(block_size=dataset.block_size, total_size=dataset.total_size)

    # -- derived values -----------------------------------------------------

    @property
    def min_window_width(self) -> float:
        """Narrowest allowed window.

        Ten blocks, capped at ``total_size`` so that files smaller than
        ten blocks keep the window inside the data range.
        """
        return min(float(self.block_size * MIN_WINDOW_BLOCKS), self.total_size)

    @property
    def window_end(self) -> float:
        return self.window_start + self.window_width

    @property
    def center(self) -> float:
        return self.window_start + self.window_width / 2

    @property
    def hex_mode(self) -> bool:
        return self.display_mode is DisplayMode.HEXADECIMAL

    # -- transitions --------------------------------------------------------

    def pan_left(self) -> None:
        step = self.window_width * PAN_FRACTION
        self.window_start = max(0.0, self.window_start - step)

    def pan_right(self) -> None:
        step = self.window_width * PAN_FRACTION
        self.window_start = min(self.window_start + step, self.total_size - self.window_width)

    def zoom_in(self) -> None:
        """Narrow the window around its center, pinned at the left edge."""
        new_width = max(self.window_width * ZOOM_IN_FACTOR, self.min_window_width)
        center = self.center
        self.window_start = max(0.0, center - new_width / 2)
        self.window_width = new_width

    def zoom_out(self) -> None:
        """Widen the window around its center, clamped on both edges."""
        new_width = min(self.window_width * ZOOM_OUT_FACTOR, self.total_size)
        center = self.center
        self.window_start = min(
            max(center - new_width / 2, 0.0),
            self.total_size - new_width,
        )
        self.window_width = new_width

    def toggle_hex(self) -> None:
        if self.display_mode is DisplayMode.DECIMAL:
            self.display_mode = DisplayMode.HEXADECIMAL
        else:
            self.display_mode = DisplayMode.DECIMAL

    def quit(self) -> None:
        self.quit_requested = True

    def apply(self, command: Command) -> bool:
        """Apply one *command*.

        Returns ``False`` without touching any field once a quit has been
        requested, ``True`` otherwise.
        """
        if self.quit_requested:
            logger.debug("Ignoring %s after quit", command.name)
            return False

        _TRANSITIONS[command](self)
        logger.debug(
            "%s -> start=%.1f width=%.1f mode=%s",
            command.name,
            self.window_start,
            self.window_width,
            self.display_mode.value,
        )
        return True

    # -- presentation helpers -----------------------------------------------

    def format_offset(self, value: float) -> str:
        """Format a byte offset as decimal or zero-padded 8-digit hex."""
        offset = int(value)
        if self.hex_mode:
            return f"0x{offset:08x}"
        return str(offset)

    def axis_labels(self) -> list[str]:
        """Labels for the window's start, midpoint and end."""
        start = int(self.window_start)
        width = int(self.window_width)
        return [
            self.format_offset(start),
            self.format_offset(start + width // 2),
            self.format_offset(start + width),
        ]

    def visible_samples(self, dataset: Dataset) -> list[Sample]:
        """Samples whose block overlaps the visible window."""
        start = self.window_start
        end = self.window_end
        return [s for s in dataset.samples if s.end_offset > start and s.offset < end]


_TRANSITIONS = {
    Command.PAN_LEFT: Viewport.pan_left,
    Command.PAN_RIGHT: Viewport.pan_right,
    Command.ZOOM_IN: Viewport.zoom_in,
    Command.ZOOM_OUT: Viewport.zoom_out,
    Command.TOGGLE_HEX: Viewport.toggle_hex,
    Command.QUIT: Viewport.quit,
}
