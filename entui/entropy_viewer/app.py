"""Interactive entropy chart built on ``textual``.

:class:`EntropyViewerApp` owns the terminal for the length of the session:
textual switches to the alternate screen, decodes key presses and
restores the terminal on exit, including when the app crashes.  Each
key binding maps onto one :class:`Command` applied to the
:class:`Viewport`; the chart is redrawn after every applied command and
on a :data:`POLL_INTERVAL` timer, which also picks up terminal resizes.
"""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from .analyzer import Dataset
from .viewport import Command, Viewport
from .visualizer import render_frame

logger = logging.getLogger(__name__)

POLL_INTERVAL: float = 0.25

# textual key name -> viewport command
KEY_BINDINGS: dict[str, Command] = {
    "left": Command.PAN_LEFT,
    "right": Command.PAN_RIGHT,
    "up": Command.ZOOM_IN,
    "plus": Command.ZOOM_IN,
    "equals_sign": Command.ZOOM_IN,
    "down": Command.ZOOM_OUT,
    "minus": Command.ZOOM_OUT,
    "underscore": Command.ZOOM_OUT,
    "h": Command.TOGGLE_HEX,
    "q": Command.QUIT,
}


def _keys_for(command: Command) -> str:
    return ",".join(key for key, bound in KEY_BINDINGS.items() if bound is command)


class ChartView(Static):
    """Full-screen chart, status line and help footer."""

    DEFAULT_CSS = """
    ChartView {
        width: 100%;
        height: 100%;
    }
    """


class EntropyViewerApp(App):
    """Zoomable, scrollable entropy chart for one analysed file.

    Usage::

        app = EntropyViewerApp(dataset)
        app.run()
    """

    ENABLE_COMMAND_PALETTE = False

    # Priority bindings so no widget can swallow the arrow keys.
    BINDINGS = [
        Binding(_keys_for(Command.PAN_LEFT), "pan_left", "Scroll left", show=False, priority=True),
        Binding(_keys_for(Command.PAN_RIGHT), "pan_right", "Scroll right", show=False, priority=True),
        Binding(_keys_for(Command.ZOOM_IN), "zoom_in", "Zoom in", show=False, priority=True),
        Binding(_keys_for(Command.ZOOM_OUT), "zoom_out", "Zoom out", show=False, priority=True),
        Binding(_keys_for(Command.TOGGLE_HEX), "toggle_hex", "Hex offsets", show=False, priority=True),
        Binding(_keys_for(Command.QUIT), "quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        dataset: Dataset,
        viewport: Viewport | None = None,
        poll_interval: float = POLL_INTERVAL,
    ) -> None:
        super().__init__()
        self.dataset = dataset
        self.viewport = viewport or Viewport.from_dataset(dataset)
        self.poll_interval = poll_interval
        self.frame_count = 0

    def compose(self) -> ComposeResult:
        yield ChartView(id="chart")

    def on_mount(self) -> None:
        logger.debug("Viewer mounted (poll=%.3fs)", self.poll_interval)
        self.refresh_chart()
        self.set_interval(self.poll_interval, self.refresh_chart)

    # -- drawing ------------------------------------------------------------

    def refresh_chart(self) -> None:
        """Render the current viewport into the chart widget."""
        if self.viewport.quit_requested:
            return
        width, height = self.size
        chart = self.query_one("#chart", ChartView)
        chart.update(render_frame(self.viewport, self.dataset, width, height))
        self.frame_count += 1

    def apply_command(self, command: Command) -> bool:
        """Apply *command* to the viewport and redraw if anything changed."""
        applied = self.viewport.apply(command)
        if applied:
            self.refresh_chart()
        return applied

    # -- actions ------------------------------------------------------------

    def action_pan_left(self) -> None:
        self.apply_command(Command.PAN_LEFT)

    def action_pan_right(self) -> None:
        self.apply_command(Command.PAN_RIGHT)

    def action_zoom_in(self) -> None:
        self.apply_command(Command.ZOOM_IN)

    def action_zoom_out(self) -> None:
        self.apply_command(Command.ZOOM_OUT)

    def action_toggle_hex(self) -> None:
        self.apply_command(Command.TOGGLE_HEX)

    async def action_quit(self) -> None:
        """Enter the viewport's quit state and leave the app."""
        self.apply_command(Command.QUIT)
        self.exit()
