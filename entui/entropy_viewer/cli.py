"""CLI entry point for the entropy viewer.

Analyses a file in fixed-size blocks and opens an interactive, zoomable
chart of per-block Shannon entropy in the terminal.

Usage examples::

    # Browse a firmware image with the default 256-byte blocks
    entui firmware.bin

    # Coarser blocks for a large disk image
    entui disk.img --block-size 4096

    # Non-interactive entropy map and region table
    entui packed.exe --text --width 120

Keys: Left/Right scroll, Up/+/= zoom in, Down/-/_ zoom out,
h toggles hexadecimal offsets, q quits.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.logging import RichHandler

from entui.common.entropy import DEFAULT_THRESHOLD
from entui.common.report import get_console, print_banner, print_summary

from .analyzer import DEFAULT_BLOCK_SIZE, AnalyzerConfig, Dataset, EntropyAnalyzer
from .app import EntropyViewerApp
from .visualizer import render_region_table, render_text_map, summary_stats

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Mode handlers
# ---------------------------------------------------------------------------


def _has_terminal() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def _handle_view(dataset: Dataset) -> int:
    """Open the interactive chart and block until the user quits."""
    if not _has_terminal():
        print(
            "Error: the interactive viewer needs a terminal; use --text for plain output",
            file=sys.stderr,
        )
        return 1

    app = EntropyViewerApp(dataset)
    app.run()
    if app.return_code:
        logger.error("Viewer exited with code %d", app.return_code)
        return app.return_code
    print_summary(f"Entropy: {dataset.file_path.name}", summary_stats(dataset))
    return 0


def _handle_text(dataset: Dataset, width: int) -> int:
    """Print the text entropy map, region table and summary."""
    console = get_console()
    console.print(render_text_map(dataset, width=width))
    if dataset.samples:
        console.print(render_region_table(dataset))
    print_summary(f"Entropy: {dataset.file_path.name}", summary_stats(dataset))
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="entui",
        description=(
            "Terminal entropy viewer -- chart the per-block Shannon entropy "
            "of a file and browse it interactively."
        ),
    )
    parser.add_argument(
        "file",
        help="Path to the file to analyse.",
    )
    parser.add_argument(
        "-b", "--block-size",
        type=_positive_int,
        default=DEFAULT_BLOCK_SIZE,
        help=f"Block size in bytes (default: {DEFAULT_BLOCK_SIZE}).",
    )
    parser.add_argument(
        "-t", "--threshold",
        type=float,
        default=DEFAULT_THRESHOLD,
        help=f"Entropy threshold for high-entropy classification (default: {DEFAULT_THRESHOLD}).",
    )
    parser.add_argument(
        "--text",
        action="store_true",
        help="Print a text entropy map instead of opening the interactive viewer.",
    )
    parser.add_argument(
        "--width",
        type=_positive_int,
        default=100,
        help="Character width of the --text map (default: 100).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging.",
    )
    return parser


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the entropy viewer."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(console=get_console(), show_path=False)],
    )

    file_path = Path(args.file)
    if not file_path.exists():
        # Missing input is reported, not treated as a failure.
        print(f"File not found: {file_path}", file=sys.stderr)
        return 0

    try:
        config = AnalyzerConfig(
            block_size=args.block_size,
            entropy_threshold=args.threshold,
        )
    except ValueError as exc:
        parser.error(str(exc))

    print_banner("entui -- Entropy Viewer")

    try:
        dataset = EntropyAnalyzer(config).analyze(file_path)
    except (OSError, ValueError) as exc:
        print(f"Error analyzing file: {exc}", file=sys.stderr)
        return 0
    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        return 130

    try:
        if args.text:
            return _handle_text(dataset, args.width)
        return _handle_view(dataset)
    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        return 130
    except Exception as exc:
        logger.exception("Unexpected error in viewer")
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
