"""Entropy Viewer -- interactive per-block Shannon entropy chart for a file.

A file is read once in fixed-size blocks; the resulting entropy series
is shown as a line chart that can be scrolled and zoomed from the
keyboard.
"""

from .analyzer import AnalyzerConfig, Dataset, EntropyAnalyzer, RegionInfo, analyze_file
from .viewport import Command, DisplayMode, Viewport

__all__ = [
    "AnalyzerConfig",
    "Command",
    "Dataset",
    "DisplayMode",
    "EntropyAnalyzer",
    "RegionInfo",
    "Viewport",
    "analyze_file",
]
