"""Block entropy analysis of a single file.

The file is read once, front to back, in fixed-size blocks.  Every
non-empty read produces one :class:`Sample` holding the block's starting
offset and its Shannon entropy.  The resulting :class:`Dataset` is
immutable and seeds the viewer's navigation bounds.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from entui.common.entropy import (
    DEFAULT_THRESHOLD,
    ENCRYPTED,
    MAX_ENTROPY,
    Sample,
    calculate_entropy,
    classify_entropy,
)
from entui.common.report import create_progress, format_bytes
from entui.common.safe_io import SafeReader

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE: int = 256


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class AnalyzerConfig:
    """Configuration for the block entropy analyzer.

    Attributes
    ----------
    block_size:
        Number of bytes per block.  Must be a positive integer.
    entropy_threshold:
        Entropy (bits/byte) at or above which a block is labelled
        encrypted.  Must lie within [0.0, 8.0].
    """

    block_size: int = DEFAULT_BLOCK_SIZE
    entropy_threshold: float = DEFAULT_THRESHOLD

    def __post_init__(self) -> None:
        if self.block_size <= 0:
            raise ValueError(f"block_size must be positive, got {self.block_size}")
        if not 0.0 <= self.entropy_threshold <= MAX_ENTROPY:
            raise ValueError(
                f"entropy_threshold must be within [0.0, {MAX_ENTROPY}], "
                f"got {self.entropy_threshold}"
            )


# ---------------------------------------------------------------------------
# Result containers
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class RegionInfo:
    """A contiguous run of blocks sharing a single entropy classification.

    Attributes
    ----------
    start_offset:
        Byte offset where this region begins.
    end_offset:
        Byte offset one past the last byte of this region.
    classification:
        One of ``"encrypted"``, ``"compressed"``, ``"plaintext"``,
        or ``"zeroed"``.
    avg_entropy, min_entropy, max_entropy:
        Statistics over the blocks within this region.
    """

    start_offset: int
    end_offset: int
    classification: str
    avg_entropy: float
    min_entropy: float
    max_entropy: float

    @property
    def size(self) -> int:
        """Total size of this region in bytes."""
        return self.end_offset - self.start_offset


@dataclass(frozen=True, slots=True)
class Dataset:
    """The complete, immutable result of analysing one file.

    Attributes
    ----------
    file_path:
        Resolved path to the analysed file.
    file_size:
        Exact number of bytes read.
    block_size:
        Block size used for the analysis.
    samples:
        One :class:`Sample` per block, in offset order.
    entropy_threshold:
        Threshold used when classifying blocks.
    scan_duration_seconds:
        Wall-clock time of the analysis pass.
    """

    file_path: Path
    file_size: int
    block_size: int
    samples: tuple[Sample, ...] = field(default_factory=tuple)
    entropy_threshold: float = DEFAULT_THRESHOLD
    scan_duration_seconds: float = 0.0

    @property
    def total_size(self) -> float:
        """Upper bound of the offset axis: last sample offset + block size.

        This overstates the file length when the final block is short;
        charts use it as their right-hand bound.  An empty file yields
        one block size.
        """
        last_offset = self.samples[-1].offset if self.samples else 0
        return float(last_offset + self.block_size)

    @property
    def points(self) -> list[tuple[float, float]]:
        """``(offset, entropy)`` pairs ready for plotting."""
        return [(float(s.offset), s.entropy) for s in self.samples]

    @property
    def mean_entropy(self) -> float:
        if not self.samples:
            return 0.0
        return sum(s.entropy for s in self.samples) / len(self.samples)

    @property
    def min_entropy(self) -> float:
        return min((s.entropy for s in self.samples), default=0.0)

    @property
    def max_entropy(self) -> float:
        return max((s.entropy for s in self.samples), default=0.0)

    @property
    def total_encrypted(self) -> int:
        """Total bytes in blocks classified as encrypted."""
        return sum(
            s.size
            for s in self.samples
            if classify_entropy(s.entropy, self.entropy_threshold) == ENCRYPTED
        )

    def regions(self) -> list[RegionInfo]:
        """Merge adjacent samples with the same classification into regions."""
        if not self.samples:
            return []

        regions: list[RegionInfo] = []
        first = self.samples[0]
        current_start = first.offset
        current_end = first.end_offset
        current_cls = classify_entropy(first.entropy, self.entropy_threshold)
        entropies: list[float] = [first.entropy]

        for sample in self.samples[1:]:
            cls = classify_entropy(sample.entropy, self.entropy_threshold)
            if cls == current_cls:
                current_end = sample.end_offset
                entropies.append(sample.entropy)
                continue

            regions.append(
                RegionInfo(
                    start_offset=current_start,
                    end_offset=current_end,
                    classification=current_cls,
                    avg_entropy=sum(entropies) / len(entropies),
                    min_entropy=min(entropies),
                    max_entropy=max(entropies),
                )
            )
            current_start = sample.offset
            current_end = sample.end_offset
            current_cls = cls
            entropies = [sample.entropy]

        regions.append(
            RegionInfo(
                start_offset=current_start,
                end_offset=current_end,
                classification=current_cls,
                avg_entropy=sum(entropies) / len(entropies),
                min_entropy=min(entropies),
                max_entropy=max(entropies),
            )
        )
        return regions


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def iter_samples(reader: SafeReader, block_size: int) -> Iterator[Sample]:
    """Yield one :class:`Sample` per block read from an open *reader*."""
    for offset, block in reader.iter_blocks(block_size):
        yield Sample(offset=offset, size=len(block), entropy=calculate_entropy(block))


def analyze_file(path: str | os.PathLike[str], block_size: int) -> list[Sample]:
    """Compute the entropy of every *block_size* block of the file at *path*.

    Parameters
    ----------
    path:
        File to analyse.
    block_size:
        Maximum number of bytes per block.  Must be positive.

    Returns
    -------
    list[Sample]
        One sample per non-empty read, in offset order.  An empty file
        yields an empty list.

    Raises
    ------
    ValueError
        If *block_size* is not positive.
    FileNotFoundError
        If *path* does not exist.
    OSError
        If the file cannot be opened or a read fails.
    """
    if block_size <= 0:
        raise ValueError(f"block_size must be positive, got {block_size}")

    with SafeReader(path) as reader:
        return list(iter_samples(reader, block_size))


class EntropyAnalyzer:
    """Single-pass block entropy analyzer with progress reporting.

    Usage::

        analyzer = EntropyAnalyzer(AnalyzerConfig(block_size=512))
        dataset = analyzer.analyze(Path("firmware.bin"))
        print(f"Mean entropy: {dataset.mean_entropy:.3f}")
    """

    def __init__(self, config: AnalyzerConfig | None = None) -> None:
        self.config = config or AnalyzerConfig()

    def analyze(self, file_path: str | os.PathLike[str], show_progress: bool = True) -> Dataset:
        """Read *file_path* once and return its :class:`Dataset`.

        Parameters
        ----------
        file_path:
            File to analyse.
        show_progress:
            Display a transient ``rich`` progress bar while reading.
        """
        block_size = self.config.block_size
        start_time = time.monotonic()
        samples: list[Sample] = []

        with SafeReader(file_path) as reader:
            file_size = reader.get_size()
            total_blocks = (file_size + block_size - 1) // block_size
            logger.info(
                "Analysing %s with %s blocks (%d expected)",
                reader.path,
                format_bytes(block_size),
                total_blocks,
            )

            progress = create_progress(disable=not show_progress)
            with progress:
                task = progress.add_task("Scanning", total=total_blocks)
                for sample in iter_samples(reader, block_size):
                    samples.append(sample)
                    progress.update(task, advance=1)

            resolved = reader.path

        elapsed = time.monotonic() - start_time
        dataset = Dataset(
            file_path=resolved,
            file_size=sum(s.size for s in samples),
            block_size=block_size,
            samples=tuple(samples),
            entropy_threshold=self.config.entropy_threshold,
            scan_duration_seconds=elapsed,
        )
        logger.info(
            "Analysis complete: %d blocks, mean entropy %.3f, %.2fs",
            len(samples),
            dataset.mean_entropy,
            elapsed,
        )
        return dataset
