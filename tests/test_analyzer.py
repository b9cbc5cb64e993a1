"""Tests for entui.entropy_viewer.analyzer -- block analysis and Dataset.

Covers analyze_file, AnalyzerConfig, EntropyAnalyzer, Dataset derived
values and region merging.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from entui.common.entropy import ENCRYPTED, PLAINTEXT, ZEROED, Sample
from entui.entropy_viewer.analyzer import (
    AnalyzerConfig,
    Dataset,
    EntropyAnalyzer,
    analyze_file,
)
from generate_test_data import plaintext_region, random_region, zeroed_region


def _write(tmp_path: Path, data: bytes, name: str = "sample.bin") -> Path:
    path = tmp_path / name
    path.write_bytes(data)
    return path


# ---------------------------------------------------------------------------
# analyze_file
# ---------------------------------------------------------------------------


class TestAnalyzeFile:
    """Unit tests for the sequential block analysis."""

    def test_full_blocks(self, tmp_path: Path) -> None:
        """N full blocks produce N samples spaced by the block size."""
        path = _write(tmp_path, bytes(range(256)) * 5)
        samples = analyze_file(path, 256)
        assert [s.offset for s in samples] == [0, 256, 512, 768, 1024]
        assert all(s.size == 256 for s in samples)
        assert all(s.entropy == pytest.approx(8.0, abs=1e-6) for s in samples)

    def test_trailing_partial_block(self, tmp_path: Path) -> None:
        """A trailing partial block contributes one extra sample."""
        path = _write(tmp_path, b"\x00" * (3 * 100 + 7))
        samples = analyze_file(path, 100)
        assert [s.offset for s in samples] == [0, 100, 200, 300]
        assert samples[-1].size == 7

    def test_thousand_zero_bytes(self, tmp_path: Path) -> None:
        """1000 zero bytes in 256-byte blocks -> 4 zero-entropy samples."""
        path = _write(tmp_path, b"\x00" * 1000)
        samples = analyze_file(path, 256)
        assert [s.offset for s in samples] == [0, 256, 512, 768]
        assert [s.entropy for s in samples] == [0.0, 0.0, 0.0, 0.0]

    def test_empty_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path, b"")
        assert analyze_file(path, 256) == []

    def test_block_larger_than_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path, b"abc")
        samples = analyze_file(path, 4096)
        assert samples == [Sample(offset=0, size=3, entropy=pytest.approx(1.5849625))]

    @pytest.mark.parametrize("block_size", [0, -256])
    def test_rejects_non_positive_block_size(self, tmp_path: Path, block_size: int) -> None:
        path = _write(tmp_path, b"abc")
        with pytest.raises(ValueError, match="block_size must be positive"):
            analyze_file(path, block_size)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            analyze_file(tmp_path / "nope.bin", 256)

    def test_directory_is_error(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            analyze_file(tmp_path, 256)

    def test_mixed_content(self, tmp_path: Path) -> None:
        """Random, text and zero regions land in their expected bands."""
        size = 65536
        data = random_region(size) + plaintext_region(size) + zeroed_region(size)
        path = _write(tmp_path, data)
        samples = analyze_file(path, size)
        assert [s.classification for s in samples] == [ENCRYPTED, PLAINTEXT, ZEROED]


# ---------------------------------------------------------------------------
# AnalyzerConfig
# ---------------------------------------------------------------------------


class TestAnalyzerConfig:
    """Configuration validation."""

    def test_defaults(self) -> None:
        config = AnalyzerConfig()
        assert config.block_size == 256
        assert config.entropy_threshold == 7.9

    @pytest.mark.parametrize("block_size", [0, -1])
    def test_invalid_block_size(self, block_size: int) -> None:
        with pytest.raises(ValueError, match="block_size must be positive"):
            AnalyzerConfig(block_size=block_size)

    @pytest.mark.parametrize("threshold", [-0.1, 8.5])
    def test_invalid_threshold(self, threshold: float) -> None:
        with pytest.raises(ValueError, match="entropy_threshold"):
            AnalyzerConfig(entropy_threshold=threshold)


# ---------------------------------------------------------------------------
# EntropyAnalyzer / Dataset
# ---------------------------------------------------------------------------


class TestEntropyAnalyzer:
    """End-to-end analysis into a Dataset."""

    def test_dataset_scenario(self, tmp_path: Path) -> None:
        path = _write(tmp_path, b"\x00" * 1000)
        dataset = EntropyAnalyzer(AnalyzerConfig(block_size=256)).analyze(
            path, show_progress=False
        )
        assert dataset.file_path == path.resolve()
        assert dataset.file_size == 1000
        assert dataset.block_size == 256
        assert len(dataset.samples) == 4
        assert dataset.total_size == 1024.0
        assert dataset.scan_duration_seconds >= 0.0

    def test_points(self, tmp_path: Path) -> None:
        path = _write(tmp_path, b"\x00" * 512)
        dataset = EntropyAnalyzer().analyze(path, show_progress=False)
        assert dataset.points == [(0.0, 0.0), (256.0, 0.0)]

    def test_empty_file_total_size(self, tmp_path: Path) -> None:
        """An empty file still has a positive offset range of one block."""
        path = _write(tmp_path, b"")
        dataset = EntropyAnalyzer().analyze(path, show_progress=False)
        assert dataset.samples == ()
        assert dataset.total_size == 256.0
        assert dataset.mean_entropy == 0.0
        assert dataset.regions() == []

    @pytest.mark.parametrize("block_size", [1, 100, 256, 4096])
    def test_samples_match_analyze_file(self, tmp_path: Path, block_size: int) -> None:
        """The analyzer and analyze_file produce identical samples."""
        data = random_region(3000) + plaintext_region(2000) + zeroed_region(1234)
        path = _write(tmp_path, data)
        dataset = EntropyAnalyzer(AnalyzerConfig(block_size=block_size)).analyze(
            path, show_progress=False
        )
        assert dataset.samples == tuple(analyze_file(path, block_size))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            EntropyAnalyzer().analyze(tmp_path / "missing.bin", show_progress=False)


class TestDataset:
    """Derived statistics and region merging."""

    @staticmethod
    def _dataset(entropies: list[float], block_size: int = 100) -> Dataset:
        samples = tuple(
            Sample(offset=i * block_size, size=block_size, entropy=e)
            for i, e in enumerate(entropies)
        )
        return Dataset(
            file_path=Path("memory.bin"),
            file_size=block_size * len(samples),
            block_size=block_size,
            samples=samples,
        )

    def test_total_size_overstates_short_tail(self) -> None:
        samples = (
            Sample(offset=0, size=256, entropy=1.0),
            Sample(offset=256, size=10, entropy=1.0),
        )
        dataset = Dataset(Path("x"), file_size=266, block_size=256, samples=samples)
        assert dataset.total_size == 512.0

    def test_statistics(self) -> None:
        dataset = self._dataset([0.0, 4.0, 8.0])
        assert dataset.mean_entropy == pytest.approx(4.0)
        assert dataset.min_entropy == 0.0
        assert dataset.max_entropy == 8.0
        assert dataset.total_encrypted == 100

    def test_regions_merge_adjacent(self) -> None:
        dataset = self._dataset([0.0, 0.5, 4.0, 5.0, 7.95, 8.0, 0.0])
        regions = dataset.regions()
        assert [r.classification for r in regions] == [ZEROED, PLAINTEXT, ENCRYPTED, ZEROED]
        assert [(r.start_offset, r.end_offset) for r in regions] == [
            (0, 200), (200, 400), (400, 600), (600, 700),
        ]
        assert regions[1].avg_entropy == pytest.approx(4.5)
        assert regions[2].min_entropy == pytest.approx(7.95)
        assert regions[2].size == 200

    def test_regions_use_threshold(self) -> None:
        samples = (Sample(offset=0, size=10, entropy=7.6),)
        dataset = Dataset(Path("x"), 10, 10, samples, entropy_threshold=7.5)
        assert dataset.regions()[0].classification == ENCRYPTED
