"""Tests for entui.common.entropy -- Shannon entropy calculation and classification.

Covers calculate_entropy, classify_entropy, Sample, and the classification
constants (ENCRYPTED, COMPRESSED, PLAINTEXT, ZEROED).
"""

from __future__ import annotations

import os

import pytest

from entui.common.entropy import (
    COMPRESSED,
    ENCRYPTED,
    PLAINTEXT,
    ZEROED,
    Sample,
    calculate_entropy,
    classify_entropy,
)


# ---------------------------------------------------------------------------
# calculate_entropy
# ---------------------------------------------------------------------------


class TestCalculateEntropy:
    """Unit tests for the Shannon entropy calculation."""

    @pytest.mark.parametrize("length", [1, 2, 255, 256, 1000, 4096])
    def test_entropy_zeros(self, length: int) -> None:
        """All-zero blocks of any length have entropy exactly 0.0."""
        assert calculate_entropy(b"\x00" * length) == 0.0

    def test_entropy_single_byte(self) -> None:
        """Repeated single non-zero byte should have entropy 0.0."""
        assert calculate_entropy(b"\xAB" * 4096) == 0.0

    def test_entropy_uniform(self) -> None:
        """Each of the 256 byte values exactly once gives 8.0 bits/byte."""
        result = calculate_entropy(bytes(range(256)))
        assert result == pytest.approx(8.0, abs=1e-6)

    def test_entropy_uniform_repeated(self) -> None:
        """Uniform frequency over all 256 values is still 8.0."""
        result = calculate_entropy(bytes(range(256)) * 16)
        assert result == pytest.approx(8.0, abs=1e-6)

    def test_entropy_binary(self) -> None:
        """Two equally likely symbols yield exactly 1.0 bits/byte."""
        data = bytes([0x00, 0xFF] * 512)
        assert calculate_entropy(data) == pytest.approx(1.0, abs=1e-10)

    def test_entropy_four_symbols(self) -> None:
        """Four equally likely symbols yield 2.0 bits/byte."""
        data = b"ACGT" * 100
        assert calculate_entropy(data) == pytest.approx(2.0, abs=1e-10)

    def test_entropy_empty(self) -> None:
        """Empty input returns 0.0 without raising."""
        assert calculate_entropy(b"") == 0.0

    def test_entropy_accepts_bytearray_and_memoryview(self) -> None:
        data = bytes(range(16))
        assert calculate_entropy(bytearray(data)) == pytest.approx(4.0)
        assert calculate_entropy(memoryview(data)) == pytest.approx(4.0)

    def test_entropy_random_is_high(self) -> None:
        """A large block of os.urandom should have entropy close to 8.0."""
        result = calculate_entropy(os.urandom(65536))
        assert result > 7.9, f"Random data entropy unexpectedly low: {result}"

    def test_entropy_within_range(self) -> None:
        """Entropy is always inside [0.0, 8.0]."""
        for data in (b"a", b"ab" * 7, os.urandom(100), bytes(range(200))):
            assert 0.0 <= calculate_entropy(data) <= 8.0

    def test_entropy_english_text(self) -> None:
        """ASCII English text should have entropy well below 7.0."""
        text = b"The quick brown fox jumps over the lazy dog. " * 100
        result = calculate_entropy(text)
        assert 2.0 < result < 5.0, f"English text entropy: {result}"


# ---------------------------------------------------------------------------
# classify_entropy
# ---------------------------------------------------------------------------


class TestClassifyEntropy:
    """Unit tests for entropy classification into bands."""

    def test_classify_encrypted(self) -> None:
        assert classify_entropy(7.9) == ENCRYPTED
        assert classify_entropy(8.0) == ENCRYPTED

    def test_classify_compressed(self) -> None:
        assert classify_entropy(7.0) == COMPRESSED
        assert classify_entropy(7.89) == COMPRESSED

    def test_classify_plaintext(self) -> None:
        assert classify_entropy(1.0) == PLAINTEXT
        assert classify_entropy(6.99) == PLAINTEXT

    def test_classify_zeroed(self) -> None:
        assert classify_entropy(0.0) == ZEROED
        assert classify_entropy(0.99) == ZEROED

    def test_classify_custom_threshold(self) -> None:
        """A custom threshold moves the encrypted/compressed boundary."""
        assert classify_entropy(7.6, threshold=7.5) == ENCRYPTED
        assert classify_entropy(7.4, threshold=7.5) == COMPRESSED


# ---------------------------------------------------------------------------
# Sample
# ---------------------------------------------------------------------------


class TestSample:
    """Unit tests for the Sample frozen dataclass."""

    def test_sample_fields(self) -> None:
        sample = Sample(offset=512, size=256, entropy=3.5)
        assert sample.offset == 512
        assert sample.size == 256
        assert sample.entropy == 3.5
        assert sample.end_offset == 768
        assert sample.classification == PLAINTEXT

    def test_sample_frozen(self) -> None:
        sample = Sample(offset=0, size=256, entropy=0.0)
        with pytest.raises(AttributeError):
            sample.entropy = 5.0  # type: ignore[misc]

    def test_sample_equality(self) -> None:
        a = Sample(offset=0, size=512, entropy=0.0)
        b = Sample(offset=0, size=512, entropy=0.0)
        assert a == b
