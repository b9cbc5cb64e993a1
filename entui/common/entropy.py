"""Shannon entropy calculation for byte-level file inspection.

Every block of a file is reduced to a single number: its Shannon entropy
in bits per byte, treating each byte as a symbol drawn from a 256-value
alphabet.  The resulting series is what the entropy viewer plots.

Entropy Bands
-------------
The classification helpers label a value with a coarse band, used for
the status line, the region table and chart colouring:

- Encrypted or packed data sits very close to the theoretical maximum of
  8.0 bits/byte.  The default threshold of 7.9 separates it from
  ordinary compressed data.

- Compressed data (zlib, gzip, LZMA) generally falls in [7.0, 7.9).

- Plaintext, code and structured binary data sit well below 7.0.

- Zeroed, padded or sparse regions have near-zero entropy.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Classification constants
# ---------------------------------------------------------------------------

ENCRYPTED: str = "encrypted"
COMPRESSED: str = "compressed"
PLAINTEXT: str = "plaintext"
ZEROED: str = "zeroed"

MAX_ENTROPY: float = 8.0
DEFAULT_THRESHOLD: float = 7.9

# Boundary values (lower-inclusive)
_THRESHOLD_COMPRESSED: float = 7.0
_THRESHOLD_PLAINTEXT: float = 1.0


# ---------------------------------------------------------------------------
# Core entropy calculation
# ---------------------------------------------------------------------------

def calculate_entropy(data: bytes) -> float:
    """Return the Shannon entropy of *data* on a 0.0 -- 8.0 scale.

    * 0.0  -- a single repeated symbol (e.g. all zeros)
    * 8.0  -- each of the 256 byte values equally likely

    Parameters
    ----------
    data:
        Raw bytes to analyse.  An empty buffer returns 0.0.

    Returns
    -------
    float
        Shannon entropy in bits per byte.
    """
    if not data:
        return 0.0

    length = len(data)
    counts = Counter(data)

    entropy = 0.0
    for count in counts.values():
        p = count / length
        entropy -= p * math.log2(p)

    return entropy


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def classify_entropy(entropy_value: float, threshold: float = DEFAULT_THRESHOLD) -> str:
    """Classify an entropy value into a human-readable band.

    Parameters
    ----------
    entropy_value:
        Shannon entropy in bits/byte (0.0 -- 8.0).
    threshold:
        The boundary between *encrypted* and *compressed*.

    Returns
    -------
    str
        One of ``"encrypted"``, ``"compressed"``, ``"plaintext"``, or
        ``"zeroed"``.
    """
    if entropy_value >= threshold:
        return ENCRYPTED
    if entropy_value >= _THRESHOLD_COMPRESSED:
        return COMPRESSED
    if entropy_value >= _THRESHOLD_PLAINTEXT:
        return PLAINTEXT
    return ZEROED


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Sample:
    """Entropy measurement for a single block of a file.

    Attributes
    ----------
    offset:
        Byte offset of the block's first byte within the file.
    size:
        Length of the block in bytes (may be shorter than the configured
        block size for the final block).
    entropy:
        Shannon entropy of the block (0.0 -- 8.0).
    """

    offset: int
    size: int
    entropy: float

    @property
    def end_offset(self) -> int:
        """Byte offset one past the last byte of the block."""
        return self.offset + self.size

    @property
    def classification(self) -> str:
        """Band label using the default threshold."""
        return classify_entropy(self.entropy)
