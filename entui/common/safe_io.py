"""Read-only input layer for entropy inspection.

Files handed to the viewer are often artefacts under investigation
(firmware dumps, packed executables, disk images), so they are only
ever opened with ``O_RDONLY`` and read front to back.

Key guarantees:
    - Input files are opened exclusively with O_RDONLY.
    - No write, append, or truncate operations are exposed.
    - Paths that resolve to devices, FIFOs or sockets are rejected.
    - The descriptor is released on every exit path via the context
      manager protocol.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_input_path(path: str | os.PathLike[str]) -> Path:
    """Validate that *path* is a readable regular file.

    Parameters
    ----------
    path:
        Filesystem path to validate.

    Returns
    -------
    Path
        The fully-resolved :class:`pathlib.Path`.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If *path* is not a regular file after symlink resolution.
    PermissionError
        If the current process cannot read it.
    """
    p = Path(path)

    if not p.exists():
        raise FileNotFoundError(f"File not found: {p}")

    resolved = p.resolve(strict=True)

    # Stat the *resolved* target so symlinks to devices are caught.
    st = resolved.stat()
    if not stat.S_ISREG(st.st_mode):
        raise ValueError(
            f"Not a regular file (mode {stat.filemode(st.st_mode)}): {resolved}"
        )

    if not os.access(resolved, os.R_OK):
        raise PermissionError(f"File is not readable: {resolved}")

    logger.debug("Validated input path: %s (size=%d bytes)", resolved, st.st_size)
    return resolved


# ---------------------------------------------------------------------------
# SafeReader
# ---------------------------------------------------------------------------


class SafeReader:
    """Read-only sequential block reader.

    Usage::

        with SafeReader("/samples/firmware.bin") as reader:
            for offset, block in reader.iter_blocks(256):
                process(offset, block)
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path: Path = validate_input_path(path)
        self._fd: int = -1
        self._size: int = 0
        self._closed: bool = True

    # -- context manager ----------------------------------------------------

    def __enter__(self) -> SafeReader:
        self._open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    # -- internal open / close ----------------------------------------------

    def _open(self) -> None:
        if not self._closed:
            return
        self._fd = os.open(str(self._path), os.O_RDONLY)
        self._size = os.fstat(self._fd).st_size
        self._closed = False
        logger.info("Opened %s (%d bytes)", self._path, self._size)

    def close(self) -> None:
        """Close the underlying file descriptor if it is still open."""
        if self._closed:
            return
        os.close(self._fd)
        logger.debug("Closed %s (fd=%d)", self._path, self._fd)
        self._fd = -1
        self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("SafeReader is not open; use it as a context manager")

    # -- public API ---------------------------------------------------------

    @property
    def path(self) -> Path:
        """Return the resolved input file path."""
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    def get_size(self) -> int:
        """Return the size of the file in bytes as seen when it was opened."""
        self._ensure_open()
        return self._size

    def iter_blocks(self, block_size: int) -> Iterator[tuple[int, bytes]]:
        """Read the file front to back in blocks of up to *block_size* bytes.

        Yields ``(offset, data)`` for every non-empty read and stops at
        the first zero-length read (end of file).  The last block may be
        shorter than *block_size*.

        Raises
        ------
        ValueError
            If *block_size* is not positive.
        OSError
            If a read fails.
        """
        self._ensure_open()

        if block_size <= 0:
            raise ValueError(f"block_size must be positive, got {block_size}")

        offset = 0
        while True:
            data = os.read(self._fd, block_size)
            if not data:
                break
            yield offset, data
            offset += len(data)

        logger.debug("iter_blocks: completed (bytes_read=%d)", offset)

    def __repr__(self) -> str:
        state = "open" if not self._closed else "closed"
        return f"<SafeReader path={self._path!r} state={state}>"
