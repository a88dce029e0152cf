"""Atomic Writer - crash-safe "write fully, then replace" for every persisted byte stream.

Invariants:
    - Readers of `destination` observe the old complete content or the new
      complete content, never a partial write
    - The temp file lives in the destination's directory (same filesystem, so
      the final rename is atomic)
    - On any failure the temp file is removed and the destination is untouched
    - Failures surface as StorageIOError with the original OSError as cause

Design Decisions:
    - temporary_sibling is a context manager that always unlinks on exit;
      after a successful os.replace the unlink is a no-op
    - Temp names start with "." so listings that skip hidden entries never
      show them; a crash between write and replace can still orphan one
      (no sweep is performed)
    - os.replace covers both "replace existing" and "move into place"
"""

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from fieldar.core.errors import ErrorContext, StorageIOError

logger = logging.getLogger(__name__)


@contextmanager
def temporary_sibling(destination: Path) -> Iterator[tuple[int, Path]]:
    """Yield (fd, path) of a fresh, randomly named temp file next to `destination`."""
    fd, tmp_name = tempfile.mkstemp(
        dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp",
    )
    tmp_path = Path(tmp_name)
    try:
        yield fd, tmp_path
    finally:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove temp file {tmp_path}: {e}")


def write_atomically(data: bytes, destination: Path) -> None:
    """Write `data` to `destination` atomically."""
    try:
        with temporary_sibling(destination) as (fd, tmp_path):
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, destination)
    except OSError as e:
        logger.error(f"Atomic write to {destination} failed: {e}")
        raise StorageIOError(
            "write", e, ErrorContext(path=str(destination)),
        ) from e
    logger.debug(
        f"Wrote {len(data)} bytes to {destination}",
        extra={"file_name": destination.name},
    )
