"""Directory Manager - idempotent folder creation and tree mutation.

Invariants:
    - ensure_folder converges: after it returns, `path` is a directory
    - A non-directory in the way of ensure_folder is deleted (destructive repair)
    - Every OSError is re-raised as StorageIOError with the original as cause

Design Decisions:
    - Check-then-create is not atomic: a concurrent external delete between the
      two steps can still fail the call; that race is accepted, not locked around
"""

import logging
import shutil
from pathlib import Path

from fieldar.core.errors import ErrorContext, StorageIOError

logger = logging.getLogger(__name__)


def ensure_folder(path: Path) -> Path:
    """Make `path` an existing directory, creating ancestors as needed."""
    try:
        if path.is_dir():
            return path
        if path.exists() or path.is_symlink():
            logger.warning(f"Replacing non-directory with folder: {path}")
            path.unlink()
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Could not ensure folder {path}: {e}")
        raise StorageIOError(
            "mkdir", e, ErrorContext(path=str(path)),
        ) from e
    logger.debug(f"Created folder: {path}")
    return path


def remove_path(path: Path) -> None:
    """Remove a file or a whole directory tree. Missing paths are ignored."""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)
    except OSError as e:
        logger.error(f"Could not remove {path}: {e}")
        raise StorageIOError(
            "remove", e, ErrorContext(path=str(path)),
        ) from e


def copy_tree(source: Path, destination: Path) -> None:
    """Copy `source` (file or tree) to `destination`, which must not exist."""
    try:
        if source.is_dir():
            shutil.copytree(source, destination)
        else:
            shutil.copy2(source, destination)
    except OSError as e:
        # shutil.Error subclasses OSError; a partial destination is left in place
        logger.error(f"Could not copy {source} to {destination}: {e}")
        raise StorageIOError(
            "copy", e, ErrorContext(path=str(destination)),
        ) from e
