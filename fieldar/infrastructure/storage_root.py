"""Storage Root - resolves the directory under which <root>/FieldAR lives.

Invariants:
    - A configured root always wins over the platform default
    - Platform default is the user's Documents folder
    - Failure to determine a root raises RootDirectoryUnavailableError once,
      at construction time, never from individual store operations
"""

import logging
from pathlib import Path

from fieldar.core.errors import RootDirectoryUnavailableError

logger = logging.getLogger(__name__)


def resolve_storage_root(configured: str | Path | None = None) -> Path:
    if configured:
        return Path(configured).expanduser()
    try:
        root = Path.home() / "Documents"
    except (RuntimeError, KeyError) as e:
        logger.critical(f"Cannot determine documents directory: {e}")
        raise RootDirectoryUnavailableError(e) from e
    logger.info(f"No storage root configured, using {root}")
    return root
