"""Asset Store - overlay image files under <machine>/overlay_images/.

Invariants:
    - save_overlay_image never overwrites: a taken name gets -1, -2, ... appended
    - The returned filename is authoritative; callers must not assume the
      suggested name was used verbatim
    - Listing a missing folder yields [], deleting a missing file is a no-op
    - Empty payloads are rejected with InvalidImageDataError before any IO

Design Decisions:
    - Name selection checks existence then writes; two concurrent saves of the
      same suggested name can pick the same file (no cross-call locking)
    - Blocking calls run via asyncio.to_thread to keep the event loop free
"""

import asyncio
import logging
from pathlib import Path

from fieldar.core.asset_naming import candidate_names, split_suggested_name
from fieldar.core.errors import (
    ErrorContext, InvalidImageDataError, StorageIOError, StoredFileNotFoundError,
)
from fieldar.core.path_resolver import PathResolver
from fieldar.infrastructure.atomic_writer import write_atomically
from fieldar.infrastructure.directory_manager import ensure_folder

logger = logging.getLogger(__name__)


def _first_free_name(folder: Path, base: str, ext: str) -> str:
    return next(
        name for name in candidate_names(base, ext)
        if not (folder / name).exists()
    )


def _list_files(folder: Path) -> list[str]:
    if not folder.is_dir():
        return []
    return sorted(
        entry.name for entry in folder.iterdir()
        if entry.is_file() and not entry.name.startswith(".")
    )


def read_file(path: Path, machine_id: str) -> bytes:
    """Read a stored file, mapping absence and IO failures to store errors."""
    ctx = ErrorContext(machine_id=machine_id, path=str(path))
    if not path.is_file():
        raise StoredFileNotFoundError(str(path), ctx)
    try:
        return path.read_bytes()
    except FileNotFoundError as e:
        raise StoredFileNotFoundError(str(path), ctx) from e
    except OSError as e:
        raise StorageIOError("read", e, ctx) from e


class AssetStore:
    """Overlay image storage for machines resolved through a PathResolver."""

    def __init__(self, resolver: PathResolver):
        self._resolver = resolver

    async def save_overlay_image(
        self, machine_id: str, data: bytes, suggested_name: str | None = None,
    ) -> str:
        if not data:
            raise InvalidImageDataError(context=ErrorContext(machine_id=machine_id))
        folder = self._resolver.overlay_images_folder(machine_id)
        await asyncio.to_thread(ensure_folder, folder)

        base, ext = split_suggested_name(suggested_name, data)
        filename = await asyncio.to_thread(_first_free_name, folder, base, ext)
        await asyncio.to_thread(write_atomically, data, folder / filename)
        logger.info(
            f"Saved overlay image {filename} ({len(data)} bytes)",
            extra={"machine_id": machine_id, "file_name": filename},
        )
        return filename

    async def list_overlay_images(self, machine_id: str) -> list[str]:
        folder = self._resolver.overlay_images_folder(machine_id)
        try:
            return await asyncio.to_thread(_list_files, folder)
        except OSError as e:
            raise StorageIOError(
                "list", e, ErrorContext(machine_id=machine_id, path=str(folder)),
            ) from e

    async def load_overlay_image_data(self, machine_id: str, image_name: str) -> bytes:
        path = self._resolver.overlay_image_path(machine_id, image_name)
        return await asyncio.to_thread(read_file, path, machine_id)

    async def delete_overlay_image(self, machine_id: str, image_name: str) -> None:
        path = self._resolver.overlay_image_path(machine_id, image_name)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            raise StorageIOError(
                "delete", e, ErrorContext(machine_id=machine_id, path=str(path)),
            ) from e
        logger.info(
            f"Deleted overlay image {image_name} (if present)",
            extra={"machine_id": machine_id, "file_name": image_name},
        )
