"""Machine Store - async facade over paths, folders, atomic writes, codec and assets.

Invariants:
    - Every persisted byte stream goes through write_atomically
    - create_machine never overwrites an existing overlays.json
    - save_document always fully overwrites; last_modified is written exactly as
      the caller set it
    - export/import replace the destination wholesale (delete, then copy);
      a failure mid-copy leaves a partial destination, no rollback
    - All mutation is scoped to one machine's subtree: ids are checked as single
      path segments by PathResolver before any path is built
    - A stored document always names the folder it lives in: save_document and
      import_machine reject a mismatched machine_id before writing anything

Design Decisions:
    - Explicit service value constructed with an injected root (no singleton),
      so tests point it at an isolated temporary directory
    - No locking: concurrent saves to one machine are each atomic, last writer
      wins; callers that need ordering serialize per machine id
    - Blocking filesystem work runs through asyncio.to_thread
"""

import asyncio
import logging
from pathlib import Path

from fieldar.core.document import MachineDocument, new_document
from fieldar.core.document_codec import decode_document, encode_document
from fieldar.core.errors import (
    DecodeError, ErrorContext, InvalidImageDataError, MachineIdMismatchError,
    MachineNotFoundError, StorageIOError, StoredFileNotFoundError,
)
from fieldar.core.path_resolver import (
    DOCUMENT_FILENAME, PathResolver, check_path_segment,
)
from fieldar.infrastructure.atomic_writer import write_atomically
from fieldar.infrastructure.directory_manager import (
    copy_tree, ensure_folder, remove_path,
)
from fieldar.infrastructure.storage_root import resolve_storage_root
from fieldar.services.asset_store import AssetStore, read_file

logger = logging.getLogger(__name__)


def _list_directories(folder: Path) -> list[str]:
    if not folder.is_dir():
        return []
    return sorted(
        entry.name for entry in folder.iterdir()
        if entry.is_dir() and not entry.name.startswith(".")
    )


def _visible_children(folder: Path) -> list[Path]:
    return sorted(
        entry for entry in folder.iterdir() if not entry.name.startswith(".")
    )


class MachineStore:
    """CRUD + export/import for machines under <root>/FieldAR/Machines."""

    def __init__(self, root: str | Path):
        self.paths = PathResolver(root)
        self.assets = AssetStore(self.paths)

    @classmethod
    def from_configured_root(cls, configured: str | Path | None = None) -> "MachineStore":
        """Build a store on the configured root or the platform default."""
        return cls(resolve_storage_root(configured))

    # ─── Folders ────────────────────────────────────────────────

    async def ensure_base_folders_exist(self) -> None:
        await asyncio.to_thread(ensure_folder, self.paths.root_folder)
        await asyncio.to_thread(ensure_folder, self.paths.machines_folder)

    # ─── Machines ───────────────────────────────────────────────

    async def create_machine(
        self, machine_id: str, base_image_data: bytes | None = None,
    ) -> None:
        """Create the machine folder tree, optionally storing a base image.

        A default document is written only if none exists yet, so calling
        this on an existing machine never discards saved overlays.
        """
        if base_image_data is not None and not base_image_data:
            raise InvalidImageDataError(context=ErrorContext(machine_id=machine_id))
        paths = self.paths.paths_for(machine_id)
        await self.ensure_base_folders_exist()
        await asyncio.to_thread(ensure_folder, paths.machine_folder)
        await asyncio.to_thread(ensure_folder, paths.overlay_images_folder)

        if base_image_data is not None:
            await asyncio.to_thread(write_atomically, base_image_data, paths.base_image)

        if not await asyncio.to_thread(paths.document.exists):
            await self._write_document(new_document(machine_id), paths.document)
            logger.info("Created machine", extra={"machine_id": machine_id})
        else:
            logger.info(
                "Machine already exists, document kept",
                extra={"machine_id": machine_id},
            )

    async def delete_machine(self, machine_id: str) -> None:
        folder = self.paths.machine_folder(machine_id)
        if not await asyncio.to_thread(folder.exists):
            raise MachineNotFoundError(machine_id)
        await asyncio.to_thread(remove_path, folder)
        logger.info("Deleted machine", extra={"machine_id": machine_id})

    async def list_machines(self) -> list[str]:
        folder = self.paths.machines_folder
        try:
            return await asyncio.to_thread(_list_directories, folder)
        except OSError as e:
            raise StorageIOError("list", e, ErrorContext(path=str(folder))) from e

    # ─── Document ───────────────────────────────────────────────

    async def load_document(self, machine_id: str) -> MachineDocument:
        path = self.paths.document_path(machine_id)
        data = await asyncio.to_thread(read_file, path, machine_id)
        try:
            return decode_document(data)
        except DecodeError as e:
            e.context.machine_id = machine_id
            e.context.path = str(path)
            logger.error(
                f"Document decode failed: {e.cause}",
                extra={"machine_id": machine_id, "error_code": e.code},
            )
            raise

    async def save_document(self, machine_id: str, document: MachineDocument) -> None:
        path = self.paths.document_path(machine_id)
        if document.machine_id != machine_id:
            logger.warning(
                f"Rejected document for '{document.machine_id}'",
                extra={"machine_id": machine_id, "error_code": "MACHINE_ID_MISMATCH"},
            )
            raise MachineIdMismatchError(
                machine_id, document.machine_id, ErrorContext(path=str(path)),
            )
        await self._write_document(document, path)
        logger.info(
            f"Saved document ({len(document.overlays)} overlays)",
            extra={"machine_id": machine_id},
        )

    async def _write_document(self, document: MachineDocument, path: Path) -> None:
        data = encode_document(document)
        await asyncio.to_thread(write_atomically, data, path)

    # ─── Base image ─────────────────────────────────────────────

    async def load_base_image_data(self, machine_id: str) -> bytes:
        path = self.paths.base_image_path(machine_id)
        return await asyncio.to_thread(read_file, path, machine_id)

    async def save_base_image(self, machine_id: str, data: bytes) -> None:
        if not data:
            raise InvalidImageDataError(context=ErrorContext(machine_id=machine_id))
        paths = self.paths.paths_for(machine_id)
        await asyncio.to_thread(ensure_folder, paths.machine_folder)
        await asyncio.to_thread(write_atomically, data, paths.base_image)
        logger.info(
            f"Saved base image ({len(data)} bytes)", extra={"machine_id": machine_id},
        )

    # ─── Overlay images ─────────────────────────────────────────

    async def save_overlay_image(
        self, machine_id: str, data: bytes, suggested_name: str | None = None,
    ) -> str:
        return await self.assets.save_overlay_image(machine_id, data, suggested_name)

    async def list_overlay_images(self, machine_id: str) -> list[str]:
        return await self.assets.list_overlay_images(machine_id)

    async def load_overlay_image_data(self, machine_id: str, image_name: str) -> bytes:
        return await self.assets.load_overlay_image_data(machine_id, image_name)

    async def delete_overlay_image(self, machine_id: str, image_name: str) -> None:
        await self.assets.delete_overlay_image(machine_id, image_name)

    # ─── Export / Import ────────────────────────────────────────

    async def export_machine(self, machine_id: str, destination_root: str | Path) -> Path:
        """Copy the machine subtree to <destination_root>/<machine_id>."""
        source = self.paths.machine_folder(machine_id)
        if not await asyncio.to_thread(source.is_dir):
            raise MachineNotFoundError(machine_id)
        destination_root = Path(destination_root)
        destination = destination_root / machine_id
        try:
            await asyncio.to_thread(destination_root.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(
                "mkdir", e, ErrorContext(machine_id=machine_id, path=str(destination_root)),
            ) from e
        if await _same_location(source, destination):
            return destination
        await asyncio.to_thread(remove_path, destination)
        await asyncio.to_thread(copy_tree, source, destination)
        logger.info(
            f"Exported machine to {destination}", extra={"machine_id": machine_id},
        )
        return destination

    async def import_machine(self, source_folder: str | Path) -> list[str]:
        """Import one machine folder, or every machine folder inside `source_folder`.

        A folder that directly holds overlays.json is a single machine named
        after the folder; anything else is treated as a collection of machines.
        Existing machines with the same name are replaced. Returns the ids
        imported.
        """
        source_folder = Path(source_folder)
        if not await asyncio.to_thread(source_folder.is_dir):
            raise StoredFileNotFoundError(str(source_folder))
        await self.ensure_base_folders_exist()

        if await asyncio.to_thread((source_folder / DOCUMENT_FILENAME).is_file):
            sources = [source_folder]
        else:
            try:
                children = await asyncio.to_thread(_visible_children, source_folder)
            except OSError as e:
                raise StorageIOError(
                    "list", e, ErrorContext(path=str(source_folder)),
                ) from e
            sources = []
            for child in children:
                if child.is_dir():
                    sources.append(child)
                else:
                    logger.warning(f"Skipping non-folder import entry: {child.name}")

        for source in sources:
            await self._check_import_source(source)

        imported = []
        for source in sources:
            await self._replace_machine_from(source)
            imported.append(source.name)
        return imported

    async def _check_import_source(self, source: Path) -> None:
        """Reject a source whose name is not a machine id or whose document
        names another machine. Runs for every source before anything is copied.
        """
        machine_id = check_path_segment(source.name, "machine_id")
        document = source / DOCUMENT_FILENAME
        if not await asyncio.to_thread(document.is_file):
            return
        stored = decode_document(await asyncio.to_thread(read_file, document, machine_id))
        if stored.machine_id != machine_id:
            raise MachineIdMismatchError(
                machine_id, stored.machine_id, ErrorContext(path=str(document)),
            )

    async def _replace_machine_from(self, source: Path) -> None:
        machine_id = source.name
        destination = self.paths.machine_folder(machine_id)
        if await _same_location(source, destination):
            logger.info("Import source is the stored machine itself, skipped",
                        extra={"machine_id": machine_id})
            return
        await asyncio.to_thread(remove_path, destination)
        await asyncio.to_thread(copy_tree, source, destination)
        logger.info(f"Imported machine from {source}", extra={"machine_id": machine_id})


async def _same_location(a: Path, b: Path) -> bool:
    # delete-then-copy onto itself would destroy the source
    return await asyncio.to_thread(lambda: a.resolve() == b.resolve())
