"""Path Resolver - canonical on-disk layout of the machine store.

Layout:
    <root>/FieldAR/Machines/<machine_id>/
        base_photo.png
        overlays.json
        overlay_images/<asset files>

Invariants:
    - Pure: no filesystem access, no caching; every call returns a fresh Path
    - Same (root, machine_id) always yields the same paths
    - Machine ids and image names are single path segments: non-empty, no "/"
      or "\\", no leading "." (which also rules out "." and ".."). Anything
      else raises InvalidPathSegmentError before a path is built, so no
      operation can reach outside one machine's subtree

Design Decisions:
    - Paths are plain values, recomputed per call, so a machine deleted and
      recreated never leaves a stale handle behind
"""

import re
from dataclasses import dataclass
from pathlib import Path

from fieldar.core.errors import ErrorContext, InvalidPathSegmentError

BASE_FOLDER_NAME = "FieldAR"
MACHINES_FOLDER_NAME = "Machines"
OVERLAY_IMAGES_FOLDER_NAME = "overlay_images"
DOCUMENT_FILENAME = "overlays.json"
BASE_IMAGE_FILENAME = "base_photo.png"

PATH_SEGMENT_PATTERN = r"^[^/\\.][^/\\]{0,254}$"
_PATH_SEGMENT = re.compile(PATH_SEGMENT_PATTERN)


def check_path_segment(value: str, kind: str, machine_id: str | None = None) -> str:
    if not isinstance(value, str) or not _PATH_SEGMENT.fullmatch(value) or "\0" in value:
        raise InvalidPathSegmentError(kind, value, ErrorContext(machine_id=machine_id))
    return value


@dataclass(frozen=True)
class MachinePaths:
    """All canonical paths for one machine."""
    machine_folder: Path
    document: Path
    base_image: Path
    overlay_images_folder: Path


class PathResolver:
    """Maps an injected root directory and machine ids to store paths."""

    def __init__(self, root: str | Path):
        self._root = Path(root)

    @property
    def root_folder(self) -> Path:
        return self._root / BASE_FOLDER_NAME

    @property
    def machines_folder(self) -> Path:
        return self.root_folder / MACHINES_FOLDER_NAME

    def machine_folder(self, machine_id: str) -> Path:
        return self.machines_folder / check_path_segment(machine_id, "machine_id")

    def document_path(self, machine_id: str) -> Path:
        return self.machine_folder(machine_id) / DOCUMENT_FILENAME

    def base_image_path(self, machine_id: str) -> Path:
        return self.machine_folder(machine_id) / BASE_IMAGE_FILENAME

    def overlay_images_folder(self, machine_id: str) -> Path:
        return self.machine_folder(machine_id) / OVERLAY_IMAGES_FOLDER_NAME

    def overlay_image_path(self, machine_id: str, image_name: str) -> Path:
        folder = self.overlay_images_folder(machine_id)
        return folder / check_path_segment(image_name, "image_name", machine_id)

    def paths_for(self, machine_id: str) -> MachinePaths:
        return MachinePaths(
            machine_folder=self.machine_folder(machine_id),
            document=self.document_path(machine_id),
            base_image=self.base_image_path(machine_id),
            overlay_images_folder=self.overlay_images_folder(machine_id),
        )
