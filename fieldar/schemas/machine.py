"""Machine Schemas - Pydantic models for the HTTP boundary.

Invariants:
    - Machine ids and image names are single path segments: no "/" or "\\",
      no leading "." (which also rules out "." and "..")
    - Documents themselves are not modeled here; they travel as canonical
      overlays.json bytes through core/document_codec.py

Design Decisions:
    - The pattern is shared with core/path_resolver.py, which enforces it for
      every store call; checking it here too turns bad input into a 400
      validation error before the request reaches the store
"""

from pydantic import BaseModel, Field

from fieldar.core.path_resolver import PATH_SEGMENT_PATTERN


class MachineCreate(BaseModel):
    machine_id: str = Field(pattern=PATH_SEGMENT_PATTERN)


class MachineCreated(BaseModel):
    machine_id: str


class MachineList(BaseModel):
    machines: list[str]


class OverlayImageList(BaseModel):
    machine_id: str
    images: list[str]


class OverlayImageSaved(BaseModel):
    """Name the store actually used; may differ from the suggestion."""
    machine_id: str
    filename: str


class ExportRequest(BaseModel):
    destination_root: str = Field(min_length=1)


class ExportResponse(BaseModel):
    machine_id: str
    destination: str


class ImportRequest(BaseModel):
    source_folder: str = Field(min_length=1)


class ImportResponse(BaseModel):
    imported: list[str]
