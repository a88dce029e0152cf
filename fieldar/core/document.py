"""Document Models - the overlays.json schema as pydantic value models.

Invariants:
    - All schema fields are required when parsing (no defaults on the models)
    - Wire names are camelCase for overlay fields (imageName, layerIndex)
    - Unknown keys survive as model extras, so re-encoding never drops data
    - Aliased fields are populated by wire name only: "image_name" in a stored
      document is an unknown key, never a stand-in for "imageName"
    - Coordinates are normalized 0..1 but not range-checked (caller invariant)

Design Decisions:
    - Models carry no IO and no timestamps of their own; `new_document` is the
      only place a default document is constructed
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_IMAGE = "base_photo.png"


class _DocumentModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class NormalizedPoint(_DocumentModel):
    x: float
    y: float


class NormalizedSize(_DocumentModel):
    width: float
    height: float


class Overlay(_DocumentModel):
    """One overlay image placement, relative to the base image."""
    id: str
    image_name: str = Field(alias="imageName")
    position: NormalizedPoint
    size: NormalizedSize
    rotation: float
    layer_index: int = Field(alias="layerIndex")


class MachineDocument(_DocumentModel):
    """Per-machine overlay document.

    undo_history / redo_history are opaque to the store.
    """
    machine_id: str
    base_image: str
    last_modified: str
    overlays: list[Overlay]
    undo_history: list[str]
    redo_history: list[str]


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with second precision, e.g. 2026-10-18T09:30:00Z."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace(
        "+00:00", "Z",
    )


def new_document(machine_id: str, last_modified: str | None = None) -> MachineDocument:
    """Default document for a freshly created machine."""
    return MachineDocument(
        machine_id=machine_id,
        base_image=DEFAULT_BASE_IMAGE,
        last_modified=last_modified if last_modified is not None else utc_timestamp(),
        overlays=[],
        undo_history=[],
        redo_history=[],
    )
