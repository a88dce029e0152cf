"""Machine Routes - machine lifecycle, overlay document, base image, export/import.

Invariants:
    - Documents travel as canonical overlays.json bytes (core/document_codec.py),
      so the HTTP body and the file on disk are byte-identical
    - A PUT document whose machine_id differs from the path is rejected by the
      store (MachineIdMismatchError, 400)
    - Every store error propagates to the FieldARError handler untouched
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi import Path as PathParam

from fieldar.api.dependencies import get_machine_store
from fieldar.core.asset_naming import is_png
from fieldar.core.document_codec import decode_document, encode_document
from fieldar.core.path_resolver import PATH_SEGMENT_PATTERN
from fieldar.schemas.machine import (
    ExportRequest, ExportResponse, ImportRequest,
    ImportResponse, MachineCreate, MachineCreated, MachineList,
)
from fieldar.services.machine_store import MachineStore

router = APIRouter(prefix="/api/v1/machines", tags=["machines"])

MachineId = Annotated[str, PathParam(pattern=PATH_SEGMENT_PATTERN)]


def image_media_type(data: bytes) -> str:
    return "image/png" if is_png(data) else "image/jpeg"


@router.get("", response_model=MachineList)
async def list_machines(store: MachineStore = Depends(get_machine_store)):
    return MachineList(machines=await store.list_machines())


@router.post(
    "", response_model=MachineCreated, status_code=status.HTTP_201_CREATED,
)
async def create_machine(
    body: MachineCreate, store: MachineStore = Depends(get_machine_store),
):
    """Create a machine (idempotent: an existing document is kept)."""
    await store.create_machine(body.machine_id)
    return MachineCreated(machine_id=body.machine_id)


@router.post("/import", response_model=ImportResponse)
async def import_machines(
    body: ImportRequest, store: MachineStore = Depends(get_machine_store),
):
    return ImportResponse(imported=await store.import_machine(body.source_folder))


@router.delete("/{machine_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_machine(
    machine_id: MachineId,
    store: MachineStore = Depends(get_machine_store),
):
    await store.delete_machine(machine_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ─── Document ───────────────────────────────────────────────────

@router.get("/{machine_id}/document")
async def get_document(
    machine_id: MachineId,
    store: MachineStore = Depends(get_machine_store),
):
    document = await store.load_document(machine_id)
    return Response(content=encode_document(document), media_type="application/json")


@router.put("/{machine_id}/document", status_code=status.HTTP_204_NO_CONTENT)
async def put_document(
    request: Request,
    machine_id: MachineId,
    store: MachineStore = Depends(get_machine_store),
):
    """Replace the whole document. last_modified is stored as sent."""
    document = decode_document(await request.body())
    await store.save_document(machine_id, document)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ─── Base image ─────────────────────────────────────────────────

@router.get("/{machine_id}/base-image")
async def get_base_image(
    machine_id: MachineId,
    store: MachineStore = Depends(get_machine_store),
):
    data = await store.load_base_image_data(machine_id)
    return Response(content=data, media_type=image_media_type(data))


@router.put("/{machine_id}/base-image", status_code=status.HTTP_204_NO_CONTENT)
async def put_base_image(
    request: Request,
    machine_id: MachineId,
    store: MachineStore = Depends(get_machine_store),
):
    await store.save_base_image(machine_id, await request.body())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ─── Export ─────────────────────────────────────────────────────

@router.post("/{machine_id}/export", response_model=ExportResponse)
async def export_machine(
    body: ExportRequest,
    machine_id: MachineId,
    store: MachineStore = Depends(get_machine_store),
):
    destination = await store.export_machine(machine_id, body.destination_root)
    return ExportResponse(machine_id=machine_id, destination=str(destination))
