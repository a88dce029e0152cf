"""Overlay Image Routes - upload, list, fetch and delete overlay assets.

Invariants:
    - Uploads are raw request bodies; the optional suggested_name query
      parameter is a hint, the response carries the name actually used
    - DELETE of a missing image is 204, same as a present one
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi import Path as PathParam

from fieldar.api.dependencies import get_machine_store
from fieldar.api.routes.machines import MachineId, image_media_type
from fieldar.core.path_resolver import PATH_SEGMENT_PATTERN
from fieldar.schemas.machine import OverlayImageList, OverlayImageSaved
from fieldar.services.machine_store import MachineStore

router = APIRouter(prefix="/api/v1/machines", tags=["overlay-images"])

ImageName = Annotated[str, PathParam(pattern=PATH_SEGMENT_PATTERN)]


@router.get("/{machine_id}/overlay-images", response_model=OverlayImageList)
async def list_overlay_images(
    machine_id: MachineId,
    store: MachineStore = Depends(get_machine_store),
):
    images = await store.list_overlay_images(machine_id)
    return OverlayImageList(machine_id=machine_id, images=images)


@router.post(
    "/{machine_id}/overlay-images",
    response_model=OverlayImageSaved,
    status_code=status.HTTP_201_CREATED,
)
async def upload_overlay_image(
    request: Request,
    machine_id: MachineId,
    suggested_name: str | None = Query(None, max_length=255),
    store: MachineStore = Depends(get_machine_store),
):
    filename = await store.save_overlay_image(
        machine_id, await request.body(), suggested_name,
    )
    return OverlayImageSaved(machine_id=machine_id, filename=filename)


@router.get("/{machine_id}/overlay-images/{image_name}")
async def get_overlay_image(
    machine_id: MachineId,
    image_name: ImageName,
    store: MachineStore = Depends(get_machine_store),
):
    data = await store.load_overlay_image_data(machine_id, image_name)
    return Response(content=data, media_type=image_media_type(data))


@router.delete(
    "/{machine_id}/overlay-images/{image_name}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_overlay_image(
    machine_id: MachineId,
    image_name: ImageName,
    store: MachineStore = Depends(get_machine_store),
):
    await store.delete_overlay_image(machine_id, image_name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
