"""Asset Store - overlay image naming, listing, loading and deleting.

Invariants:
    - Two saves suggesting "bolt.png" yield "bolt.png" then "bolt-1.png"
    - Listing a machine without an overlay folder returns []
    - Deleting a missing image succeeds silently
    - Loading a missing image raises StoredFileNotFoundError
"""

import uuid

import pytest

from fieldar.core.errors import InvalidImageDataError, StoredFileNotFoundError
from fieldar.core.path_resolver import PathResolver
from fieldar.services.asset_store import AssetStore


@pytest.fixture
def assets(tmp_path):
    return AssetStore(PathResolver(tmp_path))


async def test_name_collision_appends_counter(assets, png_bytes):
    first = await assets.save_overlay_image("M1", png_bytes, "bolt.png")
    second = await assets.save_overlay_image("M1", png_bytes, "bolt.png")
    third = await assets.save_overlay_image("M1", png_bytes, "bolt.png")
    assert (first, second, third) == ("bolt.png", "bolt-1.png", "bolt-2.png")


async def test_save_creates_folder_and_writes_bytes(assets, tmp_path, jpeg_bytes):
    name = await assets.save_overlay_image("M1", jpeg_bytes, "valve.jpg")
    stored = PathResolver(tmp_path).overlay_image_path("M1", name)
    assert stored.read_bytes() == jpeg_bytes


async def test_unnamed_png_gets_uuid_and_png_extension(assets, png_bytes):
    name = await assets.save_overlay_image("M1", png_bytes)
    base, ext = name.rsplit(".", 1)
    assert ext == "png"
    assert uuid.UUID(base)


async def test_unnamed_other_bytes_default_to_jpg(assets, jpeg_bytes):
    name = await assets.save_overlay_image("M1", jpeg_bytes)
    assert name.endswith(".jpg")


async def test_empty_payload_rejected(assets, tmp_path):
    with pytest.raises(InvalidImageDataError):
        await assets.save_overlay_image("M1", b"", "bolt.png")
    assert not (tmp_path / "FieldAR").exists()


async def test_list_missing_folder_is_empty(assets):
    assert await assets.list_overlay_images("missing") == []


async def test_list_returns_sorted_visible_files(assets, tmp_path, png_bytes):
    await assets.save_overlay_image("M1", png_bytes, "nut.png")
    await assets.save_overlay_image("M1", png_bytes, "bolt.png")
    folder = PathResolver(tmp_path).overlay_images_folder("M1")
    (folder / ".bolt.png.abc123.tmp").write_bytes(b"orphan")
    (folder / "nested").mkdir()

    assert await assets.list_overlay_images("M1") == ["bolt.png", "nut.png"]


async def test_load_returns_saved_bytes(assets, png_bytes):
    name = await assets.save_overlay_image("M1", png_bytes, "bolt.png")
    assert await assets.load_overlay_image_data("M1", name) == png_bytes


async def test_load_missing_raises_not_found(assets):
    with pytest.raises(StoredFileNotFoundError) as exc_info:
        await assets.load_overlay_image_data("M1", "missing.png")
    assert exc_info.value.context.machine_id == "M1"


async def test_delete_removes_file(assets, png_bytes):
    name = await assets.save_overlay_image("M1", png_bytes, "bolt.png")
    await assets.delete_overlay_image("M1", name)
    assert await assets.list_overlay_images("M1") == []


async def test_delete_missing_is_noop(assets):
    await assets.delete_overlay_image("M1", "never-saved.png")
    await assets.delete_overlay_image("M1", "never-saved.png")


async def test_freed_name_is_reused(assets, png_bytes):
    await assets.save_overlay_image("M1", png_bytes, "bolt.png")
    await assets.delete_overlay_image("M1", "bolt.png")
    assert await assets.save_overlay_image("M1", png_bytes, "bolt.png") == "bolt.png"
