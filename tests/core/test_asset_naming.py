"""Asset Naming - extension sniffing, base name derivation, collision candidates."""

import itertools
import uuid

from fieldar.core.asset_naming import (
    PNG_SIGNATURE, candidate_names, is_png, sniff_extension, split_suggested_name,
)


def test_png_signature_detected(png_bytes):
    assert is_png(png_bytes)
    assert sniff_extension(png_bytes) == "png"


def test_non_png_falls_back_to_jpg(jpeg_bytes):
    assert not is_png(jpeg_bytes)
    assert sniff_extension(jpeg_bytes) == "jpg"


def test_truncated_signature_is_not_png():
    assert sniff_extension(PNG_SIGNATURE[:7]) == "jpg"


def test_suggested_name_supplies_base_and_extension(jpeg_bytes):
    assert split_suggested_name("bolt.png", jpeg_bytes) == ("bolt", "png")


def test_suggested_extension_is_lowercased(png_bytes):
    assert split_suggested_name("Valve.JPG", png_bytes) == ("Valve", "jpg")


def test_suggested_name_without_extension_sniffs(png_bytes):
    assert split_suggested_name("gasket", png_bytes) == ("gasket", "png")


def test_directory_components_are_dropped(png_bytes):
    assert split_suggested_name("../../etc/bolt.png", png_bytes) == ("bolt", "png")
    assert split_suggested_name("C:\\photos\\nut.jpg", png_bytes) == ("nut", "jpg")


def test_leading_dots_are_dropped(png_bytes):
    assert split_suggested_name(".hidden.png", png_bytes) == ("hidden", "png")


def test_no_suggestion_uses_uuid(png_bytes):
    base, ext = split_suggested_name(None, png_bytes)
    assert ext == "png"
    assert uuid.UUID(base)


def test_candidate_names_sequence():
    names = list(itertools.islice(candidate_names("bolt", "png"), 4))
    assert names == ["bolt.png", "bolt-1.png", "bolt-2.png", "bolt-3.png"]
