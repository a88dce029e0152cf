"""Atomic Writer - full-or-nothing replacement of destination files.

Invariants:
    - Success leaves exactly the destination, no temp files
    - Failure after the temp file is written (os.replace raising) leaves the
      destination's prior content, or its absence, unchanged, and no temp file
    - Failures surface as StorageIOError with the OSError as cause
"""

import os

import pytest

from fieldar.core.errors import StorageIOError
from fieldar.infrastructure.atomic_writer import temporary_sibling, write_atomically


def test_writes_new_file(tmp_path):
    dest = tmp_path / "overlays.json"
    write_atomically(b"hello", dest)
    assert dest.read_bytes() == b"hello"
    assert list(tmp_path.iterdir()) == [dest]


def test_replaces_existing_file(tmp_path):
    dest = tmp_path / "overlays.json"
    dest.write_bytes(b"old")
    write_atomically(b"new content", dest)
    assert dest.read_bytes() == b"new content"
    assert list(tmp_path.iterdir()) == [dest]


def test_interrupted_replace_keeps_previous_content(tmp_path, monkeypatch):
    dest = tmp_path / "overlays.json"
    dest.write_bytes(b"previous")

    def fail_replace(src, dst):
        raise OSError(5, "Input/output error")

    monkeypatch.setattr(os, "replace", fail_replace)
    with pytest.raises(StorageIOError) as exc_info:
        write_atomically(b"next", dest)

    assert dest.read_bytes() == b"previous"
    assert list(tmp_path.iterdir()) == [dest]
    assert exc_info.value.cause.errno == 5


def test_interrupted_replace_keeps_destination_absent(tmp_path, monkeypatch):
    dest = tmp_path / "base_photo.png"

    def fail_replace(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(os, "replace", fail_replace)
    with pytest.raises(StorageIOError):
        write_atomically(b"\x89PNG", dest)

    assert not dest.exists()
    assert list(tmp_path.iterdir()) == []


def test_missing_parent_folder_raises_storage_io_error(tmp_path):
    with pytest.raises(StorageIOError) as exc_info:
        write_atomically(b"x", tmp_path / "missing" / "overlays.json")
    assert isinstance(exc_info.value.cause, FileNotFoundError)


def test_temporary_sibling_is_hidden_and_cleaned_up(tmp_path):
    dest = tmp_path / "overlays.json"
    with temporary_sibling(dest) as (fd, tmp):
        os.close(fd)
        assert tmp.parent == tmp_path
        assert tmp.name.startswith(".overlays.json.")
        assert tmp.exists()
    assert not tmp.exists()


def test_temporary_sibling_cleans_up_on_error(tmp_path):
    dest = tmp_path / "overlays.json"
    with pytest.raises(RuntimeError):
        with temporary_sibling(dest) as (fd, tmp):
            os.close(fd)
            raise RuntimeError("boom")
    assert list(tmp_path.iterdir()) == []
