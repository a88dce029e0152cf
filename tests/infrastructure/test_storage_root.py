"""Storage Root - configured root wins, platform default otherwise, fatal when absent."""

from pathlib import Path

import pytest

from fieldar.core.errors import RootDirectoryUnavailableError
from fieldar.infrastructure.storage_root import resolve_storage_root


def test_configured_root_is_used(tmp_path):
    assert resolve_storage_root(tmp_path) == tmp_path
    assert resolve_storage_root(str(tmp_path)) == tmp_path


def test_default_is_documents_under_home(tmp_path, monkeypatch):
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    assert resolve_storage_root(None) == tmp_path / "Documents"


def test_missing_home_is_fatal(monkeypatch):
    def no_home(cls):
        raise RuntimeError("Could not determine home directory.")

    monkeypatch.setattr(Path, "home", classmethod(no_home))
    with pytest.raises(RootDirectoryUnavailableError) as exc_info:
        resolve_storage_root(None)
    assert isinstance(exc_info.value.cause, RuntimeError)
