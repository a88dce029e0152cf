"""Settings - environment overrides and the blank storage root."""

from fieldar.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("STORAGE_ROOT", raising=False)
    settings = Settings(_env_file=None)
    assert settings.storage_root is None
    assert settings.log_format == "json"


def test_storage_root_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("STORAGE_ROOT", str(tmp_path))
    assert Settings(_env_file=None).storage_root == str(tmp_path)


def test_blank_storage_root_means_default(monkeypatch):
    monkeypatch.setenv("STORAGE_ROOT", "   ")
    assert Settings(_env_file=None).storage_root is None
