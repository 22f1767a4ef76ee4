from __future__ import annotations

from pathlib import Path

import pytest

from jimaku.config import DEFAULT_MODEL, Settings
from jimaku.errors import ConfigurationError


def test_defaults_derive_exports_dir(tmp_path: Path) -> None:
    settings = Settings(data_dir=tmp_path, _env_file=None)

    assert settings.model == DEFAULT_MODEL
    assert settings.exports_dir == tmp_path / "exports"


def test_api_key_read_from_gemini_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")

    settings = Settings(data_dir=tmp_path, _env_file=None)

    assert settings.require_api_key() == "from-env"


def test_model_read_from_prefixed_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("JIMAKU_MODEL", "gemini-2.5-flash")

    assert Settings(data_dir=tmp_path, _env_file=None).model == "gemini-2.5-flash"


def test_missing_api_key_raises_configuration_error(tmp_path: Path) -> None:
    settings = Settings(data_dir=tmp_path, _env_file=None)

    with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
        settings.require_api_key()


def test_ensure_dirs(tmp_path: Path) -> None:
    settings = Settings(data_dir=tmp_path / "data", _env_file=None)
    settings.ensure_dirs()

    assert settings.exports_dir.is_dir()
