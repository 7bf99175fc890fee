# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from config import DEFAULT_LOG_LEVEL, Settings, lookup, read_env_file
from errors import ConfigError


def _env_file(tmp_path: Path, text: str) -> Path:
    path = tmp_path / ".env"
    path.write_text(text)
    return path


def test_read_env_file_keeps_known_keys_only(tmp_path: Path) -> None:
    path = _env_file(
        tmp_path,
        "# comment\n"
        "\n"
        "TODO_DATABASE_URL = 'sqlite:///x.db'\n"
        "UNRELATED=1\n"
        "not a pair\n"
        'TODO_DONE="#00ff00"\n',
    )
    assert read_env_file(path) == {"TODO_DATABASE_URL": "sqlite:///x.db", "TODO_DONE": "#00ff00"}


def test_missing_env_file_is_empty(tmp_path: Path) -> None:
    assert read_env_file(tmp_path / "absent") == {}


def test_environment_beats_env_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _env_file(tmp_path, "TODO_DATABASE_URL=sqlite:///from-file.db\nTODO_LOG_LEVEL=debug\n")
    monkeypatch.setenv("TODO_DATABASE_URL", "sqlite:///from-env.db")
    monkeypatch.delenv("TODO_LOG_LEVEL")

    settings = Settings.load(path)

    assert settings.database_url == "sqlite:///from-env.db"
    assert settings.log_level == "DEBUG"


def test_defaults_when_nothing_configured(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("TODO_DATABASE_URL", "TODO_LOG_DIR", "TODO_LOG_LEVEL"):
        monkeypatch.delenv(key)

    settings = Settings.load(tmp_path / "absent")

    assert settings.database_url.startswith("sqlite:///")
    assert settings.database_url.endswith("todo.db")
    assert settings.log_dir.name == "logs"
    assert settings.log_level == DEFAULT_LOG_LEVEL


def test_lookup_falls_back_to_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TODO_PRIMARY", raising=False)
    assert lookup("TODO_PRIMARY", "#123456", env_file=tmp_path / "absent") == "#123456"


def test_unknown_log_level_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TODO_LOG_LEVEL", "verbose")
    with pytest.raises(ConfigError, match="unknown log level 'VERBOSE'"):
        Settings.load(tmp_path / "absent")
