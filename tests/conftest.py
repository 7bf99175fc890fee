# tests/conftest.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

import theme
from models import Task
from storage import Storage

from .fakes import FakeGateway


@pytest.fixture()
def db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'todo.db'}"


@pytest.fixture()
def storage(db_url: str):
    """Real SQLite-backed Storage in a per-test temp directory."""
    store = Storage(db_url)
    yield store
    store.close()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, db_url: str) -> None:
    """Keep config lookups and log files inside tmp_path."""
    monkeypatch.setenv("TODO_DATABASE_URL", db_url)
    monkeypatch.setenv("TODO_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("TODO_LOG_LEVEL", "WARNING")


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway([
        Task(1, "Buy milk", False),
        Task(2, "Walk dog", True),
        Task(3, "Pay rent", False),
    ])


@pytest.fixture(autouse=True)
def restore_root_logging():
    """cli() installs handlers on the root logger; undo that per test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)


@pytest.fixture()
def plain(monkeypatch: pytest.MonkeyPatch) -> None:
    """Render console rows without ANSI styling."""
    monkeypatch.setattr(theme, "_ENABLE", False)
