# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from logging_setup import _ConsoleNoiseFilter, console_muted, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_passes_app_and_quiets_third_party() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("storage", logging.DEBUG))
    assert f.filter(_record("cli", logging.WARNING))
    assert not f.filter(_record("sqlalchemy.engine.Engine", logging.WARNING))
    assert f.filter(_record("sqlalchemy.pool", logging.ERROR))


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console_level="ERROR")

    logging.getLogger("controller").debug("hello from test")

    assert log_file == tmp_path / "logs" / "todo.log"
    assert "DEBUG controller: hello from test" in log_file.read_text()


def test_console_muted_keeps_stderr_clear(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console_level="INFO")
    log = logging.getLogger("controller")

    with console_muted():
        log.warning("while the view is up")
    assert capsys.readouterr().err == ""
    assert "while the view is up" in log_file.read_text()

    log.warning("after the view closed")
    assert "after the view closed" in capsys.readouterr().err


def test_console_muted_restores_handler_on_error(tmp_path: Path) -> None:
    setup_logging(log_dir=tmp_path / "logs")
    before = list(logging.getLogger().handlers)

    with pytest.raises(RuntimeError):
        with console_muted():
            raise RuntimeError("boom")

    assert sorted(map(id, logging.getLogger().handlers)) == sorted(map(id, before))
