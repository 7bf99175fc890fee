"""Logging configuration.

The interactive view owns the terminal, so the full log goes to a file and
only filtered records reach stderr.
"""
from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
APP_LOGGERS = ("cli", "controller", "storage", "render", "config")
CONSOLE_HANDLER = "console"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep stderr readable:
    - app loggers pass (the handler level does the rest)
    - sqlalchemy and other third-party loggers only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.split(".", 1)[0] in APP_LOGGERS:
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path,
    console_level: int | str = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install a stderr handler and a file handler on the root logger.

    Call once, early. Returns the path of the log file.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "todo.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    ch = logging.StreamHandler(sys.stderr)
    ch.set_name(CONSOLE_HANDLER)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    return log_file


@contextmanager
def console_muted() -> Iterator[None]:
    """Detach the stderr handler while a full-screen view owns the terminal.

    Records still reach the log file; the handler is re-attached on exit.
    """
    root = logging.getLogger()
    detached = [h for h in root.handlers if h.get_name() == CONSOLE_HANDLER]
    for h in detached:
        root.removeHandler(h)
    try:
        yield
    finally:
        for h in detached:
            root.addHandler(h)
