"""Runtime configuration.

Resolution order for every key: real environment variable > project .env
file > built-in default. The .env file lives at the project root (next to
src/) and uses plain KEY=VALUE lines; blank lines and '#' comments are
skipped.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from errors import ConfigError

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / 'data'
ENV_FILE = PROJECT_ROOT / '.env'

KNOWN_KEYS = {
    'TODO_DATABASE_URL', 'TODO_LOG_DIR', 'TODO_LOG_LEVEL',
    'TODO_PRIMARY', 'TODO_DONE', 'TODO_OPEN',
}

DEFAULT_DATABASE_URL = f"sqlite:///{DATA_DIR / 'todo.db'}"
DEFAULT_LOG_DIR = DATA_DIR / 'logs'
DEFAULT_LOG_LEVEL = 'WARNING'


def read_env_file(path: Path = ENV_FILE) -> Dict[str, str]:
    """Parse KEY=VALUE pairs for known keys; unreadable file -> empty dict."""
    values: Dict[str, str] = {}
    if not path.exists():
        return values
    try:
        text = path.read_text()
    except OSError:
        return values
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        if k in KNOWN_KEYS:
            values[k] = v
    return values


def lookup(key: str, default: Optional[str] = None, env_file: Path = ENV_FILE) -> Optional[str]:
    value = os.environ.get(key)
    if value:
        return value
    return read_env_file(env_file).get(key, default)


@dataclass
class Settings:
    database_url: str
    log_dir: Path
    log_level: str

    @classmethod
    def load(cls, env_file: Path = ENV_FILE) -> "Settings":
        file_values = read_env_file(env_file)

        def pick(key: str, default: str) -> str:
            return os.environ.get(key) or file_values.get(key) or default

        log_level = pick('TODO_LOG_LEVEL', DEFAULT_LOG_LEVEL).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"TODO_LOG_LEVEL: unknown log level {log_level!r}")
        return cls(
            database_url=pick('TODO_DATABASE_URL', DEFAULT_DATABASE_URL),
            log_dir=Path(pick('TODO_LOG_DIR', str(DEFAULT_LOG_DIR))),
            log_level=log_level,
        )
