"""Data models for the terminal todo application.

Exposes the Task dataclass (one stored todo row), the Screen variants of
the interactive view, and the KeyEvent value fed into the controller.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

@dataclass
class Task:
    """A single todo item.

    Fields:
        id: Store-assigned integer id (never reassigned client-side).
        name: Display name; also the lookup key for search/toggle.
        completed: True once the task has been checked off.
    """
    id: int
    name: str
    completed: bool = False

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Task":
        return cls(id=int(row['id']), name=str(row['name']), completed=bool(row['completed']))


class Screen(Enum):
    VIEWING = "viewing"
    ADDING = "adding"


PRESS = "press"

@dataclass(frozen=True)
class KeyEvent:
    """One input event.

    key is either a single printable character or one of the names
    "up", "down", "enter", "backspace", "esc". kind mirrors terminals that
    report release/repeat events; only "press" drives the controller.
    """
    key: str
    kind: str = PRESS

    @property
    def is_press(self) -> bool:
        return self.kind == PRESS
