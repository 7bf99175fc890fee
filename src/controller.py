"""Interactive view state and key dispatch.

The controller owns the session state (current screen, loaded tasks,
selected row, add-prompt buffer, exit flag) and turns one KeyEvent at a time
into a state change or a storage call. It never draws; render.draw() reads
its attributes.
"""
from __future__ import annotations
import logging
from typing import Callable, List, Optional, Protocol

from models import KeyEvent, Screen, Task

logger = logging.getLogger(__name__)


class TaskGateway(Protocol):
    def insert(self, name: str) -> None: ...
    def list_all(self) -> List[Task]: ...
    def toggle_completed(self, name: str, completed: Optional[bool] = None) -> int: ...


class Controller:
    def __init__(self, gateway: TaskGateway, tasks: Optional[List[Task]] = None):
        self.gateway = gateway
        self.tasks: List[Task] = list(tasks) if tasks is not None else gateway.list_all()
        self.selected_index: int = 0
        self.screen: Screen = Screen.VIEWING
        self.buffer: str = ''
        self.exit: bool = False

    def run(self, draw: Callable[["Controller"], None], read_key: Callable[[], KeyEvent]) -> None:
        """Draw, block for one key, apply it; repeat until quit."""
        while not self.exit:
            draw(self)
            self.handle(read_key())

    # -------------------- dispatch --------------------
    def handle(self, event: KeyEvent) -> None:
        if not event.is_press:
            return
        if self.screen is Screen.ADDING:
            self._handle_adding(event.key)
        else:
            self._handle_viewing(event.key)

    def _handle_viewing(self, key: str) -> None:
        if key == 'a':
            self.screen = Screen.ADDING
        elif key == 'q':
            self.exit = True
        elif key == 'up':
            self.move_up()
        elif key == 'down':
            self.move_down()
        elif key == 'enter':
            self.toggle_selected()
        # 'e' (edit) is accepted but has no behavior of its own

    def _handle_adding(self, key: str) -> None:
        if key == 'enter':
            self.submit()
        elif key == 'esc':
            self.buffer = ''
            self.screen = Screen.VIEWING
        elif key == 'backspace':
            if self.buffer:
                self.buffer = self.buffer[:-1]
        elif len(key) == 1 and key.isprintable():
            self.buffer += key

    # -------------------- operations --------------------
    def move_up(self) -> None:
        if not self.tasks:
            return
        if self.selected_index > 0:
            self.selected_index -= 1
        else:
            self.selected_index = len(self.tasks) - 1

    def move_down(self) -> None:
        if not self.tasks:
            return
        if self.selected_index < len(self.tasks) - 1:
            self.selected_index += 1
        else:
            self.selected_index = 0

    def selected_task(self) -> Optional[Task]:
        if 0 <= self.selected_index < len(self.tasks):
            return self.tasks[self.selected_index]
        return None

    def toggle_selected(self) -> None:
        task = self.selected_task()
        if task is None:
            return
        logger.info("toggling task %r", task.name)
        self.gateway.toggle_completed(task.name)
        self.refresh()

    def submit(self) -> None:
        name = self.buffer.strip()
        if not name:
            return
        logger.info("adding task %r", name)
        self.gateway.insert(name)
        self.refresh()
        self.buffer = ''
        self.screen = Screen.VIEWING

    def refresh(self) -> None:
        """Reload tasks; keep the selection unless the list shrank past it."""
        self.tasks = self.gateway.list_all()
        if self.selected_index >= len(self.tasks):
            self.selected_index = max(len(self.tasks) - 1, 0)
