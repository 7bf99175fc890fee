"""Drawing for the interactive view and the print-only commands.

draw() is a pure function of controller state: it erases the window and
redraws everything each tick, dispatching on the current Screen. The window
only needs the small curses surface used here (erase, getmaxyx, border,
addstr, refresh), which keeps it swappable in tests.
"""
from __future__ import annotations
import curses
import unicodedata
from typing import List

from models import Screen, Task
from theme import color, ID_COLOR, OPEN_COLOR, DONE_COLOR

TITLE = " Terminal Todo List "
HINTS = " Add <A>  Toggle <Enter>  Cancel <Esc>  Quit <Q> "
ADD_LABEL = "Create New Task"
EMPTY_TEXT = "(no tasks)"
HIGHLIGHT = "» "
STRIKE_MARK = "\u0336"

# Overridden by init_colors() once curses is running.
PROMPT_ATTR = curses.A_BOLD
DONE_ATTR = curses.A_DIM


def init_colors() -> None:
    """Pick color attributes when the terminal supports them."""
    global PROMPT_ATTR, DONE_ATTR
    if not curses.has_colors():
        return
    curses.start_color()
    try:
        curses.use_default_colors()
        background = -1
    except curses.error:
        background = curses.COLOR_BLACK
    curses.init_pair(1, curses.COLOR_BLUE, background)
    curses.init_pair(2, curses.COLOR_GREEN, background)
    PROMPT_ATTR = curses.color_pair(1) | curses.A_BOLD
    DONE_ATTR = curses.color_pair(2) | curses.A_DIM


def sanitize(text: str) -> str:
    """Replace control characters (newlines, tabs, escapes) with spaces."""
    return ''.join(' ' if unicodedata.category(ch) == 'Cc' else ch for ch in text)


def cell_width(ch: str) -> int:
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ('W', 'F') else 1


def clip(text: str, cols: int) -> str:
    """Longest prefix of `text` that fits in `cols` terminal cells."""
    used = 0
    for i, ch in enumerate(text):
        used += cell_width(ch)
        if used > cols:
            return text[:i]
    return text


def clip_tail(text: str, cols: int) -> str:
    """Longest suffix of `text` that fits in `cols` terminal cells."""
    return clip(text[::-1], cols)[::-1]


def strike(text: str) -> str:
    """Overlay a combining long stroke on every character."""
    return ''.join(ch + STRIKE_MARK for ch in text)


# -------------------- interactive view --------------------
def draw(window, controller) -> None:
    window.erase()
    if controller.screen is Screen.ADDING:
        draw_adding(window, controller.buffer)
    else:
        draw_viewing(window, controller.tasks, controller.selected_index)
    window.refresh()


def _frame(window) -> tuple[int, int]:
    height, width = window.getmaxyx()
    window.border()
    _center(window, 0, width, TITLE, curses.A_BOLD)
    _center(window, height - 1, width, HINTS, curses.A_BOLD)
    return height, width


def _center(window, y: int, width: int, text: str, attr: int) -> None:
    text = text[: max(width - 2, 0)]
    if not text:
        return
    x = max((width - len(text)) // 2, 1)
    window.addstr(y, x, text, attr)


def visible_rows(count: int, selected: int, capacity: int) -> range:
    """Slice of task indexes that fits `capacity` lines and shows `selected`."""
    if capacity <= 0:
        return range(0)
    offset = max(0, selected - capacity + 1)
    return range(offset, min(count, offset + capacity))


def draw_viewing(window, tasks: List[Task], selected: int) -> None:
    height, width = _frame(window)
    inner = width - 4
    if inner <= len(HIGHLIGHT):
        return
    if not tasks:
        window.addstr(1, 2, EMPTY_TEXT[:inner], curses.A_DIM)
        return
    for line, idx in enumerate(visible_rows(len(tasks), selected, height - 2), start=1):
        task = tasks[idx]
        name = clip(sanitize(task.name), inner - len(HIGHLIGHT))
        prefix = HIGHLIGHT if idx == selected else ' ' * len(HIGHLIGHT)
        attr = DONE_ATTR if task.completed else curses.A_NORMAL
        if idx == selected:
            attr |= curses.A_REVERSE
        window.addstr(line, 2, prefix + (strike(name) if task.completed else name), attr)


def draw_adding(window, buffer: str) -> None:
    height, width = _frame(window)
    inner = width - 4
    if inner <= 0 or height < 4:
        return
    window.addstr(1, 2, ADD_LABEL[:inner], PROMPT_ATTR)
    # keep the tail of a long buffer visible
    window.addstr(2, 2, clip_tail(sanitize(buffer), inner), PROMPT_ATTR)


# -------------------- console output --------------------
def format_row(task: Task) -> str:
    name = sanitize(task.name)
    body = color(name, DONE_COLOR) if task.completed else color(name, OPEN_COLOR)
    return f"{color(f'{task.id}.', ID_COLOR)} {body}"


def print_rows(tasks: List[Task], echo=print) -> None:
    for task in tasks:
        echo(format_row(task))
