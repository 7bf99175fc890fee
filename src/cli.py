"""Command-line entry points and the interactive terminal session.

Subcommands print rows with render.format_row; running with no subcommand
opens the full-screen view. curses.wrapper puts the terminal into cbreak
mode on the alternate screen and restores it on every exit path, including
errors.
"""
import curses
import logging
import os
from contextlib import contextmanager, suppress
from typing import Iterator, Optional, Sequence, Union

import click

import render
from config import Settings
from controller import Controller
from errors import TodoError
from logging_setup import console_muted, setup_logging
from models import KeyEvent
from storage import Storage

VERSION = "0.1.0"

logger = logging.getLogger(__name__)

_STR_KEYS = {
    '\n': 'enter',
    '\r': 'enter',
    '\x7f': 'backspace',
    '\b': 'backspace',
    '\x1b': 'esc',
}
_INT_KEYS = {
    curses.KEY_UP: 'up',
    curses.KEY_DOWN: 'down',
    curses.KEY_ENTER: 'enter',
    curses.KEY_BACKSPACE: 'backspace',
    curses.KEY_RESIZE: 'resize',
    10: 'enter',
    13: 'enter',
    127: 'backspace',
    8: 'backspace',
    27: 'esc',
}


# --- terminal session ---
def translate_key(ch: Union[str, int]) -> Optional[KeyEvent]:
    """Map a get_wch() result to a KeyEvent; None for keys we ignore.

    curses only reports key presses, so every event is a press.
    """
    if isinstance(ch, str):
        if ch in _STR_KEYS:
            return KeyEvent(_STR_KEYS[ch])
        return KeyEvent(ch) if ch.isprintable() else None
    name = _INT_KEYS.get(ch)
    return KeyEvent(name) if name else None


def read_key(window) -> KeyEvent:
    while True:
        event = translate_key(window.get_wch())
        if event is not None:
            return event


def _session(stdscr, controller: Controller) -> None:
    # invisible cursor is cosmetic; some terminals refuse it
    with suppress(curses.error):
        curses.curs_set(0)
    stdscr.keypad(True)
    render.init_colors()
    controller.run(lambda c: render.draw(stdscr, c), lambda: read_key(stdscr))


def run_interactive(storage: Storage) -> None:
    # Esc should cancel promptly instead of waiting for an escape sequence
    os.environ.setdefault('ESCDELAY', '25')
    controller = Controller(storage, storage.list_all())
    logger.info("interactive view started with %d tasks", len(controller.tasks))
    with console_muted():
        curses.wrapper(_session, controller)


# --- command helpers ---
@contextmanager
def _reported() -> Iterator[None]:
    try:
        yield
    except TodoError as exc:
        logger.debug("command failed", exc_info=True)
        raise click.ClickException(str(exc)) from exc


def _join_name(words: Sequence[str]) -> str:
    name = ' '.join(words).strip()
    if not name:
        raise click.UsageError("A task name is required.")
    return name


# --- commands ---
@click.group(invoke_without_command=True)
@click.option('--database-url', default=None, help='Database URL (overrides TODO_DATABASE_URL).')
@click.version_option(VERSION, prog_name='todo')
@click.pass_context
def cli(ctx: click.Context, database_url: Optional[str]) -> None:
    """Terminal todo list. Run without a command for the interactive view."""
    with _reported():
        settings = Settings.load()
    if database_url:
        settings.database_url = database_url
    setup_logging(log_dir=settings.log_dir, console_level=settings.log_level)
    with _reported():
        storage = Storage(settings.database_url)
    ctx.call_on_close(storage.close)
    ctx.obj = storage
    if ctx.invoked_subcommand is None:
        with _reported():
            run_interactive(storage)


@cli.command()
@click.argument('name', nargs=-1)
@click.pass_obj
def add(storage: Storage, name: Sequence[str]) -> None:
    """Add a task."""
    task_name = _join_name(name)
    with _reported():
        storage.insert(task_name)


@cli.command()
@click.argument('name', nargs=-1)
@click.pass_obj
def search(storage: Storage, name: Sequence[str]) -> None:
    """Show tasks whose name matches exactly."""
    task_name = _join_name(name)
    with _reported():
        tasks = storage.find_by_name(task_name)
    render.print_rows(tasks, echo=click.echo)


@cli.command()
@click.argument('name', nargs=-1)
@click.pass_obj
def done(storage: Storage, name: Sequence[str]) -> None:
    """Mark every task with this name as completed."""
    task_name = _join_name(name)
    with _reported():
        updated = storage.toggle_completed(task_name, True)
    if not updated:
        click.echo(f'No task named "{task_name}".', err=True)


@cli.command('show-all')
@click.pass_obj
def show_all(storage: Storage) -> None:
    """Show every task."""
    with _reported():
        tasks = storage.list_all()
    render.print_rows(tasks, echo=click.echo)
