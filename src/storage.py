"""Persistence gateway for tasks.

Wraps a SQLAlchemy engine and exposes the four task operations. The schema
is established by embedded migrations applied every time a Storage is
constructed; already-applied versions are recorded in schema_history and
skipped.
"""
from __future__ import annotations
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from sqlalchemy import (
    Boolean, Column, DateTime, Integer, MetaData, String, Table, Text,
    create_engine, event, func, insert, not_, select, update,
)
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from errors import StorageError
from models import Task

logger = logging.getLogger(__name__)

metadata = MetaData()

todo_table = Table(
    'todo', metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('name', Text, nullable=False),
    Column('created_at', DateTime, nullable=False, server_default=func.current_timestamp()),
    Column('completed', Boolean, nullable=False, default=False),
)

schema_history = Table(
    'schema_history', metadata,
    Column('version', Integer, primary_key=True),
    Column('name', String(100), nullable=False),
    Column('applied_at', DateTime, nullable=False, server_default=func.current_timestamp()),
)


@dataclass(frozen=True)
class Migration:
    version: int
    name: str
    apply: Callable[[Connection], None]


def _initial(conn: Connection) -> None:
    todo_table.create(conn, checkfirst=True)


MIGRATIONS: List[Migration] = [
    Migration(1, 'initial', _initial),
]


class Storage:
    """Single owner of the store connection.

    Every public operation either succeeds or raises StorageError.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        _ensure_sqlite_dir(database_url)
        try:
            self.engine: Engine = create_engine(database_url, echo=echo)
        except (SQLAlchemyError, ImportError) as exc:
            raise StorageError(f"cannot open database {database_url!r}: {exc}") from exc
        _attach_connection_listeners(self.engine)
        self.applied: List[Migration] = self.migrate()

    # -------------------- lifecycle --------------------
    def close(self) -> None:
        self.engine.dispose()

    def __enter__(self) -> "Storage":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @contextmanager
    def _connect(self, action: str) -> Iterator[Connection]:
        try:
            with self.engine.begin() as conn:
                yield conn
        except SQLAlchemyError as exc:
            raise StorageError(f"{action} failed: {exc}") from exc

    # -------------------- migrations --------------------
    def migrate(self) -> List[Migration]:
        """Apply pending migrations in version order; return the ones applied."""
        applied: List[Migration] = []
        with self._connect('migration') as conn:
            schema_history.create(conn, checkfirst=True)
            done = set(conn.execute(select(schema_history.c.version)).scalars())
            for migration in sorted(MIGRATIONS, key=lambda m: m.version):
                if migration.version in done:
                    continue
                migration.apply(conn)
                conn.execute(insert(schema_history).values(version=migration.version, name=migration.name))
                applied.append(migration)
                logger.info("Migration Applied - Name: %s, Version: %s", migration.name, migration.version)
        return applied

    # -------------------- task operations --------------------
    def insert(self, name: str) -> None:
        with self._connect('insert') as conn:
            conn.execute(insert(todo_table).values(name=name, completed=False))
        logger.debug("inserted task name=%r", name)

    def list_all(self) -> List[Task]:
        """Every task, in the order the store returns them."""
        query = select(todo_table.c.id, todo_table.c.name, todo_table.c.completed)
        with self._connect('list') as conn:
            rows = conn.execute(query).mappings().all()
        return [Task.from_row(r) for r in rows]

    def find_by_name(self, name: str) -> List[Task]:
        """Exact-name matches; empty list when nothing matches."""
        query = (
            select(todo_table.c.id, todo_table.c.name, todo_table.c.completed)
            .where(todo_table.c.name == name)
        )
        with self._connect('search') as conn:
            rows = conn.execute(query).mappings().all()
        return [Task.from_row(r) for r in rows]

    def toggle_completed(self, name: str, completed: Optional[bool] = None) -> int:
        """Flip (completed=None) or set the flag on every task named `name`.

        Returns the number of rows touched.
        """
        new_value = not_(todo_table.c.completed) if completed is None else completed
        stmt = update(todo_table).where(todo_table.c.name == name).values(completed=new_value)
        with self._connect('toggle') as conn:
            result = conn.execute(stmt)
        logger.debug("toggle name=%r completed=%r rows=%s", name, completed, result.rowcount)
        return result.rowcount


def _ensure_sqlite_dir(database_url: str) -> None:
    try:
        url = make_url(database_url)
    except SQLAlchemyError as exc:
        raise StorageError(f"invalid database url {database_url!r}: {exc}") from exc
    if url.get_backend_name() == 'sqlite' and url.database not in (None, '', ':memory:'):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def _attach_connection_listeners(engine: Engine) -> None:
    """Log connection-level events raised by the engine's pool."""
    target = engine.url.render_as_string(hide_password=True)

    def on_connect(dbapi_connection, connection_record) -> None:
        logger.debug("connection opened url=%s", target)

    def on_close(dbapi_connection, connection_record) -> None:
        logger.debug("connection closed url=%s", target)

    def on_invalidate(dbapi_connection, connection_record, exception) -> None:
        if exception is not None:
            logger.error("connection error url=%s: %s", target, exception)

    event.listen(engine, 'connect', on_connect)
    event.listen(engine, 'close', on_close)
    event.listen(engine, 'invalidate', on_invalidate)
