"""Database initialization helpers."""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .db_models import Base, CategoryModel

DEFAULT_CATEGORIES = [
    {"name": "Fiction", "slug": "fiction"},
    {"name": "Science", "slug": "science"},
    {"name": "History", "slug": "history"},
    {"name": "Programming", "slug": "programming"},
]


def _unicode_lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _configure_sqlite_connection(dbapi_connection: Any, _connection_record: Any) -> None:
    # SQLite's builtin lower() folds ASCII only; ILIKE compiles to lower() LIKE lower().
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def configure_engine(engine: Engine) -> None:
    """Install per-connection SQLite settings; must run before the first connection."""
    if engine.dialect.name != "sqlite":
        return
    if not event.contains(engine, "connect", _configure_sqlite_connection):
        event.listen(engine, "connect", _configure_sqlite_connection)


def init_db(engine: Engine) -> None:
    """Create tables if they do not exist yet."""
    configure_engine(engine)
    Base.metadata.create_all(engine)


def seed_categories(session_factory: sessionmaker[Session]) -> int:
    """Insert default categories when the table is empty; return inserted count."""
    with session_factory.begin() as session:
        if session.query(CategoryModel).count():
            return 0
        for category in DEFAULT_CATEGORIES:
            session.add(CategoryModel(name=category["name"], slug=category["slug"]))
        return len(DEFAULT_CATEGORIES)
