"""Smoke tests for Alembic migrations covering the book tables."""

from __future__ import annotations

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

PROJECT_ROOT = Path(__file__).resolve().parents[2]


@pytest.mark.integration
def test_upgrade_head_creates_book_tables(tmp_path, monkeypatch) -> None:
    """Upgrade to head on a scratch SQLite file, then downgrade back to base."""

    monkeypatch.delenv("DATABASE_URL", raising=False)
    url = f"sqlite:///{tmp_path / 'migrations.db'}"
    config = Config()
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", url)

    command.upgrade(config, "head")

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        assert {"category", "book"}.issubset(set(inspector.get_table_names()))
        book_indexes = {index["name"] for index in inspector.get_indexes("book")}
        assert {"ix_book_title", "ix_book_author", "ix_book_category_id"}.issubset(book_indexes)
        book_columns = {column["name"] for column in inspector.get_columns("book")}
        assert {"file_key", "cover_key", "is_downloadable"}.issubset(book_columns)

        command.downgrade(config, "base")
        assert "book" not in inspect(engine).get_table_names()
    finally:
        engine.dispose()
