"""Database models and initialization helpers."""

from .db_init import configure_engine, init_db, seed_categories
from .db_models import Base, BookModel, CategoryModel

__all__ = ["Base", "BookModel", "CategoryModel", "configure_engine", "init_db", "seed_categories"]
