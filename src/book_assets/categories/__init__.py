"""Category lookup used by the book pipeline."""

from .categories_models import Category
from .categories_repository import CategoryRepository

__all__ = ["Category", "CategoryRepository"]
