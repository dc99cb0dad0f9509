"""Read access to externally-owned categories."""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.orm import Session

from ..db.db_models import CategoryModel
from ..exceptions import handle_sqlalchemy_errors
from .categories_models import Category


class CategoryRepository:
    """Look up categories referenced by books.

    Categories are managed by another part of the platform; the pipeline only
    reads them. ``create_category`` exists for seeding and tests.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get_category(self, category_id: str) -> Category | None:
        with handle_sqlalchemy_errors(entity="category"), self._session_factory() as session:
            model = session.get(CategoryModel, category_id)
            return self._to_domain(model) if model is not None else None

    def get_by_slug(self, slug: str) -> Category | None:
        with handle_sqlalchemy_errors(entity="category"), self._session_factory() as session:
            model = (
                session.query(CategoryModel)
                .filter(CategoryModel.slug == slug)
                .one_or_none()
            )
            return self._to_domain(model) if model is not None else None

    def create_category(self, *, name: str, slug: str, category_id: str | None = None) -> Category:
        with handle_sqlalchemy_errors(entity="category"), self._session_factory() as session:
            model = CategoryModel(name=name, slug=slug)
            if category_id is not None:
                model.id = category_id
            session.add(model)
            session.commit()
            return self._to_domain(model)

    @staticmethod
    def _to_domain(model: CategoryModel) -> Category:
        return Category(
            id=model.id,
            name=model.name,
            slug=model.slug,
            created_at=model.created_at,
        )
