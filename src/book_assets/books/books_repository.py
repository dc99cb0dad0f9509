"""Persistence layer for book records."""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from ..categories.categories_repository import CategoryRepository
from ..db.db_models import BookModel, CategoryModel
from ..exceptions import NotFoundError, handle_sqlalchemy_errors
from .books_models import Book, BookDraft, BookFilter, PageRequest

_LIKE_ESCAPE = "\\"


def _substring_pattern(text: str) -> str:
    """Build a LIKE pattern matching ``text`` literally anywhere in the value."""
    escaped = (
        text.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


class BookRepository:
    """Transactional CRUD of the book row.

    The category foreign key is not re-validated here; the service checks it
    right before calling :meth:`create`.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def create(self, draft: BookDraft, *, file_key: str, cover_key: str | None) -> Book:
        with handle_sqlalchemy_errors(entity="book"), self._session_factory() as session:
            with session.begin():
                model = BookModel(
                    title=draft.title,
                    author=draft.author,
                    description=draft.description,
                    category_id=draft.category_id,
                    is_downloadable=draft.is_downloadable,
                    file_key=file_key,
                    cover_key=cover_key,
                )
                session.add(model)
            return self._to_domain(model)

    def find_by_id(self, book_id: str) -> Book | None:
        with handle_sqlalchemy_errors(entity="book"), self._session_factory() as session:
            model = session.get(BookModel, book_id, options=[joinedload(BookModel.category)])
            return self._to_domain(model) if model is not None else None

    def find_many(self, book_filter: BookFilter, page: PageRequest) -> tuple[list[Book], int]:
        """Return one page of books (newest first) and the total match count."""
        query = select(BookModel)
        if book_filter.search:
            pattern = _substring_pattern(book_filter.search)
            query = query.where(
                or_(
                    BookModel.title.ilike(pattern, escape=_LIKE_ESCAPE),
                    BookModel.author.ilike(pattern, escape=_LIKE_ESCAPE),
                )
            )
        if book_filter.category_slug:
            query = query.join(BookModel.category).where(
                CategoryModel.slug == book_filter.category_slug
            )

        with handle_sqlalchemy_errors(entity="book"), self._session_factory() as session:
            total = session.scalar(select(func.count()).select_from(query.subquery())) or 0
            rows = session.scalars(
                query.options(joinedload(BookModel.category))
                .order_by(BookModel.created_at.desc(), BookModel.id)
                .offset(page.offset)
                .limit(page.limit)
            ).all()
            return [self._to_domain(row) for row in rows], total

    def delete(self, book_id: str) -> None:
        with handle_sqlalchemy_errors(entity="book"), self._session_factory() as session:
            with session.begin():
                model = session.get(BookModel, book_id)
                if model is None:
                    raise NotFoundError(f"book '{book_id}' not found")
                session.delete(model)

    @staticmethod
    def _to_domain(model: BookModel) -> Book:
        category = (
            CategoryRepository._to_domain(model.category) if model.category is not None else None
        )
        return Book(
            id=model.id,
            title=model.title,
            author=model.author,
            description=model.description,
            category_id=model.category_id,
            is_downloadable=model.is_downloadable,
            file_key=model.file_key,
            cover_key=model.cover_key,
            created_at=model.created_at,
            updated_at=model.updated_at,
            category=category,
        )
