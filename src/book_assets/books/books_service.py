"""Domain service coordinating book creation, removal and reads."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from functools import partial
from typing import Any

import structlog

from ..assets.asset_models import AssetClass, AssetFile, PresignedUrl
from ..assets.validation import AssetValidator
from ..categories.categories_repository import CategoryRepository
from ..exceptions import NotFoundError, StorageFailureError, ValidationError, ensure_found
from ..storage.object_store import ObjectStoreClient
from ..storage.presign import PresignedUrlIssuer
from .books_models import (
    Book,
    BookDraft,
    BookFilter,
    BookPage,
    BookView,
    PageMeta,
    PageRequest,
    RemovalAck,
)
from .books_repository import BookRepository
from .compensation import CompensationStack

logger = structlog.get_logger(__name__)


def parse_book_id(raw: str) -> str:
    """Normalise a book id, raising :class:`ValidationError` when it is not a UUID."""
    try:
        return str(uuid.UUID(str(raw)))
    except ValueError as exc:
        raise ValidationError(f"invalid book id '{raw}'") from exc


@dataclass(slots=True)
class BookService:
    """Coordinates the book asset workflow across object and relational stores.

    Creation uploads objects before the row is committed and deletes them again
    (newest first) if a later step fails, so a row never references a missing
    object. Removal deletes the row first and the objects afterwards on a
    best-effort basis; a failed object delete leaves an orphan, never a
    dangling row.
    """

    category_repo: CategoryRepository
    book_repo: BookRepository
    validator: AssetValidator
    store: ObjectStoreClient
    url_issuer: PresignedUrlIssuer
    log: Any = field(default_factory=lambda: logger)

    def create_book(
        self,
        draft: BookDraft,
        *,
        cover: AssetFile | None,
        document: AssetFile | None,
    ) -> BookView:
        self.log.info(
            "books.create.started",
            title=draft.title,
            category_id=draft.category_id,
            has_cover=cover is not None,
        )
        if self.category_repo.get_category(draft.category_id) is None:
            self.log.warning("books.create.category_not_found", category_id=draft.category_id)
            raise NotFoundError(f"category '{draft.category_id}' not found")

        if cover is not None:
            cover = self.validator.validate(cover, AssetClass.COVER)
        document = self.validator.validate(document, AssetClass.DOCUMENT)

        with CompensationStack("books.create") as saga:
            cover_key: str | None = None
            if cover is not None:
                cover_key = self.store.put(
                    cover.data,
                    cover.content_type,
                    self.validator.policy_for(AssetClass.COVER).folder,
                )
                saga.push(f"delete cover {cover_key}", partial(self.store.delete, cover_key))

            file_key = self.store.put(
                document.data,
                document.content_type,
                self.validator.policy_for(AssetClass.DOCUMENT).folder,
            )
            saga.push(f"delete document {file_key}", partial(self.store.delete, file_key))

            book = self.book_repo.create(draft, file_key=file_key, cover_key=cover_key)

        self.log.info(
            "books.create.done",
            book_id=book.id,
            file_key=book.file_key,
            cover_key=book.cover_key,
        )
        return self._to_view(book)

    def remove_book(self, book_id: str) -> RemovalAck:
        book_id = parse_book_id(book_id)
        book = ensure_found(self.book_repo.find_by_id(book_id), entity="book", identifier=book_id)

        # Row first: if this raises nothing has changed and no object is touched.
        self.book_repo.delete(book_id)
        self.log.info("books.remove.row_deleted", book_id=book_id)

        keys = [book.file_key]
        if book.cover_key:
            keys.append(book.cover_key)
        orphaned = self.store.delete_many(keys)
        if orphaned:
            self.log.error(
                "books.remove.objects_orphaned",
                book_id=book_id,
                orphaned_keys=orphaned,
            )
        else:
            self.log.info("books.remove.objects_deleted", book_id=book_id, keys=keys)
        return RemovalAck(book_id=book_id, message="Book deleted", orphaned_keys=orphaned)

    def get_book(self, book_id: str) -> BookView:
        book_id = parse_book_id(book_id)
        book = ensure_found(self.book_repo.find_by_id(book_id), entity="book", identifier=book_id)
        return self._to_view(book)

    def list_books(self, book_filter: BookFilter, page: PageRequest) -> BookPage:
        if page.page < 1 or page.limit < 1:
            raise ValidationError("page and limit must be positive integers")
        books, total = self.book_repo.find_many(book_filter, page)
        return BookPage(
            data=[self._to_view(book) for book in books],
            meta=PageMeta.build(total=total, page=page.page, limit=page.limit),
        )

    def read_book(self, book_id: str) -> PresignedUrl:
        """Return a short-lived URL for the book document."""
        book_id = parse_book_id(book_id)
        book = ensure_found(self.book_repo.find_by_id(book_id), entity="book", identifier=book_id)
        url = self.url_issuer.issue(book.file_key, AssetClass.DOCUMENT)
        self.log.info("books.read.issued", book_id=book_id, expires_at=url.expires_at.isoformat())
        return url

    def _to_view(self, book: Book) -> BookView:
        if not book.cover_key:
            return BookView(book=book)
        try:
            cover_url = self.url_issuer.issue(book.cover_key, AssetClass.COVER)
        except StorageFailureError as exc:
            self.log.warning(
                "books.cover_url.unavailable",
                book_id=book.id,
                cover_key=book.cover_key,
                error=str(exc),
            )
            return BookView(book=book)
        return BookView(book=book, cover_url=cover_url)
