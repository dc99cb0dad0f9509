"""Data structures for the book pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

from ..assets.asset_models import PresignedUrl
from ..categories.categories_models import Category


@dataclass(slots=True)
class BookDraft:
    """Metadata supplied when creating a book, before any key exists."""

    title: str
    author: str
    category_id: str
    is_downloadable: bool = False
    description: str | None = None


@dataclass(slots=True)
class Book:
    id: str
    title: str
    author: str
    description: str | None
    category_id: str
    is_downloadable: bool
    file_key: str
    cover_key: str | None
    created_at: datetime
    updated_at: datetime
    category: Category | None = None


@dataclass(slots=True)
class BookView:
    """A book together with its freshly issued cover URL."""

    book: Book
    cover_url: PresignedUrl | None = None


@dataclass(slots=True)
class BookFilter:
    search: str | None = None
    category_slug: str | None = None


@dataclass(slots=True)
class PageRequest:
    page: int = 1
    limit: int = 5

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(slots=True)
class PageMeta:
    total: int
    page: int
    last_page: int
    has_next: bool
    has_prev: bool
    next_page: int | None
    prev_page: int | None

    @classmethod
    def build(cls, *, total: int, page: int, limit: int) -> "PageMeta":
        last_page = math.ceil(total / limit) if limit else 0
        has_next = page < last_page
        has_prev = page > 1
        return cls(
            total=total,
            page=page,
            last_page=last_page,
            has_next=has_next,
            has_prev=has_prev,
            next_page=page + 1 if has_next else None,
            prev_page=page - 1 if has_prev else None,
        )


@dataclass(slots=True)
class BookPage:
    data: list[BookView]
    meta: PageMeta


@dataclass(slots=True)
class RemovalAck:
    """Outcome of a removal: the row is gone; listed keys may be orphaned."""

    book_id: str
    message: str
    orphaned_keys: list[str] = field(default_factory=list)
