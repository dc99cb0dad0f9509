"""Pydantic schemas for the books API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .books_models import BookPage, BookView, PageMeta


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CategoryPayload(CamelModel):
    id: str
    name: str
    slug: str


class BookResponse(CamelModel):
    id: str
    title: str
    author: str
    description: str | None = None
    category_id: str
    category: CategoryPayload | None = None
    is_downloadable: bool
    file_key: str
    cover_key: str | None = None
    cover_url: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_view(cls, view: BookView) -> "BookResponse":
        book = view.book
        category = None
        if book.category is not None:
            category = CategoryPayload(
                id=book.category.id,
                name=book.category.name,
                slug=book.category.slug,
            )
        return cls(
            id=book.id,
            title=book.title,
            author=book.author,
            description=book.description,
            category_id=book.category_id,
            category=category,
            is_downloadable=book.is_downloadable,
            file_key=book.file_key,
            cover_key=book.cover_key,
            cover_url=view.cover_url.url if view.cover_url else None,
            created_at=book.created_at,
            updated_at=book.updated_at,
        )


class PageMetaPayload(CamelModel):
    total: int
    page: int
    last_page: int
    has_next: bool
    has_prev: bool
    next_page: int | None = None
    prev_page: int | None = None

    @classmethod
    def from_meta(cls, meta: PageMeta) -> "PageMetaPayload":
        return cls(
            total=meta.total,
            page=meta.page,
            last_page=meta.last_page,
            has_next=meta.has_next,
            has_prev=meta.has_prev,
            next_page=meta.next_page,
            prev_page=meta.prev_page,
        )


class BookListResponse(CamelModel):
    data: list[BookResponse]
    meta: PageMetaPayload

    @classmethod
    def from_page(cls, page: BookPage) -> "BookListResponse":
        return cls(
            data=[BookResponse.from_view(view) for view in page.data],
            meta=PageMetaPayload.from_meta(page.meta),
        )


class ReadUrlResponse(CamelModel):
    url: str
    expires_at: datetime


class MessageResponse(CamelModel):
    message: str
