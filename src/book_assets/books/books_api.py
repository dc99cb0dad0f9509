"""HTTP routes for books."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status

from ..api.uploads import read_upload
from ..assets.asset_models import AssetClass
from ..exceptions import ValidationError
from .books_models import BookDraft, BookFilter, PageRequest
from .books_schemas import BookListResponse, BookResponse, MessageResponse, ReadUrlResponse
from .books_service import BookService

router = APIRouter(prefix="/api/books", tags=["books"])


def get_book_service(request: Request) -> BookService:
    """Fetch book service from application state."""
    try:
        return request.app.state.book_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - misconfigured app
        raise RuntimeError("BookService is not configured") from exc


def _parse_category_id(raw: str) -> str:
    try:
        return str(uuid.UUID(raw))
    except ValueError as exc:
        raise ValidationError(f"invalid category id '{raw}'") from exc


@router.post("", status_code=status.HTTP_201_CREATED, response_model=BookResponse)
def create_book(
    title: str = Form(..., min_length=1),
    author: str = Form(..., min_length=1),
    category_id: str = Form(..., alias="categoryId"),
    is_downloadable: bool = Form(..., alias="isDownloadable"),
    description: str | None = Form(None),
    cover: UploadFile | None = File(None),
    file: UploadFile | None = File(None),
    service: BookService = Depends(get_book_service),
) -> BookResponse:
    """Upload cover and document, then persist the book."""
    draft = BookDraft(
        title=title,
        author=author,
        description=description,
        category_id=_parse_category_id(category_id),
        is_downloadable=is_downloadable,
    )
    cover_limit = service.validator.policy_for(AssetClass.COVER).max_size_bytes
    document_limit = service.validator.policy_for(AssetClass.DOCUMENT).max_size_bytes
    view = service.create_book(
        draft,
        cover=read_upload(cover, max_bytes=cover_limit),
        document=read_upload(file, max_bytes=document_limit),
    )
    return BookResponse.from_view(view)


@router.get("", response_model=BookListResponse)
def list_books(
    page: int = Query(1, ge=1),
    limit: int = Query(5, ge=1, le=100),
    search: str | None = Query(None),
    category: str | None = Query(None, description="Category slug"),
    service: BookService = Depends(get_book_service),
) -> BookListResponse:
    result = service.list_books(
        BookFilter(search=search or None, category_slug=category or None),
        PageRequest(page=page, limit=limit),
    )
    return BookListResponse.from_page(result)


@router.get("/{book_id}", response_model=BookResponse)
def get_book(book_id: str, service: BookService = Depends(get_book_service)) -> BookResponse:
    return BookResponse.from_view(service.get_book(book_id))


@router.get("/{book_id}/read", response_model=ReadUrlResponse)
def read_book(book_id: str, service: BookService = Depends(get_book_service)) -> ReadUrlResponse:
    """Return a short-lived signed URL for the document."""
    url = service.read_book(book_id)
    return ReadUrlResponse(url=url.url, expires_at=url.expires_at)


@router.delete("/{book_id}", response_model=MessageResponse)
def remove_book(book_id: str, service: BookService = Depends(get_book_service)) -> MessageResponse:
    ack = service.remove_book(book_id)
    return MessageResponse(message=ack.message)
