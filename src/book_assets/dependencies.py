"""Dependency wiring helpers."""

from __future__ import annotations

from fastapi import FastAPI

from .api.errors import register_error_handlers
from .assets.validation import AssetValidator
from .books.books_api import router as books_router
from .books.books_repository import BookRepository
from .books.books_service import BookService
from .categories.categories_repository import CategoryRepository
from .config import AppConfig
from .storage.object_store import ObjectStoreClient
from .storage.presign import PresignedUrlIssuer
from .storage.storage_api import router as storage_router


def build_book_service(config: AppConfig, store: ObjectStoreClient) -> BookService:
    """Construct the orchestrator and its collaborators explicitly."""
    validator = AssetValidator(config.asset_policies)
    return BookService(
        category_repo=CategoryRepository(config.session_factory),
        book_repo=BookRepository(config.session_factory),
        validator=validator,
        store=store,
        url_issuer=PresignedUrlIssuer(store=store, policies=config.asset_policies),
    )


def include_routers(
    app: FastAPI,
    config: AppConfig,
    store: ObjectStoreClient | None = None,
) -> None:
    """Mount module routers and attach services."""
    store = store or ObjectStoreClient.from_settings(config.storage)
    book_service = build_book_service(config, store)

    app.state.config = config
    app.state.object_store = store
    app.state.asset_validator = book_service.validator
    app.state.url_issuer = book_service.url_issuer
    app.state.book_service = book_service

    register_error_handlers(app)
    app.include_router(books_router)
    app.include_router(storage_router)
