"""Smoke-check imports for the package wiring."""

from __future__ import annotations

from importlib import import_module
from types import ModuleType

import pytest

MODULES_AND_SYMBOLS = [
    ("book_assets", "create_app"),
    ("book_assets", "BookService"),
    ("book_assets.main", "create_app"),
    ("book_assets.config", "load_config"),
    ("book_assets.config", "Settings"),
    ("book_assets.dependencies", "include_routers"),
    ("book_assets.logging", "configure_logging"),
    ("book_assets.exceptions", "StorageFailureError"),
    ("book_assets.api", "ApiError"),
    ("book_assets.api.uploads", "read_upload"),
    ("book_assets.assets", "AssetValidator"),
    ("book_assets.books", "CompensationStack"),
    ("book_assets.books.books_api", "router"),
    ("book_assets.categories", "CategoryRepository"),
    ("book_assets.db", "seed_categories"),
    ("book_assets.storage", "ObjectStoreClient"),
    ("book_assets.storage.storage_api", "router"),
]


@pytest.mark.parametrize(("module_name", "symbol"), MODULES_AND_SYMBOLS)
def test_importable_symbols(module_name: str, symbol: str) -> None:
    """Import modules and verify that public symbols are exposed."""

    module: ModuleType = import_module(module_name)
    assert hasattr(module, symbol), f"{module_name} missing {symbol}"
