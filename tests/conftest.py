from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from book_assets.assets.asset_models import DEFAULT_ASSET_POLICIES
from book_assets.books.books_repository import BookRepository
from book_assets.books.books_service import BookService
from book_assets.categories.categories_models import Category
from book_assets.categories.categories_repository import CategoryRepository
from book_assets.config import AppConfig, StorageSettings
from book_assets.db.db_init import init_db
from book_assets.dependencies import build_book_service
from book_assets.main import create_app
from book_assets.storage.object_store import ObjectStoreClient
from tests.mocks.object_store import FixedClock, InMemoryS3Client

BUCKET = "test-books"
NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def category_repo(session_factory) -> CategoryRepository:
    return CategoryRepository(session_factory)


@pytest.fixture
def book_repo(session_factory) -> BookRepository:
    return BookRepository(session_factory)


@pytest.fixture
def category(category_repo: CategoryRepository) -> Category:
    return category_repo.create_category(name="Science", slug="science")


@pytest.fixture
def fake_s3() -> InMemoryS3Client:
    return InMemoryS3Client()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def store(fake_s3: InMemoryS3Client, clock: FixedClock) -> ObjectStoreClient:
    return ObjectStoreClient(fake_s3, BUCKET, clock=clock)


@pytest.fixture
def app_config(engine, session_factory) -> AppConfig:
    return AppConfig(
        database_url="sqlite://",
        engine=engine,
        session_factory=session_factory,
        storage=StorageSettings(
            endpoint_url="http://localhost:9000",
            bucket=BUCKET,
            region="us-east-1",
            access_key="test",
            secret_key="test",
        ),
        asset_policies=dict(DEFAULT_ASSET_POLICIES),
    )


@pytest.fixture
def book_service(app_config: AppConfig, store: ObjectStoreClient) -> BookService:
    return build_book_service(app_config, store)


@pytest.fixture
def client(app_config: AppConfig, store: ObjectStoreClient) -> TestClient:
    app = create_app(app_config, store=store)
    return TestClient(app)
