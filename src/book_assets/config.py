"""Application configuration builder.

Settings come from the environment (optionally a local ``.env``). The defaults
target a local MinIO on ``http://localhost:9000`` and a SQLite database so the
service starts without any external setup.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .assets.asset_models import DEFAULT_ASSET_POLICIES, AssetClass, AssetPolicy
from .db.db_init import init_db


class Settings(BaseSettings):
    """Environment backed settings for the service."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = Field(
        default="sqlite:///books.db",
        description="SQLAlchemy URL of the relational store.",
    )
    s3_endpoint: str = Field(
        default="http://localhost",
        description="Scheme and host of the S3-compatible object store.",
    )
    s3_port: int = Field(default=9000, ge=1, le=65535)
    s3_access_key: str | None = None
    s3_secret_key: str | None = None
    s3_region: str = "us-east-1"
    s3_bucket: str = "biblioteca-books"
    cover_max_bytes: int = Field(
        default=DEFAULT_ASSET_POLICIES[AssetClass.COVER].max_size_bytes, ge=1
    )
    document_max_bytes: int = Field(
        default=DEFAULT_ASSET_POLICIES[AssetClass.DOCUMENT].max_size_bytes, ge=1
    )
    cover_url_ttl_seconds: int = Field(
        default=DEFAULT_ASSET_POLICIES[AssetClass.COVER].url_ttl_seconds,
        ge=1,
        description="Lifetime of presigned cover URLs (hours scale).",
    )
    document_url_ttl_seconds: int = Field(
        default=DEFAULT_ASSET_POLICIES[AssetClass.DOCUMENT].url_ttl_seconds,
        ge=1,
        description="Lifetime of presigned document URLs (minutes scale).",
    )


@dataclass(slots=True)
class StorageSettings:
    endpoint_url: str
    bucket: str
    region: str
    access_key: str | None
    secret_key: str | None


@dataclass(slots=True)
class AppConfig:
    database_url: str
    engine: Engine
    session_factory: sessionmaker[Session]
    storage: StorageSettings
    asset_policies: Mapping[AssetClass, AssetPolicy]


def build_asset_policies(settings: Settings) -> dict[AssetClass, AssetPolicy]:
    """Apply configured limits and TTLs on top of the default class policies."""
    cover = DEFAULT_ASSET_POLICIES[AssetClass.COVER]
    document = DEFAULT_ASSET_POLICIES[AssetClass.DOCUMENT]
    return {
        AssetClass.COVER: AssetPolicy(
            folder=cover.folder,
            max_size_bytes=settings.cover_max_bytes,
            allowed_content_types=cover.allowed_content_types,
            url_ttl_seconds=settings.cover_url_ttl_seconds,
        ),
        AssetClass.DOCUMENT: AssetPolicy(
            folder=document.folder,
            max_size_bytes=settings.document_max_bytes,
            allowed_content_types=document.allowed_content_types,
            url_ttl_seconds=settings.document_url_ttl_seconds,
        ),
    }


def load_config(settings: Settings | None = None) -> AppConfig:
    """Load configuration from environment (SQLite by default)."""
    settings = settings or Settings()

    engine = create_engine(settings.database_url, future=True)
    session_factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)
    init_db(engine)

    storage = StorageSettings(
        endpoint_url=f"{settings.s3_endpoint.rstrip('/')}:{settings.s3_port}",
        bucket=settings.s3_bucket,
        region=settings.s3_region,
        access_key=settings.s3_access_key,
        secret_key=settings.s3_secret_key,
    )

    return AppConfig(
        database_url=settings.database_url,
        engine=engine,
        session_factory=session_factory,
        storage=storage,
        asset_policies=build_asset_policies(settings),
    )
