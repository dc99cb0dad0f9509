from datetime import timedelta
from urllib.parse import parse_qs, urlparse

import pytest

from book_assets.assets.asset_models import DEFAULT_ASSET_POLICIES, AssetClass
from book_assets.config import StorageSettings
from book_assets.storage.object_store import ObjectStoreClient, build_s3_client
from book_assets.storage.presign import PresignedUrlIssuer

pytestmark = pytest.mark.unit


def test_document_url_expires_after_fifteen_minutes(store: ObjectStoreClient, clock) -> None:
    issuer = PresignedUrlIssuer(store=store, policies=DEFAULT_ASSET_POLICIES)

    result = issuer.issue("books/abc-1", AssetClass.DOCUMENT)

    assert result.expires_at == clock.now + timedelta(seconds=900)
    assert "X-Amz-Expires=900" in result.url


def test_cover_url_expires_after_one_day(store: ObjectStoreClient, clock) -> None:
    issuer = PresignedUrlIssuer(store=store, policies=DEFAULT_ASSET_POLICIES)

    result = issuer.issue("covers/abc-1", AssetClass.COVER)

    assert result.expires_at == clock.now + timedelta(seconds=86400)
    assert "X-Amz-Expires=86400" in result.url


def test_real_boto3_client_signs_path_style_urls(clock) -> None:
    settings = StorageSettings(
        endpoint_url="http://localhost:9000",
        bucket="biblioteca-books",
        region="us-east-1",
        access_key="minio",
        secret_key="minio-secret",
    )
    store = ObjectStoreClient(build_s3_client(settings), settings.bucket, clock=clock)
    issuer = PresignedUrlIssuer(store=store, policies=DEFAULT_ASSET_POLICIES)

    result = issuer.issue("books/1234-1700000000000", AssetClass.DOCUMENT)

    parsed = urlparse(result.url)
    query = parse_qs(parsed.query)
    assert parsed.netloc == "localhost:9000"
    assert parsed.path == "/biblioteca-books/books/1234-1700000000000"
    assert query["X-Amz-Expires"] == ["900"]
    assert "X-Amz-Signature" in query
    assert result.expires_at == clock.now + timedelta(seconds=900)
