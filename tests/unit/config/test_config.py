import pytest

from book_assets.assets.asset_models import AssetClass, MIB
from book_assets.config import Settings, load_config

pytestmark = pytest.mark.unit


def test_defaults_target_local_minio(monkeypatch) -> None:
    for name in ("S3_ENDPOINT", "S3_PORT", "S3_BUCKET", "DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)

    config = load_config(Settings(_env_file=None, database_url="sqlite://"))

    assert config.storage.endpoint_url == "http://localhost:9000"
    assert config.storage.bucket == "biblioteca-books"
    assert config.asset_policies[AssetClass.COVER].max_size_bytes == 5 * MIB
    assert config.asset_policies[AssetClass.DOCUMENT].url_ttl_seconds == 900
    config.engine.dispose()


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("S3_ENDPOINT", "http://minio/")
    monkeypatch.setenv("S3_PORT", "9100")
    monkeypatch.setenv("S3_BUCKET", "library")
    monkeypatch.setenv("DOCUMENT_URL_TTL_SECONDS", "300")
    monkeypatch.setenv("COVER_MAX_BYTES", str(2 * MIB))

    config = load_config(Settings(_env_file=None, database_url="sqlite://"))

    assert config.storage.endpoint_url == "http://minio:9100"
    assert config.storage.bucket == "library"
    assert config.asset_policies[AssetClass.DOCUMENT].url_ttl_seconds == 300
    assert config.asset_policies[AssetClass.COVER].max_size_bytes == 2 * MIB
    assert config.asset_policies[AssetClass.COVER].folder == "covers"
    config.engine.dispose()
