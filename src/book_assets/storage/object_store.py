"""S3-compatible object store client.

One instance wraps one boto3 client and one bucket for the lifetime of the
application. Every botocore failure leaves this module as
:class:`~book_assets.exceptions.StorageFailureError`.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..assets.asset_models import PresignedUrl
from ..config import StorageSettings
from ..exceptions import StorageFailureError

logger = logging.getLogger(__name__)

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def build_s3_client(settings: StorageSettings) -> Any:
    """Create a boto3 S3 client using path-style addressing (MinIO friendly)."""
    credentials: dict[str, str] = {}
    if settings.access_key and settings.secret_key:
        credentials = {
            "aws_access_key_id": settings.access_key,
            "aws_secret_access_key": settings.secret_key,
        }
    return boto3.client(
        "s3",
        endpoint_url=settings.endpoint_url,
        region_name=settings.region,
        config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
        **credentials,
    )


class ObjectStoreClient:
    """Upload, delete, probe and presign objects in a single bucket."""

    def __init__(
        self,
        client: Any,
        bucket: str,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._client = client
        self.bucket = bucket
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> "ObjectStoreClient":
        return cls(build_s3_client(settings), settings.bucket)

    def generate_key(self, folder: str) -> str:
        """Return ``<folder>/<random-id>-<unix-ms>``; never reused across calls."""
        millis = int(self._clock().timestamp() * 1000)
        return f"{folder}/{uuid.uuid4()}-{millis}"

    def put(self, data: bytes, content_type: str, folder: str) -> str:
        key = self.generate_key(folder)
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error(
                "storage.put.failed",
                extra={"key": key, "bucket": self.bucket, "error": str(exc)},
            )
            raise StorageFailureError("put", key, str(exc)) from exc
        logger.info(
            "storage.put.done",
            extra={"key": key, "size_bytes": len(data), "content_type": content_type},
        )
        return key

    def delete(self, key: str) -> None:
        """Delete ``key``; deleting an absent key is not an error."""
        try:
            self._client.delete_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) in _MISSING_CODES:
                logger.info("storage.delete.already_absent", extra={"key": key})
                return
            logger.error("storage.delete.failed", extra={"key": key, "error": str(exc)})
            raise StorageFailureError("delete", key, str(exc)) from exc
        except BotoCoreError as exc:
            logger.error("storage.delete.failed", extra={"key": key, "error": str(exc)})
            raise StorageFailureError("delete", key, str(exc)) from exc
        logger.info("storage.delete.done", extra={"key": key})

    def delete_many(self, keys: Iterable[str]) -> list[str]:
        """Delete each key independently and return the keys that failed."""
        failed: list[str] = []
        for key in keys:
            try:
                self.delete(key)
            except Exception as exc:
                failed.append(key)
                logger.warning(
                    "storage.delete_many.key_failed",
                    extra={"key": key, "error": str(exc)},
                )
        return failed

    def exists(self, key: str) -> bool:
        try:
            self._client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) in _MISSING_CODES:
                return False
            raise StorageFailureError("exists", key, str(exc)) from exc
        except BotoCoreError as exc:
            raise StorageFailureError("exists", key, str(exc)) from exc
        return True

    def presign(self, key: str, ttl_seconds: int) -> PresignedUrl:
        """Return a time-limited GET URL; the key is not checked for existence."""
        issued_at = self._clock()
        try:
            url = self._client.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=ttl_seconds,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("storage.presign.failed", extra={"key": key, "error": str(exc)})
            raise StorageFailureError("presign", key, str(exc)) from exc
        return PresignedUrl(url=url, expires_at=issued_at + timedelta(seconds=ttl_seconds))
