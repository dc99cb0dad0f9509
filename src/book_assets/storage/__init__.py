"""Object store access and presigned URL issuance."""

from .object_store import ObjectStoreClient, build_s3_client
from .presign import PresignedUrlIssuer

__all__ = ["ObjectStoreClient", "PresignedUrlIssuer", "build_s3_client"]
