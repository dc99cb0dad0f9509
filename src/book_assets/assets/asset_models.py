"""Data structures describing uploaded assets and their class policies."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Mapping

MIB = 1024 * 1024


class AssetClass(StrEnum):
    """Kinds of binary objects backing a book."""

    COVER = "cover"
    DOCUMENT = "document"


@dataclass(frozen=True, slots=True)
class AssetPolicy:
    """Per-class storage folder, limits and read URL lifetime."""

    folder: str
    max_size_bytes: int
    allowed_content_types: tuple[str, ...]
    url_ttl_seconds: int


DEFAULT_ASSET_POLICIES: Mapping[AssetClass, AssetPolicy] = {
    AssetClass.COVER: AssetPolicy(
        folder="covers",
        max_size_bytes=5 * MIB,
        allowed_content_types=("image/jpeg", "image/png", "image/webp"),
        url_ttl_seconds=24 * 60 * 60,
    ),
    AssetClass.DOCUMENT: AssetPolicy(
        folder="books",
        max_size_bytes=100 * MIB,
        allowed_content_types=("application/pdf",),
        url_ttl_seconds=15 * 60,
    ),
}


@dataclass(slots=True)
class AssetFile:
    """An uploaded file held in memory."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass(frozen=True, slots=True)
class PresignedUrl:
    """Credential-free read URL and the moment it stops working."""

    url: str
    expires_at: datetime
