"""Presigned read URLs with class specific lifetimes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from ..assets.asset_models import AssetClass, AssetPolicy, PresignedUrl
from .object_store import ObjectStoreClient


@dataclass(slots=True)
class PresignedUrlIssuer:
    """Issue read URLs: long-lived for covers, short-lived for documents."""

    store: ObjectStoreClient
    policies: Mapping[AssetClass, AssetPolicy]

    def ttl_for(self, asset_class: AssetClass) -> int:
        return self.policies[asset_class].url_ttl_seconds

    def issue(self, key: str, asset_class: AssetClass) -> PresignedUrl:
        return self.store.presign(key, self.ttl_for(asset_class))
