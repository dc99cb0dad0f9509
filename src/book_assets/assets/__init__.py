"""Asset classes, policies and validation."""

from .asset_models import AssetClass, AssetFile, AssetPolicy, PresignedUrl
from .validation import AssetValidator

__all__ = ["AssetClass", "AssetFile", "AssetPolicy", "AssetValidator", "PresignedUrl"]
