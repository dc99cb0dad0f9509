"""Upload validation utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from ..exceptions import AssetMissingError, AssetTooLargeError, UnsupportedAssetTypeError
from .asset_models import DEFAULT_ASSET_POLICIES, AssetClass, AssetFile, AssetPolicy

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AssetValidator:
    """Check uploaded files against the limits of their asset class.

    Validation never touches the object store; it runs before any upload.
    """

    policies: Mapping[AssetClass, AssetPolicy] = field(
        default_factory=lambda: dict(DEFAULT_ASSET_POLICIES)
    )

    def policy_for(self, asset_class: AssetClass) -> AssetPolicy:
        return self.policies[asset_class]

    def validate(self, upload: AssetFile | None, asset_class: AssetClass) -> AssetFile:
        """Return ``upload`` unchanged or raise an asset validation error."""
        policy = self.policy_for(asset_class)

        if upload is None or not upload.data:
            logger.warning(
                "assets.validate.missing",
                extra={"asset_class": asset_class.value},
            )
            raise AssetMissingError(
                f"{asset_class.value} file is required and must not be empty",
                asset_class=asset_class.value,
            )

        if upload.size_bytes > policy.max_size_bytes:
            logger.warning(
                "assets.validate.too_large",
                extra={
                    "asset_class": asset_class.value,
                    "size_bytes": upload.size_bytes,
                    "limit_bytes": policy.max_size_bytes,
                },
            )
            raise AssetTooLargeError(
                f"{asset_class.value} file is too large, maximum is "
                f"{policy.max_size_bytes // (1024 * 1024)}MB",
                asset_class=asset_class.value,
                size_bytes=upload.size_bytes,
                limit_bytes=policy.max_size_bytes,
            )

        if upload.content_type not in policy.allowed_content_types:
            logger.warning(
                "assets.validate.unsupported_type",
                extra={"asset_class": asset_class.value, "content_type": upload.content_type},
            )
            raise UnsupportedAssetTypeError(
                f"{asset_class.value} content type '{upload.content_type}' is not allowed, "
                f"expected one of: {', '.join(policy.allowed_content_types)}",
                asset_class=asset_class.value,
                content_type=upload.content_type,
            )

        logger.debug(
            "assets.validate.ok",
            extra={
                "asset_class": asset_class.value,
                "upload_name": upload.filename,
                "size_bytes": upload.size_bytes,
                "content_type": upload.content_type,
            },
        )
        return upload
