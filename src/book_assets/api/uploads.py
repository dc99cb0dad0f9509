"""Helpers turning multipart parts into in-memory asset files."""

from __future__ import annotations

from fastapi import UploadFile

from ..assets.asset_models import AssetFile


def read_upload(upload: UploadFile | None, *, max_bytes: int | None = None) -> AssetFile | None:
    """Materialise a multipart part in memory; an empty unnamed part counts as absent.

    With ``max_bytes`` at most ``max_bytes + 1`` bytes are buffered: enough for
    the validator to reject an oversized part without holding all of it.
    """
    if upload is None:
        return None
    data = upload.file.read() if max_bytes is None else upload.file.read(max_bytes + 1)
    if not data and not upload.filename:
        return None
    return AssetFile(
        filename=upload.filename or "upload",
        content_type=upload.content_type or "application/octet-stream",
        data=data,
    )
