"""Standalone object storage routes (upload, delete, existence probe)."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..assets.asset_models import AssetClass
from ..assets.validation import AssetValidator
from ..api.uploads import read_upload
from .object_store import ObjectStoreClient
from .presign import PresignedUrlIssuer

router = APIRouter(prefix="/api/storage", tags=["storage"])


class UploadResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    key: str
    url: str
    expires_at: datetime


class DeleteObjectRequest(BaseModel):
    key: str = Field(..., min_length=1)


class ExistsResponse(BaseModel):
    key: str
    exists: bool


def get_object_store(request: Request) -> ObjectStoreClient:
    try:
        return request.app.state.object_store  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - misconfigured app
        raise RuntimeError("ObjectStoreClient is not configured") from exc


def get_asset_validator(request: Request) -> AssetValidator:
    try:
        return request.app.state.asset_validator  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - misconfigured app
        raise RuntimeError("AssetValidator is not configured") from exc


def get_url_issuer(request: Request) -> PresignedUrlIssuer:
    try:
        return request.app.state.url_issuer  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - misconfigured app
        raise RuntimeError("PresignedUrlIssuer is not configured") from exc


def _upload(
    upload: UploadFile | None,
    asset_class: AssetClass,
    store: ObjectStoreClient,
    validator: AssetValidator,
    issuer: PresignedUrlIssuer,
) -> UploadResponse:
    policy = validator.policy_for(asset_class)
    asset = validator.validate(read_upload(upload, max_bytes=policy.max_size_bytes), asset_class)
    key = store.put(asset.data, asset.content_type, policy.folder)
    url = issuer.issue(key, asset_class)
    return UploadResponse(key=key, url=url.url, expires_at=url.expires_at)


@router.post("/upload/cover", response_model=UploadResponse)
def upload_cover(
    cover: UploadFile | None = File(None),
    store: ObjectStoreClient = Depends(get_object_store),
    validator: AssetValidator = Depends(get_asset_validator),
    issuer: PresignedUrlIssuer = Depends(get_url_issuer),
) -> UploadResponse:
    return _upload(cover, AssetClass.COVER, store, validator, issuer)


@router.post("/upload/book", response_model=UploadResponse)
def upload_book(
    file: UploadFile | None = File(None),
    store: ObjectStoreClient = Depends(get_object_store),
    validator: AssetValidator = Depends(get_asset_validator),
    issuer: PresignedUrlIssuer = Depends(get_url_issuer),
) -> UploadResponse:
    return _upload(file, AssetClass.DOCUMENT, store, validator, issuer)


@router.delete("")
def delete_object(
    payload: DeleteObjectRequest,
    store: ObjectStoreClient = Depends(get_object_store),
) -> dict[str, str]:
    store.delete(payload.key)
    return {"message": "Object deleted"}


@router.get("/exists", response_model=ExistsResponse)
def object_exists(
    key: str = Query(..., min_length=1),
    store: ObjectStoreClient = Depends(get_object_store),
) -> ExistsResponse:
    """Diagnostic probe; not used on the create/remove paths."""
    return ExistsResponse(key=key, exists=store.exists(key))
