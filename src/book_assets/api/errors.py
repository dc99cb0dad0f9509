"""Reusable error primitives for API exception handling."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..exceptions import (
    AppError,
    AssetMissingError,
    AssetTooLargeError,
    NotFoundError,
    StorageFailureError,
    UnsupportedAssetTypeError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApiError(Exception):
    """Structured application-level error for HTTP handlers."""

    status_code: int
    code: str
    message: str
    headers: Mapping[str, str] | None = None

    def to_response(self) -> JSONResponse:
        """Materialise the error into a ``JSONResponse`` instance."""

        return JSONResponse(
            status_code=self.status_code,
            content={"error": {"code": self.code, "message": self.message}},
            headers=dict(self.headers or {}),
        )


# Most specific first; the first isinstance match wins.
_ERROR_MAP: tuple[tuple[type[AppError], int, str], ...] = (
    (AssetTooLargeError, status.HTTP_413_CONTENT_TOO_LARGE, "payload_too_large"),
    (UnsupportedAssetTypeError, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, "unsupported_media_type"),
    (AssetMissingError, status.HTTP_400_BAD_REQUEST, "asset_missing"),
    (ValidationError, status.HTTP_400_BAD_REQUEST, "validation_error"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (StorageFailureError, status.HTTP_502_BAD_GATEWAY, "storage_failure"),
)


def to_api_error(exc: AppError) -> ApiError:
    """Translate a domain error into its HTTP representation."""

    for error_type, status_code, code in _ERROR_MAP:
        if isinstance(exc, error_type):
            return ApiError(status_code, code, str(exc))
    return ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "Internal server error")


async def api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    """Convert :class:`ApiError` exceptions into JSON payloads."""

    return exc.to_response()


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Convert domain errors raised by services into JSON payloads."""

    error = to_api_error(exc)
    if error.status_code >= 500:
        logger.error(
            "api.request.failed",
            extra={"path": request.url.path, "code": error.code, "error": str(exc)},
        )
    return error.to_response()


async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed or missing request fields with the common error body."""

    fields = [".".join(str(part) for part in error.get("loc", ())[1:]) for error in exc.errors()]
    message = "invalid request fields: " + ", ".join(field for field in fields if field)
    return ApiError(status.HTTP_400_BAD_REQUEST, "validation_error", message).to_response()


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]


__all__ = [
    "ApiError",
    "api_error_handler",
    "app_error_handler",
    "register_error_handlers",
    "request_validation_handler",
    "to_api_error",
]
