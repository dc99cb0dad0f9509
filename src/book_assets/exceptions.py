"""Domain level exceptions and helpers shared by the pipeline layers."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, TypeVar

from sqlalchemy import exc as sa_exc

__all__ = [
    "AppError",
    "ValidationError",
    "AssetValidationError",
    "AssetMissingError",
    "AssetTooLargeError",
    "UnsupportedAssetTypeError",
    "NotFoundError",
    "StorageFailureError",
    "RepositoryError",
    "IntegrityConstraintViolation",
    "DatabaseOperationError",
    "ensure_found",
    "handle_sqlalchemy_errors",
]

T = TypeVar("T")


class AppError(Exception):
    """Base class for application specific errors."""


class ValidationError(AppError):
    """Raised when request input is malformed (bad id, missing field)."""


class AssetValidationError(ValidationError):
    """Base class for uploaded file rejections."""

    def __init__(self, message: str, *, asset_class: str) -> None:
        super().__init__(message)
        self.asset_class = asset_class


class AssetMissingError(AssetValidationError):
    """Raised when a required file was not supplied or is empty."""


class AssetTooLargeError(AssetValidationError):
    """Raised when a file exceeds the size limit of its asset class."""

    def __init__(self, message: str, *, asset_class: str, size_bytes: int, limit_bytes: int) -> None:
        super().__init__(message, asset_class=asset_class)
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes


class UnsupportedAssetTypeError(AssetValidationError):
    """Raised when the content type is outside the asset class whitelist."""

    def __init__(self, message: str, *, asset_class: str, content_type: str | None) -> None:
        super().__init__(message, asset_class=asset_class)
        self.content_type = content_type


class NotFoundError(AppError):
    """Raised when a category or book could not be located."""


class StorageFailureError(AppError):
    """Raised when an object store call (upload, delete, presign) fails."""

    def __init__(self, operation: str, key: str | None, message: str) -> None:
        super().__init__(f"{operation} failed for '{key}': {message}" if key else f"{operation} failed: {message}")
        self.operation = operation
        self.key = key


class RepositoryError(AppError):
    """Base class for persistence layer failures."""


class IntegrityConstraintViolation(RepositoryError):
    """Raised when a database constraint is violated."""


class DatabaseOperationError(RepositoryError):
    """Raised for unexpected database errors."""


@dataclass(slots=True)
class _EntityContext:
    """Internal helper describing the entity for error messages."""

    entity: str | None = None

    def format(self, message: str) -> str:
        if self.entity:
            return f"{self.entity}: {message}"
        return message


def ensure_found(record: T | None, *, entity: str, identifier: str) -> T:
    """Ensure a record exists, otherwise raise :class:`NotFoundError`."""

    if record is None:
        raise NotFoundError(f"{entity} '{identifier}' not found")
    return record


def _translate_sqlalchemy_error(exc: Exception, *, context: _EntityContext) -> RepositoryError:
    if isinstance(exc, sa_exc.IntegrityError):
        return IntegrityConstraintViolation(context.format("integrity constraint violated"))
    if isinstance(exc, sa_exc.DBAPIError):
        return DatabaseOperationError(context.format("database operation failed"))
    return RepositoryError(context.format(str(exc)))


@contextmanager
def handle_sqlalchemy_errors(*, entity: str | None = None) -> Iterator[None]:
    """Translate SQLAlchemy errors into domain specific ones."""

    context = _EntityContext(entity)
    try:
        yield
    except (sa_exc.IntegrityError, sa_exc.DBAPIError) as exc:
        raise _translate_sqlalchemy_error(exc, context=context) from exc
