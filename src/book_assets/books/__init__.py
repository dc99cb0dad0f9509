"""Book asset pipeline: creation, removal and read access."""

from .books_models import Book, BookDraft, BookFilter, BookPage, BookView, PageMeta, PageRequest, RemovalAck
from .books_repository import BookRepository
from .books_service import BookService
from .compensation import CompensationStack

__all__ = [
    "Book",
    "BookDraft",
    "BookFilter",
    "BookPage",
    "BookRepository",
    "BookService",
    "BookView",
    "CompensationStack",
    "PageMeta",
    "PageRequest",
    "RemovalAck",
]
