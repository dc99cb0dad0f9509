"""Book asset pipeline.

Coordinates catalog items whose cover and document live in an S3-compatible
object store while the record itself lives in a relational database.
"""

from .books.books_service import BookService
from .main import create_app

__all__ = ["BookService", "create_app"]
