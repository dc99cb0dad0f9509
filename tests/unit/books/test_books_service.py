import uuid
from datetime import timedelta

import pytest

from book_assets.assets.asset_models import MIB, AssetFile
from book_assets.books.books_models import BookDraft, BookFilter, PageRequest
from book_assets.books.books_repository import BookRepository
from book_assets.books.books_service import BookService
from book_assets.categories.categories_models import Category
from book_assets.categories.categories_repository import CategoryRepository
from book_assets.exceptions import (
    AssetMissingError,
    DatabaseOperationError,
    IntegrityConstraintViolation,
    NotFoundError,
    StorageFailureError,
    UnsupportedAssetTypeError,
    ValidationError,
)
from tests.mocks.object_store import InMemoryS3Client

pytestmark = pytest.mark.unit

BUCKET = "test-books"


class FailingCreateRepository(BookRepository):
    def create(self, draft, *, file_key, cover_key):
        raise DatabaseOperationError("book: database operation failed")


class FailingDeleteRepository(BookRepository):
    def delete(self, book_id):
        raise DatabaseOperationError("book: database operation failed")


class VanishedCategoryRepository(CategoryRepository):
    """Reports every category as present, as if it were deleted right after the check."""

    def get_category(self, category_id):
        return Category(id=category_id, name="Gone", slug="gone")


def cover_file(size: int = 1024) -> AssetFile:
    return AssetFile(filename="cover.png", content_type="image/png", data=b"\x89PNG" + b"\0" * size)


def document_file(size: int = 4096) -> AssetFile:
    return AssetFile(filename="book.pdf", content_type="application/pdf", data=b"%PDF-1.7" + b"\0" * size)


def draft_for(category_id: str) -> BookDraft:
    return BookDraft(
        title="The Selfish Gene",
        author="Richard Dawkins",
        description="Evolution from the gene's point of view",
        category_id=category_id,
        is_downloadable=True,
    )


def with_repo(service: BookService, repo: BookRepository) -> BookService:
    return BookService(
        category_repo=service.category_repo,
        book_repo=repo,
        validator=service.validator,
        store=service.store,
        url_issuer=service.url_issuer,
    )


def test_create_book_stores_both_objects_and_row(
    book_service: BookService, fake_s3: InMemoryS3Client, category, clock
) -> None:
    view = book_service.create_book(draft_for(category.id), cover=cover_file(), document=document_file())

    book = view.book
    assert book.file_key.startswith("books/")
    assert book.cover_key is not None and book.cover_key.startswith("covers/")
    assert book_service.store.exists(book.file_key)
    assert book_service.store.exists(book.cover_key)
    assert fake_s3.objects[(BUCKET, book.file_key)].content_type == "application/pdf"
    assert view.cover_url is not None
    assert view.cover_url.expires_at == clock.now + timedelta(seconds=86400)
    assert book_service.book_repo.find_by_id(book.id) is not None


def test_create_book_without_cover(book_service: BookService, fake_s3: InMemoryS3Client, category) -> None:
    view = book_service.create_book(draft_for(category.id), cover=None, document=document_file())

    assert view.book.cover_key is None
    assert view.cover_url is None
    assert fake_s3.keys(BUCKET) == {view.book.file_key}


def test_unknown_category_fails_before_touching_the_store(
    book_service: BookService, fake_s3: InMemoryS3Client
) -> None:
    with pytest.raises(NotFoundError):
        book_service.create_book(
            draft_for(str(uuid.uuid4())), cover=cover_file(), document=document_file()
        )

    assert fake_s3.calls == []


def test_invalid_document_fails_before_any_upload(
    book_service: BookService, fake_s3: InMemoryS3Client, category
) -> None:
    bad_document = AssetFile(filename="book.epub", content_type="application/epub+zip", data=b"epub")

    with pytest.raises(UnsupportedAssetTypeError):
        book_service.create_book(draft_for(category.id), cover=cover_file(), document=bad_document)

    assert fake_s3.calls == []


def test_missing_document_is_rejected(book_service: BookService, fake_s3: InMemoryS3Client, category) -> None:
    with pytest.raises(AssetMissingError):
        book_service.create_book(draft_for(category.id), cover=cover_file(), document=None)

    assert fake_s3.calls == []


def test_document_upload_failure_removes_uploaded_cover(
    book_service: BookService, fake_s3: InMemoryS3Client, category
) -> None:
    fake_s3.fail_put_prefixes.add("books/")

    with pytest.raises(StorageFailureError) as excinfo:
        book_service.create_book(draft_for(category.id), cover=cover_file(), document=document_file())

    assert excinfo.value.operation == "put"
    assert fake_s3.keys(BUCKET) == set()
    cover_key = fake_s3.operations("put_object")[0]
    assert fake_s3.operations("delete_object") == [cover_key]
    _, total = book_service.book_repo.find_many(BookFilter(), PageRequest())
    assert total == 0


def test_commit_failure_removes_both_objects_newest_first(
    book_service: BookService, book_repo: BookRepository, fake_s3: InMemoryS3Client, category, session_factory
) -> None:
    service = with_repo(book_service, FailingCreateRepository(session_factory))

    with pytest.raises(DatabaseOperationError):
        service.create_book(draft_for(category.id), cover=cover_file(), document=document_file())

    cover_key, file_key = fake_s3.operations("put_object")
    assert fake_s3.operations("delete_object") == [file_key, cover_key]
    assert fake_s3.keys(BUCKET) == set()
    _, total = book_repo.find_many(BookFilter(), PageRequest())
    assert total == 0


def test_compensation_failures_never_replace_the_original_error(
    book_service: BookService, fake_s3: InMemoryS3Client, category, session_factory
) -> None:
    service = with_repo(book_service, FailingCreateRepository(session_factory))
    fake_s3.fail_all_deletes = True

    with pytest.raises(DatabaseOperationError):
        service.create_book(draft_for(category.id), cover=cover_file(), document=document_file())

    # Both undo actions were attempted even though the first one failed.
    assert len(fake_s3.operations("delete_object")) == 2


def test_remove_book_deletes_row_then_objects(
    book_service: BookService, fake_s3: InMemoryS3Client, category
) -> None:
    view = book_service.create_book(draft_for(category.id), cover=cover_file(), document=document_file())

    ack = book_service.remove_book(view.book.id)

    assert ack.message == "Book deleted"
    assert ack.orphaned_keys == []
    assert book_service.book_repo.find_by_id(view.book.id) is None
    assert fake_s3.keys(BUCKET) == set()
    with pytest.raises(NotFoundError):
        book_service.remove_book(view.book.id)


def test_remove_book_succeeds_when_object_deletes_fail(
    book_service: BookService, fake_s3: InMemoryS3Client, category
) -> None:
    view = book_service.create_book(draft_for(category.id), cover=cover_file(), document=document_file())
    fake_s3.fail_all_deletes = True

    ack = book_service.remove_book(view.book.id)

    assert book_service.book_repo.find_by_id(view.book.id) is None
    assert set(ack.orphaned_keys) == {view.book.file_key, view.book.cover_key}
    with pytest.raises(NotFoundError):
        book_service.remove_book(view.book.id)


def test_remove_book_aborts_when_row_delete_fails(
    book_service: BookService, fake_s3: InMemoryS3Client, category, session_factory
) -> None:
    view = book_service.create_book(draft_for(category.id), cover=None, document=document_file())
    service = with_repo(book_service, FailingDeleteRepository(session_factory))

    with pytest.raises(DatabaseOperationError):
        service.remove_book(view.book.id)

    assert fake_s3.operations("delete_object") == []
    assert book_service.store.exists(view.book.file_key)
    assert book_service.book_repo.find_by_id(view.book.id) is not None


def test_read_book_issues_short_lived_document_url(book_service: BookService, category, clock) -> None:
    view = book_service.create_book(draft_for(category.id), cover=None, document=document_file())

    url = book_service.read_book(view.book.id)

    assert view.book.file_key in url.url
    assert url.expires_at == clock.now + timedelta(seconds=900)


def test_reads_reject_malformed_and_unknown_ids(book_service: BookService) -> None:
    with pytest.raises(ValidationError):
        book_service.get_book("not-a-uuid")
    with pytest.raises(NotFoundError):
        book_service.read_book(str(uuid.uuid4()))


def test_list_books_attaches_cover_urls_and_meta(book_service: BookService, category) -> None:
    for index in range(7):
        book_service.create_book(
            BookDraft(title=f"Volume {index}", author="Anon", category_id=category.id),
            cover=cover_file(16) if index % 2 == 0 else None,
            document=document_file(16),
        )

    page = book_service.list_books(BookFilter(), PageRequest(page=2, limit=5))

    assert len(page.data) == 2
    assert page.meta.total == 7
    assert page.meta.last_page == 2
    assert page.meta.has_prev is True and page.meta.has_next is False
    for view in page.data:
        assert (view.cover_url is None) == (view.book.cover_key is None)


def test_cover_larger_than_limit_is_rejected(book_service: BookService, fake_s3: InMemoryS3Client, category) -> None:
    from book_assets.exceptions import AssetTooLargeError

    with pytest.raises(AssetTooLargeError):
        book_service.create_book(draft_for(category.id), cover=cover_file(5 * MIB), document=document_file())

    assert fake_s3.calls == []


def test_category_removed_before_commit_unwinds_uploads(
    book_service: BookService, fake_s3: InMemoryS3Client, session_factory
) -> None:
    service = BookService(
        category_repo=VanishedCategoryRepository(session_factory),
        book_repo=book_service.book_repo,
        validator=book_service.validator,
        store=book_service.store,
        url_issuer=book_service.url_issuer,
    )

    with pytest.raises(IntegrityConstraintViolation):
        service.create_book(draft_for(str(uuid.uuid4())), cover=cover_file(), document=document_file())

    cover_key, file_key = fake_s3.operations("put_object")
    assert fake_s3.operations("delete_object") == [file_key, cover_key]
    assert fake_s3.keys(BUCKET) == set()
