"""
Book Catalog API: Book Service (Business Logic)
===============================================

What:  Every book operation: presence checks, identifier parsing, the single
       store call, and translation of store failures into app exceptions.
How:   Bound to one books collection at construction. The lifespan builds
       the instance; routes get it through `dependencies.get_book_service`.
Who:   Called by routes/books.py.

Per-operation flow:
    validate input ─▶ parse ObjectId ─▶ one collection call ─▶ response model

Error Handling Strategy:
    - Missing field            → MissingFieldError (checked before anything else)
    - Malformed id             → InvalidBookIdError (no store call is made)
    - No collection bound      → StoreUnavailableError
    - No matching document     → BookNotFoundError / CommentTargetNotFoundError
    - Any driver exception     → DatabaseError with the client-facing message,
                                 original error logged with context
"""

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from bookcatalog.exceptions import (
    BookNotFoundError,
    CommentTargetNotFoundError,
    DatabaseError,
    InvalidBookIdError,
    MissingFieldError,
    StoreUnavailableError,
)
from bookcatalog.schemas.book import BookCreated, BookDetail, BookSummary

logger = logging.getLogger(__name__)

# Projects each book to {_id, title, commentcount}. Documents written before
# `comments` existed count as zero comments.
LIST_PIPELINE: List[Dict[str, Any]] = [
    {
        "$project": {
            "title": 1,
            "commentcount": {"$size": {"$ifNull": ["$comments", []]}},
        }
    }
]


def parse_book_id(book_id: str) -> ObjectId:
    """
    Converts a path identifier to an ObjectId.

    Raises:
        InvalidBookIdError: `book_id` is not a 24-character hex string
    """
    if not ObjectId.is_valid(book_id):
        raise InvalidBookIdError(book_id)
    return ObjectId(book_id)


def _to_detail(doc: Dict[str, Any]) -> BookDetail:
    return BookDetail(
        id=str(doc["_id"]),
        title=doc.get("title", ""),
        comments=doc.get("comments") or [],
    )


class BookService:
    """
    Book operations against one Mongo collection.

    Stateless apart from the collection handle, so one instance serves all
    concurrent requests. A None collection means the store never connected;
    every operation then raises StoreUnavailableError.
    """

    def __init__(self, collection: Optional[AsyncCollection]):
        self._collection = collection

    def _require_collection(self) -> AsyncCollection:
        if self._collection is None:
            raise StoreUnavailableError()
        return self._collection

    def _store_failure(self, message: str, exc: Exception, **context: Any) -> DatabaseError:
        """Logs a driver failure and wraps it for the caller to raise."""
        logger.error("%s: %s", message, str(exc), exc_info=True)
        context["error_type"] = type(exc).__name__
        return DatabaseError(message=message, context=context)

    # ── Collection-level operations ───────────────────────────────────────

    async def list_books(self) -> List[BookSummary]:
        """Every book with its comment count, in store order."""
        collection = self._require_collection()
        try:
            cursor = await collection.aggregate(LIST_PIPELINE)
            docs = await cursor.to_list()
        except Exception as e:
            raise self._store_failure("Could not fetch books", e)

        return [
            BookSummary(
                id=str(doc["_id"]),
                title=doc.get("title", ""),
                commentcount=doc.get("commentcount", 0),
            )
            for doc in docs
        ]

    async def create_book(self, title: Optional[str]) -> BookCreated:
        """
        Inserts a new book with an empty comment list.

        Raises:
            MissingFieldError: `title` is absent or empty
            DatabaseError: the insert failed
        """
        if not title:
            raise MissingFieldError("title")

        collection = self._require_collection()
        try:
            result = await collection.insert_one({"title": title, "comments": []})
        except Exception as e:
            raise self._store_failure("Could not create book", e)

        logger.info("Book created: %s", result.inserted_id)
        return BookCreated(id=str(result.inserted_id), title=title)

    async def delete_all_books(self) -> int:
        """Removes every book. Returns how many were deleted."""
        collection = self._require_collection()
        try:
            result = await collection.delete_many({})
        except Exception as e:
            raise self._store_failure("Could not delete books", e)

        logger.info("Deleted all books (%d removed)", result.deleted_count)
        return result.deleted_count

    # ── Single-book operations ────────────────────────────────────────────

    async def get_book(self, book_id: str) -> BookDetail:
        oid = parse_book_id(book_id)
        collection = self._require_collection()
        try:
            doc = await collection.find_one({"_id": oid})
        except Exception as e:
            raise self._store_failure("Could not fetch book", e, book_id=book_id)

        if doc is None:
            raise BookNotFoundError(book_id)
        return _to_detail(doc)

    async def add_comment(self, book_id: str, comment: Optional[str]) -> BookDetail:
        """
        Appends `comment` to the book and returns the updated document.

        The comment is checked before the identifier, so a request with both
        problems reports the missing comment.

        Raises:
            MissingFieldError: `comment` is absent or empty
            InvalidBookIdError: malformed identifier
            CommentTargetNotFoundError: well-formed id with no book
            DatabaseError: the update failed
        """
        if not comment:
            raise MissingFieldError("comment")

        oid = parse_book_id(book_id)
        collection = self._require_collection()
        try:
            # One atomic $push; the returned document already includes it
            doc = await collection.find_one_and_update(
                {"_id": oid},
                {"$push": {"comments": comment}},
                return_document=ReturnDocument.AFTER,
            )
        except Exception as e:
            raise self._store_failure("Could not add comment", e, book_id=book_id)

        if doc is None:
            raise CommentTargetNotFoundError(book_id)
        return _to_detail(doc)

    async def delete_book(self, book_id: str) -> None:
        oid = parse_book_id(book_id)
        collection = self._require_collection()
        try:
            result = await collection.delete_one({"_id": oid})
        except Exception as e:
            raise self._store_failure("Could not delete book", e, book_id=book_id)

        if result.deleted_count == 0:
            raise BookNotFoundError(book_id)
        logger.info("Book deleted: %s", book_id)
