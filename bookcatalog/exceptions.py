"""
Book Catalog API: Custom Exception Hierarchy
============================================

What:  Application-specific exceptions raised by BookService.
How:   Each exception carries a message and an optional context dict.
       Collection-level routes let them reach the global handlers in
       main.py; single-book routes translate them through
       `routes.books.single_book_failure`.

Exception Hierarchy:
    BookCatalogError (base)
    ├── MissingFieldError               → 200 text "missing required field <field>"
    ├── BookNotFoundError               → 200 text "no book exists"
    │   ├── InvalidBookIdError          → 200 text "no book exists"
    │   └── CommentTargetNotFoundError  → 200 text "no book exists!"
    └── DatabaseError                   → 500 {"error": message}
        └── StoreUnavailableError       → 500 {"error": "Database not connected"}

Client-input problems are answered with plain text and a success status,
which is the contract existing clients of this API rely on.
"""

from typing import Any, Dict, Optional


class BookCatalogError(Exception):
    """
    Base exception for all Book Catalog errors.

    Attributes:
        message:  Text safe to return to the client
        context:  Debug details that are logged but never returned
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class MissingFieldError(BookCatalogError):
    """
    Raised when a required request field is absent or empty.

    The message is the exact text returned to the client, e.g.
    "missing required field title".
    """

    def __init__(self, field: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["field"] = field
        super().__init__(message=f"missing required field {field}", context=ctx)
        self.field = field


class BookNotFoundError(BookCatalogError):
    """Raised when no book matches the requested identifier."""

    def __init__(
        self,
        book_id: Optional[str] = None,
        message: str = "no book exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if book_id is not None:
            ctx["book_id"] = book_id
        super().__init__(message=message, context=ctx)
        self.book_id = book_id


class InvalidBookIdError(BookNotFoundError):
    """
    Raised when an identifier is not a well-formed ObjectId.

    Reported to clients exactly like a missing book; the distinct type only
    exists so logs can tell the two apart.
    """

    def __init__(self, book_id: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["reason"] = "malformed identifier"
        super().__init__(book_id=book_id, context=ctx)


class CommentTargetNotFoundError(BookNotFoundError):
    """
    Raised when a comment is posted to a well-formed id with no book behind it.

    Its message carries a trailing "!" that the other not-found responses
    lack. Clients match on the literal text, so it is kept as is.
    """

    def __init__(self, book_id: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(book_id=book_id, message="no book exists!", context=context)


class DatabaseError(BookCatalogError):
    """
    Raised when a store operation fails.

    The message is the client-facing error (e.g. "Could not fetch books");
    driver details go into context and the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreUnavailableError(DatabaseError):
    """Raised when no store connection was established at startup."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Database not connected", context=context)
