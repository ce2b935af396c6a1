"""
Book Catalog API: Book Route Handlers
=====================================

Collection routes:
    GET    /api/books          list books with comment counts
    POST   /api/books          create a book
    DELETE /api/books          delete every book

Single-book routes:
    GET    /api/books/{id}     one book with its comments
    POST   /api/books/{id}     append a comment
    DELETE /api/books/{id}     delete one book

Error responses differ between the two groups. Collection routes let
BookService exceptions reach the global handlers in main.py (plain text for
a missing title, JSON + 500 for store failures). Single-book routes answer
every failure in plain text through `single_book_failure`, store outages
included.
"""

import logging
from typing import List, Union

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from bookcatalog.dependencies import get_book_service, request_body
from bookcatalog.exceptions import BookCatalogError, BookNotFoundError, MissingFieldError
from bookcatalog.schemas.book import (
    BookCreate,
    BookCreated,
    BookDetail,
    BookSummary,
    CommentCreate,
    ErrorResponse,
)
from bookcatalog.services.book_service import BookService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Books"])

_TEXT_RESPONSE = {"content": {"text/plain": {}}}


def single_book_failure(exc: BookCatalogError) -> PlainTextResponse:
    """
    Maps any failure on a single-book route to its plain-text answer.

    Missing fields and not-found errors keep their own message ("no book
    exists!" included). Everything else, store errors in particular, is
    reported as "no book exists".
    """
    if isinstance(exc, (MissingFieldError, BookNotFoundError)):
        return PlainTextResponse(exc.message)

    logger.warning("Reporting %s as not found: %s", type(exc).__name__, exc.message)
    return PlainTextResponse(BookNotFoundError().message)


# ── Collection routes ─────────────────────────────────────────────────────


@router.get(
    "/books",
    response_model=List[BookSummary],
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List all books",
)
async def list_books(
    service: BookService = Depends(get_book_service),
) -> List[BookSummary]:
    return await service.list_books()


@router.post(
    "/books",
    response_model=BookCreated,
    responses={
        200: {"description": "Created book, or 'missing required field title'", **_TEXT_RESPONSE},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Create a book",
)
async def create_book(
    body: BookCreate = Depends(request_body(BookCreate)),
    service: BookService = Depends(get_book_service),
) -> BookCreated:
    return await service.create_book(body.title)


@router.delete(
    "/books",
    response_class=PlainTextResponse,
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="Delete every book",
)
async def delete_all_books(
    service: BookService = Depends(get_book_service),
) -> str:
    await service.delete_all_books()
    return "complete delete successful"


# ── Single-book routes ────────────────────────────────────────────────────


@router.get(
    "/books/{book_id}",
    response_model=BookDetail,
    responses={200: {"description": "Book, or 'no book exists'", **_TEXT_RESPONSE}},
    summary="Get a book with its comments",
)
async def get_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> Union[BookDetail, PlainTextResponse]:
    try:
        return await service.get_book(book_id)
    except BookCatalogError as exc:
        return single_book_failure(exc)


@router.post(
    "/books/{book_id}",
    response_model=BookDetail,
    responses={
        200: {
            "description": (
                "Updated book, 'missing required field comment', "
                "'no book exists' or 'no book exists!'"
            ),
            **_TEXT_RESPONSE,
        }
    },
    summary="Append a comment to a book",
)
async def add_comment(
    book_id: str,
    body: CommentCreate = Depends(request_body(CommentCreate)),
    service: BookService = Depends(get_book_service),
) -> Union[BookDetail, PlainTextResponse]:
    try:
        return await service.add_comment(book_id, body.comment)
    except BookCatalogError as exc:
        return single_book_failure(exc)


@router.delete(
    "/books/{book_id}",
    response_class=PlainTextResponse,
    response_model=None,
    summary="Delete one book",
)
async def delete_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> Union[str, PlainTextResponse]:
    try:
        await service.delete_book(book_id)
    except BookCatalogError as exc:
        return single_book_failure(exc)
    return "delete successful"
