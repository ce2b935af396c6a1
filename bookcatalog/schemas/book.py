"""
Book Catalog API: Pydantic Request/Response Schemas
===================================================

What:  The API contract: named request fields and the JSON shapes returned.
How:   Request models are filled by `dependencies.request_body` from either a
       form or a JSON body; response models are serialized by FastAPI.

Identifier on the wire:
    Stored documents use Mongo's `_id`. Pydantic does not allow a field
    named `_id`, so the models call it `id` and serialize it under the
    alias `_id`, which is the key existing clients read.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class BookCreate(BaseModel):
    """
    Body of POST /api/books.

    `title` is optional here on purpose: its absence is answered with the
    plain-text "missing required field title" by BookService, not with a
    422 validation error.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    title: Optional[str] = Field(default=None, description="Title of the new book")


class CommentCreate(BaseModel):
    """Body of POST /api/books/{id}."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    comment: Optional[str] = Field(default=None, description="Comment text to append")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class _BookBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id", description="Book identifier (24-char hex ObjectId)")
    title: str = Field(description="Book title")


class BookCreated(_BookBase):
    """Returned by POST /api/books."""


class BookSummary(_BookBase):
    """
    One item of GET /api/books.

    commentcount is computed by the store's aggregation and never persisted.
    """

    commentcount: int = Field(ge=0, description="Number of comments on the book")


class BookDetail(_BookBase):
    """Returned by GET /api/books/{id} and POST /api/books/{id}."""

    comments: List[str] = Field(default_factory=list, description="Comments in append order")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """Server-error payload of the collection-level endpoints."""

    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
