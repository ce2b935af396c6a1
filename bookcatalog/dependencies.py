"""
Book Catalog API: FastAPI Dependencies
======================================

get_book_service:
    Returns the BookService the lifespan bound to `app.state`. Tests replace
    it through `app.dependency_overrides`.

get_mongo_connection:
    The lifespan's MongoConnection, used by the health check.

request_body:
    Builds a dependency that fills a request model from the body. Clients
    of this API post HTML forms as often as JSON, so both encodings are
    accepted and mapped onto the same named fields.
"""

import json
from typing import Any, Callable, Coroutine, Dict, Optional, Type, TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from bookcatalog.database import MongoConnection
from bookcatalog.services.book_service import BookService

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_book_service(request: Request) -> BookService:
    """
    The shared BookService.

    Before the lifespan has bound one, an unbound service is returned so
    each route reports the store as unavailable in its usual format.
    """
    service = getattr(request.app.state, "book_service", None)
    if service is None:
        return BookService(None)
    return service


async def _read_fields(request: Request) -> Dict[str, Any]:
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        raw = await request.body()
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": "Invalid JSON body", "input": None}]
            )
        return data if isinstance(data, dict) else {}

    form = await request.form()
    # Uploaded files are not text fields; ignore them
    return {key: value for key, value in form.items() if isinstance(value, str)}


def request_body(
    model: Type[ModelT],
) -> Callable[[Request], Coroutine[Any, Any, ModelT]]:
    """
    Dependency factory: parse a JSON or form body into `model`.

    Missing fields are left to the model's defaults; type errors surface as
    FastAPI's standard 422 response.
    """

    async def dependency(request: Request) -> ModelT:
        fields = await _read_fields(request)
        try:
            return model.model_validate(fields)
        except ValidationError as e:
            raise RequestValidationError(e.errors(include_url=False, include_context=False))

    return dependency


def get_mongo_connection(request: Request) -> Optional[MongoConnection]:
    """The lifespan's MongoConnection, or None before startup."""
    return getattr(request.app.state, "mongo", None)
