"""
Book Catalog API: Test Configuration (conftest.py)
==================================================

Shared fixtures:
    mock_collection:   AsyncMock standing in for a pymongo AsyncCollection,
                       for asserting the exact store calls
    fake_collection:   In-memory collection with real insert/find/update/
                       delete behaviour, for end-to-end API tests
    test_client:       httpx AsyncClient whose BookService uses fake_collection
    unbound_client:    httpx AsyncClient whose BookService has no collection
                       (store never connected)
"""

import copy
import os
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

# Must run before bookcatalog.config is imported anywhere
os.environ["DB"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from bookcatalog.dependencies import get_book_service  # noqa: E402
from bookcatalog.services.book_service import LIST_PIPELINE, BookService  # noqa: E402


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._docs if length is None else self._docs[:length]


class FakeBookCollection:
    """
    Dict-backed collection supporting the calls BookService makes.

    Only `_id` equality filters, `$push` updates and the listing pipeline
    are understood; anything else is a test bug and fails loudly.
    """

    def __init__(self):
        self.docs: Dict[ObjectId, Dict[str, Any]] = {}

    def _match(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        assert set(query) == {"_id"}, f"unsupported filter: {query}"
        return self.docs.get(query["_id"])

    async def insert_one(self, doc: Dict[str, Any]):
        oid = ObjectId()
        stored = copy.deepcopy(doc)
        stored["_id"] = oid
        self.docs[oid] = stored
        return SimpleNamespace(inserted_id=oid, acknowledged=True)

    async def find_one(self, query: Dict[str, Any]):
        doc = self._match(query)
        return copy.deepcopy(doc) if doc is not None else None

    async def find_one_and_update(self, query, update, return_document=None):
        doc = self._match(query)
        if doc is None:
            return None
        assert set(update) == {"$push"}, f"unsupported update: {update}"
        for field, value in update["$push"].items():
            doc.setdefault(field, []).append(value)
        return copy.deepcopy(doc)

    async def delete_one(self, query: Dict[str, Any]):
        doc = self._match(query)
        if doc is None:
            return SimpleNamespace(deleted_count=0)
        del self.docs[doc["_id"]]
        return SimpleNamespace(deleted_count=1)

    async def delete_many(self, query: Dict[str, Any]):
        assert query == {}, f"unsupported filter: {query}"
        count = len(self.docs)
        self.docs.clear()
        return SimpleNamespace(deleted_count=count)

    async def aggregate(self, pipeline: List[Dict[str, Any]]) -> FakeCursor:
        assert pipeline == LIST_PIPELINE, f"unsupported pipeline: {pipeline}"
        return FakeCursor(
            [
                {
                    "_id": doc["_id"],
                    "title": doc["title"],
                    "commentcount": len(doc.get("comments") or []),
                }
                for doc in self.docs.values()
            ]
        )


@pytest.fixture
def mock_collection():
    """AsyncMock collection; configure return values per test."""
    return AsyncMock()


@pytest.fixture
def fake_collection():
    return FakeBookCollection()


async def _client_for(service: BookService):
    from bookcatalog.main import app

    app.dependency_overrides[get_book_service] = lambda: service
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_client(fake_collection):
    """
    HTTP client against the real app with the store swapped for
    fake_collection.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/books")
    """
    async for client in _client_for(BookService(fake_collection)):
        yield client


@pytest_asyncio.fixture
async def unbound_client():
    async for client in _client_for(BookService(None)):
        yield client
