"""
Book Catalog API: MongoDB Connection Management
===============================================

What:  Owns the async MongoDB client and hands out the books collection.
How:   `MongoConnection` is created by the application lifespan, connected
       once before the first request and closed at shutdown. Routes never
       see it directly: they receive a BookService bound to its collection.
Who:   main.py (lifespan) and routes/health.py (ping).

Why the async client:
    pymongo's AsyncMongoClient runs on the same event loop as FastAPI, so a
    slow query suspends only the request that issued it. The client keeps
    its own connection pool and is safe to share across concurrent requests.

Failure policy:
    A missing connection string or an unreachable server at startup is
    logged, not raised. The service keeps running and each request reports
    the store as unavailable.
"""

import logging
from typing import Optional

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from bookcatalog.config import Settings

logger = logging.getLogger(__name__)


class MongoConnection:
    """
    Lifecycle wrapper around one AsyncMongoClient.

    Attributes:
        client:      The live client, or None when not connected
        collection:  The books collection, or None when not connected
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self.client: Optional[AsyncMongoClient] = None
        self.collection: Optional[AsyncCollection] = None

    @property
    def is_connected(self) -> bool:
        return self.collection is not None

    async def connect(self) -> Optional[AsyncCollection]:
        """
        Create the client, verify the server answers, and bind the collection.

        Returns the collection on success and None on any failure. An empty
        connection string is reported by Settings.validate_required_for_production,
        so it only short-circuits here.
        """
        url = self._settings.database_url
        if not url:
            return None

        logger.info("Attempting to connect to MongoDB...")
        logger.info("Connection string starts with: %s...", url[:20])

        client: Optional[AsyncMongoClient] = None
        try:
            client = AsyncMongoClient(
                url,
                serverSelectionTimeoutMS=self._settings.db_server_selection_timeout_ms,
            )
            await client.admin.command("ping")
            database = client.get_default_database(default=self._settings.database_name)
        except PyMongoError as e:
            logger.error("Failed to connect to MongoDB: %s", str(e))
            logger.info("Please check your DB connection string in .env file")
            if client is not None:
                await client.close()
            return None

        self.client = client
        self.collection = database[self._settings.books_collection]
        logger.info(
            "Successfully connected to MongoDB (database=%s, collection=%s)",
            database.name,
            self.collection.name,
        )
        return self.collection

    async def ping(self) -> bool:
        """Round-trips a ping command; False when disconnected or unreachable."""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", str(e))
            return False
        return True

    async def close(self) -> None:
        """Closes the client and its pooled connections."""
        if self.client is not None:
            await self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.collection = None
