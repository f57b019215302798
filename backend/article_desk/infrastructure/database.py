"""Document Store Adapter — lazily connected, process-wide MongoDB handle.

Invariants:
    - ensure_connected() is idempotent: first call connects, later calls reuse the cached handle
    - A failed attempt leaves no state behind; the next call starts from scratch
    - Concurrent first calls share one attempt (asyncio.Lock), never open two clients
    - No internal retries — the next request is the retry
    - All driver exceptions mapped to StoreError (core/errors.py)

Design Decisions:
    - Singleton store_manager initialized on startup: FastAPI lifespan manages lifecycle
      (ADR: no global import side effects)
    - client_factory injectable: tests substitute an in-memory client without patching pymongo
    - tz_aware=True: datetimes come back as aware UTC, matching what the repository writes
"""

import asyncio
import logging
from typing import Any, Callable

from pymongo import AsyncMongoClient, DESCENDING
from pymongo.errors import PyMongoError

from article_desk.config import Settings
from article_desk.core.errors import StoreError

logger = logging.getLogger(__name__)


class MongoStore:
    """Owns the single client/collection handle for the process."""

    def __init__(
        self,
        uri: str,
        database: str,
        collection: str,
        max_pool_size: int = 10,
        server_selection_timeout_ms: int = 5000,
        socket_timeout_ms: int = 45_000,
        client_factory: Callable[..., Any] = AsyncMongoClient,
    ):
        self._uri = uri
        self._database = database
        self._collection_name = collection
        self._client_options = {
            "maxPoolSize": max_pool_size,
            "serverSelectionTimeoutMS": server_selection_timeout_ms,
            "connectTimeoutMS": server_selection_timeout_ms,
            "socketTimeoutMS": socket_timeout_ms,
            "tz_aware": True,
        }
        self._client_factory = client_factory
        self._client = None
        self._collection = None
        self._lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self._collection is not None

    async def ensure_connected(self):
        """Return the ready article collection, connecting on first use."""
        if self._collection is not None:
            return self._collection
        async with self._lock:
            if self._collection is not None:
                return self._collection
            logger.info("Opening document store connection")
            client = None
            try:
                client = self._client_factory(self._uri, **self._client_options)
                db = client.get_default_database(default=self._database)
                await db.command("ping")
                collection = db[self._collection_name]
                await collection.create_index([("updatedAt", DESCENDING)])
            except PyMongoError as e:
                logger.error(f"Document store connection failed: {e}")
                if client is not None:
                    await self._discard(client)
                raise StoreError("Could not reach the document store", "connect")
            self._client = client
            self._collection = collection
            logger.info("Document store connected")
            return collection

    async def health_check(self) -> bool:
        """Check store connectivity (for readiness probes)."""
        try:
            collection = await self.ensure_connected()
            await collection.database.command("ping")
            return True
        except (StoreError, PyMongoError) as e:
            logger.error(f"Store health check failed: {e}")
            return False

    async def close(self) -> None:
        client, self._client, self._collection = self._client, None, None
        if client is not None:
            await self._discard(client)

    @staticmethod
    async def _discard(client) -> None:
        try:
            await client.close()
        except PyMongoError as e:
            logger.warning(f"Error closing document store client: {e}")


# Singleton (initialized on startup)
store_manager: MongoStore | None = None


def init_store(settings: Settings, **kwargs) -> MongoStore:
    global store_manager
    store_manager = MongoStore(
        settings.mongodb_uri,
        settings.mongodb_database,
        settings.mongodb_collection,
        max_pool_size=settings.mongodb_max_pool_size,
        server_selection_timeout_ms=settings.mongodb_server_selection_timeout_ms,
        socket_timeout_ms=settings.mongodb_socket_timeout_ms,
        **kwargs,
    )
    return store_manager


async def close_store() -> None:
    global store_manager
    if store_manager is not None:
        await store_manager.close()
    store_manager = None


def get_store() -> MongoStore:
    """FastAPI dependency for the document store."""
    if not store_manager:
        raise StoreError("Document store not initialized", "connect")
    return store_manager
