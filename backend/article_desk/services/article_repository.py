"""Article Repository — CRUD over the articles collection with schema validation.

Invariants:
    - Every write is a single-document atomic operation (insert, find-and-update, delete)
    - Fields validated before any store call; ids parsed before any store call
    - updatedAt never decreases: updates use $max, so createdAt <= updatedAt holds
    - list() order: updatedAt desc, ties broken by _id desc (stable within one call)
    - All PyMongoError mapped to StoreError — callers never see driver exceptions

Design Decisions:
    - Repository owns no connection state: every call goes through store.ensure_connected(),
      so a dropped connection is re-established on the next request
    - No read-modify-write: concurrent updates of the same id are last-write-wins
"""

import logging

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from article_desk.core.article_rules import (
    check_article_id, serialize_article, utc_now, validate_article_fields,
)
from article_desk.core.errors import ResourceNotFoundError, StoreError
from article_desk.infrastructure.database import MongoStore

logger = logging.getLogger(__name__)


class ArticleRepository:
    """Article persistence — one instance per request, store shared per process."""

    def __init__(self, store: MongoStore):
        self._store = store

    async def list(self) -> list[dict]:
        collection = await self._store.ensure_connected()
        try:
            cursor = collection.find({}).sort(
                [("updatedAt", DESCENDING), ("_id", DESCENDING)],
            )
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Failed to list articles: {e}")
            raise StoreError("Could not list articles", "find")
        return [serialize_article(doc) for doc in documents]

    async def create(self, title: str | None, content: str | None) -> dict:
        validate_article_fields(title, content)
        collection = await self._store.ensure_connected()
        now = utc_now()
        document = {
            "title": title,
            "content": content,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = await collection.insert_one(document)
        except PyMongoError as e:
            logger.error(f"Failed to create article: {e}")
            raise StoreError("Could not create article", "insert")
        document["_id"] = result.inserted_id
        logger.info(
            "Article created", extra={"article_id": str(result.inserted_id)},
        )
        return serialize_article(document)

    async def get_by_id(self, article_id: str) -> dict:
        oid = check_article_id(article_id)
        collection = await self._store.ensure_connected()
        try:
            document = await collection.find_one({"_id": oid})
        except PyMongoError as e:
            logger.error(f"Failed to read article {article_id}: {e}")
            raise StoreError("Could not read article", "find")
        if document is None:
            raise ResourceNotFoundError("Article", article_id)
        return serialize_article(document)

    async def update_by_id(
        self, article_id: str, title: str | None, content: str | None,
    ) -> dict:
        oid = check_article_id(article_id)
        validate_article_fields(title, content)
        collection = await self._store.ensure_connected()
        try:
            document = await collection.find_one_and_update(
                {"_id": oid},
                {
                    "$set": {"title": title, "content": content},
                    "$max": {"updatedAt": utc_now()},
                },
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Failed to update article {article_id}: {e}")
            raise StoreError("Could not update article", "update")
        if document is None:
            raise ResourceNotFoundError("Article", article_id)
        logger.info("Article updated", extra={"article_id": article_id})
        return serialize_article(document)

    async def delete_by_id(self, article_id: str) -> None:
        oid = check_article_id(article_id)
        collection = await self._store.ensure_connected()
        try:
            result = await collection.delete_one({"_id": oid})
        except PyMongoError as e:
            logger.error(f"Failed to delete article {article_id}: {e}")
            raise StoreError("Could not delete article", "delete")
        if not result.deleted_count:
            raise ResourceNotFoundError("Article", article_id)
        logger.info("Article deleted", extra={"article_id": article_id})
