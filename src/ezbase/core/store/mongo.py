from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from urllib.parse import urlparse

from pymongo import ASCENDING, DESCENDING, AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import CollectionInvalid, OperationFailure, PyMongoError

from ezbase.core.store.base import (
    CollectionHandle,
    DeleteMatched,
    Document,
    DocumentStore,
    Mutation,
    SetField,
    field_equals,
)
from ezbase.errors import StoreError

DEFAULT_DATABASE = "ezbase"

# MongoDB server error codes that mean "already gone"
NAMESPACE_NOT_FOUND = 26
INDEX_NOT_FOUND = 27


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Translate driver failures into StoreError."""
    try:
        yield
    except PyMongoError as e:
        raise StoreError(f"{operation} failed: {e}") from e


def equals(field: str, value: Any) -> dict[str, Any]:
    """Server-side candidate filter for an exact field match.

    `$eq` keeps a mapping value from being read as query operators, but it also matches
    arrays containing the value and, for null, documents lacking the field. Scalars
    therefore exclude arrays, and null requires the field to exist. Results are still
    checked with `field_equals`, which also covers nested arrays and numeric types.
    """
    condition: dict[str, Any] = {"$eq": value}
    if not isinstance(value, list):
        condition["$not"] = {"$type": "array"}
    if value is None:
        condition["$exists"] = True
    return {field: condition}


def index_name(field: str) -> str:
    return f"{field}_1"


class MongoDocumentStore(DocumentStore):
    """Document store backed by one MongoDB database."""

    def __init__(self, url: str, client: AsyncMongoClient[dict[str, Any]] | None = None) -> None:
        super().__init__()
        if client is None:
            client = AsyncMongoClient(url, uuidRepresentation="standard")
        self.client = client
        self.database = self.client.get_database(urlparse(url).path[1:] or DEFAULT_DATABASE)

    def _open_collection(self, name: str) -> MongoCollection:
        return MongoCollection(self, name)

    async def create_collection(self, name: str) -> None:
        async with self.lock:
            with store_errors("create_collection"):
                if name in await self.database.list_collection_names():
                    return
                try:
                    await self.database.create_collection(name)
                except CollectionInvalid:
                    pass  # created concurrently by another client

    async def drop_collection(self, name: str) -> None:
        async with self.lock:
            with store_errors("drop_collection"):
                await self.database.drop_collection(name)

    async def list_collection_names(self) -> list[str]:
        async with self.lock:
            with store_errors("list_collection_names"):
                return await self.database.list_collection_names()

    async def close(self) -> None:
        await self.client.aclose()


class MongoCollection(CollectionHandle):
    store: MongoDocumentStore

    @property
    def _collection(self) -> AsyncCollection[dict[str, Any]]:
        return self.store.database.get_collection(self.name)

    async def _matching(self, field: str, value: Any) -> list[Document]:
        return [doc async for doc in self._collection.find(equals(field, value)) if field_equals(doc, field, value)]

    async def insert(self, document: Document) -> str:
        async with self.store.lock:
            with store_errors("insert"):
                result = await self._collection.insert_one(dict(document))
        return str(result.inserted_id)

    async def find(self, field: str, value: Any) -> list[Document]:
        async with self.store.lock:
            with store_errors("find"):
                return await self._matching(field, value)

    async def all(self) -> list[Document]:
        async with self.store.lock:
            with store_errors("find"):
                return [doc async for doc in self._collection.find({})]

    async def latest(self, field: str, limit: int) -> list[Document]:
        if limit <= 0:
            return []
        async with self.store.lock:
            with store_errors("latest"):
                cursor = self._collection.find({}).sort([(field, DESCENDING), ("_id", DESCENDING)]).limit(limit)
                return [doc async for doc in cursor]

    async def update_matching(self, field: str, value: Any, mutation: Mutation) -> int:
        async with self.store.lock:
            with store_errors("update_matching"):
                ids = [doc["_id"] for doc in await self._matching(field, value)]
                if not ids:
                    return 0
                query = {"_id": {"$in": ids}}
                if isinstance(mutation, DeleteMatched):
                    deleted = await self._collection.delete_many(query)
                    return deleted.deleted_count
                if isinstance(mutation, SetField):
                    changes = {mutation.field: mutation.value}
                else:
                    changes = dict(mutation.values)
                if not changes:
                    return len(ids)
                updated = await self._collection.update_many(query, {"$set": changes})
                return updated.matched_count

    async def create_index(self, field: str) -> None:
        async with self.store.lock:
            with store_errors("create_index"):
                await self._collection.create_index([(field, ASCENDING)], name=index_name(field))

    async def drop_index(self, field: str) -> None:
        async with self.store.lock:
            with store_errors("drop_index"):
                try:
                    await self._collection.drop_index(index_name(field))
                except OperationFailure as e:
                    if e.code not in (NAMESPACE_NOT_FOUND, INDEX_NOT_FOUND):
                        raise

    async def drop_all_indices(self) -> None:
        async with self.store.lock:
            with store_errors("drop_all_indices"):
                try:
                    await self._collection.drop_indexes()
                except OperationFailure as e:
                    if e.code != NAMESPACE_NOT_FOUND:
                        raise
