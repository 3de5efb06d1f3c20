"""Store fixtures: the embedded store and a MongoDB store running on mongomock."""

from collections.abc import Callable
from typing import Any

import mongomock
import pytest
from mongomock.collection import Cursor

from ezbase.core.store import DocumentStore, MemoryDocumentStore, MongoDocumentStore


class AsyncCursorDouble:
    """Async iteration over a mongomock cursor, keeping its chainable sort/limit."""

    def __init__(self, cursor: Cursor) -> None:
        self._cursor = cursor

    def sort(self, *args: Any, **kwargs: Any) -> "AsyncCursorDouble":
        self._cursor.sort(*args, **kwargs)
        return self

    def limit(self, count: int) -> "AsyncCursorDouble":
        self._cursor.limit(count)
        return self

    def __aiter__(self) -> "AsyncCursorDouble":
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return next(self._cursor)
        except StopIteration:
            raise StopAsyncIteration from None


def _awaitable(method: Callable[..., Any]) -> Callable[..., Any]:
    async def call(*args: Any, **kwargs: Any) -> Any:
        return method(*args, **kwargs)

    return call


class AsyncCollectionDouble:
    """Awaitable facade over a mongomock collection, shaped like pymongo's AsyncCollection."""

    def __init__(self, collection: mongomock.Collection) -> None:
        self.sync = collection

    def find(self, *args: Any, **kwargs: Any) -> AsyncCursorDouble:
        return AsyncCursorDouble(self.sync.find(*args, **kwargs))

    def __getattr__(self, name: str) -> Callable[..., Any]:
        return _awaitable(getattr(self.sync, name))


class AsyncDatabaseDouble:
    def __init__(self, database: mongomock.Database) -> None:
        self.sync = database

    def get_collection(self, name: str) -> AsyncCollectionDouble:
        return AsyncCollectionDouble(self.sync.get_collection(name))

    def __getattr__(self, name: str) -> Callable[..., Any]:
        return _awaitable(getattr(self.sync, name))


class AsyncClientDouble:
    def __init__(self) -> None:
        self.sync = mongomock.MongoClient()

    def get_database(self, name: str) -> AsyncDatabaseDouble:
        return AsyncDatabaseDouble(self.sync.get_database(name))

    async def aclose(self) -> None:
        self.sync.close()


@pytest.fixture
def mongo_store() -> MongoDocumentStore:
    """MongoDB backend wired to an in-process mongomock client."""
    return MongoDocumentStore("mongodb://localhost/ezbase_test", client=AsyncClientDouble())  # type: ignore[arg-type]


@pytest.fixture(params=["memory", "mongo"])
def any_store(request: pytest.FixtureRequest) -> DocumentStore:
    """Each backend in turn, for behavior both must share."""
    if request.param == "memory":
        return MemoryDocumentStore()
    return request.getfixturevalue("mongo_store")
