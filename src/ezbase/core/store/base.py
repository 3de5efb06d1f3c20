"""Store-agnostic collection interface shared by every backend."""

from __future__ import annotations

import asyncio
import json
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, JsonValue

from ezbase.errors import StoreError

Document = dict[str, Any]

# Stands in for an absent field when computing match keys
MISSING = object()


def match_key(value: Any) -> tuple[str, Any]:
    """Hashable equality key for a JSON value.

    Booleans never equal numbers, ints equal floats of the same value, and nested
    containers compare by their serialized form. A missing field and an explicit
    null have different keys.
    """
    if value is MISSING:
        return ("missing", None)
    if value is None:
        return ("null", None)
    if isinstance(value, bool):
        return ("bool", value)
    if isinstance(value, int | float):
        return ("number", value)
    if isinstance(value, str):
        return ("string", value)
    try:
        return ("json", json.dumps(value, separators=(",", ":")))
    except (TypeError, ValueError) as e:
        raise StoreError(f"Unsupported value type: {type(value).__name__}") from e


def field_equals(document: Document, field: str, value: Any) -> bool:
    """Exact equality of one top-level field, as every backend must apply it."""
    return match_key(document.get(field, MISSING)) == match_key(value)


class SetField(BaseModel):
    """Set one field on every matched document."""

    model_config = ConfigDict(frozen=True)

    field: str
    value: JsonValue


class SetFields(BaseModel):
    """Merge a field-value mapping into every matched document."""

    model_config = ConfigDict(frozen=True)

    values: dict[str, JsonValue]


class DeleteMatched(BaseModel):
    """Remove every matched document."""

    model_config = ConfigDict(frozen=True)


Mutation = SetField | SetFields | DeleteMatched


class DocumentStore(ABC):
    """One physical store; all operations on it are serialized through a single lock.

    Independent store instances have independent locks, so a slow operation on one
    never blocks another.
    """

    def __init__(self) -> None:
        self.lock = asyncio.Lock()

    def collection(self, name: str) -> CollectionHandle:
        """Open a collection by name. It is created lazily on first write."""
        return self._open_collection(name)

    @abstractmethod
    def _open_collection(self, name: str) -> CollectionHandle: ...

    @abstractmethod
    async def create_collection(self, name: str) -> None:
        """Create collection if it does not exist yet."""

    @abstractmethod
    async def drop_collection(self, name: str) -> None:
        """Drop collection with all its documents and indices. Missing collection is a no-op."""

    @abstractmethod
    async def list_collection_names(self) -> list[str]: ...

    async def close(self) -> None:
        """Release backend resources."""


class CollectionHandle(ABC):
    """Field-equality view over one collection of a DocumentStore."""

    def __init__(self, store: DocumentStore, name: str) -> None:
        self.store = store
        self.name = name

    @abstractmethod
    async def insert(self, document: Document) -> str:
        """Insert document and return its `_id`. Document must already carry `_id`."""

    @abstractmethod
    async def find(self, field: str, value: Any) -> list[Document]:
        """Return all documents where `field` equals `value`."""

    async def find_one(self, field: str, value: Any) -> Document | None:
        """Return the first document where `field` equals `value`, or None."""
        documents = await self.find(field, value)
        return documents[0] if documents else None

    async def find_by_id(self, document_id: str) -> Document | None:
        return await self.find_one("_id", document_id)

    @abstractmethod
    async def all(self) -> list[Document]:
        """Return every document of the collection."""

    @abstractmethod
    async def latest(self, field: str, limit: int) -> list[Document]:
        """Return at most `limit` documents with the largest `field`, later inserts first on ties."""

    @abstractmethod
    async def update_matching(self, field: str, value: Any, mutation: Mutation) -> int:
        """Apply mutation to all documents where `field` equals `value`. Returns matched count."""

    @abstractmethod
    async def create_index(self, field: str) -> None: ...

    @abstractmethod
    async def drop_index(self, field: str) -> None:
        """Drop index on field. Missing index is a no-op."""

    @abstractmethod
    async def drop_all_indices(self) -> None: ...
