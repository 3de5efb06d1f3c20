from ezbase.core.store.base import (
    CollectionHandle,
    DeleteMatched,
    Document,
    DocumentStore,
    Mutation,
    SetField,
    SetFields,
)
from ezbase.core.store.memory import MemoryDocumentStore
from ezbase.core.store.mongo import MongoDocumentStore

MEMORY_SCHEME = "memory://"


def open_store(url: str) -> DocumentStore:
    """Open a store from its URL: memory:// for the embedded store, anything else is MongoDB."""
    if url.startswith(MEMORY_SCHEME):
        return MemoryDocumentStore()
    return MongoDocumentStore(url)


__all__ = [
    "CollectionHandle",
    "DeleteMatched",
    "Document",
    "DocumentStore",
    "MemoryDocumentStore",
    "MongoDocumentStore",
    "Mutation",
    "SetField",
    "SetFields",
    "open_store",
]
