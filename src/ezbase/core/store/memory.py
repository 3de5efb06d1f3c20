"""Embedded in-process document store.

Documents live in plain dicts keyed by `_id`. Every mutation is computed on copies and
swapped in only after it fully succeeds, so an operation interrupted by an exception
never leaves a collection half-updated.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from ezbase.core.store.base import (
    CollectionHandle,
    DeleteMatched,
    Document,
    DocumentStore,
    MISSING,
    Mutation,
    SetField,
    SetFields,
    match_key,
)
from ezbase.errors import StoreError


@dataclass
class _CollectionData:
    documents: dict[str, Document] = field(default_factory=dict)
    # field -> match key -> ordered document ids
    indices: dict[str, dict[tuple[str, Any], list[str]]] = field(default_factory=dict)

    def build_index(self, field_name: str) -> dict[tuple[str, Any], list[str]]:
        index: dict[tuple[str, Any], list[str]] = {}
        for doc_id, document in self.documents.items():
            index.setdefault(match_key(document.get(field_name, MISSING)), []).append(doc_id)
        return index

    def matching_ids(self, field_name: str, value: Any) -> list[str]:
        if field_name == "_id" and isinstance(value, str):
            return [value] if value in self.documents else []
        key = match_key(value)
        if field_name in self.indices:
            return list(self.indices[field_name].get(key, []))
        return [
            doc_id
            for doc_id, document in self.documents.items()
            if match_key(document.get(field_name, MISSING)) == key
        ]


class MemoryDocumentStore(DocumentStore):
    """Document store held entirely in process memory."""

    def __init__(self) -> None:
        super().__init__()
        self._collections: dict[str, _CollectionData] = {}

    def _open_collection(self, name: str) -> MemoryCollection:
        return MemoryCollection(self, name)

    def data(self, name: str, create: bool = False) -> _CollectionData | None:
        if create and name not in self._collections:
            self._collections[name] = _CollectionData()
        return self._collections.get(name)

    def replace(self, name: str, data: _CollectionData) -> None:
        self._collections[name] = data

    async def create_collection(self, name: str) -> None:
        async with self.lock:
            self.data(name, create=True)

    async def drop_collection(self, name: str) -> None:
        async with self.lock:
            self._collections.pop(name, None)

    async def list_collection_names(self) -> list[str]:
        async with self.lock:
            return list(self._collections)


class MemoryCollection(CollectionHandle):
    store: MemoryDocumentStore

    async def insert(self, document: Document) -> str:
        doc_id = document["_id"]
        stored = copy.deepcopy(document)
        async with self.store.lock:
            data = self.store.data(self.name, create=True)
            assert data is not None
            if doc_id in data.documents:
                raise StoreError(f"Duplicate _id '{doc_id}' in collection '{self.name}'")
            # Compute every index key before touching any state
            keys = {name: match_key(stored.get(name, MISSING)) for name in data.indices}
            data.documents[doc_id] = stored
            for name, key in keys.items():
                data.indices.setdefault(name, {}).setdefault(key, []).append(doc_id)
        return str(doc_id)

    async def find(self, field: str, value: Any) -> list[Document]:
        async with self.store.lock:
            data = self.store.data(self.name)
            if data is None:
                return []
            return [copy.deepcopy(data.documents[doc_id]) for doc_id in data.matching_ids(field, value)]

    async def all(self) -> list[Document]:
        async with self.store.lock:
            data = self.store.data(self.name)
            if data is None:
                return []
            return [copy.deepcopy(document) for document in data.documents.values()]

    async def latest(self, field: str, limit: int) -> list[Document]:
        async with self.store.lock:
            data = self.store.data(self.name)
            if data is None or limit <= 0:
                return []
            newest_first = list(reversed(data.documents.values()))
            newest_first.sort(key=lambda document: document.get(field, 0), reverse=True)
            return [copy.deepcopy(document) for document in newest_first[:limit]]

    async def update_matching(self, field: str, value: Any, mutation: Mutation) -> int:
        async with self.store.lock:
            data = self.store.data(self.name)
            if data is None:
                return 0
            matched = data.matching_ids(field, value)
            if not matched:
                return 0

            documents = dict(data.documents)
            for doc_id in matched:
                if isinstance(mutation, DeleteMatched):
                    del documents[doc_id]
                    continue
                updated = copy.deepcopy(documents[doc_id])
                if isinstance(mutation, SetField):
                    updated[mutation.field] = copy.deepcopy(mutation.value)
                elif isinstance(mutation, SetFields):
                    updated.update(copy.deepcopy(mutation.values))
                documents[doc_id] = updated

            replacement = _CollectionData(documents=documents)
            replacement.indices = {name: replacement.build_index(name) for name in data.indices}
            self.store.replace(self.name, replacement)
            return len(matched)

    async def create_index(self, field: str) -> None:
        async with self.store.lock:
            data = self.store.data(self.name, create=True)
            assert data is not None
            if field not in data.indices:
                data.indices[field] = data.build_index(field)

    async def drop_index(self, field: str) -> None:
        async with self.store.lock:
            data = self.store.data(self.name)
            if data is not None:
                data.indices.pop(field, None)

    async def drop_all_indices(self) -> None:
        async with self.store.lock:
            data = self.store.data(self.name)
            if data is not None:
                data.indices.clear()
