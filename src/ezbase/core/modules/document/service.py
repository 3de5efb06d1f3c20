from typing import Any

import structlog

from ezbase.core.core import Service
from ezbase.core.modules.collection.validators import validate_collection_name
from ezbase.core.modules.document.models import Fields
from ezbase.core.modules.document.validators import validate_field_name, validate_fields
from ezbase.core.store import CollectionHandle, DeleteMatched, Document, SetField, SetFields
from ezbase.errors import NotFoundError
from ezbase.utils import new_document_id

logger = structlog.get_logger(__name__)


class DocumentService(Service):
    """Inserts, reads, patches and deletes schema-free documents addressed by field."""

    def _collection(self, name: str) -> CollectionHandle:
        return self.store.collection(validate_collection_name(name))

    async def insert_document(self, collection_name: str, fields: Fields) -> str:
        """Insert a new document built from fields and return its assigned id."""
        collection = self._collection(collection_name)
        document = {"_id": new_document_id(), **validate_fields(fields)}
        doc_id = await collection.insert(document)
        logger.debug("document_inserted", collection=collection_name, doc_id=doc_id)
        return doc_id

    async def insert_documents(self, collection_name: str, entries: dict[str, Fields]) -> list[str]:
        """Insert one document per entry in payload order and return the ids in that order.

        Keys of `entries` are arbitrary labels. A failing insert aborts the remainder; documents
        inserted before it stay in place.
        """
        collection = self._collection(collection_name)
        for fields in entries.values():
            validate_fields(fields)

        doc_ids = []
        for fields in entries.values():
            doc_ids.append(await collection.insert({"_id": new_document_id(), **fields}))
        logger.debug("documents_inserted", collection=collection_name, count=len(doc_ids))
        return doc_ids

    async def get_document(self, collection_name: str, doc_id: str) -> list[Document]:
        """Return a list holding the document with this id, or an empty list."""
        document = await self._collection(collection_name).find_by_id(doc_id)
        return [document] if document is not None else []

    async def search_documents(self, collection_name: str, field: str, value: Any) -> list[Document]:
        """Return all documents whose field exactly equals value."""
        return await self._collection(collection_name).find(validate_field_name(field, allow_id=True), value)

    async def get_all_documents(self, collection_name: str) -> list[Document]:
        return await self._collection(collection_name).all()

    async def set_field(self, collection_name: str, doc_id: str, field: str, value: Any) -> None:
        """Set one field on the document. Raises NotFoundError if no document has this id."""
        mutation = SetField(field=validate_field_name(field), value=value)
        matched = await self._collection(collection_name).update_matching("_id", doc_id, mutation)
        if matched == 0:
            raise NotFoundError(f"Document '{doc_id}' not found")

    async def set_fields(self, collection_name: str, doc_id: str, fields: Fields) -> None:
        """Merge fields into the document, overwriting same-named fields."""
        mutation = SetFields(values=validate_fields(fields))
        matched = await self._collection(collection_name).update_matching("_id", doc_id, mutation)
        if matched == 0:
            raise NotFoundError(f"Document '{doc_id}' not found")

    async def delete_document(self, collection_name: str, doc_id: str) -> None:
        """Delete the document; an unknown id is a no-op."""
        removed = await self._collection(collection_name).update_matching("_id", doc_id, DeleteMatched())
        logger.debug("document_deleted", collection=collection_name, doc_id=doc_id, removed=removed)
