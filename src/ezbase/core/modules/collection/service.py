import structlog

from ezbase.core.core import Service
from ezbase.core.modules.collection.validators import validate_collection_name
from ezbase.core.modules.document.validators import validate_field_name

logger = structlog.get_logger(__name__)


class CollectionService(Service):
    """Manages collections and their field indices."""

    async def create_collection(self, name: str) -> None:
        """Create collection; existing collections are left untouched."""
        await self.store.create_collection(validate_collection_name(name))
        logger.info("collection_created", collection=name)

    async def delete_collection(self, name: str) -> None:
        """Drop collection with all documents and indices."""
        await self.store.drop_collection(validate_collection_name(name))
        logger.info("collection_deleted", collection=name)

    async def get_collection_names(self) -> list[str]:
        return sorted(await self.store.list_collection_names())

    async def create_index(self, name: str, field: str) -> None:
        collection = self.store.collection(validate_collection_name(name))
        await collection.create_index(validate_field_name(field, allow_id=True))
        logger.info("index_created", collection=name, field=field)

    async def delete_index(self, name: str, field: str) -> None:
        collection = self.store.collection(validate_collection_name(name))
        await collection.drop_index(validate_field_name(field, allow_id=True))
        logger.info("index_deleted", collection=name, field=field)

    async def delete_all_indices(self, name: str) -> None:
        await self.store.collection(validate_collection_name(name)).drop_all_indices()
        logger.info("indices_deleted", collection=name)
