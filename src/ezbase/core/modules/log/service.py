from ezbase.core.core import Service
from ezbase.core.modules.log.models import RequestLog
from ezbase.core.store import DocumentStore


class LogService(Service):
    """Append-only request log kept in its own store."""

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store)
        self._collection = store.collection("requests")

    async def on_start(self) -> None:
        await self._collection.create_index("timestamp")

    async def record(self, entry: RequestLog) -> None:
        await self._collection.insert(entry.to_document())

    async def get_logs(self, limit: int) -> list[RequestLog]:
        """Most recent entries first."""
        return RequestLog.list_documents(await self._collection.latest("timestamp", limit))
