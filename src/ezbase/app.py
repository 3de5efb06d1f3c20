from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from ezbase.config import Config
from ezbase.core.core import Core
from ezbase.core.modules.document.models import Fields
from ezbase.core.modules.log.models import RequestLog
from ezbase.core.modules.session.models import Session, SessionToken
from ezbase.core.modules.user.models import UserView
from ezbase.core.store import Document
from ezbase.errors import AuthenticationError


class App:
    """Facade for all application operations.

    Session checks happen before these methods are reached: the web layer runs the
    session gate (`validate_session`) on every protected route.
    """

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    @property
    def config(self) -> Config:
        return self._core.config

    # === Sessions and accounts ===
    async def validate_session(self, token: SessionToken) -> bool:
        """Admit the session and slide its expiry, or reject it."""
        return await self._core.services.session.validate_session(token)

    async def signup(self, email: str, password: str) -> UserView:
        user = await self._core.services.user.create_user(email, password)
        return UserView.from_domain(user)

    async def login(self, email: str, password: str) -> Session:
        """Authenticate user and create session."""
        user = await self._core.services.user.verify_password(email, password)
        if user is None:
            raise AuthenticationError("Invalid email or password")
        return await self._core.services.session.create_session(user.email)

    async def logout(self, token: SessionToken | None) -> None:
        """Invalidate the session if the caller presented one."""
        if token is not None:
            await self._core.services.session.invalidate_session(token)

    # === Request log ===
    async def record_request(self, entry: RequestLog) -> None:
        await self._core.services.log.record(entry)

    async def get_logs(self, limit: int | None = None) -> list[RequestLog]:
        return await self._core.services.log.get_logs(limit or self.config.log_limit)

    # === Collections ===
    async def create_collection(self, collection_name: str) -> None:
        await self._core.services.collection.create_collection(collection_name)

    async def delete_collection(self, collection_name: str) -> None:
        await self._core.services.collection.delete_collection(collection_name)

    async def get_collection_names(self) -> list[str]:
        return await self._core.services.collection.get_collection_names()

    async def get_all_docs(self, collection_name: str) -> list[Document]:
        return await self._core.services.document.get_all_documents(collection_name)

    # === Documents ===
    async def insert_doc(self, collection_name: str, field_name: str, field_value: Any) -> str:
        """Insert a document holding exactly one field."""
        return await self._core.services.document.insert_document(collection_name, {field_name: field_value})

    async def insert_doc_multifield(self, collection_name: str, data: Fields) -> str:
        return await self._core.services.document.insert_document(collection_name, data)

    async def insert_docs(self, collection_name: str, docs: dict[str, Fields]) -> list[str]:
        return await self._core.services.document.insert_documents(collection_name, docs)

    async def get_doc(self, collection_name: str, doc_id: str) -> list[Document]:
        return await self._core.services.document.get_document(collection_name, doc_id)

    async def search_doc(self, collection_name: str, search_key: str, search_value: Any) -> list[Document]:
        return await self._core.services.document.search_documents(collection_name, search_key, search_value)

    async def insert_field(self, collection_name: str, doc_id: str, field_name: str, field_value: Any) -> None:
        """Set one field on an existing document (patch)."""
        await self._core.services.document.set_field(collection_name, doc_id, field_name, field_value)

    async def insert_many_fields(self, collection_name: str, doc_id: str, fields: Fields) -> None:
        """Merge fields into an existing document (patch)."""
        await self._core.services.document.set_fields(collection_name, doc_id, fields)

    async def delete_doc(self, collection_name: str, doc_id: str) -> None:
        await self._core.services.document.delete_document(collection_name, doc_id)

    # === Indices ===
    async def create_index(self, collection_name: str, field_name: str) -> None:
        await self._core.services.collection.create_index(collection_name, field_name)

    async def delete_index(self, collection_name: str, field_name: str) -> None:
        await self._core.services.collection.delete_index(collection_name, field_name)

    async def delete_all_indices(self, collection_name: str) -> None:
        await self._core.services.collection.delete_all_indices(collection_name)
