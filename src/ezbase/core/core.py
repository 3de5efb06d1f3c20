from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import cast

from ezbase.config import Config
from ezbase.core.store import DocumentStore, open_store


class Service:
    """Base class for services bound to one document store."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    from ezbase.core.modules.collection.service import CollectionService  # noqa: PLC0415
    from ezbase.core.modules.document.service import DocumentService  # noqa: PLC0415
    from ezbase.core.modules.log.service import LogService  # noqa: PLC0415
    from ezbase.core.modules.session.service import SessionService  # noqa: PLC0415
    from ezbase.core.modules.user.service import UserService  # noqa: PLC0415

    user: UserService
    session: SessionService
    collection: CollectionService
    document: DocumentService
    log: LogService

    def __init__(self, stores: dict[str, DocumentStore]) -> None:
        """Initialize all services, each bound to the store it owns."""
        self._services: list[Service] = []

        # Service configuration: (attribute_name, module_path, class_name, store_name)
        # Users and sessions share the auth store, so the gate never waits on document traffic
        service_configs = [
            ("user", "ezbase.core.modules.user.service", "UserService", "auth"),
            ("session", "ezbase.core.modules.session.service", "SessionService", "auth"),
            ("collection", "ezbase.core.modules.collection.service", "CollectionService", "data"),
            ("document", "ezbase.core.modules.document.service", "DocumentService", "data"),
            ("log", "ezbase.core.modules.log.service", "LogService", "log"),
        ]

        for attr_name, module_path, class_name, store_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(stores[store_name])
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, the three independent stores, and all service instances."""

    config: Config
    stores: dict[str, DocumentStore]
    services: Services

    def __init__(self, config: Config) -> None:
        self.config = config
        self.stores = {
            "data": open_store(config.database_url),
            "auth": open_store(config.session_database_url),
            "log": open_store(config.log_database_url),
        }
        self.services = Services(self.stores)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close every store on shutdown."""
        await self.services.stop_all()
        for store in self.stores.values():
            await store.close()
