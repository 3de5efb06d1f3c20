from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ezbase.app import App
from ezbase.config import Config
from ezbase.errors import StoreError, UserError
from ezbase.web.error_handlers import general_exception_handler, store_error_handler, user_error_handler
from ezbase.web.middleware import trace_requests
from ezbase.web.openapi import set_custom_openapi
from ezbase.web.routers import auth_router, collections_router, documents_router, indices_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="EzBase API",
        lifespan=lifespan,
    )
    # Set before startup so middleware and dependencies can always reach it
    app.state.app = app_instance
    app.state.config = config

    app.middleware("http")(trace_requests)

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE"],
            allow_headers=["Content-Type"],
        )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router)
    app.include_router(collections_router)
    app.include_router(documents_router)
    app.include_router(indices_router)

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
