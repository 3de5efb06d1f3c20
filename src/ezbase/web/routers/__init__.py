from ezbase.web.routers.auth import router as auth_router
from ezbase.web.routers.collections import router as collections_router
from ezbase.web.routers.documents import router as documents_router
from ezbase.web.routers.indices import router as indices_router

__all__ = [
    "auth_router",
    "collections_router",
    "documents_router",
    "indices_router",
]
