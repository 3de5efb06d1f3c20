from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ezbase.core.store import Document
from ezbase.web.deps import AppDep, require_session
from ezbase.web.openapi import ErrorResponse

router = APIRouter(tags=["collections"], dependencies=[Depends(require_session)])


class CollectionRequest(BaseModel):
    """Request naming a collection."""

    collection_name: str = Field(..., description="Collection name")


@router.post(
    "/create_collection",
    summary="Create collection",
    description="Create a collection. Creating an existing collection is a no-op.",
    operation_id="createCollection",
    responses={
        200: {"description": "Collection exists"},
        400: {"model": ErrorResponse, "description": "Invalid collection name"},
        401: {"description": "No valid session"},
    },
)
async def create_collection(request: CollectionRequest, app: AppDep) -> str:
    await app.create_collection(request.collection_name)
    return "Collection created"


@router.delete(
    "/delete_collection",
    summary="Delete collection",
    description="Delete a collection with all its documents and indices.",
    operation_id="deleteCollection",
    responses={
        200: {"description": "Collection deleted"},
        400: {"model": ErrorResponse, "description": "Invalid collection name"},
        401: {"description": "No valid session"},
    },
)
async def delete_collection(request: CollectionRequest, app: AppDep) -> str:
    await app.delete_collection(request.collection_name)
    return "Collection deleted"


@router.get(
    "/get_collection_names",
    summary="List collections",
    operation_id="getCollectionNames",
    responses={
        200: {"description": "Sorted collection names"},
        401: {"description": "No valid session"},
    },
)
async def get_collection_names(app: AppDep) -> list[str]:
    return await app.get_collection_names()


@router.get(
    "/get_all_docs/{collection_name}",
    summary="List documents",
    description="Every document of the collection. A missing collection yields an empty list.",
    operation_id="getAllDocs",
    responses={
        200: {"description": "Documents"},
        400: {"model": ErrorResponse, "description": "Invalid collection name"},
        401: {"description": "No valid session"},
    },
)
async def get_all_docs(collection_name: str, app: AppDep) -> list[Document]:
    return await app.get_all_docs(collection_name)
