from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ezbase.web.deps import AppDep, require_session
from ezbase.web.openapi import ErrorResponse

router = APIRouter(tags=["indices"], dependencies=[Depends(require_session)])


class IndexRequest(BaseModel):
    """Request naming an indexed field of a collection."""

    collection_name: str = Field(..., description="Collection name")
    field_name: str = Field(..., description="Indexed field")


class CollectionIndicesRequest(BaseModel):
    collection_name: str = Field(..., description="Collection name")


_responses = {
    400: {"model": ErrorResponse, "description": "Invalid collection or field name"},
    401: {"description": "No valid session"},
}


@router.post("/create_index", summary="Create index", operation_id="createIndex", responses=_responses)
async def create_index(request: IndexRequest, app: AppDep) -> str:
    await app.create_index(request.collection_name, request.field_name)
    return "Index created"


@router.delete(
    "/delete_index",
    summary="Delete index",
    description="Drop the index on one field. A missing index is a no-op.",
    operation_id="deleteIndex",
    responses=_responses,
)
async def delete_index(request: IndexRequest, app: AppDep) -> str:
    await app.delete_index(request.collection_name, request.field_name)
    return "Index deleted"


@router.delete(
    "/delete_all_indices",
    summary="Delete all indices",
    operation_id="deleteAllIndices",
    responses=_responses,
)
async def delete_all_indices(request: CollectionIndicesRequest, app: AppDep) -> str:
    await app.delete_all_indices(request.collection_name)
    return "Indices deleted"
