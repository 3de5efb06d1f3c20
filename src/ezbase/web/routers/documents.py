"""Document endpoints: schema-free inserts, reads, patches and deletes."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, JsonValue

from ezbase.core.modules.document.models import Fields
from ezbase.core.store import Document
from ezbase.web.deps import AppDep, require_session
from ezbase.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["documents"], dependencies=[Depends(require_session)])


class InsertDocRequest(BaseModel):
    """Insert a document holding exactly one field."""

    collection_name: str = Field(..., description="Target collection")
    field_name: str = Field(..., description="The single field of the new document")
    field_value: JsonValue = Field(..., description="Any JSON value")


class InsertDocMultifieldRequest(BaseModel):
    """Insert a document built from an arbitrary field mapping."""

    collection_name: str = Field(..., description="Target collection")
    data: Fields = Field(..., description="Fields of the new document")

    model_config = {
        "json_schema_extra": {
            "examples": [{"collection_name": "Users", "data": {"Height": 185, "Color": "Brown", "Hand": "Right"}}]
        }
    }


class InsertDocsRequest(BaseModel):
    """Insert one document per entry. Keys are arbitrary labels; ids come back in payload order."""

    collection_name: str = Field(..., description="Target collection")
    docs: dict[str, Fields] = Field(..., description="Label to document fields")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "collection_name": "Users",
                    "docs": {
                        "0": {"Height": 185, "Color": "Brown", "Hand": "Right"},
                        "1": {"Height": 195, "Color": "Brown", "Hand": "Left"},
                    },
                }
            ]
        }
    }


class SearchDocRequest(BaseModel):
    """Exact-equality search on one field."""

    collection_name: str = Field(..., description="Collection to search")
    search_key: str = Field(..., description="Field name")
    search_value: JsonValue = Field(..., description="Value the field must equal")


class InsertFieldRequest(BaseModel):
    """Set one field on an existing document."""

    collection_name: str = Field(..., description="Collection holding the document")
    doc_id: str = Field(..., description="Document id")
    field_name: str = Field(..., description="Field to set")
    field_value: JsonValue = Field(..., description="New value")


class InsertManyFieldsRequest(BaseModel):
    """Merge fields into an existing document."""

    collection_name: str = Field(..., description="Collection holding the document")
    doc_id: str = Field(..., description="Document id")
    fields_to_insert: Fields = Field(..., description="Fields to set, overwriting same-named ones")


class DeleteDocRequest(BaseModel):
    collection_name: str = Field(..., description="Collection holding the document")
    doc_id: str = Field(..., description="Document id")


_responses = {
    400: {"model": ErrorResponse, "description": "Invalid collection or field name"},
    401: {"description": "No valid session"},
}

_patch_responses = {
    **_responses,
    404: {"model": ErrorResponse, "description": "Document not found"},
}


@router.post(
    "/insert_doc",
    summary="Insert single-field document",
    operation_id="insertDoc",
    responses={200: {"description": "Id of the new document"}, **_responses},
)
async def insert_doc(request: InsertDocRequest, app: AppDep) -> str:
    return await app.insert_doc(request.collection_name, request.field_name, request.field_value)


@router.post(
    "/insert_doc_multifield",
    summary="Insert document",
    operation_id="insertDocMultifield",
    responses={200: {"description": "Id of the new document"}, **_responses},
)
async def insert_doc_multifield(request: InsertDocMultifieldRequest, app: AppDep) -> str:
    return await app.insert_doc_multifield(request.collection_name, request.data)


@router.post(
    "/insert_docs",
    summary="Insert many documents",
    description="Insert one document per entry. A failure aborts the remaining entries without undoing earlier ones.",
    operation_id="insertDocs",
    responses={200: {"description": "Ids of the new documents in payload order"}, **_responses},
)
async def insert_docs(request: InsertDocsRequest, app: AppDep) -> list[str]:
    return await app.insert_docs(request.collection_name, request.docs)


@router.get(
    "/get_doc/{collection_name}/{doc_id}",
    summary="Read document by id",
    description="Returns a list with the document, or an empty list when no document has this id.",
    operation_id="getDoc",
    responses={200: {"description": "Zero or one document"}, **_responses},
)
async def get_doc(collection_name: str, doc_id: str, app: AppDep) -> list[Document]:
    return await app.get_doc(collection_name, doc_id)


@router.post(
    "/search_doc",
    summary="Find documents by field",
    operation_id="searchDoc",
    responses={200: {"description": "Matching documents"}, **_responses},
)
async def search_doc(request: SearchDocRequest, app: AppDep) -> list[Document]:
    return await app.search_doc(request.collection_name, request.search_key, request.search_value)


@router.post(
    "/insert_field",
    summary="Set one field",
    operation_id="insertField",
    responses={200: {"description": "Field set"}, **_patch_responses},
)
async def insert_field(request: InsertFieldRequest, app: AppDep) -> str:
    await app.insert_field(request.collection_name, request.doc_id, request.field_name, request.field_value)
    return "Field Added Successfully!"


@router.post(
    "/insert_many_fields",
    summary="Set many fields",
    operation_id="insertManyFields",
    responses={200: {"description": "Fields set"}, **_patch_responses},
)
async def insert_many_fields(request: InsertManyFieldsRequest, app: AppDep) -> str:
    await app.insert_many_fields(request.collection_name, request.doc_id, request.fields_to_insert)
    return "Fields Added Successfully!"


@router.delete(
    "/delete_doc",
    summary="Delete document",
    description="Delete the document with this id. Unknown ids are a no-op.",
    operation_id="deleteDoc",
    responses={200: {"description": "Document absent"}, **_responses},
)
async def delete_doc(request: DeleteDocRequest, app: AppDep) -> str:
    await app.delete_doc(request.collection_name, request.doc_id)
    return "Document Deleted!"
