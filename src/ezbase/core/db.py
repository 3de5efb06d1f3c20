from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field

from ezbase.core.store import Document
from ezbase.utils import new_document_id


class StoredModel(BaseModel):
    id: str = Field(alias="_id", serialization_alias="id", default_factory=new_document_id)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_document(self) -> dict[str, Any]:
        """Convert the model to a store document with _id field."""
        data = self.model_dump()
        if "id" in data:
            data["_id"] = data.pop("id")  # Rename id → _id for the store
        return data

    @classmethod
    def list_documents(cls, documents: list[Document]) -> list[Self]:
        """Validate a list of store documents into model instances."""
        return [cls.model_validate(item) for item in documents]
