# src/repository_pattern/db/pydantic_models.py
from typing import Any, Dict, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


class Entity(BaseModel):
    """Base class for documents stored through a repository.

    The identifier lives in MongoDB's ``_id`` field and stays ``None`` until
    the store assigns one on insert.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    id: Optional[ObjectId] = Field(default=None, alias="_id", description="Store-assigned identifier.")

    def to_document(self) -> Dict[str, Any]:
        """Serialize into a MongoDB document; an unset id is left out so the store assigns one."""
        document = self.model_dump(by_alias=True)
        if document.get("_id") is None:
            document.pop("_id", None)
        return document
