"""
Base CRUD operations for Mongo collections.

Provides generic create, read, update and delete operations over a motor
collection. Subclasses supply the document codec (including field-level
encryption) and any entity-specific queries.

Dependencies: motor, bson, pydantic
System role: Foundation for all repository operations
"""

import logging
from typing import Any, Generic, Mapping, TypeVar

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import BaseModel

from api_hub_applications.core.crypto import SensitiveCrypto

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def string_to_object_id(value: str | None) -> ObjectId | None:
    """Parse a hex id, returning None for anything Mongo would reject."""
    if value is None or not ObjectId.is_valid(value):
        logger.debug("Invalid ObjectId specified", extra={"id": value})
        return None
    return ObjectId(value)


def build_and_filter(*filters: Mapping[str, Any] | None) -> dict[str, Any]:
    """Combine optional filters with $and, or match everything when none apply."""
    present = [dict(f) for f in filters if f]
    if not present:
        return {}
    if len(present) == 1:
        return present[0]
    return {"$and": present}


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for Mongo CRUD operations.

    Type Parameters:
        ModelT: Pydantic model stored in the collection

    Attributes:
        collection: Motor collection to operate on
        crypto: Encrypter used for sensitive fields
    """

    collection_name: str = ""

    def __init__(self, collection: AsyncIOMotorCollection, crypto: SensitiveCrypto) -> None:
        """
        Initialize CRUD with target collection.

        Args:
            collection: Motor collection for database operations
            crypto: Deterministic encrypter for sensitive fields
        """
        self.collection = collection
        self.crypto = crypto

    def to_document(self, model: ModelT) -> dict[str, Any]:
        """Serialise a model for storage. Subclasses encrypt sensitive fields."""
        return model.model_dump(by_alias=True, exclude={"id"})

    def from_document(self, document: Mapping[str, Any]) -> ModelT:
        """Deserialise a stored document. Subclasses decrypt sensitive fields."""
        raise NotImplementedError

    @staticmethod
    def _with_id(document: Mapping[str, Any]) -> dict[str, Any]:
        data = {key: value for key, value in document.items() if key != "_id"}
        data["id"] = str(document["_id"])
        return data

    async def create(self, model: ModelT) -> ModelT:
        """
        Insert a new document.

        Returns:
            The model with its generated id
        """
        result = await self.collection.insert_one(self.to_document(model))
        return model.model_copy(update={"id": str(result.inserted_id)})

    async def create_many(self, models: list[ModelT]) -> list[ModelT]:
        if not models:
            return []
        result = await self.collection.insert_many([self.to_document(model) for model in models])
        return [
            model.model_copy(update={"id": str(inserted_id)})
            for model, inserted_id in zip(models, result.inserted_ids)
        ]

    async def get_by_id(self, id: str) -> ModelT | None:
        """
        Retrieve a single document by id.

        Returns:
            Model if found, None otherwise (including malformed ids)
        """
        object_id = string_to_object_id(id)
        if object_id is None:
            return None
        document = await self.collection.find_one({"_id": object_id})
        return self.from_document(document) if document else None

    async def find(self, query: Mapping[str, Any], **kwargs: Any) -> list[ModelT]:
        cursor = self.collection.find(dict(query), **kwargs)
        documents = await cursor.to_list(length=None)
        return [self.from_document(document) for document in documents]

    async def replace(self, model: ModelT) -> bool:
        """
        Replace the stored document with the model's current state.

        Returns:
            True when a document with the model's id exists
        """
        object_id = string_to_object_id(getattr(model, "id", None))
        if object_id is None:
            return False
        result = await self.collection.replace_one({"_id": object_id}, self.to_document(model), upsert=False)
        return result.matched_count > 0

    async def delete_by_id(self, id: str) -> bool:
        object_id = string_to_object_id(id)
        if object_id is None:
            return False
        result = await self.collection.delete_one({"_id": object_id})
        return result.deleted_count > 0

    async def ensure_indexes(self) -> None:
        """Create collection indexes. Subclasses override when they need any."""
