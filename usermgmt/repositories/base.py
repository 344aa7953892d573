"""Base repository pattern for MongoDB operations"""

from abc import ABC
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo.collection import Collection
from pymongo.database import Database

T = TypeVar("T", bound=BaseModel)

Projection = Optional[Dict[str, int]]


class BaseRepository(ABC, Generic[T]):
    """Base repository providing common CRUD operations for MongoDB collections"""

    def __init__(self, db: Database, collection_name: str, model_class: Type[T]):
        self.db = db
        self.collection: Collection = db[collection_name]
        self.model_class = model_class

    def find_by_id(
        self, entity_id: str | ObjectId, projection: Projection = None
    ) -> Optional[T]:
        """Find a document by its ID"""
        identifier = self._to_object_id(entity_id)
        if identifier is None:
            return None
        return self.find_one({"_id": identifier}, projection)

    def find_one(
        self, query: Dict[str, Any], projection: Projection = None
    ) -> Optional[T]:
        """Find a single document matching the query"""
        doc = self.collection.find_one(query, projection)
        return self._to_model(doc)

    def find_many(
        self, query: Dict[str, Any], projection: Projection = None
    ) -> List[T]:
        """Find multiple documents matching the query"""
        cursor = self.collection.find(query, projection)
        return [self._to_model(doc) for doc in cursor if doc]

    def insert_one(self, document: Dict[str, Any]) -> T:
        """Insert a single document"""
        result = self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return self._to_model(document)

    def update_one(
        self, entity_id: str | ObjectId, updates: Dict[str, Any]
    ) -> bool:
        """Apply a $set to a document by ID; True when a document matched"""
        identifier = self._to_object_id(entity_id)
        if identifier is None:
            return False
        result = self.collection.update_one({"_id": identifier}, {"$set": updates})
        return result.matched_count > 0

    def delete_by_id(
        self, entity_id: str | ObjectId, projection: Projection = None
    ) -> Optional[T]:
        """Atomically remove a document and return it"""
        identifier = self._to_object_id(entity_id)
        if identifier is None:
            return None
        doc = self.collection.find_one_and_delete(
            {"_id": identifier}, projection=projection
        )
        return self._to_model(doc)

    def count(self, query: Dict[str, Any] = None) -> int:
        """Count documents matching the query"""
        if query is None:
            query = {}
        return self.collection.count_documents(query)

    def _to_model(self, doc: Optional[Dict[str, Any]]) -> Optional[T]:
        """Convert a dictionary to a model instance"""
        if not doc:
            return None
        return self.model_class.model_validate(doc)

    @staticmethod
    def _to_object_id(value: str | ObjectId | None) -> ObjectId | None:
        """Convert a string ID to ObjectId"""
        if value is None:
            return None
        if isinstance(value, ObjectId):
            return value
        if isinstance(value, str):
            try:
                return ObjectId(value)
            except (InvalidId, TypeError):
                return None
        return None
