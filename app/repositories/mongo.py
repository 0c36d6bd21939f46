"""
MongoDB (motor) implementation of the document store contract
"""

from typing import Any, Dict, List, Optional, Type

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core.errors import Conflict, StoreUnavailable
from app.core.logger import logger
from app.repositories.base import REVIEW_REFS, DocumentRepository, SortSpec, T


class MongoRepository(DocumentRepository[T]):
    """Document store over one motor collection"""

    model: Type[T]
    # Used in log lines and error messages
    label: str = "document"
    # Versioned collections get ``version`` incremented on every update
    versioned: bool = False

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    @staticmethod
    def _to_object_id(doc_id: str) -> Optional[ObjectId]:
        if isinstance(doc_id, ObjectId):
            return doc_id
        if not doc_id or not ObjectId.is_valid(doc_id):
            return None
        return ObjectId(doc_id)

    def _doc_to_model(self, doc: dict) -> Optional[T]:
        """Convert MongoDB document to the collection model"""
        if not doc:
            return None
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        return self.model.model_validate(doc)

    def _store_error(self, operation: str, error: PyMongoError) -> StoreUnavailable:
        logger.error(
            f"MongoDB error during {self.label} {operation}",
            error=error,
            metadata={"event": "mongodb_error", "collection": self.label, "operation": operation},
        )
        return StoreUnavailable(f"Database error during {self.label} {operation}")

    def _filter(self, oid: ObjectId, expected_version: Optional[int]) -> dict:
        query = {"_id": oid}
        if expected_version is not None:
            query["version"] = expected_version
        return query

    def _update(self, fields: Optional[Dict[str, Any]] = None, **operators) -> dict:
        update = {op: value for op, value in operators.items() if value}
        if fields:
            update["$set"] = dict(fields)
        if self.versioned:
            update["$inc"] = {"version": 1}
        return update

    async def _update_one(self, operation: str, doc_id: str, expected_version, update: dict) -> bool:
        oid = self._to_object_id(doc_id)
        if oid is None:
            return False
        try:
            result = await self.collection.update_one(self._filter(oid, expected_version), update)
        except DuplicateKeyError:
            raise Conflict(f"A {self.label} with the same unique key already exists")
        except PyMongoError as e:
            raise self._store_error(operation, e)
        return result.matched_count > 0

    async def get(self, doc_id: str) -> Optional[T]:
        oid = self._to_object_id(doc_id)
        if oid is None:
            return None
        try:
            doc = await self.collection.find_one({"_id": oid})
        except PyMongoError as e:
            raise self._store_error("retrieval", e)
        return self._doc_to_model(doc)

    async def insert(self, entity: T) -> str:
        doc = entity.model_dump(exclude={"id"})
        try:
            result = await self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise Conflict(f"A {self.label} with the same unique key already exists")
        except PyMongoError as e:
            raise self._store_error("creation", e)
        return str(result.inserted_id)

    async def update_fields(self, doc_id, fields, expected_version=None) -> bool:
        return await self._update_one("update", doc_id, expected_version, self._update(fields))

    async def push_ref(self, doc_id, ref_id, fields=None, expected_version=None,
                       array: str = REVIEW_REFS) -> bool:
        # $addToSet keeps retried pushes from duplicating the reference
        update = self._update(fields, **{"$addToSet": {array: ref_id}})
        return await self._update_one("reference push", doc_id, expected_version, update)

    async def pull_ref(self, doc_id, ref_id, fields=None, expected_version=None,
                       array: str = REVIEW_REFS) -> bool:
        update = self._update(fields, **{"$pull": {array: ref_id}})
        return await self._update_one("reference pull", doc_id, expected_version, update)

    async def delete(self, doc_id: str) -> bool:
        oid = self._to_object_id(doc_id)
        if oid is None:
            return False
        try:
            result = await self.collection.delete_one({"_id": oid})
        except PyMongoError as e:
            raise self._store_error("deletion", e)
        return result.deleted_count > 0

    async def find(self, filters, sort: Optional[SortSpec] = None,
                   limit: Optional[int] = None) -> List[T]:
        try:
            cursor = self.collection.find(filters)
            if sort:
                cursor = cursor.sort(list(sort))
            if limit is not None:
                cursor = cursor.limit(limit)
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise self._store_error("query", e)
        return [self._doc_to_model(doc) for doc in docs]
