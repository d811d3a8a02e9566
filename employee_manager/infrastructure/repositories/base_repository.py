"""
MongoDB implementation of the Base Repository.
Driver errors are translated here, by type, into the application's error set.
"""

from contextlib import contextmanager
from dataclasses import replace as with_fields
from typing import TYPE_CHECKING, Any, Dict, Generic, Iterator, List, Optional, Type, TypeVar

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import ConnectionFailure, DuplicateKeyError

from employee_manager.core.exceptions import ConflictError, StoreUnavailableError

if TYPE_CHECKING:
    from employee_manager.infrastructure.database import MongoStore

ModelType = TypeVar("ModelType")

# Fields owned by the store; a replace never overwrites them
IMMUTABLE_FIELDS = ("createdAt",)


def to_object_id(id: str) -> Optional[ObjectId]:
    """Malformed ids resolve to None so callers treat them as not found."""
    if isinstance(id, ObjectId):
        return id
    if not isinstance(id, str) or not ObjectId.is_valid(id):
        return None
    return ObjectId(id)


class MongoRepository(Generic[ModelType]):
    """Generic repository implementation for document-mapped dataclasses."""

    collection_name: str
    entity_name: str = "Record"

    def __init__(self, store: "MongoStore", model: Type[ModelType]):
        self.store = store
        self.model = model

    def conflict_message(self, field: str) -> str:
        return f"{self.entity_name} with this {field} already exists"

    @contextmanager
    def translate_errors(self) -> Iterator[None]:
        try:
            yield
        except DuplicateKeyError as exc:
            key_pattern = (exc.details or {}).get("keyPattern") or {}
            field = next(iter(key_pattern), "field")
            raise ConflictError(self.conflict_message(field), field=field) from exc
        except ConnectionFailure as exc:
            # Covers ServerSelectionTimeoutError, NetworkTimeout and AutoReconnect
            self.store.mark_unreachable(exc)
            raise StoreUnavailableError() from exc
        else:
            self.store.mark_reachable()

    async def collection(self):
        return await self.store.collection(self.collection_name)

    async def find_one(self, query: Dict[str, Any]) -> Optional[ModelType]:
        with self.translate_errors():
            collection = await self.collection()
            doc = await collection.find_one(query)
        return self.model.from_document(doc) if doc else None

    async def find_many(self, query: Dict[str, Any]) -> List[ModelType]:
        with self.translate_errors():
            collection = await self.collection()
            cursor = collection.find(query).sort("createdAt", DESCENDING)
            docs = [doc async for doc in cursor]
        return [self.model.from_document(doc) for doc in docs]

    async def get_by_id(self, id: str) -> Optional[ModelType]:
        oid = to_object_id(id)
        if oid is None:
            return None
        return await self.find_one({"_id": oid})

    async def list(self) -> List[ModelType]:
        return await self.find_many({})

    async def create(self, obj: ModelType) -> ModelType:
        with self.translate_errors():
            collection = await self.collection()
            result = await collection.insert_one(obj.to_document())
        return with_fields(obj, id=str(result.inserted_id))

    async def replace(self, id: str, obj: ModelType) -> Optional[ModelType]:
        oid = to_object_id(id)
        if oid is None:
            return None
        changes = {k: v for k, v in obj.to_document().items() if k not in IMMUTABLE_FIELDS}
        with self.translate_errors():
            collection = await self.collection()
            doc = await collection.find_one_and_update(
                {"_id": oid},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        return self.model.from_document(doc) if doc else None

    async def delete(self, id: str) -> Optional[ModelType]:
        oid = to_object_id(id)
        if oid is None:
            return None
        with self.translate_errors():
            collection = await self.collection()
            doc = await collection.find_one_and_delete({"_id": oid})
        return self.model.from_document(doc) if doc else None
