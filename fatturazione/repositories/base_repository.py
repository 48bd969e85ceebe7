"""
Base repository with generic CRUD operations for MongoDB.
Entities are keyed by their own string `id`; the Mongo `_id` never leaves
this layer.
"""
from typing import Optional, List, Dict, Any, Generic, Type, TypeVar
from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import BaseModel
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseModel)


class BaseRepository(Generic[T]):
    """
    Generic repository for MongoDB CRUD operations on pydantic models.

    Provides standard methods: create, find_by_id, find_one, find_all, replace, delete.
    """

    model: Type[T]

    def __init__(self, collection: AsyncIOMotorCollection):
        """
        Initialize repository with MongoDB collection.

        Args:
            collection: Motor AsyncIOMotorCollection instance
        """
        self.collection = collection

    def _to_mongo(self, entity: T) -> Dict[str, Any]:
        # Decimal e date come stringhe: niente perdita di precisione
        return entity.model_dump(mode="json")

    def _from_mongo(self, document: Optional[Dict[str, Any]]) -> Optional[T]:
        if not document:
            return None
        document.pop('_id', None)
        return self.model.model_validate(document)

    async def create(self, entity: T) -> T:
        """
        Insert a new entity.

        Returns:
            The entity as stored
        """
        await self.collection.insert_one(self._to_mongo(entity))
        logger.info(f"Created document in {self.collection.name}: {entity.id}")
        return entity

    async def find_by_id(self, entity_id: str) -> Optional[T]:
        return await self.find_one({"id": entity_id})

    async def find_one(
        self,
        filter_query: Dict[str, Any],
        sort: Optional[List[tuple]] = None
    ) -> Optional[T]:
        """
        Find single entity matching filter.

        Args:
            filter_query: MongoDB filter query
            sort: List of (field, direction) tuples for sorting

        Returns:
            Entity or None if not found
        """
        document = await self.collection.find_one(filter_query, {"_id": 0}, sort=sort)
        return self._from_mongo(document)

    async def find_all(
        self,
        filter_query: Optional[Dict[str, Any]] = None,
        skip: int = 0,
        limit: int = 100,
        sort: Optional[List[tuple]] = None
    ) -> List[T]:
        """
        Find all entities matching filter with pagination.

        Args:
            filter_query: MongoDB filter query (None for all documents)
            skip: Number of documents to skip
            limit: Maximum number of documents to return
            sort: List of (field, direction) tuples for sorting
        """
        query = filter_query or {}
        cursor = self.collection.find(query, {"_id": 0}).skip(skip).limit(limit)

        if sort:
            cursor = cursor.sort(sort)

        documents = await cursor.to_list(length=limit)
        return [self._from_mongo(doc) for doc in documents]

    async def replace(self, entity: T, extra_filter: Optional[Dict[str, Any]] = None) -> bool:
        """
        Replace the stored entity with the same id.

        Args:
            entity: New entity state
            extra_filter: Additional conditions the stored document must match

        Returns:
            True if a document matched and was replaced
        """
        filter_query = {"id": entity.id, **(extra_filter or {})}
        result = await self.collection.replace_one(filter_query, self._to_mongo(entity))

        if result.matched_count > 0:
            logger.info(f"Updated document in {self.collection.name}: {entity.id}")
            return True
        return False

    async def delete(self, entity_id: str) -> bool:
        """
        Delete entity by id.

        Returns:
            True if deleted, False otherwise
        """
        result = await self.collection.delete_one({"id": entity_id})

        if result.deleted_count > 0:
            logger.info(f"Deleted document from {self.collection.name}: {entity_id}")
            return True
        return False
