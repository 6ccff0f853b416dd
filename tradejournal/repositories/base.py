"""
Base Repository

Abstract base class for repository pattern implementation.
Provides common CRUD operations for all repositories.

Every write accepts an optional Motor client ``session`` so it can take part
in a multi-document transaction.
"""

from abc import ABC
from typing import Optional, List, Dict, Any
from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorDatabase
from bson import ObjectId
from bson.errors import InvalidId


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Coerce a string/ObjectId to ObjectId, None if it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


class BaseRepository(ABC):
    """
    Abstract base repository class.

    Provides common CRUD operations shared by all repositories.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str):
        """
        Initialize repository.

        Args:
            db: MongoDB database instance
            collection_name: Name of the collection
        """
        self.db = db
        self.collection_name = collection_name
        self.collection = db[collection_name]

    async def find_one(
        self,
        filter: Dict[str, Any],
        session: Optional[AsyncIOMotorClientSession] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Find a single document.

        Args:
            filter: MongoDB filter dictionary
            session: Optional client session (transaction)

        Returns:
            Document dict or None if not found
        """
        return await self.collection.find_one(filter, session=session)

    async def find(
        self,
        filter: Dict[str, Any],
        skip: int = 0,
        limit: int = 0,
        sort: Optional[List[tuple]] = None
    ) -> List[Dict[str, Any]]:
        """
        Find multiple documents.

        Args:
            filter: MongoDB filter dictionary
            skip: Number of documents to skip
            limit: Maximum number of documents to return
            sort: List of (field, direction) tuples for sorting

        Returns:
            List of document dicts
        """
        cursor = self.collection.find(filter)

        if sort:
            cursor = cursor.sort(sort)

        if skip > 0:
            cursor = cursor.skip(skip)

        if limit > 0:
            cursor = cursor.limit(limit)

        return await cursor.to_list(length=limit if limit > 0 else None)

    async def insert_one(
        self,
        document: Dict[str, Any],
        session: Optional[AsyncIOMotorClientSession] = None
    ) -> ObjectId:
        """
        Insert a single document.

        Args:
            document: Document dictionary to insert
            session: Optional client session (transaction)

        Returns:
            Inserted document ID
        """
        result = await self.collection.insert_one(document, session=session)
        return result.inserted_id

    async def update_one(
        self,
        filter: Dict[str, Any],
        update: Dict[str, Any],
        upsert: bool = False,
        session: Optional[AsyncIOMotorClientSession] = None
    ) -> bool:
        """
        Update a single document.

        Args:
            filter: MongoDB filter dictionary
            update: MongoDB update dictionary
            upsert: If True, create document if it doesn't exist
            session: Optional client session (transaction)

        Returns:
            True if a document matched or was created
        """
        result = await self.collection.update_one(
            filter, update, upsert=upsert, session=session
        )
        return result.matched_count > 0 or (upsert and result.upserted_id is not None)

    async def find_by_id(
        self,
        document_id: Any,
        session: Optional[AsyncIOMotorClientSession] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Find document by ID.

        Args:
            document_id: Document ID (string or ObjectId)
            session: Optional client session (transaction)

        Returns:
            Document dict or None if not found or the id is malformed
        """
        object_id = to_object_id(document_id)
        if object_id is None:
            return None
        return await self.find_one({"_id": object_id}, session=session)
