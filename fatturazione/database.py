"""
Database configuration and connection management.
Provides singleton Motor AsyncIOMotorClient for MongoDB.
"""
from typing import Optional
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from fatturazione.config import Settings, settings as default_settings
from fatturazione.db_collections import COLL_DOCUMENTS, COLL_CLIENTS
from fatturazione.exceptions import ConfigurationError, DatabaseError

logger = logging.getLogger(__name__)


class Database:
    """MongoDB connection manager with singleton pattern."""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect_db(cls, settings: Settings = default_settings) -> None:
        """
        Create database connection.
        Called on application startup.
        """
        if not settings.MONGODB_URI:
            raise ConfigurationError("MONGODB_URI is required when STORAGE_BACKEND=mongodb")

        logger.info("Connecting to MongoDB...")
        cls.client = AsyncIOMotorClient(
            settings.MONGODB_URI,
            maxPoolSize=settings.MONGODB_MAX_POOL_SIZE,
            minPoolSize=settings.MONGODB_MIN_POOL_SIZE,
            serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS
        )
        cls.db = cls.client[settings.DB_NAME]

        try:
            await cls.client.admin.command("ping")
        except PyMongoError as e:
            logger.error(f"MongoDB non raggiungibile: {e}")
            raise DatabaseError("Connessione a MongoDB fallita", details={"db_name": settings.DB_NAME}) from e
        logger.info(f"✅ Connected to MongoDB database: {settings.DB_NAME}")

        await cls._create_indexes()

    @classmethod
    async def _create_indexes(cls) -> None:
        """Create indexes for unique constraints and lookups."""
        await cls.db[COLL_DOCUMENTS].create_index(
            "id", unique=True, name="idx_document_id_unique"
        )
        await cls.db[COLL_DOCUMENTS].create_index(
            "number",
            unique=True,
            partialFilterExpression={"number": {"$type": "string"}},
            name="idx_document_number_unique"
        )
        await cls.db[COLL_DOCUMENTS].create_index(
            [("number_ordinal", -1)], name="idx_document_number_ordinal"
        )
        await cls.db[COLL_DOCUMENTS].create_index(
            "original_document_id", sparse=True, name="idx_document_original"
        )
        await cls.db[COLL_CLIENTS].create_index(
            "id", unique=True, name="idx_client_id_unique"
        )
        logger.info("✅ Database indexes created")

    @classmethod
    async def close_db(cls) -> None:
        """
        Close database connection.
        Called on application shutdown.
        """
        if cls.client:
            logger.info("Closing MongoDB connection...")
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("✅ MongoDB connection closed")

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        """
        Get database instance.

        Raises:
            ConfigurationError: If connect_db was never awaited
        """
        if cls.db is None:
            raise ConfigurationError("Database not initialized. Call connect_db() first.")
        return cls.db
