"""
MongoDB database connection using Motor (async driver).

Provides database instance and connection management with lifespan events.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from tradejournal.config.settings import get_settings

logger = logging.getLogger(__name__)

# Global database client and database instances
_client: AsyncIOMotorClient | None = None
_database: AsyncIOMotorDatabase | None = None


async def connect_to_mongodb() -> None:
    """
    Connect to MongoDB database.

    This function is called during application startup.
    Creates a connection pool, tests the connection and ensures indexes.

    Raises:
        Exception: If connection to MongoDB fails
    """
    global _client, _database

    try:
        current_settings = get_settings()

        logger.info("Connecting to MongoDB at %s", current_settings.MONGODB_URL)

        _client = AsyncIOMotorClient(
            current_settings.MONGODB_URL,
            serverSelectionTimeoutMS=5000,
            maxPoolSize=10,
            minPoolSize=1,
        )

        _database = _client[current_settings.MONGODB_DB_NAME]

        # Test the connection
        await _client.admin.command("ping")

        await create_indexes(_database)

        logger.info(
            "Successfully connected to MongoDB database: %s",
            current_settings.MONGODB_DB_NAME,
        )

    except Exception as e:
        logger.error(f"Failed to connect to MongoDB: {str(e)}")
        raise


async def create_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Create indexes used by the repositories.

    The unique (from_currency, to_currency) index keeps one cached rate per
    ordered pair.
    """
    await db["currency_rates"].create_index(
        [("from_currency", ASCENDING), ("to_currency", ASCENDING)],
        unique=True,
        name="uq_currency_rates_pair",
    )
    await db["accounts"].create_index([("user_id", ASCENDING)])
    await db["trades"].create_index([("user_id", ASCENDING), ("status", ASCENDING)])
    await db["fund_transfers"].create_index(
        [("user_id", ASCENDING), ("transfer_time", DESCENDING)]
    )


async def close_mongodb_connection() -> None:
    """
    Close MongoDB database connection.

    This function is called during application shutdown.
    """
    global _client, _database

    if _client:
        logger.info("Closing MongoDB connection")
        _client.close()
        _client = None
        _database = None
        logger.info("MongoDB connection closed")


def get_client() -> AsyncIOMotorClient:
    """
    Get MongoDB client instance (needed to start sessions/transactions).

    Raises:
        RuntimeError: If database is not connected
    """
    if _client is None:
        raise RuntimeError(
            "Database is not connected. Call connect_to_mongodb() first."
        )
    return _client


def get_database() -> AsyncIOMotorDatabase:
    """
    Get MongoDB database instance.

    Returns:
        AsyncIOMotorDatabase: MongoDB database instance

    Raises:
        RuntimeError: If database is not connected
    """
    if _database is None:
        raise RuntimeError(
            "Database is not connected. Call connect_to_mongodb() first."
        )
    return _database

