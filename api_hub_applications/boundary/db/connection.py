"""
Database connection management.

Provides the shared motor client and database handle, plus a FastAPI
dependency for injecting the database.

Dependencies: motor, api_hub_applications.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from api_hub_applications.configs import get_settings


@lru_cache
def get_mongo_client() -> AsyncIOMotorClient:
    """
    Create the process-wide motor client.

    tz_aware keeps datetimes read back from Mongo comparable with the
    timezone-aware values the services create.

    Returns:
        AsyncIOMotorClient: Client bound to the configured URI
    """
    settings = get_settings().mongo
    return AsyncIOMotorClient(
        settings.uri,
        tz_aware=True,
        serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
    )


def get_database() -> AsyncIOMotorDatabase:
    """
    FastAPI dependency returning the application database.

    Returns:
        AsyncIOMotorDatabase: Database named by MONGO_DATABASE
    """
    return get_mongo_client()[get_settings().mongo.database]


def close_mongo_client() -> None:
    """Close the shared client and forget it."""
    if get_mongo_client.cache_info().currsize:
        get_mongo_client().close()
        get_mongo_client.cache_clear()
