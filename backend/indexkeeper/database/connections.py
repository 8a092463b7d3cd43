"""
MongoDB client shared by the API process.

One AsyncIOMotorClient is created lazily from ``Settings.mongo_uri`` and
reused by the index store and the readiness probe. The worker builds its
own client.
"""
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from typing import Optional

from indexkeeper.config import get_settings

_mongo_client: Optional[AsyncIOMotorClient] = None


async def get_mongo_client() -> AsyncIOMotorClient:
    """Return the process-wide client, connecting on first use."""
    global _mongo_client
    if _mongo_client is None:
        _mongo_client = AsyncIOMotorClient(get_settings().mongo_uri)
    return _mongo_client


async def close_connections():
    """Close the client on shutdown; the next call to get_mongo_client reconnects."""
    global _mongo_client

    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None


async def get_database(db_name: Optional[str] = None) -> AsyncIOMotorDatabase:
    """Database whose collections are reconciled (``Settings.database_name`` by default)."""
    client = await get_mongo_client()
    return client[db_name or get_settings().database_name]
