"""
Database module - MongoDB connection, binding registry and manifest loading.
"""
from indexkeeper.database.connections import (
    get_mongo_client,
    close_connections,
    get_database,
)
from indexkeeper.database.registry import BindingRegistry

__all__ = [
    "get_mongo_client",
    "close_connections",
    "get_database",
    "BindingRegistry",
]
