"""
Tests for the shared MongoDB client.

These tests cover:
- Lazy client creation from settings
- Reuse of the client across calls
- Default database selection
- Shutdown cleanup
"""

import pytest
from unittest.mock import MagicMock, patch

import indexkeeper.database.connections as conn_module
from indexkeeper.database.connections import close_connections, get_database, get_mongo_client


@pytest.fixture(autouse=True)
def reset_client():
    conn_module._mongo_client = None
    yield
    conn_module._mongo_client = None


class TestMongoClient:
    """Tests for get_mongo_client / close_connections."""

    @pytest.mark.asyncio
    async def test_client_created_once_from_settings(self):
        with patch("indexkeeper.database.connections.AsyncIOMotorClient") as mock_client, \
             patch("indexkeeper.database.connections.get_settings") as mock_settings:
            mock_settings.return_value.mongo_uri = "mongodb://test:27017"

            first = await get_mongo_client()
            second = await get_mongo_client()

        mock_client.assert_called_once_with("mongodb://test:27017")
        assert first is second

    @pytest.mark.asyncio
    async def test_close_connections_resets_client(self):
        mock_mongo = MagicMock()
        conn_module._mongo_client = mock_mongo

        await close_connections()

        mock_mongo.close.assert_called_once()
        assert conn_module._mongo_client is None

    @pytest.mark.asyncio
    async def test_close_without_client_is_noop(self):
        await close_connections()

        assert conn_module._mongo_client is None


class TestGetDatabase:
    """Tests for get_database."""

    @pytest.mark.asyncio
    async def test_defaults_to_configured_database(self):
        mock_mongo = MagicMock()
        conn_module._mongo_client = mock_mongo

        with patch("indexkeeper.database.connections.get_settings") as mock_settings:
            mock_settings.return_value.database_name = "inventory"
            db = await get_database()

        mock_mongo.__getitem__.assert_called_once_with("inventory")
        assert db is mock_mongo.__getitem__.return_value

    @pytest.mark.asyncio
    async def test_explicit_database_name(self):
        mock_mongo = MagicMock()
        conn_module._mongo_client = mock_mongo

        await get_database("audit")

        mock_mongo.__getitem__.assert_called_once_with("audit")
