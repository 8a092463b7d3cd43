"""
Global test fixtures for indexkeeper.

This module provides shared fixtures for all tests including:
- An in-memory IndexStore with failure injection
- Mock MongoDB (mongomock-motor)
- Reconciler and registry factories
- Manifest file helpers
"""

import json
import sys
from pathlib import Path
from typing import Any, Optional

import pytest
import pytest_asyncio

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from indexkeeper.core.errors import (  # noqa: E402
    CollectionNotFoundError,
    IndexConflictError,
    StoreError,
)
from indexkeeper.models.index import ID_INDEX_NAME, IndexDescriptor  # noqa: E402


# =============================================================================
# In-memory index store
# =============================================================================

class FakeIndexStore:
    """
    In-memory implementation of the IndexStore contract.

    Behaves like MongoDB for the parts reconciliation relies on:
    - listing a missing collection raises CollectionNotFoundError
    - creating indexes creates the collection (with its _id_ index)
    - identical re-creation is a no-op, a same-named different shape conflicts
    - the batch is all-or-nothing
    """

    def __init__(self):
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.calls: list[tuple] = []
        self._failures: dict[tuple[str, str, Optional[str]], Exception] = {}

    # ---- test helpers ----

    @staticmethod
    def to_doc(descriptor: IndexDescriptor) -> dict[str, Any]:
        doc = descriptor.to_index_model().document
        doc = {k: v for k, v in doc.items() if k != "background"}
        doc["key"] = dict(doc["key"])
        return doc

    def seed(self, collection: str, *indexes: Any) -> None:
        """Create a collection holding the given descriptors (or key dicts)."""
        coll = self._ensure_collection(collection)
        for index in indexes:
            if not isinstance(index, IndexDescriptor):
                index = IndexDescriptor.model_validate(index)
            coll[index.index_name] = self.to_doc(index)

    def index_names(self, collection: str) -> list[str]:
        return list(self.collections.get(collection, {}))

    def fail(self, op: str, collection: str, error: Exception, index_name: Optional[str] = None):
        """Make ``op`` on ``collection`` (and optionally one index) raise ``error``."""
        self._failures[(op, collection, index_name)] = error

    def calls_for(self, op: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == op]

    def _ensure_collection(self, collection: str) -> dict[str, dict[str, Any]]:
        if collection not in self.collections:
            self.collections[collection] = {
                ID_INDEX_NAME: {"name": ID_INDEX_NAME, "key": {"_id": 1}},
            }
        return self.collections[collection]

    def _maybe_fail(self, op: str, collection: str, index_name: Optional[str] = None):
        error = self._failures.get((op, collection, index_name))
        if error is None and index_name is not None:
            error = self._failures.get((op, collection, None))
        if error is not None:
            raise error

    # ---- IndexStore contract ----

    async def list_indexes(self, collection: str) -> list[dict[str, Any]]:
        self.calls.append(("list_indexes", collection))
        self._maybe_fail("list_indexes", collection)
        if collection not in self.collections:
            raise CollectionNotFoundError(
                f"collection '{collection}': ns does not exist",
                collection=collection,
            )
        return [dict(doc) for doc in self.collections[collection].values()]

    async def create_indexes(self, collection: str, descriptors) -> list[str]:
        self.calls.append(("create_indexes", collection, [d.index_name for d in descriptors]))
        self._maybe_fail("create_indexes", collection)
        existing = self.collections.get(collection, {})
        docs = [self.to_doc(d) for d in descriptors]
        for doc in docs:
            current = existing.get(doc["name"])
            if current is not None and current != doc:
                raise IndexConflictError(
                    f"collection '{collection}': An existing index has the same "
                    f"name as the requested index: {doc['name']}",
                    collection=collection,
                    index_name=doc["name"],
                )
        coll = self._ensure_collection(collection)
        for doc in docs:
            coll.setdefault(doc["name"], doc)
        return [doc["name"] for doc in docs]

    async def drop_index(self, collection: str, name: str) -> None:
        self.calls.append(("drop_index", collection, name))
        self._maybe_fail("drop_index", collection, name)
        if name == ID_INDEX_NAME:
            raise StoreError("cannot drop _id index", collection=collection, index_name=name)
        if name not in self.collections.get(collection, {}):
            raise StoreError(
                f"index not found with name [{name}]",
                collection=collection,
                index_name=name,
            )
        del self.collections[collection][name]


@pytest.fixture
def fake_store() -> FakeIndexStore:
    """Empty in-memory index store."""
    return FakeIndexStore()


@pytest.fixture
def reconciler(fake_store):
    """Fail-fast reconciler over the in-memory store."""
    from indexkeeper.services.reconciler import IndexReconciler
    return IndexReconciler(fake_store)


@pytest.fixture
def sync_service(fake_store):
    """Index sync service over the in-memory store."""
    from indexkeeper.services.index_sync_service import IndexSyncService
    return IndexSyncService(fake_store)


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.
    """
    try:
        from mongomock_motor import AsyncMongoMockClient
        client = AsyncMongoMockClient()
        yield client
        client.close()
    except ImportError:
        pytest.skip("mongomock-motor not installed")


@pytest_asyncio.fixture
async def mock_db(mock_async_mongo_client):
    """Provide a mock application database."""
    yield mock_async_mongo_client["app_db"]


# =============================================================================
# Manifest Fixtures
# =============================================================================

@pytest.fixture
def manifest_data() -> dict:
    """A small manifest with three collections, one without indexes."""
    return {
        "collections": {
            "users": [
                {"keys": [["email", 1]], "unique": True},
                {"key": {"name": 1, "age": -1}},
            ],
            "sessions": [
                {"key": "created_at", "expireAfterSeconds": 3600},
            ],
            "scratch": [],
        }
    }


@pytest.fixture
def manifest_file(tmp_path, manifest_data) -> Path:
    """Write manifest_data to a temporary JSON file."""
    path = tmp_path / "indexes.json"
    path.write_text(json.dumps(manifest_data))
    return path
