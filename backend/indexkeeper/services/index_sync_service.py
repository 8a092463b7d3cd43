"""
Per-collection index reconciliation.

Provides:
- Snapshot reading (a missing collection is an empty baseline)
- Materializing desired indexes in one create batch
- Sequential drops of obsolete indexes
- The per-collection pipeline tying them together
"""
import logging
from enum import Enum
from typing import Any, Literal, Sequence

from indexkeeper.core.errors import (
    CollectionNotFoundError,
    IndexDriftError,
    IndexDropError,
    StoreError,
)
from indexkeeper.models.binding import CollectionBinding
from indexkeeper.models.index import IndexDescriptor
from indexkeeper.schemas.sync import SyncIndexesResult
from indexkeeper.services.index_diff import diff_index_names
from indexkeeper.services.index_store import IndexStore

logger = logging.getLogger(__name__)

DriftCheck = Literal["off", "warn", "error"]


class SyncState(str, Enum):
    """Stages of one collection's reconciliation."""
    IDLE = "idle"
    READING_SNAPSHOT = "reading_snapshot"
    MATERIALIZING = "materializing"
    DIFFING = "diffing"
    DROPPING = "dropping"
    DONE = "done"
    FAILED = "failed"


class IndexSyncService:
    """Reconciles the indexes of single collections against a store."""

    def __init__(self, store: IndexStore, drift_check: DriftCheck = "off"):
        self.store = store
        self.drift_check = drift_check

    # ==================== Snapshot ====================

    async def read_snapshot(self, collection: str) -> list[dict[str, Any]]:
        """Index documents currently on the collection, empty if it does not exist."""
        try:
            return await self.store.list_indexes(collection)
        except CollectionNotFoundError:
            logger.debug(f"Collection '{collection}' does not exist yet, no indexes")
            return []

    async def list_existing_index_names(self, collection: str) -> list[str]:
        """Names of the indexes currently on the collection."""
        snapshot = await self.read_snapshot(collection)
        return list(dict.fromkeys(doc["name"] for doc in snapshot))

    # ==================== Materialize ====================

    async def ensure_indexes(
        self,
        collection: str,
        descriptors: Sequence[IndexDescriptor],
    ) -> list[str]:
        """
        Submit the desired indexes in a single batch.

        Returns the names the store reports for them. Conflicts surface as
        IndexConflictError; nothing is retried or renamed.
        """
        if not descriptors:
            raise ValueError("ensure_indexes requires at least one descriptor")
        return await self.store.create_indexes(collection, list(descriptors))

    # ==================== Drop ====================

    async def drop_all(self, collection: str, names: Sequence[str]) -> list[str]:
        """
        Drop indexes one by one, in order.

        Stops at the first failure. Indexes dropped before it are not
        restored; they are listed on the raised IndexDropError.
        """
        dropped: list[str] = []
        for name in names:
            try:
                await self.store.drop_index(collection, name)
            except StoreError as e:
                logger.error(
                    f"Dropping index '{name}' on '{collection}' failed "
                    f"after dropping {dropped}: {e}"
                )
                raise IndexDropError(
                    f"collection '{collection}', index '{name}': {e}",
                    collection=collection,
                    index_name=name,
                    store_error=e.store_error or e,
                    dropped=dropped,
                ) from e
            dropped.append(name)
            logger.info(f"Dropped index '{name}' on '{collection}'")
        return dropped

    # ==================== Drift ====================

    def find_drift(
        self,
        descriptors: Sequence[IndexDescriptor],
        snapshot: Sequence[dict[str, Any]],
    ) -> list[str]:
        """Desired index names whose existing same-named index has another shape."""
        existing = {doc["name"]: doc for doc in snapshot}
        drifted = []
        for descriptor in descriptors:
            doc = existing.get(descriptor.index_name)
            # text indexes are stored under a rewritten key
            if doc is None or descriptor.is_text:
                continue
            if not descriptor.matches(doc):
                drifted.append(descriptor.index_name)
        return drifted

    # ==================== Pipeline ====================

    async def sync_binding(self, binding: CollectionBinding) -> SyncIndexesResult:
        """Reconcile one collection binding."""
        run = CollectionSyncRun(self, binding)
        return await run.execute()


class CollectionSyncRun:
    """
    One reconciliation attempt for one collection.

    IDLE -> READING_SNAPSHOT -> MATERIALIZING -> DIFFING -> DROPPING -> DONE,
    with FAILED reachable from any stage. A run is single-use.
    """

    def __init__(self, service: IndexSyncService, binding: CollectionBinding):
        self.service = service
        self.binding = binding
        self.state = SyncState.IDLE

    def _transition(self, state: SyncState) -> None:
        logger.debug(f"[{self.binding.collection}] {self.state.value} -> {state.value}")
        self.state = state

    async def execute(self) -> SyncIndexesResult:
        if self.state is not SyncState.IDLE:
            raise RuntimeError(f"Sync run for '{self.binding.collection}' already executed")

        collection = self.binding.collection
        descriptors = self.binding.indexes

        # No desired indexes means "not participating", not "drop everything"
        if not descriptors:
            self._transition(SyncState.DONE)
            return SyncIndexesResult()

        try:
            self._transition(SyncState.READING_SNAPSHOT)
            snapshot = await self.service.read_snapshot(collection)
            existing = list(dict.fromkeys(doc["name"] for doc in snapshot))

            drifted = self._check_drift(descriptors, snapshot)

            self._transition(SyncState.MATERIALIZING)
            materialized = await self.service.ensure_indexes(collection, descriptors)

            self._transition(SyncState.DIFFING)
            diff = diff_index_names(existing, materialized)
            for name in diff.created:
                logger.info(f"Created index '{name}' on '{collection}'")

            self._transition(SyncState.DROPPING)
            try:
                dropped = await self.service.drop_all(collection, diff.to_drop)
            except IndexDropError as e:
                e.created = list(diff.created)
                raise
        except Exception:
            self._transition(SyncState.FAILED)
            raise

        self._transition(SyncState.DONE)
        return SyncIndexesResult(created=diff.created, dropped=dropped, drifted=drifted)

    def _check_drift(self, descriptors, snapshot) -> list[str]:
        mode = self.service.drift_check
        if mode == "off":
            return []

        collection = self.binding.collection
        drifted = self.service.find_drift(descriptors, snapshot)
        if not drifted:
            return []

        message = (
            f"Indexes on '{collection}' differ from their declaration: {drifted}"
        )
        if mode == "error":
            raise IndexDriftError(message, collection=collection, mismatches=drifted)
        logger.warning(message)
        return drifted
