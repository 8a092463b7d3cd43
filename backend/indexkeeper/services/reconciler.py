"""
Multi-collection index reconciliation.

The reconciler owns a BindingRegistry and walks it in registration order,
one collection at a time.
"""
import logging
from typing import Iterable, Optional

from indexkeeper.core.errors import IndexKeeperError
from indexkeeper.database.registry import BindingRegistry
from indexkeeper.models.binding import CollectionBinding, IndexInput
from indexkeeper.schemas.sync import CollectionSyncResult, SyncIndexesResult, SyncStatus
from indexkeeper.services.index_store import IndexStore
from indexkeeper.services.index_sync_service import DriftCheck, IndexSyncService

logger = logging.getLogger(__name__)


class IndexReconciler:
    """Converges the indexes of every registered collection to its declaration."""

    def __init__(
        self,
        store: IndexStore,
        registry: Optional[BindingRegistry] = None,
        fail_fast: bool = True,
        drift_check: DriftCheck = "off",
    ):
        self.registry = registry if registry is not None else BindingRegistry()
        self.service = IndexSyncService(store, drift_check=drift_check)
        self.fail_fast = fail_fast

    def model(
        self,
        collection: str,
        indexes: Optional[Iterable[IndexInput]] = None,
    ) -> CollectionBinding:
        """Declare a collection binding (last declaration wins)."""
        return self.registry.register(collection, indexes)

    async def sync_collection(self, collection: str) -> SyncIndexesResult:
        """Reconcile one registered collection."""
        binding = self.registry.get(collection)
        return await self.service.sync_binding(binding)

    async def sync_all(self, fail_fast: Optional[bool] = None) -> list[CollectionSyncResult]:
        """
        Reconcile every registered collection, in registration order.

        With fail_fast (the default) the first error propagates and the
        remaining collections are not attempted. Otherwise each failure is
        recorded as a ``failed`` entry and the walk continues.
        """
        fail_fast = self.fail_fast if fail_fast is None else fail_fast
        results: list[CollectionSyncResult] = []

        for binding in self.registry.bindings():
            if not binding.participates:
                results.append(CollectionSyncResult(
                    collection=binding.collection,
                    status=SyncStatus.SKIPPED,
                ))
                continue

            try:
                outcome = await self.service.sync_binding(binding)
            except IndexKeeperError as e:
                logger.error(f"Index sync failed for '{binding.collection}': {e}")
                if fail_fast:
                    raise
                results.append(CollectionSyncResult(
                    collection=binding.collection,
                    created=getattr(e, "created", []),
                    dropped=getattr(e, "dropped", []),
                    status=SyncStatus.FAILED,
                    error=str(e),
                ))
                continue

            results.append(CollectionSyncResult(
                collection=binding.collection,
                status=SyncStatus.DONE,
                **outcome.model_dump(),
            ))

        synced = sum(1 for r in results if r.status is SyncStatus.DONE)
        logger.info(f"Index sync finished: {synced}/{len(results)} collections reconciled")
        return results
