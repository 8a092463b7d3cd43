"""
indexkeeper - declarative MongoDB index reconciliation.
"""
from indexkeeper.database.registry import BindingRegistry
from indexkeeper.models.index import ID_INDEX_NAME, IndexDescriptor
from indexkeeper.schemas.sync import CollectionSyncResult, SyncIndexesResult, SyncStatus
from indexkeeper.services.index_store import IndexStore, MotorIndexStore
from indexkeeper.services.reconciler import IndexReconciler

__all__ = [
    "BindingRegistry",
    "CollectionSyncResult",
    "ID_INDEX_NAME",
    "IndexDescriptor",
    "IndexReconciler",
    "IndexStore",
    "MotorIndexStore",
    "SyncIndexesResult",
    "SyncStatus",
]
