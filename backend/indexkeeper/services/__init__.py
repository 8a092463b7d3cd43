"""
Service layer for index reconciliation.
"""
from indexkeeper.services.index_store import IndexStore, MotorIndexStore
from indexkeeper.services.index_diff import IndexDiff, diff_index_names
from indexkeeper.services.index_sync_service import IndexSyncService, SyncState
from indexkeeper.services.reconciler import IndexReconciler

__all__ = [
    "IndexStore",
    "MotorIndexStore",
    "IndexDiff",
    "diff_index_names",
    "IndexSyncService",
    "SyncState",
    "IndexReconciler",
]
