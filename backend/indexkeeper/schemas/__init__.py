"""
Result and response schemas.
"""
from indexkeeper.schemas.sync import (
    SyncStatus,
    SyncIndexesResult,
    CollectionSyncResult,
    SyncAllResponse,
    BindingResponse,
    ExistingIndexesResponse,
)

__all__ = [
    "SyncStatus",
    "SyncIndexesResult",
    "CollectionSyncResult",
    "SyncAllResponse",
    "BindingResponse",
    "ExistingIndexesResponse",
]
