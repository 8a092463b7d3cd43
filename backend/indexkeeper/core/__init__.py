"""
Core module - error taxonomy.
"""
from indexkeeper.core.errors import (
    IndexKeeperError,
    StoreError,
    TransientStoreError,
    CollectionNotFoundError,
    IndexConflictError,
    IndexDropError,
    IndexDriftError,
    BindingNotFoundError,
    ManifestError,
    translate_store_error,
)

__all__ = [
    "IndexKeeperError",
    "StoreError",
    "TransientStoreError",
    "CollectionNotFoundError",
    "IndexConflictError",
    "IndexDropError",
    "IndexDriftError",
    "BindingNotFoundError",
    "ManifestError",
    "translate_store_error",
]
