"""
Pydantic models for desired index state.
"""
from indexkeeper.models.index import ID_INDEX_NAME, IndexDescriptor
from indexkeeper.models.binding import CollectionBinding, build_descriptors

__all__ = [
    "ID_INDEX_NAME",
    "IndexDescriptor",
    "CollectionBinding",
    "build_descriptors",
]
