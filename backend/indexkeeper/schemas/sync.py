"""
Reconciliation result schemas.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class SyncStatus(str, Enum):
    """Outcome of one collection's reconciliation."""
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


class SyncIndexesResult(BaseModel):
    """Indexes created and dropped on one collection."""
    created: list[str] = Field(default_factory=list, description="Index names created")
    dropped: list[str] = Field(default_factory=list, description="Index names dropped")
    drifted: list[str] = Field(
        default_factory=list,
        description="Desired index names whose existing shape differs",
    )


class CollectionSyncResult(SyncIndexesResult):
    """Per-collection entry of an aggregate reconciliation."""
    collection: str = Field(..., description="Collection name")
    status: SyncStatus = Field(SyncStatus.DONE, description="Outcome")
    error: Optional[str] = Field(None, description="Failure message when status is failed")


class SyncAllResponse(BaseModel):
    """Aggregate reconciliation response."""
    results: list[CollectionSyncResult] = Field(default_factory=list)
    failed: int = Field(0, description="Number of failed collections")


class BindingResponse(BaseModel):
    """A registered binding."""
    collection: str = Field(..., description="Collection name")
    indexes: list[str] = Field(default_factory=list, description="Desired index names")


class ExistingIndexesResponse(BaseModel):
    """Current index names of a collection."""
    collection: str
    indexes: list[str] = Field(default_factory=list)
