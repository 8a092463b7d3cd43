"""
Collection binding model.
"""
from typing import Any, Iterable, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from indexkeeper.models.index import IndexDescriptor


class CollectionBinding(BaseModel):
    """Association between a collection and its desired indexes."""
    model_config = ConfigDict(frozen=True)

    collection: str = Field(..., min_length=1, description="Collection name")
    indexes: tuple[IndexDescriptor, ...] = Field(
        default=(), description="Desired indexes, in declaration order"
    )

    @field_validator("indexes", mode="before")
    @classmethod
    def _coerce_indexes(cls, value: Any) -> Any:
        if value is None:
            return ()
        return tuple(value)

    @property
    def index_names(self) -> list[str]:
        return [index.index_name for index in self.indexes]

    @property
    def participates(self) -> bool:
        """Bindings without desired indexes are skipped by reconciliation."""
        return bool(self.indexes)


IndexInput = Union[IndexDescriptor, dict[str, Any]]


def build_descriptors(indexes: Iterable[IndexInput]) -> tuple[IndexDescriptor, ...]:
    """Accept descriptors or plain dicts (``{"key": ..., "unique": True}``)."""
    return tuple(
        index if isinstance(index, IndexDescriptor) else IndexDescriptor.model_validate(index)
        for index in indexes
    )
