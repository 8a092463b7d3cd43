"""
Index descriptor model.

An IndexDescriptor is the desired state of one index on a collection.
Reconciliation identifies indexes by name only; the name is either given
explicitly or derived from the key the same way MongoDB does it
(``name_1_age_-1``).
"""
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    field_validator,
    model_validator,
)
from pymongo import IndexModel

# Name of the primary-key index MongoDB creates on every collection
ID_INDEX_NAME = "_id_"

INDEX_KINDS = {"text", "2d", "2dsphere", "hashed", "geoHaystack"}

# Less common index options passed through to the store as-is
RECOGNIZED_OPTIONS = {
    "weights",
    "default_language",
    "language_override",
    "textIndexVersion",
    "2dsphereIndexVersion",
    "bits",
    "min",
    "max",
    "wildcardProjection",
    "hidden",
    "storageEngine",
}

# StrictInt keeps True/False from passing as 1/0
Direction = Union[StrictInt, str]


class IndexDescriptor(BaseModel):
    """
    Desired index on a collection: key shape plus options.

    Instances are immutable and hashable.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: tuple[tuple[str, Direction], ...] = Field(
        ..., description="Ordered (field, direction) pairs"
    )
    name: Optional[str] = Field(None, description="Explicit index name")
    unique: Optional[bool] = None
    sparse: Optional[bool] = None
    expire_after_seconds: Optional[int] = Field(
        None, alias="expireAfterSeconds", ge=0, description="TTL in seconds"
    )
    partial_filter_expression: Optional[dict[str, Any]] = Field(
        None, alias="partialFilterExpression"
    )
    collation: Optional[dict[str, Any]] = None
    background: Optional[bool] = None
    options: dict[str, Any] = Field(default_factory=dict)

    @field_validator("key", mode="before")
    @classmethod
    def _normalize_key(cls, value: Any) -> Any:
        if isinstance(value, str):
            return ((value, 1),)
        if isinstance(value, dict):
            return tuple(value.items())
        if isinstance(value, (list, tuple)):
            return tuple(tuple(item) for item in value)
        return value

    @field_validator("key")
    @classmethod
    def _validate_key(cls, value: tuple) -> tuple:
        if not value:
            raise ValueError("index key must name at least one field")
        seen = set()
        for field, direction in value:
            if not field:
                raise ValueError("index key field names must be non-empty")
            if field in seen:
                raise ValueError(f"field '{field}' appears twice in index key")
            seen.add(field)
            if isinstance(direction, int) and direction not in (1, -1):
                raise ValueError(f"invalid direction {direction!r} for '{field}'")
            if isinstance(direction, str) and direction not in INDEX_KINDS:
                raise ValueError(f"unknown index kind {direction!r} for '{field}'")
        return value

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("index name must not be blank")
        return value

    @field_validator("options")
    @classmethod
    def _validate_options(cls, value: dict[str, Any]) -> dict[str, Any]:
        unknown = set(value) - RECOGNIZED_OPTIONS
        if unknown:
            raise ValueError(f"unrecognized index options: {sorted(unknown)}")
        return value

    @model_validator(mode="after")
    def _validate_ttl(self) -> "IndexDescriptor":
        if self.expire_after_seconds is not None and len(self.key) != 1:
            raise ValueError("TTL indexes must be single-field")
        return self

    def __hash__(self) -> int:
        return hash(self.index_name)

    def _store_options(self) -> dict[str, Any]:
        """Options in the store's own (camelCase) spelling."""
        opts: dict[str, Any] = {}
        if self.name is not None:
            opts["name"] = self.name
        if self.unique is not None:
            opts["unique"] = self.unique
        if self.sparse is not None:
            opts["sparse"] = self.sparse
        if self.expire_after_seconds is not None:
            opts["expireAfterSeconds"] = self.expire_after_seconds
        if self.partial_filter_expression is not None:
            opts["partialFilterExpression"] = self.partial_filter_expression
        if self.collation is not None:
            opts["collation"] = self.collation
        if self.background is not None:
            opts["background"] = self.background
        opts.update(self.options)
        return opts

    def to_index_model(self) -> IndexModel:
        """Build the pymongo IndexModel submitted to the store."""
        return IndexModel(list(self.key), **self._store_options())

    @property
    def index_name(self) -> str:
        """Explicit name, or the name MongoDB derives from the key."""
        return self.to_index_model().document["name"]

    @property
    def is_text(self) -> bool:
        return any(direction == "text" for _, direction in self.key)

    def fingerprint(self) -> dict[str, Any]:
        """
        Structural identity of the index.

        Covers the key shape and the options this descriptor declares.
        Background builds do not change the index, so they are left out.
        """
        fp: dict[str, Any] = {"key": [list(pair) for pair in self.key]}
        for option, value in self._store_options().items():
            if option in ("name", "background"):
                continue
            fp[option] = value
        return fp

    def matches(self, existing: dict[str, Any]) -> bool:
        """
        Compare against an index document as returned by list_indexes.

        Only options declared here are compared; collation is compared on
        the declared sub-keys because the store fills in defaults.
        """
        fp = self.fingerprint()
        existing_key = [[field, _normalize_direction(direction)]
                        for field, direction in dict(existing.get("key", {})).items()]
        if existing_key != fp.pop("key"):
            return False

        for option, value in fp.items():
            actual = existing.get(option)
            if option == "collation":
                actual = actual or {}
                if any(actual.get(k) != v for k, v in value.items()):
                    return False
            elif option in ("unique", "sparse", "hidden"):
                if bool(actual) != bool(value):
                    return False
            elif actual != value:
                return False
        return True


def _normalize_direction(direction: Any) -> Direction:
    # Servers report numeric directions as floats or Int64 depending on version
    if isinstance(direction, (int, float)) and not isinstance(direction, bool):
        return int(direction)
    return direction
