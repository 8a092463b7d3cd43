"""
Index name diff.

Pure set arithmetic over index names, kept free of I/O so it can be
tested exhaustively.
"""
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from indexkeeper.models.index import ID_INDEX_NAME

PROTECTED_INDEXES = frozenset({ID_INDEX_NAME})


@dataclass(frozen=True)
class IndexDiff:
    """Names to report as created and names to drop."""
    created: list[str] = field(default_factory=list)
    to_drop: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.created and not self.to_drop


def _unique(names: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(names))


def diff_index_names(
    existing: Sequence[str],
    materialized: Sequence[str],
    protected: Iterable[str] = PROTECTED_INDEXES,
) -> IndexDiff:
    """
    Compute ``created = materialized - existing`` and
    ``to_drop = existing - materialized - protected``.

    ``created`` follows the order of ``materialized``, ``to_drop`` the order
    of ``existing``. Protected names are never dropped, whether or not they
    are desired.
    """
    existing_set = set(existing)
    materialized_set = set(materialized)
    protected_set = set(protected)

    created = [name for name in _unique(materialized) if name not in existing_set]
    to_drop = [
        name for name in _unique(existing)
        if name not in materialized_set and name not in protected_set
    ]
    return IndexDiff(created=created, to_drop=to_drop)
