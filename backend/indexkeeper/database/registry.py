"""
Binding registry.

Holds the collections an orchestrator knows about together with their
desired indexes. A registry is an ordinary object: whoever creates it owns
it, and ``clear()`` ends its contents' lifetime.
"""
import logging
from typing import Iterable, Iterator, Optional

from indexkeeper.core.errors import BindingNotFoundError
from indexkeeper.models.binding import CollectionBinding, IndexInput, build_descriptors

logger = logging.getLogger(__name__)


class BindingRegistry:
    """Ordered collection → desired-indexes bindings."""

    def __init__(self):
        self._bindings: dict[str, CollectionBinding] = {}

    def register(
        self,
        collection: str,
        indexes: Optional[Iterable[IndexInput]] = None,
    ) -> CollectionBinding:
        """
        Declare (or re-declare) the desired indexes of a collection.

        Re-declaring replaces the desired list; the binding keeps the
        position of its first registration.
        """
        binding = CollectionBinding(
            collection=collection,
            indexes=build_descriptors(indexes or ()),
        )
        if collection in self._bindings:
            logger.debug(f"Re-declaring binding for '{collection}'")
        self._bindings[collection] = binding
        return binding

    def unregister(self, collection: str) -> None:
        if self._bindings.pop(collection, None) is None:
            raise BindingNotFoundError(
                f"No binding registered for collection '{collection}'",
                collection=collection,
            )

    def get(self, collection: str) -> CollectionBinding:
        try:
            return self._bindings[collection]
        except KeyError:
            raise BindingNotFoundError(
                f"No binding registered for collection '{collection}'",
                collection=collection,
            ) from None

    def bindings(self) -> list[CollectionBinding]:
        """All bindings in registration order."""
        return list(self._bindings.values())

    def clear(self) -> None:
        self._bindings.clear()

    def __contains__(self, collection: object) -> bool:
        return collection in self._bindings

    def __iter__(self) -> Iterator[CollectionBinding]:
        return iter(self.bindings())

    def __len__(self) -> int:
        return len(self._bindings)
