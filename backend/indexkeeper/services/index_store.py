"""
Index store contract and its MongoDB implementation.

The reconciliation engine talks to the store only through the three
operations of IndexStore. MotorIndexStore implements them on a motor
database and translates pymongo errors into indexkeeper.core.errors.
"""
import logging
from typing import Any, Protocol, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from indexkeeper.core.errors import translate_store_error
from indexkeeper.models.index import IndexDescriptor

logger = logging.getLogger(__name__)


class IndexStore(Protocol):
    """Narrow store contract consumed by the reconciliation engine."""

    async def list_indexes(self, collection: str) -> list[dict[str, Any]]:
        """
        Index documents of a collection, each with at least a ``name``.

        Raises CollectionNotFoundError when the collection does not exist.
        """
        ...

    async def create_indexes(
        self, collection: str, descriptors: Sequence[IndexDescriptor]
    ) -> list[str]:
        """
        Create the indexes in one batch and return their names.

        Identical existing indexes are accepted; a same-named index of a
        different shape raises IndexConflictError.
        """
        ...

    async def drop_index(self, collection: str, name: str) -> None:
        ...


class MotorIndexStore:
    """IndexStore backed by a motor database."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def list_indexes(self, collection: str) -> list[dict[str, Any]]:
        try:
            info = await self.db[collection].index_information()
        except PyMongoError as e:
            raise translate_store_error(e, collection) from e
        return [{"name": name, **spec} for name, spec in info.items()]

    async def create_indexes(
        self, collection: str, descriptors: Sequence[IndexDescriptor]
    ) -> list[str]:
        models = [descriptor.to_index_model() for descriptor in descriptors]
        try:
            names = await self.db[collection].create_indexes(models)
        except PyMongoError as e:
            raise translate_store_error(e, collection) from e
        return list(names)

    async def drop_index(self, collection: str, name: str) -> None:
        try:
            await self.db[collection].drop_index(name)
        except PyMongoError as e:
            raise translate_store_error(e, collection, index_name=name) from e
