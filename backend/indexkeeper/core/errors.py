"""
Exception taxonomy for index reconciliation.

Store failures raised by pymongo are translated once, at the store adapter,
into the classes below. The original pymongo exception is kept on
``store_error`` and chained as ``__cause__``.
"""
from typing import Optional

from pymongo.errors import ConnectionFailure, OperationFailure, PyMongoError

NAMESPACE_NOT_FOUND = 26
INDEX_OPTIONS_CONFLICT = 85
INDEX_KEY_SPECS_CONFLICT = 86
UNAUTHORIZED = 13
AUTHENTICATION_FAILED = 18

CONFLICT_CODES = {INDEX_OPTIONS_CONFLICT, INDEX_KEY_SPECS_CONFLICT}
AUTH_CODES = {UNAUTHORIZED, AUTHENTICATION_FAILED}


class IndexKeeperError(Exception):
    """Base class for all reconciliation errors."""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        index_name: Optional[str] = None,
    ):
        super().__init__(message)
        self.collection = collection
        self.index_name = index_name


class StoreError(IndexKeeperError):
    """The store rejected or failed an operation."""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        index_name: Optional[str] = None,
        store_error: Optional[BaseException] = None,
    ):
        super().__init__(message, collection=collection, index_name=index_name)
        self.store_error = store_error
        self.code = getattr(store_error, "code", None)


class TransientStoreError(StoreError):
    """Connectivity or authentication failure."""


class CollectionNotFoundError(StoreError):
    """The collection does not exist yet."""


class IndexConflictError(StoreError):
    """A desired index collides by name with an existing index of another shape."""


class IndexDropError(StoreError):
    """
    Dropping an index failed.

    Indexes dropped earlier in the same batch stay dropped; ``dropped``
    lists them in the order they were removed. When raised from a full
    collection sync, ``created`` holds the indexes built before the drop
    phase started.
    """

    def __init__(
        self,
        *args,
        dropped: Optional[list[str]] = None,
        created: Optional[list[str]] = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.dropped = list(dropped or [])
        self.created = list(created or [])

    @property
    def transient(self) -> bool:
        """True when the underlying store failure was a connectivity or auth error."""
        return isinstance(self.__cause__, TransientStoreError)


class IndexDriftError(IndexKeeperError):
    """Desired descriptors differ structurally from same-named existing indexes."""

    def __init__(self, message: str, collection: str, mismatches: list[str]):
        super().__init__(message, collection=collection)
        self.mismatches = mismatches


class BindingNotFoundError(IndexKeeperError):
    """No binding is registered for the collection."""


class ManifestError(IndexKeeperError):
    """The index manifest could not be read or is invalid."""


def translate_store_error(
    exc: PyMongoError,
    collection: str,
    index_name: Optional[str] = None,
) -> StoreError:
    """
    Map a pymongo error onto the reconciliation taxonomy.

    The store's own message is kept verbatim at the end of the new message.
    """
    where = f"collection '{collection}'"
    if index_name:
        where += f", index '{index_name}'"

    if isinstance(exc, ConnectionFailure):
        cls = TransientStoreError
    elif isinstance(exc, OperationFailure):
        code = exc.code
        code_name = (exc.details or {}).get("codeName")
        if code == NAMESPACE_NOT_FOUND or code_name == "NamespaceNotFound":
            cls = CollectionNotFoundError
        elif code in CONFLICT_CODES:
            cls = IndexConflictError
        elif code in AUTH_CODES:
            cls = TransientStoreError
        else:
            cls = StoreError
    else:
        cls = StoreError

    return cls(
        f"{where}: {exc}",
        collection=collection,
        index_name=index_name,
        store_error=exc,
    )
