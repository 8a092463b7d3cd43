"""
Index manifest loading.

A manifest declares the desired indexes of each collection:

    {
        "collections": {
            "users": [
                {"keys": [["email", 1]], "unique": true},
                {"key": {"name": 1, "age": -1}}
            ],
            "audit_log": [
                {"key": "created_at", "expireAfterSeconds": 86400}
            ]
        }
    }

Collections are registered in file order. ``keys`` and ``key`` are both
accepted for the key shape.
"""
import json
import logging
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from indexkeeper.core.errors import ManifestError
from indexkeeper.database.registry import BindingRegistry
from indexkeeper.models.binding import build_descriptors

logger = logging.getLogger(__name__)


def _normalize_entry(entry: Any) -> dict[str, Any]:
    if not isinstance(entry, dict):
        raise ManifestError(f"Index entry must be an object, got {type(entry).__name__}")
    entry = dict(entry)
    if "keys" in entry:
        if "key" in entry:
            raise ManifestError("Index entry has both 'key' and 'keys'")
        entry["key"] = entry.pop("keys")
    return entry


def parse_manifest(data: dict[str, Any], registry: BindingRegistry) -> BindingRegistry:
    """Register every collection of an already-decoded manifest."""
    collections = data.get("collections") if isinstance(data, dict) else None
    if not isinstance(collections, dict):
        raise ManifestError("Manifest must contain a 'collections' object")

    for collection, entries in collections.items():
        if entries is None:
            entries = []
        if not isinstance(entries, list):
            raise ManifestError(
                f"Indexes for '{collection}' must be a list",
                collection=collection,
            )
        try:
            descriptors = build_descriptors(_normalize_entry(e) for e in entries)
        except ManifestError as e:
            raise ManifestError(f"{collection}: {e}", collection=collection) from e
        except ValidationError as e:
            raise ManifestError(
                f"Invalid index declaration for '{collection}': {e}",
                collection=collection,
            ) from e
        registry.register(collection, descriptors)

    logger.info(f"Loaded {len(collections)} collection bindings from manifest")
    return registry


def load_manifest(
    path: Union[str, Path],
    registry: BindingRegistry | None = None,
) -> BindingRegistry:
    """Read a JSON manifest file into a (new or given) registry."""
    registry = registry if registry is not None else BindingRegistry()
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ManifestError(f"Manifest not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ManifestError(f"Manifest {path} is not valid JSON: {e}") from e
    return parse_manifest(data, registry)
