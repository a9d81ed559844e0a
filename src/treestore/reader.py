"""
Object and tree reader.

Loads objects by hash and parses them into models.
"""

from typing import List

from .errors import InvalidObjectError
from .model.kinds import ObjectKind, parse_object
from .model.tree import TreeEntry, parse_tree_body
from .storage.object_store import ObjectStore


class ObjectReader:
    """Read-side view of an object store."""

    def __init__(self, object_store: ObjectStore):
        self.object_store = object_store

    def read_object(self, obj_hash: str) -> tuple[ObjectKind, bytes]:
        """Load an object and return its kind and payload."""
        raw = self.object_store.read(obj_hash)
        return parse_object(raw, obj_hash)

    def read_tree(self, obj_hash: str) -> List[TreeEntry]:
        """
        Load a tree and return its entries in on-disk order.

        Callers wanting name order must sort (see model.tree.sort_entries).
        """
        kind, payload = self.read_object(obj_hash)
        if kind is not ObjectKind.TREE:
            raise InvalidObjectError(f"expected tree, got {kind.value}", obj_hash)
        return parse_tree_body(payload, obj_hash)

    def read_blob(self, obj_hash: str) -> bytes:
        """Load a blob and return its content."""
        kind, payload = self.read_object(obj_hash)
        if kind is not ObjectKind.BLOB:
            raise InvalidObjectError(f"expected blob, got {kind.value}", obj_hash)
        return payload
