"""
Tree Store Engine.

Main entry point coordinating all components.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from .errors import TreeStoreError
from .integrity.verification import verify_object_integrity, verify_tree_recursive
from .model.blob import Blob
from .model.kinds import ObjectKind, parse_object
from .model.tree import TreeEntry, sort_entries
from .reader import ObjectReader
from .storage.layout import StorageLayout
from .storage.object_store import ObjectStore
from .tree_builder import DEFAULT_EXCLUDES, TreeBuilder

logger = logging.getLogger(__name__)


class TreeStoreEngine:
    """
    Main engine for object store operations.

    This is the primary interface for:
    - Storing file content as blobs
    - Snapshotting directories as trees
    - Retrieving and listing objects
    - Verifying stored objects
    """

    def __init__(self, store_path: str | Path):
        """
        Initialize object store at given path.

        Args:
            store_path: the store root (the directory holding ``objects/``)
        """
        self.store_path = Path(store_path).resolve()
        self.layout = StorageLayout(self.store_path)
        self.object_store = ObjectStore(self.layout)
        self.reader = ObjectReader(self.object_store)

        excludes = set(DEFAULT_EXCLUDES)
        excludes.add(self.store_path.name)
        self.builder = TreeBuilder(self.object_store, exclude=excludes)

    def initialize(self) -> None:
        """
        Initialize the store.

        Creates necessary directory structure.
        Safe to call multiple times (idempotent).
        """
        self.layout.initialize()
        logger.debug("Initialized store at %s", self.store_path)

    def is_initialized(self) -> bool:
        return self.layout.is_initialized()

    # ========== Writing ==========

    def put_blob(self, data: bytes) -> str:
        """Store a blob and return its hash."""
        return self.object_store.put(Blob(data).encode())

    def hash_object(self, path: str | Path, write: bool = True) -> str:
        """
        Hash a file as a blob, storing it unless write is False.

        Returns the hex hash.
        """
        return self.builder.build_blob(path, write=write).hex

    def write_tree(self, directory: str | Path = '.') -> Optional[str]:
        """
        Snapshot a directory and return the root tree hash.

        Returns None if there is nothing to snapshot.
        """
        entry = self.builder.build(directory)
        if entry is None:
            logger.debug("Nothing to snapshot in %s", directory)
            return None
        return entry.hex

    # ========== Reading ==========

    def read_object(self, obj_hash: str) -> tuple[ObjectKind, bytes]:
        """Load an object and return its kind and payload."""
        return self.reader.read_object(obj_hash)

    def read_blob(self, obj_hash: str) -> bytes:
        """Retrieve blob content by hash."""
        return self.reader.read_blob(obj_hash)

    def read_tree(self, obj_hash: str) -> List[TreeEntry]:
        """Retrieve tree entries by hash, in stored order."""
        return self.reader.read_tree(obj_hash)

    def cat_file(self, obj_hash: str) -> bytes:
        """Return the payload of any object, exactly as stored."""
        _, payload = self.reader.read_object(obj_hash)
        return payload

    def ls_tree(self, obj_hash: str, name_only: bool = False) -> List[str]:
        """
        List a tree as display lines sorted by name.

        Each line is ``name`` or ``mode name hexhash``.
        """
        entries = sort_entries(self.reader.read_tree(obj_hash))
        return [entry.format(name_only=name_only) for entry in entries]

    def has_object(self, obj_hash: str) -> bool:
        """Check if an object exists."""
        return self.object_store.has_object(obj_hash)

    def list_all_objects(self) -> List[str]:
        """List all object hashes in store."""
        return self.object_store.list_all_objects()

    # ========== Integrity Verification ==========

    def verify_object(self, obj_hash: str) -> bool:
        """
        Verify an object's integrity.

        Returns True if valid.
        Raises ObjectCorruptedError if corrupted.
        """
        raw = self.object_store.read(obj_hash)
        verify_object_integrity(raw, obj_hash)
        parse_object(raw, obj_hash)
        return True

    def verify_tree(self, tree_hash: str) -> Dict[str, object]:
        """
        Verify a tree and everything it references.

        Returns dict with:
            - valid: bool
            - errors: list of error messages
        """
        is_valid, errors = verify_tree_recursive(
            tree_hash,
            load_func=self.object_store.read,
            exists_func=self.object_store.has_object,
        )
        return {
            'valid': is_valid,
            'errors': errors,
        }

    def detect_tampering(self) -> Dict[str, object]:
        """
        Detect tampering across all stored objects.

        Verifies that all objects' content matches their hashes.

        Returns dict with:
            - tampered: list of tampered object hashes
            - verified: count of verified objects
            - errors: list of errors encountered
        """
        result = {
            'tampered': [],
            'verified': 0,
            'errors': [],
        }

        for obj_hash in self.object_store.list_all_objects():
            try:
                self.verify_object(obj_hash)
                result['verified'] += 1
            except TreeStoreError as e:
                result['tampered'].append(obj_hash)
                result['errors'].append(f"{obj_hash}: {e}")

        return result

    def __repr__(self) -> str:
        return f"TreeStoreEngine(path={self.store_path})"
