"""
Directory to tree conversion.

Walks a directory bottom-up, storing every file as a blob and every
non-empty subdirectory as a tree, and returns the root tree entry.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from .errors import StorageError
from .integrity.hashing import compute_hash, hex_to_digest
from .model.blob import Blob
from .model.tree import MODE_DIRECTORY, MODE_FILE, Tree, TreeEntry
from .storage.object_store import ObjectStore

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDES = ('.git',)


class TreeBuilder:
    """
    Builds tree objects from directories on disk.

    Names listed in ``exclude`` are never descended into or stored,
    at any depth.
    """

    def __init__(self, object_store: ObjectStore, exclude: Iterable[str] = DEFAULT_EXCLUDES):
        self.object_store = object_store
        self.exclude = frozenset(exclude)

    def build_blob(self, path: str | Path, write: bool = True) -> TreeEntry:
        """
        Store a single file as a blob and return its tree entry.

        With write=False the hash is computed but nothing is stored.
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise StorageError("read_file", str(path), e)

        raw = Blob(data).encode()
        if write:
            obj_hash = self.object_store.put(raw)
        else:
            obj_hash = compute_hash(raw)
        return TreeEntry(MODE_FILE, path.name, hex_to_digest(obj_hash))

    def build(self, path: str | Path) -> Optional[TreeEntry]:
        """
        Store a directory as a tree and return its entry.

        Returns None if the directory holds no files once exclusions and
        empty subdirectories are dropped. Any failure aborts the whole
        build; the tree of the failing directory is never written.
        """
        path = Path(path)
        entries = []

        for child in self._list_children(path):
            if child.is_dir(follow_symlinks=False):
                entry = self.build(child.path)
                if entry is None:
                    logger.debug("Skipping empty directory %s", child.path)
                    continue
            else:
                entry = self.build_blob(child.path)
            entries.append(entry)

        if not entries:
            return None

        tree = Tree(entries)
        obj_hash = self.object_store.put(tree.encode())
        logger.debug("Built tree %s for %s (%d entries)", obj_hash[:8], path, len(entries))

        name = path.name or path.resolve().name or "."
        return TreeEntry(MODE_DIRECTORY, name, hex_to_digest(obj_hash))

    def _list_children(self, path: Path) -> list:
        try:
            with os.scandir(path) as it:
                children = [child for child in it if child.name not in self.exclude]
        except OSError as e:
            raise StorageError("list_directory", str(path), e)
        return sorted(children, key=lambda child: child.name)
