"""
Content-addressed object storage.

Stores loose objects as individually compressed files named by hash.
"""

import logging
import os
import tempfile
from pathlib import Path

from ..errors import ObjectNotFoundError, StorageError
from ..integrity.hashing import compute_hash, validate_hash
from . import codec
from .layout import StorageLayout

logger = logging.getLogger(__name__)


class ObjectStore:
    """
    Content-addressed object store with immutable objects.

    Objects are stored by their content hash.
    Once written, objects never change.
    """

    def __init__(self, layout: StorageLayout):
        """Initialize object store with given layout."""
        self.layout = layout

    def path_for(self, obj_hash: str) -> Path:
        """Get the file path of an object. See StorageLayout.path_for."""
        return self.layout.path_for(obj_hash)

    def put(self, raw: bytes) -> str:
        """
        Hash encoded object bytes, store them and return the hex hash.
        """
        obj_hash = compute_hash(raw)
        self.write(obj_hash, raw)
        return obj_hash

    def write(self, obj_hash: str, raw: bytes) -> None:
        """
        Store encoded object bytes under the given hash.

        The object is stored immutably:
        - The shard directory is created if missing
        - Object is written atomically
        - If hash already exists, no action (idempotent)

        The caller is responsible for obj_hash being the hash of raw.
        """
        obj_path = self.layout.path_for(obj_hash)

        if obj_path.exists():
            logger.debug("Object %s already in store, skipped", obj_hash[:8])
            return

        self.layout.ensure_object_directory(obj_hash)
        self._write_object_atomic(obj_path, codec.compress(raw))
        logger.debug("Stored object %s (%d bytes)", obj_hash[:8], len(raw))

    def read(self, obj_hash: str) -> bytes:
        """
        Retrieve raw object bytes (header and body) by hash.

        Raises ObjectNotFoundError if object doesn't exist.
        Raises ObjectCorruptedError if the stored data does not decompress.
        """
        validate_hash(obj_hash)
        obj_path = self.layout.path_for(obj_hash)

        try:
            data = obj_path.read_bytes()
        except FileNotFoundError:
            raise ObjectNotFoundError(obj_hash)
        except OSError as e:
            raise StorageError("read_object", str(obj_path), e)

        return codec.decompress(data, obj_hash)

    def has_object(self, obj_hash: str) -> bool:
        """Check if an object exists in the store."""
        return self.layout.object_exists(obj_hash)

    def list_all_objects(self) -> list[str]:
        """List all object hashes in the store."""
        return self.layout.list_all_objects()

    def _write_object_atomic(self, path: Path, data: bytes) -> None:
        """
        Write object file atomically.

        Uses temp file + rename for atomicity.
        """
        dir_path = path.parent
        fd = None
        temp_path = None
        try:
            # Write to temporary file in same directory
            fd, temp_path = tempfile.mkstemp(dir=str(dir_path), prefix='.tmp_')

            os.write(fd, data)
            os.close(fd)
            fd = None

            # loose objects are read-only once in place
            os.chmod(temp_path, 0o444)
            os.replace(temp_path, path)
            temp_path = None

        except Exception as e:
            if fd is not None:
                try:
                    os.close(fd)
                except OSError:
                    pass
            if temp_path is not None and os.path.exists(temp_path):
                try:
                    os.unlink(temp_path)
                except OSError:
                    pass
            if isinstance(e, OSError):
                raise StorageError("write_file", str(path), e)
            raise
