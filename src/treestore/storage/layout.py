"""
Filesystem layout for object storage.

Implements git's loose object layout with two-character directory sharding.
"""

from pathlib import Path

from ..errors import StorageError
from ..integrity.hashing import is_valid_hash, validate_hash

DEFAULT_HEAD = "ref: refs/heads/main\n"


class StorageLayout:
    """
    Manages filesystem layout for content-addressed objects.

    Layout:
        store_root/
            HEAD                 # symbolic ref to the default branch
            objects/
                <2 hex>/
                    <38 hex>     # zlib-compressed object
            refs/
    """

    def __init__(self, store_root: str | Path):
        """Initialize storage layout at given root."""
        self.store_root = Path(store_root).resolve()
        self.objects_dir = self.store_root / "objects"
        self.refs_dir = self.store_root / "refs"
        self.head_file = self.store_root / "HEAD"

    def initialize(self) -> None:
        """
        Initialize storage directory structure.

        Creates all necessary directories and the HEAD file.
        Idempotent - safe to call multiple times.
        """
        try:
            self.store_root.mkdir(parents=True, exist_ok=True)
            self.objects_dir.mkdir(exist_ok=True)
            self.refs_dir.mkdir(exist_ok=True)
            if not self.head_file.exists():
                self.head_file.write_text(DEFAULT_HEAD, encoding="utf-8")
        except OSError as e:
            raise StorageError("initialize", str(self.store_root), e)

    def is_initialized(self) -> bool:
        """Check whether the objects directory exists."""
        return self.objects_dir.is_dir()

    def path_for(self, obj_hash: str) -> Path:
        """
        Get filesystem path for an object by its hash.

        The first two hex characters name the shard directory,
        the remaining 38 name the file.

        Raises InvalidHashError for anything but 40 lowercase hex characters.
        """
        validate_hash(obj_hash)
        return self.objects_dir / obj_hash[:2] / obj_hash[2:]

    def ensure_object_directory(self, obj_hash: str) -> Path:
        """Ensure the shard directory for an object exists and return it."""
        prefix_dir = self.path_for(obj_hash).parent
        try:
            prefix_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError("mkdir", str(prefix_dir), e)
        return prefix_dir

    def object_exists(self, obj_hash: str) -> bool:
        """Check if an object exists in storage."""
        return self.path_for(obj_hash).is_file()

    def list_all_objects(self) -> list[str]:
        """
        List all object hashes in the store.

        Scans all prefix directories. Files that do not form a valid
        hash (temporary files, stray names) are ignored.
        """
        objects = []

        if not self.objects_dir.exists():
            return objects

        try:
            for prefix_dir in self.objects_dir.iterdir():
                if not prefix_dir.is_dir() or len(prefix_dir.name) != 2:
                    continue

                for obj_file in prefix_dir.iterdir():
                    obj_hash = prefix_dir.name + obj_file.name
                    if obj_file.is_file() and is_valid_hash(obj_hash):
                        objects.append(obj_hash)

        except OSError as e:
            raise StorageError("list_objects", str(self.objects_dir), e)

        return sorted(objects)
