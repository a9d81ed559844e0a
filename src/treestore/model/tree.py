"""
Tree object model.

Trees describe one directory level: an ordered list of entries,
each naming a child blob or tree by its raw hash.
"""

from dataclasses import dataclass
from typing import Iterable, List

from ..errors import InvalidObjectError, TruncatedObjectError
from ..integrity.hashing import HASH_SIZE, compute_hash, digest_to_hex
from .kinds import ObjectKind, encode_object, parse_object

MODE_FILE = '100644'
MODE_EXECUTABLE = '100755'
MODE_SYMLINK = '120000'
MODE_DIRECTORY = '40000'

VALID_MODES = frozenset({MODE_FILE, MODE_EXECUTABLE, MODE_SYMLINK, MODE_DIRECTORY})


def encode_name(name: str) -> bytes:
    """Encode an entry name to bytes, preserving undecodable filename bytes."""
    return name.encode('utf-8', 'surrogateescape')


def decode_name(raw: bytes) -> str:
    return raw.decode('utf-8', 'surrogateescape')


@dataclass(frozen=True)
class TreeEntry:
    """
    A (mode, name, sha) triple inside a tree.

    ``sha`` is the raw 20-byte hash of the referenced object.
    """

    mode: str
    name: str
    sha: bytes

    def __post_init__(self):
        if self.mode not in VALID_MODES:
            raise ValueError(f"Invalid entry mode: {self.mode!r}")
        if not self.name or '\x00' in self.name or '/' in self.name:
            raise ValueError(f"Invalid entry name: {self.name!r}")
        if not isinstance(self.sha, bytes) or len(self.sha) != HASH_SIZE:
            raise ValueError(f"Entry hash must be {HASH_SIZE} raw bytes")

    @property
    def hex(self) -> str:
        return digest_to_hex(self.sha)

    @property
    def is_tree(self) -> bool:
        return self.mode == MODE_DIRECTORY

    def sort_key(self) -> bytes:
        """Byte-wise ordering key used when serializing a tree."""
        return encode_name(self.name)

    def encode(self) -> bytes:
        return (
            self.mode.encode('ascii') + b' '
            + encode_name(self.name) + b'\x00'
            + self.sha
        )

    def format(self, name_only: bool = False) -> str:
        """Render as ``name`` or ``mode name hexhash``."""
        if name_only:
            return self.name
        return f"{self.mode} {self.name} {self.hex}"


def sort_entries(entries: Iterable[TreeEntry]) -> List[TreeEntry]:
    """Sort entries by name, byte-wise ascending."""
    return sorted(entries, key=TreeEntry.sort_key)


def parse_tree_body(body: bytes, object_hash: str = None) -> List[TreeEntry]:
    """
    Parse a tree payload into entries, in on-disk order.

    Each entry is ``<mode> <name>\\0<20-byte hash>``. Every slice is
    bounds-checked; a body that ends mid-entry raises TruncatedObjectError.
    """
    entries = []
    pos = 0
    end = len(body)

    while pos < end:
        nul = body.find(b'\x00', pos)
        if nul == -1:
            raise TruncatedObjectError(
                f"entry at offset {pos} has no name terminator", object_hash
            )

        mode_bytes, _, name_bytes = body[pos:nul].partition(b' ')
        if not mode_bytes or not name_bytes:
            raise InvalidObjectError(
                f"entry at offset {pos} is missing mode or name", object_hash
            )

        mode = mode_bytes.decode('ascii', 'replace')
        if mode not in VALID_MODES:
            raise InvalidObjectError(f"unknown entry mode {mode!r}", object_hash)

        sha_start = nul + 1
        sha_end = sha_start + HASH_SIZE
        if sha_end > end:
            raise TruncatedObjectError(
                f"entry at offset {pos} has {end - sha_start} of {HASH_SIZE} hash bytes",
                object_hash,
            )

        try:
            entry = TreeEntry(mode, decode_name(name_bytes), body[sha_start:sha_end])
        except ValueError as e:
            raise InvalidObjectError(str(e), object_hash)
        entries.append(entry)
        pos = sha_end

    return entries


class Tree:
    """
    Immutable tree object for one directory level.

    Entries are kept in the order given; ``encode`` always writes them
    sorted by name so equal trees hash equally.
    """

    kind = ObjectKind.TREE

    def __init__(self, entries: Iterable[TreeEntry] = ()):
        self.entries = list(entries)

    def encode_body(self) -> bytes:
        return b''.join(entry.encode() for entry in sort_entries(self.entries))

    def encode(self) -> bytes:
        """
        Encode tree to its stored byte form.

        Layout: ``tree <len>\\0`` followed by the sorted entries.
        """
        return encode_object(ObjectKind.TREE, self.encode_body())

    @classmethod
    def decode(cls, raw: bytes, object_hash: str = None) -> 'Tree':
        """
        Reconstruct tree from encoded bytes.

        Entries come back in on-disk order.
        Raises InvalidObjectError if raw is not a well-formed tree.
        """
        kind, payload = parse_object(raw, object_hash)
        if kind is not ObjectKind.TREE:
            raise InvalidObjectError(f"expected tree, got {kind.value}", object_hash)
        return cls(parse_tree_body(payload, object_hash))

    def compute_hash(self) -> str:
        """Compute content hash of this tree."""
        return compute_hash(self.encode())

    def names(self) -> List[str]:
        return [entry.name for entry in self.entries]

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"Tree(entries={len(self.entries)})"
