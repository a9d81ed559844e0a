"""
Blob object model.

Blobs store raw file content.
"""

from ..errors import InvalidObjectError
from ..integrity.hashing import compute_hash
from .kinds import ObjectKind, encode_object, parse_object


class Blob:
    """
    Immutable blob object containing raw data.

    Blobs are leaf objects - they contain no references.
    """

    kind = ObjectKind.BLOB

    def __init__(self, data: bytes):
        self.data = bytes(data)

    def encode(self) -> bytes:
        """
        Encode blob to its stored byte form.

        Layout: ``blob <len>\\0<data>``.
        """
        return encode_object(ObjectKind.BLOB, self.data)

    @classmethod
    def decode(cls, raw: bytes, object_hash: str = None) -> 'Blob':
        """
        Reconstruct blob from encoded bytes.

        Raises InvalidObjectError if raw is not a blob.
        """
        kind, payload = parse_object(raw, object_hash)
        if kind is not ObjectKind.BLOB:
            raise InvalidObjectError(f"expected blob, got {kind.value}", object_hash)
        return cls(payload)

    def compute_hash(self) -> str:
        """Compute content hash of this blob."""
        return compute_hash(self.encode())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Blob):
            return NotImplemented
        return self.data == other.data

    def __hash__(self) -> int:
        return hash(self.data)

    def __repr__(self) -> str:
        return f"Blob(size={len(self.data)})"
