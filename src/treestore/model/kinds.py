"""
Object kinds and header framing.

Every object is encoded as ``<kind> <decimal length>\\0<payload>``.
"""

from enum import Enum

from ..errors import InvalidObjectError, ObjectCorruptedError


class ObjectKind(Enum):
    """Closed set of object kinds."""

    BLOB = 'blob'
    TREE = 'tree'
    COMMIT = 'commit'  # reserved, not supported by this store

    @property
    def is_supported(self) -> bool:
        return self is not ObjectKind.COMMIT


def encode_object(kind: ObjectKind, payload: bytes) -> bytes:
    """Prepend the ``<kind> <length>\\0`` header to a payload."""
    if not kind.is_supported:
        raise InvalidObjectError(f"unsupported object kind: {kind.value}")
    header = f"{kind.value} {len(payload)}".encode('ascii')
    return header + b'\x00' + payload


def parse_object(raw: bytes, object_hash: str = None) -> tuple[ObjectKind, bytes]:
    """
    Split encoded object bytes into kind and payload.

    Raises InvalidObjectError if the header is missing or malformed
    or names an unsupported kind.
    Raises ObjectCorruptedError if the declared length does not match
    the payload length.
    """
    header, sep, payload = raw.partition(b'\x00')
    if not sep:
        raise InvalidObjectError("missing header terminator", object_hash)
    if not header:
        raise InvalidObjectError("empty header", object_hash)

    kind_name, space, length_str = header.partition(b' ')
    try:
        kind = ObjectKind(kind_name.decode('ascii'))
    except (UnicodeDecodeError, ValueError):
        raise InvalidObjectError(f"unknown object kind in header {header!r}", object_hash)

    if not kind.is_supported:
        raise InvalidObjectError(f"unsupported object kind: {kind.value}", object_hash)

    if not space or not length_str.isdigit():
        raise InvalidObjectError(f"malformed length in header {header!r}", object_hash)

    declared = int(length_str)
    if declared != len(payload):
        raise ObjectCorruptedError(
            f"header declares {declared} bytes but payload has {len(payload)}",
            object_hash,
        )

    return kind, payload
