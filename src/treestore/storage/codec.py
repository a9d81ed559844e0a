"""
Compression codec for loose objects.

Objects are stored zlib-compressed, as git does.
"""

import zlib

from ..errors import ObjectCorruptedError


def compress(data: bytes) -> bytes:
    """Compress raw object bytes."""
    return zlib.compress(data)


def decompress(data: bytes, object_hash: str = None) -> bytes:
    """
    Decompress stored object bytes.

    Raises ObjectCorruptedError if data is not a complete zlib stream.
    """
    try:
        return zlib.decompress(data)
    except zlib.error as e:
        raise ObjectCorruptedError(f"decompression failed: {e}", object_hash)
