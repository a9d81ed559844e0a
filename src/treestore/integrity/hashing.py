"""
Content-addressed hashing using SHA-1.

Object names are the SHA-1 digest of the full encoded object
(header and body), matching git's loose object naming.
"""

import hashlib
import string

from ..errors import InvalidHashError

HASH_SIZE = 20
HEX_HASH_LENGTH = HASH_SIZE * 2

_HEX_DIGITS = frozenset(string.hexdigits.lower())


def compute_hash(data: bytes) -> str:
    """
    Compute hash of raw bytes.

    Returns hex-encoded hash string.
    """
    return hashlib.sha1(data).hexdigest()


def is_valid_hash(value: str) -> bool:
    """Check that value is exactly 40 lowercase hex characters."""
    return (
        isinstance(value, str)
        and len(value) == HEX_HASH_LENGTH
        and all(c in _HEX_DIGITS for c in value)
    )


def validate_hash(value: str) -> str:
    """
    Return value unchanged if it is a valid hex hash.

    Raises InvalidHashError otherwise.
    """
    if not is_valid_hash(value):
        raise InvalidHashError(value)
    return value


def digest_to_hex(digest: bytes) -> str:
    """Convert a raw 20-byte digest to its hex form."""
    if len(digest) != HASH_SIZE:
        raise ValueError(f"Digest must be {HASH_SIZE} bytes, got {len(digest)}")
    return digest.hex()


def hex_to_digest(hash_str: str) -> bytes:
    """Convert a 40-character hex hash to its raw 20-byte form."""
    return bytes.fromhex(validate_hash(hash_str))
