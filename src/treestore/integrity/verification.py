"""
Integrity verification for stored objects and trees.

Provides tamper detection and recursive verification.
"""

from typing import Callable, List, Set, Tuple

from ..errors import ObjectCorruptedError, TreeStoreError
from ..model.kinds import ObjectKind, parse_object
from ..model.tree import parse_tree_body
from .hashing import compute_hash


def verify_object_integrity(raw: bytes, expected_hash: str) -> None:
    """
    Verify that an object's encoded bytes match its hash.

    Raises ObjectCorruptedError if mismatch detected.
    """
    actual_hash = compute_hash(raw)
    if actual_hash != expected_hash:
        raise ObjectCorruptedError(
            f"content hashes to {actual_hash}", expected_hash
        )


def verify_tree_recursive(
    tree_hash: str,
    load_func: Callable[[str], bytes],
    exists_func: Callable[[str], bool],
    visited: Set[str] = None
) -> Tuple[bool, List[str]]:
    """
    Recursively verify a tree and every object it references.

    load_func: callable returning the raw (decompressed) bytes of an object
    exists_func: callable that checks if object exists by hash
    visited: set of already-verified hashes, shared across the recursion

    Returns (is_valid, errors) where errors is list of error messages.
    """
    if visited is None:
        visited = set()

    errors = []

    if tree_hash in visited:
        return True, errors
    visited.add(tree_hash)

    try:
        raw = load_func(tree_hash)
        verify_object_integrity(raw, tree_hash)
        kind, payload = parse_object(raw, tree_hash)
        if kind is not ObjectKind.TREE:
            errors.append(f"Object {tree_hash} is not a tree")
            return False, errors
        entries = parse_tree_body(payload, tree_hash)
    except TreeStoreError as e:
        errors.append(f"Failed to verify tree {tree_hash}: {e}")
        return False, errors

    for entry in entries:
        ref_hash = entry.hex

        if not exists_func(ref_hash):
            errors.append(
                f"Tree {tree_hash} references missing object {ref_hash} ({entry.name})"
            )
            continue

        if entry.is_tree:
            _, sub_errors = verify_tree_recursive(ref_hash, load_func, exists_func, visited)
            errors.extend(sub_errors)
            continue

        if ref_hash in visited:
            continue
        visited.add(ref_hash)

        try:
            raw = load_func(ref_hash)
            verify_object_integrity(raw, ref_hash)
            kind, _ = parse_object(raw, ref_hash)
            if kind is not ObjectKind.BLOB:
                errors.append(f"Entry {entry.name} in {tree_hash} is not a blob")
        except TreeStoreError as e:
            errors.append(f"Failed to verify object {ref_hash}: {e}")

    return len(errors) == 0, errors
