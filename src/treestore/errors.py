"""
Error types for object store operations.

All errors are explicit and never silent.
"""


class TreeStoreError(Exception):
    """Base exception for all object store errors."""
    pass


class InvalidHashError(TreeStoreError):
    """Raised when a hash string is not 40 lowercase hex characters."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid object hash: {value!r}")


class ObjectNotFoundError(TreeStoreError):
    """Raised when a requested object does not exist."""

    def __init__(self, object_hash: str):
        self.object_hash = object_hash
        super().__init__(f"Object not found: {object_hash}")


class ObjectCorruptedError(TreeStoreError):
    """Raised when stored bytes cannot be decompressed or fail their checks."""

    def __init__(self, reason: str, object_hash: str = None):
        self.reason = reason
        self.object_hash = object_hash
        msg = f"Object corrupted: {reason}"
        if object_hash:
            msg += f" (hash: {object_hash})"
        super().__init__(msg)


class InvalidObjectError(TreeStoreError):
    """Raised when an object's header or entry framing is malformed."""

    def __init__(self, reason: str, object_hash: str = None):
        self.reason = reason
        self.object_hash = object_hash
        msg = f"Invalid object: {reason}"
        if object_hash:
            msg += f" (hash: {object_hash})"
        super().__init__(msg)


class TruncatedObjectError(InvalidObjectError):
    """Raised when a tree body ends in the middle of an entry."""

    def __init__(self, reason: str, object_hash: str = None):
        super().__init__(f"truncated ({reason})", object_hash)


class StorageError(TreeStoreError):
    """Raised when filesystem operations fail."""

    def __init__(self, operation: str, path: str, cause: Exception = None):
        self.operation = operation
        self.path = path
        self.cause = cause
        msg = f"Storage error during {operation}: {path}"
        if cause:
            msg += f"\nCause: {cause}"
        super().__init__(msg)
