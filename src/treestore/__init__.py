from .engine import TreeStoreEngine
from .model.blob import Blob
from .model.kinds import ObjectKind
from .model.tree import Tree, TreeEntry
from .reader import ObjectReader
from .tree_builder import TreeBuilder
from .errors import (
    TreeStoreError,
    InvalidHashError,
    ObjectNotFoundError,
    ObjectCorruptedError,
    InvalidObjectError,
    TruncatedObjectError,
    StorageError,
)

__all__ = [
    'TreeStoreEngine',
    'Blob',
    'ObjectKind',
    'Tree',
    'TreeEntry',
    'ObjectReader',
    'TreeBuilder',
    'TreeStoreError',
    'InvalidHashError',
    'ObjectNotFoundError',
    'ObjectCorruptedError',
    'InvalidObjectError',
    'TruncatedObjectError',
    'StorageError',
]
