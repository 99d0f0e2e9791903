"""
minvcs - Minimal content-addressed object store for version control.

This package provides:
- Canonical encoding and BLAKE3 digests for blobs, trees and snapshots
- Compressed, integrity-checked object storage
- Directory tree construction with per-directory exclusions
- Snapshots chained through a single head pointer

Main entry point:
    MinvcsEngine - primary interface for all operations

Example usage:
    from minvcs import MinvcsEngine, initialize_repository

    root = initialize_repository('/path/to/project')
    engine = MinvcsEngine(root)

    digest = engine.snapshot(author='alice', comment='first')
    snapshot = engine.get_snapshot(digest)
"""

from .config import MinvcsConfig
from .engine import MinvcsEngine
from .errors import (
    MinvcsError,
    PathNotFoundError,
    OutOfScopeError,
    UnsupportedPathTypeError,
    StorageError,
    ObjectNotFoundError,
    IntegrityError,
    CorruptObjectError,
    InvalidObjectError,
    InvalidFieldError,
    RepositoryNotFoundError,
    RepositoryExistsError,
    ConfigError,
)
from .integrity.hashing import compute_hash
from .model.blob import Blob
from .model.codec import decode_object
from .model.snapshot import Snapshot
from .model.tree import Tree, TreeEntry
from .system import find_managed_root, initialize_repository, require_managed_root

__version__ = '0.1.0'

__all__ = [
    # Main engine
    'MinvcsEngine',
    'MinvcsConfig',

    # Repository discovery
    'find_managed_root',
    'initialize_repository',
    'require_managed_root',

    # Encoding
    'compute_hash',
    'decode_object',

    # Errors
    'MinvcsError',
    'PathNotFoundError',
    'OutOfScopeError',
    'UnsupportedPathTypeError',
    'StorageError',
    'ObjectNotFoundError',
    'IntegrityError',
    'CorruptObjectError',
    'InvalidObjectError',
    'InvalidFieldError',
    'RepositoryNotFoundError',
    'RepositoryExistsError',
    'ConfigError',

    # Models
    'Blob',
    'Tree',
    'TreeEntry',
    'Snapshot',
]
