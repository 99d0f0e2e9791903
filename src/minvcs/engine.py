"""
minvcs engine.

Main entry point coordinating all components.
"""

from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from .config import MinvcsConfig
from .errors import InvalidFieldError, InvalidObjectError, MinvcsError
from .integrity.verification import verify_snapshot_recursive
from .logging_config import get_logger
from .model.codec import StoredObject
from .model.snapshot import Snapshot, is_utf8_text
from .storage.head import HeadStore
from .storage.layout import RepositoryLayout
from .storage.object_store import ObjectStore
from .tree_builder import TreeBuilder

logger = get_logger(__name__)


class MinvcsEngine:
    """
    Main engine for object storage and snapshot operations.

    This is the primary interface for:
    - Storing files and directory trees
    - Taking snapshots and advancing the head
    - Retrieving and verifying objects
    - Walking snapshot history

    The engine assumes a single writer. The head is read at the start of a
    snapshot and replaced at the end without a lock, so concurrent
    snapshots are last-write-wins and the loser's snapshot is orphaned.
    """

    def __init__(self, root, config: Optional[MinvcsConfig] = None):
        """
        Open the repository at a managed root.

        Args:
            root: directory containing the .minvcs metadata directory
            config: runtime configuration, defaults used if omitted
        """
        self.config = config or MinvcsConfig()
        self.layout = RepositoryLayout(Path(root))
        self.object_store = ObjectStore(self.layout, self.config.compression_level)
        self.head = HeadStore(self.layout)
        self.tree_builder = TreeBuilder(self.layout, self.object_store)

    @property
    def root(self) -> Path:
        return self.layout.root

    def initialize(self) -> None:
        """
        Initialize the store.

        Creates necessary directory structure.
        Safe to call multiple times (idempotent).
        """
        self.layout.initialize()

    # ========== Object Storage ==========

    def store_path(self, path) -> str:
        """
        Store a file or directory without taking a snapshot.

        Returns:
            str: digest of the stored blob or tree
        """
        return self.tree_builder.build_tree(path)

    def get_object(self, digest: str) -> StoredObject:
        """Retrieve a verified object by digest."""
        return self.object_store.get(digest)

    def find_object(self, digest: str) -> Optional[StoredObject]:
        """Like get_object, but returns None for a digest with no object."""
        return self.object_store.find(digest)

    def has_object(self, digest: str) -> bool:
        """Check if an object exists."""
        return self.object_store.has(digest)

    def list_all_objects(self) -> list[str]:
        """List all object digests in store."""
        return self.object_store.list_all()

    # ========== Snapshots ==========

    def read_head(self) -> Optional[str]:
        """Digest of the latest snapshot, or None before the first one."""
        return self.head.read()

    def snapshot(
        self,
        root_path=None,
        author: Optional[str] = None,
        comment: str = '',
    ) -> str:
        """
        Take a snapshot and make it the new head.

        Args:
            root_path: directory to record, defaults to the managed root
            author: author string, defaults to the configured author
            comment: free-text comment

        Returns:
            str: digest of the new snapshot

        Raises InvalidFieldError before anything is stored if the author
        or comment cannot be recorded. If anything fails before the head is
        replaced, the head keeps its previous value.
        """
        if author is None:
            author = self.config.author
        _check_snapshot_text(author, comment)

        parent = self.head.read()
        tree_digest = self.tree_builder.build_tree(root_path if root_path is not None else self.root)

        snapshot = Snapshot(
            tree=tree_digest,
            parents=[parent] if parent else [],
            author=author,
            comment=comment,
        )
        snapshot_digest = self.object_store.put_object(snapshot)
        self.head.write(snapshot_digest)

        logger.info("snapshot_created", digest=snapshot_digest, tree=tree_digest, parent=parent)
        return snapshot_digest

    def get_snapshot(self, digest: str) -> Snapshot:
        """
        Retrieve a snapshot by digest.

        Raises InvalidObjectError if the digest names another kind of object.
        """
        obj = self.object_store.get(digest)
        if not isinstance(obj, Snapshot):
            raise InvalidObjectError(f"expected a snapshot, found a {obj.kind}", digest)
        return obj

    def history(self, start: Optional[str] = None) -> Iterator[Tuple[str, Snapshot]]:
        """
        Walk the first-parent chain from start (default: head).

        Yields (digest, snapshot) pairs, newest first. Yields nothing if
        there is no head.
        """
        digest = start if start is not None else self.head.read()
        while digest:
            snapshot = self.get_snapshot(digest)
            yield digest, snapshot
            digest = snapshot.first_parent()

    # ========== Integrity Verification ==========

    def verify_object(self, digest: str) -> bool:
        """
        Verify an object's integrity.

        Returns True if valid.
        Raises IntegrityError or CorruptObjectError otherwise.
        """
        self.object_store.get(digest)
        return True

    def verify_snapshot(self, snapshot_hash: Optional[str] = None) -> Dict[str, object]:
        """
        Verify a snapshot, its trees and its ancestors recursively.

        Defaults to the head. Returns dict with:
            - valid: bool
            - errors: list of error messages
        """
        if snapshot_hash is None:
            snapshot_hash = self.head.read()
        if snapshot_hash is None:
            return {'valid': True, 'errors': []}

        is_valid, errors = verify_snapshot_recursive(snapshot_hash, load_func=self.object_store.get)
        if not is_valid:
            logger.warning("snapshot_verification_failed", digest=snapshot_hash, errors=len(errors))

        return {
            'valid': is_valid,
            'errors': errors,
        }

    def detect_tampering(self) -> Dict[str, object]:
        """
        Check every stored object against its digest.

        Returns dict with:
            - tampered: list of damaged object digests
            - verified: count of verified objects
            - errors: list of errors encountered
        """
        result = {
            'tampered': [],
            'verified': 0,
            'errors': [],
        }

        for digest in self.object_store.list_all():
            try:
                self.verify_object(digest)
                result['verified'] += 1
            except MinvcsError as e:
                result['tampered'].append(digest)
                result['errors'].append(f"{digest}: {e}")

        return result

    def __repr__(self) -> str:
        return f"MinvcsEngine(root={self.root}, head={self.head.read()})"


def _check_snapshot_text(author: str, comment: str) -> None:
    if '\n' in author:
        raise InvalidFieldError("author", author, "must be a single line")
    if not is_utf8_text(author):
        raise InvalidFieldError("author", author, "not encodable as UTF-8")
    if not is_utf8_text(comment):
        raise InvalidFieldError("comment", comment, "not encodable as UTF-8")
