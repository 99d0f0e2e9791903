"""
Integrity verification for snapshots and their history.

Provides recursive verification that reports every problem found instead
of stopping at the first one.
"""

from typing import Callable, List, Optional, Set, Tuple

from ..errors import MinvcsError
from ..model.blob import Blob
from ..model.snapshot import Snapshot
from ..model.tree import Tree


def verify_snapshot_recursive(
    snapshot_hash: str,
    load_func: Callable,
    visited: Optional[Set[str]] = None,
) -> Tuple[bool, List[str]]:
    """
    Recursively verify a snapshot, its tree and all of its ancestors.

    load_func: callable that loads a verified object by digest and raises
        a MinvcsError if it is missing, damaged or malformed
    visited: set of already-verified digests, shared across the walk

    Returns (is_valid, errors) where errors is list of error messages.
    """
    if visited is None:
        visited = set()

    errors: List[str] = []
    pending = [snapshot_hash]

    # History chains can be arbitrarily long, so no recursion here.
    while pending:
        current = pending.pop()
        if current in visited:
            continue
        visited.add(current)

        snapshot = _load(current, load_func, Snapshot, errors)
        if snapshot is None:
            continue

        _verify_tree(snapshot.tree, load_func, visited, errors)
        pending.extend(snapshot.parents)

    return len(errors) == 0, errors


def _verify_tree(tree_hash: str, load_func: Callable, visited: Set[str], errors: List[str]) -> None:
    if tree_hash in visited:
        return
    visited.add(tree_hash)

    tree = _load(tree_hash, load_func, Tree, errors)
    if tree is None:
        return

    _verify_entries(tree_hash, tree, load_func, visited, errors)


def _verify_entries(tree_hash: str, tree: Tree, load_func: Callable, visited: Set[str], errors: List[str]) -> None:
    for entry in tree.entries:
        if entry.digest in visited:
            continue
        visited.add(entry.digest)

        try:
            child = load_func(entry.digest)
        except MinvcsError as e:
            errors.append(f"{entry.name} ({entry.digest}) in tree {tree_hash}: {e}")
            continue

        if isinstance(child, Tree):
            _verify_entries(entry.digest, child, load_func, visited, errors)
        elif not isinstance(child, Blob):
            errors.append(f"{entry.name} ({entry.digest}) in tree {tree_hash} is a {child.kind}, not a file or directory")


def _load(digest: str, load_func: Callable, expected_cls, errors: List[str]):
    try:
        obj = load_func(digest)
    except MinvcsError as e:
        errors.append(f"Failed to load {digest}: {e}")
        return None

    if not isinstance(obj, expected_cls):
        errors.append(f"Object {digest} is a {obj.kind}, expected {expected_cls.kind}")
        return None

    return obj
