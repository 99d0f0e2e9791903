"""
Tree object model.

Trees record one directory level as a sorted list of (digest, name) entries.
"""

from typing import Iterable, List, NamedTuple, Optional

from ..errors import CorruptObjectError, MALFORMED_TREE_LINE
from ..integrity.canonical import encode_object
from ..integrity.hashing import compute_hash, is_valid_digest


class TreeEntry(NamedTuple):
    """A child of a tree. Field order gives the canonical sort key."""

    digest: str
    name: str


def is_portable_name(name: str) -> bool:
    """
    Check that a child name can be represented in a tree line.

    Names must be non-empty, encodable as UTF-8 (no surrogate escapes left
    over from undecodable filesystem bytes) and free of newlines and NULs.
    """
    if not name or '\n' in name or '\x00' in name:
        return False
    try:
        name.encode('utf-8')
    except UnicodeEncodeError:
        return False
    return True


class Tree:
    """
    Immutable tree object listing the children of a directory.

    Entries are kept sorted by (digest, name) so two trees with the same
    children encode identically regardless of enumeration order.
    """

    kind = 'directory'

    def __init__(self, entries: Iterable = ()):
        """
        Create a tree.

        Args:
            entries: (digest, name) pairs, in any order
        """
        normalized = []
        for digest, name in entries:
            if not is_valid_digest(digest):
                raise ValueError(f"Invalid child digest: {digest!r}")
            if not is_portable_name(name):
                raise ValueError(f"Invalid child name: {name!r}")
            normalized.append(TreeEntry(digest, name))
        self.entries: List[TreeEntry] = sorted(normalized)

    def encode_body(self) -> bytes:
        return b''.join(
            f"{entry.digest} {entry.name}\n".encode('utf-8')
            for entry in self.entries
        )

    def encode(self) -> bytes:
        """Full canonical encoding (header + body)."""
        return encode_object(self.kind, self.encode_body())

    @classmethod
    def from_body(cls, body: bytes, digest: Optional[str] = None) -> 'Tree':
        """
        Reconstruct tree from a decoded body.

        Raises CorruptObjectError if any line is not '<digest> <name>'.
        """
        try:
            text = body.decode('utf-8')
        except UnicodeDecodeError:
            raise CorruptObjectError(MALFORMED_TREE_LINE, "tree body is not UTF-8", digest)

        if text and not text.endswith('\n'):
            raise CorruptObjectError(MALFORMED_TREE_LINE, "tree body lacks trailing newline", digest)

        entries = []
        for line in text.split('\n')[:-1]:
            child_digest, sep, name = line.partition(' ')
            if not sep or not is_valid_digest(child_digest) or not is_portable_name(name):
                raise CorruptObjectError(MALFORMED_TREE_LINE, f"bad tree line {line!r}", digest)
            entries.append(TreeEntry(child_digest, name))

        return cls(entries)

    def compute_hash(self) -> str:
        """Compute digest of this tree."""
        return compute_hash(self.encode())

    def child_count(self) -> int:
        return len(self.entries)

    def names(self) -> List[str]:
        return [entry.name for entry in self.entries]

    def get(self, name: str) -> Optional[str]:
        """Digest of the child with the given name, or None."""
        for entry in self.entries:
            if entry.name == name:
                return entry.digest
        return None

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tree):
            return NotImplemented
        return self.entries == other.entries

    def __hash__(self) -> int:
        return hash((self.kind, tuple(self.entries)))

    def __repr__(self) -> str:
        hash_preview = self.compute_hash()[:8]
        return f"Tree(children={self.child_count()}, hash={hash_preview}...)"
