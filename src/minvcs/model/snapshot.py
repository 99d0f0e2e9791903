"""
Snapshot object model.

Snapshots record the root tree of a repository at a point in time.
"""

from typing import List, Optional

from ..errors import CorruptObjectError, MALFORMED_SNAPSHOT
from ..integrity.canonical import encode_object
from ..integrity.hashing import compute_hash, is_valid_digest

AUTHOR_PREFIX = 'author:'
PARENT_PREFIX = 'parent:'


def is_utf8_text(value: str) -> bool:
    """
    Check that a string survives UTF-8 encoding.

    Strings decoded from undecodable argv or environment bytes carry lone
    surrogates and fail this check.
    """
    try:
        value.encode('utf-8')
    except UnicodeEncodeError:
        return False
    return True


class Snapshot:
    """
    Immutable snapshot object.

    A snapshot references:
    - Exactly one tree digest (the repository root)
    - Zero or more parent snapshot digests, in order
    - An author and a free-text comment

    Snapshots form a DAG (directed acyclic graph) through parent references.
    Body layout::

        <tree-digest>\\n
        author:<author>\\n
        parent:<parent-digest>\\n   (one per parent)
        \\n
        <comment>
    """

    kind = 'snapshot'

    def __init__(
        self,
        tree: str,
        parents: Optional[List[str]] = None,
        author: str = '',
        comment: str = '',
    ):
        """
        Create a snapshot.

        Args:
            tree: digest of the root tree
            parents: parent snapshot digests
            author: author string, single line
            comment: free text, may span several lines
        """
        if not is_valid_digest(tree):
            raise ValueError(f"Invalid tree digest: {tree!r}")
        for parent in parents or []:
            if not is_valid_digest(parent):
                raise ValueError(f"Invalid parent digest: {parent!r}")
        if '\n' in author:
            raise ValueError("Author must not contain a newline")
        for field, value in (('author', author), ('comment', comment)):
            if not is_utf8_text(value):
                raise ValueError(f"Snapshot {field} is not encodable as UTF-8: {value!r}")

        self.tree = tree
        self.parents = list(parents or [])  # Copy to ensure immutability
        self.author = author
        self.comment = comment

    def encode_body(self) -> bytes:
        lines = [self.tree, AUTHOR_PREFIX + self.author]
        lines.extend(PARENT_PREFIX + parent for parent in self.parents)
        header = ''.join(line + '\n' for line in lines)
        return (header + '\n' + self.comment).encode('utf-8')

    def encode(self) -> bytes:
        """Full canonical encoding (header + body)."""
        return encode_object(self.kind, self.encode_body())

    @classmethod
    def from_body(cls, body: bytes, digest: Optional[str] = None) -> 'Snapshot':
        """
        Reconstruct snapshot from a decoded body.

        Raises CorruptObjectError if the body does not follow the layout.
        """
        try:
            text = body.decode('utf-8')
        except UnicodeDecodeError:
            raise CorruptObjectError(MALFORMED_SNAPSHOT, "snapshot body is not UTF-8", digest)

        head, sep, comment = text.partition('\n\n')
        if not sep:
            raise CorruptObjectError(MALFORMED_SNAPSHOT, "missing blank line before comment", digest)

        lines = head.split('\n')
        if len(lines) < 2:
            raise CorruptObjectError(MALFORMED_SNAPSHOT, "missing author line", digest)

        tree = lines[0]
        if not is_valid_digest(tree):
            raise CorruptObjectError(MALFORMED_SNAPSHOT, f"invalid tree digest {tree!r}", digest)

        if not lines[1].startswith(AUTHOR_PREFIX):
            raise CorruptObjectError(MALFORMED_SNAPSHOT, f"expected author line, got {lines[1]!r}", digest)
        author = lines[1][len(AUTHOR_PREFIX):]

        parents = []
        for line in lines[2:]:
            parent = line[len(PARENT_PREFIX):]
            if not line.startswith(PARENT_PREFIX) or not is_valid_digest(parent):
                raise CorruptObjectError(MALFORMED_SNAPSHOT, f"bad parent line {line!r}", digest)
            parents.append(parent)

        return cls(tree, parents, author, comment)

    def compute_hash(self) -> str:
        """Compute digest of this snapshot."""
        return compute_hash(self.encode())

    def first_parent(self) -> Optional[str]:
        return self.parents[0] if self.parents else None

    def __eq__(self, other) -> bool:
        if not isinstance(other, Snapshot):
            return NotImplemented
        return (
            self.tree == other.tree
            and self.parents == other.parents
            and self.author == other.author
            and self.comment == other.comment
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.tree, tuple(self.parents), self.author, self.comment))

    def __repr__(self) -> str:
        hash_preview = self.compute_hash()[:8]
        parent_preview = self.parents[0][:8] + "..." if self.parents else "None"
        return f"Snapshot(tree={self.tree[:8]}..., parent={parent_preview}, hash={hash_preview}...)"
