"""
Decoding of canonical encodings into object models.
"""

from typing import Optional, Union

from ..errors import CorruptObjectError, UNKNOWN_KIND
from ..integrity.canonical import split_object
from .blob import Blob
from .snapshot import Snapshot
from .tree import Tree

StoredObject = Union[Blob, Tree, Snapshot]

OBJECT_KINDS = {
    Blob.kind: Blob,
    Tree.kind: Tree,
    Snapshot.kind: Snapshot,
}


def decode_object(data: bytes, digest: Optional[str] = None) -> StoredObject:
    """
    Decode a full canonical encoding.

    Raises CorruptObjectError for structural problems, including an
    unknown kind in the header.
    """
    kind, body = split_object(data, digest)
    object_cls = OBJECT_KINDS.get(kind)
    if object_cls is None:
        raise CorruptObjectError(UNKNOWN_KIND, f"unknown object kind {kind!r}", digest)
    return object_cls.from_body(body, digest)
