"""
Blob object model.

Blobs store raw file content content-addressed by digest.
"""

from typing import Optional

from ..integrity.canonical import encode_object
from ..integrity.hashing import compute_hash


class Blob:
    """
    Immutable blob object containing raw file bytes.

    Blobs are leaf objects - they contain no references.
    """

    kind = 'file'

    def __init__(self, data: bytes):
        """
        Create a blob from raw bytes.

        Args:
            data: raw file content
        """
        self.data = bytes(data)

    def encode_body(self) -> bytes:
        """Blob body is the raw content, unchanged."""
        return self.data

    def encode(self) -> bytes:
        """Full canonical encoding (header + body)."""
        return encode_object(self.kind, self.encode_body())

    @classmethod
    def from_body(cls, body: bytes, digest: Optional[str] = None) -> 'Blob':
        """Reconstruct blob from a decoded body. Any bytes are valid."""
        return cls(body)

    def compute_hash(self) -> str:
        """Compute digest of this blob."""
        return compute_hash(self.encode())

    def size(self) -> int:
        """Get size of blob data in bytes."""
        return len(self.data)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Blob):
            return NotImplemented
        return self.data == other.data

    def __hash__(self) -> int:
        return hash((self.kind, self.data))

    def __repr__(self) -> str:
        hash_preview = self.compute_hash()[:8]
        return f"Blob(size={self.size()}, hash={hash_preview}...)"
