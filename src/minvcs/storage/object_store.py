"""
Compressed content-addressed object storage.

Objects are written zlib-compressed to a sharded path derived from their
digest and verified against that digest on every read.
"""

import contextlib
import os
import tempfile
import zlib
from pathlib import Path
from typing import Optional

from ..config import DEFAULT_COMPRESSION_LEVEL
from ..errors import (
    IntegrityError,
    ObjectNotFoundError,
    StorageError,
)
from ..integrity.hashing import compute_hash, is_valid_digest, verify_hash
from ..logging_config import get_logger
from ..model.codec import StoredObject, decode_object
from .layout import RepositoryLayout

logger = get_logger(__name__)


class ObjectStore:
    """
    Content-addressed object store with immutable objects.

    Objects are stored by the digest of their canonical encoding.
    Once written, objects never change.
    """

    def __init__(self, layout: RepositoryLayout, compression_level: int = DEFAULT_COMPRESSION_LEVEL):
        """Initialize object store with given layout."""
        self.layout = layout
        self.compression_level = compression_level

    def put_object(self, obj: StoredObject) -> str:
        """
        Encode and store an object, returning its digest.
        """
        encoded = obj.encode()
        digest = compute_hash(encoded)
        self.put(digest, encoded)
        return digest

    def put(self, digest: str, encoded: bytes) -> None:
        """
        Store a canonical encoding under its digest.

        The object is stored immutably:
        - Data is compressed and written atomically
        - If an intact object already exists, no action (idempotent)
        - A damaged existing file is replaced

        Raises IntegrityError if the bytes do not hash to the digest.
        """
        if not verify_hash(encoded, digest):
            raise IntegrityError(digest, compute_hash(encoded), "refusing to store bytes under a different digest")

        obj_path = self.layout.get_object_path(digest)
        if obj_path.exists():
            if self._is_intact(obj_path, digest):
                return
            logger.warning("replacing_damaged_object", digest=digest, path=str(obj_path))

        self.layout.ensure_object_directory(digest)

        try:
            compressed = zlib.compress(encoded, self.compression_level)
        except zlib.error as e:
            raise StorageError("compress", str(obj_path), e)

        write_atomic(obj_path, compressed)
        logger.debug("object_stored", digest=digest, size=len(encoded), stored_size=len(compressed))

    def get(self, digest: str) -> StoredObject:
        """
        Retrieve and decode an object by its digest.

        Raises ObjectNotFoundError if object doesn't exist.
        Raises IntegrityError if the stored bytes do not match the digest.
        Raises CorruptObjectError if the encoding is structurally invalid.
        """
        return decode_object(self.get_raw(digest), digest)

    def find(self, digest: str) -> Optional[StoredObject]:
        """
        Retrieve an object, or None if nothing is stored under the digest.

        Damaged or malformed objects still raise.
        """
        if not self.has(digest):
            return None
        return self.get(digest)

    def get_raw(self, digest: str) -> bytes:
        """
        Retrieve the verified canonical encoding of an object.
        """
        if not is_valid_digest(digest):
            raise ObjectNotFoundError(digest)

        obj_path = self.layout.get_object_path(digest)
        if not obj_path.is_file():
            raise ObjectNotFoundError(digest)

        compressed = self._read_object_file(obj_path)

        try:
            data = zlib.decompress(compressed)
        except zlib.error as e:
            raise IntegrityError(digest, detail=f"stored payload does not decompress: {e}")

        actual = compute_hash(data)
        if actual != digest:
            raise IntegrityError(digest, actual)

        return data

    def has(self, digest: str) -> bool:
        """Check if an object exists in the store."""
        return is_valid_digest(digest) and self.layout.object_exists(digest)

    def list_all(self) -> list[str]:
        """List all object digests in the store."""
        return self.layout.list_all_objects()

    def _is_intact(self, path: Path, digest: str) -> bool:
        try:
            data = zlib.decompress(self._read_object_file(path))
        except zlib.error:
            return False
        return verify_hash(data, digest)

    def _read_object_file(self, path: Path) -> bytes:
        """Read object file contents."""
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError("read_file", str(path), e)


def write_atomic(path: Path, data: bytes) -> None:
    """
    Replace a file's content atomically.

    Data is written to a temporary file in the same directory, flushed to
    disk and renamed over the target, so readers see either the old or the
    new content, never a partial write.
    """
    dir_path = path.parent
    fd = None
    temp_path = None
    try:
        # Write to temporary file in same directory
        fd, temp_path = tempfile.mkstemp(dir=str(dir_path), prefix='.tmp_')

        with os.fdopen(fd, 'wb') as f:
            fd = None  # Owned by the file object from here on
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        # Atomic replace (works cross-platform including Windows)
        os.replace(temp_path, path)
        temp_path = None  # Mark as moved so we don't try to clean up

    except OSError as e:
        raise StorageError("write_file", str(path), e)

    finally:
        if fd is not None:
            with contextlib.suppress(OSError):
                os.close(fd)
        if temp_path is not None:
            with contextlib.suppress(OSError):
                os.unlink(temp_path)
