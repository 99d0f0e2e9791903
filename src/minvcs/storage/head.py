"""
Head reference storage.

The head is the single mutable pointer in a repository: the digest of the
most recent snapshot. It is re-read from disk on every access.
"""

from typing import Optional

from ..errors import CorruptObjectError, MALFORMED_HEAD, StorageError
from ..integrity.hashing import is_valid_digest
from ..logging_config import get_logger
from .layout import RepositoryLayout
from .object_store import write_atomic

logger = get_logger(__name__)


class HeadStore:
    """
    Reads and atomically replaces the head pointer file.

    There is no locking around read-then-write sequences. Two writers
    racing on the same repository end with whichever write lands last.
    """

    def __init__(self, layout: RepositoryLayout):
        self.layout = layout

    def read(self) -> Optional[str]:
        """
        Return the current head digest.

        Returns None if no snapshot has been taken yet.
        Raises CorruptObjectError if the file holds something that is not
        a digest.
        """
        head_path = self.layout.head_path

        try:
            value = head_path.read_text(encoding='ascii').strip()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError("read_head", str(head_path), e)

        if not value:
            return None

        if not is_valid_digest(value):
            raise CorruptObjectError(MALFORMED_HEAD, f"head file holds {value!r}, not a digest")

        return value

    def write(self, digest: str) -> None:
        """
        Replace the head with a new digest.

        The write goes through a temporary file and a rename, so a crash
        leaves either the previous head or the new one.
        """
        if not is_valid_digest(digest):
            raise ValueError(f"Invalid head digest: {digest!r}")

        try:
            self.layout.metadata_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError("mkdir", str(self.layout.metadata_dir), e)
        write_atomic(self.layout.head_path, (digest + '\n').encode('ascii'))
        logger.info("head_updated", digest=digest)
