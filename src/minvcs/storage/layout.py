"""
Filesystem layout for a managed repository.

Implements content-addressed storage with directory sharding.
"""

from pathlib import Path

from ..errors import StorageError
from ..integrity.hashing import get_hash_prefix

METADATA_DIR_NAME = '.minvcs'
EXCLUDES_FILE_NAME = '.minvcs_excludes'
HEAD_FILE_NAME = 'head'
OBJECTS_DIR_NAME = 'objects'
SHARD_PREFIX_LENGTH = 2


class RepositoryLayout:
    """
    Manages the on-disk layout beneath a managed root.

    Layout:
        root/
            .minvcs/
                objects/
                    <prefix>/
                        <rest of digest>   # one compressed object
                head                       # current head digest
    """

    def __init__(self, root: Path):
        """Initialize layout at the given managed root."""
        self.root = Path(root).resolve()
        self.metadata_dir = self.root / METADATA_DIR_NAME
        self.objects_dir = self.metadata_dir / OBJECTS_DIR_NAME
        self.head_path = self.metadata_dir / HEAD_FILE_NAME

    def initialize(self) -> None:
        """
        Create the metadata directory structure.

        Idempotent - safe to call multiple times.
        """
        try:
            self.metadata_dir.mkdir(parents=True, exist_ok=True)
            self.objects_dir.mkdir(exist_ok=True)
        except OSError as e:
            raise StorageError("initialize", str(self.metadata_dir), e)

    def get_object_path(self, digest: str) -> Path:
        """
        Get filesystem path for an object by its digest.

        The first two characters name the shard directory and the
        remainder is the file name.
        """
        prefix = get_hash_prefix(digest, SHARD_PREFIX_LENGTH)
        return self.objects_dir / prefix / digest[SHARD_PREFIX_LENGTH:]

    def ensure_object_directory(self, digest: str) -> Path:
        """Ensure the shard directory for an object exists."""
        prefix_dir = self.get_object_path(digest).parent
        try:
            prefix_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError("mkdir", str(prefix_dir), e)
        return prefix_dir

    def list_all_objects(self) -> list[str]:
        """
        List all object digests in the store.

        Scans all prefix directories; temporary files are skipped.
        """
        objects = []

        if not self.objects_dir.exists():
            return objects

        try:
            for prefix_dir in self.objects_dir.iterdir():
                if not prefix_dir.is_dir():
                    continue

                for obj_file in prefix_dir.iterdir():
                    if obj_file.is_file() and not obj_file.name.startswith('.'):
                        objects.append(prefix_dir.name + obj_file.name)

        except OSError as e:
            raise StorageError("list_objects", str(self.objects_dir), e)

        return sorted(objects)

    def object_exists(self, digest: str) -> bool:
        """Check if an object exists in storage."""
        return self.get_object_path(digest).is_file()

    def contains(self, path: Path) -> bool:
        """Check whether an absolute path lies under the managed root."""
        return Path(path) == self.root or self.root in Path(path).parents
