"""
Directory tree construction.

Walks a directory below the managed root and stores every file as a blob
and every directory as a tree, bottom-up.
"""

import os
from pathlib import Path
from typing import List, Set

from .errors import (
    OutOfScopeError,
    PathNotFoundError,
    StorageError,
    UnsupportedPathTypeError,
)
from .logging_config import get_logger
from .model.blob import Blob
from .model.tree import Tree, is_portable_name
from .storage.layout import EXCLUDES_FILE_NAME, METADATA_DIR_NAME, RepositoryLayout
from .storage.object_store import ObjectStore

logger = get_logger(__name__)


class TreeBuilder:
    """
    Stores files and directories as content-addressed objects.

    Each directory may hold an exclusion file naming children to skip in
    that directory only. The repository's own metadata directory is always
    skipped at the root.
    """

    def __init__(self, layout: RepositoryLayout, object_store: ObjectStore):
        self.layout = layout
        self.object_store = object_store

    def build_tree(self, path) -> str:
        """
        Store a file or directory and return its digest.

        Args:
            path: file or directory under the managed root

        Raises:
            PathNotFoundError: path does not exist
            OutOfScopeError: path is outside the root, or inside the
                metadata directory
            UnsupportedPathTypeError: a path is neither file nor directory
        """
        path = Path(os.path.abspath(path))
        # Resolve the parent only, so the final component is never followed.
        if path.parent != path:
            path = path.parent.resolve() / path.name

        if not os.path.lexists(path):
            raise PathNotFoundError(path)

        if not self.layout.contains(path) or self.layout.metadata_dir in [path, *path.parents]:
            raise OutOfScopeError(path, self.layout.root)

        return self._store_path(path)

    def _store_path(self, path: Path) -> str:
        # Symlinks are not followed: a link to a directory could form a cycle.
        if path.is_symlink():
            raise UnsupportedPathTypeError(path)
        if path.is_dir():
            return self._store_directory(path)
        if path.is_file():
            return self._store_file(path)
        raise UnsupportedPathTypeError(path)

    def _store_file(self, path: Path) -> str:
        try:
            data = path.read_bytes()
        except OSError as e:
            raise StorageError("read_file", str(path), e)

        digest = self.object_store.put_object(Blob(data))
        logger.debug("file_stored", path=str(path), digest=digest)
        return digest

    def _store_directory(self, path: Path) -> str:
        excludes = self._read_excludes(path)
        if path == self.layout.root:
            excludes.add(METADATA_DIR_NAME)

        entries = []
        for child in self._list_children(path):
            name = child.name
            if not is_portable_name(name):
                logger.warning("unrepresentable_name_skipped", directory=str(path), name=repr(name))
                continue
            if name in excludes:
                logger.debug("path_excluded", path=str(child))
                continue
            entries.append((self._store_path(child), name))

        digest = self.object_store.put_object(Tree(entries))
        logger.debug("directory_stored", path=str(path), digest=digest, children=len(entries))
        return digest

    def _list_children(self, path: Path) -> List[Path]:
        """List a directory's children. Order does not affect the result."""
        try:
            return list(path.iterdir())
        except OSError as e:
            raise StorageError("list_directory", str(path), e)

    def _read_excludes(self, path: Path) -> Set[str]:
        """
        Read the names listed in a directory's exclusion file.

        One name per line; surrounding whitespace and a trailing slash are
        ignored, and so are blank lines.
        """
        excludes_path = path / EXCLUDES_FILE_NAME
        if not excludes_path.is_file():
            return set()

        try:
            text = excludes_path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError("read_excludes", str(excludes_path), e)

        excludes = set()
        for line in text.splitlines():
            name = line.strip().rstrip('/')
            if name:
                excludes.add(name)

        logger.debug("excludes_loaded", path=str(excludes_path), count=len(excludes))
        return excludes
