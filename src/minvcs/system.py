"""
Repository discovery and initialization.
"""

from pathlib import Path
from typing import Optional

from .errors import RepositoryExistsError, RepositoryNotFoundError
from .logging_config import get_logger
from .storage.layout import METADATA_DIR_NAME, RepositoryLayout

logger = get_logger(__name__)


def find_managed_root(start) -> Optional[Path]:
    """
    Find the nearest directory at or above start holding a .minvcs directory.

    Returns None if no ancestor is managed.
    """
    current = Path(start).resolve()
    for candidate in [current, *current.parents]:
        if (candidate / METADATA_DIR_NAME).is_dir():
            return candidate
    return None


def require_managed_root(start) -> Path:
    """Like find_managed_root, but raises RepositoryNotFoundError."""
    root = find_managed_root(start)
    if root is None:
        raise RepositoryNotFoundError(Path(start).resolve())
    return root


def initialize_repository(path) -> Path:
    """
    Make path a managed root.

    Raises RepositoryExistsError if path is already inside a managed root.
    """
    existing = find_managed_root(path)
    if existing is not None:
        raise RepositoryExistsError(existing)

    layout = RepositoryLayout(Path(path))
    layout.initialize()
    logger.info("repository_initialized", root=str(layout.root))
    return layout.root
