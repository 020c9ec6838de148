"""OS and path utilities for output-tree file system operations."""

import os
from pathlib import Path
from typing import Optional, Union

from .logging import get_logger

logger = get_logger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class PathError(Exception):
    """Exception for path-related errors."""
    pass


def join_output_path(root: Optional[PathLike], relative: str) -> Path:
    """Join a site-relative path onto an output root.

    Site-relative paths such as ``/images/ditaa/x.png`` are rooted at the
    output directory, never at the file system root.

    Args:
        root: Output root directory, or None to keep the path relative
        relative: Site-relative path (leading slashes are ignored)

    Returns:
        Joined path
    """
    clean = str(relative).lstrip("/").lstrip("\\")
    if root is None:
        return Path(clean)
    return Path(root) / clean


def ensure_parent_directory(file_path: PathLike) -> Path:
    """Ensure the parent directory of ``file_path`` exists.

    Args:
        file_path: File whose parent directory tree should exist

    Returns:
        The parent directory

    Raises:
        PathError: If the directory cannot be created
    """
    parent = Path(file_path).parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PathError(f"Failed to create directory {parent}: {e}") from e

    logger.debug("Directory ensured", path=str(parent))
    return parent


def modified_time(file_path: PathLike) -> float:
    """Return the modification time of a file in seconds since the epoch.

    Raises:
        PathError: If the file cannot be stat'ed
    """
    try:
        return os.stat(file_path).st_mtime
    except OSError as e:
        raise PathError(f"Cannot stat {file_path}: {e}") from e
