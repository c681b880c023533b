"""
Path security validation utilities for Zero Music.

Provides pure functions to validate file paths are within the music root,
preventing directory traversal attacks and symlink escapes.
"""

from pathlib import Path
from typing import Optional


def is_path_within_root(file_path: Path, root: Path) -> bool:
    """Pure function - validates path is within the music root.

    Uses Path.resolve() to handle symlinks and relative paths, then checks if the
    resolved path is a child of the resolved root directory. Comparison is done
    per path component, so "/music2/x.mp3" is not inside "/music".

    Args:
        file_path: The file path to validate
        root: Allowed root directory

    Returns:
        True if path is within root, False otherwise
    """
    try:
        resolved_path = file_path.resolve()
        resolved_root = root.resolve()
    except (OSError, RuntimeError):
        # Path.resolve() can raise OSError for invalid paths or RuntimeError for recursion
        return False

    try:
        resolved_path.relative_to(resolved_root)
        return True
    except ValueError:
        # relative_to raises ValueError if path is not a subpath
        return False


def resolve_within_root(file_path: Path, root: Path) -> Optional[Path]:
    """Pure function - returns the canonical path if it stays inside root.

    Args:
        file_path: The file path to validate
        root: Allowed root directory

    Returns:
        The resolved Path if within root, None otherwise
    """
    if not is_path_within_root(file_path, root):
        return None
    return file_path.resolve()
