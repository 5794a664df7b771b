from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization and the directory listing, clearing and copying
primitives used to stage a deployment. Every primitive propagates OSError
to the caller; nothing here swallows failures.
"""

import logging
import os
import shutil
from typing import Iterable, List, Optional, Set

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def resolve_against(path: str, base_dir: str) -> str:
    """Resolve a possibly relative path against a base directory."""
    expanded = os.path.expandvars(os.path.expanduser(path))
    if os.path.isabs(expanded):
        return os.path.normpath(expanded)
    return os.path.normpath(os.path.join(base_dir, expanded))

# -----------------------------------------------------------------------------
# LISTING API
# -----------------------------------------------------------------------------

def list_files(root: str, extensions: Iterable[str]) -> List[str]:
    """
    Recursively list files under root whose extension is recognized.

    Matching is case-insensitive. Unlike a bare os.walk, listing failures
    of any subdirectory are raised instead of being skipped.
    Symbolic links to directories are followed, with link cycles cut.

    Args:
        root: Directory to scan.
        extensions: Accepted extensions, dot-prefixed (e.g. '.jar').

    Returns:
        List[str]: Absolute paths of matching files, sorted.

    Raises:
        OSError: If root or any nested directory cannot be listed.
    """
    wanted = {e.lower() for e in extensions}
    found: List[str] = []
    visited: Set[str] = set()

    def _raise(err: OSError) -> None:
        raise err

    for current, dirs, files in os.walk(os.path.abspath(root), onerror=_raise, followlinks=True):
        real = os.path.realpath(current)
        if real in visited:
            dirs[:] = []
            continue
        visited.add(real)
        dirs.sort()
        for name in sorted(files):
            _, ext = os.path.splitext(name)
            if ext.lower() in wanted:
                found.append(os.path.join(current, name))

    return found

# -----------------------------------------------------------------------------
# MUTATION API
# -----------------------------------------------------------------------------

def reset_directory(path: str) -> None:
    """
    Delete a directory tree if present and recreate it empty.

    Args:
        path: Directory to reset.
    """
    if os.path.lexists(path):
        logger.debug(f"Removing existing directory tree: {path}")
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.remove(path)
    os.makedirs(path)


def copy_directory_contents(source: str, target: str) -> None:
    """
    Copy everything inside source into target, preserving structure.

    Existing directories in target are merged. Timestamps are preserved.

    Args:
        source: Directory whose contents are copied.
        target: Destination directory.
    """
    shutil.copytree(source, target, dirs_exist_ok=True)


def copy_file_to_directory(source: str, target_dir: str) -> str:
    """
    Copy a single file into a directory, keeping its name and timestamps.

    Args:
        source: File to copy.
        target_dir: Destination directory (must exist).

    Returns:
        str: Path of the copy.
    """
    destination = os.path.join(target_dir, os.path.basename(source))
    shutil.copy2(source, destination)
    return destination
