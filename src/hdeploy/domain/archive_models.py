from __future__ import annotations

"""
Archive Domain Models.

Transient descriptions of filesystem nodes visited during archive
construction and of the entries they produce.
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class FileSystemNode:
    """
    Snapshot of a filesystem node taken at traversal time.

    Attributes:
        path: Absolute path of the node.
        is_directory: True for directories (symlinks are followed).
        mtime: Last modification time (epoch seconds).
        size: Byte size, 0 for directories.
    """
    path: str
    is_directory: bool
    mtime: float
    size: int = 0

    @classmethod
    def from_path(cls, path: str) -> "FileSystemNode":
        """Stat a path, following symbolic links."""
        st = os.stat(path)
        is_dir = os.path.isdir(path)
        return cls(
            path=path,
            is_directory=is_dir,
            mtime=st.st_mtime,
            size=0 if is_dir else st.st_size,
        )


@dataclass(frozen=True)
class ArchiveEntry:
    """
    A single record written to the archive.

    Attributes:
        name: Forward-slash separated name relative to the archive root.
            Directory names end with '/'.
        mtime: Timestamp stored with the entry.
        is_directory: Whether this is a content-less directory marker.
    """
    name: str
    mtime: float
    is_directory: bool = False
