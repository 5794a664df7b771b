from __future__ import annotations

"""
Directory-to-Archive Serializer.

Packs a directory tree into a single JAR/ZIP stream. Entry names are the
forward-slash relative paths of every node under the declared root, with
directories emitted before their children and file contents streamed
through a fixed-size buffer so arbitrarily large dependencies never have
to fit in memory.
"""

import logging
import os
import shutil
import time
import zipfile
from typing import BinaryIO, List, Tuple

from hdeploy.domain.archive_models import ArchiveEntry, FileSystemNode
from hdeploy.domain.constants import (
    MANIFEST_ENTRY_NAME,
    MANIFEST_VERSION,
    STREAM_BUFFER_SIZE,
)

logger = logging.getLogger(__name__)

# DOS timestamps cannot represent dates outside this range
_MIN_DATE_TIME: Tuple[int, int, int, int, int, int] = (1980, 1, 1, 0, 0, 0)
_MAX_DATE_TIME: Tuple[int, int, int, int, int, int] = (2107, 12, 31, 23, 59, 58)

_DIR_ATTRS = (0o40755 << 16) | 0x10
_FILE_ATTRS = 0o100644 << 16


# -----------------------------------------------------------------------------
# BUILDER
# -----------------------------------------------------------------------------

class ArchiveBuilder:
    """
    Recursive serializer writing a directory tree into a JAR-compatible ZIP.

    The first entry is always a global manifest declaring only its version.
    A manifest file already present in the tree is skipped with a warning.
    An instance holds no per-build state, so it may be reused sequentially.
    """

    def __init__(
            self,
            buffer_size: int = STREAM_BUFFER_SIZE,
            compression: int = zipfile.ZIP_DEFLATED,
    ) -> None:
        """
        Args:
            buffer_size: Size of the read/write buffer used for file content.
            compression: zipfile compression constant for file entries.
        """
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")
        self.buffer_size = buffer_size
        self.compression = compression

    def build_archive(self, root_dir: str, sink: BinaryIO) -> List[ArchiveEntry]:
        """
        Serialize the tree under root_dir into the given binary sink.

        Any I/O failure aborts the build immediately. Entries already written
        are not rolled back, so the sink must then be considered unusable.

        Args:
            root_dir: Existing directory whose contents become the archive.
            sink: Writable binary stream (need not be seekable).

        Returns:
            List[ArchiveEntry]: Entries written, manifest first.

        Raises:
            FileNotFoundError: If root_dir does not exist.
            NotADirectoryError: If root_dir is not a directory.
            OSError: On any read or write failure.
        """
        if not os.path.exists(root_dir):
            raise FileNotFoundError(f"Archive root does not exist: {root_dir}")
        if not os.path.isdir(root_dir):
            raise NotADirectoryError(f"Archive root is not a directory: {root_dir}")

        root = os.path.abspath(root_dir)
        entries: List[ArchiveEntry] = []

        with zipfile.ZipFile(sink, mode="w", compression=self.compression) as target:
            entries.append(self._write_manifest(target))
            for name in sorted(os.listdir(root)):
                self._add(root, os.path.join(root, name), target, entries)

        logger.debug(f"Archived {len(entries)} entries from {root}")
        return entries

    def pack_to_file(self, root_dir: str, archive_path: str) -> List[ArchiveEntry]:
        """
        Serialize the tree under root_dir into a file, replacing it if present.

        Args:
            root_dir: Existing directory whose contents become the archive.
            archive_path: Destination archive file.

        Returns:
            List[ArchiveEntry]: Entries written, manifest first.
        """
        with open(archive_path, "wb") as fos:
            return self.build_archive(root_dir, fos)

    # -------------------------------------------------------------------------
    # Recursive traversal
    # -------------------------------------------------------------------------

    def _add(
            self,
            prefix: str,
            path: str,
            target: zipfile.ZipFile,
            entries: List[ArchiveEntry],
    ) -> None:
        node = FileSystemNode.from_path(path)
        name = entry_name(prefix, node.path)

        if node.is_directory:
            if name:
                dir_name = name if name.endswith("/") else name + "/"
                info = zipfile.ZipInfo(dir_name, date_time=to_date_time(node.mtime))
                info.compress_type = zipfile.ZIP_STORED
                info.external_attr = _DIR_ATTRS
                target.writestr(info, b"")
                entries.append(ArchiveEntry(dir_name, node.mtime, is_directory=True))
            for child in sorted(os.listdir(node.path)):
                self._add(prefix, os.path.join(node.path, child), target, entries)
            return

        if name == MANIFEST_ENTRY_NAME:
            logger.warning(f"Skipping {node.path}: the archive manifest is generated")
            return

        info = zipfile.ZipInfo(name, date_time=to_date_time(node.mtime))
        info.compress_type = self.compression
        info.external_attr = _FILE_ATTRS
        # Known size lets zipfile decide on Zip64 before streaming starts
        info.file_size = node.size

        with open(node.path, "rb") as source, target.open(info, mode="w") as dest:
            shutil.copyfileobj(source, dest, self.buffer_size)

        entries.append(ArchiveEntry(name, node.mtime))

    def _write_manifest(self, target: zipfile.ZipFile) -> ArchiveEntry:
        now = time.time()
        info = zipfile.ZipInfo(MANIFEST_ENTRY_NAME, date_time=to_date_time(now))
        info.compress_type = self.compression
        info.external_attr = _FILE_ATTRS
        target.writestr(info, render_manifest())
        return ArchiveEntry(MANIFEST_ENTRY_NAME, now)


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def entry_name(prefix: str, path: str) -> str:
    """
    Compute the archive entry name of a path below prefix.

    The prefix and its separator are stripped and separators normalized to
    '/'. The root itself maps to an empty name.

    Args:
        prefix: Absolute archive root.
        path: Absolute path of a node under the root.

    Returns:
        str: Forward-slash relative name, without trailing slash.
    """
    rel = os.path.relpath(path, prefix)
    if rel == os.curdir:
        return ""
    return rel.replace(os.sep, "/")


def to_date_time(mtime: float) -> Tuple[int, int, int, int, int, int]:
    """Convert an epoch timestamp to a ZIP date_time tuple, clamped to DOS range."""
    date_time = time.localtime(mtime)[:6]
    if date_time < _MIN_DATE_TIME:
        return _MIN_DATE_TIME
    if date_time > _MAX_DATE_TIME:
        return _MAX_DATE_TIME
    return date_time


def render_manifest() -> bytes:
    """Render the global manifest holding only the version attribute."""
    return f"Manifest-Version: {MANIFEST_VERSION}\r\n\r\n".encode("utf-8")
