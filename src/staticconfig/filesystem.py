"""
Filesystem access used by the configuration store.

The store only needs three primitives: an existence check, a full-text read
and a full-text overwrite. They are grouped behind :class:`FileSystem` so a
store can be pointed at something other than the local disk.
"""

__all__ = ["FileSystem", "LocalFileSystem"]

from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    """Protocol for the file operations a store performs."""

    def exists(self, path: Path) -> bool:
        """Return True if a regular file is present at ``path``."""
        ...

    def read_text(self, path: Path, encoding: str) -> str:
        """Read the whole file at ``path`` as text.

        Raises:
            OSError: If the file cannot be read.
        """
        ...

    def write_text(self, path: Path, text: str, encoding: str) -> None:
        """Truncate the file at ``path`` and write ``text`` to it.

        Raises:
            OSError: If the file cannot be written.
        """
        ...


class LocalFileSystem:
    """:class:`FileSystem` backed by :mod:`pathlib`.

    Parent directories are not created; writing into a missing directory
    fails with the underlying ``OSError``.
    """

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read_text(self, path: Path, encoding: str) -> str:
        return path.read_text(encoding=encoding)

    def write_text(self, path: Path, text: str, encoding: str) -> None:
        with path.open("w", encoding=encoding) as f:
            f.write(text)
