"""Filesystem abstraction consumed by the history parser.

The parser only ever lists directories and reads whole files. Adapters for
concrete storage backends (local disk, DBFS) implement ``HistoryFileSystem``
and must report every failure as an ``OSError`` (or subclass) so the core can
handle I/O errors uniformly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class FileEntry:
    """
    A single directory entry.

    Attributes:
        name: Base name of the entry.
        path: Full path of the entry, usable with the same filesystem.
        is_dir: True if the entry is a directory.
        modification_time: Last modification time (timezone aware),
                           or None if the backend does not report it.
    """

    name: str
    path: str
    is_dir: bool = False
    modification_time: datetime | None = None


class HistoryFileSystem(Protocol):
    """Read-only filesystem operations used by the parser."""

    def list_dir(self, path: str) -> list[FileEntry]:
        """Return the entries of a directory. Raises OSError on failure."""
        ...

    def read_bytes(self, path: str) -> bytes:
        """Return the full content of a file. Raises OSError on failure."""
        ...
