from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

from jobhist.core.filesystem import FileEntry


class LocalFileSystem:
    """History filesystem backed by local or mounted storage (NFS, FUSE mounts)."""

    def list_dir(self, path: str) -> list[FileEntry]:
        """Return the entries of a local directory, sorted by name."""
        entries: list[FileEntry] = []
        with os.scandir(path) as it:
            for item in it:
                stat = item.stat()
                entries.append(
                    FileEntry(
                        name=item.name,
                        path=item.path,
                        is_dir=item.is_dir(),
                        modification_time=datetime.fromtimestamp(
                            stat.st_mtime, tz=timezone.utc
                        ),
                    )
                )
        return sorted(entries, key=lambda e: e.name)

    def read_bytes(self, path: str) -> bytes:
        """Return the content of a local file."""
        return Path(path).read_bytes()
