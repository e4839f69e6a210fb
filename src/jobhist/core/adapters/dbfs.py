from __future__ import annotations

import posixpath
from datetime import datetime, timezone

from databricks.sdk import WorkspaceClient
from databricks.sdk.errors import DatabricksError, NotFound, PermissionDenied

from jobhist.core.filesystem import FileEntry


def _as_os_error(exc: DatabricksError, path: str) -> OSError:
    """Translate a Databricks API error into the matching OSError subclass."""
    if isinstance(exc, NotFound):
        return FileNotFoundError(f"{path}: {exc}")
    if isinstance(exc, PermissionDenied):
        return PermissionError(f"{path}: {exc}")
    return OSError(f"{path}: {exc}")


class DbfsFileSystem:
    """History filesystem backed by the Databricks File System (DBFS)."""

    def __init__(self, client: WorkspaceClient) -> None:
        self.client = client

    def list_dir(self, path: str) -> list[FileEntry]:
        """List a DBFS directory. Databricks errors are raised as OSError."""
        entries: list[FileEntry] = []
        try:
            for info in self.client.dbfs.list(path):
                full_path = getattr(info, "path", None)
                if not full_path:
                    continue
                mtime = getattr(info, "modification_time", None)
                entries.append(
                    FileEntry(
                        name=posixpath.basename(full_path.rstrip("/")),
                        path=full_path,
                        is_dir=bool(getattr(info, "is_dir", False)),
                        # DBFS reports milliseconds since the epoch
                        modification_time=datetime.fromtimestamp(mtime / 1000, tz=timezone.utc)
                        if mtime
                        else None,
                    )
                )
        except DatabricksError as exc:
            raise _as_os_error(exc, path) from exc
        return sorted(entries, key=lambda e: e.name)

    def read_bytes(self, path: str) -> bytes:
        """Download a DBFS file. Databricks errors are raised as OSError."""
        try:
            with self.client.dbfs.download(path) as f:
                return f.read()
        except DatabricksError as exc:
            raise _as_os_error(exc, path) from exc
