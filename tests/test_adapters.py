import io
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from databricks.sdk.errors import DatabricksError, NotFound, PermissionDenied

from jobhist.core.adapters.dbfs import DbfsFileSystem
from jobhist.core.adapters.localfs import LocalFileSystem


def test_local_list_dir_reports_entries(tmp_path):
    (tmp_path / "b.jhist").write_bytes(b"")
    (tmp_path / "a").mkdir()

    entries = LocalFileSystem().list_dir(str(tmp_path))

    assert [(e.name, e.is_dir) for e in entries] == [("a", True), ("b.jhist", False)]
    assert entries[1].path == str(tmp_path / "b.jhist")
    assert entries[1].modification_time.tzinfo is timezone.utc


def test_local_errors_are_os_errors(tmp_path):
    fs = LocalFileSystem()

    with pytest.raises(OSError):
        fs.list_dir(str(tmp_path / "missing"))
    with pytest.raises(OSError):
        fs.read_bytes(str(tmp_path / "missing.xml"))


class _Dbfs:
    def __init__(self, error: Exception | None = None):
        self.error = error

    def list(self, path: str):
        if self.error:
            raise self.error
        return [
            SimpleNamespace(path=f"{path}/job1-1-1-user1-FAILED.jhist", is_dir=False, modification_time=1000),
            SimpleNamespace(path=f"{path}/attempts/", is_dir=True, modification_time=None),
            SimpleNamespace(path=None, is_dir=False, modification_time=None),
        ]

    def download(self, path: str):
        if self.error:
            raise self.error
        return io.BytesIO(b"<configuration/>")


def _fs(error: Exception | None = None) -> DbfsFileSystem:
    return DbfsFileSystem(SimpleNamespace(dbfs=_Dbfs(error)))


def test_dbfs_list_dir_maps_file_info():
    entries = _fs().list_dir("/history/job1")

    assert [(e.name, e.is_dir) for e in entries] == [
        ("attempts", True),
        ("job1-1-1-user1-FAILED.jhist", False),
    ]
    assert entries[1].modification_time == datetime.fromtimestamp(1, tz=timezone.utc)
    assert entries[0].modification_time is None


def test_dbfs_read_bytes():
    assert _fs().read_bytes("/history/job1/config.xml") == b"<configuration/>"


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (NotFound("missing"), FileNotFoundError),
        (PermissionDenied("denied"), PermissionError),
        (DatabricksError("boom"), OSError),
    ],
)
def test_dbfs_errors_become_os_errors(error, expected):
    fs = _fs(error)

    with pytest.raises(expected):
        fs.list_dir("/history/job1")
    with pytest.raises(expected):
        fs.read_bytes("/history/job1/config.xml")
