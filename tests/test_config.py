import xml.etree.ElementTree as ET

import pytest

from jobhist.core.adapters.localfs import LocalFileSystem
from jobhist.core.config import (
    JobConfig,
    load_cluster_config,
    parse_config,
    parse_config_xml,
    read_config,
)
from jobhist.core.filesystem import FileEntry
from jobhist.core.result import FailureReason


class _FailingListFs:
    def list_dir(self, path: str) -> list[FileEntry]:
        raise OSError("IO Excpt")

    def read_bytes(self, path: str) -> bytes:
        raise AssertionError("read_bytes should not be called")


class _FailingReadFs:
    def list_dir(self, path: str) -> list[FileEntry]:
        return [FileEntry(name="config.xml", path=f"{path}/config.xml")]

    def read_bytes(self, path: str) -> bytes:
        raise PermissionError(path)


class _BytesFs:
    def __init__(self, data: bytes):
        self.data = data

    def list_dir(self, path: str) -> list[FileEntry]:
        return [FileEntry(name="config.xml", path=f"{path}/config.xml")]

    def read_bytes(self, path: str) -> bytes:
        return self.data


def test_parse_config_success(resources):
    folder = str(resources / "typical_hist_folder" / "job1")

    actual = parse_config(LocalFileSystem(), folder)

    assert actual == [JobConfig(name="name", value="value", is_final=True, source="source")]


def test_parse_config_skips_records_with_missing_elements(resources):
    actual = parse_config(LocalFileSystem(), str(resources / "application_123_456"))

    assert [c.name for c in actual] == [
        "tony.application.name",
        "tony.worker.instances",
        "tony.application.security.enabled",
    ]


def test_parse_config_list_failure_returns_empty_list():
    assert parse_config(_FailingListFs(), "/history/job1") == []


def test_read_config_reports_io_error():
    for fs in (_FailingListFs(), _FailingReadFs()):
        result = read_config(fs, "/history/job1")

        assert result.ok is False
        assert result.failure is FailureReason.IO_ERROR


def test_read_config_reports_missing_export(tmp_path):
    result = read_config(LocalFileSystem(), str(tmp_path))

    assert result.failure is FailureReason.NOT_FOUND
    assert parse_config(LocalFileSystem(), str(tmp_path)) == []


def test_read_config_reports_malformed_export():
    result = read_config(_BytesFs(b"<configuration><property>"), "/history/job1")

    assert result.failure is FailureReason.MALFORMED
    assert result.value_or([]) == []


def test_parse_config_xml_field_rules():
    data = b"""
    <configuration>
      <property><name>a</name><value/><final>TRUE</final><source>s</source></property>
      <property><name/><value>x</value><final>false</final><source>s</source></property>
      <property><name>b</name><value> padded </value><final>nope</final><source>s</source></property>
      <property><name>a</name><value>override</value><final>false</final><source>t</source></property>
    </configuration>
    """

    configs = parse_config_xml(data)

    assert configs == [
        JobConfig(name="a", value="", is_final=True, source="s"),
        JobConfig(name="b", value="padded", is_final=False, source="s"),
        JobConfig(name="a", value="override", is_final=False, source="t"),
    ]


def test_parse_config_xml_raises_on_broken_xml():
    with pytest.raises(ET.ParseError):
        parse_config_xml(b"not xml")


def test_load_cluster_config_respects_final(resources):
    conf = load_cluster_config(
        [resources / "yarn-site.xml", str(resources / "override-site.xml")]
    )

    assert conf == {
        "yarn.resourcemanager.webapp.address": "rm-host:8088",
        "yarn.nodemanager.address": "0.0.0.0:9041",
        "mapreduce.jobhistory.webapp.address": "jhs-host:19888",
    }


def test_load_cluster_config_empty():
    assert load_cluster_config([]) == {}
