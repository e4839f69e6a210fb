"""Job configuration extraction.

A job folder carries a Hadoop-style XML export of the configuration the job
ran with::

    <configuration>
      <property>
        <name>...</name><value>...</value><final>true</final><source>...</source>
      </property>
    </configuration>

Exports drift between versions: properties may lack sub-elements or carry
extra ones. Each property is first reduced to a map of present/missing
fields, and the drop-on-missing policy is applied once, when turning that map
into a ``JobConfig``. The same XML format is used for cluster ``*-site.xml``
files, which ``load_cluster_config`` reads into the cluster configuration
mapping.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

from jobhist.core.conventions import DEFAULT_CONVENTIONS, HistoryConventions
from jobhist.core.filesystem import HistoryFileSystem
from jobhist.core.result import FailureReason, ParseResult

logger = logging.getLogger("jobhist.config")

_PROPERTY_FIELDS = ("name", "value", "final", "source")


@dataclass(frozen=True)
class JobConfig:
    """
    A single configuration entry of a job.

    Attributes:
        name: Configuration key.
        value: Configured value (may be empty).
        is_final: True if the property was marked final.
        source: Where the value came from (resource file, programmatic, ...).
    """

    name: str
    value: str
    is_final: bool
    source: str


def _property_fields(prop: ET.Element) -> Mapping[str, str | None]:
    """Map each known sub-field to its text, or None when the element is absent."""
    fields: dict[str, str | None] = {}
    for field in _PROPERTY_FIELDS:
        element = prop.find(field)
        fields[field] = None if element is None else (element.text or "").strip()
    return fields


def _to_job_config(fields: Mapping[str, str | None]) -> JobConfig | None:
    """Build a JobConfig, or None if a mandatory field is missing."""
    name = fields["name"]
    value = fields["value"]
    final = fields["final"]
    source = fields["source"]
    if not name or value is None or final is None or source is None:
        return None
    return JobConfig(
        name=name,
        value=value,
        is_final=final.lower() == "true",
        source=source,
    )


def parse_config_xml(data: bytes) -> list[JobConfig]:
    """
    Parse a config export into JobConfig entries.

    Properties with a missing mandatory field are skipped.

    Raises:
        xml.etree.ElementTree.ParseError: If the document is not valid XML.
    """
    root = ET.fromstring(data)
    configs: list[JobConfig] = []
    skipped = 0

    for prop in root.iter("property"):
        config = _to_job_config(_property_fields(prop))
        if config is None:
            skipped += 1
            continue
        configs.append(config)

    if skipped:
        logger.debug("Skipped %d incomplete config properties", skipped)
    return configs


def read_config(
    fs: HistoryFileSystem,
    job_folder: str,
    conventions: HistoryConventions = DEFAULT_CONVENTIONS,
) -> ParseResult[list[JobConfig]]:
    """
    Read the config export of a job folder.

    Args:
        fs: Filesystem holding the history folders.
        job_folder: Path of the job folder.
        conventions: Naming conventions (config export file name).

    Returns:
        A ParseResult holding the parsed entries, or failing with
        NOT_FOUND (no export), IO_ERROR (list/read failed) or
        MALFORMED (export is not valid XML).
    """
    try:
        entries = fs.list_dir(job_folder)
        export = next(
            (e for e in entries if not e.is_dir and e.name == conventions.config_file_name),
            None,
        )
        if export is None:
            logger.debug("No %s in %s", conventions.config_file_name, job_folder)
            return ParseResult.fail(FailureReason.NOT_FOUND, job_folder)
        data = fs.read_bytes(export.path)
    except OSError as exc:
        logger.warning("Failed to read config in %s: %s", job_folder, exc)
        return ParseResult.fail(FailureReason.IO_ERROR, str(exc))

    try:
        return ParseResult.success(parse_config_xml(data))
    except ET.ParseError as exc:
        logger.warning("Malformed config export in %s: %s", job_folder, exc)
        return ParseResult.fail(FailureReason.MALFORMED, str(exc))


def parse_config(
    fs: HistoryFileSystem,
    job_folder: str,
    conventions: HistoryConventions = DEFAULT_CONVENTIONS,
) -> list[JobConfig]:
    """Return the config entries of a job folder, or an empty list on any failure."""
    return read_config(fs, job_folder, conventions).value_or([])


def load_cluster_config(paths: Iterable[str | Path]) -> dict[str, str]:
    """
    Load cluster configuration from local Hadoop ``*-site.xml`` files.

    Later files override earlier ones, except for properties an earlier
    file marked final.

    Raises:
        OSError: If a file cannot be read.
        xml.etree.ElementTree.ParseError: If a file is not valid XML.
    """
    merged: dict[str, str] = {}
    final: set[str] = set()

    for path in paths:
        root = ET.fromstring(Path(path).read_bytes())
        for prop in root.iter("property"):
            fields = _property_fields(prop)
            name, value = fields["name"], fields["value"]
            if not name or value is None or name in final:
                continue
            merged[name] = value
            if (fields["final"] or "").lower() == "true":
                final.add(name)

    return merged
