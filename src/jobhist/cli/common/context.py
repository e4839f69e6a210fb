"""Application context management for the CLI."""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Iterable

from jobhist.cli.common.exits import die, exit_from_exc
from jobhist.core.adapters.dbfs import DbfsFileSystem
from jobhist.core.adapters.localfs import LocalFileSystem
from jobhist.core.auth import AuthError, get_client
from jobhist.core.config import load_cluster_config
from jobhist.core.filesystem import HistoryFileSystem

CLUSTER_CONF_ENV = "JOBHIST_CLUSTER_CONF"
JOB_ID_REGEX_ENV = "JOBHIST_JOB_ID_REGEX"
DEFAULT_JOB_ID_REGEX = r"application_\d+_\d+"


@dataclass
class HistoryAppContext:
    """Application context holding the history filesystem and cluster configuration."""

    fs: HistoryFileSystem
    cluster_config: dict[str, str]
    job_id_regex: str


def parse_overrides(items: Iterable[str]) -> dict[str, str]:
    """Turn `key=value` strings into a dict.

    Raises:
        ValueError: If an item does not follow the `key=value` format.
    """
    overrides: dict[str, str] = {}
    for item in items:
        if "=" not in item:
            raise ValueError(f"Invalid config override: '{item}' (expected key=value)")
        key, value = item.split("=", 1)
        if not key.strip():
            raise ValueError(f"Invalid config override: '{item}' (empty key)")
        overrides[key.strip()] = value.strip()
    return overrides


def _cluster_conf_paths(cluster_conf: list[str]) -> list[str]:
    """Return explicit --cluster-conf files, else those listed in the environment."""
    if cluster_conf:
        return list(cluster_conf)
    raw = os.getenv(CLUSTER_CONF_ENV, "")
    return [p for p in raw.split(os.pathsep) if p.strip()]


def _build_fs(dbfs: bool, profile: str | None) -> HistoryFileSystem:
    if not dbfs:
        return LocalFileSystem()

    try:
        client = get_client(profile)
    except AuthError as exc:
        die(str(exc), code=1)
    return DbfsFileSystem(client)


def build_history_context(
    *,
    profile: str | None,
    dbfs: bool,
    cluster_conf: list[str],
    overrides: list[str],
    job_id_regex: str | None,
) -> HistoryAppContext:
    """Build the application context for history commands.

    Args:
        profile: Optional Databricks profile name, used with DBFS.
        dbfs: Read history folders from DBFS instead of local storage.
        cluster_conf: Hadoop *-site.xml files holding cluster addresses.
        overrides: `key=value` cluster config overrides.
        job_id_regex: Regex job ids must fully match.

    Returns:
        HistoryAppContext: Context with filesystem and cluster configuration.
    """
    paths = _cluster_conf_paths(cluster_conf)
    try:
        cluster_config = load_cluster_config(paths)
    except (OSError, ET.ParseError) as exc:
        exit_from_exc(exc, message=f"Could not load cluster config: {exc}", code=1)

    try:
        cluster_config.update(parse_overrides(overrides))
    except ValueError as exc:
        exit_from_exc(exc, message=str(exc), code=2)

    return HistoryAppContext(
        fs=_build_fs(dbfs, profile),
        cluster_config=cluster_config,
        job_id_regex=job_id_regex or os.getenv(JOB_ID_REGEX_ENV) or DEFAULT_JOB_ID_REGEX,
    )
