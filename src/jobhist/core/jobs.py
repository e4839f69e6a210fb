"""Job metadata reconstruction from history folders.

This module defines the job metadata model (JobMetadata, JobStatus) and the
domain-level operations that rebuild it from the files a finished (or still
running) job left in its history folder. It is intentionally free of CLI
concerns and never raises on bad artifacts: listing failures and folders
without a recognizable history file are reported through ``ParseResult``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Mapping

from jobhist.core.conventions import (
    DEFAULT_CONVENTIONS,
    RESOURCE_MANAGER_WEBAPP_ADDRESS,
    HistoryConventions,
)
from jobhist.core.filesystem import FileEntry, HistoryFileSystem
from jobhist.core.names import (
    HistFileName,
    parse_hist_file_name,
    parse_in_progress_file_name,
)
from jobhist.core.result import FailureReason, ParseResult

logger = logging.getLogger("jobhist.jobs")

_YEAR_RE = re.compile(r"\d{4}")
_MONTH_DAY_RE = re.compile(r"\d{2}")


class JobStatus(str, Enum):
    """
    Final (or current) state of a job as encoded in its history file name.

    Values:
        RUNNING: The job has not finished yet.
        SUCCEEDED: The job completed successfully.
        FAILED: The job completed with an error.
        KILLED: The job was killed before completion.
        UNKNOWN: The status could not be determined.
    """

    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    KILLED = "KILLED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_token(cls, token: str | None) -> JobStatus:
        try:
            return cls(token)
        except ValueError:
            return cls.UNKNOWN


class TimestampPolicy(str, Enum):
    """
    Where started/completed times of a job come from.

    Values:
        FILENAME: Epoch milliseconds embedded in the history file name.
        MODIFICATION_TIME: Earliest/latest modification time of the
                           entries in the job folder.
    """

    FILENAME = "filename"
    MODIFICATION_TIME = "mtime"


@dataclass(frozen=True)
class JobMetadata:
    """
    Metadata of a single historical job.

    Attributes:
        id: Job identifier.
        status: Final or current job status.
        user: Owner of the job.
        started: Start time, if known.
        completed: Completion time, if known. May be None while started
                   is set (running job or incomplete history).
        job_link: Link to the job detail page.
        config_link: Link to the job configuration page.
        rm_link: Link to the application in the resource manager UI, or
                 None if the resource manager address is not configured.
    """

    id: str
    status: JobStatus
    user: str
    started: datetime | None = None
    completed: datetime | None = None
    job_link: str | None = None
    config_link: str | None = None
    rm_link: str | None = None


def _from_millis(value: int | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        logger.debug("Epoch milliseconds %r out of range", value)
        return None


def _find_history_file(
    entries: list[FileEntry], job_id_pattern: str, conventions: HistoryConventions
) -> HistFileName | None:
    """Return the first finished history file, else the first in-progress one."""
    files = [e for e in entries if not e.is_dir]
    for entry in files:
        decoded = parse_hist_file_name(entry.name, job_id_pattern, conventions)
        if decoded is not None:
            return decoded
    for entry in files:
        decoded = parse_in_progress_file_name(entry.name, job_id_pattern, conventions)
        if decoded is not None:
            return decoded
    return None


def _time_range(
    hist: HistFileName,
    status: JobStatus,
    entries: list[FileEntry],
    policy: TimestampPolicy,
) -> tuple[datetime | None, datetime | None]:
    if policy is TimestampPolicy.FILENAME:
        return _from_millis(hist.started_ms), _from_millis(hist.completed_ms)

    times = [e.modification_time for e in entries if e.modification_time is not None]
    if not times:
        return None, None
    completed = None if status is JobStatus.RUNNING else max(times)
    return min(times), completed


def _build_links(
    job_id: str,
    cluster_config: Mapping[str, str] | None,
    conventions: HistoryConventions,
) -> tuple[str, str, str | None]:
    job_link = f"{conventions.job_link_prefix}/{job_id}"
    config_link = f"{conventions.config_link_prefix}/{job_id}"
    rm_address = (cluster_config or {}).get(RESOURCE_MANAGER_WEBAPP_ADDRESS)
    rm_link = f"http://{rm_address}/cluster/app/{job_id}" if rm_address else None
    return job_link, config_link, rm_link


def read_metadata(
    fs: HistoryFileSystem,
    cluster_config: Mapping[str, str] | None,
    job_folder: str,
    job_id_pattern: str,
    *,
    conventions: HistoryConventions = DEFAULT_CONVENTIONS,
    timestamp_policy: TimestampPolicy = TimestampPolicy.FILENAME,
) -> ParseResult[JobMetadata]:
    """
    Reconstruct the metadata of a job from its history folder.

    The first entry that is a valid finished history file name determines
    id, user and status; if there is none, the first in-progress history
    file is used and the job is reported as RUNNING.

    Args:
        fs: Filesystem holding the history folders.
        cluster_config: Cluster configuration used to build links. May be None.
        job_folder: Path of the job folder.
        job_id_pattern: Regex the job id must fully match.
        conventions: Naming conventions to validate file names against.
        timestamp_policy: Where started/completed times come from.

    Returns:
        A ParseResult holding the JobMetadata, or failing with IO_ERROR
        (listing failed) or NOT_FOUND (no history file in the folder).
    """
    try:
        entries = fs.list_dir(job_folder)
    except OSError as exc:
        logger.warning("Failed to list job folder %s: %s", job_folder, exc)
        return ParseResult.fail(FailureReason.IO_ERROR, str(exc))

    hist = _find_history_file(entries, job_id_pattern, conventions)
    if hist is None:
        logger.debug("No history file matching %r in %s", job_id_pattern, job_folder)
        return ParseResult.fail(FailureReason.NOT_FOUND, job_folder)

    status = JobStatus.from_token(hist.status)
    started, completed = _time_range(hist, status, entries, timestamp_policy)
    job_link, config_link, rm_link = _build_links(hist.job_id, cluster_config, conventions)

    return ParseResult.success(
        JobMetadata(
            id=hist.job_id,
            status=status,
            user=hist.user,
            started=started,
            completed=completed,
            job_link=job_link,
            config_link=config_link,
            rm_link=rm_link,
        )
    )


def parse_metadata(
    fs: HistoryFileSystem,
    cluster_config: Mapping[str, str] | None,
    job_folder: str,
    job_id_pattern: str,
    *,
    conventions: HistoryConventions = DEFAULT_CONVENTIONS,
    timestamp_policy: TimestampPolicy = TimestampPolicy.FILENAME,
) -> JobMetadata | None:
    """Return the metadata of a job folder, or None if it cannot be reconstructed."""
    return read_metadata(
        fs,
        cluster_config,
        job_folder,
        job_id_pattern,
        conventions=conventions,
        timestamp_policy=timestamp_policy,
    ).value_or(None)


def _list_subdirs(fs: HistoryFileSystem, path: str) -> list[FileEntry]:
    try:
        return [e for e in fs.list_dir(path) if e.is_dir]
    except OSError as exc:
        logger.warning("Skipping unreadable history directory %s: %s", path, exc)
        return []


def find_job_folders(
    fs: HistoryFileSystem, history_root: str, job_id_pattern: str
) -> list[str]:
    """
    Locate job folders under a date-partitioned history root.

    Walks ``<history_root>/YYYY/MM/DD/<jobId>`` and returns the paths of
    the job folders whose name fully matches ``job_id_pattern``. Partition
    directories that cannot be listed are skipped.

    Args:
        fs: Filesystem holding the history folders.
        history_root: Root of the partitioned history tree.
        job_id_pattern: Regex the job folder name must fully match.

    Returns:
        Sorted list of job folder paths.
    """
    try:
        job_rx = re.compile(job_id_pattern)
    except re.error as exc:
        logger.warning("Invalid job id pattern %r: %s", job_id_pattern, exc)
        return []

    folders: list[str] = []
    for year in _list_subdirs(fs, history_root):
        if not _YEAR_RE.fullmatch(year.name):
            continue
        for month in _list_subdirs(fs, year.path):
            if not _MONTH_DAY_RE.fullmatch(month.name):
                continue
            for day in _list_subdirs(fs, month.path):
                if not _MONTH_DAY_RE.fullmatch(day.name):
                    continue
                folders.extend(
                    job.path
                    for job in _list_subdirs(fs, day.path)
                    if job_rx.fullmatch(job.name)
                )
    return sorted(folders)
