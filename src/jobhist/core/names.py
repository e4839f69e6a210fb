"""History file name validation and decoding.

Finished jobs leave a history file named

    <jobId>-<started>-<completed>-<user>-<STATUS>.<suffix>

while running jobs leave

    <jobId>-<started>-<user>.<suffix>.<in_progress_suffix>

Names are split from the right so job ids may themselves contain hyphens.
Malformed names are routine on shared storage, so nothing in this module
raises: invalid input simply does not validate.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from jobhist.core.conventions import DEFAULT_CONVENTIONS, HistoryConventions

logger = logging.getLogger("jobhist.names")

_FINISHED_FIELDS = 5
_IN_PROGRESS_FIELDS = 3


@dataclass(frozen=True)
class HistFileName:
    """
    Decoded fields of a history file name.

    Attributes:
        job_id: Job identifier (first field).
        started_ms: Start time in epoch milliseconds, None if not numeric.
        completed_ms: Completion time in epoch milliseconds, None for
                      in-progress files or when not numeric.
        user: Owner of the job.
        status: Status token as written in the file name.
    """

    job_id: str
    started_ms: int | None
    completed_ms: int | None
    user: str
    status: str


def _full_match(pattern: str, value: str) -> bool:
    try:
        return re.fullmatch(pattern, value) is not None
    except re.error as exc:
        logger.debug("Invalid pattern %r: %s", pattern, exc)
        return False


def _to_millis(field: str) -> int | None:
    return int(field) if field.isascii() and field.isdecimal() else None


def _split_stem(file_name: str, suffix: str, fields: int) -> list[str] | None:
    """Strip ``.<suffix>`` and split the stem into exactly ``fields`` parts."""
    ending = f".{suffix}"
    if not file_name.endswith(ending):
        return None
    parts = file_name[: -len(ending)].rsplit("-", fields - 1)
    if len(parts) != fields or not all(parts):
        return None
    return parts


def parse_hist_file_name(
    file_name: str,
    job_id_pattern: str,
    conventions: HistoryConventions = DEFAULT_CONVENTIONS,
) -> HistFileName | None:
    """
    Decode a finished history file name.

    Args:
        file_name: Base name of the file.
        job_id_pattern: Regex the job id field must fully match.
        conventions: Naming conventions to validate against.

    Returns:
        The decoded fields, or None if the name is not a valid history
        file name.
    """
    parts = _split_stem(file_name, conventions.hist_suffix, _FINISHED_FIELDS)
    if parts is None:
        return None

    job_id, started, completed, user, status = parts
    if not _full_match(job_id_pattern, job_id):
        return None
    if not _full_match(conventions.user_pattern, user):
        return None
    if status not in conventions.status_tokens:
        return None

    return HistFileName(
        job_id=job_id,
        started_ms=_to_millis(started),
        completed_ms=_to_millis(completed),
        user=user,
        status=status,
    )


def is_valid_hist_file_name(
    file_name: str,
    job_id_pattern: str,
    conventions: HistoryConventions = DEFAULT_CONVENTIONS,
) -> bool:
    """Return True if ``file_name`` is a valid finished history file name."""
    return parse_hist_file_name(file_name, job_id_pattern, conventions) is not None


def parse_in_progress_file_name(
    file_name: str,
    job_id_pattern: str,
    conventions: HistoryConventions = DEFAULT_CONVENTIONS,
) -> HistFileName | None:
    """Decode the history file name of a job that is still running."""
    suffix = f"{conventions.hist_suffix}.{conventions.in_progress_suffix}"
    parts = _split_stem(file_name, suffix, _IN_PROGRESS_FIELDS)
    if parts is None:
        return None

    job_id, started, user = parts
    if not _full_match(job_id_pattern, job_id):
        return None
    if not _full_match(conventions.user_pattern, user):
        return None

    return HistFileName(
        job_id=job_id,
        started_ms=_to_millis(started),
        completed_ms=None,
        user=user,
        status="RUNNING",
    )
