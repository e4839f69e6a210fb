"""Date-partitioned history paths.

Finished job folders are archived under ``<root>/YYYY/MM/DD/<jobId>``. The
calendar day depends on the time zone the history service runs in, so the
instant is always converted into the requested zone before the date fields
are taken.
"""

from __future__ import annotations

import logging
import posixpath
import re
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger("jobhist.partition")

_UTC_NAMES = {"UTC", "GMT", "Z", "UT"}
_OFFSET_RE = re.compile(r"^(?:UTC|GMT|UT)?([+-])(\d{1,2})(?::?(\d{2}))?$")


def resolve_zone(zone: tzinfo | str) -> tzinfo:
    """
    Turn a zone argument into a ``tzinfo``.

    Strings may be ``UTC``/``GMT``, an IANA name (``Europe/Brussels``) or a
    fixed offset (``GMT+6``, ``UTC-05:30``, ``+02``). Offsets follow the
    ISO sign convention: ``GMT+6`` is six hours ahead of UTC. Unknown names
    fall back to UTC.
    """
    if isinstance(zone, tzinfo):
        return zone

    name = zone.strip()
    if name.upper() in _UTC_NAMES:
        return timezone.utc

    match = _OFFSET_RE.match(name.upper())
    if match:
        sign, hours, minutes = match.groups()
        offset = timedelta(hours=int(hours), minutes=int(minutes or 0))
        if offset >= timedelta(hours=24):
            logger.warning("Offset out of range in zone %r, using UTC", zone)
            return timezone.utc
        return timezone(-offset if sign == "-" else offset)

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.warning("Unknown time zone %r, using UTC", zone)
        return timezone.utc


def _to_datetime(timestamp: datetime | int | float) -> datetime:
    if isinstance(timestamp, datetime):
        return timestamp if timestamp.tzinfo else timestamp.replace(tzinfo=timezone.utc)
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)


def year_month_day_directory(
    timestamp: datetime | int | float, zone: tzinfo | str
) -> str:
    """
    Return the ``YYYY/MM/DD`` partition of an instant in a given zone.

    Args:
        timestamp: Aware datetime, naive datetime (taken as UTC) or epoch
                   milliseconds.
        zone: Target time zone.

    Returns:
        Zero-padded ``YYYY/MM/DD`` string.
    """
    local = _to_datetime(timestamp).astimezone(resolve_zone(zone))
    return f"{local.year:04d}/{local.month:02d}/{local.day:02d}"


def job_folder_path(
    history_root: str,
    job_id: str,
    timestamp: datetime | int | float,
    zone: tzinfo | str,
) -> str:
    """Return ``<history_root>/YYYY/MM/DD/<job_id>`` for a finished job."""
    return posixpath.join(history_root, year_month_day_directory(timestamp, zone), job_id)
