"""Event to job log mapping.

Turns a job's event stream into the per-task log timeline shown by the
history service. Each entry gets a link to the aggregated container logs,
served by the job history server through its node-manager log proxy:

    http://<jhs>/jobhistory/nmlogs/<host>:<nm-port>/<container>/<container>/<user>

The link needs the history server address, the node-manager port and a host
and container id from the event. Whenever any of these is missing the link
falls back to the sentinel from ``HistoryConventions.default_log_link``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Mapping

from jobhist.core.conventions import (
    DEFAULT_CONVENTIONS,
    JOB_HISTORY_WEBAPP_ADDRESS,
    NODE_MANAGER_ADDRESS,
    HistoryConventions,
)
from jobhist.core.events import Event, EventPayload, EventType

logger = logging.getLogger("jobhist.timeline")


@dataclass(frozen=True)
class JobLog:
    """
    A single timeline entry derived from a job event.

    Attributes:
        type: Kind of the source event.
        timestamp: Event time (UTC), or None if it is out of range.
        event: Payload of the source event, if any.
        host: Host the event happened on, if known.
        container_id: Container the event belongs to, if known.
        job_id: Job the timeline belongs to.
        log_link: Container log URL or the sentinel link.
    """

    type: EventType
    timestamp: datetime | None
    event: EventPayload | None
    host: str | None
    container_id: str | None
    job_id: str | None
    log_link: str


def _from_millis(value: int) -> datetime | None:
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        logger.debug("Event timestamp %r out of range", value)
        return None


def _log_link_base(cluster_config: Mapping[str, str] | None) -> tuple[str, str] | None:
    """Return (history server address, node-manager port) or None if not resolvable."""
    if cluster_config is None:
        return None
    jhs_address = cluster_config.get(JOB_HISTORY_WEBAPP_ADDRESS)
    nm_address = cluster_config.get(NODE_MANAGER_ADDRESS)
    if not jhs_address or not nm_address:
        return None
    _, sep, port = nm_address.rpartition(":")
    if not sep or not (port.isascii() and port.isdecimal()):
        logger.debug("Node manager address %r has no port", nm_address)
        return None
    return jhs_address, port


def map_events_to_job_logs(
    events: Iterable[Event],
    cluster_config: Mapping[str, str] | None,
    user: str | None,
    job_id: str | None,
    conventions: HistoryConventions = DEFAULT_CONVENTIONS,
) -> list[JobLog]:
    """
    Map job events to timeline entries with resolved container log links.

    The cluster configuration is read once per call: if the history server
    address or a node-manager address with a port is missing, every entry
    gets the sentinel link. Otherwise links are built per event from the
    event's own host and container id; events without them get the sentinel.

    Args:
        events: Events in chronological order.
        cluster_config: Cluster configuration. May be None.
        user: Owner of the job, used in the log URL.
        job_id: Job the events belong to.
        conventions: Conventions holding the sentinel link.

    Returns:
        One JobLog per event, in input order.
    """
    base = _log_link_base(cluster_config) if user else None
    logs: list[JobLog] = []

    for e in events:
        host = getattr(e.event, "host", None)
        container_id = getattr(e.event, "container_id", None)

        link = conventions.default_log_link
        if base is not None and host and container_id:
            jhs_address, nm_port = base
            link = (
                f"http://{jhs_address}/jobhistory/nmlogs/{host}:{nm_port}/"
                f"{container_id}/{container_id}/{user}"
            )

        logs.append(
            JobLog(
                type=e.type,
                timestamp=_from_millis(e.timestamp),
                event=e.event,
                host=host,
                container_id=container_id,
                job_id=job_id,
                log_link=link,
            )
        )

    return logs
