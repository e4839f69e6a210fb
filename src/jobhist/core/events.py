"""Job event model.

Events are produced by the job's application master and arrive here already
decoded. The parser only reads them. ``read_events`` accepts a JSON-lines
export of decoded events, one object per line::

    {"type": "TASK_STARTED", "timestamp": 1559155036000,
     "event": {"taskType": "worker", "taskIndex": 0,
               "host": "node-1", "containerId": "container_01"}}

Payload keys may be camelCase or snake_case.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

from jobhist.core.filesystem import HistoryFileSystem
from jobhist.core.result import FailureReason, ParseResult

logger = logging.getLogger("jobhist.events")

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


class EventType(str, Enum):
    """Kinds of job lifecycle events."""

    APPLICATION_INITED = "APPLICATION_INITED"
    APPLICATION_FINISHED = "APPLICATION_FINISHED"
    TASK_STARTED = "TASK_STARTED"
    TASK_FINISHED = "TASK_FINISHED"


@dataclass(frozen=True)
class Metric:
    """A named numeric metric reported when a task or application finishes."""

    name: str
    value: float


@dataclass(frozen=True)
class ApplicationInited:
    application_id: str
    num_tasks: int
    host: str | None = None
    container_id: str | None = None


@dataclass(frozen=True)
class ApplicationFinished:
    application_id: str
    num_tasks: int
    num_failed_tasks: int
    metrics: list[Metric] = field(default_factory=list)


@dataclass(frozen=True)
class TaskStarted:
    task_type: str
    task_index: int
    host: str | None = None
    container_id: str | None = None


@dataclass(frozen=True)
class TaskFinished:
    task_type: str
    task_index: int
    status: str
    metrics: list[Metric] = field(default_factory=list)


EventPayload = Union[ApplicationInited, ApplicationFinished, TaskStarted, TaskFinished]


@dataclass(frozen=True)
class Event:
    """
    A single job event.

    Attributes:
        type: Kind of event.
        event: Kind-specific payload, or None if it was not recorded.
        timestamp: Event time in epoch milliseconds.
    """

    type: EventType
    event: EventPayload | None
    timestamp: int


def _snake_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    return {_CAMEL_RE.sub("_", k).lower(): v for k, v in raw.items()}


def _metrics(raw: Any) -> list[Metric]:
    metrics: list[Metric] = []
    if not isinstance(raw, list):
        return metrics
    for item in raw:
        try:
            metrics.append(Metric(name=str(item["name"]), value=float(item["value"])))
        except (KeyError, TypeError, ValueError, OverflowError):
            continue
    return metrics


def _payload(event_type: EventType, raw: Mapping[str, Any] | None) -> EventPayload | None:
    """Build the payload for an event type, or None if required fields are missing."""
    if not raw or not isinstance(raw, Mapping):
        return None
    data = _snake_keys(raw)
    try:
        if event_type is EventType.APPLICATION_INITED:
            return ApplicationInited(
                application_id=str(data["application_id"]),
                num_tasks=int(data.get("num_tasks") or 0),
                host=data.get("host"),
                container_id=data.get("container_id"),
            )
        if event_type is EventType.APPLICATION_FINISHED:
            return ApplicationFinished(
                application_id=str(data["application_id"]),
                num_tasks=int(data.get("num_tasks") or 0),
                num_failed_tasks=int(data.get("num_failed_tasks") or 0),
                metrics=_metrics(data.get("metrics")),
            )
        if event_type is EventType.TASK_STARTED:
            return TaskStarted(
                task_type=str(data["task_type"]),
                task_index=int(data["task_index"]),
                host=data.get("host"),
                container_id=data.get("container_id"),
            )
        return TaskFinished(
            task_type=str(data["task_type"]),
            task_index=int(data["task_index"]),
            status=str(data.get("status", "")),
            metrics=_metrics(data.get("metrics")),
        )
    except (KeyError, TypeError, ValueError, OverflowError):
        return None


def event_from_dict(raw: Mapping[str, Any]) -> Event | None:
    """
    Build an Event from a decoded JSON object.

    Returns None if the type is unknown or the timestamp is missing.
    A payload with missing fields is kept as an event without payload.
    """
    try:
        event_type = EventType(raw["type"])
        timestamp = int(raw["timestamp"])
    except (KeyError, TypeError, ValueError, OverflowError):
        return None
    return Event(type=event_type, event=_payload(event_type, raw.get("event")), timestamp=timestamp)


def read_events(fs: HistoryFileSystem, path: str) -> ParseResult[list[Event]]:
    """
    Read a JSON-lines event export.

    Blank lines are ignored; lines that are not valid JSON objects or do
    not describe a known event are skipped with a warning.

    Returns:
        A ParseResult holding the events in file order, or failing with
        IO_ERROR if the file cannot be read.
    """
    try:
        data = fs.read_bytes(path)
    except OSError as exc:
        logger.warning("Failed to read events from %s: %s", path, exc)
        return ParseResult.fail(FailureReason.IO_ERROR, str(exc))

    events: list[Event] = []
    for lineno, line in enumerate(data.decode("utf-8", errors="replace").splitlines(), 1):
        if not line.strip():
            continue
        try:
            raw = json.loads(line)
        except json.JSONDecodeError:
            logger.warning("Skipping invalid JSON on line %d of %s", lineno, path)
            continue
        event = event_from_dict(raw) if isinstance(raw, dict) else None
        if event is None:
            logger.warning("Skipping unrecognized event on line %d of %s", lineno, path)
            continue
        events.append(event)

    return ParseResult.success(events)
