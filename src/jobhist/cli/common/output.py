"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

_STATUS_STYLES = {
    "SUCCEEDED": "ok",
    "RUNNING": "title",
    "FAILED": "err",
    "KILLED": "err",
}

console = Console(theme=_THEME)


def _fmt_time(value: datetime | None) -> str:
    return value.isoformat() if value else "-"


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def metadata_view(self, metadata: Any) -> None:
        """
        Expects an object with the fields of jobhist.core.jobs.JobMetadata
        """
        status = getattr(metadata.status, "value", str(metadata.status))
        style = _STATUS_STYLES.get(status, "warn")

        self.header(f"Job {escape(metadata.id)}")
        self.kv(
            {
                "Status": f"[{style}]{status}[/{style}]",
                "User": escape(metadata.user),
                "Started": _fmt_time(metadata.started),
                "Completed": _fmt_time(metadata.completed),
                "Job link": escape(metadata.job_link or "-"),
                "Config link": escape(metadata.config_link or "-"),
                "RM link": escape(metadata.rm_link or "-"),
            }
        )

    def configs_table(self, configs: Iterable[Any], title: str = "Configuration") -> None:
        """
        Expects objects with .name .value .is_final .source
        (like jobhist.core.config.JobConfig)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok")
        t.add_column("Value")
        t.add_column("Final", no_wrap=True)
        t.add_column("Source", style="meta")

        for c in configs:
            t.add_row(
                escape(c.name),
                escape(c.value),
                "yes" if c.is_final else "no",
                escape(c.source),
            )

        console.print(t)

    def job_logs_table(self, logs: Iterable[Any], title: str = "Timeline") -> None:
        """
        Expects objects with .timestamp .type .host .container_id .log_link
        (like jobhist.core.timeline.JobLog)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Time", style="meta", no_wrap=True)
        t.add_column("Event", style="ok", no_wrap=True)
        t.add_column("Host")
        t.add_column("Container")
        t.add_column("Logs", style="meta")

        for log in logs:
            event_type = getattr(log.type, "value", str(log.type))
            t.add_row(
                _fmt_time(log.timestamp),
                event_type,
                escape(log.host or ""),
                escape(log.container_id or ""),
                escape(log.log_link),
            )

        console.print(t)

    def folders_table(self, folders: Iterable[str], title: str = "Job folders") -> None:
        """Render a table of job folder paths."""
        t = Table(title=title, show_lines=False)
        t.add_column("Folder", style="ok")

        for f in folders:
            t.add_row(escape(f))

        console.print(t)


out = Out()
