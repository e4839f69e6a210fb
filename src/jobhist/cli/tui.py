"""Terminal UI utilities for browsing job history folders."""

from __future__ import annotations

import posixpath

import questionary

from jobhist.cli.common.tui_style import QUESTIONARY_STYLE_SELECT

_MAX_JOB_ID_WIDTH = 64


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _folder_choice_title(folder: str, *, id_width: int) -> str:
    """Format one folder choice as `<jobId>  (<YYYY/MM/DD>)` with aligned date column."""
    parent, job_id = posixpath.split(folder.rstrip("/"))
    day = "/".join(parent.split("/")[-3:])
    short_id = _truncate(job_id, _MAX_JOB_ID_WIDTH)
    return f"{short_id.ljust(id_width)}  ({day})"


def select_job_folder(folders: list[str]) -> str | None:
    """Display a select prompt to pick one job folder.

    Args:
        folders: Job folder paths under a partitioned history root.

    Returns:
        The selected folder path, or None if cancelled.
    """
    shown_ids = [
        _truncate(posixpath.basename(f.rstrip("/")), _MAX_JOB_ID_WIDTH) for f in folders
    ]
    id_width = max((len(i) for i in shown_ids), default=0)

    choices = [
        questionary.Choice(title=_folder_choice_title(f, id_width=id_width), value=f)
        for f in folders
    ]

    return questionary.select(
        "Select a job:",
        choices=choices,
        style=QUESTIONARY_STYLE_SELECT,
    ).ask()
