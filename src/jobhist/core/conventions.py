"""Naming conventions and well-known keys for job history artifacts.

Everything the parser needs to know about how history folders are laid out
(file suffixes, status tokens, the config export name, link prefixes and the
sentinel log link) is collected in a single immutable object. Components
receive it as an argument so they stay pure and can be tested with
alternative conventions.
"""

from __future__ import annotations

from dataclasses import dataclass

# Cluster configuration keys (Hadoop/YARN naming).
JOB_HISTORY_WEBAPP_ADDRESS = "mapreduce.jobhistory.webapp.address"
NODE_MANAGER_ADDRESS = "yarn.nodemanager.address"
RESOURCE_MANAGER_WEBAPP_ADDRESS = "yarn.resourcemanager.webapp.address"


@dataclass(frozen=True)
class HistoryConventions:
    """
    Immutable set of history naming conventions.

    Attributes:
        hist_suffix: Extension of finished history files (without the dot).
        in_progress_suffix: Extra extension appended while a job is running.
        config_file_name: File name of the config export in a job folder.
        status_tokens: Status values accepted in history file names.
        user_pattern: Regex the user field must fully match.
        default_log_link: Sentinel used when a container log link
                          cannot be resolved.
        job_link_prefix: Path prefix of the job detail page.
        config_link_prefix: Path prefix of the job config page.
    """

    hist_suffix: str = "jhist"
    in_progress_suffix: str = "inprogress"
    config_file_name: str = "config.xml"
    status_tokens: tuple[str, ...] = ("SUCCEEDED", "FAILED", "KILLED", "RUNNING")
    user_pattern: str = r"[a-z0-9]+"
    default_log_link: str = "N/A"
    job_link_prefix: str = "/jobs"
    config_link_prefix: str = "/config"


DEFAULT_CONVENTIONS = HistoryConventions()
