"""Authentication helpers for Databricks.

History folders archived on DBFS are read through a Databricks
WorkspaceClient. This module centralizes creation of that client and applies
small normalization rules (such as sanitizing the host URL) to avoid subtle
SDK and API issues.
"""

import re

from databricks.sdk import WorkspaceClient
from databricks.sdk.core import Config


class AuthError(RuntimeError):
    """Raised when Databricks authentication fails."""


def _format_auth_error(message: str, profile: str | None) -> str:
    """Return a user-friendly auth error message."""
    login_match = re.search(r"databricks auth login ([^\s]+)", message)
    if login_match:
        cmd = "databricks auth login"
        if profile:
            cmd = f"{cmd} --profile {profile}"
        return (
            "Databricks authentication failed. Your refresh token is invalid.\n"
            f"Re-authenticate with:\n  $ {cmd}"
        )
    return f"Databricks authentication failed: {message}"


def _sanitize_host(host: str | None) -> str | None:
    """Strip query strings (``?o=123``) and trailing slashes from a workspace URL."""
    if not host:
        return host
    return host.split("?", 1)[0].rstrip("/")


def get_client(profile: str | None = None) -> WorkspaceClient:
    """
    Create a WorkspaceClient for reading history folders from DBFS.

    The profile is resolved with Databricks unified authentication
    (~/.databrickscfg or environment variables).

    Raises:
        AuthError: If the configuration cannot be resolved.
    """
    try:
        cfg = Config(profile=profile) if profile else Config()
    except ValueError as exc:
        raise AuthError(_format_auth_error(str(exc), profile)) from exc
    cfg.host = _sanitize_host(cfg.host)
    return WorkspaceClient(config=cfg)
