"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer
from rich.markup import escape

from jobhist.cli.common.output import out
from jobhist.core.result import ParseResult


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """Print an error message and exit, chaining the original exception."""
    out.error(message)
    raise typer.Exit(code) from exc


def die_on_failure(result: ParseResult, *, what: str) -> None:
    """Exit with code 1 if a parse result carries a failure."""
    if result.ok:
        return
    detail = f": {escape(result.detail)}" if result.detail else ""
    die(f"Could not read {what} ({result.failure.value}){detail}", code=1)
