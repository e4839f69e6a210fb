"""CLI application for job history inspection."""

import logging

import typer

from jobhist.cli.commands.history import app as history_app
from jobhist.cli.common.options import VerboseOpt

app = typer.Typer(
    help="jobhist - job history artifact parser",
    no_args_is_help=True,
)


@app.callback()
def _main(verbose: bool = VerboseOpt):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


app.add_typer(history_app, name="history", help="Read metadata, config and timelines of jobs.")


if __name__ == "__main__":
    app()
