"""Commands for inspecting job history folders."""

import typer

from jobhist.cli.common.context import HistoryAppContext, build_history_context
from jobhist.cli.common.exits import die, die_on_failure, warn_exit
from jobhist.cli.common.options import (
    ClusterConfOpt,
    DbfsOpt,
    JobIdOpt,
    JobIdRegexOpt,
    ProfileOpt,
    SetOpt,
    TimestampsOpt,
    TimeZoneOpt,
    UserOpt,
)
from jobhist.cli.common.output import out
from jobhist.cli.tui import select_job_folder
from jobhist.core.config import read_config
from jobhist.core.events import read_events
from jobhist.core.jobs import TimestampPolicy, find_job_folders, read_metadata
from jobhist.core.partition import year_month_day_directory
from jobhist.core.result import FailureReason
from jobhist.core.timeline import map_events_to_job_logs

app = typer.Typer(
    help="Inspect job history folders",
    no_args_is_help=False,
    invoke_without_command=True,
)


@app.callback()
def _init(
    ctx: typer.Context,
    profile: str | None = ProfileOpt,
    dbfs: bool = DbfsOpt,
    cluster_conf: list[str] = ClusterConfOpt,
    set_: list[str] = SetOpt,
    job_id_regex: str | None = JobIdRegexOpt,
):
    """Initialize history context (filesystem + cluster configuration)."""
    ctx.obj = build_history_context(
        profile=profile,
        dbfs=dbfs,
        cluster_conf=cluster_conf,
        overrides=set_,
        job_id_regex=job_id_regex,
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


def _show_metadata(appctx: HistoryAppContext, folder: str, policy: TimestampPolicy) -> None:
    with out.status("Reading job metadata..."):
        result = read_metadata(
            appctx.fs,
            appctx.cluster_config,
            folder,
            appctx.job_id_regex,
            timestamp_policy=policy,
        )
    die_on_failure(result, what=f"job metadata in {folder}")
    out.metadata_view(result.value)


@app.command()
def metadata(
    ctx: typer.Context,
    folder: str = typer.Argument(..., help="Job history folder"),
    timestamps: str = TimestampsOpt,
):
    """
    Show the metadata of a job.
    """
    appctx: HistoryAppContext = ctx.obj

    try:
        policy = TimestampPolicy(timestamps)
    except ValueError:
        die(f"Invalid --timestamps value: '{timestamps}' (expected filename or mtime)", code=2)

    _show_metadata(appctx, folder, policy)


@app.command()
def config(
    ctx: typer.Context,
    folder: str = typer.Argument(..., help="Job history folder"),
):
    """
    Show the configuration a job ran with.
    """
    appctx: HistoryAppContext = ctx.obj

    with out.status("Reading job configuration..."):
        result = read_config(appctx.fs, folder)

    if result.failure is FailureReason.NOT_FOUND:
        warn_exit(f"No config export in {folder}", code=0)
    die_on_failure(result, what=f"job configuration in {folder}")

    if not result.value:
        warn_exit("Config export contains no complete entries", code=0)

    out.configs_table(result.value)


@app.command()
def timeline(
    ctx: typer.Context,
    events_file: str = typer.Argument(..., help="JSON-lines export of job events"),
    user: str | None = UserOpt,
    job_id: str | None = JobIdOpt,
):
    """
    Show the event timeline of a job with container log links.
    """
    appctx: HistoryAppContext = ctx.obj

    result = read_events(appctx.fs, events_file)
    die_on_failure(result, what=f"events in {events_file}")

    logs = map_events_to_job_logs(result.value, appctx.cluster_config, user, job_id)
    if not logs:
        warn_exit("No events found", code=0)

    out.job_logs_table(logs, title=f"Timeline {job_id}" if job_id else "Timeline")


@app.command()
def partition(
    timestamp: int = typer.Argument(..., help="Epoch milliseconds"),
    tz: str = TimeZoneOpt,
):
    """
    Print the YYYY/MM/DD history partition of a timestamp.
    """
    typer.echo(year_month_day_directory(timestamp, tz))


@app.command()
def folders(
    ctx: typer.Context,
    root: str = typer.Argument(..., help="Date-partitioned history root"),
):
    """
    List job folders under a history root.
    """
    appctx: HistoryAppContext = ctx.obj

    with out.status("Scanning history..."):
        found = find_job_folders(appctx.fs, root, appctx.job_id_regex)

    if not found:
        warn_exit("No job folders found", code=0)

    out.folders_table(found)


@app.command()
def browse(
    ctx: typer.Context,
    root: str = typer.Argument(..., help="Date-partitioned history root"),
):
    """
    Pick a job folder interactively and show its metadata.
    """
    appctx: HistoryAppContext = ctx.obj

    with out.status("Scanning history..."):
        found = find_job_folders(appctx.fs, root, appctx.job_id_regex)

    if not found:
        warn_exit("No job folders found", code=0)

    selected = select_job_folder(found)
    if not selected:
        warn_exit("No job selected", code=0)

    _show_metadata(appctx, selected, TimestampPolicy.FILENAME)
