"""Common CLI options for the CLI."""

import typer

ProfileOpt = typer.Option(
    None,
    "--profile",
    "-p",
    help="Databricks CLI profile (from ~/.databrickscfg), used with --dbfs",
)

DbfsOpt = typer.Option(
    False,
    "--dbfs",
    help="Read history folders from DBFS instead of the local filesystem",
)

ClusterConfOpt = typer.Option(
    [],
    "--cluster-conf",
    "-c",
    help="Hadoop *-site.xml file with cluster addresses. This is reusable.",
    show_default=False,
)

SetOpt = typer.Option(
    [],
    "--set",
    help="Cluster config override (key=value). This is reusable.",
    show_default=False,
)

JobIdRegexOpt = typer.Option(
    None,
    "--job-id-regex",
    help="Regex job ids must fully match (default: $JOBHIST_JOB_ID_REGEX or application_\\d+_\\d+)",
)

TimestampsOpt = typer.Option(
    "filename",
    "--timestamps",
    help="Where start/completion times come from: 'filename' or 'mtime'",
)

UserOpt = typer.Option(
    None,
    "--user",
    "-u",
    help="Owner of the job, used in container log links",
)

JobIdOpt = typer.Option(
    None,
    "--job-id",
    help="Job the events belong to",
)

TimeZoneOpt = typer.Option(
    "UTC",
    "--tz",
    help="Time zone of the partition (UTC, GMT+6, Europe/Brussels, ...)",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Enable debug logging",
)
