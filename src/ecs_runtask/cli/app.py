"""
Root Typer application for the ecs-runtask CLI.

``run`` is the action entrypoint: with no options it reads everything from the
``INPUT_*`` variables the runner sets. Options override individual inputs for
local use. ``render`` prints a cleaned task definition without calling AWS.

Usage::

    ecs-runtask run                                  # inside GitHub Actions
    ecs-runtask run -t task-def.json --count 1 \\
        --subnets "subnet-a|subnet-b" --security-groups sg-1 \\
        --wait-for-finish true --log-format console
    ecs-runtask render task-def.yml
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ecs_runtask.actions.toolkit import ActionsToolkit
from ecs_runtask.core.config import RunTaskConfig
from ecs_runtask.core.errors import ConfigError
from ecs_runtask.core.logging import configure_logging, get_logger
from ecs_runtask.core.result import Err, Ok
from ecs_runtask.ecs.client import create_ecs_client
from ecs_runtask.ecs.definition import load_task_definition
from ecs_runtask.results import RunReport
from ecs_runtask.workflow import RunTaskWorkflow

app = typer.Typer(
    name="ecs-runtask",
    help="Register an ECS task definition, run it on Fargate, and check the exit codes.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("ecs-runtask")
        except PackageNotFoundError:
            v = "0.1.0"
        typer.echo(f"ecs-runtask {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """ecs-runtask CLI - run ECS task definitions on Fargate from CI."""


# ── run ──────────────────────────────────────────────────────────────────


@app.command()
def run(
    task_definition: str | None = typer.Option(
        None, "--task-definition", "-t", help="Task definition file (YAML or JSON)."
    ),
    cluster: str | None = typer.Option(None, "--cluster", "-c", help="ECS cluster."),
    count: int | None = typer.Option(None, "--count", "-n", help="Number of tasks."),
    started_by: str | None = typer.Option(None, "--started-by", help="startedBy tag."),
    wait_for_finish: str | None = typer.Option(
        None, "--wait-for-finish", "-w", help="'true' to wait for the tasks to stop."
    ),
    wait_for_minutes: int | None = typer.Option(
        None, "--wait-for-minutes", help="Wait bound in minutes (max 360)."
    ),
    subnets: str | None = typer.Option(None, "--subnets", help="Pipe-delimited subnet IDs."),
    security_groups: str | None = typer.Option(
        None, "--security-groups", help="Pipe-delimited security group IDs."
    ),
    region: str | None = typer.Option(None, "--region", help="AWS region."),
    log_format: str | None = typer.Option(
        None, "--log-format", help="actions, console or json (default: actions in CI)."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING."),
    json_out: bool = typer.Option(False, "--json", help="Print the run report as JSON."),
) -> None:
    """Register the task definition, launch it, and optionally wait for it."""
    toolkit = ActionsToolkit()
    fmt = log_format or ("actions" if toolkit.is_actions else None)
    # The runner filters ::debug:: lines itself
    level = log_level or ("DEBUG" if fmt == "actions" else "INFO")
    configure_logging(level=level, log_format=fmt)

    try:
        config = RunTaskConfig.from_inputs(
            toolkit,
            task_definition=task_definition,
            cluster=cluster,
            count=count,
            started_by=started_by,
            wait_for_finish=wait_for_finish,
            wait_for_minutes=wait_for_minutes,
            subnets=subnets,
            security_groups=security_groups,
            region=region,
        )
    except ConfigError as e:
        toolkit.set_failed(e.message)
        raise typer.Exit(code=1) from e

    try:
        client = create_ecs_client(config.region)
        report = RunTaskWorkflow(config, client, toolkit.set_output).run()
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        toolkit.set_failed(str(e))
        raise typer.Exit(code=1) from e

    if json_out:
        typer.echo(report.model_dump_json(indent=2))
    elif report.tasks and not toolkit.is_actions:
        _print_tasks(report)

    if not report.succeeded:
        toolkit.set_failed(report.error or "Run failed")
        raise typer.Exit(code=1)


# ── render ───────────────────────────────────────────────────────────────


@app.command()
def render(
    path: str = typer.Argument(..., help="Task definition file (YAML or JSON)."),
    workspace: Path = typer.Option(
        Path("."), "--workspace", help="Base directory for relative paths."
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="DEBUG, INFO, WARNING."),
) -> None:
    """Print the task definition as it would be registered."""
    # Logs share stdout with the rendered document
    configure_logging(level=log_level, log_format="console")
    match load_task_definition(path, workspace):
        case Ok(document):
            typer.echo(json.dumps(document, indent=2, default=str))
        case Err(error):
            err_console.print(f"[bold red]Error[/bold red]: {error}")
            raise typer.Exit(code=1)


# ── Private helpers ──────────────────────────────────────────────────────


def _print_tasks(report: RunReport) -> None:
    """Render container exit codes as a Rich table."""
    table = Table(title=f"Run {report.run_id}", show_lines=False, pad_edge=False)
    for col in ("task", "container", "exit code", "reason"):
        table.add_column(col, overflow="fold")
    for task in report.tasks:
        for container in task.containers:
            style = "green" if container.exit_code == 0 else "red"
            table.add_row(
                task.task_arn.rsplit("/", 1)[-1],
                container.name or "",
                f"[{style}]{container.exit_code}[/{style}]",
                container.reason or "",
            )
    console.print(table)
