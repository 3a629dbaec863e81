"""Command-line interface for Leadtime."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from . import context
from .config import discover_config
from .engine import FeasibilityService, WorkingCalendar, order_work_items
from .exceptions import LeadtimeError
from .logger import setup_logger
from .parser import load_task
from .report import format_json, format_text, format_yaml

app = typer.Typer(
    name="leadtime",
    help="Check whether a task can be delivered by its due date given owners' commitments",
    add_completion=False,
)

EXIT_INFEASIBLE = 2


class OutputFormat(str, Enum):
    """Output formats for evaluation results."""

    TEXT = "text"
    JSON = "json"
    YAML = "yaml"


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show selections, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: leadtime_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for leadtime commands."""
    setup_logger(verbose)
    context.set_config_path(config)


@app.command()
def evaluate(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the task YAML/JSON file")] = Path(
        "task.yaml"
    ),
    *,
    obligations: Annotated[
        Path | None,
        typer.Option(
            "--obligations",
            "-o",
            help="YAML/JSON file with committed obligations (added to any in the task file)",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat, typer.Option("--format", "-f", help="Output format")
    ] = OutputFormat.TEXT,
    output: Annotated[
        Path | None, typer.Option("--output", help="Write the result to a file")
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help=f"Exit with status {EXIT_INFEASIBLE} when infeasible"),
    ] = False,
) -> None:
    """Evaluate a task and print its delivery plan or blocking reason."""
    try:
        config = discover_config(file)
        task, task_obligations = load_task(file, obligations)
        result = FeasibilityService(config).evaluate(task, task_obligations)
    except (LeadtimeError, FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    if output_format == OutputFormat.JSON:
        rendered = format_json(result)
    elif output_format == OutputFormat.YAML:
        rendered = format_yaml(result)
    else:
        rendered = format_text(result)

    if output:
        output.write_text(rendered, encoding="utf-8")
        typer.echo(f"Result written to {output}")
    else:
        typer.echo(rendered, nl=False)

    if strict and not result.feasible:
        raise typer.Exit(EXIT_INFEASIBLE)


@app.command()
def order(
    file: Annotated[Path, typer.Argument(help="Path to the task YAML/JSON file")] = Path(
        "task.yaml"
    ),
) -> None:
    """Print the order in which teams are scheduled."""
    try:
        task, _ = load_task(file)
        teams = order_work_items(task.work_items)
    except LeadtimeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    for index, team in enumerate(teams, start=1):
        prerequisites = task.work_items[team].depends_on
        suffix = f" (after {', '.join(prerequisites)})" if prerequisites else ""
        typer.echo(f"{index}. {team}{suffix}")


@app.command()
def advance(
    start: Annotated[str, typer.Argument(help="Start instant (ISO date or datetime)")],
    hours: Annotated[float, typer.Argument(help="Working hours to add")],
) -> None:
    """Add working hours to an instant using the configured calendar."""
    try:
        config = discover_config()
        parsed = datetime.fromisoformat(start)
        result = WorkingCalendar(config.calendar).advance_working_hours(parsed, hours)
    except (LeadtimeError, FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(result.isoformat())


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
