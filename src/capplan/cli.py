"""Command-line interface for capplan."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Annotated

import typer

from . import context
from .config import discover_config
from .dates import is_weekend, start_of_week
from .exceptions import CapplanError
from .load import LoadStatus
from .logger import setup_logger
from .planner import CapacityPlanner
from .storage import FileKeyValueStore
from .timeline import TimelineWindow

app = typer.Typer(
    name="capplan",
    help="Resource capacity planner - daily load and overload reports",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: capplan_config.yaml)",
        ),
    ] = None,
    store: Annotated[
        Path | None,
        typer.Option(
            "--store",
            "-s",
            help="Path to the storage file (overrides storage.path from config)",
        ),
    ] = None,
) -> None:
    """Global options for capplan commands."""
    setup_logger(verbose)
    context.set_config_path(config)
    context.set_store_path(store)


def _open_planner() -> CapacityPlanner:
    """Open the planner on the configured storage file."""
    try:
        config = discover_config()
        store_path = context.get_store_path() or config.storage.path
        return CapacityPlanner.open(FileKeyValueStore(store_path), config)
    except CapplanError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


def _parse_date_option(date_str: str | None, option_name: str) -> date | None:
    """Parse a YYYY-MM-DD CLI option value."""
    if date_str is None:
        return None

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        typer.echo(
            f"Error: Invalid {option_name} '{date_str}'. Use YYYY-MM-DD format.",
            err=True,
        )
        raise typer.Exit(1) from None


def _format_percent(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@app.command()
def report(
    start: Annotated[
        str | None,
        typer.Option("--start", help="First day to show (YYYY-MM-DD); snapped to its Monday"),
    ] = None,
    weeks: Annotated[
        int | None,
        typer.Option("--weeks", "-w", help="Number of weeks to show (2-5)"),
    ] = None,
) -> None:
    """Show each resource's daily load and status over a timeline window."""
    planner = _open_planner()

    window = TimelineWindow(weeks_to_show=planner.config.timeline.weeks_to_show)
    start_date = _parse_date_option(start, "start date")
    if start_date is not None:
        window.start = start_of_week(start_date)
    if weeks is not None and not window.set_weeks(weeks):
        typer.echo("Error: --weeks must be between 2 and 5", err=True)
        raise typer.Exit(1)

    typer.echo(f"{planner.store.app_name}: {window.start} .. {window.end}")
    loads_by_resource = planner.resource_report(window.dates)
    for resource in planner.store.resources:
        typer.echo("")
        typer.echo(
            f"{resource.name} ({resource.id}), capacity {_format_percent(resource.capacity)}"
        )
        for daily in loads_by_resource[resource.id]:
            if is_weekend(daily.day):
                marker = "-"
            elif daily.status == LoadStatus.GREEN:
                marker = "ok"
            else:
                marker = daily.status.value.upper()
            typer.echo(
                f"  {daily.day.isoformat()} {daily.day:%a} "
                f"{_format_percent(daily.load):>6}  {marker}"
            )


@app.command()
def overloads() -> None:
    """List tasks whose resources are over capacity, with the days affected."""
    planner = _open_planner()

    found = False
    for task in planner.all_tasks:
        task_overloads = planner.find_overloads(task.id)
        if not task_overloads:
            continue
        found = True
        typer.echo(f"{task.id} {task.name}")
        for overload in task_overloads:
            typer.echo(
                f"  {overload.day.isoformat()} {overload.resource_id} "
                f"{_format_percent(overload.load)}/{_format_percent(overload.capacity)}"
            )

    if not found:
        typer.echo("No overloaded tasks.")


@app.command()
def export(
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Export the planner state as JSON."""
    planner = _open_planner()
    data = planner.store.export_state()

    if output:
        output.write_text(data + "\n", encoding="utf-8")
        typer.echo(f"State exported to {output}")
    else:
        typer.echo(data)


@app.command("import")
def import_(
    file: Annotated[Path, typer.Argument(help="Path to a JSON file produced by export")],
) -> None:
    """Replace the planner state with an exported JSON file."""
    planner = _open_planner()

    try:
        data = file.read_bytes()
    except OSError as e:
        typer.echo(f"Error: Cannot read {file}: {e}", err=True)
        raise typer.Exit(1) from None

    # Undecodable bytes are rejected by the parser like malformed JSON
    if not planner.store.import_state(data):
        typer.echo(f"Error: {file} is not a valid planner export; state unchanged", err=True)
        raise typer.Exit(1)

    store = planner.store
    typer.echo(
        f"Imported {len(store.resources)} resource(s), {len(store.epics)} epic(s), "
        f"{len(store.milestones)} milestone(s)"
    )


@app.command()
def assign(
    task_id: Annotated[str, typer.Argument(help="Task id")],
    resource_id: Annotated[str, typer.Argument(help="Resource id")],
    effort: Annotated[float, typer.Argument(help="Effort in percent of a day")],
) -> None:
    """Set a resource's effort on a task (adds the assignment if missing)."""
    planner = _open_planner()

    if planner.store.find_resource(resource_id) is None:
        typer.echo(f"Error: Unknown resource '{resource_id}'", err=True)
        raise typer.Exit(1)

    value = int(effort) if effort.is_integer() else effort
    if not planner.store.update_assignment(task_id, resource_id, value):
        typer.echo(f"Error: Unknown task '{task_id}'", err=True)
        raise typer.Exit(1)

    status = "overloaded" if planner.is_task_overloaded(task_id) else "ok"
    typer.echo(f"{resource_id} on {task_id}: {_format_percent(value)}% ({status})")


@app.command("delete-resource")
def delete_resource(
    resource_id: Annotated[str, typer.Argument(help="Resource id")],
) -> None:
    """Delete a resource and all of its assignments."""
    planner = _open_planner()

    if not planner.store.delete_resource(resource_id):
        typer.echo(f"Error: Unknown resource '{resource_id}'", err=True)
        raise typer.Exit(1)
    typer.echo(f"Deleted resource {resource_id}")


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
