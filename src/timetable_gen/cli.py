"""CLI entry point for timetable generation."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .exceptions import TimetableError
from .exporters import get_exporter
from .scheduler import (
    DEFAULT_MAX_ATTEMPTS,
    AuditMode,
    ConfigLoader,
    ConflictReport,
    ConstraintIndex,
    ScheduleResult,
    audit_conflicts,
    export_schedule_json,
    generate,
    load_schedule,
)
from .scheduler.excel_generator import generate_schedule_excel
from .scheduler.utils import collect_reference_warnings

app = typer.Typer(
    name="timetable-gen",
    help="Generate and audit weekly university timetables",
    add_completion=False,
)
console = Console()

DEFAULT_OUTPUT = Path("output/schedule.json")


class OutputFormat(str, Enum):
    """Output format options."""

    json = "json"
    csv = "csv"
    excel = "excel"


def _configure_logging(verbose: bool) -> None:
    """Route library logging through Rich; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_inputs(input_dir: Path) -> ConfigLoader:
    """Load the input directory or exit with a readable error."""
    if not input_dir.is_dir():
        console.print(f"[bold red]Error:[/bold red] Input directory not found: {input_dir}")
        raise typer.Exit(1)

    try:
        with console.status("[bold green]Loading input files..."):
            return ConfigLoader(input_dir)
    except (TimetableError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


def _load_schedule_file(schedule_file: Path) -> dict:
    """Read a schedule JSON file or exit with a readable error."""
    if not schedule_file.exists():
        console.print(f"[bold red]Error:[/bold red] File not found: {schedule_file}")
        raise typer.Exit(1)

    try:
        return load_schedule(schedule_file)
    except (TimetableError, json.JSONDecodeError) as e:
        console.print(f"[bold red]Error:[/bold red] Cannot read {schedule_file.name}: {e}")
        raise typer.Exit(1)


@app.command("generate")
def generate_command(
    input_dir: Annotated[
        Path,
        typer.Argument(help="Directory with courses.csv, instructors.csv, classrooms.csv"),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output JSON file path"),
    ] = None,
    timetable_id: Annotated[
        int,
        typer.Option("--timetable-id", "-t", help="Timetable id stamped on every row"),
    ] = 1,
    seed: Annotated[
        Optional[int],
        typer.Option("--seed", "-s", help="Random seed for reproducible output"),
    ] = None,
    max_attempts: Annotated[
        int,
        typer.Option("--max-attempts", help="Contiguous search attempts per course", min=1),
    ] = DEFAULT_MAX_ATTEMPTS,
    time_limit: Annotated[
        Optional[float],
        typer.Option("--time-limit", help="Wall-clock seconds for the contiguous search"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show detailed output"),
    ] = False,
) -> None:
    """Generate a timetable from an input directory."""
    _configure_logging(verbose)
    config = _load_inputs(input_dir)

    courses = config.courses.courses
    if not courses:
        console.print("[bold yellow]Warning:[/bold yellow] No courses found in input")
        raise typer.Exit(1)

    console.print(f"\n[bold]Timetable Generation for:[/bold] {input_dir}")
    console.print(f"  Courses: {len(courses)}")
    console.print(f"  Classrooms: {len(config.rooms.classrooms)}")
    console.print(f"  Constraints: {len(config.constraints)}")
    console.print(
        f"  Grid: {len(config.grid.days)} days x {config.grid.slot_count} slots"
    )

    try:
        with console.status("[bold green]Generating timetable..."):
            result = generate(
                courses,
                config.instructors.instructors,
                config.rooms.classrooms,
                config.constraints,
                timetable_id,
                seed=seed,
                grid=config.grid,
                max_attempts=max_attempts,
                time_limit=time_limit,
            )
    except (TimetableError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    _show_result(result, config.courses.get_codes(), verbose)

    output_path = output or DEFAULT_OUTPUT
    if output_path.suffix != ".json":
        output_path = output_path.with_suffix(".json")
    with console.status(f"[bold green]Exporting to {output_path}..."):
        export_schedule_json(result, output_path)
    console.print(f"\n[bold green]✓[/bold green] Schedule exported to: {output_path}")


def _show_result(result: ScheduleResult, course_codes: dict[int, str], verbose: bool) -> None:
    """Print the generation summary, diagnostics and warnings."""
    stats = result.statistics
    console.print("\n[bold]Results:[/bold]")
    console.print(f"  Scheduled classes: {result.total_scheduled}")
    console.print(f"  Fully placed courses: {stats.fully_placed}/{stats.total_courses}")
    console.print(f"  Slots placed: {stats.slots_achieved}/{stats.slots_requested}")

    if stats.by_day:
        console.print("\n[bold]Distribution by day:[/bold]")
        for day, count in stats.by_day.items():
            console.print(f"  {day}: {count}")

    if result.diagnostics:
        table = Table(title=f"Under-scheduled courses ({len(result.diagnostics)})")
        table.add_column("Course", style="cyan")
        table.add_column("Slots", style="yellow")
        table.add_column("Reason", style="red")
        if verbose:
            table.add_column("Details", style="white", max_width=60)

        for diagnostic in result.diagnostics:
            row = [
                diagnostic.course_code,
                f"{diagnostic.slots_achieved}/{diagnostic.slots_requested}",
                diagnostic.reason.value,
            ]
            if verbose:
                row.append(diagnostic.details)
            table.add_row(*row)
        console.print(table)

    if result.budget_exceeded:
        console.print(
            f"\n[bold yellow]Search budget exceeded ({len(result.budget_exceeded)}):[/bold yellow]"
        )
        for code in result.budget_exceeded:
            console.print(f"  [yellow]• {code}[/yellow]")

    if result.warnings:
        console.print(f"\n[bold yellow]Warnings ({len(result.warnings)}):[/bold yellow]")
        for warning in result.warnings[:10]:
            console.print(f"  [yellow]• {warning}[/yellow]")
        if len(result.warnings) > 10:
            console.print(f"  [yellow]... and {len(result.warnings) - 10} more[/yellow]")

    if verbose and result.scheduled_classes:
        table = Table(title="Scheduled classes")
        table.add_column("Course", style="cyan")
        table.add_column("Day", style="blue")
        table.add_column("Time", style="green")
        table.add_column("Room", style="magenta")
        table.add_column("Instructor", style="yellow")
        for row in result.scheduled_classes:
            table.add_row(
                course_codes.get(row.course_id, str(row.course_id)),
                row.day,
                f"{row.start_time}-{row.end_time}",
                str(row.classroom_id),
                str(row.instructor_id),
            )
        console.print(table)


@app.command()
def audit(
    schedule_file: Annotated[
        Path,
        typer.Argument(help="Schedule JSON file (full export or list of rows)"),
    ],
    overlap: Annotated[
        bool,
        typer.Option("--overlap", help="Compare time intervals instead of exact slots"),
    ] = False,
) -> None:
    """Check a schedule for instructor and classroom double bookings.

    Exits with code 1 when conflicts are found or rows could not be read.
    """
    data = _load_schedule_file(schedule_file)
    mode = AuditMode.OVERLAP if overlap else AuditMode.EXACT
    report = audit_conflicts(data["scheduled_classes"], mode=mode)

    console.print(f"\n[bold]Audit Results for:[/bold] {schedule_file.name}")
    console.print(f"  Rows checked: {len(data['scheduled_classes'])}")
    console.print(f"  Mode: {mode.value}")

    _show_conflicts(report)

    if report.has_conflicts or report.invalid_rows:
        raise typer.Exit(1)


def _show_conflicts(report: ConflictReport) -> None:
    """Print conflict groups as tables."""
    if not report.has_conflicts:
        console.print("[bold green]✓ No conflicts found[/bold green]")

    for title, groups in (
        ("Instructor conflicts", report.instructor_conflicts),
        ("Classroom conflicts", report.classroom_conflicts),
    ):
        if not groups:
            continue
        table = Table(title=f"{title} ({len(groups)})")
        table.add_column("Id", style="cyan")
        table.add_column("Day", style="blue")
        table.add_column("Time", style="green")
        table.add_column("Courses", style="red")
        for group in groups:
            table.add_row(
                str(group.entity_id),
                group.day,
                f"{group.start_time}-{group.end_time}",
                ", ".join(str(c.course_id) for c in group.classes),
            )
        console.print(table)

    if report.invalid_rows:
        console.print(
            f"\n[bold yellow]Rows skipped ({len(report.invalid_rows)}):[/bold yellow]"
        )
        for invalid in report.invalid_rows:
            console.print(f"  [yellow]• row {invalid.position}: {escape(invalid.reason)}[/yellow]")

    console.print(f"\n[dim]{report.student_conflicts_note}[/dim]")


@app.command()
def validate(
    input_dir: Annotated[
        Path,
        typer.Argument(help="Directory with input files"),
    ],
) -> None:
    """Validate input files without generating a timetable."""
    config = _load_inputs(input_dir)

    console.print(f"\n[bold]Validation Results for:[/bold] {input_dir}")
    console.print("[bold green]✓ Input is valid[/bold green]")

    overview_table = Table(title="Overview", show_header=False)
    overview_table.add_column("Item", style="cyan")
    overview_table.add_column("Count", style="green")
    overview_table.add_row("Courses", str(len(config.courses.courses)))
    overview_table.add_row("Instructors", str(len(config.instructors.instructors)))
    overview_table.add_row("Classrooms", str(len(config.rooms.classrooms)))
    overview_table.add_row("Constraints", str(len(config.constraints)))
    overview_table.add_row("Days", ", ".join(config.grid.days))
    overview_table.add_row("Time slots", str(config.grid.slot_count))
    console.print(overview_table)

    warnings = collect_reference_warnings(
        config.courses.courses,
        {i.id for i in config.instructors.instructors},
        {r.id for r in config.rooms.classrooms},
        ConstraintIndex.build(config.constraints),
        config.grid,
    )
    if warnings:
        console.print(f"\n[bold yellow]Warnings ({len(warnings)}):[/bold yellow]")
        for warning in warnings:
            console.print(f"  [yellow]• {warning}[/yellow]")

    largest = max((r.capacity for r in config.rooms.classrooms), default=0)
    too_large = [c for c in config.courses.courses if c.capacity > largest]
    if too_large:
        console.print(
            f"\n[bold yellow]Courses larger than every classroom ({len(too_large)}):[/bold yellow]"
        )
        for course in too_large:
            console.print(f"  [yellow]• {course.code} needs {course.capacity} seats[/yellow]")


@app.command()
def export(
    schedule_file: Annotated[
        Path,
        typer.Argument(help="Schedule JSON file from the generate command"),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output file or directory path"),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option("-f", "--format", help="Output format"),
    ] = OutputFormat.csv,
) -> None:
    """Export a schedule JSON file to CSV, Excel or JSON."""
    data = _load_schedule_file(schedule_file)
    try:
        result = ScheduleResult.from_dict(data)
    except (TimetableError, KeyError, TypeError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] Invalid schedule in {schedule_file.name}: {e}")
        raise typer.Exit(1)
    exporter = get_exporter(format.value)

    if format == OutputFormat.csv:
        # CSV exports to directory
        output_path = output or schedule_file.parent / schedule_file.stem
    else:
        suffix = ".xlsx" if format == OutputFormat.excel else ".json"
        output_path = output or schedule_file.with_name(f"{schedule_file.stem}_export{suffix}")
        if not output_path.suffix:
            output_path = output_path.with_suffix(suffix)

    with console.status(f"[bold green]Exporting to {format.value}..."):
        exporter.export(result, output_path)

    console.print(f"\n[bold green]✓[/bold green] Exported to: {output_path}")


@app.command("generate-excel")
def generate_excel(
    schedule_file: Annotated[
        Path,
        typer.Argument(help="Schedule JSON file"),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output .xlsx file"),
    ] = None,
    input_dir: Annotated[
        Optional[Path],
        typer.Option("--input-dir", "-i", help="Input directory, used for course codes"),
    ] = None,
) -> None:
    """Generate a weekly grid workbook (one sheet per classroom)."""
    if not schedule_file.exists():
        console.print(f"[bold red]Error:[/bold red] File not found: {schedule_file}")
        raise typer.Exit(1)

    course_codes = _load_inputs(input_dir).courses.get_codes() if input_dir else None
    output_path = output or Path("output/timetable.xlsx")

    try:
        with console.status("[bold green]Generating Excel file..."):
            generated = generate_schedule_excel(schedule_file, output_path, course_codes)
    except (TimetableError, KeyError, TypeError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] Invalid schedule in {schedule_file.name}: {e}")
        raise typer.Exit(1)

    console.print(f"\n[bold green]✓[/bold green] Generated: {generated}")


if __name__ == "__main__":
    app()
