"""CLI entry point for the hostel rules engine."""

import json
import logging
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from .allocation import AllocationResolver
from .batch import BatchValidationCoordinator
from .charges import ChargeCalculator
from .config import ConfigLoader
from .constants import ROW_FIELDS
from .exceptions import ConfigurationError, InputFileError, InvalidOperationError, RulesEngineError
from .exporters import get_exporter
from .ingest import load_rows
from .lifecycle import OccupancyLifecycle, is_checked_in, is_checked_out
from .models import StaffGuestOccupant, ValidationMode
from .reference import academic_year_window
from .validators import RowValidator, ValidationContext

app = typer.Typer(
    name="hostel-rules",
    help="Validate hostel admission spreadsheets and compute staff/guest charges",
    add_completion=False,
)
console = Console()

DEFAULT_CONFIG_DIR = Path("reference")


class OutputFormat(str, Enum):
    """Output format options."""

    json = "json"
    csv = "csv"
    excel = "excel"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _parse_today(value: str | None) -> date:
    if not value:
        return date.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        console.print(f"[bold red]Error:[/bold red] Invalid date: {value}. Use YYYY-MM-DD.")
        raise typer.Exit(1)


def _load_config(config_dir: Path) -> ConfigLoader:
    try:
        return ConfigLoader(config_dir)
    except ConfigurationError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


def _load_occupant(path: Path) -> StaffGuestOccupant:
    if not path.exists():
        console.print(f"[bold red]Error:[/bold red] File not found: {path}")
        raise typer.Exit(1)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return StaffGuestOccupant.from_dict(data)
    except (KeyError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] Invalid occupant record: {e}")
        raise typer.Exit(1)


@app.command()
def validate(
    input_file: Annotated[
        Path,
        typer.Argument(help="Spreadsheet (.xlsx/.csv) of student rows"),
    ],
    config_dir: Annotated[
        Path,
        typer.Option("-c", "--config", help="Directory with room/course configuration"),
    ] = DEFAULT_CONFIG_DIR,
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output file or directory for the report"),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option("-f", "--format", help="Report format"),
    ] = OutputFormat.json,
    update: Annotated[
        bool,
        typer.Option("--update", help="Validate as edits of existing students"),
    ] = False,
    require_branch: Annotated[
        bool,
        typer.Option("--require-branch", help="Report rows without a Branch"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show detailed output"),
    ] = False,
) -> None:
    """Validate student rows and report every error per row."""
    _setup_logging(verbose)

    try:
        rows = load_rows(input_file)
    except InputFileError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    config = _load_config(config_dir)
    validator = RowValidator(config.reference_data())
    context = ValidationContext(
        mode=ValidationMode.UPDATE if update else ValidationMode.CREATE,
        require_branch=require_branch,
    )

    with console.status("[bold green]Validating rows..."):
        coordinator = BatchValidationCoordinator(rows, validator, context)

    summary = coordinator.summary()
    console.print(f"\n[bold]Validation Results for:[/bold] {input_file.name}")
    console.print(f"  Total rows: {summary.total_rows}")
    console.print(f"  [green]Valid rows: {summary.valid_rows}[/green]")
    console.print(f"  [red]Invalid rows: {summary.invalid_rows}[/red]")

    partition = coordinator.partition()
    if partition.invalid_rows:
        table = Table(title="Invalid Rows")
        table.add_column("Row", style="cyan")
        table.add_column("Roll Number", style="blue")
        table.add_column("Field", style="magenta")
        table.add_column("Error", style="red")

        for invalid in partition.invalid_rows[:50]:
            for field in ROW_FIELDS:
                if field in invalid.errors:
                    table.add_row(
                        str(invalid.index + 1),
                        invalid.row.roll_number or "",
                        field,
                        invalid.errors[field],
                    )

        console.print(table)
        if len(partition.invalid_rows) > 50:
            console.print(f"  [yellow]... and {len(partition.invalid_rows) - 50} more rows[/yellow]")

    if output:
        exporter = get_exporter(format.value)
        if format == OutputFormat.csv:
            output_path = output if output.is_dir() else output.parent / output.stem
        else:
            suffix = ".xlsx" if format == OutputFormat.excel else ".json"
            output_path = output if output.suffix else output.with_suffix(suffix)

        with console.status(f"[bold green]Exporting to {format.value}..."):
            exporter.export(coordinator, output_path)
        console.print(f"\n[bold green]✓[/bold green] Report exported to: {output_path}")

    if summary.invalid_rows:
        raise typer.Exit(1)


@app.command()
def charge(
    occupant_file: Annotated[
        Path,
        typer.Argument(help="Occupant JSON record"),
    ],
    config_dir: Annotated[
        Path,
        typer.Option("-c", "--config", help="Directory with rate-settings.json"),
    ] = DEFAULT_CONFIG_DIR,
    today: Annotated[
        Optional[str],
        typer.Option("--today", help="Reference date YYYY-MM-DD for open stays"),
    ] = None,
) -> None:
    """Compute the charge for a staff/guest occupant."""
    occupant = _load_occupant(occupant_file)
    rates = _load_config(config_dir).rates.settings

    try:
        result = ChargeCalculator().compute_charge(occupant, rates, _parse_today(today))
    except InvalidOperationError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"\n[bold]Charge for:[/bold] {occupant.name or occupant.id or occupant_file.name}")
    console.print(f"  Amount: [green]{result.amount}[/green]")
    console.print(f"  Breakdown: {result.breakdown_text}")
    if result.override_amount is not None:
        style = "yellow" if result.is_overridden else "green"
        console.print(f"  Recorded charges: [{style}]{result.override_amount}[/{style}]")


@app.command()
def status(
    occupant_file: Annotated[
        Path,
        typer.Argument(help="Occupant JSON record"),
    ],
    today: Annotated[
        Optional[str],
        typer.Option("--today", help="Reference date YYYY-MM-DD"),
    ] = None,
) -> None:
    """Show validity (active/expired) and check-in status of an occupant."""
    occupant = _load_occupant(occupant_file)
    reference_day = _parse_today(today)

    try:
        state = OccupancyLifecycle().state(occupant, reference_day)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    style = "green" if state.value == "active" else "red"
    console.print(f"\n[bold]Status for:[/bold] {occupant.name or occupant.id or occupant_file.name}")
    console.print(f"  Validity: [{style}]{state.value.capitalize()}[/{style}]")
    if is_checked_out(occupant):
        stay = "Checked Out"
    elif is_checked_in(occupant):
        stay = "Checked In"
    else:
        stay = "Not checked in"
    console.print(f"  Stay: {stay}")


@app.command()
def renew(
    occupant_file: Annotated[
        Path,
        typer.Argument(help="Occupant JSON record"),
    ],
    month: Annotated[
        str,
        typer.Argument(help="Month to renew for, YYYY-MM"),
    ],
    config_dir: Annotated[
        Path,
        typer.Option("-c", "--config", help="Directory with rate-settings.json"),
    ] = DEFAULT_CONFIG_DIR,
    room: Annotated[
        Optional[str],
        typer.Option("--room", help="New room number"),
    ] = None,
    bed: Annotated[
        Optional[str],
        typer.Option("--bed", help="New bed within the room"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Write the renewed record to this JSON file"),
    ] = None,
    today: Annotated[
        Optional[str],
        typer.Option("--today", help="Reference date YYYY-MM-DD"),
    ] = None,
) -> None:
    """Renew a monthly staff occupant for a new month."""
    occupant = _load_occupant(occupant_file)
    rates = _load_config(config_dir).rates.settings

    try:
        result = OccupancyLifecycle().renew(
            occupant, month, rates, _parse_today(today), room_number=room, bed_number=bed
        )
    except RulesEngineError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"\n[bold green]✓[/bold green] Renewed for {result.occupant.selected_month}")
    console.print(f"  Amount: [green]{result.charge.amount}[/green]")
    console.print(f"  Breakdown: {result.charge.breakdown_text}")

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", encoding="utf-8") as f:
            json.dump(result.occupant.to_dict(), f, indent=2, ensure_ascii=False)
        console.print(f"  Saved to: {output}")


@app.command()
def rooms(
    gender: Annotated[
        str,
        typer.Argument(help="Gender (Male/Female or an alias)"),
    ],
    category: Annotated[
        str,
        typer.Argument(help="Room category (A+, A, B+, B, C)"),
    ],
    config_dir: Annotated[
        Path,
        typer.Option("-c", "--config", help="Directory with rooms.csv and assignments.csv"),
    ] = DEFAULT_CONFIG_DIR,
    hostel: Annotated[
        Optional[str],
        typer.Option("--hostel", help="Restrict to one hostel"),
    ] = None,
    free_slots: Annotated[
        bool,
        typer.Option("--free-slots", help="List free beds and lockers per room"),
    ] = False,
) -> None:
    """Show room availability for a gender and category."""
    resolver = AllocationResolver(_load_config(config_dir).repository())
    availability = resolver.availability_for(gender, category, hostel)

    if not availability:
        console.print(f"[yellow]No rooms found for {gender} {category}[/yellow]")
        return

    table = Table(title=f"Rooms: {availability[0].gender} {availability[0].category}")
    table.add_column("Room", style="cyan")
    table.add_column("Occupied", justify="right")
    table.add_column("Beds", justify="right")
    table.add_column("Available", justify="right", style="green")
    table.add_column("Occupancy", justify="right")
    if free_slots:
        table.add_column("Free beds")
        table.add_column("Free lockers")

    for entry in availability:
        cells = [
            entry.room_number,
            str(entry.student_count),
            str(entry.bed_count),
            str(entry.available_beds),
            f"{entry.occupancy_rate:.0%}",
        ]
        if free_slots:
            slots = resolver.bed_locker_availability(entry.room_number)
            cells += [", ".join(slots.available_beds), ", ".join(slots.available_lockers)]
        table.add_row(*cells)

    console.print(table)


@app.command()
def batches(
    course: Annotated[
        str,
        typer.Argument(help="Course name, code or id"),
    ],
    config_dir: Annotated[
        Path,
        typer.Option("-c", "--config", help="Directory with courses.csv"),
    ] = DEFAULT_CONFIG_DIR,
    start_year: Annotated[
        int,
        typer.Option("--start", help="First batch start year"),
    ] = 2022,
) -> None:
    """List selectable batches for a course."""
    reference = _load_config(config_dir).reference_data()
    for batch in reference.batches_for_course(course, start_year=start_year):
        console.print(batch)


@app.command("academic-years")
def academic_years() -> None:
    """List academic years around the current year."""
    for year in academic_year_window():
        console.print(year)


if __name__ == "__main__":
    app()
