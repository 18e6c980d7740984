"""Entry log commands: init, log, history, delete-entry."""

from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.dates import local_day
from ...core.models import IDENTITY_LABELS, WorkoutEntry
from ...io.serializers import ValidationError, parse_date_time, validate_energy, validate_identity
from .. import views
from ..app import HistoryPathOption, app, get_store


@app.command()
def init(history_path: HistoryPathOption = None) -> None:
    """
    Create the entry log file.
    """
    store = get_store(history_path)

    if store.exists():
        views.print_info(f"Entry log already exists: {store.history_path}")
        return

    store.init()
    views.print_success(f"Created entry log: {store.history_path}")


@app.command()
def log(
    identity: Annotated[
        str,
        typer.Option("--identity", "-i", help="overdrive, normal, maintenance, survival, rest (or rank 0-4)"),
    ],
    energy: Annotated[
        int,
        typer.Option("--energy", "-e", help="Pre-training energy 1-5"),
    ],
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Day of the session, YYYY-MM-DD (default: today)"),
    ] = None,
    time: Annotated[
        Optional[str],
        typer.Option("--time", "-t", help="Local time HH:MM (default: now, or 12:00 with --date)"),
    ] = None,
    plan_id: Annotated[
        Optional[str],
        typer.Option("--plan-id", help="Reference to an external training plan"),
    ] = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", "-n", help="Free-text notes"),
    ] = None,
    history_path: HistoryPathOption = None,
) -> None:
    """
    Log a training session.
    """
    store = get_store(history_path)

    if not store.exists():
        views.print_error(f"Entry log not found: {store.history_path}")
        views.print_info("Run 'init' first to create the entry log.")
        raise typer.Exit(1)

    try:
        state = validate_identity(identity)
        level = validate_energy(energy)
        if date is None and time is None:
            timestamp = datetime.now().timestamp()
        else:
            day = date or datetime.now().strftime("%Y-%m-%d")
            timestamp = parse_date_time(day, time or "12:00")
        entry = WorkoutEntry(
            timestamp=timestamp,
            identity=state,
            energy=level,
            plan_id=plan_id,
            notes=notes,
        )
        same_day = [
            e for e in store.load_entries() if local_day(e.timestamp) == local_day(entry.timestamp)
        ]
        position = store.append_entry(entry)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    when = datetime.fromtimestamp(entry.timestamp).strftime("%Y-%m-%d %H:%M")
    views.print_success(
        f"Logged #{position}: {when} {IDENTITY_LABELS[entry.identity]} (energy {entry.energy})"
    )
    if same_day:
        views.print_warning(
            f"{when[:10]} already had an entry; "
            "only the day's latest entry counts for streaks and integrity"
        )


@app.command()
def history(history_path: HistoryPathOption = None) -> None:
    """
    Show the full entry log.
    """
    store = get_store(history_path)

    try:
        entries = store.load_entries()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_history(entries)


@app.command("delete-entry")
def delete_entry(
    entry_id: Annotated[int, typer.Argument(help="Entry ID from the # column of 'history'")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation"),
    ] = False,
    history_path: HistoryPathOption = None,
) -> None:
    """
    Remove an entry by its ID.

    Use 'history' to see entry IDs in the # column.
    """
    store = get_store(history_path)

    try:
        entries = store.load_entries()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not entries:
        views.print_error("No entries in log.")
        raise typer.Exit(1)

    if entry_id < 1 or entry_id > len(entries):
        views.print_error(f"Entry ID must be between 1 and {len(entries)}")
        raise typer.Exit(1)

    target = entries[entry_id - 1]
    when = datetime.fromtimestamp(target.timestamp).strftime("%Y-%m-%d %H:%M")
    views.console.print(f"Entry to delete: [bold]{when}[/bold] ({IDENTITY_LABELS[target.identity]})")

    if not force and not views.confirm_action("Delete this entry?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete_entry_at(entry_id - 1)
    views.print_success(f"Deleted entry #{entry_id}: {when} ({IDENTITY_LABELS[target.identity]})")
