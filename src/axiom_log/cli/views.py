"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of entries, XP and status.
"""

from datetime import datetime

from rich.console import Console
from rich.table import Table

from ..core.ascii_plot import create_energy_chart, create_weekly_xp_chart
from ..core.models import IDENTITY_LABELS, IdentityState, RangeStats, StatusSnapshot, WeeklyScore, WorkoutEntry
from ..core.scoring import overdrive_tier

console = Console()

IDENTITY_STYLES: dict[IdentityState, str] = {
    IdentityState.OVERDRIVE: "bold magenta",
    IdentityState.NORMAL: "green",
    IdentityState.MAINTENANCE: "cyan",
    IdentityState.SURVIVAL: "yellow",
    IdentityState.REST: "dim",
}

HEALTH_STYLES: dict[str, str] = {
    "stable": "green",
    "degraded": "yellow",
    "critical": "red",
}


def _fmt_identity(identity: IdentityState) -> str:
    style = IDENTITY_STYLES[identity]
    return f"[{style}]{IDENTITY_LABELS[identity]}[/{style}]"


def format_entry_table(entries: list[WorkoutEntry]) -> Table:
    """
    Create a Rich table displaying the entry log.

    Args:
        entries: Entries in log order

    Returns:
        Rich Table object
    """
    table = Table(title="Training Log")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Time")
    table.add_column("Identity")
    table.add_column("Energy", justify="right")
    table.add_column("Plan", style="dim")
    table.add_column("Notes")

    for i, entry in enumerate(entries, 1):
        dt = datetime.fromtimestamp(entry.timestamp)
        table.add_row(
            str(i),
            dt.strftime("%Y-%m-%d"),
            dt.strftime("%H:%M"),
            _fmt_identity(entry.identity),
            "●" * entry.energy + "○" * (5 - entry.energy),
            entry.plan_id or "-",
            entry.notes or "",
        )

    return table


def print_history(entries: list[WorkoutEntry]) -> None:
    """Print the entry log to console."""
    if not entries:
        console.print("[yellow]No entries recorded yet.[/yellow]")
        return

    console.print(format_entry_table(entries))


def format_weekly_score(score: WeeklyScore) -> Table:
    """
    Create a Rich table with the XP breakdown of one week.

    Args:
        score: WeeklyScore from scoring.weekly_score

    Returns:
        Rich Table object
    """
    table = Table(title=f"Weekly XP  (week of {score.week_start})", show_header=False)
    table.add_column("Source")
    table.add_column("XP", justify="right")

    od_label = (
        f"Overdrive (T{overdrive_tier(score.overdrive_count)})"
        if score.overdrive_count >= 2
        else "Overdrive link"
    )

    table.add_row("Sessions logged", str(score.entry_count))
    table.add_row("Identity baseline", f"+{score.base}")
    table.add_row(f"{od_label} x{score.overdrive_count}", f"+{score.overdrive_bonus}")
    table.add_row("Pre-training energy", f"+{score.energy_bonus}")
    table.add_row(f"Normal streak ({score.max_normal_streak}/6)", f"+{score.streak_bonus}")
    table.add_row("Beat last week", f"+{score.comparison_bonus}")
    table.add_section()
    table.add_row("[bold]Total[/bold]", f"[bold]{score.total}[/bold]")

    return table


def comparison_message(score: WeeklyScore) -> str:
    """One-line note on the week-over-week target."""
    if score.previous_week_total == 0:
        return "Target: no baseline for last week"
    if score.comparison_bonus > 0:
        return f"Target reached: beat last week by {score.margin} XP"
    return f"Target: beat last week's score ({score.previous_week_total} XP)"


def print_weekly_score(score: WeeklyScore) -> None:
    console.print()
    console.print(format_weekly_score(score))
    console.print(f"[dim]{comparison_message(score)}[/dim]")
    console.print()


def format_status_display(status: StatusSnapshot) -> str:
    """
    Format status snapshot as text block.

    Args:
        status: StatusSnapshot to display

    Returns:
        Formatted string with Rich markup
    """
    style = HEALTH_STYLES[status.health]
    state = _fmt_identity(status.latest_identity) if status.latest_identity is not None else "init required"

    lines = [
        "Current status",
        f"- Integrity: [{style}]{status.integrity}%[/{style}] ({status.health})",
        f"- State: {state}",
        f"- Normal streak: {status.current_streak} days",
    ]
    if status.warning:
        lines.append(
            "[red]Integrity warning: streak broken or performance decay detected. "
            "A Normal/Overdrive cycle is needed to stabilize.[/red]"
        )
    return "\n".join(lines)


def format_range_stats(stats: RangeStats) -> str:
    """Format range statistics as text block."""
    label = "all time" if stats.range_days is None else f"last {stats.range_days} days"
    lines = [
        f"Statistics ({label})",
        f"- Sessions: {stats.total_logs}",
        f"- Mean energy: {stats.avg_energy:.1f}/5",
        f"- Plans used: {stats.unique_plans}",
        f"- Stability index: {stats.stability_score}%",
    ]
    return "\n".join(lines)


def print_range_stats(stats: RangeStats) -> None:
    console.print()
    console.print(format_range_stats(stats))
    console.print()
    console.print(create_energy_chart(stats.energy_by_day))
    console.print()


def print_xp_history(history: list[WeeklyScore]) -> None:
    console.print()
    console.print(create_weekly_xp_chart(history))
    console.print()


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
