"""
ASCII charts for weekly XP and daily energy.

Creates terminal-friendly bar charts; no colour codes, so output can be
piped or embedded in Rich markup.
"""

from .models import WeeklyScore


def create_simple_bar_chart(
    labels: list[str],
    values: list[float],
    width: int = 40,
    title: str = "",
    fmt: str = "{:.1f}",
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title
        fmt: Format string for the value printed after each bar

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max(values)
    max_label_len = max(len(l) for l in labels) if labels else 0

    lines = []

    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 5))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        bar = "█" * bar_len
        lines.append(f"{label:>{max_label_len}} │{bar} {fmt.format(value)}")

    return "\n".join(lines)


def create_weekly_xp_chart(history: list[WeeklyScore]) -> str:
    """
    Chart total XP per week, oldest first.

    Args:
        history: Weekly scores as returned by scoring.xp_history

    Returns:
        ASCII chart string
    """
    if not history:
        return "No training history."

    labels = []
    n = len(history)
    for i, week in enumerate(history):
        ago = n - 1 - i
        if ago == 0:
            labels.append(f"This week ({week.week_start})")
        elif ago == 1:
            labels.append(f"Last week ({week.week_start})")
        else:
            labels.append(f"{ago} weeks ago ({week.week_start})")

    values = [float(w.total) for w in history]
    return create_simple_bar_chart(labels, values, title="Weekly XP", fmt="{:.0f}")


def create_energy_chart(energy_by_day: dict[str, float]) -> str:
    """Chart mean pre-training energy per logged day (scale 1-5)."""
    if not energy_by_day:
        return "No entries in range."

    days = sorted(energy_by_day)
    return create_simple_bar_chart(
        days,
        [energy_by_day[d] for d in days],
        width=25,
        title="Energy (1-5)",
    )
