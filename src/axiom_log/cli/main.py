"""
CLI entry point using Typer.

Provides commands for the identity training log:
- init: Create the entry log
- log: Log a training session
- history: Show the entry log
- delete-entry: Remove an entry
- status: Integrity, Normal streak, latest state
- xp: Weekly XP breakdown
- xp-history: XP per week chart
- stats: Range statistics
"""

import logging
from typing import Annotated

import typer

from .app import app
from .commands import analysis, entries  # noqa: F401  (registers commands)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """
    Identity-based training log with weekly XP, streaks and integrity.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    app()
