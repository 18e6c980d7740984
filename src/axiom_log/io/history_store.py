"""
JSONL-based storage for the workout entry log.

Feeds the CLI; the scoring core never touches the file system.
"""

import json
import logging
from pathlib import Path

from ..core.engine.config_loader import get_config_home
from ..core.models import WorkoutEntry
from .serializers import ValidationError, dict_to_entry, entry_to_json_line

logger = logging.getLogger(__name__)


class HistoryStore:
    """
    Manages the entry log stored in JSONL format.

    The file contains one JSON object per line, kept in timestamp order.
    """

    def __init__(self, history_path: str | Path):
        """
        Initialize the store.

        Args:
            history_path: Path to the JSONL entry log
        """
        self.history_path = Path(history_path)

    def exists(self) -> bool:
        """Check if the entry log exists."""
        return self.history_path.exists()

    def init(self) -> None:
        """
        Create an empty entry log if it doesn't exist.

        Creates parent directories if needed.
        """
        self.history_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.history_path.exists():
            self.history_path.touch()

    def load_entries(self) -> list[WorkoutEntry]:
        """
        Load all entries from the log.

        Returns:
            List of WorkoutEntry, sorted by timestamp

        Raises:
            FileNotFoundError: If the log doesn't exist
            ValidationError: If a line cannot be parsed
        """
        if not self.history_path.exists():
            raise FileNotFoundError(
                f"Entry log not found: {self.history_path}. Run 'init' first."
            )

        entries: list[WorkoutEntry] = []

        with open(self.history_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    data = json.loads(line)
                    if not isinstance(data, dict):
                        raise ValidationError("expected a JSON object")
                    entries.append(dict_to_entry(data))
                except (json.JSONDecodeError, ValidationError, ValueError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.history_path}: {e}"
                    ) from e

        entries.sort(key=lambda e: e.timestamp)
        logger.debug("Loaded %d entries from %s", len(entries), self.history_path)
        return entries

    def append_entry(self, entry: WorkoutEntry) -> int:
        """
        Insert an entry in timestamp order.

        Entries sharing a timestamp keep insertion order (the new one last).

        Returns:
            1-based position of the new entry in the sorted log
        """
        entries = self.load_entries()

        insert_idx = len(entries)
        for i, existing in enumerate(entries):
            if entry.timestamp < existing.timestamp:
                insert_idx = i
                break

        entries.insert(insert_idx, entry)
        self._write_entries(entries)
        return insert_idx + 1

    def delete_entry_at(self, index: int) -> WorkoutEntry:
        """
        Delete the entry at the given 0-based index in the sorted log.

        Returns:
            The removed entry

        Raises:
            IndexError: If index is out of range
        """
        entries = self.load_entries()
        if index < 0 or index >= len(entries):
            raise IndexError(f"Entry index {index} out of range (0-{len(entries) - 1})")
        removed = entries.pop(index)
        self._write_entries(entries)
        return removed

    def _write_entries(self, entries: list[WorkoutEntry]) -> None:
        with open(self.history_path, "w", encoding="utf-8") as f:
            for entry in entries:
                f.write(entry_to_json_line(entry) + "\n")


def get_default_history_path() -> Path:
    """Default entry log location: <config home>/entries.jsonl."""
    return get_config_home() / "entries.jsonl"
