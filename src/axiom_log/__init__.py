"""Identity-based training log: weekly XP, Normal streaks and integrity."""

__version__ = "0.1.0"
