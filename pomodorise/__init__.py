"""Pomodorise: focus intervals with points, levels and streaks."""

__version__ = "0.1.0"
