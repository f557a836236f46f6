"""Gamification package."""

from .scoring import (
    compute_interval_points,
    level_for_points,
    points_threshold_for_level,
    level_progress_percent,
    points_to_next_level,
    level_summary,
    streak_continues,
    streak_multiplier,
    BASE_POINTS,
    MAX_STREAK_MULTIPLIER,
)

__all__ = [
    "compute_interval_points",
    "level_for_points",
    "points_threshold_for_level",
    "level_progress_percent",
    "points_to_next_level",
    "level_summary",
    "streak_continues",
    "streak_multiplier",
    "BASE_POINTS",
    "MAX_STREAK_MULTIPLIER",
]
