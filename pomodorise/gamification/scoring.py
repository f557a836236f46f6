"""Points, levels and streaks for Pomodorise.

Point Awards
------------
- Base points by interval kind:  work 10, break 2, long_break 5
- Duration bonus:                +1 per full 5 minutes
- Streak multiplier:             +10% per streak day, capped at 3x

    points = round((base + duration // 5) * min(1 + streak * 0.1, 3.0))

Leveling Curve
--------------
Square-root progression: level *n* begins at ``(n - 1)² * 100`` points.

    level 1:    0 –  99
    level 2:  100 – 399
    level 3:  400 – 899

Streaks
-------
A streak is a count of consecutive calendar days with a completed
interval.  It survives as long as the previous completion was today or
yesterday; the hour of day doesn't matter.

Everything here is a pure function.  Callers validate inputs (duration
range, kind) before asking for points.
"""

from __future__ import annotations

import math
from datetime import date, datetime

from ..database.models import IntervalKind


# ── scoring constants (easy to adjust) ───────────────────────────────────

BASE_POINTS: dict[IntervalKind, int] = {
    IntervalKind.WORK: 10,
    IntervalKind.BREAK: 2,
    IntervalKind.LONG_BREAK: 5,
}
DURATION_BONUS_STEP = 5          # minutes per bonus point
STREAK_BONUS_PER_DAY = 0.1
MAX_STREAK_MULTIPLIER = 3.0      # reached at a 20-day streak
POINTS_PER_LEVEL_UNIT = 100


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (19.5 -> 20)."""
    rounded = math.floor(abs(value) + 0.5)
    return int(rounded if value >= 0 else -rounded)


# ── points ───────────────────────────────────────────────────────────────


def streak_multiplier(current_streak: int) -> float:
    return min(1 + current_streak * STREAK_BONUS_PER_DAY, MAX_STREAK_MULTIPLIER)


def compute_interval_points(
    duration_minutes: int,
    kind: IntervalKind | str,
    current_streak: int = 0,
) -> int:
    """Points earned for completing one interval.

    *current_streak* is the account's streak **before** this completion
    is counted.
    """
    base = BASE_POINTS[IntervalKind(kind)]
    duration_bonus = duration_minutes // DURATION_BONUS_STEP
    return _round_half_away(
        (base + duration_bonus) * streak_multiplier(current_streak)
    )


# ── level math ───────────────────────────────────────────────────────────


def level_for_points(points: int) -> int:
    """Return the level for a cumulative point total (always >= 1)."""
    if points <= 0:
        return 1
    # isqrt keeps exact boundaries (e.g. 400 -> level 3) for any size.
    return math.isqrt(points // POINTS_PER_LEVEL_UNIT) + 1


def points_threshold_for_level(level: int) -> int:
    """Cumulative points needed to move from *level* to *level + 1*."""
    return level * level * POINTS_PER_LEVEL_UNIT


def _points_floor_for_level(level: int) -> int:
    """Cumulative points at which *level* begins."""
    return (level - 1) * (level - 1) * POINTS_PER_LEVEL_UNIT


def level_progress_percent(current_points: int, current_level: int) -> int:
    """How far through *current_level* the account is, as 0-100."""
    floor = _points_floor_for_level(current_level)
    ceiling = points_threshold_for_level(current_level)
    span = ceiling - floor
    if span <= 0:
        return 0
    progress = _round_half_away((current_points - floor) / span * 100)
    return min(max(progress, 0), 100)


def points_to_next_level(points: int) -> int:
    """Points still needed to reach the next level."""
    level = level_for_points(points)
    return points_threshold_for_level(level) - max(points, 0)


def level_summary(points: int) -> dict:
    """Everything a progress display needs, in one dict."""
    level = level_for_points(points)
    return {
        "level": level,
        "points": points,
        "floor": _points_floor_for_level(level),
        "ceiling": points_threshold_for_level(level),
        "progress_percent": level_progress_percent(points, level),
        "points_to_next_level": points_to_next_level(points),
    }


# ── streaks ──────────────────────────────────────────────────────────────


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def streak_continues(last_completed_at: date | datetime, now: date | datetime) -> bool:
    """True when the last completion was today or yesterday.

    Only calendar days count: 23:59 yesterday and 00:01 today are one
    day apart, 00:01 two days ago and 23:59 today are two.
    """
    days = (_as_date(now) - _as_date(last_completed_at)).days
    return days <= 1
