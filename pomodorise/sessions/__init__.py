"""Interval session package."""

from .lifecycle import IntervalManager, advance_task_progress

__all__ = ["IntervalManager", "advance_task_progress"]
