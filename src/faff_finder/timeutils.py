"""Duration arithmetic and formatting helpers."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Optional, Tuple

from faff_finder.constants import MS_PER_MINUTE, MS_PER_SECOND

_ONE_MS = timedelta(milliseconds=1)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def elapsed_ms(start: Optional[datetime], end: Optional[datetime]) -> Optional[float]:
    """Milliseconds from start to end, or None if either timestamp is missing."""
    if start is None or end is None:
        return None
    return (end - start) / _ONE_MS


def minutes_and_hours(duration_ms: float) -> Tuple[float, float]:
    """Split a millisecond duration into the (minutes, hours) pair used for bucket tests."""
    minutes = duration_ms / MS_PER_MINUTE
    return minutes, minutes / 60


def rounded_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds between two instants, never negative."""
    return max(0, round_half_up((end - start) / _ONE_MS / MS_PER_SECOND))


def format_duration(total_seconds: int) -> str:
    """
    Format seconds as a short human-readable duration.

    Examples: 45 -> '0m 45s', 3665 -> '1h 1m 5s'
    """
    total_seconds = int(total_seconds)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60

    if total_seconds >= 3600:
        return f"{hours}h {minutes}m {seconds}s"
    return f"{minutes}m {seconds}s"
