"""Fold together periods that sit close to each other in time."""

from __future__ import annotations

from typing import List, Sequence

from faff_finder.constants import GAP_MERGE_TOLERANCE_MS, MS_PER_MINUTE, SLOW_MERGE_TOLERANCE_MS
from faff_finder.models import Gap, GapPeriod, Period, SlowPeriod
from faff_finder.timeutils import elapsed_ms, round_half_up


def merge_gaps(first: Gap, second: Gap) -> Gap:
    """Gap detail spanning from the start of ``first`` to the end of ``second``."""
    duration_ms = elapsed_ms(first.start_time, second.end_time)
    duration_minutes = round_half_up(duration_ms / MS_PER_MINUTE)
    return Gap(
        start_time=first.start_time,
        end_time=second.end_time,
        duration_ms=duration_ms,
        duration_minutes=duration_minutes,
        duration_hours=duration_minutes / 60,
        start_distance=first.start_distance,
        end_distance=second.end_distance,
        start_gps_point=first.start_gps_point,
        end_gps_point=second.end_gps_point,
    )


def combine_periods(current: Period, following: Period) -> Period:
    """Replace two neighbouring periods with one covering both.

    Two gaps stay a gap (with recomputed gap detail and no samples); any other
    pairing becomes a slow period carrying the summed sample count.
    """
    gps_points = current.gps_points + following.gps_points

    if current.is_gap and following.is_gap:
        return GapPeriod(
            start_time=current.start_time,
            end_time=following.end_time,
            start_distance=current.start_distance,
            end_distance=following.end_distance,
            gps_points=gps_points,
            gap=merge_gaps(current.gap, following.gap),
        )

    return SlowPeriod(
        start_time=current.start_time,
        end_time=following.end_time,
        start_distance=current.start_distance,
        end_distance=following.end_distance,
        gps_points=gps_points,
        sample_count=current.sample_count + following.sample_count,
    )


def merge_periods(periods: Sequence[Period], tolerance_ms: float) -> List[Period]:
    """Merge chronologically sorted periods separated by less than tolerance_ms.

    Periods are never mutated; merging produces new period objects.
    """
    if len(periods) <= 1:
        return list(periods)

    merged = []
    current = periods[0]

    for following in periods[1:]:
        time_between = elapsed_ms(current.end_time, following.start_time)
        if time_between < tolerance_ms:
            current = combine_periods(current, following)
        else:
            merged.append(current)
            current = following

    merged.append(current)
    return merged


def merge_slow_periods(periods: Sequence[Period],
                       tolerance_ms: float = SLOW_MERGE_TOLERANCE_MS) -> List[Period]:
    return merge_periods(periods, tolerance_ms)


def merge_gap_periods(periods: Sequence[Period],
                      tolerance_ms: float = GAP_MERGE_TOLERANCE_MS) -> List[Period]:
    return merge_periods(periods, tolerance_ms)
