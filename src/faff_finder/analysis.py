"""Analysis aggregation: unified period list, statistics, and activity summary."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional, Sequence

from faff_finder.buckets import as_bucket, bucket_label, matches_bucket, selected_bucket_text
from faff_finder.constants import (
    DEFAULT_GAP_THRESHOLD_MS,
    GAP_MERGE_TOLERANCE_MS,
    SLOW_MERGE_TOLERANCE_MS,
)
from faff_finder.detection import find_matching_gap_periods, find_slow_periods, find_timestamp_gaps
from faff_finder.gps import convert_route, route_bounds
from faff_finder.merging import merge_gap_periods, merge_slow_periods
from faff_finder.models import (
    Activity,
    ActivityTimes,
    AnalysisResult,
    Period,
    PeriodStats,
    RangeBreakdownEntry,
    Sample,
    SessionSummary,
)
from faff_finder.timeutils import minutes_and_hours, rounded_seconds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisSettings:
    """Per-call options for faff detection."""

    gap_threshold_ms: float = DEFAULT_GAP_THRESHOLD_MS
    # Merge nearby periods of the same kind before the final sort
    merge_nearby: bool = True
    slow_merge_tolerance_ms: float = SLOW_MERGE_TOLERANCE_MS
    gap_merge_tolerance_ms: float = GAP_MERGE_TOLERANCE_MS

    def __post_init__(self):
        for name in ('gap_threshold_ms', 'slow_merge_tolerance_ms', 'gap_merge_tolerance_ms'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")


def sort_periods(slow_periods: Sequence[Period], gap_periods: Sequence[Period]) -> List[Period]:
    """Concatenate slow periods then gaps and sort by start time.

    The sort is stable, so a slow period and a gap starting at the same
    instant keep the slow period first.
    """
    return sorted([*slow_periods, *gap_periods], key=lambda p: p.start_time)


def find_faff_periods(
    samples: Sequence[Sample],
    selected_buckets: Sequence,
    gap_threshold_ms: Optional[float] = None,
    settings: Optional[AnalysisSettings] = None,
) -> List[Period]:
    """
    Find slow periods and recording gaps matching the selected buckets.

    Args:
        samples: Chronologically ordered samples
        selected_buckets: Duration buckets to keep; empty means no work at all
        gap_threshold_ms: Timestamp jump treated as a recording gap; taken
            from settings (or the default) when omitted
        settings: Gap threshold and merge options

    Returns:
        Periods sorted by start time

    Raises:
        ValueError: If gap_threshold_ms and settings.gap_threshold_ms disagree.
    """
    if settings is None:
        settings = AnalysisSettings(
            gap_threshold_ms=DEFAULT_GAP_THRESHOLD_MS if gap_threshold_ms is None else gap_threshold_ms,
        )
    elif gap_threshold_ms is not None and gap_threshold_ms != settings.gap_threshold_ms:
        raise ValueError(
            f"gap_threshold_ms={gap_threshold_ms} conflicts with "
            f"settings.gap_threshold_ms={settings.gap_threshold_ms}"
        )

    if not selected_buckets:
        return []

    threshold_ms = settings.gap_threshold_ms
    slow_periods = find_slow_periods(samples, selected_buckets, threshold_ms)
    gap_periods = find_matching_gap_periods(samples, selected_buckets, threshold_ms)

    if settings.merge_nearby:
        slow_periods = merge_slow_periods(slow_periods, settings.slow_merge_tolerance_ms)
        gap_periods = merge_gap_periods(gap_periods, settings.gap_merge_tolerance_ms)

    return sort_periods(slow_periods, gap_periods)


def calculate_period_statistics(periods: Sequence[Period], selected_buckets: Sequence) -> PeriodStats:
    """Counts, summed durations, and a per-bucket breakdown of slow periods.

    Every selected bucket gets an entry, in selection order, even with no matches.
    """
    slow_count = sum(1 for p in periods if not p.is_gap)
    gap_count = sum(1 for p in periods if p.is_gap)
    total_duration_seconds = sum(rounded_seconds(p.start_time, p.end_time) for p in periods)
    gap_duration_seconds = sum(
        rounded_seconds(p.start_time, p.end_time) for p in periods if p.is_gap
    )

    breakdown = []
    for bucket in selected_buckets:
        matching = []
        for period in periods:
            if period.is_gap:
                continue
            duration_minutes, duration_hours = minutes_and_hours(period.duration_ms)
            if matches_bucket(bucket, duration_minutes, duration_hours):
                matching.append(period)

        breakdown.append(RangeBreakdownEntry(
            bucket=as_bucket(bucket) or bucket,
            label=bucket_label(bucket),
            count=len(matching),
            total_duration_seconds=sum(rounded_seconds(p.start_time, p.end_time) for p in matching),
        ))

    return PeriodStats(
        slow_count=slow_count,
        gap_count=gap_count,
        total_duration_seconds=total_duration_seconds,
        gap_duration_seconds=gap_duration_seconds,
        range_breakdown=tuple(breakdown),
    )


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def extract_activity_times(sessions: Sequence[SessionSummary], samples: Sequence[Sample]) -> ActivityTimes:
    """Activity start/end, moving time, and total distance.

    The first session supplies the defaults; the first and last timestamped
    samples override start and end when present.
    """
    start_time = None
    end_time = None
    moving_time = None
    total_distance = None

    if sessions:
        session = sessions[0]
        start_time = session.start_time
        moving_time = session.total_timer_time if _is_number(session.total_timer_time) else None
        total_distance = session.total_distance if _is_number(session.total_distance) else None
        if start_time is not None and _is_number(session.total_elapsed_time):
            end_time = start_time + timedelta(seconds=session.total_elapsed_time)

    first = next((s for s in samples if s.timestamp is not None), None)
    last = next((s for s in reversed(samples) if s.timestamp is not None), None)
    if first is not None:
        start_time = first.timestamp
    if last is not None:
        end_time = last.timestamp

    return ActivityTimes(
        start_time=start_time,
        end_time=end_time,
        moving_time=moving_time,
        total_distance=total_distance,
    )


def build_analysis_result(
    activity: Activity,
    selected_buckets: Sequence,
    settings: Optional[AnalysisSettings] = None,
) -> AnalysisResult:
    """Run every analysis step over a decoded activity."""
    settings = settings or AnalysisSettings()
    samples = tuple(activity.samples)
    sessions = tuple(activity.sessions)

    times = extract_activity_times(sessions, samples)
    periods = find_faff_periods(samples, selected_buckets, settings=settings)
    timestamp_gaps = find_timestamp_gaps(samples, settings.gap_threshold_ms)
    route = convert_route(samples)
    stats = calculate_period_statistics(periods, selected_buckets)

    duration_seconds = None
    if times.start_time is not None and times.end_time is not None:
        duration_seconds = rounded_seconds(times.start_time, times.end_time)

    logger.debug(
        "Analysed %s: %s sample(s), %s slow period(s), %s gap(s)",
        activity.file_name, len(samples), stats.slow_count, stats.gap_count,
    )

    return AnalysisResult(
        file_name=activity.file_name,
        samples=samples,
        sessions=sessions,
        timestamp_gaps=timestamp_gaps,
        periods=periods,
        activity_route=route,
        times=times,
        duration_seconds=duration_seconds,
        stats=stats,
        selected_bucket_text=selected_bucket_text(selected_buckets) if selected_buckets else 'None selected',
        merged=settings.merge_nearby,
        route_bounds=route_bounds(route),
    )
