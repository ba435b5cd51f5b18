"""Tabular views and CSV export of detected periods."""

from __future__ import annotations

import os
from datetime import datetime
from typing import Optional, Sequence

import pandas as pd

from faff_finder.buckets import classify_duration
from faff_finder.models import AnalysisResult, Period, PeriodStats
from faff_finder.timeutils import format_duration, minutes_and_hours, rounded_seconds

PERIOD_COLUMNS = [
    'kind',
    'bucket',
    'start_time',
    'end_time',
    'duration_seconds',
    'duration',
    'sample_count',
    'start_distance_m',
    'end_distance_m',
    'gps_point_count',
]

BREAKDOWN_COLUMNS = ['bucket', 'label', 'count', 'total_duration_seconds', 'total_duration']


def period_bucket(period: Period) -> Optional[str]:
    """Bucket identifier a period's duration falls in, or None below two minutes.

    Gaps are classified on their rounded minutes, as during detection.
    """
    if period.is_gap:
        bucket = classify_duration(period.gap.duration_minutes, period.gap.duration_hours)
    else:
        bucket = classify_duration(*minutes_and_hours(period.duration_ms))
    return bucket.value if bucket is not None else None


def periods_to_frame(periods: Sequence[Period]) -> pd.DataFrame:
    """One row per period, in the order given."""
    rows = []
    for period in periods:
        seconds = rounded_seconds(period.start_time, period.end_time)
        rows.append({
            'kind': 'gap' if period.is_gap else 'slow',
            'bucket': period_bucket(period),
            'start_time': period.start_time.isoformat(),
            'end_time': period.end_time.isoformat(),
            'duration_seconds': seconds,
            'duration': format_duration(seconds),
            'sample_count': period.sample_count,
            'start_distance_m': period.start_distance,
            'end_distance_m': period.end_distance,
            'gps_point_count': len(period.gps_points),
        })
    return pd.DataFrame(rows, columns=PERIOD_COLUMNS)


def stats_to_frame(stats: PeriodStats) -> pd.DataFrame:
    """Per-bucket breakdown as a DataFrame, in selection order."""
    rows = [
        {
            'bucket': getattr(entry.bucket, 'value', entry.bucket),
            'label': entry.label,
            'count': entry.count,
            'total_duration_seconds': entry.total_duration_seconds,
            'total_duration': format_duration(entry.total_duration_seconds),
        }
        for entry in stats.range_breakdown
    ]
    return pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS)


def _csv_path(result: AnalysisResult, kind: str, destination_dir=None) -> str:
    stem = os.path.splitext(os.path.basename(result.file_name))[0] or 'activity'
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    output_dir = destination_dir or os.getcwd()
    os.makedirs(output_dir, exist_ok=True)
    return os.path.join(output_dir, f"{stem}_{kind}_{timestamp}.csv")


def export_periods_csv(result: AnalysisResult, destination_dir=None) -> str:
    """Write the result's periods to a timestamped CSV and return its path.

    Raises:
        ValueError: If the result has no periods.
    """
    df = periods_to_frame(result.periods)
    if df.empty:
        raise ValueError("No periods to export")

    file_path = _csv_path(result, 'faff', destination_dir)
    df.to_csv(file_path, index=False)
    return file_path


def export_breakdown_csv(result: AnalysisResult, destination_dir=None) -> str:
    """Write the per-bucket breakdown to a timestamped CSV and return its path.

    Raises:
        ValueError: If no buckets were selected.
    """
    df = stats_to_frame(result.stats)
    if df.empty:
        raise ValueError("No bucket breakdown to export")

    file_path = _csv_path(result, 'breakdown', destination_dir)
    df.to_csv(file_path, index=False)
    return file_path
