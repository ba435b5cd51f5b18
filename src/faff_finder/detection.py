"""
Faff detection: slow periods and recording gaps.

Two kinds of "faff time" are found in a ride:
1. Slow periods: consecutive samples with effective speed below SPEED_THRESHOLD
   (stopped at a cafe, fixing a puncture, waiting at lights).
2. Recording gaps: no samples at all for longer than the gap threshold
   (device paused or switched off).

Samples are expected in chronological order and are never re-sorted or mutated.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from faff_finder.buckets import matches_any_bucket
from faff_finder.constants import MS_PER_MINUTE, SPEED_THRESHOLD
from faff_finder.gps import convert_route, sample_point
from faff_finder.models import Gap, GapPeriod, GpsPoint, Sample, SlowPeriod
from faff_finder.timeutils import elapsed_ms, minutes_and_hours, round_half_up

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Recording gaps
# ---------------------------------------------------------------------------

def find_timestamp_gaps(samples: Sequence[Sample], threshold_ms: float) -> List[Gap]:
    """Find timestamp jumps between consecutive samples longer than threshold_ms.

    Each sample is compared with the one immediately before it. If either of
    the pair lacks a timestamp that comparison is skipped; the scan carries on
    with the next pair. A jump exactly equal to the threshold is not a gap.
    """
    gaps = []

    for i in range(1, len(samples)):
        previous = samples[i - 1]
        current = samples[i]

        delta_ms = elapsed_ms(previous.timestamp, current.timestamp)
        if delta_ms is None or delta_ms <= threshold_ms:
            continue

        # Hours derive from the rounded minutes, not from raw milliseconds
        duration_minutes = round_half_up(delta_ms / MS_PER_MINUTE)
        gaps.append(Gap(
            start_time=previous.timestamp,
            end_time=current.timestamp,
            duration_ms=delta_ms,
            duration_minutes=duration_minutes,
            duration_hours=duration_minutes / 60,
            start_distance=_distance_or_zero(previous),
            end_distance=_distance_or_zero(current),
            start_gps_point=sample_point(previous),
            end_gps_point=sample_point(current),
        ))

    return gaps


def _distance_or_zero(sample: Sample) -> float:
    return sample.distance if sample.distance is not None else 0


def gap_points(gap: Gap) -> Tuple[GpsPoint, ...]:
    """GPS points of a gap: both ends, whichever end exists, or none."""
    return tuple(p for p in (gap.start_gps_point, gap.end_gps_point) if p is not None)


def gap_to_period(gap: Gap) -> GapPeriod:
    """Wrap a gap in period form so it can be listed alongside slow periods."""
    return GapPeriod(
        start_time=gap.start_time,
        end_time=gap.end_time,
        start_distance=gap.start_distance,
        end_distance=gap.end_distance,
        gps_points=gap_points(gap),
        gap=gap,
    )


def find_matching_gap_periods(
    samples: Sequence[Sample],
    selected_buckets: Sequence,
    threshold_ms: float,
) -> List[GapPeriod]:
    """Recording gaps whose duration falls in at least one selected bucket."""
    periods = []
    for gap in find_timestamp_gaps(samples, threshold_ms):
        if matches_any_bucket(selected_buckets, gap.duration_minutes, gap.duration_hours):
            periods.append(gap_to_period(gap))
    return periods


# ---------------------------------------------------------------------------
# Slow periods
# ---------------------------------------------------------------------------

class RunState(str, Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


def is_slow(sample: Sample, speed_threshold: float = SPEED_THRESHOLD) -> bool:
    return sample.effective_speed < speed_threshold


def should_split_run(run: Sequence[Sample], sample: Sample, gap_threshold_ms: float) -> bool:
    """True when the jump from the run's last sample to this one exceeds the gap threshold."""
    if not run:
        return False
    delta_ms = elapsed_ms(run[-1].timestamp, sample.timestamp)
    return delta_ms is not None and delta_ms > gap_threshold_ms


def process_slow_run(run: Sequence[Sample], selected_buckets: Iterable) -> Optional[SlowPeriod]:
    """Turn a run of slow samples into a SlowPeriod if its duration matches a bucket.

    Returns None for an empty run, a run whose first or last sample has no
    timestamp, or a duration outside every selected bucket.
    """
    if not run:
        return None

    first, last = run[0], run[-1]
    duration_ms = elapsed_ms(first.timestamp, last.timestamp)
    if duration_ms is None:
        logger.debug("Dropping slow run of %s sample(s) without boundary timestamps", len(run))
        return None

    duration_minutes, duration_hours = minutes_and_hours(duration_ms)
    if not matches_any_bucket(selected_buckets, duration_minutes, duration_hours):
        return None

    start_distance = first.distance if first.distance is not None else 0
    end_distance = last.distance if last.distance is not None else start_distance

    return SlowPeriod(
        start_time=first.timestamp,
        end_time=last.timestamp,
        start_distance=start_distance,
        end_distance=end_distance,
        gps_points=tuple(convert_route(run)),
        sample_count=len(run),
    )


class SlowRunTracker:
    """Two-state machine that groups consecutive slow samples into runs.

    IDLE: no run open. ACCUMULATING: at least one slow sample buffered.
    A fast sample closes the run; a slow sample arriving after a timestamp
    jump above the gap threshold closes the run and opens a new one.
    """

    def __init__(self, selected_buckets: Sequence, gap_threshold_ms: float,
                 speed_threshold: float = SPEED_THRESHOLD):
        self.selected_buckets = list(selected_buckets)
        self.gap_threshold_ms = gap_threshold_ms
        self.speed_threshold = speed_threshold
        self.run: List[Sample] = []

    @property
    def state(self) -> RunState:
        return RunState.ACCUMULATING if self.run else RunState.IDLE

    def feed(self, sample: Sample) -> Optional[SlowPeriod]:
        """Advance by one sample; returns a period when a run closes and qualifies."""
        if not is_slow(sample, self.speed_threshold):
            return self._close()

        if should_split_run(self.run, sample, self.gap_threshold_ms):
            period = self._close()
            self.run = [sample]
            return period

        self.run.append(sample)
        return None

    def finish(self) -> Optional[SlowPeriod]:
        """Close whatever run is still open at the end of the data."""
        return self._close()

    def _close(self) -> Optional[SlowPeriod]:
        if not self.run:
            return None
        period = process_slow_run(self.run, self.selected_buckets)
        self.run = []
        return period


def find_slow_periods(
    samples: Iterable[Sample],
    selected_buckets: Sequence,
    gap_threshold_ms: float,
) -> List[SlowPeriod]:
    """Find slow runs whose duration matches at least one selected bucket."""
    if not selected_buckets:
        return []

    tracker = SlowRunTracker(selected_buckets, gap_threshold_ms)
    periods = []
    for sample in samples:
        period = tracker.feed(sample)
        if period is not None:
            periods.append(period)

    period = tracker.finish()
    if period is not None:
        periods.append(period)

    return periods
