"""Data models for telemetry samples, detected periods, and analysis results."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from faff_finder.buckets import DurationBucket

GpsPoint = Tuple[float, float]


@dataclass(frozen=True)
class Sample:
    """A single telemetry reading from a ride.

    Attributes:
        timestamp: When the reading was taken. May be missing.
        speed: Speed in m/s.
        enhanced_speed: Higher-resolution speed in m/s; preferred over ``speed``.
        distance: Cumulative distance in meters.
        position_lat: Latitude in semicircles.
        position_long: Longitude in semicircles.
    """

    timestamp: Optional[datetime] = None
    speed: Optional[float] = None
    enhanced_speed: Optional[float] = None
    distance: Optional[float] = None
    position_lat: Optional[int] = None
    position_long: Optional[int] = None

    @property
    def effective_speed(self) -> float:
        """Enhanced speed, else speed, else 0 (a sample without speed counts as stopped)."""
        if self.enhanced_speed is not None:
            return self.enhanced_speed
        if self.speed is not None:
            return self.speed
        return 0.0

    @property
    def has_position(self) -> bool:
        return _is_number(self.position_lat) and _is_number(self.position_long)

    @classmethod
    def from_record(cls, values: Dict[str, Any]) -> "Sample":
        """Build a sample from a decoded FIT ``record`` message."""
        return cls(
            timestamp=values.get('timestamp'),
            speed=values.get('speed'),
            enhanced_speed=values.get('enhanced_speed'),
            distance=values.get('distance'),
            position_lat=values.get('position_lat'),
            position_long=values.get('position_long'),
        )


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class SessionSummary:
    """Session-level totals, used only for activity bounds."""

    start_time: Optional[datetime] = None
    total_timer_time: Optional[float] = None
    total_elapsed_time: Optional[float] = None
    total_distance: Optional[float] = None

    @classmethod
    def from_session(cls, values: Dict[str, Any]) -> "SessionSummary":
        return cls(
            start_time=values.get('start_time'),
            total_timer_time=values.get('total_timer_time'),
            total_elapsed_time=values.get('total_elapsed_time'),
            total_distance=values.get('total_distance'),
        )


@dataclass(frozen=True)
class Activity:
    """Decoded activity handed to the analysis core."""

    file_name: str
    samples: Tuple[Sample, ...] = ()
    sessions: Tuple[SessionSummary, ...] = ()


@dataclass(frozen=True)
class Gap:
    """A stretch with no recorded samples between two consecutive readings."""

    start_time: datetime
    end_time: datetime
    duration_ms: float
    duration_minutes: int
    duration_hours: float
    start_distance: float = 0
    end_distance: float = 0
    start_gps_point: Optional[GpsPoint] = None
    end_gps_point: Optional[GpsPoint] = None


@dataclass(frozen=True)
class Period:
    """Common header shared by slow periods and recording gaps."""

    start_time: datetime
    end_time: datetime
    start_distance: float
    end_distance: float
    gps_points: Tuple[GpsPoint, ...]

    is_gap = False

    @property
    def duration_ms(self) -> float:
        return (self.end_time - self.start_time) / timedelta(milliseconds=1)


@dataclass(frozen=True)
class SlowPeriod(Period):
    """A contiguous run of samples moving slower than the speed threshold."""

    sample_count: int = 1


@dataclass(frozen=True)
class GapPeriod(Period):
    """A recording gap expressed in period form; no samples exist inside it."""

    gap: Gap

    is_gap = True

    @property
    def sample_count(self) -> int:
        return 0


@dataclass(frozen=True)
class RangeBreakdownEntry:
    bucket: DurationBucket
    label: str
    count: int
    total_duration_seconds: int


@dataclass(frozen=True)
class PeriodStats:
    slow_count: int = 0
    gap_count: int = 0
    total_duration_seconds: int = 0
    gap_duration_seconds: int = 0
    range_breakdown: Tuple[RangeBreakdownEntry, ...] = ()


@dataclass(frozen=True)
class ActivityTimes:
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    moving_time: Optional[float] = None
    total_distance: Optional[float] = None


@dataclass
class AnalysisResult:
    """Everything a renderer needs to display one analysed activity."""

    file_name: str
    samples: Tuple[Sample, ...]
    sessions: Tuple[SessionSummary, ...]
    timestamp_gaps: List[Gap]
    periods: List[Period]
    activity_route: List[GpsPoint]
    times: ActivityTimes
    duration_seconds: Optional[int]
    stats: PeriodStats
    selected_bucket_text: str
    merged: bool = True
    route_bounds: Optional[Tuple[GpsPoint, GpsPoint]] = None

    @property
    def start_time(self) -> Optional[datetime]:
        return self.times.start_time

    @property
    def end_time(self) -> Optional[datetime]:
        return self.times.end_time

    @property
    def slow_periods(self) -> List[Period]:
        return [p for p in self.periods if not p.is_gap]

    @property
    def gap_periods(self) -> List[Period]:
        return [p for p in self.periods if p.is_gap]
