"""Duration buckets, labels, and membership tests."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple


class DurationBucket(str, Enum):
    TWO_TO_FIVE = "2to5"
    FIVE_TO_TEN = "5to10"
    TEN_TO_THIRTY = "10to30"
    THIRTY_TO_SIXTY = "30to60"
    ONE_TO_TWO_HOURS = "1to2hours"
    OVER_TWO_HOURS = "over2hours"


BUCKET_ORDER: Tuple[DurationBucket, ...] = tuple(DurationBucket)

BUCKET_LABELS: Dict[DurationBucket, str] = {
    DurationBucket.TWO_TO_FIVE: '2-5 minutes',
    DurationBucket.FIVE_TO_TEN: '5-10 minutes',
    DurationBucket.TEN_TO_THIRTY: '10-30 minutes',
    DurationBucket.THIRTY_TO_SIXTY: '30-60 minutes',
    DurationBucket.ONE_TO_TWO_HOURS: '1-2 hours',
    DurationBucket.OVER_TWO_HOURS: 'Over 2 hours',
}

# (unit, inclusive lower bound, exclusive upper bound or None)
BUCKET_BOUNDS: Dict[DurationBucket, Tuple[str, float, Optional[float]]] = {
    DurationBucket.TWO_TO_FIVE: ('minutes', 2, 5),
    DurationBucket.FIVE_TO_TEN: ('minutes', 5, 10),
    DurationBucket.TEN_TO_THIRTY: ('minutes', 10, 30),
    DurationBucket.THIRTY_TO_SIXTY: ('minutes', 30, 60),
    DurationBucket.ONE_TO_TWO_HOURS: ('hours', 1, 2),
    DurationBucket.OVER_TWO_HOURS: ('hours', 2, None),
}

DEFAULT_SELECTED_BUCKETS: Tuple[DurationBucket, ...] = BUCKET_ORDER


def as_bucket(value) -> Optional[DurationBucket]:
    """Return the DurationBucket for an identifier, or None if it is not one."""
    if isinstance(value, DurationBucket):
        return value
    try:
        return DurationBucket(value)
    except ValueError:
        return None


def matches_bucket(bucket, duration_minutes: float, duration_hours: float) -> bool:
    """Check whether a duration falls inside a bucket's half-open range.

    Unknown bucket identifiers never match.
    """
    key = as_bucket(bucket)
    if key is None:
        return False
    unit, lower, upper = BUCKET_BOUNDS[key]
    value = duration_minutes if unit == 'minutes' else duration_hours
    if value < lower:
        return False
    return upper is None or value < upper


def matches_any_bucket(buckets: Iterable, duration_minutes: float, duration_hours: float) -> bool:
    return any(matches_bucket(b, duration_minutes, duration_hours) for b in buckets)


def classify_duration(duration_minutes: float, duration_hours: float) -> Optional[DurationBucket]:
    """Return the single bucket a duration belongs to, or None below 2 minutes."""
    for bucket in BUCKET_ORDER:
        if matches_bucket(bucket, duration_minutes, duration_hours):
            return bucket
    return None


def bucket_label(bucket) -> str:
    key = as_bucket(bucket)
    if key is None:
        return str(bucket)
    return BUCKET_LABELS[key]


def parse_buckets(values: Iterable[str]) -> List[DurationBucket]:
    """Parse user-supplied bucket identifiers, keeping order and duplicates.

    Raises:
        ValueError: If any identifier is not a known bucket.
    """
    parsed = []
    for value in values:
        key = as_bucket(value.strip() if isinstance(value, str) else value)
        if key is None:
            valid = ", ".join(b.value for b in BUCKET_ORDER)
            raise ValueError(f"Unknown duration bucket {value!r} (expected one of: {valid})")
        parsed.append(key)
    return parsed


def selected_bucket_text(buckets: Iterable) -> str:
    """Join the labels of the selected buckets, e.g. '2-5 minutes, 5-10 minutes'."""
    return ", ".join(bucket_label(b) for b in buckets)
