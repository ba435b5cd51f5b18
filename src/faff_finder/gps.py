"""Semicircle coordinate conversion and route helpers."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from faff_finder.constants import SEMICIRCLE_TO_DEGREES
from faff_finder.models import GpsPoint, Sample
from faff_finder.timeutils import round_half_up


def to_degrees(raw: int) -> float:
    """Convert a Garmin semicircle value to signed decimal degrees."""
    return raw * SEMICIRCLE_TO_DEGREES


def to_semicircles(degrees: float) -> int:
    """Inverse of to_degrees, rounded to the nearest semicircle."""
    return round_half_up(degrees / SEMICIRCLE_TO_DEGREES)


def sample_point(sample: Sample) -> Optional[GpsPoint]:
    """(lat, lon) in degrees, or None unless both coordinates are present."""
    if not sample.has_position:
        return None
    return (to_degrees(sample.position_lat), to_degrees(sample.position_long))


def convert_route(samples: Iterable[Sample]) -> List[GpsPoint]:
    """Flatten samples into the list of points that carry a position.

    Samples without a full lat/long pair are skipped, never zero-filled.
    """
    route = []
    for sample in samples:
        point = sample_point(sample)
        if point is not None:
            route.append(point)
    return route


def route_bounds(route: Sequence[GpsPoint]) -> Optional[Tuple[GpsPoint, GpsPoint]]:
    """Return ((min_lat, min_lon), (max_lat, max_lon)) for framing a map."""
    if not route:
        return None
    coords = np.asarray(route, dtype=float)
    mins = coords.min(axis=0)
    maxs = coords.max(axis=0)
    return (float(mins[0]), float(mins[1])), (float(maxs[0]), float(maxs[1]))
