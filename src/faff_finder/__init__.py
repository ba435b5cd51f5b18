"""
Faff Finder
Finds slow periods and recording gaps ("faff time") in ride FIT files.
"""

__version__ = "1.0.0"
__author__ = ""

from faff_finder.analysis import (
    AnalysisSettings,
    build_analysis_result,
    calculate_period_statistics,
    extract_activity_times,
    find_faff_periods,
)
from faff_finder.analyzer import FaffAnalyzer
from faff_finder.buckets import DurationBucket, matches_bucket
from faff_finder.detection import find_slow_periods, find_timestamp_gaps
from faff_finder.gps import convert_route, to_degrees
from faff_finder.merging import merge_periods
from faff_finder.models import Gap, GapPeriod, Sample, SessionSummary, SlowPeriod

__all__ = [
    "AnalysisSettings",
    "DurationBucket",
    "FaffAnalyzer",
    "Gap",
    "GapPeriod",
    "Sample",
    "SessionSummary",
    "SlowPeriod",
    "build_analysis_result",
    "calculate_period_statistics",
    "convert_route",
    "extract_activity_times",
    "find_faff_periods",
    "find_slow_periods",
    "find_timestamp_gaps",
    "matches_bucket",
    "merge_periods",
    "to_degrees",
]
