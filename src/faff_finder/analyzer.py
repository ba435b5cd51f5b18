"""
Faff Finder - Report Engine
Reads FIT files, runs faff detection, and writes a readable report.
"""

import logging
import os
from typing import Callable, List, Optional, Sequence

from faff_finder.analysis import AnalysisSettings, build_analysis_result
from faff_finder.buckets import DEFAULT_SELECTED_BUCKETS
from faff_finder.fit_reader import read_fit_file
from faff_finder.models import Activity, AnalysisResult
from faff_finder.timeutils import format_duration, rounded_seconds

logger = logging.getLogger(__name__)


class FaffAnalyzer:
    """Finds slow periods and recording gaps in ride FIT files."""

    def __init__(
        self,
        output_callback: Optional[Callable[[str], None]] = None,
        selected_buckets: Sequence = DEFAULT_SELECTED_BUCKETS,
        settings: Optional[AnalysisSettings] = None,
        reader: Callable[[str], Activity] = read_fit_file,
    ):
        """
        Initialize analyzer.

        Args:
            output_callback: Optional function to call with output lines
            selected_buckets: Duration buckets to report on
            settings: Gap threshold and merge options
            reader: Turns a file path into an Activity
        """
        self.output_callback = output_callback or self._default_output
        self.selected_buckets = list(selected_buckets)
        self.settings = settings or AnalysisSettings()
        self.reader = reader

    def _default_output(self, text: str):
        """Default output handler - prints to console."""
        print(text)

    def _emit(self, text: str):
        """Emit output through callback."""
        self.output_callback(text)

    def analyze_activity(self, activity: Activity) -> AnalysisResult:
        """Analyze an already-decoded activity and emit its report."""
        result = build_analysis_result(activity, self.selected_buckets, self.settings)
        self._report(result)
        return result

    def analyze_file(self, filename: str) -> Optional[AnalysisResult]:
        """
        Analyze a single FIT file.

        Returns:
            AnalysisResult, or None if the file could not be read
        """
        try:
            activity = self.reader(filename)
        except Exception as e:
            logger.warning("Unable to read FIT file '%s': %s", filename, e)
            self._emit(f"❌ Error opening {filename}: {e}")
            return None

        if not activity.samples:
            self._emit(f"⚠️ No records found in {os.path.basename(filename)}")
            return None

        return self.analyze_activity(activity)

    def analyze_folder(self, folder_path: str) -> List[AnalysisResult]:
        """Analyze all FIT files in a folder, in name order."""
        files = sorted(f for f in os.listdir(folder_path) if f.lower().endswith('.fit'))

        if not files:
            self._emit(f"⚠️ No .fit files found in {folder_path}")
            return []

        self._emit(f"\n📁 Found {len(files)} FIT file(s) in {folder_path}")
        self._emit("=" * 60)

        results = []
        for f in files:
            result = self.analyze_file(os.path.join(folder_path, f))
            if result:
                results.append(result)

        self._emit(f"\n✅ Analysis complete! Processed {len(results)} file(s).")
        return results

    def _report(self, result: AnalysisResult):
        stats = result.stats
        when = result.start_time.strftime('%Y-%m-%d %H:%M') if result.start_time else 'unknown start'

        self._emit(f"\n🚲 FAFF REPORT: {when} ({result.file_name})")
        self._emit("-" * 50)

        if result.duration_seconds is not None:
            self._emit(f"Ride:     {format_duration(result.duration_seconds)} elapsed")
        if result.times.total_distance is not None:
            self._emit(f"Distance: {result.times.total_distance / 1000:.1f} km")
        self._emit(f"Ranges:   {result.selected_bucket_text}")
        self._emit(
            f"Faff:     {stats.slow_count} slow period(s), {stats.gap_count} gap(s)  "
            f"->  {format_duration(stats.total_duration_seconds)} total "
            f"({format_duration(stats.gap_duration_seconds)} not recording)"
        )

        for entry in stats.range_breakdown:
            self._emit(f"  {entry.label:<14} {entry.count:>3}  {format_duration(entry.total_duration_seconds)}")

        for period in result.periods:
            kind = "⏸️ Gap " if period.is_gap else "🐌 Slow"
            start = period.start_time.strftime('%H:%M:%S')
            end = period.end_time.strftime('%H:%M:%S')
            seconds = rounded_seconds(period.start_time, period.end_time)
            self._emit(
                f"  {kind} {start} -> {end}  {format_duration(seconds):>10}  "
                f"@ {period.start_distance / 1000:.2f} km"
            )
