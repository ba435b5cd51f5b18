import unittest
from datetime import datetime, timedelta, timezone

from faff_finder.merging import merge_gap_periods, merge_periods, merge_slow_periods
from faff_finder.models import Gap, GapPeriod, SlowPeriod

BASE = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)


def _at(minutes):
    return BASE + timedelta(minutes=minutes)


def _slow(start, end, count=3, points=()):
    return SlowPeriod(
        start_time=_at(start),
        end_time=_at(end),
        start_distance=start * 100,
        end_distance=end * 100,
        gps_points=tuple(points),
        sample_count=count,
    )


def _gap(start, end, start_point=None, end_point=None):
    minutes = round(end - start)
    gap = Gap(
        start_time=_at(start),
        end_time=_at(end),
        duration_ms=(end - start) * 60_000,
        duration_minutes=minutes,
        duration_hours=minutes / 60,
        start_distance=start * 100,
        end_distance=end * 100,
        start_gps_point=start_point,
        end_gps_point=end_point,
    )
    return GapPeriod(
        start_time=gap.start_time,
        end_time=gap.end_time,
        start_distance=gap.start_distance,
        end_distance=gap.end_distance,
        gps_points=tuple(p for p in (start_point, end_point) if p),
        gap=gap,
    )


class MergeSlowPeriodsTests(unittest.TestCase):
    def test_merges_periods_less_than_a_minute_apart(self):
        first = _slow(0, 3, count=4, points=[(52.0, -1.0)])
        second = _slow(3.5, 7, count=5, points=[(52.1, -1.1), (52.2, -1.2)])

        merged = merge_slow_periods([first, second])

        self.assertEqual(len(merged), 1)
        period = merged[0]
        self.assertIsInstance(period, SlowPeriod)
        self.assertEqual(period.start_time, first.start_time)
        self.assertEqual(period.end_time, second.end_time)
        self.assertEqual(period.sample_count, 9)
        self.assertEqual(period.start_distance, first.start_distance)
        self.assertEqual(period.end_distance, second.end_distance)
        self.assertEqual(period.gps_points, ((52.0, -1.0), (52.1, -1.1), (52.2, -1.2)))

    def test_exactly_one_minute_apart_is_not_merged(self):
        periods = [_slow(0, 3), _slow(4, 7)]
        self.assertEqual(merge_slow_periods(periods), periods)

    def test_chain_of_close_periods_collapses(self):
        merged = merge_slow_periods([_slow(0, 3, 1), _slow(3.5, 6, 2), _slow(6.5, 9, 3), _slow(20, 25, 4)])

        self.assertEqual(len(merged), 2)
        self.assertEqual(merged[0].sample_count, 6)
        self.assertEqual(merged[0].end_time, _at(9))
        self.assertEqual(merged[1].sample_count, 4)

    def test_single_and_empty_inputs_unchanged(self):
        only = _slow(0, 3)
        self.assertEqual(merge_slow_periods([only]), [only])
        self.assertEqual(merge_slow_periods([]), [])

    def test_merging_twice_is_a_no_op(self):
        periods = [_slow(0, 3), _slow(3.2, 6), _slow(10, 14), _slow(30, 35)]
        once = merge_slow_periods(periods)
        self.assertEqual(merge_slow_periods(once), once)

    def test_inputs_are_not_modified(self):
        first, second = _slow(0, 3), _slow(3.5, 6)
        snapshot = [_slow(0, 3), _slow(3.5, 6)]

        merge_slow_periods([first, second])

        self.assertEqual([first, second], snapshot)

    def test_custom_tolerance(self):
        periods = [_slow(0, 3), _slow(5, 8)]
        self.assertEqual(len(merge_periods(periods, tolerance_ms=3 * 60_000)), 1)
        self.assertEqual(len(merge_periods(periods, tolerance_ms=60_000)), 2)


class MergeGapPeriodsTests(unittest.TestCase):
    def test_gap_detail_is_recomputed(self):
        first = _gap(0, 10, start_point=(52.0, -1.0), end_point=(52.01, -1.01))
        second = _gap(10.5, 20, start_point=(52.02, -1.02), end_point=(52.03, -1.03))

        merged = merge_gap_periods([first, second])

        self.assertEqual(len(merged), 1)
        period = merged[0]
        self.assertIsInstance(period, GapPeriod)
        self.assertTrue(period.is_gap)
        self.assertEqual(period.sample_count, 0)
        self.assertEqual(period.start_time, _at(0))
        self.assertEqual(period.end_time, _at(20))
        self.assertEqual(len(period.gps_points), 4)

        gap = period.gap
        self.assertEqual(gap.duration_ms, 20 * 60_000)
        self.assertEqual(gap.duration_minutes, 20)
        self.assertAlmostEqual(gap.duration_hours, 20 / 60)
        self.assertEqual(gap.start_distance, 0)
        self.assertEqual(gap.end_distance, 2000)
        self.assertEqual(gap.start_gps_point, (52.0, -1.0))
        self.assertEqual(gap.end_gps_point, (52.03, -1.03))

    def test_distant_gaps_stay_separate(self):
        gaps = [_gap(0, 10), _gap(30, 40)]
        self.assertEqual(merge_gap_periods(gaps), gaps)

    def test_mixed_kinds_become_slow_period(self):
        merged = merge_periods([_slow(0, 3, count=5), _gap(3.5, 10)], tolerance_ms=60_000)

        self.assertEqual(len(merged), 1)
        self.assertFalse(merged[0].is_gap)
        self.assertEqual(merged[0].sample_count, 5)
        self.assertEqual(merged[0].end_time, _at(10))


if __name__ == "__main__":
    unittest.main()
