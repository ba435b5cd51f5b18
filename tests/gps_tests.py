import unittest

from faff_finder.gps import convert_route, route_bounds, sample_point, to_degrees, to_semicircles
from faff_finder.models import Sample


class CoordinateConversionTests(unittest.TestCase):
    def test_full_scale_is_exactly_180_degrees(self):
        self.assertEqual(to_degrees(2**31), 180.0)
        self.assertEqual(to_degrees(-2**31), -180.0)
        self.assertEqual(to_degrees(0), 0.0)

    def test_round_trip_through_semicircles(self):
        for tenth in range(-1800, 1801, 7):
            degrees = tenth / 10
            self.assertAlmostEqual(to_degrees(to_semicircles(degrees)), degrees, places=6)

    def test_known_coordinate(self):
        # 612553967 semicircles is roughly 51.3437 degrees north
        self.assertAlmostEqual(to_degrees(612553967), 51.34368, places=4)


class RouteTests(unittest.TestCase):
    def test_point_requires_both_coordinates(self):
        self.assertIsNone(sample_point(Sample(position_lat=to_semicircles(52.0))))
        self.assertIsNone(sample_point(Sample(position_long=to_semicircles(-1.0))))
        self.assertIsNone(sample_point(Sample()))

    def test_zero_coordinates_are_still_a_point(self):
        self.assertEqual(sample_point(Sample(position_lat=0, position_long=0)), (0.0, 0.0))

    def test_convert_route_skips_samples_without_position(self):
        samples = [
            Sample(position_lat=to_semicircles(52.0), position_long=to_semicircles(-1.2)),
            Sample(position_lat=to_semicircles(52.1)),
            Sample(),
            Sample(position_lat=to_semicircles(52.2), position_long=to_semicircles(-1.3)),
        ]

        route = convert_route(samples)

        self.assertEqual(len(route), 2)
        self.assertAlmostEqual(route[0][0], 52.0, places=6)
        self.assertAlmostEqual(route[0][1], -1.2, places=6)
        self.assertAlmostEqual(route[1][0], 52.2, places=6)

    def test_route_bounds(self):
        route = [(52.0, -1.2), (52.5, -1.0), (51.9, -1.4)]
        (min_lat, min_lon), (max_lat, max_lon) = route_bounds(route)
        self.assertAlmostEqual(min_lat, 51.9)
        self.assertAlmostEqual(min_lon, -1.4)
        self.assertAlmostEqual(max_lat, 52.5)
        self.assertAlmostEqual(max_lon, -1.0)
        self.assertIsNone(route_bounds([]))


if __name__ == "__main__":
    unittest.main()
