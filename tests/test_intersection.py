"""
Tests for segment and linestring intersection.
"""

import unittest

from geocommon.types import LatLon
from geometry.intersection import (
    linestring_intersections,
    linestrings_intersect,
    segment_intersection,
    segments_intersect,
)


def ll(lon, lat):
    return LatLon.from_lonlat(lon, lat)


class TestSegmentIntersection(unittest.TestCase):
    """Test single segment pairs."""

    def test_simple_intersection(self):
        point = segment_intersection(ll(0, 0), ll(20, 20), ll(10, 0), ll(10, 20))
        self.assertIsNotNone(point)
        self.assertAlmostEqual(point.lon, 10, delta=0.0001)
        self.assertAlmostEqual(point.lat, 10.15589, delta=0.0001)
        self.assertTrue(segments_intersect(ll(0, 0), ll(20, 20), ll(10, 0), ll(10, 20)))

    def test_parallel(self):
        self.assertIsNone(segment_intersection(ll(0, 0), ll(20, 20), ll(10, 0), ll(30, 20)))
        self.assertFalse(segments_intersect(ll(0, 0), ll(20, 20), ll(10, 0), ll(30, 20)))

    def test_collinear_in_degrees_crosses_on_mercator(self):
        self.assertIsNotNone(segment_intersection(ll(0, 0), ll(20, 20), ll(10, 10), ll(30, 30)))

    def test_shared_end_point(self):
        point = segment_intersection(ll(0, 0), ll(20, 20), ll(20, 20), ll(40, 60))
        self.assertIsNotNone(point)
        self.assertAlmostEqual(point.lat, 20, places=9)
        self.assertAlmostEqual(point.lon, 20, places=9)
        self.assertTrue(segments_intersect(ll(0, 0), ll(20, 20), ll(20, 20), ll(40, 40)))

    def test_no_intersection(self):
        self.assertIsNone(segment_intersection(ll(0, 0), ll(20, 20), ll(10, 0), ll(10, 5)))
        self.assertFalse(segments_intersect(ll(0, 0), ll(20, 20), ll(10, 0), ll(10, 5)))

    def test_bounding_boxes_disjoint(self):
        self.assertIsNone(segment_intersection(ll(0, 0), ll(1, 1), ll(2, 2), ll(3, 3)))
        self.assertIsNone(segment_intersection(ll(0, 0), ll(1, 1), ll(0, 2), ll(1, 3)))

    def test_antimeridian_segments_reported_unprojected(self):
        point = segment_intersection(ll(170, 10), ll(-170, -10), ll(-170, 10), ll(170, -10))
        self.assertIsNotNone(point)
        self.assertAlmostEqual(point.lon, 0, places=9)


class TestLineStringIntersection(unittest.TestCase):
    """Test linestring helpers."""

    def setUp(self):
        self.zigzag = [ll(0, 0), ll(10, 10), ll(20, 0), ll(30, 10)]
        self.horizontal = [ll(-5, 5), ll(35, 5)]

    def test_intersections(self):
        points = linestring_intersections(self.zigzag, self.horizontal)
        self.assertEqual(len(points), 3)
        for point in points:
            self.assertAlmostEqual(point.lat, 5, places=9)
        self.assertTrue(linestrings_intersect(self.zigzag, self.horizontal))

    def test_disjoint(self):
        far = [ll(0, 50), ll(30, 50)]
        self.assertEqual(linestring_intersections(self.zigzag, far), [])
        self.assertFalse(linestrings_intersect(self.zigzag, far))

    def test_too_few_points(self):
        self.assertEqual(linestring_intersections([ll(0, 0)], self.horizontal), [])
        self.assertFalse(linestrings_intersect(self.zigzag, []))


if __name__ == "__main__":
    unittest.main()
