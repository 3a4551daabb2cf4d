"""
Tests for ring, polygon and multipolygon densification.
"""

import math
import unittest

from geocommon.cancellation import CancellationToken, OperationCancelledError
from geocommon.types import LatLon
from geocommon.units import Distance, Q_
from geodesy.model import PLANAR, RHUMB, SPHERICAL, VINCENTY, distance
from geometry.densify import (
    DensifyConfig,
    densify_multipolygon,
    densify_polygon,
    densify_ring,
    densify_segment,
    segment_error,
)
from geometry.errors import (
    InvalidGeometryError,
    InvalidToleranceError,
    ToleranceTooLowError,
)

P0 = LatLon(-35, -154.5)
P1 = LatLon(-35, -180)
P2 = LatLon(-25, -165)
TRIANGLE = [P0, P1, P2, P0]

# crosses the antimeridian well away from the equator
SOUTHERN_RING = [LatLon(-70, 170), LatLon(-70, -170), LatLon(-60, -170), LatLon(-60, 170), LatLon(-70, 170)]

# Vincenty inverse has no solution for this pair
NEAR_ANTIPODE = (LatLon(0, 0), LatLon(0.5, 179.7))


class TestSegmentError(unittest.TestCase):
    """Test the deviation between two models' midpoints."""

    def test_spherical_against_planar(self):
        self.assertAlmostEqual(segment_error(P0, P1, SPHERICAL, PLANAR).kilometre(), 75.0483, delta=0.0001)

    def test_rhumb_along_parallel(self):
        self.assertAlmostEqual(segment_error(P0, P1, RHUMB, PLANAR).kilometre(), 0.0, places=6)

    def test_rhumb_against_planar(self):
        self.assertAlmostEqual(segment_error(P1, P2, RHUMB, PLANAR).kilometre(), 18.2367, places=3)

    def test_meridian(self):
        self.assertEqual(segment_error(LatLon(-40, 10), LatLon(60, 10), SPHERICAL, PLANAR).metre(), 0.0)
        self.assertEqual(segment_error(LatLon(-40, 180), LatLon(60, -180), SPHERICAL, PLANAR).metre(), 0.0)

    def test_error_does_not_grow_with_bisection(self):
        edges = list(zip(TRIANGLE[:-1], TRIANGLE[1:])) + list(zip(SOUTHERN_RING[:-1], SOUTHERN_RING[1:]))
        for start, end in edges:
            segments = [(start, end)]
            for _ in range(4):
                children = []
                for a, b in segments:
                    parent = segment_error(a, b, SPHERICAL, PLANAR).metre()
                    mid = SPHERICAL.point(a).intermediate_point_to(b, 0.5)
                    for child in [(a, mid), (mid, b)]:
                        with self.subTest(start=start, end=end, child=child):
                            self.assertLessEqual(segment_error(*child, SPHERICAL, PLANAR).metre(), parent + 1e-9)
                    children.extend([(a, mid), (mid, b)])
                segments = children

    def test_unconverged_is_nan(self):
        self.assertFalse(segment_error(NEAR_ANTIPODE[0], NEAR_ANTIPODE[1], VINCENTY, PLANAR).valid())


class TestDensifySegment(unittest.TestCase):
    """Test densification of a single segment."""

    def test_meridian_is_unchanged(self):
        points, error = densify_segment(LatLon(-40, 10), LatLon(60, 10), SPHERICAL, PLANAR, 1.0)
        self.assertIsNone(error)
        self.assertEqual(points, [LatLon(-40, 10), LatLon(60, 10)])

    def test_inserted_points_lie_on_model_path(self):
        points, error = densify_segment(P1, P2, SPHERICAL, PLANAR, 100.0)
        self.assertIsNone(error)
        self.assertGreater(len(points), 2)
        self.assertEqual(points[0], P1)
        self.assertEqual(points[-1], P2)

        total = distance(P1, P2, SPHERICAL).metre()
        path = sum(distance(a, b, SPHERICAL).metre() for a, b in zip(points[:-1], points[1:]))
        self.assertAlmostEqual(path, total, delta=0.01)

    def test_each_sub_segment_within_tolerance(self):
        points, _ = densify_segment(P1, P2, RHUMB, PLANAR, 50.0)
        for a, b in zip(points[:-1], points[1:]):
            self.assertLessEqual(segment_error(a, b, RHUMB, PLANAR).metre(), 50.0 + 1e-6)

    def test_vincenty(self):
        result = densify_segment(P1, P2, VINCENTY, PLANAR, 1000.0)
        self.assertTrue(result.ok)
        self.assertGreater(len(result.geometry), 2)

    def test_unconverged_segment_is_kept_unsplit(self):
        start, end = NEAR_ANTIPODE
        with self.assertLogs("geometry.densify", level="WARNING"):
            result = densify_segment(start, end, VINCENTY, PLANAR, 1000.0)

        self.assertEqual(result.geometry, [start, end])
        self.assertTrue(all(point.valid() for point in result.geometry))
        self.assertIsInstance(result.error, ToleranceTooLowError)
        self.assertEqual(result.error.failed_segments, 1)
        self.assertEqual(result.error.unconverged_segments, 1)
        self.assertTrue(math.isnan(result.error.worst_error))

    def test_invalid_tolerance(self):
        for tolerance in [0, -1.0, math.nan, Distance(0.0), Q_(-5, 'm')]:
            with self.subTest(tolerance=tolerance):
                with self.assertRaises(InvalidToleranceError):
                    densify_segment(P0, P1, SPHERICAL, PLANAR, tolerance)

    def test_invalid_tolerance_is_value_error(self):
        with self.assertRaises(ValueError):
            densify_segment(P0, P1, SPHERICAL, PLANAR, 0)


class TestDensifyRing(unittest.TestCase):
    """Test ring densification scenarios."""

    def test_tolerance_equal_to_error_leaves_ring(self):
        e = segment_error(P0, P1, SPHERICAL, PLANAR)
        ring, error = densify_ring(TRIANGLE, SPHERICAL, PLANAR, e)
        self.assertIsNone(error)
        self.assertEqual(ring, TRIANGLE)

    def test_tolerance_below_error_adds_one_point(self):
        e = segment_error(P0, P1, SPHERICAL, PLANAR)
        ring, error = densify_ring(TRIANGLE, SPHERICAL, PLANAR, e.metre() - 1)
        self.assertIsNone(error)
        self.assertEqual(len(ring), 5)
        self.assertEqual(ring[0], P0)
        self.assertEqual(ring[2], P1)

    def test_quantity_tolerance(self):
        in_metres, _ = densify_ring(TRIANGLE, RHUMB, PLANAR, 10.0)
        as_quantity, _ = densify_ring(TRIANGLE, RHUMB, PLANAR, Q_(0.01, 'km'))
        self.assertEqual(in_metres, as_quantity)

    def test_idempotent(self):
        dense, error = densify_ring(TRIANGLE, RHUMB, PLANAR, 10.0)
        self.assertIsNone(error)
        self.assertEqual(len(dense), 130)

        again, error = densify_ring(dense, RHUMB, PLANAR, 10.0)
        self.assertIsNone(error)
        self.assertEqual(again, dense)

    def test_open_ring_is_closed(self):
        e = segment_error(P0, P1, SPHERICAL, PLANAR)
        ring, error = densify_ring([P0, P1, P2], SPHERICAL, PLANAR, e)
        self.assertIsNone(error)
        self.assertEqual(ring, TRIANGLE)

    def test_antimeridian_near_equator(self):
        ring = [LatLon(-10, 170), LatLon(-10, -170), LatLon(10, -170), LatLon(10, 170), LatLon(-10, 170)]
        e = segment_error(ring[0], ring[1], SPHERICAL, PLANAR).metre()

        dense, _ = densify_ring(ring, SPHERICAL, PLANAR, e + 1)
        self.assertEqual(dense, ring)

        dense, error = densify_ring(ring, SPHERICAL, PLANAR, e - 1)
        self.assertIsNone(error)
        self.assertEqual(len(dense), 7)

        dense, error = densify_ring(ring, RHUMB, PLANAR, 10.0)
        self.assertIsNone(error)
        self.assertEqual(len(dense), 5)

    def test_antimeridian_away_from_equator(self):
        small = segment_error(SOUTHERN_RING[2], SOUTHERN_RING[3], SPHERICAL, PLANAR)
        big = segment_error(SOUTHERN_RING[0], SOUTHERN_RING[1], SPHERICAL, PLANAR)

        dense, error = densify_ring(SOUTHERN_RING, SPHERICAL, PLANAR, small)
        self.assertIsNone(error)
        self.assertEqual(dense, SOUTHERN_RING)

        dense, error = densify_ring(SOUTHERN_RING, SPHERICAL, PLANAR, big.metre() - 1)
        self.assertIsNone(error)
        self.assertEqual(len(dense), 7)

        dense, error = densify_ring(SOUTHERN_RING, RHUMB, PLANAR, 10.0)
        self.assertIsNone(error)
        self.assertEqual(len(dense), 5)

    def test_rhumb_ring_against_great_circles(self):
        ring = [LatLon(-70, 179), LatLon(-70, -1), LatLon(-60, -1), LatLon(-60, 179), LatLon(-70, 179)]
        dense, error = densify_ring(ring, RHUMB, SPHERICAL, 10.0)
        self.assertIsNone(error)
        self.assertEqual(len(dense), 1539)

    def test_full_width_ring(self):
        ring = [
            LatLon(-70, 180), LatLon(-70, 0), LatLon(-70, -180),
            LatLon(-60, -180), LatLon(-60, 0), LatLon(-60, 180), LatLon(-70, 180),
        ]
        dense, error = densify_ring(ring, RHUMB, PLANAR, 1.0)
        self.assertIsNone(error)
        self.assertEqual(len(dense), 7)

    def test_antimeridian_rectangle(self):
        ring = [LatLon(-10, 180), LatLon(-10, -180), LatLon(70, -180), LatLon(0, 180), LatLon(-10, 180)]
        dense, error = densify_ring(ring, RHUMB, PLANAR, 1.0)
        self.assertIsNone(error)
        self.assertEqual(len(dense), 5)

    def test_too_few_points(self):
        with self.assertRaises(InvalidGeometryError):
            densify_ring([P0], SPHERICAL, PLANAR, 10.0)
        with self.assertRaises(InvalidGeometryError):
            densify_ring([], SPHERICAL, PLANAR, 10.0)


class TestToleranceTooLow(unittest.TestCase):
    """Test the depth ceiling and the soft error it returns."""

    RING = [LatLon(-55, -154.5), LatLon(-35, -180), LatLon(-25, -165), LatLon(-55, -154.5)]

    def test_depth_ceiling(self):
        config = DensifyConfig(max_depth=5)
        with self.assertLogs("geometry.densify", level="WARNING"):
            result = densify_ring(self.RING, SPHERICAL, PLANAR, 0.0001, config)

        self.assertFalse(result.ok)
        self.assertEqual(len(result.geometry), 3 * 16 + 1)
        self.assertIsInstance(result.error, ToleranceTooLowError)
        self.assertEqual(result.error.failed_segments, 48)
        self.assertGreater(result.error.worst_error, 0.0001)

    def test_raise_for_tolerance(self):
        result = densify_ring(self.RING, SPHERICAL, PLANAR, 0.0001, DensifyConfig(max_depth=2))
        with self.assertRaises(ToleranceTooLowError):
            result.raise_for_tolerance()

        ok = densify_ring(self.RING, SPHERICAL, PLANAR, 1e6)
        self.assertEqual(ok.raise_for_tolerance(), self.RING)

    def test_invalid_config(self):
        with self.assertRaises(ValueError):
            DensifyConfig(max_depth=0)

    def test_combine(self):
        combined = ToleranceTooLowError.combine(ToleranceTooLowError(2, 5.0), ToleranceTooLowError(3, 7.0))
        self.assertEqual(combined.failed_segments, 5)
        self.assertEqual(combined.worst_error, 7.0)
        self.assertIsNone(ToleranceTooLowError.combine(None, None))

    def test_combine_with_unconverged(self):
        unconverged = ToleranceTooLowError(1, math.nan, unconverged_segments=1)
        too_coarse = ToleranceTooLowError(2, 5.0)
        for combined in [
            ToleranceTooLowError.combine(unconverged, too_coarse),
            ToleranceTooLowError.combine(too_coarse, unconverged),
        ]:
            self.assertEqual(combined.failed_segments, 3)
            self.assertEqual(combined.unconverged_segments, 1)
            self.assertEqual(combined.worst_error, 5.0)
            self.assertIn("1 without a converged solution", str(combined))

        both = ToleranceTooLowError.combine(unconverged, unconverged)
        self.assertEqual(both.unconverged_segments, 2)
        self.assertTrue(math.isnan(both.worst_error))


class TestDensifyPolygons(unittest.TestCase):
    """Test polygon and multipolygon densification."""

    def test_polygon(self):
        e = segment_error(P0, P1, SPHERICAL, PLANAR).metre()
        polygon, error = densify_polygon([TRIANGLE, TRIANGLE], SPHERICAL, PLANAR, e - 1)
        self.assertIsNone(error)
        self.assertEqual(len(polygon), 2)
        self.assertEqual([len(ring) for ring in polygon], [5, 5])

    def test_multipolygon_merges_errors(self):
        config = DensifyConfig(max_depth=2)
        multipolygon = [[TestToleranceTooLow.RING], [TestToleranceTooLow.RING]]
        result = densify_multipolygon(multipolygon, SPHERICAL, PLANAR, 0.0001, config)
        self.assertEqual(len(result.geometry), 2)
        self.assertEqual(result.error.failed_segments, 12)

    def test_multipolygon_hard_error_aborts(self):
        with self.assertRaises(InvalidGeometryError):
            densify_multipolygon([[TRIANGLE], [[P0]]], SPHERICAL, PLANAR, 10.0)


class TestDensifyCancellation(unittest.TestCase):
    """Test cancellation of long densification runs."""

    def test_cancelled_token(self):
        token = CancellationToken()
        token.cancel()
        with self.assertRaises(OperationCancelledError):
            densify_ring(TRIANGLE, SPHERICAL, PLANAR, 1.0, DensifyConfig(token=token))

    def test_expired_deadline(self):
        token = CancellationToken.with_timeout(0.0)
        with self.assertRaises(OperationCancelledError):
            densify_polygon([TRIANGLE], SPHERICAL, PLANAR, 1.0, DensifyConfig(token=token))


if __name__ == "__main__":
    unittest.main()
