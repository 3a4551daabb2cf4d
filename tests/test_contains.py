"""
Tests for point containment in rings, polygons and multipolygons.
"""

import unittest

from geocommon.types import LatLon
from geodesy.model import PLANAR, RHUMB, SPHERICAL, mid_point
from geocommon.angles import wrap360
from geometry.contains import (
    Bound,
    multipolygon_bounds,
    multipolygon_contains,
    multipolygon_with_bound_contains,
    polygon_bounds,
    polygon_contains,
    polygon_with_bound_contains,
    ring_bound,
    ring_contains,
    ring_with_bound_contains,
)
from geometry.errors import InvalidGeometryError


def ring_from_lonlat(*pairs):
    return [LatLon.from_lonlat(lon, lat) for lon, lat in pairs]


def interpolate(a, b, fraction):
    return LatLon(a.lat + fraction * (b.lat - a.lat), a.lon + fraction * (b.lon - a.lon))


# +-+ +-+
# | | | |
# | +-+ |
# |     |
# +-----+
TOWERS = ring_from_lonlat(
    (0, 0), (0, 1), (1, 1), (1, 0.5), (2, 0.5), (2, 1), (3, 1), (3, 0), (0, 0)
)

MODELS = (PLANAR, RHUMB, SPHERICAL)


class TestRingContains(unittest.TestCase):
    """Test ray casting against a non-convex ring."""

    CASES = [
        ("in base", (1.5, 0.25), True),
        ("in left tower", (0.5, 0.75), True),
        ("in middle", (1.5, 0.75), False),
        ("in right tower", (2.5, 0.75), True),
        ("in top middle", (1.5, 1.0), False),
        ("above", (2.5, 1.75), False),
        ("below", (2.5, -1.75), False),
        ("left", (-2.5, -0.75), False),
        ("right", (3.5, 0.75), False),
    ]

    def test_cases_in_both_orientations(self):
        reversed_ring = list(reversed(TOWERS))
        for model in MODELS:
            for name, (lon, lat), expected in self.CASES:
                with self.subTest(model=model.name, case=name):
                    point = LatLon(lat, lon)
                    self.assertEqual(ring_contains(TOWERS, point, False, model), expected)
                    self.assertEqual(ring_contains(reversed_ring, point, False, model), expected)

    def test_vertices_are_inside(self):
        for model in MODELS:
            for i, point in enumerate(TOWERS):
                with self.subTest(model=model.name, vertex=i):
                    self.assertTrue(ring_contains(TOWERS, point, False, model))

    def test_edge_midpoints_are_inside(self):
        for model in MODELS:
            for i in range(1, len(TOWERS)):
                with self.subTest(model=model.name, edge=i):
                    point = interpolate(TOWERS[i], TOWERS[i - 1], 0.5)
                    self.assertTrue(ring_contains(TOWERS, point, False, model))

    def test_collinear_outside_points(self):
        for model in MODELS:
            for i in range(1, len(TOWERS)):
                with self.subTest(model=model.name, edge=i):
                    for fraction in (5, -5):
                        point = interpolate(TOWERS[i], TOWERS[i - 1], fraction)
                        self.assertFalse(ring_contains(TOWERS, point, False, model))

    def test_boundary_of_hole_is_outside_the_hole(self):
        self.assertFalse(ring_contains(TOWERS, LatLon(0, 1.5), True, RHUMB))
        self.assertTrue(ring_contains(TOWERS, LatLon(0.25, 1.5), True, RHUMB))

    def test_open_ring(self):
        square = ring_from_lonlat((0, 0), (1, 0), (1, 1), (0, 1))
        self.assertTrue(ring_contains(square, LatLon(0.5, 0.5), False, RHUMB))
        self.assertTrue(ring_contains(square, LatLon(0.5, 0), False, RHUMB))

    def test_empty_ring(self):
        with self.assertRaises(InvalidGeometryError):
            ring_contains([], LatLon(0, 0), False, RHUMB)

    def test_denormalised_antimeridian_ring(self):
        ring = ring_from_lonlat((160, -10), (220, -10), (220, -55))
        for model in MODELS:
            with self.subTest(model=model.name):
                mid = mid_point(ring[0], ring[2], model)
                lon = wrap360(mid.lon)
                below = LatLon(mid.lat - 0.00001, lon)
                above = LatLon(mid.lat + 0.00001, lon)
                self.assertFalse(ring_contains(ring, below, False, model))
                self.assertTrue(ring_contains(ring, above, False, model))


class TestPolygonContains(unittest.TestCase):
    """Test holes and multipolygons."""

    def setUp(self):
        self.outer = ring_from_lonlat((0, 0), (3, 0), (3, 3), (0, 3), (0, 0))
        self.hole = ring_from_lonlat((1, 1), (2, 1), (2, 2), (1, 2), (1, 1))

    def test_polygon_without_hole(self):
        self.assertTrue(polygon_contains([self.outer], LatLon(1.5, 1.5), RHUMB))

    def test_hole_excludes_point(self):
        self.assertFalse(polygon_contains([self.outer, self.hole], LatLon(1.5, 1.5), RHUMB))
        reversed_hole = list(reversed(self.hole))
        self.assertFalse(polygon_contains([self.outer, reversed_hole], LatLon(1.5, 1.5), RHUMB))

    def test_hole_boundary_is_inside_polygon(self):
        polygon = [self.outer, self.hole]
        self.assertTrue(polygon_contains(polygon, LatLon(2, 2), RHUMB))
        self.assertTrue(polygon_contains(polygon, LatLon(1.5, 2), RHUMB))

    def test_empty_polygon(self):
        with self.assertRaises(InvalidGeometryError):
            polygon_contains([], LatLon(0, 0), RHUMB)

    def test_multipolygon(self):
        mp = [[ring_from_lonlat((0, 0), (1, 0), (1, 1), (0, 1), (0, 0))]]
        self.assertTrue(multipolygon_contains(mp, LatLon(0.5, 0.5), RHUMB))
        self.assertFalse(multipolygon_contains(mp, LatLon(1.5, 1.5), RHUMB))

        mp.append([ring_from_lonlat((2, 0), (3, 0), (3, 1), (2, 1), (2, 0))])
        self.assertTrue(multipolygon_contains(mp, LatLon(0.5, 2.5), RHUMB))
        self.assertFalse(multipolygon_contains(mp, LatLon(0.5, 1.5), RHUMB))

    def test_multipolygon_meridian_edges(self):
        mp = [[ring_from_lonlat((-10, -10), (10, -10), (10, 10), (-10, 10), (-10, -10))]]
        self.assertTrue(multipolygon_contains(mp, LatLon(10, 10), RHUMB))
        self.assertFalse(multipolygon_contains(mp, LatLon(10, 10.00000000001), RHUMB))
        self.assertTrue(multipolygon_contains(mp, LatLon(10, -9.99999999999999), RHUMB))


class TestBounds(unittest.TestCase):
    """Test bounding boxes and the precomputed-bound variants."""

    def test_ring_bound(self):
        bound = ring_bound(TOWERS)
        self.assertEqual(bound, Bound(min_lat=0, min_lon=0, max_lat=1, max_lon=3))
        self.assertTrue(bound.contains(LatLon(1, 3)))
        self.assertFalse(bound.contains(LatLon(1.1, 3)))

    def test_empty_bound(self):
        self.assertTrue(ring_bound([]).is_empty())
        self.assertTrue(Bound.empty().is_empty())
        self.assertFalse(ring_bound(TOWERS).is_empty())

    def test_with_bound_variants_agree(self):
        polygon = [TOWERS]
        mp = [polygon]
        bounds = polygon_bounds(polygon)
        multi_bounds = multipolygon_bounds(mp)
        for _, (lon, lat), expected in TestRingContains.CASES:
            point = LatLon(lat, lon)
            self.assertEqual(ring_with_bound_contains(TOWERS, bounds[0], point, False, RHUMB), expected)
            self.assertEqual(polygon_with_bound_contains(polygon, bounds, point, RHUMB), expected)
            self.assertEqual(multipolygon_with_bound_contains(mp, multi_bounds, point, RHUMB), expected)

    def test_empty_bound_is_recomputed(self):
        self.assertTrue(ring_with_bound_contains(TOWERS, Bound.empty(), LatLon(0.25, 1.5), False, RHUMB))


if __name__ == "__main__":
    unittest.main()
