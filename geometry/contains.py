"""
Point-in-Ring, Polygon and MultiPolygon Containment.

A ray is cast due north from the test point and the ring edges it crosses
are counted; an odd count means the point is inside. Whether the ray passes
a curved edge is decided by comparing bearings under the Earth model, so a
ring is only as accurate as its densification under that model.

Boundary convention
-------------------
Points on the boundary of an outer ring are inside; points on the boundary
of a hole are not in the hole, hence inside the polygon.

Notes
-----
Rings crossing the antimeridian must use denormalised longitudes
(e.g. 160 .. 220), because the bounding-box test works on raw longitudes.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from geocommon.types import LatLon, MultiPolygon, Polygon, Ring
from geodesy.base import EarthModel
from geometry.errors import InvalidGeometryError


@dataclass(frozen=True)
class Bound:
    """Latitude/longitude bounding box in degrees, edges inclusive."""
    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float

    @classmethod
    def empty(cls) -> 'Bound':
        return cls(np.inf, np.inf, -np.inf, -np.inf)

    def is_empty(self) -> bool:
        return self.min_lat > self.max_lat or self.min_lon > self.max_lon

    def contains(self, point: LatLon) -> bool:
        return (
            self.min_lat <= point.lat <= self.max_lat
            and self.min_lon <= point.lon <= self.max_lon
        )


def ring_bound(ring: Ring) -> Bound:
    if len(ring) == 0:
        return Bound.empty()
    lats = np.array([p.lat for p in ring], dtype=np.float64)
    lons = np.array([p.lon for p in ring], dtype=np.float64)
    return Bound(float(lats.min()), float(lons.min()), float(lats.max()), float(lons.max()))


def polygon_bounds(polygon: Polygon) -> List[Bound]:
    return [ring_bound(ring) for ring in polygon]


def multipolygon_bounds(multipolygon: MultiPolygon) -> List[List[Bound]]:
    return [polygon_bounds(polygon) for polygon in multipolygon]


def _ray_intersect(p: LatLon, s: LatLon, e: LatLon, model: EarthModel) -> Tuple[bool, bool]:
    """Test the northward ray from ``p`` against edge s-e.

    Returns
    -------
    Tuple[bool, bool]
        (crosses, on_boundary)
    """
    if s.lon > e.lon:
        s, e = e, s

    lat, lon = p.lat, p.lon

    if lon == s.lon:
        if lat == s.lat:
            return False, True
        if s.lon == e.lon:
            # vertical edge
            if min(s.lat, e.lat) <= lat <= max(s.lat, e.lat):
                return False, True
        # a ray through a vertex would also cross the adjacent edge
        lon = float(np.nextafter(lon, np.inf))
    elif lon == e.lon:
        if lat == e.lat:
            return False, True
        lon = float(np.nextafter(lon, np.inf))

    if lon < s.lon or lon > e.lon:
        return False, False

    if s.lat > e.lat:
        if lat > s.lat:
            return False, False
        if lat < e.lat:
            return True, False
    else:
        if lat > e.lat:
            return False, False
        if lat < s.lat:
            return True, False

    start = model.point(s)
    edge_bearing = start.initial_bearing_to(e)
    point_bearing = start.initial_bearing_to(LatLon(lat, lon))

    if edge_bearing == point_bearing:
        return False, True

    return edge_bearing <= point_bearing, False


def _check_ring(ring: Ring) -> None:
    if len(ring) == 0:
        raise InvalidGeometryError("Ring has 0 points only")


def ring_with_bound_contains(
    ring: Ring,
    bound: Optional[Bound],
    point: LatLon,
    is_hole: bool,
    model: EarthModel
) -> bool:
    """``ring_contains`` with a precomputed bound.

    Parameters
    ----------
    ring : Ring
        Ring in either orientation, closed or not.
    bound : Bound, optional
        Bound of ``ring``; recomputed when None or empty.
    point : LatLon
        Point to test.
    is_hole : bool
        Whether boundary points count as outside.
    model : EarthModel
        Model of the edges.
    """
    _check_ring(ring)
    if bound is None or bound.is_empty():
        bound = ring_bound(ring)

    if not bound.contains(point):
        return False

    inside, on = _ray_intersect(point, ring[-1], ring[0], model)
    if on:
        return not is_hole

    for s, e in zip(ring[:-1], ring[1:]):
        crosses, on = _ray_intersect(point, s, e, model)
        if on:
            return not is_hole
        if crosses:
            inside = not inside

    return inside


def ring_contains(ring: Ring, point: LatLon, is_hole: bool, model: EarthModel) -> bool:
    """Whether ``point`` is inside ``ring`` under ``model``.

    Examples
    --------
    >>> square = [LatLon(0, 0), LatLon(0, 1), LatLon(1, 1), LatLon(1, 0)]
    >>> ring_contains(square, LatLon(0.5, 0.5), False, RHUMB)
    True
    """
    return ring_with_bound_contains(ring, None, point, is_hole, model)


def polygon_with_bound_contains(
    polygon: Polygon,
    bounds: Optional[Sequence[Bound]],
    point: LatLon,
    model: EarthModel
) -> bool:
    """``polygon_contains`` with bounds from ``polygon_bounds``."""
    if len(polygon) == 0:
        raise InvalidGeometryError("Polygon has no rings")
    if bounds is None:
        bounds = polygon_bounds(polygon)

    if not ring_with_bound_contains(polygon[0], bounds[0], point, False, model):
        return False

    for hole, bound in zip(polygon[1:], bounds[1:]):
        if ring_with_bound_contains(hole, bound, point, True, model):
            return False

    return True


def polygon_contains(polygon: Polygon, point: LatLon, model: EarthModel) -> bool:
    """Whether ``point`` is inside the outer ring and outside every hole."""
    return polygon_with_bound_contains(polygon, None, point, model)


def multipolygon_with_bound_contains(
    multipolygon: MultiPolygon,
    bounds: Optional[Sequence[Sequence[Bound]]],
    point: LatLon,
    model: EarthModel
) -> bool:
    """``multipolygon_contains`` with bounds from ``multipolygon_bounds``."""
    if bounds is None:
        bounds = multipolygon_bounds(multipolygon)

    return any(
        polygon_with_bound_contains(polygon, polygon_bound, point, model)
        for polygon, polygon_bound in zip(multipolygon, bounds)
    )


def multipolygon_contains(multipolygon: MultiPolygon, point: LatLon, model: EarthModel) -> bool:
    return multipolygon_with_bound_contains(multipolygon, None, point, model)
