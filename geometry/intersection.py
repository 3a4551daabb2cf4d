"""
Segment and LineString Intersection.

Segments are treated as straight lines on the Mercator plane, i.e. as rhumb
lines. Each test starts with a longitude/latitude bounding-box rejection so
that most disjoint pairs never reach the projection.

Known limitation
----------------
Longitudes are projected as given. Two segments that cross the antimeridian
(e.g. 170 -> -170) are therefore treated as spanning the whole globe and may
be reported as intersecting near the prime meridian. Use denormalised
longitudes (170 -> 190) for such segments.
"""

from typing import List, Optional, Sequence

import numpy as np

from geocommon.types import LatLon
from geodesy.projections import MercatorPoint, mercator_points


def _disjoint(a1: float, a2: float, b1: float, b2: float) -> bool:
    return max(a1, a2) < min(b1, b2) or max(b1, b2) < min(a1, a2)


def segment_intersection(p1: LatLon, p2: LatLon, q1: LatLon, q2: LatLon) -> Optional[LatLon]:
    """Intersection of segments p1-p2 and q1-q2.

    Parameters
    ----------
    p1, p2 : LatLon
        First segment.
    q1, q2 : LatLon
        Second segment.

    Returns
    -------
    LatLon or None
        The crossing point, or None when the segments do not meet. Parallel
        and collinear segments never meet.

    Examples
    --------
    >>> segment_intersection(LatLon(0, 0), LatLon(20, 20), LatLon(0, 10), LatLon(20, 10))
    LatLon(lat=10.155..., lon=10.0)
    """
    if _disjoint(p1.lon, p2.lon, q1.lon, q2.lon):
        return None
    if _disjoint(p1.lat, p2.lat, q1.lat, q2.lat):
        return None

    xs, ys = mercator_points(
        np.array([p1.lat, p2.lat, q1.lat, q2.lat]),
        np.array([p1.lon, p2.lon, q1.lon, q2.lon])
    )
    p1x, p2x, q1x, q2x = (float(v) for v in xs)
    p1y, p2y, q1y, q2y = (float(v) for v in ys)

    s1x, s1y = p2x - p1x, p2y - p1y
    s2x, s2y = q2x - q1x, q2y - q1y

    denominator = -s2x * s1y + s1x * s2y
    if denominator == 0:
        return None

    s = (-s1y * (p1x - q1x) + s1x * (p1y - q1y)) / denominator
    if not 0 <= s <= 1:
        return None

    t = (s2x * (p1y - q1y) - s2y * (p1x - q1x)) / denominator
    if not 0 <= t <= 1:
        return None

    return MercatorPoint(p1x + t * s1x, p1y + t * s1y).to_latlon()


def segments_intersect(p1: LatLon, p2: LatLon, q1: LatLon, q2: LatLon) -> bool:
    return segment_intersection(p1, p2, q1, q2) is not None


def linestring_intersections(l1: Sequence[LatLon], l2: Sequence[LatLon]) -> List[LatLon]:
    """All crossings between the segments of two linestrings.

    Points are reported once per pair of crossing segments, so a crossing at
    a shared vertex can appear more than once.
    """
    if len(l1) < 2 or len(l2) < 2:
        return []

    intersections = []
    for p1, p2 in zip(l1[:-1], l1[1:]):
        for q1, q2 in zip(l2[:-1], l2[1:]):
            point = segment_intersection(p1, p2, q1, q2)
            if point is not None:
                intersections.append(point)
    return intersections


def linestrings_intersect(l1: Sequence[LatLon], l2: Sequence[LatLon]) -> bool:
    if len(l1) < 2 or len(l2) < 2:
        return False

    return any(
        segments_intersect(p1, p2, q1, q2)
        for p1, p2 in zip(l1[:-1], l1[1:])
        for q1, q2 in zip(l2[:-1], l2[1:])
    )
