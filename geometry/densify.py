"""
Densification of Segments, Rings and Polygons.

Polygon edges are usually drawn as straight lines by some *reference* model
(typically planar: a straight line in longitude/latitude), while the edge is
meant to follow the path of another *model* (a great circle, a rhumb line).
Densification inserts points along the model path until, for every
sub-segment, the reference-model midpoint lies within a tolerance of the
model path.

Algorithm
---------
Each segment is bisected recursively over the fractions [0, 1] of the
*original* segment. At a sub-interval [from, to] with end points pf, pt:

1. the candidate point is the model point at fraction (from + to) / 2 of
   the original segment;
2. the deviation is the model distance between the candidate and the
   reference-model midpoint of pf-pt;
3. if the deviation is within tolerance, pf-pt is kept as is, otherwise
   the candidate is inserted and both halves are processed in turn.

Bisection stops at a depth ceiling (default 15 levels, i.e. at most 2**14
sub-segments per edge). Sub-segments still above tolerance at the ceiling
are kept, and the result carries a ``ToleranceTooLowError`` instead of
raising it. A sub-segment whose candidate or deviation has no converged
solution (NaN from an iterative solver) is kept unsplit and counted in
the same signal as unconverged.

Examples
--------
>>> from geodesy.model import SPHERICAL, PLANAR
>>> ring, err = densify_ring(ring, SPHERICAL, PLANAR, 1000.0)
>>> err is None
True
"""

from dataclasses import dataclass
from typing import Any, List, NamedTuple, Optional, Tuple, Union

import numpy as np
import pint

from geocommon.angles import canonical_longitude, is_valid
from geocommon.cancellation import CancellationToken
from geocommon.constants import GeodesyConstants
from geocommon.logging_config import get_logger
from geocommon.types import LatLon, MultiPolygon, Polygon, Ring
from geocommon.units import Distance, ensure_distance
from geodesy.base import EarthModel, ModelPoint
from geometry.errors import (
    InternalError,
    InvalidGeometryError,
    InvalidToleranceError,
    ToleranceTooLowError,
)

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = int(GeodesyConstants.DENSIFY_MAX_DEPTH.value)

Tolerance = Union[Distance, pint.Quantity, float]

# points, soft error
_Partial = Tuple[List[LatLon], Optional[ToleranceTooLowError]]


@dataclass(frozen=True)
class DensifyConfig:
    """Settings of a densification run.

    Attributes
    ----------
    max_depth : int
        Recursion ceiling; at most 2**(max_depth - 1) sub-segments are
        produced per original segment. Default 15.
    token : CancellationToken, optional
        Checked at every recursion step.
    """
    max_depth: int = DEFAULT_MAX_DEPTH
    token: Optional[CancellationToken] = None

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")


_DEFAULT_CONFIG = DensifyConfig()


class DensifyResult(NamedTuple):
    """Densified geometry plus the soft tolerance signal.

    Unpacks as ``geometry, error``.

    Attributes
    ----------
    geometry : list
        Densified points, ring, polygon or multipolygon.
    error : ToleranceTooLowError or None
        Set when some sub-segments are still above tolerance.
    """
    geometry: Any
    error: Optional[ToleranceTooLowError]

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_tolerance(self) -> Any:
        """Return the geometry, raising the soft error if there is one."""
        if self.error is not None:
            raise self.error
        return self.geometry


def _validate_tolerance(tolerance: Tolerance) -> float:
    metres = ensure_distance(tolerance).metre()
    if np.isnan(metres) or metres <= 0:
        raise InvalidToleranceError(metres)
    return metres


def _deviation(
    candidate: LatLon,
    start: LatLon,
    end: LatLon,
    model: EarthModel,
    ref_model: EarthModel
) -> float:
    """Model distance between a candidate point and the reference midpoint
    of start-end, in meters."""
    # every model follows the meridian between points of equal longitude
    if canonical_longitude(start.lon) == canonical_longitude(end.lon):
        return 0.0

    candidate = LatLon(candidate.lat, canonical_longitude(candidate.lon))
    reference = ref_model.point(start).intermediate_point_to(end, 0.5)
    return model.point(candidate).distance_to(reference).metre()


def segment_error(p0: LatLon, p1: LatLon, model: EarthModel, ref_model: EarthModel) -> Distance:
    """Deviation between the model and reference-model midpoints of a segment.

    Parameters
    ----------
    p0, p1 : LatLon
        Segment end points.
    model : EarthModel
        Model of the intended path.
    ref_model : EarthModel
        Model of the path as drawn.

    Returns
    -------
    Distance
        Model distance between the two midpoints; zero for segments along
        a meridian.
    """
    candidate = model.point(p0).intermediate_point_to(p1, 0.5)
    return Distance(_deviation(candidate, p0, p1, model, ref_model))


def _densify(
    origin: ModelPoint,
    end: LatLon,
    pf: LatLon,
    pt: LatLon,
    lo: float,
    hi: float,
    model: EarthModel,
    ref_model: EarthModel,
    tolerance: float,
    depth: int,
    token: Optional[CancellationToken]
) -> _Partial:
    if token is not None:
        token.check()

    depth -= 1
    mid = (lo + hi) / 2
    candidate = origin.intermediate_point_to(end, mid)
    error = _deviation(candidate, pf, pt, model, ref_model) if candidate.valid() else float('nan')

    # NaN means no solution: never insert the point, never recurse on it
    if not is_valid(error):
        logger.debug(f"Segment {pf} - {pt} has no converged solution under {model.name}")
        return [pf, pt], ToleranceTooLowError(1, float('nan'), unconverged_segments=1)

    if error <= tolerance:
        return [pf, pt], None

    if depth == 0:
        logger.debug(f"Segment {pf} - {pt} still {error:.3f} m off at the depth ceiling")
        return [pf, pt], ToleranceTooLowError(1, error)

    left, left_error = _densify(origin, end, pf, candidate, lo, mid, model, ref_model, tolerance, depth, token)
    right, right_error = _densify(origin, end, candidate, pt, mid, hi, model, ref_model, tolerance, depth, token)
    if len(left) < 2 or len(right) < 2:
        raise InternalError(f"Bisection of {pf} - {pt} returned fewer than 2 points")

    return left + right[1:], ToleranceTooLowError.combine(left_error, right_error)


def _densify_segment(
    p0: LatLon,
    p1: LatLon,
    model: EarthModel,
    ref_model: EarthModel,
    tolerance: float,
    config: DensifyConfig
) -> _Partial:
    return _densify(
        model.point(p0), p1, p0, p1, 0.0, 1.0,
        model, ref_model, tolerance, config.max_depth, config.token
    )


def _densify_ring(
    ring: Ring,
    model: EarthModel,
    ref_model: EarthModel,
    tolerance: float,
    config: DensifyConfig
) -> _Partial:
    if len(ring) < 2:
        raise InvalidGeometryError(f"Ring has {len(ring)} points only")

    closed = ring[0] == ring[-1]
    edges = list(zip(ring[:-1], ring[1:]))
    if not closed:
        edges.append((ring[-1], ring[0]))

    points = [ring[0]]
    error = None
    for start, end in edges:
        segment, edge_error = _densify_segment(start, end, model, ref_model, tolerance, config)
        if len(segment) < 2:
            raise InternalError(f"Densified segment {start} - {end} has fewer than 2 points")
        points.extend(segment[1:])
        error = ToleranceTooLowError.combine(error, edge_error)

    return points, error


def _densify_polygon(
    polygon: Polygon,
    model: EarthModel,
    ref_model: EarthModel,
    tolerance: float,
    config: DensifyConfig
) -> Tuple[Polygon, Optional[ToleranceTooLowError]]:
    rings = []
    error = None
    for ring in polygon:
        dense, ring_error = _densify_ring(ring, model, ref_model, tolerance, config)
        rings.append(dense)
        error = ToleranceTooLowError.combine(error, ring_error)
    return rings, error


def _finish(result: Any, error: Optional[ToleranceTooLowError], what: str) -> DensifyResult:
    if error is not None:
        logger.warning(f"Densified {what} is coarser than requested: {error}")
    return DensifyResult(result, error)


def densify_segment(
    p0: LatLon,
    p1: LatLon,
    model: EarthModel,
    ref_model: EarthModel,
    tolerance: Tolerance,
    config: Optional[DensifyConfig] = None
) -> DensifyResult:
    """Densify a single segment.

    Parameters
    ----------
    p0, p1 : LatLon
        Segment end points.
    model : EarthModel
        Model of the intended path; inserted points lie on it.
    ref_model : EarthModel
        Model of the path as drawn between consecutive points.
    tolerance : Distance, pint.Quantity or float
        Maximum deviation (floats are meters).
    config : DensifyConfig, optional
        Depth ceiling and cancellation token.

    Returns
    -------
    DensifyResult
        Points from ``p0`` to ``p1`` inclusive, and the soft error.

    Raises
    ------
    InvalidToleranceError
        If the tolerance is not positive.
    OperationCancelledError
        If the token trips.
    """
    tolerance_m = _validate_tolerance(tolerance)
    points, error = _densify_segment(p0, p1, model, ref_model, tolerance_m, config or _DEFAULT_CONFIG)
    return _finish(points, error, "segment")


def densify_ring(
    ring: Ring,
    model: EarthModel,
    ref_model: EarthModel,
    tolerance: Tolerance,
    config: Optional[DensifyConfig] = None
) -> DensifyResult:
    """Densify every edge of a ring.

    A ring is closed when its first and last points are equal; otherwise
    the closing edge from the last point back to the first is densified
    as well and the first point is repeated at the end of the result.

    Raises
    ------
    InvalidGeometryError
        If the ring has fewer than 2 points.
    InvalidToleranceError
        If the tolerance is not positive.
    """
    tolerance_m = _validate_tolerance(tolerance)
    points, error = _densify_ring(ring, model, ref_model, tolerance_m, config or _DEFAULT_CONFIG)
    return _finish(points, error, "ring")


def densify_polygon(
    polygon: Polygon,
    model: EarthModel,
    ref_model: EarthModel,
    tolerance: Tolerance,
    config: Optional[DensifyConfig] = None
) -> DensifyResult:
    """Densify the outer ring and every hole of a polygon."""
    tolerance_m = _validate_tolerance(tolerance)
    rings, error = _densify_polygon(polygon, model, ref_model, tolerance_m, config or _DEFAULT_CONFIG)
    return _finish(rings, error, "polygon")


def densify_multipolygon(
    multipolygon: MultiPolygon,
    model: EarthModel,
    ref_model: EarthModel,
    tolerance: Tolerance,
    config: Optional[DensifyConfig] = None
) -> DensifyResult:
    """Densify every polygon of a multipolygon.

    Soft errors of all polygons are merged; any hard error aborts the
    whole call.
    """
    tolerance_m = _validate_tolerance(tolerance)
    config = config or _DEFAULT_CONFIG

    polygons = []
    error = None
    for polygon in multipolygon:
        dense, polygon_error = _densify_polygon(polygon, model, ref_model, tolerance_m, config)
        polygons.append(dense)
        error = ToleranceTooLowError.combine(error, polygon_error)

    logger.debug(f"Densified {len(multipolygon)} polygon(s) at {tolerance_m} m")
    return _finish(polygons, error, "multipolygon")
