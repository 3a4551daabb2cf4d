"""
Geometry Module.

Operations on rings, polygons and multipolygons written against the
``geodesy.EarthModel`` interface:

- Densification of edges until two models agree within a tolerance
- Point containment by ray casting
- Segment and linestring intersection on the Mercator plane
"""

from geometry.errors import (
    GeodesyError,
    InvalidArgumentError,
    InvalidToleranceError,
    InvalidGeometryError,
    InternalError,
    ToleranceTooLowError,
    OperationCancelledError,
)
from geometry.densify import (
    DensifyConfig,
    DensifyResult,
    segment_error,
    densify_segment,
    densify_ring,
    densify_polygon,
    densify_multipolygon,
)
from geometry.contains import (
    Bound,
    ring_bound,
    polygon_bounds,
    multipolygon_bounds,
    ring_contains,
    polygon_contains,
    multipolygon_contains,
    ring_with_bound_contains,
    polygon_with_bound_contains,
    multipolygon_with_bound_contains,
)
from geometry.intersection import (
    segment_intersection,
    segments_intersect,
    linestring_intersections,
    linestrings_intersect,
)

__all__ = [
    # Errors
    "GeodesyError",
    "InvalidArgumentError",
    "InvalidToleranceError",
    "InvalidGeometryError",
    "InternalError",
    "ToleranceTooLowError",
    "OperationCancelledError",
    # Densification
    "DensifyConfig",
    "DensifyResult",
    "segment_error",
    "densify_segment",
    "densify_ring",
    "densify_polygon",
    "densify_multipolygon",
    # Containment
    "Bound",
    "ring_bound",
    "polygon_bounds",
    "multipolygon_bounds",
    "ring_contains",
    "polygon_contains",
    "multipolygon_contains",
    "ring_with_bound_contains",
    "polygon_with_bound_contains",
    "multipolygon_with_bound_contains",
    # Intersection
    "segment_intersection",
    "segments_intersect",
    "linestring_intersections",
    "linestrings_intersect",
]
