"""
Common utilities shared by the geodesy and geometry packages.

This package provides foundational components used across all modules:
- Geodetic constants with uncertainty bounds
- Angle normalisation and the Distance value type
- Point and geometry type definitions
- Logging, cancellation and thread-pool fan-out
"""

from geocommon.constants import Constant, GeodesyConstants
from geocommon.angles import (
    wrap90,
    wrap180,
    wrap360,
    canonical_longitude,
    unwrap_longitude_delta,
)
from geocommon.units import Distance, ensure_distance, ureg, Q_
from geocommon.types import LatLon, Ring, Polygon, MultiPolygon
from geocommon.logging_config import get_logger
from geocommon.cancellation import CancellationToken, OperationCancelledError
from geocommon.parallel import parallel_map

__all__ = [
    "Constant",
    "GeodesyConstants",
    "wrap90",
    "wrap180",
    "wrap360",
    "canonical_longitude",
    "unwrap_longitude_delta",
    "Distance",
    "ensure_distance",
    "ureg",
    "Q_",
    "LatLon",
    "Ring",
    "Polygon",
    "MultiPolygon",
    "get_logger",
    "CancellationToken",
    "OperationCancelledError",
    "parallel_map",
]
