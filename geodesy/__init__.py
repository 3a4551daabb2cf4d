"""
Geodesy Module.

All Earth-surface calculations originate from this package. No downstream
module implements distance, bearing or interpolation formulas itself.

This module provides:
- Earth models: spherical (great circle), rhumb line, ellipsoidal
  (Vincenty and Karney) and planar (degree space)
- Model-agnostic helpers dispatching on an Earth model
- Ellipsoids, ECEF coordinates and 3D vectors
- Mercator projection onto the unit square
- Degrees-minutes-seconds parsing and formatting
"""

from geodesy.base import EarthModel, ModelPoint

from geodesy.spherical import LatLonSpherical, SphericalModel, EARTH_RADIUS
from geodesy.rhumb import LatLonRhumb, RhumbModel
from geodesy.vincenty import (
    LatLonEllipsoidalVincenty,
    VincentyModel,
    vincenty_direct,
    vincenty_inverse,
)
from geodesy.planar import LatLonPlanar, PlanarModel
from geodesy.geodesic import LatLonGeodesic, GeodesicModel, geodesic_inverse

from geodesy.model import (
    SPHERICAL,
    RHUMB,
    VINCENTY,
    PLANAR,
    GEODESIC,
    model_by_name,
    distance,
    initial_bearing,
    final_bearing,
    destination_point,
    mid_point,
    intermediate_point,
    intermediate_points,
)

from geodesy.coordinate_models import (
    Ellipsoid,
    WGS84,
    Cartesian,
    LatLonEllipsoidal,
    geodetic_to_ecef,
    ecef_to_geodetic,
)
from geodesy.vector3d import Vector3D
from geodesy.projections import MercatorPoint, MERCATOR_MAX_LATITUDE, mercator_point
from geodesy.dms import (
    DMS_FORMAT_DEG,
    DMS_FORMAT_DEG_MIN,
    DMS_FORMAT_DEG_MIN_SEC,
    parse_dms,
    format_dms,
    parse_latlon,
    format_latlon,
)

__all__ = [
    # Interfaces
    "EarthModel",
    "ModelPoint",
    # Earth models
    "LatLonSpherical",
    "SphericalModel",
    "EARTH_RADIUS",
    "LatLonRhumb",
    "RhumbModel",
    "LatLonEllipsoidalVincenty",
    "VincentyModel",
    "vincenty_direct",
    "vincenty_inverse",
    "LatLonPlanar",
    "PlanarModel",
    "LatLonGeodesic",
    "GeodesicModel",
    "geodesic_inverse",
    # Dispatch helpers
    "SPHERICAL",
    "RHUMB",
    "VINCENTY",
    "PLANAR",
    "GEODESIC",
    "model_by_name",
    "distance",
    "initial_bearing",
    "final_bearing",
    "destination_point",
    "mid_point",
    "intermediate_point",
    "intermediate_points",
    # Coordinate models
    "Ellipsoid",
    "WGS84",
    "Cartesian",
    "LatLonEllipsoidal",
    "geodetic_to_ecef",
    "ecef_to_geodetic",
    "Vector3D",
    # Projections
    "MercatorPoint",
    "MERCATOR_MAX_LATITUDE",
    "mercator_point",
    # DMS
    "DMS_FORMAT_DEG",
    "DMS_FORMAT_DEG_MIN",
    "DMS_FORMAT_DEG_MIN_SEC",
    "parse_dms",
    "format_dms",
    "parse_latlon",
    "format_latlon",
]
