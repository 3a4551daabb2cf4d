"""
Point and Geometry Types.

``LatLon`` is the fundamental spatial type: a latitude/longitude pair in
degrees. Rings, polygons and multipolygons are plain lists of points, as in
GeoJSON but with latitude first.

Notes
-----
A ``LatLon`` with a NaN component is invalid. Invalid points are ordinary
values (they are what unconvergent computations return); check them with
``valid()`` rather than expecting an exception.
"""

from dataclasses import dataclass
from typing import List, Tuple
import numpy as np

from geocommon.angles import is_valid, wrap90, wrap180
from geocommon.constants import GeodesyConstants

_EPSILON = GeodesyConstants.MACHINE_EPSILON.value


@dataclass(frozen=True, eq=False)
class LatLon:
    """A geographic position in degrees.

    Attributes
    ----------
    lat : float
        Latitude in DEGREES, positive north.
    lon : float
        Longitude in DEGREES, positive east.

    Notes
    -----
    - The constructor stores its arguments verbatim so geometries may use
      denormalised longitudes (e.g. 0..360 around the antimeridian). Use
      ``from_degrees`` to wrap into the canonical ranges.
    - Equality tolerates a difference of one machine epsilon per component.
      Instances are therefore not hashable.

    Examples
    --------
    >>> LatLon.from_degrees(100, 190)
    LatLon(lat=80.0, lon=-170.0)
    """
    lat: float
    lon: float

    __hash__ = None

    @classmethod
    def from_degrees(cls, lat: float, lon: float) -> 'LatLon':
        """Create a point with latitude wrapped to [-90, 90] and longitude
        to (-180, 180]."""
        return cls(wrap90(lat), wrap180(lon))

    @classmethod
    def from_lonlat(cls, lon: float, lat: float) -> 'LatLon':
        """Create a point from GeoJSON (longitude, latitude) order."""
        return cls(lat, lon)

    @classmethod
    def invalid(cls) -> 'LatLon':
        return cls(float('nan'), float('nan'))

    def valid(self) -> bool:
        return is_valid(self.lat) and is_valid(self.lon)

    def equals(self, other: 'LatLon') -> bool:
        """Compare two points allowing machine-epsilon differences."""
        return (
            abs(self.lat - other.lat) <= _EPSILON
            and abs(self.lon - other.lon) <= _EPSILON
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LatLon):
            return NotImplemented
        return self.equals(other)

    def to_radians(self) -> Tuple[float, float]:
        """Return (latitude, longitude) in radians."""
        return float(np.radians(self.lat)), float(np.radians(self.lon))

    def lonlat(self) -> Tuple[float, float]:
        """Return (longitude, latitude), GeoJSON order."""
        return self.lon, self.lat

    def __str__(self) -> str:
        return f"{self.lat:.4f}, {self.lon:.4f}"


# Geometry aliases
Ring = List[LatLon]
Polygon = List[Ring]
MultiPolygon = List[Polygon]
