"""
Great-Circle Geodesy on a Spherical Earth.

Distances are haversine great-circle distances; intermediate points are
spherical linear interpolations between the two unit vectors.

References
----------
- Sinnott, R.W. (1984). Virtues of the haversine. Sky and Telescope 68(2).
- Veness, C. Movable Type Scripts, "Calculate distance, bearing and more
  between Latitude/Longitude points".
"""

from dataclasses import dataclass
import numpy as np

from geocommon.angles import from_radians, unwrap_longitude_delta, wrap90, wrap180, wrap360
from geocommon.constants import GeodesyConstants
from geocommon.types import LatLon
from geocommon.units import Distance
from geodesy.base import EarthModel, ModelPoint
from geodesy.dms import parse_latlon
from geodesy.vector3d import Vector3D

EARTH_RADIUS = GeodesyConstants.EARTH_MEAN_RADIUS.value
_EPSILON = GeodesyConstants.MACHINE_EPSILON.value


def validate_radius(radius: float) -> None:
    if np.isnan(radius) or radius <= 0:
        raise ValueError(f"Earth radius must be positive, got {radius}")


def _angular_distance(phi1: float, phi2: float, delta_lambda: float) -> float:
    """Haversine central angle in radians."""
    delta_phi = phi2 - phi1
    a = (np.sin(delta_phi / 2) ** 2
         + np.cos(phi1) * np.cos(phi2) * np.sin(delta_lambda / 2) ** 2)
    return 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


@dataclass(frozen=True, eq=False)
class LatLonSpherical(ModelPoint):
    """A point on a sphere.

    Attributes
    ----------
    latlon : LatLon
        Position in degrees.
    radius : float
        Sphere radius in meters (default: mean Earth radius 6,371 km).

    Examples
    --------
    >>> p1 = LatLonSpherical(LatLon(52.205, 0.119))
    >>> p1.distance_to(LatLon(48.857, 2.351)).kilometre()
    404.279...
    """
    latlon: LatLon
    radius: float = EARTH_RADIUS

    def __post_init__(self):
        validate_radius(self.radius)

    @classmethod
    def from_degrees(cls, lat: float, lon: float, radius: float = EARTH_RADIUS) -> 'LatLonSpherical':
        return cls(LatLon.from_degrees(lat, lon), radius)

    @classmethod
    def parse(cls, *args, radius: float = EARTH_RADIUS) -> 'LatLonSpherical':
        """Parse a point; see ``geodesy.dms.parse_latlon``."""
        return cls(parse_latlon(*args), radius)

    def distance_to(self, other: LatLon) -> Distance:
        phi1, lambda1 = self.latlon.to_radians()
        phi2, lambda2 = other.to_radians()
        delta = _angular_distance(phi1, phi2, lambda2 - lambda1)
        return Distance(float(self.radius * delta))

    def initial_bearing_to(self, other: LatLon) -> float:
        if self.latlon == other:
            return float('nan')

        phi1, _ = self.latlon.to_radians()
        phi2, _ = other.to_radians()
        delta_lambda = np.radians(unwrap_longitude_delta(other.lon - self.latlon.lon))

        x = np.cos(phi1) * np.sin(phi2) - np.sin(phi1) * np.cos(phi2) * np.cos(delta_lambda)
        y = np.sin(delta_lambda) * np.cos(phi2)
        theta = np.arctan2(y, x)

        return wrap360(from_radians(theta))

    def final_bearing_on(self, other: LatLon) -> float:
        reverse = LatLonSpherical(other, self.radius).initial_bearing_to(self.latlon)
        return wrap360(reverse + 180.0)

    def mid_point_to(self, other: LatLon) -> LatLon:
        """Midpoint along the great circle, from the sum of the two
        n-vectors rotated so that self sits on the prime meridian."""
        phi1, _ = self.latlon.to_radians()
        phi2, _ = other.to_radians()
        delta_lambda = np.radians(unwrap_longitude_delta(other.lon - self.latlon.lon))

        a = Vector3D(float(np.cos(phi1)), 0.0, float(np.sin(phi1)))
        b = Vector3D(
            float(np.cos(phi2) * np.cos(delta_lambda)),
            float(np.cos(phi2) * np.sin(delta_lambda)),
            float(np.sin(phi2))
        )
        c = a + b

        phi_m = np.arctan2(c.z, np.sqrt(c.x * c.x + c.y * c.y))
        lambda_m = np.radians(self.latlon.lon) + np.arctan2(c.y, c.x)

        return LatLon(wrap90(from_radians(phi_m)), wrap180(from_radians(lambda_m)))

    def intermediate_point_to(self, other: LatLon, fraction: float) -> LatLon:
        if self.latlon == other:
            return self.latlon

        phi1, lambda1 = self.latlon.to_radians()
        phi2, lambda2 = other.to_radians()
        delta = _angular_distance(phi1, phi2, lambda2 - lambda1)
        if delta == 0.0:  # same point written with different longitudes, e.g. ±180
            return self.latlon

        a = np.sin((1 - fraction) * delta) / np.sin(delta)
        b = np.sin(fraction * delta) / np.sin(delta)

        x = a * np.cos(phi1) * np.cos(lambda1) + b * np.cos(phi2) * np.cos(lambda2)
        y = a * np.cos(phi1) * np.sin(lambda1) + b * np.cos(phi2) * np.sin(lambda2)
        z = a * np.sin(phi1) + b * np.sin(phi2)

        phi3 = np.arctan2(z, np.sqrt(x * x + y * y))
        lambda3 = np.arctan2(y, x)

        return LatLon(wrap90(from_radians(phi3)), wrap180(from_radians(lambda3)))

    def destination_point(self, distance: float, bearing: float) -> LatLon:
        phi1, lambda1 = self.latlon.to_radians()
        delta = distance / self.radius  # angular distance in radians
        theta = np.radians(bearing)

        sin_phi2 = np.sin(phi1) * np.cos(delta) + np.cos(phi1) * np.sin(delta) * np.cos(theta)
        phi2 = np.arcsin(np.clip(sin_phi2, -1.0, 1.0))
        y = np.sin(theta) * np.sin(delta) * np.cos(phi1)
        x = np.cos(delta) - np.sin(phi1) * sin_phi2
        lambda2 = lambda1 + np.arctan2(y, x)

        return LatLon(wrap90(from_radians(phi2)), wrap180(from_radians(lambda2)))

    def intersection(self, bearing1: float, other: LatLon, bearing2: float) -> LatLon:
        """Intersection of two great-circle paths given by point and bearing.

        Parameters
        ----------
        bearing1 : float
            Initial bearing from self in degrees.
        other : LatLon
            Start of the second path.
        bearing2 : float
            Initial bearing from ``other`` in degrees.

        Returns
        -------
        LatLon
            Intersection point; self when the start points coincide, an
            invalid (NaN) point when there are infinitely many intersections
            or the intersection is ambiguous.

        Examples
        --------
        >>> p1 = LatLonSpherical(LatLon(51.8853, 0.2545))
        >>> p1.intersection(108.547, LatLon(49.0034, 2.5735), 32.435)
        LatLon(lat=50.9078..., lon=4.5084...)
        """
        phi1, lambda1 = self.latlon.to_radians()
        phi2, lambda2 = other.to_radians()
        theta13 = np.radians(bearing1)
        theta23 = np.radians(bearing2)
        delta_phi = phi2 - phi1
        delta_lambda = lambda2 - lambda1

        # angular distance p1-p2
        delta12 = 2 * np.arcsin(np.sqrt(
            np.sin(delta_phi / 2) ** 2
            + np.cos(phi1) * np.cos(phi2) * np.sin(delta_lambda / 2) ** 2
        ))
        if abs(delta12) < _EPSILON:
            return self.latlon  # coincident points

        # initial/final bearings between points
        cos_theta_a = (np.sin(phi2) - np.sin(phi1) * np.cos(delta12)) / (np.sin(delta12) * np.cos(phi1))
        cos_theta_b = (np.sin(phi1) - np.sin(phi2) * np.cos(delta12)) / (np.sin(delta12) * np.cos(phi2))
        theta_a = np.arccos(np.clip(cos_theta_a, -1.0, 1.0))
        theta_b = np.arccos(np.clip(cos_theta_b, -1.0, 1.0))

        if np.sin(delta_lambda) > 0:
            theta12 = theta_a
            theta21 = 2 * np.pi - theta_b
        else:
            theta12 = 2 * np.pi - theta_a
            theta21 = theta_b

        alpha1 = theta13 - theta12  # angle 2-1-3
        alpha2 = theta21 - theta23  # angle 1-2-3

        if np.sin(alpha1) == 0 and np.sin(alpha2) == 0:
            return LatLon.invalid()  # infinite intersections
        if np.sin(alpha1) * np.sin(alpha2) < 0:
            return LatLon.invalid()  # ambiguous intersection (antipodal?)

        cos_alpha3 = (-np.cos(alpha1) * np.cos(alpha2)
                      + np.sin(alpha1) * np.sin(alpha2) * np.cos(delta12))
        delta13 = np.arctan2(
            np.sin(delta12) * np.sin(alpha1) * np.sin(alpha2),
            np.cos(alpha2) + np.cos(alpha1) * cos_alpha3
        )

        phi3 = np.arcsin(np.clip(
            np.sin(phi1) * np.cos(delta13) + np.cos(phi1) * np.sin(delta13) * np.cos(theta13),
            -1.0, 1.0
        ))
        delta_lambda13 = np.arctan2(
            np.sin(theta13) * np.sin(delta13) * np.cos(phi1),
            np.cos(delta13) - np.sin(phi1) * np.sin(phi3)
        )
        lambda3 = lambda1 + delta_lambda13

        return LatLon(wrap90(from_radians(phi3)), wrap180(from_radians(lambda3)))


@dataclass(frozen=True)
class SphericalModel(EarthModel):
    """Great-circle geometry on a sphere of the given radius.

    Attributes
    ----------
    radius : float
        Sphere radius in meters.
    """
    radius: float = EARTH_RADIUS

    def __post_init__(self):
        validate_radius(self.radius)

    @property
    def name(self) -> str:
        return "spherical"

    def point(self, latlon: LatLon) -> LatLonSpherical:
        return LatLonSpherical(latlon, self.radius)
