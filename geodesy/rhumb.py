"""
Rhumb Lines (Loxodromes) on a Spherical Earth.

A rhumb line crosses every meridian at the same angle, so its bearing is
constant. Rhumb lines are straight on a Mercator projection, and distances
are computed with Pythagoras on the Mercator-stretched latitude.

References
----------
- Veness, C. Movable Type Scripts, "Rhumb lines".
- Snyder, J.P. (1987). Map Projections - A Working Manual, §7.
"""

from dataclasses import dataclass
from typing import Callable, Tuple
import numpy as np

from geocommon.angles import from_radians, unwrap_longitude_delta, wrap90, wrap180, wrap360
from geocommon.types import LatLon
from geocommon.units import Distance
from geodesy.base import EarthModel, ModelPoint
from geodesy.dms import parse_latlon
from geodesy.spherical import EARTH_RADIUS, validate_radius

# below this the E-W course becomes ill-conditioned with 0/0
_PSI_THRESHOLD = 1e-11


def _stretched_latitude_difference(phi1: float, phi2: float) -> float:
    """Δψ, the difference of the Mercator-projected latitudes."""
    return np.log(np.tan(phi2 / 2 + np.pi / 4) / np.tan(phi1 / 2 + np.pi / 4))


def _stretch_ratio(phi1: float, delta_phi: float, delta_psi: float) -> float:
    if abs(delta_psi) > _PSI_THRESHOLD:
        return delta_phi / delta_psi
    return np.cos(phi1)


@dataclass(frozen=True, eq=False)
class LatLonRhumb(ModelPoint):
    """A point on a sphere, joined to other points by rhumb lines.

    Attributes
    ----------
    latlon : LatLon
        Position in degrees.
    radius : float
        Sphere radius in meters (default: mean Earth radius).

    Examples
    --------
    >>> p1 = LatLonRhumb(LatLon(51.127, 1.338))
    >>> p1.initial_bearing_to(LatLon(50.964, 1.853))
    116.72...
    """
    latlon: LatLon
    radius: float = EARTH_RADIUS

    def __post_init__(self):
        validate_radius(self.radius)

    @classmethod
    def from_degrees(cls, lat: float, lon: float, radius: float = EARTH_RADIUS) -> 'LatLonRhumb':
        return cls(LatLon.from_degrees(lat, lon), radius)

    @classmethod
    def parse(cls, *args, radius: float = EARTH_RADIUS) -> 'LatLonRhumb':
        """Parse a point; see ``geodesy.dms.parse_latlon``."""
        return cls(parse_latlon(*args), radius)

    def _deltas(self, other: LatLon) -> Tuple[float, float, float, float]:
        phi1 = np.radians(self.latlon.lat)
        phi2 = np.radians(other.lat)
        delta_lambda = np.radians(unwrap_longitude_delta(other.lon - self.latlon.lon))
        with np.errstate(divide='ignore', invalid='ignore'):
            delta_psi = _stretched_latitude_difference(phi1, phi2)
        return phi1, phi2, delta_lambda, delta_psi

    def distance_to(self, other: LatLon) -> Distance:
        phi1, phi2, delta_lambda, delta_psi = self._deltas(other)
        delta_phi = phi2 - phi1
        q = _stretch_ratio(phi1, delta_phi, delta_psi)

        # angular distance in radians
        delta = np.sqrt(delta_phi ** 2 + q ** 2 * delta_lambda ** 2)
        return Distance(float(delta * self.radius))

    def initial_bearing_to(self, other: LatLon) -> float:
        if self.latlon == other:
            return float('nan')
        _, _, delta_lambda, delta_psi = self._deltas(other)
        theta = np.arctan2(delta_lambda, delta_psi)
        return wrap360(from_radians(theta))

    def final_bearing_on(self, other: LatLon) -> float:
        return self.initial_bearing_to(other)

    def destination_point(self, distance: float, bearing: float) -> LatLon:
        phi1, lambda1 = self.latlon.to_radians()
        theta = np.radians(bearing)
        delta = distance / self.radius  # angular distance in radians

        delta_phi = delta * np.cos(theta)
        phi2 = phi1 + delta_phi

        # check for going past the pole, normalise latitude if so
        if abs(phi2) > np.pi / 2:
            phi2 = np.pi - phi2 if phi2 > 0 else -np.pi - phi2

        with np.errstate(divide='ignore', invalid='ignore'):
            delta_psi = _stretched_latitude_difference(phi1, phi2)
        q = _stretch_ratio(phi1, delta_phi, delta_psi)

        lambda2 = lambda1 + delta * np.sin(theta) / q

        return LatLon(wrap90(from_radians(phi2)), wrap180(from_radians(lambda2)))

    def mid_point_to(self, other: LatLon) -> LatLon:
        """Loxodromic midpoint.

        References
        ----------
        http://mathforum.org/kb/message.jspa?messageID=148837
        """
        phi1 = np.radians(self.latlon.lat)
        phi2 = np.radians(other.lat)
        lambda1 = np.radians(self.latlon.lon)
        lambda2 = lambda1 + np.radians(unwrap_longitude_delta(other.lon - self.latlon.lon))

        phi3 = (phi1 + phi2) / 2
        f1 = np.tan(np.pi / 4 + phi1 / 2)
        f2 = np.tan(np.pi / 4 + phi2 / 2)
        f3 = np.tan(np.pi / 4 + phi3 / 2)
        with np.errstate(divide='ignore', invalid='ignore'):
            lambda3 = (((lambda2 - lambda1) * np.log(f3) + lambda1 * np.log(f2) - lambda2 * np.log(f1))
                       / np.log(f2 / f1))

        if not np.isfinite(lambda3):
            lambda3 = (lambda1 + lambda2) / 2  # parallel of latitude

        return LatLon(wrap90(from_radians(phi3)), wrap180(from_radians(lambda3)))

    def intermediate_point_to(self, other: LatLon, fraction: float) -> LatLon:
        if self.latlon == other:
            return self.latlon
        return self._intermediate_point_solver(other)(fraction)

    def _intermediate_point_solver(self, other: LatLon) -> Callable[[float], LatLon]:
        if self.latlon == other:
            return lambda fraction: self.latlon

        distance = self.distance_to(other).metre()
        bearing = self.initial_bearing_to(other)

        def solve(fraction: float) -> LatLon:
            return self.destination_point(distance * fraction, bearing)

        return solve


@dataclass(frozen=True)
class RhumbModel(EarthModel):
    """Constant-bearing geometry on a sphere of the given radius.

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
        return "rhumb"

    def point(self, latlon: LatLon) -> LatLonRhumb:
        return LatLonRhumb(latlon, self.radius)
