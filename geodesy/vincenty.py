"""
Vincenty Geodesics on an Ellipsoid.

Distances, bearings and destination points on an ellipsoidal Earth using
the direct and inverse solutions devised by Thaddeus Vincenty. Accurate to
about 0.5 mm on the WGS84 ellipsoid.

Notes
-----
The inverse solution fails to converge for nearly antipodal points. Such
failures are reported as NaN values, never as exceptions; use
``GeodesicModel`` when antipodal pairs are expected.

References
----------
- Vincenty, T. (1975). Direct and inverse solutions of geodesics on the
  ellipsoid with application of nested equations. Survey Review 23(176),
  88-93. www.ngs.noaa.gov/PUBS_LIB/inverse.pdf
"""

from dataclasses import dataclass, field
from typing import Callable
import numpy as np

from geocommon.angles import unwrap_longitude_delta, wrap90, wrap180, wrap360
from geocommon.constants import GeodesyConstants
from geocommon.logging_config import get_logger
from geocommon.types import LatLon
from geocommon.units import Distance
from geodesy.base import EarthModel, ModelPoint
from geodesy.coordinate_models import WGS84, Cartesian, Ellipsoid, LatLonEllipsoidal
from geodesy.dms import parse_latlon

logger = get_logger(__name__)

_EPSILON = GeodesyConstants.MACHINE_EPSILON.value
_CONVERGENCE = GeodesyConstants.VINCENTY_CONVERGENCE.value
_DIRECT_MAX_ITERATIONS = int(GeodesyConstants.VINCENTY_DIRECT_MAX_ITERATIONS.value)
_INVERSE_MAX_ITERATIONS = int(GeodesyConstants.VINCENTY_INVERSE_MAX_ITERATIONS.value)


@dataclass(frozen=True)
class VincentyDirectResult:
    """Result of the direct problem.

    Attributes
    ----------
    point : LatLon
        Destination point; invalid if the iteration did not converge.
    final_bearing : float
        Bearing on arrival in degrees [0, 360), or NaN.
    """
    point: LatLon
    final_bearing: float


@dataclass(frozen=True)
class VincentyInverseResult:
    """Result of the inverse problem.

    Attributes
    ----------
    distance_m : float
        Geodesic distance in meters, NaN if the iteration did not converge.
    initial_bearing : float
        Bearing at the start point in degrees [0, 360), or NaN.
    final_bearing : float
        Bearing at the end point in degrees [0, 360), or NaN.
    """
    distance_m: float
    initial_bearing: float
    final_bearing: float


_NAN_INVERSE = VincentyInverseResult(float('nan'), float('nan'), float('nan'))


def vincenty_direct(
    start: LatLon,
    distance: float,
    initial_bearing: float,
    ellipsoid: Ellipsoid = WGS84
) -> VincentyDirectResult:
    """Solve the direct geodesic problem.

    Parameters
    ----------
    start : LatLon
        Start point.
    distance : float
        Distance along the geodesic in meters.
    initial_bearing : float
        Initial bearing in degrees clockwise from north.
    ellipsoid : Ellipsoid
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    VincentyDirectResult
        Destination and final bearing, NaN if sigma has not converged to
        1e-12 after 100 iterations.
    """
    phi1, lambda1 = start.to_radians()
    alpha1 = np.radians(initial_bearing)
    s = distance
    a, b, f = ellipsoid.a, ellipsoid.b, ellipsoid.f

    sin_alpha1 = np.sin(alpha1)
    cos_alpha1 = np.cos(alpha1)

    # U = reduced latitude, tan U = (1-f) tan φ
    tan_u1 = (1 - f) * np.tan(phi1)
    cos_u1 = 1 / np.sqrt(1 + tan_u1 * tan_u1)
    sin_u1 = tan_u1 * cos_u1

    sigma1 = np.arctan2(tan_u1, cos_alpha1)  # angular distance on the sphere from the equator to P1
    sin_alpha = cos_u1 * sin_alpha1  # α = azimuth of the geodesic at the equator
    cos_sq_alpha = 1 - sin_alpha * sin_alpha
    u_sq = cos_sq_alpha * (a * a - b * b) / (b * b)
    A = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    B = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))

    sigma = s / (b * A)
    iterations = 0
    while True:
        cos_2sigma_m = np.cos(2 * sigma1 + sigma)
        sin_sigma = np.sin(sigma)
        cos_sigma = np.cos(sigma)
        delta_sigma = B * sin_sigma * (cos_2sigma_m + B / 4 * (
            cos_sigma * (-1 + 2 * cos_2sigma_m * cos_2sigma_m)
            - B / 6 * cos_2sigma_m * (-3 + 4 * sin_sigma * sin_sigma) * (-3 + 4 * cos_2sigma_m * cos_2sigma_m)
        ))
        sigma_prev = sigma
        sigma = s / (b * A) + delta_sigma
        iterations += 1
        if abs(sigma - sigma_prev) <= _CONVERGENCE or iterations >= _DIRECT_MAX_ITERATIONS:
            break

    if iterations >= _DIRECT_MAX_ITERATIONS:
        logger.debug(f"Vincenty direct did not converge from {start} ({distance} m, {initial_bearing}°)")
        return VincentyDirectResult(LatLon.invalid(), float('nan'))

    x = sin_u1 * sin_sigma - cos_u1 * cos_sigma * cos_alpha1
    phi2 = np.arctan2(
        sin_u1 * cos_sigma + cos_u1 * sin_sigma * cos_alpha1,
        (1 - f) * np.sqrt(sin_alpha * sin_alpha + x * x)
    )
    lam = np.arctan2(sin_sigma * sin_alpha1, cos_u1 * cos_sigma - sin_u1 * sin_sigma * cos_alpha1)
    C = f / 16 * cos_sq_alpha * (4 + f * (4 - 3 * cos_sq_alpha))
    L = lam - (1 - C) * f * sin_alpha * (
        sigma + C * sin_sigma * (cos_2sigma_m + C * cos_sigma * (-1 + 2 * cos_2sigma_m * cos_2sigma_m))
    )
    lambda2 = lambda1 + L

    alpha2 = np.arctan2(sin_alpha, -x)

    return VincentyDirectResult(
        point=LatLon(wrap90(float(np.degrees(phi2))), wrap180(float(np.degrees(lambda2)))),
        final_bearing=wrap360(float(np.degrees(alpha2)))
    )


def vincenty_inverse(
    start: LatLon,
    end: LatLon,
    ellipsoid: Ellipsoid = WGS84
) -> VincentyInverseResult:
    """Solve the inverse geodesic problem.

    Parameters
    ----------
    start, end : LatLon
        End points of the geodesic.
    ellipsoid : Ellipsoid
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    VincentyInverseResult
        Distance and bearings. Coincident points give a zero distance and
        NaN bearings; a non-converging iteration gives all NaN.
    """
    if start == end:
        return VincentyInverseResult(0.0, float('nan'), float('nan'))

    phi1 = np.radians(start.lat)
    phi2 = np.radians(end.lat)
    a, b, f = ellipsoid.a, ellipsoid.b, ellipsoid.f

    # L = difference in longitude, U = reduced latitude, tan U = (1-f) tan φ
    L = np.radians(unwrap_longitude_delta(end.lon - start.lon))
    tan_u1 = (1 - f) * np.tan(phi1)
    cos_u1 = 1 / np.sqrt(1 + tan_u1 * tan_u1)
    sin_u1 = tan_u1 * cos_u1
    tan_u2 = (1 - f) * np.tan(phi2)
    cos_u2 = 1 / np.sqrt(1 + tan_u2 * tan_u2)
    sin_u2 = tan_u2 * cos_u2

    antipodal = abs(L) > np.pi / 2 or abs(phi2 - phi1) > np.pi / 2

    lam = L  # λ = difference in longitude on an auxiliary sphere
    sin_lambda = cos_lambda = 0.0
    sin_sq_sigma = 0.0
    sigma = np.pi if antipodal else 0.0  # σ = angular distance P1 P2 on the sphere
    sin_sigma = 0.0
    cos_sigma = -1.0 if antipodal else 1.0
    cos_2sigma_m = 1.0  # σm = angular distance on the sphere from the equator to the midpoint
    sin_alpha = 0.0
    cos_sq_alpha = 1.0

    iterations = 0
    while True:
        sin_lambda = np.sin(lam)
        cos_lambda = np.cos(lam)
        sin_sq_sigma = ((cos_u2 * sin_lambda) ** 2
                        + (cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lambda) ** 2)
        if abs(sin_sq_sigma) < _EPSILON:
            break  # co-incident/antipodal points (falls back on λ/σ = L)
        sin_sigma = np.sqrt(sin_sq_sigma)
        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lambda
        sigma = np.arctan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lambda / sin_sigma
        cos_sq_alpha = 1 - sin_alpha * sin_alpha
        if cos_sq_alpha != 0:
            cos_2sigma_m = cos_sigma - 2 * sin_u1 * sin_u2 / cos_sq_alpha
        else:
            cos_2sigma_m = 0.0  # on equatorial line cos²α = 0 (§6)
        C = f / 16 * cos_sq_alpha * (4 + f * (4 - 3 * cos_sq_alpha))
        lambda_prev = lam
        lam = L + (1 - C) * f * sin_alpha * (
            sigma + C * sin_sigma * (cos_2sigma_m + C * cos_sigma * (-1 + 2 * cos_2sigma_m * cos_2sigma_m))
        )
        iteration_check = abs(lam) - np.pi if antipodal else abs(lam)
        if iteration_check > np.pi:
            logger.debug(f"Vincenty inverse diverged between {start} and {end}")
            return _NAN_INVERSE
        iterations += 1
        if abs(lam - lambda_prev) <= _CONVERGENCE or iterations >= _INVERSE_MAX_ITERATIONS:
            break

    if iterations >= _INVERSE_MAX_ITERATIONS:
        logger.debug(f"Vincenty inverse did not converge between {start} and {end}")
        return _NAN_INVERSE

    u_sq = cos_sq_alpha * (a * a - b * b) / (b * b)
    A = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    B = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))
    delta_sigma = B * sin_sigma * (cos_2sigma_m + B / 4 * (
        cos_sigma * (-1 + 2 * cos_2sigma_m * cos_2sigma_m)
        - B / 6 * cos_2sigma_m * (-3 + 4 * sin_sigma * sin_sigma) * (-3 + 4 * cos_2sigma_m * cos_2sigma_m)
    ))

    s = b * A * (sigma - delta_sigma)  # length of the geodesic

    if abs(sin_sq_sigma) >= _EPSILON:
        alpha1 = np.arctan2(cos_u2 * sin_lambda, cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lambda)
        alpha2 = np.arctan2(cos_u1 * sin_lambda, -sin_u1 * cos_u2 + cos_u1 * sin_u2 * cos_lambda)
    else:
        alpha1 = 0.0
        alpha2 = np.pi

    if abs(s) < _EPSILON:
        return VincentyInverseResult(float(s), float('nan'), float('nan'))
    return VincentyInverseResult(
        distance_m=float(s),
        initial_bearing=wrap360(float(np.degrees(alpha1))),
        final_bearing=wrap360(float(np.degrees(alpha2)))
    )


@dataclass(frozen=True, eq=False)
class LatLonEllipsoidalVincenty(ModelPoint):
    """A point on an ellipsoid, joined to other points by geodesics.

    Attributes
    ----------
    latlon : LatLon
        Geodetic position in degrees.
    ellipsoid : Ellipsoid
        Reference ellipsoid (default: WGS84).

    Examples
    --------
    >>> p1 = LatLonEllipsoidalVincenty(LatLon(50.06632, -5.71475))
    >>> p1.distance_to(LatLon(58.64402, -3.07009)).kilometre()
    969.954...
    """
    latlon: LatLon
    ellipsoid: Ellipsoid = field(default=WGS84)

    @classmethod
    def from_degrees(cls, lat: float, lon: float, ellipsoid: Ellipsoid = WGS84) -> 'LatLonEllipsoidalVincenty':
        return cls(LatLon.from_degrees(lat, lon), ellipsoid)

    @classmethod
    def parse(cls, *args, ellipsoid: Ellipsoid = WGS84) -> 'LatLonEllipsoidalVincenty':
        """Parse a point; see ``geodesy.dms.parse_latlon``."""
        return cls(parse_latlon(*args), ellipsoid)

    def inverse(self, other: LatLon) -> VincentyInverseResult:
        return vincenty_inverse(self.latlon, other, self.ellipsoid)

    def direct(self, distance: float, bearing: float) -> VincentyDirectResult:
        return vincenty_direct(self.latlon, distance, bearing, self.ellipsoid)

    def distance_to(self, other: LatLon) -> Distance:
        return Distance(self.inverse(other).distance_m)

    def initial_bearing_to(self, other: LatLon) -> float:
        return self.inverse(other).initial_bearing

    def final_bearing_on(self, other: LatLon) -> float:
        return self.inverse(other).final_bearing

    def destination_point(self, distance: float, bearing: float) -> LatLon:
        return self.direct(distance, bearing).point

    def intermediate_point_to(self, other: LatLon, fraction: float) -> LatLon:
        return self._intermediate_point_solver(other)(fraction)

    def _intermediate_point_solver(self, other: LatLon) -> Callable[[float], LatLon]:
        if self.latlon == other:
            return lambda fraction: self.latlon

        result = self.inverse(other)

        def solve(fraction: float) -> LatLon:
            return self.direct(result.distance_m * fraction, result.initial_bearing).point

        return solve

    def to_cartesian(self, height: float = 0.0) -> Cartesian:
        """Geocentric ECEF position of the point at ``height`` meters."""
        return LatLonEllipsoidal(self.latlon, height, self.ellipsoid).to_cartesian()


@dataclass(frozen=True)
class VincentyModel(EarthModel):
    """Geodesic geometry on an ellipsoid, solved with Vincenty's formulae.

    Attributes
    ----------
    ellipsoid : Ellipsoid
        Reference ellipsoid (default: WGS84).
    """
    ellipsoid: Ellipsoid = field(default=WGS84)

    @property
    def name(self) -> str:
        return "vincenty"

    def point(self, latlon: LatLon) -> LatLonEllipsoidalVincenty:
        return LatLonEllipsoidalVincenty(latlon, self.ellipsoid)
