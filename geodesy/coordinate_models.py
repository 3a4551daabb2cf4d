"""
Ellipsoids and Earth-Centred Earth-Fixed Coordinates.

This module defines the reference ellipsoids used by the ellipsoidal Earth
models and the conversions between geodetic latitude/longitude/height and
geocentric cartesian (ECEF) coordinates.

References
----------
- NIMA TR8350.2: WGS84 parameters
- Bowring, B.R. (1985). The accuracy of geodetic latitude and height
  equations. Survey Review, 28(218), 202-206.
"""

from dataclasses import dataclass, field
from typing import Tuple, Union
import numpy as np
from numpy.typing import NDArray
from pyproj import Geod
from pyproj.exceptions import GeodError

from geocommon.angles import wrap90, wrap180
from geocommon.constants import GeodesyConstants
from geocommon.types import LatLon
from geodesy.dms import parse_latlon
from geodesy.vector3d import Vector3D


@dataclass(frozen=True)
class Ellipsoid:
    """Parameters defining a reference ellipsoid.

    Attributes
    ----------
    a : float
        Semi-major axis (equatorial radius) in meters.
    f : float
        Flattening: f = (a - b) / a
    name : str
        Identifier for the ellipsoid.

    Derived Parameters
    ------------------
    b : float
        Semi-minor axis (polar radius) in meters.
    e2 : float
        First eccentricity squared: e² = (a² - b²) / a²
    ep2 : float
        Second eccentricity squared: e'² = (a² - b²) / b²
    """
    a: float
    f: float
    name: str

    @property
    def b(self) -> float:
        """Semi-minor axis in meters."""
        return GeodesyConstants.ellipsoid_semi_minor_axis(self.a, self.f)

    @property
    def e2(self) -> float:
        """First eccentricity squared."""
        return self.f * (2 - self.f)

    @property
    def ep2(self) -> float:
        """Second eccentricity squared."""
        return self.e2 / (1 - self.e2)

    @classmethod
    def from_name(cls, name: str) -> 'Ellipsoid':
        """Look up a named ellipsoid ('WGS84', 'GRS80', 'intl', ...).

        Raises
        ------
        ValueError
            If pyproj does not know the name.
        """
        try:
            geod = Geod(ellps=name)
        except (KeyError, GeodError) as e:
            raise ValueError(f"Unknown ellipsoid {name!r}") from e
        return cls(a=float(geod.a), f=float(geod.f), name=name)


# WGS84 ellipsoid - the default datum
WGS84 = Ellipsoid(
    a=GeodesyConstants.EARTH_SEMI_MAJOR_AXIS.value,
    f=GeodesyConstants.EARTH_FLATTENING.value,
    name="WGS84"
)


def radius_of_curvature_prime_vertical(
    latitude_deg: Union[float, NDArray[np.float64]],
    ellipsoid: Ellipsoid = WGS84
) -> Union[float, NDArray[np.float64]]:
    """Compute the radius of curvature in the prime vertical.

    Parameters
    ----------
    latitude_deg : float or array
        Geodetic latitude in degrees.
    ellipsoid : Ellipsoid
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    float or array
        Radius of curvature N in meters.

    Notes
    -----
    N = a / (1 - e² sin²φ)^(1/2)

    At the equator (φ=0): N = a ≈ 6,378,137 m
    At the poles (φ=±90°): N ≈ 6,399,594 m
    """
    sin_lat = np.sin(np.radians(latitude_deg))
    return ellipsoid.a / np.sqrt(1 - ellipsoid.e2 * sin_lat**2)


def geodetic_to_ecef(
    latitude_deg: float,
    longitude_deg: float,
    height_m: float = 0.0,
    ellipsoid: Ellipsoid = WGS84
) -> Tuple[float, float, float]:
    """Convert geodetic coordinates to Earth-Centered Earth-Fixed (ECEF).

    Parameters
    ----------
    latitude_deg : float
        Geodetic latitude in degrees.
    longitude_deg : float
        Geodetic longitude in degrees.
    height_m : float
        Height above ellipsoid in meters.
    ellipsoid : Ellipsoid
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    Tuple[float, float, float]
        (X, Y, Z) coordinates in meters in ECEF frame.

    Notes
    -----
    The ECEF frame has:
    - Origin at Earth's center of mass
    - X-axis through the prime meridian (0° longitude) at equator
    - Y-axis through 90°E at equator
    - Z-axis through the North Pole
    """
    X, Y, Z = geodetic_to_ecef_batch(
        np.asarray(latitude_deg, dtype=np.float64),
        np.asarray(longitude_deg, dtype=np.float64),
        np.asarray(height_m, dtype=np.float64),
        ellipsoid
    )
    return float(X), float(Y), float(Z)


def geodetic_to_ecef_batch(
    latitude_deg: NDArray[np.float64],
    longitude_deg: NDArray[np.float64],
    height_m: Union[float, NDArray[np.float64]] = 0.0,
    ellipsoid: Ellipsoid = WGS84
) -> Tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """Vectorised ``geodetic_to_ecef`` over arrays of points."""
    lat = np.radians(latitude_deg)
    lon = np.radians(longitude_deg)
    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)

    N = radius_of_curvature_prime_vertical(latitude_deg, ellipsoid)

    X = (N + height_m) * cos_lat * np.cos(lon)
    Y = (N + height_m) * cos_lat * np.sin(lon)
    Z = (N * (1 - ellipsoid.e2) + height_m) * sin_lat

    return X, Y, Z


def ecef_to_geodetic(
    X: float,
    Y: float,
    Z: float,
    ellipsoid: Ellipsoid = WGS84
) -> Tuple[float, float, float]:
    """Convert ECEF coordinates to geodetic (latitude, longitude, height).

    Uses Bowring's closed-form method, accurate to the micrometre for
    points on or near Earth's surface.

    Parameters
    ----------
    X, Y, Z : float
        ECEF coordinates in meters.
    ellipsoid : Ellipsoid
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    Tuple[float, float, float]
        (latitude_deg, longitude_deg, height_m)

    References
    ----------
    Bowring, B.R. (1985). The accuracy of geodetic latitude and height
    equations. Survey Review, 28(218), 202-206.
    """
    a = ellipsoid.a
    b = ellipsoid.b
    e2 = ellipsoid.e2
    ep2 = ellipsoid.ep2

    p = np.sqrt(X**2 + Y**2)  # distance from minor axis
    R = np.sqrt(p**2 + Z**2)  # polar radius
    longitude_rad = np.arctan2(Y, X)

    # Handle polar singularity
    if p == 0.0:
        if Z == 0.0:
            return 0.0, float(np.degrees(longitude_rad)), float(-a)
        return float(np.sign(Z) * 90.0), float(np.degrees(longitude_rad)), float(np.abs(Z) - b)

    # parametric latitude
    tan_beta = (b * Z) / (a * p) * (1 + ep2 * b / R)
    sin_beta = tan_beta / np.sqrt(1 + tan_beta**2)
    if tan_beta == 0.0:
        cos_beta = 1.0
    else:
        cos_beta = sin_beta / tan_beta

    latitude_rad = np.arctan2(
        Z + ep2 * b * sin_beta**3,
        p - e2 * a * cos_beta**3
    )

    sin_lat = np.sin(latitude_rad)
    cos_lat = np.cos(latitude_rad)
    nu = a / np.sqrt(1 - e2 * sin_lat**2)  # length of the normal terminated by the minor axis
    height_m = p * cos_lat + Z * sin_lat - (a * a / nu)

    return float(np.degrees(latitude_rad)), float(np.degrees(longitude_rad)), float(height_m)


@dataclass(frozen=True)
class Cartesian(Vector3D):
    """A geocentric ECEF position in metres."""

    def to_latlon_ellipsoidal(self, ellipsoid: Ellipsoid = WGS84) -> 'LatLonEllipsoidal':
        lat, lon, height = ecef_to_geodetic(self.x, self.y, self.z, ellipsoid)
        return LatLonEllipsoidal(LatLon(lat, lon), height, ellipsoid)


@dataclass(frozen=True, eq=False)
class LatLonEllipsoidal:
    """A point on or above an ellipsoid.

    Attributes
    ----------
    latlon : LatLon
        Geodetic latitude and longitude in degrees.
    height : float
        Height above the ellipsoid in meters.
    ellipsoid : Ellipsoid
        Reference ellipsoid (default: WGS84).
    """
    latlon: LatLon
    height: float = 0.0
    ellipsoid: Ellipsoid = field(default=WGS84)

    __hash__ = None

    @classmethod
    def from_degrees(
        cls,
        lat: float,
        lon: float,
        height: float = 0.0,
        ellipsoid: Ellipsoid = WGS84
    ) -> 'LatLonEllipsoidal':
        return cls(LatLon(wrap90(lat), wrap180(lon)), height, ellipsoid)

    @classmethod
    def parse(cls, *args: Union[str, float], ellipsoid: Ellipsoid = WGS84) -> 'LatLonEllipsoidal':
        """Parse a point with an optional height.

        Accepts ``"lat, lon[, height]"``, ``("lat, lon", height)`` or
        ``(lat, lon[, height])`` with numbers or DMS strings.

        Raises
        ------
        ValueError
            On a wrong number of values, NaN, or unparseable strings.
        """
        if len(args) == 0:
            raise ValueError("Invalid (empty) point")
        if len(args) > 3:
            raise ValueError("Too many arguments")

        height: Union[str, float] = 0.0
        if isinstance(args[0], str) and "," in args[0]:
            tokens = args[0].split(",")
            if len(tokens) > 3 or (len(tokens) == 3 and len(args) > 1):
                raise ValueError("Failed to parse point: too many items")
            if len(args) == 3:
                raise ValueError("Too many arguments")
            if len(tokens) == 3:
                height = tokens[2]
            elif len(args) == 2:
                height = args[1]
            latlon = parse_latlon(tokens[0], tokens[1])
        elif len(args) == 1:
            raise ValueError("Failed to parse point: at least latitude and longitude are required")
        else:
            latlon = parse_latlon(args[0], args[1])
            if len(args) == 3:
                height = args[2]

        if isinstance(height, str):
            try:
                height = float(height)
            except ValueError as e:
                raise ValueError(f"Failed to parse height: {height!r}") from e
        if np.isnan(height):
            raise ValueError("Height cannot be NaN")

        return cls(latlon, float(height), ellipsoid)

    def to_cartesian(self) -> Cartesian:
        X, Y, Z = geodetic_to_ecef(self.latlon.lat, self.latlon.lon, self.height, self.ellipsoid)
        return Cartesian(X, Y, Z)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LatLonEllipsoidal):
            return NotImplemented
        return (
            self.latlon == other.latlon
            and abs(self.height - other.height) <= GeodesyConstants.MACHINE_EPSILON.value
            and self.ellipsoid == other.ellipsoid
        )
