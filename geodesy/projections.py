"""
Spherical Mercator Projection onto the Unit Square.

The world between ±MERCATOR_MAX_LATITUDE maps onto [0, 1]², with x growing
eastwards from the antimeridian and y growing northwards. Straight lines in
this plane are rhumb lines, which is what segment intersection relies on.

Notes
-----
This is the Web Mercator (EPSG:3857) plane scaled by 1 / (2πa) and shifted
so that (lat 0, lon 0) sits at (0.5, 0.5).
"""

from dataclasses import dataclass
from typing import Tuple
import numpy as np
from numpy.typing import NDArray

from geocommon.constants import GeodesyConstants
from geocommon.types import LatLon

MERCATOR_MAX_LATITUDE = GeodesyConstants.MERCATOR_MAX_LATITUDE.value


@dataclass(frozen=True)
class MercatorPoint:
    """A point on the unit Mercator square.

    Attributes
    ----------
    x : float
        0 at longitude -180, 1 at longitude 180.
    y : float
        0 at -MERCATOR_MAX_LATITUDE, 1 at +MERCATOR_MAX_LATITUDE.
    """
    x: float
    y: float

    def valid(self) -> bool:
        return not (np.isnan(self.x) or np.isnan(self.y))

    def to_latlon(self) -> LatLon:
        lat_rad = 2 * (np.arctan(np.exp((self.y - 0.5) * 2 * np.pi)) - np.pi / 4)
        return LatLon(float(np.degrees(lat_rad)), self.x * 360.0 - 180.0)


def mercator_point(point: LatLon) -> MercatorPoint:
    """Project a point onto the unit Mercator square.

    Parameters
    ----------
    point : LatLon
        Point to project. Longitudes outside (-180, 180] are projected
        linearly, landing outside [0, 1].

    Returns
    -------
    MercatorPoint
        Projected point, NaN beyond ±MERCATOR_MAX_LATITUDE.
    """
    x, y = mercator_points(np.array([point.lat]), np.array([point.lon]))
    return MercatorPoint(float(x[0]), float(y[0]))


def mercator_points(
    latitudes: NDArray[np.float64],
    longitudes: NDArray[np.float64]
) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Vectorised ``mercator_point``.

    Parameters
    ----------
    latitudes, longitudes : array
        Coordinates in degrees.

    Returns
    -------
    Tuple[array, array]
        (x, y) arrays; NaN where |latitude| exceeds the projection limit.
    """
    latitudes = np.asarray(latitudes, dtype=np.float64)
    longitudes = np.asarray(longitudes, dtype=np.float64)

    x = (longitudes + 180.0) / 360.0
    lat_rad = np.radians(latitudes)
    with np.errstate(divide='ignore', invalid='ignore'):
        y = 0.5 + np.log(np.tan(np.pi / 4 + lat_rad / 2)) / (2 * np.pi)

    outside = np.abs(latitudes) > MERCATOR_MAX_LATITUDE
    x = np.where(outside, np.nan, x)
    y = np.where(outside, np.nan, y)
    return x, y
