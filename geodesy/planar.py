"""
Planar Approximation in Degree Space.

Straight lines in longitude/latitude space, as drawn by most GIS tools that
ignore Earth curvature (e.g. GeoJSON polygons rendered on a plate carrée
map). Distances are approximated with a table of the length of one degree of
longitude at each whole degree of latitude.

Notes
-----
This model is mainly used as the *reference* model of densification: it
describes how a renderer will join consecutive vertices.
"""

from dataclasses import dataclass
import numpy as np

from geocommon.angles import unwrap_longitude_delta, wrap90, wrap180, wrap360
from geocommon.constants import GeodesyConstants
from geocommon.types import LatLon
from geocommon.units import Distance
from geodesy.base import EarthModel, ModelPoint
from geodesy.dms import parse_latlon

METRES_PER_DEGREE_LATITUDE = GeodesyConstants.METRES_PER_DEGREE_LATITUDE.value

# approximate length of 1 degree of longitude in metres, indexed by latitude 0..90
LONGITUDE_DEGREE_LENGTHS = np.array([
    111195, 111178, 111127, 111043, 110924, 110772, 110586, 110366, 110113, 109826,
    109506, 109152, 108765, 108345, 107892, 107406, 106887, 106336, 105753, 105137,
    104489, 103809, 103098, 102355, 101581, 100777, 99941, 99075, 98179, 97253,
    96297, 95312, 94298, 93256, 92184, 91085, 89958, 88804, 87622, 86414,
    85180, 83919, 82633, 81322, 79986, 78626, 77242, 75834, 74403, 72950,
    71474, 69977, 68458, 66918, 65358, 63778, 62179, 60561, 58924, 57269,
    55597, 53908, 52202, 50481, 48744, 46993, 45227, 43447, 41654, 39848,
    38030, 36201, 34361, 32510, 30649, 28779, 26900, 25013, 23118, 21217,
    19309, 17395, 15475, 13551, 11623, 9691, 7756, 5819, 3881, 1941,
    20.0,
], dtype=np.float64)


def longitude_degree_length(latitude: float) -> float:
    """Metres per degree of longitude at the nearest whole degree of |latitude|."""
    index = int(np.floor(abs(latitude) + 0.5))
    if 0 <= index < len(LONGITUDE_DEGREE_LENGTHS):
        return float(LONGITUDE_DEGREE_LENGTHS[index])
    return METRES_PER_DEGREE_LATITUDE


def _at_pole(latitude: float) -> bool:
    return latitude == 90.0 or latitude == -90.0


@dataclass(frozen=True, eq=False)
class LatLonPlanar(ModelPoint):
    """A point joined to other points by straight lines in degree space.

    Attributes
    ----------
    latlon : LatLon
        Position in degrees.
    """
    latlon: LatLon

    @classmethod
    def from_degrees(cls, lat: float, lon: float) -> 'LatLonPlanar':
        return cls(LatLon.from_degrees(lat, lon))

    @classmethod
    def parse(cls, *args) -> 'LatLonPlanar':
        """Parse a point; see ``geodesy.dms.parse_latlon``."""
        return cls(parse_latlon(*args))

    def _deltas(self, other: LatLon):
        dx = unwrap_longitude_delta(wrap180(other.lon) - wrap180(self.latlon.lon))
        dy = wrap90(other.lat) - wrap90(self.latlon.lat)
        return dx, dy

    def distance_to(self, other: LatLon) -> Distance:
        y0 = wrap90(self.latlon.lat)
        y1 = wrap90(other.lat)
        dx, dy = self._deltas(other)

        dy_m = abs(dy) * METRES_PER_DEGREE_LATITUDE
        dx_m = dx * longitude_degree_length(abs(y0 + y1) / 2)

        return Distance(float(np.sqrt(dx_m * dx_m + dy_m * dy_m)))

    def initial_bearing_to(self, other: LatLon) -> float:
        dx, dy = self._deltas(other)
        if dx == 0:
            if dy == 0:
                return float('nan')
            return 0.0 if dy > 0 else 180.0

        bearing = 90.0 - float(np.degrees(np.arctan(dy / dx)))
        if dx < 0:
            bearing += 180.0
        return bearing

    def final_bearing_on(self, other: LatLon) -> float:
        return self.initial_bearing_to(other)

    def destination_point(self, distance: float, bearing: float) -> LatLon:
        """Inverse of ``distance_to``: moves ``distance`` metres in a
        straight degree-space line on ``bearing``.

        The longitude scale is taken at the mean latitude of the start and
        end points, as in ``distance_to``.
        """
        theta = np.radians(bearing)
        dy = distance * np.cos(theta) / METRES_PER_DEGREE_LATITUDE
        lat2 = self.latlon.lat + float(dy)
        scale = longitude_degree_length(abs(self.latlon.lat + lat2) / 2)
        dx = distance * np.sin(theta) / scale

        return LatLon(wrap90(lat2), wrap180(self.latlon.lon + float(dx)))

    def intermediate_point_to(self, other: LatLon, fraction: float) -> LatLon:
        dx, dy = self._deltas(other)
        lat = wrap90(self.latlon.lat + dy * fraction)

        # planar or not, longitudes don't make sense at the poles
        if _at_pole(other.lat):
            return LatLon(lat, self.latlon.lon)
        if _at_pole(self.latlon.lat):
            return LatLon(lat, other.lon)

        return LatLon(lat, wrap180(self.latlon.lon + dx * fraction))


@dataclass(frozen=True)
class PlanarModel(EarthModel):
    """Straight lines in longitude/latitude space."""

    @property
    def name(self) -> str:
        return "planar"

    def point(self, latlon: LatLon) -> LatLonPlanar:
        return LatLonPlanar(latlon)
