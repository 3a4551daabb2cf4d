"""
Model-Agnostic Geodesy Helpers.

Each helper binds its start point to the given Earth model and forwards the
call, so algorithms can be written once and run on any model::

    >>> from geodesy.model import SPHERICAL, distance
    >>> distance(LatLon(52.205, 0.119), LatLon(48.857, 2.351), SPHERICAL).metre()
    404279.16...
"""

from typing import Dict, List, Optional, Sequence

from geocommon.cancellation import CancellationToken
from geocommon.types import LatLon
from geocommon.units import Distance
from geodesy.base import EarthModel
from geodesy.geodesic import GeodesicModel
from geodesy.planar import PlanarModel
from geodesy.rhumb import RhumbModel
from geodesy.spherical import SphericalModel
from geodesy.vincenty import VincentyModel

# Default model instances
SPHERICAL = SphericalModel()
RHUMB = RhumbModel()
VINCENTY = VincentyModel()
PLANAR = PlanarModel()
GEODESIC = GeodesicModel()

_MODELS: Dict[str, EarthModel] = {
    model.name: model for model in (SPHERICAL, RHUMB, VINCENTY, PLANAR, GEODESIC)
}


def model_by_name(name: str) -> EarthModel:
    """Look up a default model instance by name.

    Raises
    ------
    ValueError
        If no model has that name.
    """
    try:
        return _MODELS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown Earth model {name!r}, expected one of {sorted(_MODELS)}"
        ) from None


def distance(start: LatLon, end: LatLon, model: EarthModel) -> Distance:
    return model.point(start).distance_to(end)


def initial_bearing(start: LatLon, end: LatLon, model: EarthModel) -> float:
    return model.point(start).initial_bearing_to(end)


def final_bearing(start: LatLon, end: LatLon, model: EarthModel) -> float:
    return model.point(start).final_bearing_on(end)


def destination_point(start: LatLon, distance_m: float, bearing: float, model: EarthModel) -> LatLon:
    return model.point(start).destination_point(distance_m, bearing)


def mid_point(start: LatLon, end: LatLon, model: EarthModel) -> LatLon:
    return model.point(start).mid_point_to(end)


def intermediate_point(start: LatLon, end: LatLon, fraction: float, model: EarthModel) -> LatLon:
    return model.point(start).intermediate_point_to(end, fraction)


def intermediate_points(
    start: LatLon,
    end: LatLon,
    fractions: Sequence[float],
    model: EarthModel,
    token: Optional[CancellationToken] = None
) -> List[LatLon]:
    return model.point(start).intermediate_points_to(end, fractions, token)
