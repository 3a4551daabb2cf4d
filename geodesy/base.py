"""
Earth-Model Interfaces.

Every Earth model provides the same set of operations on a point: distance,
bearings, destination, midpoint and intermediate points. Algorithms such as
densification and containment are written against ``EarthModel`` and never
against a concrete model, so the same code runs on a sphere, a rhumb-line
world, an ellipsoid or a degree grid.

Two interfaces are defined:

- ``ModelPoint``: a point bound to one model's geometry.
- ``EarthModel``: an immutable configuration (radius, ellipsoid) that turns
  a ``LatLon`` into a ``ModelPoint``.
"""

from abc import ABC, abstractmethod
from functools import partial
from typing import Callable, List, Optional, Sequence

from geocommon.cancellation import CancellationToken
from geocommon.parallel import parallel_map
from geocommon.types import LatLon
from geocommon.units import Distance


class ModelPoint(ABC):
    """Abstract base class for a point under a given Earth model.

    Implementations are immutable and carry their model configuration
    (radius or ellipsoid) with them.

    Attributes
    ----------
    latlon : LatLon
        Position of the point.
    """

    latlon: LatLon

    @abstractmethod
    def distance_to(self, other: LatLon) -> Distance:
        """Distance along this model's path to ``other``."""
        pass

    @abstractmethod
    def initial_bearing_to(self, other: LatLon) -> float:
        """Bearing in [0, 360) at the start of the path; NaN if coincident."""
        pass

    @abstractmethod
    def final_bearing_on(self, other: LatLon) -> float:
        """Bearing in [0, 360) on arrival at ``other``."""
        pass

    @abstractmethod
    def destination_point(self, distance: float, bearing: float) -> LatLon:
        """Point reached after ``distance`` metres on initial ``bearing``."""
        pass

    @abstractmethod
    def intermediate_point_to(self, other: LatLon, fraction: float) -> LatLon:
        """Point at ``fraction`` along the path (0 = self, 1 = other)."""
        pass

    def mid_point_to(self, other: LatLon) -> LatLon:
        return self.intermediate_point_to(other, 0.5)

    def intermediate_points_to(
        self,
        other: LatLon,
        fractions: Sequence[float],
        token: Optional[CancellationToken] = None
    ) -> List[LatLon]:
        """Points at each of ``fractions`` along the path to ``other``.

        Parameters
        ----------
        other : LatLon
            End of the path.
        fractions : sequence of float
            Fractions along the path; 0 = self, 1 = other.
        token : CancellationToken, optional
            Cancellation / deadline for the fan-out.

        Returns
        -------
        List[LatLon]
            One point per fraction, in order.
        """
        return parallel_map(self._intermediate_point_solver(other), list(fractions), token)

    def _intermediate_point_solver(self, other: LatLon) -> Callable[[float], LatLon]:
        """Return a function of fraction only.

        Models whose intermediate points need a distance and bearing
        override this to compute them once per batch.
        """
        return partial(self.intermediate_point_to, other)


class EarthModel(ABC):
    """Abstract base class for Earth-model configurations.

    A model is a factory of ``ModelPoint`` instances. Calling the model is
    the same as calling ``point``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier of the model."""
        pass

    @abstractmethod
    def point(self, latlon: LatLon) -> ModelPoint:
        """Bind a position to this model."""
        pass

    def __call__(self, latlon: LatLon) -> ModelPoint:
        return self.point(latlon)
