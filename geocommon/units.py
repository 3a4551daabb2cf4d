"""
Unit Registry and the Distance Value Type.

Distances returned by the Earth models are wrapped in ``Distance``, a small
immutable value stored in metres. Conversions to other length units go
through the shared ``pint`` registry so that every unit factor lives in one
place.

Example Usage
-------------
>>> from geocommon.units import Distance, Q_
>>> d = Distance(1852.0)
>>> d.nautical_mile()
1.0
>>> ensure_distance(Q_(2, 'km')).metre()
2000.0
"""

from dataclasses import dataclass
from typing import Union
import warnings

import numpy as np
import pint
from pint import UnitRegistry as PintUnitRegistry

# Create the global unit registry
ureg = PintUnitRegistry()

# Convenience alias for creating quantities
Q_ = ureg.Quantity


@dataclass(frozen=True, order=True)
class Distance:
    """A length in metres.

    Attributes
    ----------
    metres : float
        The length in metres. NaN marks an unconvergent result.
    """
    metres: float

    @property
    def quantity(self) -> pint.Quantity:
        """The distance as a pint quantity in metres."""
        return Q_(self.metres, 'meter')

    def valid(self) -> bool:
        return not np.isnan(self.metres)

    def metre(self) -> float:
        return self.metres

    def kilometre(self) -> float:
        return self.metres / 1000.0

    def mile(self) -> float:
        return float(self.quantity.to('mile').magnitude)

    def nautical_mile(self) -> float:
        return float(self.quantity.to('nautical_mile').magnitude)

    def foot(self) -> float:
        return float(self.quantity.to('foot').magnitude)

    # US spellings
    meter = metre
    kilometer = kilometre

    def __float__(self) -> float:
        return self.metres

    def __add__(self, other: "Distance") -> "Distance":
        return Distance(self.metres + ensure_distance(other).metres)

    def __sub__(self, other: "Distance") -> "Distance":
        return Distance(self.metres - ensure_distance(other).metres)

    def __str__(self) -> str:
        return f"{self.metres:.3f} m"


def ensure_distance(
    value: Union[Distance, pint.Quantity, float, int],
    warn: bool = False
) -> Distance:
    """Coerce a value to ``Distance``.

    Parameters
    ----------
    value : Distance, pint.Quantity, float or int
        A distance, a pint length quantity, or a bare number of metres.
    warn : bool
        Emit a warning when a bare number is assumed to be metres.

    Returns
    -------
    Distance
        The value in metres.

    Raises
    ------
    ValueError
        If a quantity is not a length.
    """
    if isinstance(value, Distance):
        return value
    if isinstance(value, pint.Quantity):
        try:
            return Distance(float(value.to('meter').magnitude))
        except pint.DimensionalityError as e:
            raise ValueError(
                f"Expected a length, got a quantity in {value.units}"
            ) from e
    if warn:
        warnings.warn(
            f"Value {value} has no units, assuming metres",
            UserWarning,
            stacklevel=2
        )
    return Distance(float(value))
