"""
Geodetic Constants for Earth-Model Computations.

This module provides the numeric constants shared by the Earth models,
projections and the densification engine, each with its uncertainty and
provenance.

References
----------
- WGS84 parameters: NIMA TR8350.2, Third Edition, 2000
- Mean Earth radius: Moritz, H. (2000). Geodetic Reference System 1980.
- Vincenty, T. (1975). Direct and inverse solutions of geodesics on the
  ellipsoid with application of nested equations. Survey Review 23(176).
"""

from dataclasses import dataclass
from typing import Final
import numpy as np


@dataclass(frozen=True)
class Constant:
    """A constant with uncertainty and provenance.

    Attributes
    ----------
    value : float
        The nominal value of the constant.
    uncertainty : float
        The standard uncertainty (1-sigma) of the constant.
    unit : str
        The SI unit of the constant.
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    uncertainty: float
    unit: str
    source: str
    description: str


class GeodesyConstants:
    """Registry of constants used throughout the geodesy packages.

    All constants are class attributes with full metadata including
    uncertainty bounds and sources.

    Earth Geometry
    --------------
    The spherical radius used by the spherical and rhumb models, and the
    WGS84 ellipsoid used by the ellipsoidal models.

    Numerical Limits
    ----------------
    Iteration caps and thresholds for the iterative solutions and the
    recursion ceiling of the densification engine.
    """

    # =========================================================================
    # Spherical Earth
    # =========================================================================

    EARTH_MEAN_RADIUS: Final[Constant] = Constant(
        value=6_371_000.0,
        uncertainty=10.0,
        unit="m",
        source="Moritz (2000), rounded to the metre",
        description="Mean radius of the spherical Earth approximation"
    )

    METRES_PER_DEGREE_LATITUDE: Final[Constant] = Constant(
        value=111_195.0,
        uncertainty=1.0,
        unit="m",
        source="2 * pi * 6371000 / 360",
        description="Length of one degree of latitude on the mean sphere"
    )

    # =========================================================================
    # WGS84 Ellipsoid Parameters
    # Reference: NIMA TR8350.2, Third Edition, 2000
    # =========================================================================

    EARTH_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_137.0,
        uncertainty=0.0,  # Defined exactly
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Semi-major axis (equatorial radius) of WGS84 ellipsoid"
    )

    EARTH_SEMI_MINOR_AXIS: Final[Constant] = Constant(
        value=6_356_752.314245,
        uncertainty=0.0001,
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Semi-minor axis (polar radius) of WGS84 ellipsoid"
    )

    EARTH_FLATTENING: Final[Constant] = Constant(
        value=1.0 / 298.257223563,
        uncertainty=0.0,  # Defined exactly
        unit="dimensionless",
        source="WGS84, NIMA TR8350.2",
        description="Flattening of WGS84 ellipsoid"
    )

    # =========================================================================
    # Projection Limits
    # =========================================================================

    MERCATOR_MAX_LATITUDE: Final[Constant] = Constant(
        value=85.05112877980644,
        uncertainty=0.0,
        unit="deg",
        source="2 * atan(exp(pi)) - pi / 2",
        description="Latitude at which the square Web Mercator world ends"
    )

    # =========================================================================
    # Numerical Limits
    # =========================================================================

    VINCENTY_DIRECT_MAX_ITERATIONS: Final[Constant] = Constant(
        value=100,
        uncertainty=0.0,
        unit="count",
        source="Vincenty (1975)",
        description="Iteration cap of the Vincenty direct solution"
    )

    VINCENTY_INVERSE_MAX_ITERATIONS: Final[Constant] = Constant(
        value=1000,
        uncertainty=0.0,
        unit="count",
        source="Vincenty (1975)",
        description="Iteration cap of the Vincenty inverse solution"
    )

    VINCENTY_CONVERGENCE: Final[Constant] = Constant(
        value=1e-12,
        uncertainty=0.0,
        unit="rad",
        source="Vincenty (1975), about 0.006 mm",
        description="Convergence threshold on lambda / sigma"
    )

    DENSIFY_MAX_DEPTH: Final[Constant] = Constant(
        value=15,
        uncertainty=0.0,
        unit="count",
        source="Densification engine default",
        description="Recursion ceiling: at most 2**14 sub-segments per edge"
    )

    MACHINE_EPSILON: Final[Constant] = Constant(
        value=float(np.finfo(np.float64).eps),
        uncertainty=0.0,
        unit="dimensionless",
        source="IEEE 754 binary64",
        description="Tolerance used for coordinate equality"
    )

    @staticmethod
    def ellipsoid_semi_minor_axis(a: float, f: float) -> float:
        """Compute the semi-minor axis from a and f.

        Parameters
        ----------
        a : float
            Semi-major axis in meters.
        f : float
            Flattening.

        Returns
        -------
        float
            b = a (1 - f) in meters.
        """
        return a * (1.0 - f)
