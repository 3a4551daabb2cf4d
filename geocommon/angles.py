"""
Angle Normalisation.

Longitudes and latitudes produced by public operations are always passed
through one of the wrap functions below, and every longitude difference is
routed through ``unwrap_longitude_delta`` so that all Earth models agree on
which way round the antimeridian a segment goes.

Notes
-----
All wrap functions return their input untouched when it is already inside
the target range, so repeated wrapping never drifts.
"""

import numpy as np


def is_valid(degrees: float) -> bool:
    """Return False when the angle is NaN."""
    return not np.isnan(degrees)


def to_radians(degrees: float) -> float:
    return float(np.radians(degrees))


def from_radians(radians: float) -> float:
    return float(np.degrees(radians))


def round_to(degrees: float, places: int) -> float:
    """Round half away from zero to the given number of decimal places."""
    scale = 10.0 ** places
    return float(np.copysign(np.floor(abs(degrees) * scale + 0.5), degrees) / scale)


def wrap360(degrees: float) -> float:
    """Constrain an angle to [0, 360).

    Sawtooth with period 360; e.g. -1 -> 359, 360 -> 0.

    Parameters
    ----------
    degrees : float
        Angle in degrees.

    Returns
    -------
    float
        Equivalent angle in [0, 360).
    """
    if 0.0 <= degrees < 360.0:
        return degrees
    return float(np.fmod(np.fmod(degrees, 360.0) + 360.0, 360.0))


def wrap180(degrees: float) -> float:
    """Constrain a longitude to (-180, 180].

    Sawtooth with period 360. An input of exactly -180 is returned as is;
    use ``canonical_longitude`` when -180 and 180 must compare equal.

    Parameters
    ----------
    degrees : float
        Longitude in degrees.

    Returns
    -------
    float
        Equivalent longitude.
    """
    if -180.0 <= degrees <= 180.0:
        return degrees
    turns = np.floor(abs(degrees / 360.0)) + 1.0
    return float(np.fmod(degrees + 180.0 + 360.0 * turns, 360.0) - 180.0)


def wrap90(degrees: float) -> float:
    """Constrain a latitude to [-90, 90].

    Triangle wave with period 360: values past a pole are reflected back,
    e.g. 100 -> 80, 270 -> -90.

    Parameters
    ----------
    degrees : float
        Latitude in degrees.

    Returns
    -------
    float
        Equivalent latitude.
    """
    if -90.0 <= degrees <= 90.0:
        return degrees
    # floored modulo, so negative inputs land on the same wave as positive ones
    return float(abs(np.mod(np.mod(degrees, 360.0) + 270.0, 360.0) - 180.0) - 90.0)


def canonical_longitude(degrees: float) -> float:
    """Wrap a longitude to (-180, 180], reporting the antimeridian as +180."""
    lon = wrap180(degrees)
    if lon == -180.0:
        return 180.0
    return lon


def unwrap_longitude_delta(delta: float) -> float:
    """Take a longitude difference the short way round.

    Differences larger than a half turn are shifted by a full turn so that
    a segment from 170 to -170 spans +20 degrees, not -340.

    Parameters
    ----------
    delta : float
        Longitude difference in degrees (end minus start).

    Returns
    -------
    float
        Difference in [-180, 180].
    """
    if -180.0 <= delta <= 180.0:
        return delta
    return wrap180(delta)
