"""
Degrees-Minutes-Seconds Parsing and Formatting.

Parsing is deliberately lenient: signed decimal degrees, or
degrees/minutes/seconds separated by symbols (° ′ ″, or the ASCII ' and ")
or whitespace, optionally suffixed by a compass direction. Examples:
``-3.62``, ``'3 37 12W'``, ``'3°37′12″W'``.

Formatting always zero-pads degrees to three digits and discards the sign;
callers append a compass direction (see ``format_latlon``).
"""

import re
from typing import Union

import numpy as np

from geocommon.angles import wrap90, wrap180
from geocommon.types import LatLon

# Output formats for format_dms
DMS_FORMAT_DEG = 0
DMS_FORMAT_DEG_MIN = 1
DMS_FORMAT_DEG_MIN_SEC = 2

_DEFAULT_DECIMALS = {
    DMS_FORMAT_DEG: 4,
    DMS_FORMAT_DEG_MIN: 2,
    DMS_FORMAT_DEG_MIN_SEC: 0,
}

_DMS_RE = re.compile(
    r"""^-?(?:([0-9.,]+)(?:[°º]|\s|[nwseNWSE]?$))?\s*(?:([0-9.,]+)(?:[′’']|\s|[nwseNWSE]?$))?\s*(?:([0-9.,]+)[″”"]?)?\s*[nwseNWSE]?$"""
)


def _parse_component(text: str, what: str, dms: str) -> float:
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError as e:
        raise ValueError(f"Failed to parse {what} ({text}) in DMS string {dms!r}") from e


def parse_dms(dms: str) -> float:
    """Parse a degrees-minutes-seconds string into decimal degrees.

    Parameters
    ----------
    dms : str
        Signed decimal degrees, or deg/min/sec optionally suffixed by a
        compass direction (NSEW).

    Returns
    -------
    float
        Decimal degrees; negative for a leading '-' or a W/S suffix.

    Raises
    ------
    ValueError
        If the string is empty or cannot be parsed.

    Examples
    --------
    >>> parse_dms("51° 28′ 40.37″ N")
    51.4778805...
    >>> parse_dms("000° 00′ 05.29″ W")
    -0.0014694...
    """
    if dms == "":
        raise ValueError("Empty DMS string")

    # signed decimal degrees without NSEW are returned directly
    if "_" not in dms:
        try:
            return float(dms)
        except ValueError:
            pass

    dms = dms.strip()
    match = _DMS_RE.match(dms)
    if match is None:
        raise ValueError(f"Failed to parse DMS string {dms!r}")

    deg = _parse_component(match.group(1), "degrees", dms)
    minutes = _parse_component(match.group(2), "minutes", dms)
    seconds = _parse_component(match.group(3), "seconds", dms)
    deg += minutes / 60.0 + seconds / 3600.0

    if dms.startswith("-") or dms.endswith("W") or dms.endswith("S"):
        deg = -deg
    return deg


def _round_half_up(value: float, dp: int) -> float:
    scale = 10.0 ** dp
    return float(np.floor(value * scale + 0.5) / scale)


def _padded(value: float, digits: int, dp: int) -> str:
    width = digits + (dp + 1 if dp > 0 else 0)
    return f"{value:0{width}.{dp}f}"


def format_dms(deg: float, fmt: int = DMS_FORMAT_DEG, dp: int = -1) -> str:
    """Format decimal degrees as a deg/min/sec string.

    Degree, prime and double-prime symbols are added; the sign is
    discarded.

    Parameters
    ----------
    deg : float
        Angle in degrees.
    fmt : int
        One of DMS_FORMAT_DEG, DMS_FORMAT_DEG_MIN, DMS_FORMAT_DEG_MIN_SEC.
        Unknown formats fall back to DMS_FORMAT_DEG.
    dp : int
        Decimal places of the last component; -1 selects 4, 2 or 0 for the
        three formats.

    Returns
    -------
    str
        Formatted angle, or "" for NaN and infinite input.

    Examples
    --------
    >>> format_dms(9.1525, DMS_FORMAT_DEG_MIN_SEC)
    '009°09′09″'
    """
    if np.isnan(deg) or np.isinf(deg):
        return ""

    if fmt not in _DEFAULT_DECIMALS:
        fmt = DMS_FORMAT_DEG
        if dp == -1:
            dp = 4
    if dp == -1:
        dp = _DEFAULT_DECIMALS[fmt]

    deg = abs(deg)

    if fmt == DMS_FORMAT_DEG_MIN:
        d = np.floor(deg)
        m = _round_half_up(np.fmod(deg * 60.0, 60.0), dp)
        if m == 60.0:  # rounding carry
            d += 1
            m = 0.0
        return f"{int(d):03d}°{_padded(m, 2, dp)}′"

    if fmt == DMS_FORMAT_DEG_MIN_SEC:
        d = np.floor(deg)
        m = np.fmod(np.floor(deg * 3600.0 / 60.0), 60.0)
        s = _round_half_up(np.fmod(deg * 3600.0, 60.0), dp)
        if s == 60.0:
            m += 1
            s = 0.0
        if m == 60.0:
            d += 1
            m = 0.0
        return f"{int(d):03d}°{int(m):02d}′{_padded(s, 2, dp)}″"

    return f"{_padded(deg, 3, dp)}°"


def parse_latlon(*args: Union[str, float]) -> LatLon:
    """Parse a point from numbers, DMS strings, or one "lat, lon" string.

    Parameters
    ----------
    *args
        Either ``(lat, lon)`` where each is a number or a DMS string, or a
        single comma-separated ``"lat, lon"`` string.

    Returns
    -------
    LatLon
        Point with latitude wrapped to [-90, 90] and longitude to
        (-180, 180].

    Raises
    ------
    ValueError
        On a wrong number of values, NaN, or unparseable strings.
    TypeError
        On arguments that are neither numbers nor strings.

    Examples
    --------
    >>> parse_latlon(51.47788, -0.00147)
    >>> parse_latlon("51°28′40″N, 000°00′05″W")
    >>> parse_latlon("51°28′40″N", "000°00′05″W")
    """
    if len(args) == 0:
        raise ValueError("Invalid (empty) point")
    if len(args) == 1:
        if not isinstance(args[0], str):
            raise TypeError(f"Invalid argument type: {type(args[0]).__name__}")
        tokens = args[0].split(",")
        if len(tokens) > 2:
            raise ValueError("Failed to parse point: too many items")
        if len(tokens) == 1:
            raise ValueError("Failed to parse point: latitude and longitude are required")
        args = tuple(tokens)
    elif len(args) > 2:
        raise ValueError("Too many arguments")

    lat = _parse_coordinate(args[0], "latitude")
    lon = _parse_coordinate(args[1], "longitude")
    return LatLon(wrap90(lat), wrap180(lon))


def _parse_coordinate(value: Union[str, float], what: str) -> float:
    if isinstance(value, str):
        try:
            return parse_dms(value)
        except ValueError as e:
            raise ValueError(f"Failed to parse {what}: {e}") from e
    if isinstance(value, bool) or not isinstance(value, (int, float, np.floating, np.integer)):
        raise TypeError(f"Invalid type for {what}: {type(value).__name__}")
    if np.isnan(value):
        raise ValueError(f"{what.capitalize()} cannot be NaN")
    return float(value)


def format_latlon(point: LatLon, fmt: int = DMS_FORMAT_DEG, dp: int = -1) -> str:
    """Format a point as "lat N/S, lon E/W".

    Examples
    --------
    >>> format_latlon(LatLon(51.4778, -0.0015), DMS_FORMAT_DEG_MIN_SEC)
    '51°28′40″N, 000°00′05″W'
    """
    if not point.valid():
        return ""
    lat = format_dms(point.lat, fmt, dp)[1:]  # latitudes need two degree digits
    lon = format_dms(point.lon, fmt, dp)
    ns = "S" if point.lat < 0 else "N"
    ew = "W" if point.lon < 0 else "E"
    return f"{lat}{ns}, {lon}{ew}"
