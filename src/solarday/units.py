"""Angle and length conversions, plus trigonometry on degree arguments."""

import math

ARCMINUTES_PER_DEGREE = 60.0
ARCSECONDS_PER_DEGREE = 3600.0
METERS_PER_KM = 1000.0


def arcminutes_to_degrees(arcminutes: float) -> float:
    return arcminutes / ARCMINUTES_PER_DEGREE


def arcseconds_to_degrees(arcseconds: float) -> float:
    return arcseconds / ARCSECONDS_PER_DEGREE


def meters_to_km(meters: float) -> float:
    return meters / METERS_PER_KM


def km_to_meters(km: float) -> float:
    return km * METERS_PER_KM


def dms_to_degrees(degrees: float, minutes: float, seconds: float) -> float:
    """Combine degrees, arc-minutes and arc-seconds into decimal degrees."""
    return degrees + (minutes + seconds / 60.0) / 60.0


def sin_deg(angle: float) -> float:
    return math.sin(math.radians(angle))


def cos_deg(angle: float) -> float:
    return math.cos(math.radians(angle))


def tan_deg(angle: float) -> float:
    return math.tan(math.radians(angle))


def asin_deg(x: float) -> float:
    return math.degrees(math.asin(x))


def atan_deg(x: float) -> float:
    return math.degrees(math.atan(x))


def acos_deg(x: float) -> float | None:
    """Arc-cosine in degrees, or None when x lies outside [-1, 1].

    Solar hour-angle formulas feed this with values that leave the domain
    whenever the sun never reaches the requested zenith (polar day or night).
    """
    if not -1.0 <= x <= 1.0:
        return None
    return math.degrees(math.acos(x))
