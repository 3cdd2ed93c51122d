"""US Naval Observatory almanac sunrise/sunset calculator.

Follows the "Almanac for Computers" algorithm as written up by Kevin Boone,
with the zenith adjusted for elevation. Works from the day of the year only,
so its results differ slightly from the NOAA calculator.
"""

import math
from dataclasses import dataclass, field

from solarday.geo import GeoCoordinate
from solarday.models import CalendarDate
from solarday.units import acos_deg, asin_deg, atan_deg, cos_deg, sin_deg, tan_deg
from solarday.zenith import ZenithAdjuster

DEG_PER_HOUR = 360.0 / 24.0


def hours_from_meridian(longitude: float) -> float:
    """Time difference from Greenwich in hours; negative west of it."""
    return longitude / DEG_PER_HOUR


def approx_time_days(day_of_year: int, hours_from_meridian: float, is_sunrise: bool) -> float:
    """Approximate event time in days since Jan 1 0h, assuming 6am and 6pm events."""
    if is_sunrise:
        return day_of_year + (6.0 - hours_from_meridian) / 24
    return day_of_year + (18.0 - hours_from_meridian) / 24


def sun_mean_anomaly(day_of_year: int, longitude: float, is_sunrise: bool) -> float:
    return (
        0.9856 * approx_time_days(day_of_year, hours_from_meridian(longitude), is_sunrise)
    ) - 3.289


def sun_true_longitude(sun_mean_anomaly: float) -> float:
    """True longitude of the sun in degrees, [0, 360)."""
    longitude = (
        sun_mean_anomaly
        + 1.916 * sin_deg(sun_mean_anomaly)
        + 0.020 * sin_deg(2 * sun_mean_anomaly)
        + 282.634
    )
    if longitude >= 360.0:
        longitude -= 360.0
    if longitude < 0:
        longitude += 360.0
    return longitude


def sun_right_ascension_hours(sun_true_longitude: float) -> float:
    """Right ascension in hours, kept in the same quadrant as the true longitude."""
    ra = atan_deg(0.91764 * tan_deg(sun_true_longitude))

    l_quadrant = math.floor(sun_true_longitude / 90.0) * 90.0
    ra_quadrant = math.floor(ra / 90.0) * 90.0
    ra += l_quadrant - ra_quadrant

    return ra / DEG_PER_HOUR


def cos_local_hour_angle(sun_true_longitude: float, latitude: float, zenith: float) -> float:
    sin_dec = 0.39782 * sin_deg(sun_true_longitude)
    cos_dec = cos_deg(asin_deg(sin_dec))
    return (cos_deg(zenith) - sin_dec * sin_deg(latitude)) / (cos_dec * cos_deg(latitude))


def local_mean_time(local_hour: float, right_ascension_hours: float, days: float) -> float:
    """Local mean time of the event, in hours from midnight, ignoring time zones."""
    return local_hour + right_ascension_hours - 0.06571 * days - 6.622


def time_utc(
    date: CalendarDate, location: GeoCoordinate, zenith: float, is_sunrise: bool
) -> float | None:
    """UTC hour in [0, 24) of the event, or None if the sun never reaches the zenith."""
    day_of_year = date.day_of_year
    meridian_hours = hours_from_meridian(location.longitude)

    mean_anomaly = sun_mean_anomaly(day_of_year, location.longitude, is_sunrise)
    true_longitude = sun_true_longitude(mean_anomaly)
    right_ascension = sun_right_ascension_hours(true_longitude)
    hour_angle = acos_deg(cos_local_hour_angle(true_longitude, location.latitude, zenith))
    if hour_angle is None:
        return None
    if is_sunrise:
        hour_angle = 360.0 - hour_angle

    local_hour = hour_angle / DEG_PER_HOUR
    processed_time = (
        local_mean_time(
            local_hour,
            right_ascension,
            approx_time_days(day_of_year, meridian_hours, is_sunrise),
        )
        - meridian_hours
    )
    while processed_time < 0.0:
        processed_time += 24.0
    while processed_time >= 24.0:
        processed_time -= 24.0
    return processed_time


@dataclass(frozen=True)
class USNOCalculator:
    """Sunrise and sunset from the US Naval Observatory almanac algorithm."""

    adjuster: ZenithAdjuster = field(default_factory=ZenithAdjuster)

    name = "US Naval Almanac Algorithm"

    def utc_sunrise(
        self,
        date: CalendarDate,
        location: GeoCoordinate,
        zenith: float,
        adjust_for_elevation: bool,
    ) -> float | None:
        elevation = location.elevation if adjust_for_elevation else 0.0
        return time_utc(date, location, self.adjuster.adjust_zenith(zenith, elevation), True)

    def utc_sunset(
        self,
        date: CalendarDate,
        location: GeoCoordinate,
        zenith: float,
        adjust_for_elevation: bool,
    ) -> float | None:
        elevation = location.elevation if adjust_for_elevation else 0.0
        return time_utc(date, location, self.adjuster.adjust_zenith(zenith, elevation), False)
