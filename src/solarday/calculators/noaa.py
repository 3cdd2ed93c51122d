"""NOAA solar calculator: Meeus series with a two-pass sunrise/sunset refinement.

Based on the NOAA Surface Radiation Research Branch implementation of the
equations in Jean Meeus, "Astronomical Algorithms", with the zenith adjusted
for elevation. See https://gml.noaa.gov/grad/solcalc/solareqns.PDF.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime

from pytz import utc

from solarday.geo import GeoCoordinate
from solarday.models import CalendarDate
from solarday.units import acos_deg, asin_deg, cos_deg, sin_deg, tan_deg
from solarday.zenith import ZenithAdjuster

JULIAN_DAY_JAN_1_2000 = 2451545.0
JULIAN_DAYS_PER_CENTURY = 36525.0
MINUTES_PER_DAY = 1440.0


def julian_day(date: CalendarDate) -> float:
    """Julian Day at 0h UTC of the date. Fractional days are added by callers."""
    a = (14 - date.month) // 12
    y = date.year + 4800 - a
    m = date.month + 12 * a - 3
    jdn = date.day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045
    return jdn - 0.5


def julian_centuries_from_julian_day(jd: float) -> float:
    return (jd - JULIAN_DAY_JAN_1_2000) / JULIAN_DAYS_PER_CENTURY


def julian_day_from_julian_centuries(julian_centuries: float) -> float:
    return julian_centuries * JULIAN_DAYS_PER_CENTURY + JULIAN_DAY_JAN_1_2000


def sun_geometric_mean_longitude(julian_centuries: float) -> float:
    """Geometric mean longitude of the sun in degrees, [0, 360]."""
    longitude = 280.46646 + julian_centuries * (36000.76983 + 0.0003032 * julian_centuries)
    while longitude > 360.0:
        longitude -= 360.0
    while longitude < 0.0:
        longitude += 360.0
    return longitude


def sun_geometric_mean_anomaly(julian_centuries: float) -> float:
    return 357.52911 + julian_centuries * (35999.05029 - 0.0001537 * julian_centuries)


def earth_orbit_eccentricity(julian_centuries: float) -> float:
    return 0.016708634 - julian_centuries * (0.000042037 + 0.0000001267 * julian_centuries)


def sun_equation_of_center(julian_centuries: float) -> float:
    m = math.radians(sun_geometric_mean_anomaly(julian_centuries))
    return (
        math.sin(m) * (1.914602 - julian_centuries * (0.004817 + 0.000014 * julian_centuries))
        + math.sin(2 * m) * (0.019993 - 0.000101 * julian_centuries)
        + math.sin(3 * m) * 0.000289
    )


def sun_true_longitude(julian_centuries: float) -> float:
    return sun_geometric_mean_longitude(julian_centuries) + sun_equation_of_center(
        julian_centuries
    )


def sun_apparent_longitude(julian_centuries: float) -> float:
    omega = 125.04 - 1934.136 * julian_centuries
    return sun_true_longitude(julian_centuries) - 0.00569 - 0.00478 * sin_deg(omega)


def mean_obliquity_of_ecliptic(julian_centuries: float) -> float:
    seconds = 21.448 - julian_centuries * (
        46.8150 + julian_centuries * (0.00059 - julian_centuries * 0.001813)
    )
    return 23.0 + (26.0 + seconds / 60.0) / 60.0


def obliquity_correction(julian_centuries: float) -> float:
    omega = 125.04 - 1934.136 * julian_centuries
    return mean_obliquity_of_ecliptic(julian_centuries) + 0.00256 * cos_deg(omega)


def sun_declination(julian_centuries: float) -> float:
    """Declination of the sun in degrees."""
    return asin_deg(
        sin_deg(obliquity_correction(julian_centuries))
        * sin_deg(sun_apparent_longitude(julian_centuries))
    )


def equation_of_time(julian_centuries: float) -> float:
    """True solar time minus mean solar time, in minutes of time."""
    epsilon = obliquity_correction(julian_centuries)
    l0 = math.radians(sun_geometric_mean_longitude(julian_centuries))
    e = earth_orbit_eccentricity(julian_centuries)
    m = math.radians(sun_geometric_mean_anomaly(julian_centuries))

    y = tan_deg(epsilon / 2.0) ** 2

    eot = (
        y * math.sin(2.0 * l0)
        - 2.0 * e * math.sin(m)
        + 4.0 * e * y * math.sin(m) * math.cos(2.0 * l0)
        - 0.5 * y * y * math.sin(4.0 * l0)
        - 1.25 * e * e * math.sin(2.0 * m)
    )
    return math.degrees(eot) * 4.0


def sun_hour_angle_at_sunrise(
    latitude: float, solar_declination: float, zenith: float
) -> float | None:
    """Hour angle of sunrise in degrees, or None if the sun never reaches the zenith."""
    return acos_deg(
        cos_deg(zenith) / (cos_deg(latitude) * cos_deg(solar_declination))
        - tan_deg(latitude) * tan_deg(solar_declination)
    )


def sun_hour_angle_at_sunset(
    latitude: float, solar_declination: float, zenith: float
) -> float | None:
    hour_angle = sun_hour_angle_at_sunrise(latitude, solar_declination, zenith)
    return None if hour_angle is None else -hour_angle


def solar_noon_utc(julian_centuries: float, longitude: float) -> float:
    """UTC solar noon in minutes from 0h.

    Args:
        julian_centuries: Centuries since J2000.0 at the start of the day.
        longitude: Degrees, positive west.
    """
    jd = julian_day_from_julian_centuries(julian_centuries)
    tnoon = julian_centuries_from_julian_day(jd + longitude / 360.0)
    sol_noon_utc = 720 + longitude * 4 - equation_of_time(tnoon)

    newt = julian_centuries_from_julian_day(jd - 0.5 + sol_noon_utc / MINUTES_PER_DAY)
    return 720 + longitude * 4 - equation_of_time(newt)


def _event_utc(
    jd: float, latitude: float, longitude: float, zenith: float, is_sunrise: bool
) -> float | None:
    """UTC minutes from 0h of sunrise or sunset, refined in two passes.

    The first pass takes declination and equation of time at solar noon; the
    second repeats the calculation at the time the first pass produced.
    """
    hour_angle_at = sun_hour_angle_at_sunrise if is_sunrise else sun_hour_angle_at_sunset
    julian_centuries = julian_centuries_from_julian_day(jd)

    noon_min = solar_noon_utc(julian_centuries, longitude)
    t = julian_centuries_from_julian_day(jd + noon_min / MINUTES_PER_DAY)

    time_utc = None
    for _ in range(2):
        hour_angle = hour_angle_at(latitude, sun_declination(t), zenith)
        if hour_angle is None:
            return None
        delta = longitude - hour_angle
        time_utc = 720 + 4 * delta - equation_of_time(t)
        t = julian_centuries_from_julian_day(
            julian_day_from_julian_centuries(julian_centuries) + time_utc / MINUTES_PER_DAY
        )
    return time_utc


def _normalize_hours(hours: float) -> float:
    while hours < 0.0:
        hours += 24.0
    while hours >= 24.0:
        hours -= 24.0
    return hours


@dataclass(frozen=True)
class NOAACalculator:
    """Sunrise and sunset from the NOAA implementation of the Meeus equations."""

    adjuster: ZenithAdjuster = field(default_factory=ZenithAdjuster)

    name = "US National Oceanic and Atmospheric Administration Algorithm"

    def utc_sunrise(
        self,
        date: CalendarDate,
        location: GeoCoordinate,
        zenith: float,
        adjust_for_elevation: bool,
    ) -> float | None:
        """UTC sunrise as a fractional hour in [0, 24), 5:45 AM being 5.75.

        Args:
            date: Day of the calculation; only the calendar date is used.
            location: Observer.
            zenith: Degrees from the vertical. 90 is adjusted for refraction,
                solar radius and (optionally) elevation; twilight zeniths are not.
            adjust_for_elevation: Whether to widen the geometric zenith by the
                location's elevation dip.

        Returns:
            The hour, or None when the sun does not reach the zenith that day.
        """
        return self._utc_event(date, location, zenith, adjust_for_elevation, True)

    def utc_sunset(
        self,
        date: CalendarDate,
        location: GeoCoordinate,
        zenith: float,
        adjust_for_elevation: bool,
    ) -> float | None:
        """UTC sunset as a fractional hour in [0, 24). See utc_sunrise."""
        return self._utc_event(date, location, zenith, adjust_for_elevation, False)

    def _utc_event(
        self,
        date: CalendarDate,
        location: GeoCoordinate,
        zenith: float,
        adjust_for_elevation: bool,
        is_sunrise: bool,
    ) -> float | None:
        elevation = location.elevation if adjust_for_elevation else 0.0
        adjusted_zenith = self.adjuster.adjust_zenith(zenith, elevation)
        minutes = _event_utc(
            julian_day(date),
            location.latitude,
            -location.longitude,
            adjusted_zenith,
            is_sunrise,
        )
        if minutes is None:
            return None
        return _normalize_hours(minutes / 60)

    def solar_elevation(self, instant: datetime, location: GeoCoordinate) -> float:
        """Geometric elevation of the sun's center above the horizon, in degrees.

        Not corrected for refraction or the observer's elevation. Negative
        while the sun is below the horizon; civil twilight ends at -6.
        """
        return 90.0 - self._solar_zenith_and_hour_angle(instant, location)[0]

    def solar_azimuth(self, instant: datetime, location: GeoCoordinate) -> float:
        """Azimuth of the sun in degrees clockwise from true north, [0, 360)."""
        zenith, hour_angle, declination = self._solar_zenith_and_hour_angle(
            instant, location
        )
        sin_zenith = sin_deg(zenith)
        cos_latitude = cos_deg(location.latitude)
        if sin_zenith == 0 or cos_latitude == 0:
            return 180.0 if location.latitude > declination else 0.0
        cos_azimuth = (sin_deg(location.latitude) * cos_deg(zenith) - sin_deg(declination)) / (
            cos_latitude * sin_zenith
        )
        azimuth = math.degrees(math.acos(max(-1.0, min(1.0, cos_azimuth))))
        if hour_angle > 0:
            return (azimuth + 180.0) % 360.0
        return (540.0 - azimuth) % 360.0

    def _solar_zenith_and_hour_angle(
        self, instant: datetime, location: GeoCoordinate
    ) -> tuple[float, float, float]:
        if instant.tzinfo is None:
            instant = utc.localize(instant)
        utc_dt = instant.astimezone(utc)
        minutes = (
            utc_dt.hour * 60
            + utc_dt.minute
            + utc_dt.second / 60
            + utc_dt.microsecond / 60_000_000
        )
        jd = julian_day(CalendarDate.from_datetime(utc_dt.date())) + minutes / MINUTES_PER_DAY
        julian_centuries = julian_centuries_from_julian_day(jd)

        true_solar_time = minutes + equation_of_time(julian_centuries) + 4 * location.longitude
        hour_angle = (true_solar_time / 4) % 360.0 - 180.0
        declination = sun_declination(julian_centuries)
        cos_zenith = sin_deg(location.latitude) * sin_deg(declination) + cos_deg(
            location.latitude
        ) * cos_deg(declination) * cos_deg(hour_angle)
        zenith = math.degrees(math.acos(max(-1.0, min(1.0, cos_zenith))))
        return zenith, hour_angle, declination
