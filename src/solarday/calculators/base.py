"""Shared contract of the solar position calculators."""

from typing import Protocol

from solarday.geo import GeoCoordinate
from solarday.models import CalendarDate


class SolarPositionCalculator(Protocol):
    """Maps (date, location, zenith, elevation flag) to a UTC hour or None.

    Implementations are stateless and independent; they are different
    approximations and are not expected to agree with each other.
    """

    name: str

    def utc_sunrise(
        self,
        date: CalendarDate,
        location: GeoCoordinate,
        zenith: float,
        adjust_for_elevation: bool,
    ) -> float | None: ...

    def utc_sunset(
        self,
        date: CalendarDate,
        location: GeoCoordinate,
        zenith: float,
        adjust_for_elevation: bool,
    ) -> float | None: ...
