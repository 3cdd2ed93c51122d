"""Astronomical calendar: solar events for one date and place as local instants.

There are days when no sunrise, sunset or twilight can be computed, usually far
north or south where the sun never reaches the requested dip below the horizon.
Deep twilight dips fail this way as far south as London. Such a day is an
expected condition, not an error, so every query returns None for it.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

from pytz import utc

from solarday.calculators.base import SolarPositionCalculator
from solarday.calculators.noaa import NOAACalculator
from solarday.geo import GeoCoordinate
from solarday.models import CalendarDate, InvalidInputError
from solarday.zenith import (
    ASTRONOMICAL_ZENITH,
    CIVIL_ZENITH,
    GEOMETRIC_ZENITH,
    NAUTICAL_ZENITH,
)

logger = logging.getLogger(__name__)

DIP_SEARCH_STEP = 0.0001  # degrees
DIP_SEARCH_MAX_ITERATIONS = 300_000  # 30 degrees of dip


def time_offset(instant: datetime, offset: timedelta) -> datetime:
    """Shift an instant by an offset.

    Light during twilight does not depend on elevation, so offsets meant as a
    rough "level of light" should start from sea-level sunrise or sunset.
    """
    return instant + offset


def fractional_utc_hour(instant: datetime) -> float:
    """UTC time of day as a fractional hour, 18:45 being 18.75."""
    utc_dt = instant.astimezone(utc)
    return (
        utc_dt.hour
        + utc_dt.minute / 60
        + utc_dt.second / 3600
        + utc_dt.microsecond / 3_600_000_000
    )


@dataclass(frozen=True)
class AstronomicalCalendar:
    """Solar events for one date at one location, computed by one calculator.

    Every query is a pure function of this binding. Use with_elevation_mode to
    get a view that ignores (or honors) the location's elevation.
    """

    date: CalendarDate
    location: GeoCoordinate
    calculator: SolarPositionCalculator = field(default_factory=NOAACalculator)
    use_elevation: bool = True  # Apply the elevation dip to sunrise()/sunset()

    def with_elevation_mode(self, use_elevation: bool) -> "AstronomicalCalendar":
        return replace(self, use_elevation=use_elevation)

    def adjusted_date(self) -> CalendarDate:
        """The bound date shifted for zones on the far side of the antimeridian.

        Zone rules are read as of the bound date rather than the live clock.

        Raises:
            InvalidInputError: When the shift leaves years 1 to 9999.
        """
        as_of = utc.localize(self.date.to_datetime())
        return self.date.plus_days(self.location.antimeridian_adjustment(as_of))

    # --- UTC fractional hours ---

    def utc_sunrise(self, zenith: float) -> float | None:
        """UTC sunrise for a zenith, as a fractional hour (18.75 for 18:45 UTC).

        Returns:
            The hour, or None when the sun does not reach the zenith.
        """
        return self.calculator.utc_sunrise(
            self.adjusted_date(), self.location, zenith, self.use_elevation
        )

    def utc_sunset(self, zenith: float) -> float | None:
        return self.calculator.utc_sunset(
            self.adjusted_date(), self.location, zenith, self.use_elevation
        )

    def utc_sea_level_sunrise(self, zenith: float) -> float | None:
        """UTC sunrise ignoring elevation. The basis for dawn calculations."""
        return self.calculator.utc_sunrise(self.adjusted_date(), self.location, zenith, False)

    def utc_sea_level_sunset(self, zenith: float) -> float | None:
        """UTC sunset ignoring elevation. The basis for dusk calculations."""
        return self.calculator.utc_sunset(self.adjusted_date(), self.location, zenith, False)

    # --- Local instants ---

    def sunrise(self) -> datetime | None:
        """Sunrise with refraction, solar radius and (if enabled) elevation applied.

        Returns:
            Aware datetime in the location's zone, or None in polar day or night.
        """
        return self._to_instant(self.utc_sunrise(GEOMETRIC_ZENITH), True, "sunrise")

    def sunset(self) -> datetime | None:
        """Sunset with refraction, solar radius and (if enabled) elevation applied.

        The UTC sunset may fall before the UTC sunrise (Los Angeles, for
        example); the date is rolled forward so the instant is on the right day.
        """
        return self._to_instant(self.utc_sunset(GEOMETRIC_ZENITH), False, "sunset")

    def sea_level_sunrise(self) -> datetime | None:
        return self._to_instant(
            self.utc_sea_level_sunrise(GEOMETRIC_ZENITH), True, "sea level sunrise"
        )

    def sea_level_sunset(self) -> datetime | None:
        return self._to_instant(
            self.utc_sea_level_sunset(GEOMETRIC_ZENITH), False, "sea level sunset"
        )

    def sunrise_offset_by_degrees(self, offset_zenith: float) -> datetime | None:
        """Time the sun reaches a zenith before (or after) sunrise.

        The zenith is measured from the vertical: 14° before sunrise is
        GEOMETRIC_ZENITH + 14 = 104. Pass less than 90 for times after sunrise.
        """
        return self._to_instant(
            self.utc_sunrise(offset_zenith), True, f"sunrise at {offset_zenith}°"
        )

    def sunset_offset_by_degrees(self, offset_zenith: float) -> datetime | None:
        """Time the sun reaches a zenith after (or before) sunset. See sunrise_offset_by_degrees."""
        return self._to_instant(
            self.utc_sunset(offset_zenith), False, f"sunset at {offset_zenith}°"
        )

    def begin_civil_twilight(self) -> datetime | None:
        return self.sunrise_offset_by_degrees(CIVIL_ZENITH)

    def begin_nautical_twilight(self) -> datetime | None:
        return self.sunrise_offset_by_degrees(NAUTICAL_ZENITH)

    def begin_astronomical_twilight(self) -> datetime | None:
        return self.sunrise_offset_by_degrees(ASTRONOMICAL_ZENITH)

    def end_civil_twilight(self) -> datetime | None:
        return self.sunset_offset_by_degrees(CIVIL_ZENITH)

    def end_nautical_twilight(self) -> datetime | None:
        return self.sunset_offset_by_degrees(NAUTICAL_ZENITH)

    def end_astronomical_twilight(self) -> datetime | None:
        return self.sunset_offset_by_degrees(ASTRONOMICAL_ZENITH)

    def temporal_hour(
        self,
        start_of_day: datetime | None = None,
        end_of_day: datetime | None = None,
    ) -> timedelta | None:
        """One twelfth of the day, by default from sea-level sunrise to sea-level sunset.

        Args:
            start_of_day: Start of the day; sea-level sunrise when omitted.
            end_of_day: End of the day; sea-level sunset when omitted.

        Returns:
            Length of one temporal hour, or None if either endpoint has no event.
        """
        if start_of_day is None:
            start_of_day = self.sea_level_sunrise()
        if end_of_day is None:
            end_of_day = self.sea_level_sunset()
        if start_of_day is None or end_of_day is None:
            return None
        return (end_of_day - start_of_day) / 12

    def sun_transit(
        self,
        start_of_day: datetime | None = None,
        end_of_day: datetime | None = None,
    ) -> datetime | None:
        """Solar noon, taken as halfway between the start and end of the day.

        This can be slightly off the true transit while the declination
        changes (lengthening or shortening days).
        """
        if start_of_day is None:
            start_of_day = self.sea_level_sunrise()
        if end_of_day is None:
            end_of_day = self.sea_level_sunset()
        hour = self.temporal_hour(start_of_day, end_of_day)
        if hour is None:
            return None
        return time_offset(start_of_day, hour * 6)

    def date_time_from_time_of_day(self, time_of_day: float, is_sunrise: bool) -> datetime:
        """Place a fractional UTC hour on the bound date in the location's zone.

        If the longitude implies the event belongs to the adjacent UTC day
        (sunrise late in the UTC day far east, sunset early in the UTC day far
        west) the date is moved by one day before converting.

        Raises:
            InvalidInputError: When the shifted instant leaves years 1 to 9999.
        """
        calculated_time = time_of_day
        hours = math.floor(calculated_time)
        calculated_time = (calculated_time - hours) * 60
        minutes = math.floor(calculated_time)
        calculated_time = (calculated_time - minutes) * 60
        seconds = math.floor(calculated_time)
        microseconds = math.floor((calculated_time - seconds) * 1_000_000)

        adjusted = self.adjusted_date()
        utc_dt = datetime(
            adjusted.year,
            adjusted.month,
            adjusted.day,
            hours,
            minutes,
            seconds,
            microseconds,
            tzinfo=utc,
        )

        local_offset_hours = math.floor(self.location.longitude / 15)
        try:
            if is_sunrise and local_offset_hours + hours > 18:
                utc_dt -= timedelta(days=1)
            elif not is_sunrise and local_offset_hours + hours < 6:
                utc_dt += timedelta(days=1)
            return utc_dt.astimezone(self.location.tz)
        except OverflowError as e:
            raise InvalidInputError(
                f"Event on {adjusted.to_date().isoformat()} "
                f"at {self.location.name} falls outside years 1 to 9999"
            ) from e

    def solar_dip_from_minute_offset(
        self,
        minutes: float,
        is_sunrise: bool,
        max_iterations: int = DIP_SEARCH_MAX_ITERATIONS,
    ) -> float | None:
        """Dip below the horizon whose sunrise/sunset offset matches a clock offset.

        Passing 72 minutes for Jerusalem at the equinox yields close to 16.1°.
        The search walks in 0.0001° steps and is far too slow for use in a loop.

        Args:
            minutes: Minutes before sunrise or after sunset; negative values
                look after sunrise or before sunset.
            is_sunrise: Search around sea-level sunrise (True) or sunset (False).
            max_iterations: Step cap; reaching it yields None.

        Returns:
            Degrees below the horizon (negative above it), or None if an
            intermediate time cannot be computed or the cap is reached.
        """
        anchor = self.sea_level_sunrise() if is_sunrise else self.sea_level_sunset()
        if anchor is None:
            return None
        if is_sunrise:
            offset_for = self.sunrise_offset_by_degrees
            target = time_offset(anchor, -timedelta(minutes=minutes))
        else:
            offset_for = self.sunset_offset_by_degrees
            target = time_offset(anchor, timedelta(minutes=minutes))

        def short_of_target(candidate: datetime) -> bool:
            # Moving the dip deeper moves sunrise earlier and sunset later.
            if is_sunrise:
                return (minutes > 0 and candidate > target) or (
                    minutes < 0 and candidate < target
                )
            return (minutes > 0 and candidate < target) or (minutes < 0 and candidate > target)

        degrees = 0.0
        step = DIP_SEARCH_STEP if minutes > 0 else -DIP_SEARCH_STEP
        candidate = anchor
        iterations = 0
        while short_of_target(candidate):
            if iterations >= max_iterations:
                logger.warning(
                    "Dip search for %s minutes at %s stopped after %d steps",
                    minutes,
                    self.location.name,
                    max_iterations,
                )
                return None
            iterations += 1
            degrees += step
            next_candidate = offset_for(GEOMETRIC_ZENITH + degrees)
            if next_candidate is None:
                return None
            candidate = next_candidate
        return degrees

    def _to_instant(
        self, time_of_day: float | None, is_sunrise: bool, label: str
    ) -> datetime | None:
        if time_of_day is None:
            logger.debug(
                "No %s at %s on %s", label, self.location.name, self.date.to_date()
            )
            return None
        return self.date_time_from_time_of_day(time_of_day, is_sunrise)
