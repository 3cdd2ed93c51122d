import logging
from datetime import date, datetime, timedelta

import pytest
from pytz import utc

from conftest import (
    BASIC_IDS,
    BASIC_LOCATIONS,
    DANEBORG,
    FORT_CONGER,
    HOOPER_BAY,
    LAKEWOOD,
    LOS_ANGELES,
    REFERENCE_DATE,
    SAMOA,
    TOKYO,
)
from solarday.astronomical_calendar import (
    AstronomicalCalendar,
    fractional_utc_hour,
    time_offset,
)
from solarday.calculators.noaa import NOAACalculator
from solarday.calculators.usno import USNOCalculator
from solarday.models import CalendarDate, InvalidInputError
from solarday.zenith import GEOMETRIC_ZENITH, NAUTICAL_ZENITH

WINTER_SOLSTICE = CalendarDate(2017, 12, 21)


def _calendar(location, day=REFERENCE_DATE, **kwargs) -> AstronomicalCalendar:
    return AstronomicalCalendar(date=day, location=location, **kwargs)


def _local(location, *fields) -> datetime:
    return location.tz.localize(datetime(*fields))


def _to_second(instant: datetime) -> datetime:
    return instant.replace(microsecond=0)


def _expected(times):
    return [
        (location, _local(location, 2017, 10, 17, *hms))
        for location, hms in zip(BASIC_LOCATIONS, times)
    ]


@pytest.mark.parametrize(
    "location, expected",
    _expected([(7, 9, 11), (6, 39, 32), (7, 0, 25), (5, 48, 20), (6, 54, 18)]),
    ids=BASIC_IDS,
)
def test_sunrise(location, expected):
    assert _to_second(_calendar(location).sunrise()) == expected


@pytest.mark.parametrize(
    "location, expected",
    _expected([(18, 14, 38), (18, 8, 46), (18, 19, 5), (17, 4, 46), (19, 31, 7)]),
    ids=BASIC_IDS,
)
def test_sunset(location, expected):
    assert _to_second(_calendar(location).sunset()) == expected


@pytest.mark.parametrize(
    "location, expected",
    _expected([(7, 9, 51), (6, 43, 43), (7, 1, 45), (5, 49, 21), (7, 0, 5)]),
    ids=BASIC_IDS,
)
def test_sea_level_sunrise(location, expected):
    assert _to_second(_calendar(location).sea_level_sunrise()) == expected


@pytest.mark.parametrize(
    "location, expected",
    _expected([(18, 13, 58), (18, 4, 36), (18, 17, 45), (17, 3, 45), (19, 25, 19)]),
    ids=BASIC_IDS,
)
def test_sea_level_sunset(location, expected):
    assert _to_second(_calendar(location).sea_level_sunset()) == expected


@pytest.mark.parametrize(
    "location, expected",
    zip(BASIC_LOCATIONS, [11.15327065, 3.65893934, 14.00708152, 20.8057012, 16.90510688]),
    ids=BASIC_IDS,
)
def test_utc_sunrise(location, expected):
    assert _calendar(location).utc_sunrise(GEOMETRIC_ZENITH) == pytest.approx(expected, abs=1e-6)


@pytest.mark.parametrize(
    "location, expected",
    zip(BASIC_LOCATIONS, [22.24410903, 15.14635336, 1.31819979, 8.07962871, 5.51873532]),
    ids=BASIC_IDS,
)
def test_utc_sunset(location, expected):
    assert _calendar(location).utc_sunset(GEOMETRIC_ZENITH) == pytest.approx(expected, abs=1e-6)


@pytest.mark.parametrize(
    "location, expected",
    zip(BASIC_LOCATIONS, [11.16434723, 3.72862262, 14.02926518, 20.82268461, 17.00158411]),
    ids=BASIC_IDS,
)
def test_utc_sea_level_sunrise(location, expected):
    assert _calendar(location).utc_sea_level_sunrise(GEOMETRIC_ZENITH) == pytest.approx(
        expected, abs=1e-6
    )


@pytest.mark.parametrize(
    "location, expected",
    zip(BASIC_LOCATIONS, [22.23304301, 15.07671429, 1.29603174, 8.06265871, 5.42214918]),
    ids=BASIC_IDS,
)
def test_utc_sea_level_sunset(location, expected):
    assert _calendar(location).utc_sea_level_sunset(GEOMETRIC_ZENITH) == pytest.approx(
        expected, abs=1e-6
    )


@pytest.mark.parametrize(
    "location, expected",
    _expected([(6, 10, 57), (5, 50, 43), (6, 7, 22), (4, 53, 55), (6, 13, 13)]),
    ids=BASIC_IDS,
)
def test_sunrise_offset_by_degrees(location, expected):
    assert _to_second(_calendar(location).sunrise_offset_by_degrees(NAUTICAL_ZENITH)) == expected


@pytest.mark.parametrize(
    "location, expected",
    _expected([(19, 12, 49), (18, 57, 33), (19, 12, 5), (17, 59, 8), (20, 12, 15)]),
    ids=BASIC_IDS,
)
def test_sunset_offset_by_degrees(location, expected):
    assert _to_second(_calendar(location).sunset_offset_by_degrees(NAUTICAL_ZENITH)) == expected


@pytest.mark.parametrize(
    "location, hours",
    zip(BASIC_LOCATIONS, [0.92239132, 0.94567431, 0.93889721, 0.936664, 1.03504709]),
    ids=BASIC_IDS,
)
def test_temporal_hour(location, hours):
    hour = _calendar(location).temporal_hour()
    assert hour.total_seconds() / 3600 == pytest.approx(hours, abs=2e-6)


@pytest.mark.parametrize(
    "location, expected",
    _expected([(12, 41, 55), (12, 24, 9), (12, 39, 45), (11, 26, 33), (13, 12, 42)]),
    ids=BASIC_IDS,
)
def test_sun_transit(location, expected):
    assert _to_second(_calendar(location).sun_transit()) == expected


def test_daneborg_dawn_falls_on_previous_local_day():
    cal = _calendar(DANEBORG, CalendarDate(2017, 4, 20))
    assert _to_second(cal.sunrise_offset_by_degrees(94)) == _local(
        DANEBORG, 2017, 4, 19, 23, 54, 23
    )


def test_hooper_bay_dusk_falls_on_next_local_day():
    cal = _calendar(HOOPER_BAY, CalendarDate(2017, 6, 21))
    assert _to_second(cal.sunset_offset_by_degrees(94)) == _local(
        HOOPER_BAY, 2017, 6, 22, 2, 0, 16
    )


@pytest.mark.parametrize("location", BASIC_LOCATIONS, ids=BASIC_IDS)
def test_events_land_on_bound_date(location):
    cal = _calendar(location)
    for instant in (cal.sunrise(), cal.sunset(), cal.sea_level_sunrise(), cal.sea_level_sunset()):
        assert instant.date() == date(2017, 10, 17)
        assert instant.tzinfo.zone == location.time_zone


@pytest.mark.parametrize("location", BASIC_LOCATIONS, ids=BASIC_IDS)
def test_events_in_daily_order(location):
    cal = _calendar(location)
    events = [
        cal.begin_astronomical_twilight(),
        cal.begin_nautical_twilight(),
        cal.begin_civil_twilight(),
        cal.sunrise(),
        cal.sea_level_sunrise(),
        cal.sun_transit(),
        cal.sea_level_sunset(),
        cal.sunset(),
        cal.end_civil_twilight(),
        cal.end_nautical_twilight(),
        cal.end_astronomical_twilight(),
    ]
    assert events == sorted(events)
    assert len(set(events)) == len(events)


@pytest.mark.parametrize("location", BASIC_LOCATIONS, ids=BASIC_IDS)
def test_twilight_matches_offset_queries(location):
    cal = _calendar(location)
    assert cal.begin_nautical_twilight() == cal.sunrise_offset_by_degrees(102)
    assert cal.end_civil_twilight() == cal.sunset_offset_by_degrees(96)
    assert cal.end_astronomical_twilight() == cal.sunset_offset_by_degrees(108)


@pytest.mark.parametrize("location", BASIC_LOCATIONS, ids=BASIC_IDS)
def test_fractional_utc_hour_round_trip(location):
    cal = _calendar(location)
    assert fractional_utc_hour(cal.sunrise()) == pytest.approx(
        cal.utc_sunrise(GEOMETRIC_ZENITH), abs=1e-6
    )
    assert fractional_utc_hour(cal.sunset()) == pytest.approx(
        cal.utc_sunset(GEOMETRIC_ZENITH), abs=1e-6
    )


def test_fractional_utc_hour():
    assert fractional_utc_hour(datetime(2017, 10, 17, 18, 45, tzinfo=utc)) == 18.75
    new_york = _local(LAKEWOOD, 2017, 10, 17, 14, 45)
    assert fractional_utc_hour(new_york) == 18.75


def test_time_offset():
    start = datetime(2017, 10, 17, 6, 0, tzinfo=utc)
    assert time_offset(start, timedelta(minutes=-72)) == datetime(2017, 10, 17, 4, 48, tzinfo=utc)


def test_elevation_mode():
    cal = _calendar(LAKEWOOD)
    sea_level = cal.with_elevation_mode(False)
    assert cal.use_elevation
    assert not sea_level.use_elevation
    assert sea_level.sunrise() == cal.sea_level_sunrise()
    assert sea_level.sunset() == cal.sea_level_sunset()
    assert sea_level.with_elevation_mode(True) == cal


@pytest.mark.parametrize("elevation", [0, 15, 500, 3000])
def test_higher_elevation_widens_the_day(elevation):
    low = _calendar(LAKEWOOD.with_elevation(elevation))
    high = _calendar(LAKEWOOD.with_elevation(elevation + 100))
    assert high.sunrise() < low.sunrise()
    assert high.sunset() > low.sunset()


def test_sea_level_events_ignore_elevation():
    low = _calendar(LAKEWOOD.with_elevation(0))
    high = _calendar(LAKEWOOD.with_elevation(2000))
    assert low.sea_level_sunrise() == high.sea_level_sunrise()
    assert low.sunrise() == low.sea_level_sunrise()


def test_custom_day_bounds():
    cal = _calendar(LAKEWOOD)
    start = cal.begin_civil_twilight()
    end = cal.end_civil_twilight()
    assert cal.temporal_hour(start, end) == (end - start) / 12
    assert cal.sun_transit(start, end) == start + (end - start) / 12 * 6
    assert cal.temporal_hour(start, end) > cal.temporal_hour()


def test_adjusted_date():
    assert _calendar(SAMOA).adjusted_date() == CalendarDate(2017, 10, 16)
    assert _calendar(LAKEWOOD).adjusted_date() == REFERENCE_DATE


def test_date_time_from_time_of_day_moves_far_east_sunrise_back():
    cal = _calendar(TOKYO)
    assert _to_second(cal.date_time_from_time_of_day(20.5, True)) == _local(
        TOKYO, 2017, 10, 17, 5, 30
    )


def test_date_time_from_time_of_day_moves_far_west_sunset_forward():
    cal = _calendar(LOS_ANGELES)
    assert _to_second(cal.date_time_from_time_of_day(1.5, False)) == _local(
        LOS_ANGELES, 2017, 10, 17, 18, 30
    )


def test_date_time_from_time_of_day_without_wraparound():
    cal = _calendar(LAKEWOOD)
    assert cal.date_time_from_time_of_day(12.25, True) == _local(LAKEWOOD, 2017, 10, 17, 8, 15)


def test_calendar_uses_its_calculator():
    noaa = _calendar(LAKEWOOD)
    usno = _calendar(LAKEWOOD, calculator=USNOCalculator())
    assert isinstance(noaa.calculator, NOAACalculator)
    assert usno.sunrise() != noaa.sunrise()
    assert abs(usno.sunrise() - noaa.sunrise()) < timedelta(minutes=5)


@pytest.mark.parametrize("location", [DANEBORG, FORT_CONGER], ids=["daneborg", "fort_conger"])
def test_polar_night(location):
    cal = _calendar(location, WINTER_SOLSTICE)
    assert cal.sunrise() is None
    assert cal.sunset() is None
    assert cal.sea_level_sunrise() is None
    assert cal.begin_civil_twilight() is None
    assert cal.utc_sunrise(GEOMETRIC_ZENITH) is None
    assert cal.temporal_hour() is None
    assert cal.sun_transit() is None


def test_polar_night_logs_missing_event(caplog):
    with caplog.at_level(logging.DEBUG, logger="solarday.astronomical_calendar"):
        _calendar(FORT_CONGER, WINTER_SOLSTICE).sunrise()
    assert "No sunrise at Fort Conger, NU Canada" in caplog.text


def test_dip_before_sunrise():
    dip = _calendar(LAKEWOOD).solar_dip_from_minute_offset(4, True)
    assert 1.3 < dip < 1.9


def test_dip_after_sunset():
    dip = _calendar(LAKEWOOD).solar_dip_from_minute_offset(4, False)
    assert 1.3 < dip < 1.9


def test_dip_after_sunrise_is_above_horizon():
    dip = _calendar(LAKEWOOD).solar_dip_from_minute_offset(-8, True)
    assert -1.0 < dip < 0


def test_dip_for_zero_minutes():
    assert _calendar(LAKEWOOD).solar_dip_from_minute_offset(0, True) == 0.0


def test_dip_search_cap(caplog):
    with caplog.at_level(logging.WARNING, logger="solarday.astronomical_calendar"):
        dip = _calendar(LAKEWOOD).solar_dip_from_minute_offset(72, True, max_iterations=10)
    assert dip is None
    assert "stopped after 10 steps" in caplog.text


def test_dip_without_event():
    assert _calendar(FORT_CONGER, WINTER_SOLSTICE).solar_dip_from_minute_offset(8, True) is None


def test_antimeridian_shift_before_year_one():
    with pytest.raises(InvalidInputError):
        _calendar(SAMOA, CalendarDate(1, 1, 1)).sunrise()


def test_wraparound_before_year_one():
    cal = _calendar(TOKYO, CalendarDate(1, 1, 1))
    with pytest.raises(InvalidInputError, match="outside years 1 to 9999"):
        cal.date_time_from_time_of_day(20.5, True)


def test_wraparound_after_year_9999():
    cal = _calendar(LOS_ANGELES, CalendarDate(9999, 12, 31))
    with pytest.raises(InvalidInputError, match="outside years 1 to 9999"):
        cal.date_time_from_time_of_day(1.5, False)
