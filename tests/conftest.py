"""Reference locations shared by the test modules."""

import pytest

from solarday.geo import GeoCoordinate
from solarday.models import CalendarDate

LAKEWOOD = GeoCoordinate("Lakewood, NJ", 40.0721087, -74.2400243, 15, "America/New_York")
JERUSALEM = GeoCoordinate("Jerusalem, Israel", 31.7781161, 35.233804, 740, "Asia/Jerusalem")
LOS_ANGELES = GeoCoordinate(
    "Los Angeles, CA", 34.0201613, -118.6919095, 71, "America/Los_Angeles"
)
TOKYO = GeoCoordinate("Tokyo, Japan", 35.6733227, 139.6403486, 40, "Asia/Tokyo")
SAMOA = GeoCoordinate("Apia, Samoa", -13.8599098, -171.8031745, 1858, "Pacific/Apia")
HOOPER_BAY = GeoCoordinate(
    "Hooper Bay, Alaska", 61.520182, -166.1740437, 8, "America/Anchorage"
)
DANEBORG = GeoCoordinate("Daneborg, Greenland", 74.2999996, -20.2420877, 0, "America/Godthab")
FORT_CONGER = GeoCoordinate(
    "Fort Conger, NU Canada", 81.7449398, -64.7945858, 127, "America/Toronto"
)

BASIC_LOCATIONS = (LAKEWOOD, JERUSALEM, LOS_ANGELES, TOKYO, SAMOA)
BASIC_IDS = ("lakewood", "jerusalem", "los_angeles", "tokyo", "samoa")

REFERENCE_DATE = CalendarDate(2017, 10, 17)

# Dates the calendar hands to its calculator for REFERENCE_DATE, per
# BASIC_LOCATIONS entry. Apia lies past the antimeridian and is computed a day early.
CALCULATION_DATES = (REFERENCE_DATE,) * 4 + (CalendarDate(2017, 10, 16),)


@pytest.fixture
def lakewood() -> GeoCoordinate:
    return LAKEWOOD


@pytest.fixture
def reference_date() -> CalendarDate:
    return REFERENCE_DATE
