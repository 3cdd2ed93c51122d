"""CLI entry point printing one day's solar events for a location.

Defaults can be set in the environment or a .env file:
    SOLARDAY_CALCULATOR=usno
    SOLARDAY_TIME_ZONE=America/New_York

    uv run solarday --lat 40.0721087 --lon -74.2400243 --elevation 15 --date 2017-10-17
"""

import argparse
import logging
import os
import sys
from datetime import date, datetime

from dotenv import load_dotenv

load_dotenv()

from solarday.astronomical_calendar import AstronomicalCalendar  # noqa: E402
from solarday.calculators.registry import CALCULATORS, get_calculator  # noqa: E402
from solarday.geo import GeoCoordinate  # noqa: E402
from solarday.models import CalendarDate, InvalidInputError  # noqa: E402

_EVENTS: tuple[tuple[str, str], ...] = (
    ("Astronomical dawn", "begin_astronomical_twilight"),
    ("Nautical dawn", "begin_nautical_twilight"),
    ("Civil dawn", "begin_civil_twilight"),
    ("Sea level sunrise", "sea_level_sunrise"),
    ("Sunrise", "sunrise"),
    ("Solar transit", "sun_transit"),
    ("Sunset", "sunset"),
    ("Sea level sunset", "sea_level_sunset"),
    ("Civil dusk", "end_civil_twilight"),
    ("Nautical dusk", "end_nautical_twilight"),
    ("Astronomical dusk", "end_astronomical_twilight"),
)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="solarday", description="Print sunrise, sunset and twilight times."
    )
    parser.add_argument("--lat", type=float, required=True, help="Latitude, north positive")
    parser.add_argument("--lon", type=float, required=True, help="Longitude, east positive")
    parser.add_argument("--elevation", type=float, default=0.0, help="Meters above sea level")
    parser.add_argument(
        "--tz",
        default=os.environ.get("SOLARDAY_TIME_ZONE"),
        help="IANA time zone; resolved from the coordinates when omitted",
    )
    parser.add_argument("--name", default="Observer", help="Location display name")
    parser.add_argument("--date", default=None, help="YYYY-MM-DD, default today")
    parser.add_argument(
        "--calculator",
        default=os.environ.get("SOLARDAY_CALCULATOR", "noaa"),
        help=f"One of: {', '.join(CALCULATORS)}",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug output")
    return parser.parse_args(argv)


def build_calendar(args: argparse.Namespace) -> AstronomicalCalendar:
    """Turn parsed arguments into a bound calendar.

    Raises:
        InvalidInputError: On bad coordinates, date, zone or calculator name.
    """
    if args.tz:
        location = GeoCoordinate(
            name=args.name,
            latitude=args.lat,
            longitude=args.lon,
            elevation=args.elevation,
            time_zone=args.tz,
        )
    else:
        location = GeoCoordinate.at(args.name, args.lat, args.lon, args.elevation)

    if args.date is None:
        day = date.today()
    else:
        try:
            day = datetime.strptime(args.date, "%Y-%m-%d").date()
        except ValueError as e:
            raise InvalidInputError(f"Invalid date {args.date!r}: {e}") from e

    return AstronomicalCalendar(
        date=CalendarDate.from_datetime(day),
        location=location,
        calculator=get_calculator(args.calculator),
    )


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        cal = build_calendar(args)
    except InvalidInputError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    print(cal.location)
    print(f"Date:\t\t\t{cal.date.to_date().isoformat()}")
    print(f"Calculator:\t\t{cal.calculator.name}")
    print()
    for label, method in _EVENTS:
        instant = getattr(cal, method)()
        value = "no event" if instant is None else instant.strftime("%Y-%m-%d %H:%M:%S %Z")
        print(f"{label + ':':<20}{value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
