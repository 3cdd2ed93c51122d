"""Geodetic location model: time offsets and ellipsoidal geodesics for a validated point."""

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, tzinfo

from pytz import UnknownTimeZoneError, timezone, utc
from timezonefinder import TimezoneFinder

from solarday.models import InvalidInputError
from solarday.units import dms_to_degrees

logger = logging.getLogger(__name__)

_tf = TimezoneFinder()

# WGS-84 ellipsoid
WGS84_SEMI_MAJOR_AXIS = 6378137.0  # meters
WGS84_SEMI_MINOR_AXIS = 6356752.3142  # meters
WGS84_FLATTENING = 1 / 298.257223563

VINCENTY_MAX_ITERATIONS = 20
VINCENTY_TOLERANCE = 1e-12

MINUTES_PER_DEGREE_OF_LONGITUDE = 4
ANTIMERIDIAN_THRESHOLD_HOURS = 20


@dataclass(frozen=True)
class GeodesicResult:
    """Solution of the inverse geodesic problem between two points."""

    distance: float  # meters along the ellipsoid
    initial_bearing: float  # degrees clockwise from north at the start, [0, 360)
    final_bearing: float  # degrees clockwise from north at the end, [0, 360)


def latitude_from_dms(
    degrees: float, minutes: float, seconds: float, direction: str
) -> float:
    """Convert a degrees/minutes/seconds latitude with hemisphere to decimal degrees.

    Args:
        degrees: Whole degrees, 0 to 90.
        minutes: Arc-minutes, non-negative.
        seconds: Arc-seconds, non-negative.
        direction: "N" or "S".

    Raises:
        InvalidInputError: On negative components, magnitude over 90, or a
            hemisphere letter other than N/S.
    """
    _check_dms_components(degrees, minutes, seconds)
    value = dms_to_degrees(degrees, minutes, seconds)
    if value > 90:
        raise InvalidInputError(
            "Latitude must be between 0 and 90. Use direction of S instead of negative."
        )
    if direction == "S":
        return -value
    if direction != "N":
        raise InvalidInputError(f"Latitude direction must be N or S, got {direction!r}")
    return value


def longitude_from_dms(
    degrees: float, minutes: float, seconds: float, direction: str
) -> float:
    """Convert a degrees/minutes/seconds longitude with hemisphere to decimal degrees.

    Args:
        degrees: Whole degrees, 0 to 180.
        minutes: Arc-minutes, non-negative.
        seconds: Arc-seconds, non-negative.
        direction: "E" or "W".

    Raises:
        InvalidInputError: On negative components, magnitude over 180, or a
            hemisphere letter other than E/W.
    """
    _check_dms_components(degrees, minutes, seconds)
    value = dms_to_degrees(degrees, minutes, seconds)
    if value > 180:
        raise InvalidInputError(
            "Longitude must be between 0 and 180. Use a direction of W instead of negative."
        )
    if direction == "W":
        return -value
    if direction != "E":
        raise InvalidInputError(f"Longitude direction must be E or W, got {direction!r}")
    return value


def _check_dms_components(degrees: float, minutes: float, seconds: float) -> None:
    for label, value in (("degrees", degrees), ("minutes", minutes), ("seconds", seconds)):
        if value < 0:
            raise InvalidInputError(f"{label} {value} is negative.")


def resolve_time_zone(latitude: float, longitude: float) -> str:
    """Look up the IANA time zone id covering a coordinate.

    Raises:
        InvalidInputError: When no zone covers the point.
    """
    tz_str = _tf.timezone_at(lat=latitude, lng=longitude)
    if tz_str is None:
        raise InvalidInputError(
            f"Timezone not found: lat={latitude}, lng={longitude}"
        )
    return tz_str


@dataclass(frozen=True)
class GeoCoordinate:
    """A named point on the earth with its civil time zone. Validated on construction.

    Longitudes west of Greenwich and latitudes south of the equator are negative.
    """

    name: str  # Display name ("Lakewood, NJ")
    latitude: float  # Decimal degrees, -90 to 90
    longitude: float  # Decimal degrees, -180 to 180
    elevation: float = 0.0  # Meters above sea level
    time_zone: str = "GMT"  # IANA zone id

    def __post_init__(self) -> None:
        if not -90 <= self.latitude <= 90:
            raise InvalidInputError("Latitude must be between -90 and 90")
        if not -180 <= self.longitude <= 180:
            raise InvalidInputError("Longitude must be between -180 and 180")
        if math.isnan(self.elevation) or math.isinf(self.elevation):
            raise InvalidInputError("Elevation must not be NaN or infinite")
        if self.elevation < 0:
            raise InvalidInputError("Elevation cannot be negative")
        try:
            timezone(self.time_zone)
        except UnknownTimeZoneError as e:
            raise InvalidInputError(f"Unknown time zone: {self.time_zone}") from e

    @classmethod
    def gmt(cls) -> "GeoCoordinate":
        """The Royal Observatory at Greenwich on GMT."""
        return cls(name="Greenwich, England", latitude=51.4772, longitude=0.0)

    @classmethod
    def at(
        cls, name: str, latitude: float, longitude: float, elevation: float = 0.0
    ) -> "GeoCoordinate":
        """Build a location whose time zone is resolved from its coordinates.

        Raises:
            InvalidInputError: On invalid coordinates or when no time zone is found.
        """
        location = cls(name=name, latitude=latitude, longitude=longitude, elevation=elevation)
        return location.with_time_zone(resolve_time_zone(latitude, longitude))

    @classmethod
    def from_dms(
        cls,
        name: str,
        latitude: tuple[float, float, float, str],
        longitude: tuple[float, float, float, str],
        elevation: float = 0.0,
        time_zone: str = "GMT",
    ) -> "GeoCoordinate":
        """Build a location from (degrees, minutes, seconds, hemisphere) tuples."""
        return cls(
            name=name,
            latitude=latitude_from_dms(*latitude),
            longitude=longitude_from_dms(*longitude),
            elevation=elevation,
            time_zone=time_zone,
        )

    @property
    def tz(self) -> tzinfo:
        return timezone(self.time_zone)

    def with_elevation(self, elevation: float) -> "GeoCoordinate":
        return replace(self, elevation=elevation)

    def with_time_zone(self, time_zone: str) -> "GeoCoordinate":
        return replace(self, time_zone=time_zone)

    def _localize(self, as_of: datetime | None) -> datetime:
        if as_of is None:
            return datetime.now(self.tz)
        if as_of.tzinfo is None:
            as_of = utc.localize(as_of)
        try:
            return as_of.astimezone(self.tz)
        except OverflowError as e:
            raise InvalidInputError(
                f"{as_of.isoformat()} in {self.time_zone} falls outside years 1 to 9999"
            ) from e

    def standard_time_offset(self, as_of: datetime | None = None) -> timedelta:
        """Raw (non-daylight-saving) UTC offset of the zone.

        Args:
            as_of: Instant at which to read the zone rules. Naive values are
                taken as UTC. Defaults to the current system time, which can
                misjudge zones whose standard offset changed between now and
                the date being calculated.
        """
        local = self._localize(as_of)
        return local.utcoffset() - local.dst()

    def time_zone_offset_at(self, instant: datetime) -> float:
        """Full UTC offset in hours, daylight saving included, at an instant."""
        return self._localize(instant).utcoffset().total_seconds() / 3600

    def local_mean_time_offset(self, as_of: datetime | None = None) -> timedelta:
        """Offset of local mean time from standard time.

        Each degree of longitude is four minutes of time, so a point 1° west of
        its zone's center meridian sees solar noon four minutes late.
        """
        return timedelta(
            minutes=self.longitude * MINUTES_PER_DEGREE_OF_LONGITUDE
        ) - self.standard_time_offset(as_of)

    def antimeridian_adjustment(self, as_of: datetime | None = None) -> int:
        """Days to shift the calculation date for zones that cross the antimeridian.

        Calculations presume the date increases strictly east of the prime
        meridian. Apia, Samoa (longitude -171.75) keeps UTC+13/+14 civil time,
        so its dates are computed one day earlier and shifted back when the
        zone offset is applied.

        Returns:
            1, -1, or 0 days.
        """
        local_hours_offset = self.local_mean_time_offset(as_of).total_seconds() / 3600
        if local_hours_offset >= ANTIMERIDIAN_THRESHOLD_HOURS:
            return 1
        if local_hours_offset <= -ANTIMERIDIAN_THRESHOLD_HOURS:
            return -1
        return 0

    def geodesic(self, other: "GeoCoordinate") -> GeodesicResult | None:
        """Vincenty's inverse formula on the WGS-84 ellipsoid.

        T. Vincenty, "Direct and Inverse Solutions of Geodesics on the
        Ellipsoid with application of nested equations", Survey Review,
        vol XXII no 176, 1975.

        Returns:
            Distance and bearings, or None when the iteration fails to
            converge (nearly antipodal points).
        """
        a = WGS84_SEMI_MAJOR_AXIS
        b = WGS84_SEMI_MINOR_AXIS
        f = WGS84_FLATTENING
        big_l = math.radians(other.longitude - self.longitude)
        u1 = math.atan((1 - f) * math.tan(math.radians(self.latitude)))
        u2 = math.atan((1 - f) * math.tan(math.radians(other.latitude)))
        sin_u1, cos_u1 = math.sin(u1), math.cos(u1)
        sin_u2, cos_u2 = math.sin(u2), math.cos(u2)

        lam = big_l
        for _ in range(VINCENTY_MAX_ITERATIONS):
            sin_lam, cos_lam = math.sin(lam), math.cos(lam)
            sin_sigma = math.sqrt(
                (cos_u2 * sin_lam) ** 2
                + (cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam) ** 2
            )
            if sin_sigma == 0:
                return GeodesicResult(distance=0.0, initial_bearing=0.0, final_bearing=0.0)
            cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
            sigma = math.atan2(sin_sigma, cos_sigma)
            sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
            cos_sq_alpha = 1 - sin_alpha * sin_alpha
            if cos_sq_alpha == 0:
                cos_2sigma_m = 0.0  # equatorial line
            else:
                cos_2sigma_m = cos_sigma - 2 * sin_u1 * sin_u2 / cos_sq_alpha
            c = f / 16 * cos_sq_alpha * (4 + f * (4 - 3 * cos_sq_alpha))
            lam_prev = lam
            lam = big_l + (1 - c) * f * sin_alpha * (
                sigma
                + c * sin_sigma * (cos_2sigma_m + c * cos_sigma * (-1 + 2 * cos_2sigma_m**2))
            )
            if abs(lam - lam_prev) < VINCENTY_TOLERANCE:
                break
        else:
            logger.debug(
                "Vincenty failed to converge between %s and %s", self.name, other.name
            )
            return None

        u_sq = cos_sq_alpha * (a * a - b * b) / (b * b)
        big_a = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
        big_b = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))
        delta_sigma = big_b * sin_sigma * (
            cos_2sigma_m
            + big_b
            / 4
            * (
                cos_sigma * (-1 + 2 * cos_2sigma_m**2)
                - big_b / 6 * cos_2sigma_m * (-3 + 4 * sin_sigma**2) * (-3 + 4 * cos_2sigma_m**2)
            )
        )
        distance = b * big_a * (sigma - delta_sigma)

        fwd_az = math.degrees(
            math.atan2(cos_u2 * sin_lam, cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam)
        )
        rev_az = math.degrees(
            math.atan2(cos_u1 * sin_lam, -sin_u1 * cos_u2 + cos_u1 * sin_u2 * cos_lam)
        )
        return GeodesicResult(
            distance=distance,
            initial_bearing=fwd_az % 360,
            final_bearing=rev_az % 360,
        )

    def geodesic_distance(self, other: "GeoCoordinate") -> float | None:
        result = self.geodesic(other)
        return None if result is None else result.distance

    def geodesic_initial_bearing(self, other: "GeoCoordinate") -> float | None:
        result = self.geodesic(other)
        return None if result is None else result.initial_bearing

    def geodesic_final_bearing(self, other: "GeoCoordinate") -> float | None:
        result = self.geodesic(other)
        return None if result is None else result.final_bearing

    def rhumb_line_distance(self, other: "GeoCoordinate") -> float:
        """Distance in meters along the line of constant bearing to another point."""
        lat1 = math.radians(self.latitude)
        lat2 = math.radians(other.latitude)
        d_lat = lat2 - lat1
        d_lon = abs(math.radians(other.longitude) - math.radians(self.longitude))
        d_phi = math.log(
            math.tan(lat2 / 2 + math.pi / 4) / math.tan(lat1 / 2 + math.pi / 4)
        )
        # East-west courses have no latitude stretch to divide by
        q = d_lat / d_phi if abs(d_phi) > 1e-12 else math.cos(lat1)
        # Take the shorter rhumb across the 180° meridian
        if d_lon > math.pi:
            d_lon = 2 * math.pi - d_lon
        return math.sqrt(d_lat * d_lat + q * q * d_lon * d_lon) * WGS84_SEMI_MAJOR_AXIS

    def __str__(self) -> str:
        local = self._localize(None)
        return "\n".join(
            [
                f"Location Name:\t\t{self.name}",
                f"Latitude:\t\t{self.latitude}°",
                f"Longitude:\t\t{self.longitude}°",
                f"Elevation:\t\t{self.elevation} Meters",
                f"Timezone ID:\t\t{self.time_zone}",
                f"Timezone GMT Offset:\t{self.standard_time_offset().total_seconds() / 3600}",
                f"Timezone DST Offset:\t{local.dst().total_seconds() / 3600}",
            ]
        )
