"""Data model definitions: calendar input values and the validation error."""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta


class InvalidInputError(ValueError):
    """Out-of-range coordinate, date component or unknown identifier."""


@dataclass(frozen=True)
class CalendarDate:
    """Gregorian date plus time of day. Validated on construction."""

    year: int  # 1 and up
    month: int  # 1-12
    day: int  # 1 to the length of the month
    hour: int = 0  # 0-23
    minute: int = 0  # 0-59
    second: int = 0  # 0-59
    nanosecond: int = 0  # 0-999_999_999

    def __post_init__(self) -> None:
        if self.year < 1 or self.year > 9999:
            raise InvalidInputError(f"year {self.year} is out of range")
        if not 1 <= self.month <= 12:
            raise InvalidInputError(f"month {self.month} must be between 1 and 12")
        days_in_month = calendar.monthrange(self.year, self.month)[1]
        if not 1 <= self.day <= days_in_month:
            raise InvalidInputError(
                f"day {self.day} must be between 1 and {days_in_month} "
                f"for {self.year}-{self.month:02d}"
            )
        if not 0 <= self.hour <= 23:
            raise InvalidInputError(f"hour {self.hour} must be between 0 and 23")
        if not 0 <= self.minute <= 59:
            raise InvalidInputError(f"minute {self.minute} must be between 0 and 59")
        if not 0 <= self.second <= 59:
            raise InvalidInputError(f"second {self.second} must be between 0 and 59")
        if not 0 <= self.nanosecond <= 999_999_999:
            raise InvalidInputError(
                f"nanosecond {self.nanosecond} must be between 0 and 999999999"
            )

    @classmethod
    def from_datetime(cls, value: datetime | date) -> "CalendarDate":
        """Build from a date or a (naive or aware) datetime's wall-clock fields."""
        if isinstance(value, datetime):
            return cls(
                year=value.year,
                month=value.month,
                day=value.day,
                hour=value.hour,
                minute=value.minute,
                second=value.second,
                nanosecond=value.microsecond * 1000,
            )
        return cls(year=value.year, month=value.month, day=value.day)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def to_datetime(self) -> datetime:
        """Naive datetime; sub-microsecond precision is truncated."""
        return datetime(
            self.year,
            self.month,
            self.day,
            self.hour,
            self.minute,
            self.second,
            self.nanosecond // 1000,
        )

    def plus_days(self, days: int) -> "CalendarDate":
        """Return a new value shifted by whole days, time of day unchanged.

        Raises:
            InvalidInputError: When the shift leaves years 1 to 9999.
        """
        if days == 0:
            return self
        try:
            shifted = self.to_date() + timedelta(days=days)
        except OverflowError as e:
            raise InvalidInputError(
                f"{self.to_date().isoformat()} shifted by {days} days is out of range"
            ) from e
        return CalendarDate(
            year=shifted.year,
            month=shifted.month,
            day=shifted.day,
            hour=self.hour,
            minute=self.minute,
            second=self.second,
            nanosecond=self.nanosecond,
        )

    @property
    def day_of_year(self) -> int:
        return self.to_date().timetuple().tm_yday
