"""Value types shared by the calculation core and its callers. All immutable."""

import math
from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum
from typing import Iterator, Union

from errors import InvalidCoordinate, InvalidDate

# Real-world offsets run from UTC-12:00 to UTC+14:00.
MAX_UTC_OFFSET_MINUTES = 14 * 60


class Prayer(str, Enum):
    """The six daily markers, in canonical (chronological) order."""
    FAJR = "fajr"
    SUNRISE = "sunrise"
    DHUHR = "dhuhr"
    ASR = "asr"
    MAGHRIB = "maghrib"
    ISHA = "isha"


@dataclass(frozen=True)
class GeoCoordinate:
    """Observer position in decimal degrees. North and east are positive."""

    latitude: float
    longitude: float

    def __post_init__(self):
        # Stored as plain floats for the trig downstream
        object.__setattr__(
            self, "latitude", _checked_degrees("latitude", self.latitude, -90.0, 90.0),
        )
        object.__setattr__(
            self, "longitude", _checked_degrees("longitude", self.longitude, -180.0, 180.0),
        )


def _checked_degrees(field: str, value: float, low: float, high: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidCoordinate(field, value, low, high)
    if not low <= value <= high:
        raise InvalidCoordinate(field, value, low, high)
    return float(value)


@dataclass(frozen=True)
class CalculationDate:
    """A proleptic Gregorian calendar day plus the local UTC offset.

    utc_offset_minutes is positive east of Greenwich (+180 for UTC+3).
    """

    year: int
    month: int
    day: int
    utc_offset_minutes: float = 0.0

    def __post_init__(self):
        try:
            date(self.year, self.month, self.day)
        except (TypeError, ValueError) as e:
            raise InvalidDate(
                f"Invalid calendar date {self.year}-{self.month}-{self.day}: {e}"
            ) from e
        offset = self.utc_offset_minutes
        if not (
            isinstance(offset, (int, float))
            and abs(offset) <= MAX_UTC_OFFSET_MINUTES
        ):
            raise InvalidDate(
                f"timezone offset must be within ±{MAX_UTC_OFFSET_MINUTES} minutes, "
                f"got {offset!r}",
                field="timezoneOffset",
            )

    @classmethod
    def from_date(cls, d: date, utc_offset_minutes: float = 0.0) -> "CalculationDate":
        return cls(d.year, d.month, d.day, utc_offset_minutes)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def shifted(self, days: int) -> "CalculationDate":
        """Same offset, calendar day moved by the given number of days."""
        try:
            d = self.to_date() + timedelta(days=days)
        except OverflowError:
            raise InvalidDate(
                f"{self.to_date().isoformat()} {days:+d} days is outside the calendar"
            ) from None
        return replace(self, year=d.year, month=d.month, day=d.day)

    def next_day(self) -> "CalculationDate":
        return self.shifted(1)

    def previous_day(self) -> "CalculationDate":
        return self.shifted(-1)


@dataclass(frozen=True)
class SolarPosition:
    declination: float  # degrees, within about ±23.45
    equation_of_time: float  # minutes, apparent minus mean solar time


@dataclass(frozen=True)
class IshaAngle:
    """Isha when the sun is this many degrees below the horizon."""

    degrees: float


@dataclass(frozen=True)
class IshaOffset:
    """Isha a fixed number of minutes after Maghrib."""

    minutes: int


IshaRule = Union[IshaAngle, IshaOffset]


@dataclass(frozen=True)
class MethodParameters:
    """Everything the composer needs to know about a calculation method."""

    fajr_angle: float  # twilight depression, positive degrees
    isha: IshaRule
    asr_factor: float  # shadow length / object height: 1 Shafi'i, 2 Hanafi


@dataclass(frozen=True)
class PrayerTimes:
    """Local times of day, in minutes since local midnight.

    An entry is None when the sun never reaches the marker's altitude on that
    day (polar day or night). Values are not wrapped into a single day.
    """

    fajr: float | None
    sunrise: float | None
    dhuhr: float | None
    asr: float | None
    maghrib: float | None
    isha: float | None

    def __getitem__(self, prayer: Prayer | str) -> float | None:
        return getattr(self, Prayer(prayer).value)

    def items(self) -> Iterator[tuple[Prayer, float | None]]:
        for prayer in Prayer:
            yield prayer, getattr(self, prayer.value)

    def as_dict(self) -> dict[str, float | None]:
        return {prayer.value: minutes for prayer, minutes in self.items()}

    def unsolved(self) -> tuple[Prayer, ...]:
        """Markers with no solution for this day."""
        return tuple(p for p, minutes in self.items() if minutes is None)

    def is_complete(self) -> bool:
        return all(
            minutes is not None and math.isfinite(minutes)
            for _, minutes in self.items()
        )
