"""Caller-side post-processing of a computed day: clock strings, iqama, next prayer."""

import math
from dataclasses import dataclass, replace
from typing import Mapping

from errors import InvalidIqamaOffset
from models import Prayer, PrayerTimes

MINUTES_PER_DAY = 24 * 60

LABELS = {
    "en": ("Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha"),
    "tr": ("İmsak", "Güneş", "Öğle", "İkindi", "Akşam", "Yatsı"),
}


def labels(lang: str = "en") -> tuple[str, ...]:
    """Display names in canonical order; unknown languages fall back to English."""
    return LABELS.get(lang.lower(), LABELS["en"])


def format_clock(minutes: float | None) -> str | None:
    """Convert minutes since local midnight to 'HH:MM' 24h format."""
    if minutes is None or not math.isfinite(minutes):
        return None
    total = int(math.floor(minutes + 0.5)) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def parse_clock(value: str) -> int:
    """'HH:MM' -> minutes since midnight."""
    try:
        hh, mm = value.split(":")
        hour, minute = int(hh), int(mm)
    except ValueError:
        raise ValueError(f"time must be HH:MM, got {value!r}") from None
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"time must be HH:MM, got {value!r}")
    return hour * 60 + minute


def parse_iqama(spec: str) -> dict[Prayer, float]:
    """Parse 'fajr:20,isha:10' into per-prayer offsets."""
    offsets: dict[Prayer, float] = {}
    for part in filter(None, (p.strip() for p in spec.split(","))):
        name, sep, value = part.partition(":")
        if not sep:
            raise InvalidIqamaOffset(f"Expected prayer:minutes, got {part!r}")
        try:
            minutes = float(value)
        except ValueError:
            raise InvalidIqamaOffset(f"Offset for {name!r} is not a number: {value!r}") from None
        offsets[_prayer(name)] = minutes
    return offsets


def _prayer(name: Prayer | str) -> Prayer:
    try:
        return Prayer(name.strip().lower() if isinstance(name, str) else name)
    except ValueError:
        raise InvalidIqamaOffset(f"Unknown prayer: {name!r}") from None


def apply_iqama(times: PrayerTimes, offsets: Mapping[Prayer | str, float]) -> PrayerTimes:
    """New PrayerTimes with per-prayer minute offsets added. None stays None."""
    shifted = {}
    for name, minutes in offsets.items():
        prayer = _prayer(name)
        if not isinstance(minutes, (int, float)) or not math.isfinite(minutes):
            raise InvalidIqamaOffset(f"Offset for {prayer.value} must be a finite number")
        base = times[prayer]
        shifted[prayer.value] = None if base is None else base + minutes
    return replace(times, **shifted)


@dataclass(frozen=True)
class NextPrayer:
    prayer: Prayer
    minutes: float  # since today's local midnight, may exceed a day
    day_offset: int  # floor(minutes / 1440): 0 today, 1 tomorrow


def next_prayer(
    today: PrayerTimes,
    now_minutes: float,
    tomorrow: PrayerTimes | None = None,
    yesterday: PrayerTimes | None = None,
) -> NextPrayer | None:
    """The first solved marker strictly after now, across day boundaries.

    All candidates sit on one timeline anchored at today's local midnight:
    tomorrow's entries shift by +1440 and yesterday's by -1440, so an Isha
    that fell after yesterday's midnight is still found early in the morning.
    Without tomorrow's times, today's stand in for them. Returns None when
    nothing is solvable.
    """
    following = tomorrow if tomorrow is not None else today
    candidates = [(m, p) for p, m in today.items() if m is not None]
    candidates += [(m + MINUTES_PER_DAY, p) for p, m in following.items() if m is not None]
    if yesterday is not None:
        candidates += [(m - MINUTES_PER_DAY, p) for p, m in yesterday.items() if m is not None]

    upcoming = [(m, p) for m, p in candidates if m > now_minutes]
    if not upcoming:
        return None
    minutes, prayer = min(upcoming)
    return NextPrayer(prayer, minutes, math.floor(minutes / MINUTES_PER_DAY))
