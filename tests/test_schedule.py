"""Caller-side helpers: clock formatting, iqama offsets, next prayer."""

import math

import pytest

from errors import InvalidIqamaOffset
from models import Prayer, PrayerTimes
from schedule import (
    NextPrayer,
    apply_iqama,
    format_clock,
    labels,
    next_prayer,
    parse_clock,
    parse_iqama,
)

TODAY = PrayerTimes(fajr=250.2, sunrise=338.0, dhuhr=740.8, asr=940.3, maghrib=1143.7, isha=1233.7)
TOMORROW = PrayerTimes(fajr=250.5, sunrise=338.2, dhuhr=740.9, asr=940.3, maghrib=1143.9, isha=1233.9)


@pytest.mark.parametrize(
    "minutes, expected",
    [
        (250.2, "04:10"),
        (250.5, "04:11"),
        (0.0, "00:00"),
        (719.6, "12:00"),
        (1439.6, "00:00"),
        (1500.0, "01:00"),
        (-30.0, "23:30"),
    ],
)
def test_format_clock(minutes, expected):
    assert format_clock(minutes) == expected


def test_format_clock_passes_no_solution_through():
    assert format_clock(None) is None
    assert format_clock(math.nan) is None


def test_parse_clock():
    assert parse_clock("00:00") == 0
    assert parse_clock("13:05") == 785
    for bad in ("24:00", "12:60", "noon", "12"):
        with pytest.raises(ValueError):
            parse_clock(bad)


def test_parse_iqama():
    assert parse_iqama("fajr:20, Isha:10") == {Prayer.FAJR: 20.0, Prayer.ISHA: 10.0}
    assert parse_iqama("") == {}


@pytest.mark.parametrize("spec", ["fajr", "dawn:10", "asr:soon"])
def test_parse_iqama_rejects_garbage(spec):
    with pytest.raises(InvalidIqamaOffset):
        parse_iqama(spec)


def test_apply_iqama_returns_new_times():
    shifted = apply_iqama(TODAY, {Prayer.FAJR: 20, "dhuhr": 15})
    assert shifted.fajr == TODAY.fajr + 20
    assert shifted.dhuhr == TODAY.dhuhr + 15
    assert shifted.asr == TODAY.asr
    assert TODAY.fajr == 250.2


def test_apply_iqama_keeps_unsolved_entries():
    polar = PrayerTimes(fajr=None, sunrise=None, dhuhr=700.0, asr=800.0, maghrib=None, isha=None)
    shifted = apply_iqama(polar, {"maghrib": 5, "dhuhr": 10})
    assert shifted.maghrib is None
    assert shifted.dhuhr == 710.0


def test_apply_iqama_rejects_bad_offsets():
    with pytest.raises(InvalidIqamaOffset):
        apply_iqama(TODAY, {"witr": 5})
    with pytest.raises(InvalidIqamaOffset):
        apply_iqama(TODAY, {"fajr": math.inf})


def test_next_prayer_same_day():
    assert next_prayer(TODAY, 800) == NextPrayer(Prayer.ASR, 940.3, 0)
    assert next_prayer(TODAY, 0) == NextPrayer(Prayer.FAJR, 250.2, 0)


def test_next_prayer_is_strictly_after_now():
    assert next_prayer(TODAY, 740.8).prayer is Prayer.ASR


def test_next_prayer_wraps_to_tomorrow_fajr():
    assert next_prayer(TODAY, 1300, TOMORROW) == NextPrayer(Prayer.FAJR, 250.5 + 1440, 1)
    assert next_prayer(TODAY, 1300) == NextPrayer(Prayer.FAJR, 250.2 + 1440, 1)


# Around 48N in June, Isha falls after local midnight
LATE_ISHA_TODAY = PrayerTimes(
    fajr=170.0, sunrise=335.0, dhuhr=858.0, asr=1120.0, maghrib=1381.0, isha=1517.0,
)
LATE_ISHA_TOMORROW = PrayerTimes(
    fajr=169.8, sunrise=335.1, dhuhr=858.2, asr=1120.2, maghrib=1381.3, isha=1517.4,
)


def test_isha_after_midnight_counts_for_the_next_morning():
    upcoming = next_prayer(LATE_ISHA_TOMORROW, 5, yesterday=LATE_ISHA_TODAY)
    assert upcoming == NextPrayer(Prayer.ISHA, 1517.0 - 1440, 0)
    assert format_clock(upcoming.minutes) == "01:17"


def test_late_evening_isha_is_dated_tomorrow():
    upcoming = next_prayer(LATE_ISHA_TODAY, 1430, LATE_ISHA_TOMORROW)
    assert upcoming == NextPrayer(Prayer.ISHA, 1517.0, 1)
    assert format_clock(upcoming.minutes) == "01:17"


def test_fajr_follows_the_late_isha():
    upcoming = next_prayer(LATE_ISHA_TOMORROW, 80, yesterday=LATE_ISHA_TODAY)
    assert upcoming == NextPrayer(Prayer.FAJR, 169.8, 0)


def test_next_prayer_skips_unsolved_markers():
    polar = PrayerTimes(fajr=None, sunrise=None, dhuhr=700.0, asr=800.0, maghrib=None, isha=None)
    assert next_prayer(polar, 750).prayer is Prayer.ASR
    assert next_prayer(polar, 900) == NextPrayer(Prayer.DHUHR, 700.0 + 1440, 1)


def test_next_prayer_none_when_nothing_solvable():
    empty = PrayerTimes(None, None, None, None, None, None)
    assert next_prayer(empty, 0) is None


def test_labels():
    assert labels("tr")[0] == "İmsak"
    assert labels("EN") == ("Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha")
    assert labels("xx") == labels("en")
