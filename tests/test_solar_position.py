"""Solar declination and equation of time against well-known seasonal values."""

import pytest

from prayer_times import julian_date, solar_position


def _at_noon(year, month, day):
    return solar_position(julian_date(year, month, day, 12.0))


def test_june_solstice_declination():
    assert _at_noon(2024, 6, 20).declination == pytest.approx(23.44, abs=0.05)


def test_december_solstice_declination():
    assert _at_noon(2024, 12, 21).declination == pytest.approx(-23.44, abs=0.05)


def test_equinox_declination_near_zero():
    assert abs(_at_noon(2024, 3, 20).declination) < 0.3
    assert abs(_at_noon(2024, 9, 22).declination) < 0.3


def test_equation_of_time_november_maximum():
    assert 15.5 < _at_noon(2024, 11, 3).equation_of_time < 17.0


def test_equation_of_time_february_minimum():
    assert -15.0 < _at_noon(2024, 2, 11).equation_of_time < -13.5


def test_equation_of_time_crosses_zero_mid_april():
    assert abs(_at_noon(2024, 4, 15).equation_of_time) < 1.0


def test_declination_stays_within_obliquity():
    jd = julian_date(2024, 1, 1)
    for day in range(366):
        sun = solar_position(jd + day)
        assert -23.5 < sun.declination < 23.5
        assert -17.0 < sun.equation_of_time < 17.0


def test_same_julian_date_same_result():
    jd = julian_date(2031, 8, 9, 7.5)
    assert solar_position(jd) == solar_position(jd)
