"""
Prayer times calculation using low-order solar coordinates and spherical trigonometry.

Pipeline: calendar day -> Julian date -> solar declination and equation of time
-> hour angles for each marker's sun altitude -> local clock minutes.
Everything here is a pure function; no state survives a call.
"""

import logging
import math

from methods import AsrJuristic, Method, parameters_for
from models import (
    CalculationDate,
    GeoCoordinate,
    IshaOffset,
    MethodParameters,
    PrayerTimes,
    SolarPosition,
)

logger = logging.getLogger(__name__)

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0

# Refraction (0.567) plus solar semi-diameter (0.266), below the horizon.
SUNRISE_SUNSET_ALTITUDE = -0.833
MINUTES_PER_DEGREE = 4.0  # 1440 min / 360 deg
SOLAR_NOON_MINUTES = 12 * 60.0


def _deg2rad(d: float) -> float:
    return d * math.pi / 180.0


def _rad2deg(r: float) -> float:
    return r * 180.0 / math.pi


def _normalize_angle_360(degrees: float) -> float:
    """Normalize angle to [0, 360)."""
    d = degrees % 360.0
    return d if d >= 0 else d + 360.0


def _normalize_angle_180(degrees: float) -> float:
    """Normalize angle to [-180, 180)."""
    return _normalize_angle_360(degrees + 180.0) - 180.0


# ─── JulianDateConverter ────────────────────────────────────────


def julian_date(year: int, month: int, day: int, hour_utc: float = 0.0) -> float:
    """Julian date at the given UTC hour of a proleptic Gregorian day.

    hour_utc may fall outside [0, 24); the result stays continuous.
    """
    if month <= 2:
        year -= 1
        month += 12
    A = math.floor(year / 100)
    B = 2 - A + math.floor(A / 4)
    jd = math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day + B - 1524.5
    return jd + hour_utc / 24.0


def julian_date_for(date: CalculationDate) -> float:
    """Julian date of local midnight on the given day."""
    return julian_date(date.year, date.month, date.day, -date.utc_offset_minutes / 60.0)


# ─── SolarPositionCalculator ────────────────────────────────────


def solar_position(jd: float) -> SolarPosition:
    """Declination (degrees) and equation of time (minutes) at a Julian date.

    Truncated series for the solar orbit; good to roughly a minute of time
    for dates within a few centuries of J2000.
    """
    T = (jd - J2000) / DAYS_PER_CENTURY

    L0 = _normalize_angle_360(280.46646 + T * (36000.76983 + T * 0.0003032))
    M = _normalize_angle_360(357.52911 + T * (35999.05029 - T * 0.0001537))
    M_r = _deg2rad(M)

    # Equation of center
    C = (
        math.sin(M_r) * (1.914602 - T * (0.004817 + T * 0.000014))
        + math.sin(2 * M_r) * (0.019993 - T * 0.000101)
        + math.sin(3 * M_r) * 0.000289
    )

    # Apparent longitude: nutation and aberration from the lunar node
    omega = _deg2rad(125.04 - 1934.136 * T)
    lam = _deg2rad(L0 + C - 0.00569 - 0.00478 * math.sin(omega))

    eps0 = 23.0 + (26.0 + (21.448 - T * (46.815 + T * (0.00059 - T * 0.001813))) / 60.0) / 60.0
    eps = _deg2rad(eps0 + 0.00256 * math.cos(omega))

    declination = _rad2deg(math.asin(math.sin(eps) * math.sin(lam)))

    # Right ascension lands in the same quadrant as the apparent longitude
    ra = _rad2deg(math.atan2(math.cos(eps) * math.sin(lam), math.cos(lam)))
    eqt_degrees = _normalize_angle_180(L0 - 0.0057183 - ra)

    return SolarPosition(
        declination=declination,
        equation_of_time=eqt_degrees * MINUTES_PER_DEGREE,
    )


# ─── HourAngleSolver ────────────────────────────────────────────


def hour_angle_for_altitude(
    lat_deg: float,
    decl_deg: float,
    altitude_deg: float,
) -> float | None:
    """
    Hour angle (degrees) when the sun stands at the given altitude.
    Negative altitude = below horizon (e.g. -18 for Fajr, -0.833 for sunrise).
    Returns None if the sun never reaches that altitude (polar day/night).
    """
    lat_r = _deg2rad(lat_deg)
    decl_r = _deg2rad(decl_deg)
    denominator = math.cos(lat_r) * math.cos(decl_r)
    if denominator == 0.0:
        return None
    # sin(alt) = sin(lat)*sin(decl) + cos(lat)*cos(decl)*cos(H)
    cos_h = (math.sin(_deg2rad(altitude_deg)) - math.sin(lat_r) * math.sin(decl_r)) / denominator
    if cos_h < -1 or cos_h > 1:
        return None
    return _rad2deg(math.acos(cos_h))


def asr_altitude(lat_deg: float, decl_deg: float, shadow_factor: float) -> float | None:
    """Sun altitude (degrees) at which shadow = factor x height + noon shadow.

    None when the sun stays below the horizon at noon.
    """
    zenith_at_noon = abs(lat_deg - decl_deg)
    if zenith_at_noon >= 90:
        return None
    return _rad2deg(math.atan(1.0 / (shadow_factor + math.tan(_deg2rad(zenith_at_noon)))))


def hour_angle_for_asr_shadow(
    lat_deg: float,
    decl_deg: float,
    shadow_factor: float,
) -> float | None:
    """Hour angle for Asr at the given shadow factor (1 Shafi'i, 2 Hanafi)."""
    altitude = asr_altitude(lat_deg, decl_deg, shadow_factor)
    if altitude is None:
        return None
    return hour_angle_for_altitude(lat_deg, decl_deg, altitude)


# ─── PrayerTimeComposer ─────────────────────────────────────────


def solar_noon(longitude: float, utc_offset_minutes: float, equation_of_time: float) -> float:
    """Local clock minutes of solar noon (Dhuhr)."""
    longitude_correction = longitude * MINUTES_PER_DEGREE
    return SOLAR_NOON_MINUTES - longitude_correction - equation_of_time + utc_offset_minutes


def _before(noon: float, hour_angle: float | None) -> float | None:
    if hour_angle is None:
        return None
    return noon - hour_angle * MINUTES_PER_DEGREE


def _after(noon: float, hour_angle: float | None) -> float | None:
    if hour_angle is None:
        return None
    return noon + hour_angle * MINUTES_PER_DEGREE


def compose(
    coordinate: GeoCoordinate,
    date: CalculationDate,
    params: MethodParameters,
) -> PrayerTimes:
    """Compose the six daily markers for one location and day.

    Markers the sun never reaches come back as None; the rest are still
    computed.
    """
    # One solar sample per day, taken at local noon
    sun = solar_position(julian_date_for(date) + 0.5)
    lat, decl = coordinate.latitude, sun.declination

    noon = solar_noon(coordinate.longitude, date.utc_offset_minutes, sun.equation_of_time)

    fajr = _before(noon, hour_angle_for_altitude(lat, decl, -params.fajr_angle))

    horizon = hour_angle_for_altitude(lat, decl, SUNRISE_SUNSET_ALTITUDE)
    sunrise = _before(noon, horizon)
    maghrib = _after(noon, horizon)

    asr = _after(noon, hour_angle_for_asr_shadow(lat, decl, params.asr_factor))

    if isinstance(params.isha, IshaOffset):
        isha = None if maghrib is None else maghrib + params.isha.minutes
    else:
        isha = _after(noon, hour_angle_for_altitude(lat, decl, -params.isha.degrees))

    times = PrayerTimes(
        fajr=fajr, sunrise=sunrise, dhuhr=noon, asr=asr, maghrib=maghrib, isha=isha,
    )
    unsolved = times.unsolved()
    if unsolved:
        logger.debug(
            "No solution for %s at lat=%s on %04d-%02d-%02d",
            ", ".join(p.value for p in unsolved), lat, date.year, date.month, date.day,
        )
    return times


def calculate_prayer_times(
    coordinate: GeoCoordinate,
    date: CalculationDate,
    method: Method | str = Method.MWL,
    asr: AsrJuristic | str | None = None,
) -> PrayerTimes:
    """
    Prayer times for one day.

    Raises:
        UnknownMethod: if method or asr is not registered.
    """
    return compose(coordinate, date, parameters_for(method, asr))
