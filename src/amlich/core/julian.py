# src/amlich/core/julian.py
from __future__ import annotations

import math
from datetime import date

from .config import DEFAULT_CONFIG, EngineConfig
from .errors import InvalidGregorianDateError, OutOfRangeError

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise InvalidGregorianDateError(f"month must be in 1..12 (got {month})", field="month", value=month)
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def require_year(year: int, *, config: EngineConfig = DEFAULT_CONFIG, name: str = "year") -> int:
    if not config.min_year <= year <= config.max_year:
        raise OutOfRangeError(
            f"{name} must be in {config.min_year}..{config.max_year} (got {year})",
            field=name,
            value=year,
        )
    return year


def require_timezone(timezone: float, *, config: EngineConfig = DEFAULT_CONFIG) -> float:
    """
    Validate a fixed UTC offset in hours. No DST: one offset per computation.
    """
    tz = float(timezone)
    if not math.isfinite(tz) or not config.min_timezone <= tz <= config.max_timezone:
        raise OutOfRangeError(
            f"timezone must be in {config.min_timezone:+g}..{config.max_timezone:+g} hours (got {timezone})",
            field="timezone",
            value=timezone,
        )
    return tz


def require_gregorian(year: int, month: int, day: int, *, config: EngineConfig = DEFAULT_CONFIG) -> None:
    require_year(year, config=config)
    n = days_in_month(year, month)
    if not 1 <= day <= n:
        raise InvalidGregorianDateError(
            f"day must be in 1..{n} for {year:04d}-{month:02d} (got {day})",
            field="day",
            value=day,
        )


# ============================================================
# Unchecked arithmetic (anchors may sit just outside the era)
# ============================================================

def jd_from_ymd(year: int, month: int, day: int) -> int:
    """Proleptic Gregorian date -> Julian Day Number (noon-based, no range check)."""
    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3
    return day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045


def ymd_from_jd(jd: int) -> tuple[int, int, int]:
    """Julian Day Number -> proleptic Gregorian (year, month, day), no range check."""
    a = jd + 32044
    b = (4 * a + 3) // 146097
    c = a - (146097 * b) // 4
    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153
    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + m // 10
    return year, month, day


# ============================================================
# Public conversions
# ============================================================

def gregorian_to_julian_day(year: int, month: int, day: int, *, config: EngineConfig = DEFAULT_CONFIG) -> int:
    """
    Exact proleptic Gregorian -> Julian Day Number.

    Raises
    ------
    OutOfRangeError
        year outside the supported era.
    InvalidGregorianDateError
        impossible calendar date.
    """
    require_gregorian(year, month, day, config=config)
    return jd_from_ymd(year, month, day)


def julian_day_to_gregorian(jd: int, *, config: EngineConfig = DEFAULT_CONFIG) -> date:
    """
    Exact inverse of gregorian_to_julian_day.

    Raises OutOfRangeError when the day falls outside the supported era.
    """
    y, m, d = ymd_from_jd(int(jd))
    if not config.min_year <= y <= config.max_year:
        raise OutOfRangeError(
            f"julian day {jd} is {y:04d}-{m:02d}-{d:02d}, outside {config.min_year}..{config.max_year}",
            field="jd",
            value=jd,
        )
    return date(y, m, d)


def date_to_julian_day(d: date, *, config: EngineConfig = DEFAULT_CONFIG) -> int:
    return gregorian_to_julian_day(d.year, d.month, d.day, config=config)


def weekday(jd: int) -> int:
    """Day of week for a Julian Day Number, 0 = Sunday .. 6 = Saturday."""
    return (int(jd) + 1) % 7
