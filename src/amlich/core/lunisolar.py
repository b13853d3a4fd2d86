# src/amlich/core/lunisolar.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

from .config import DEFAULT_CONFIG, DEFAULT_TIMEZONE, EngineConfig
from .errors import ConvergenceError, InvalidLunarDateError, OutOfRangeError
from .julian import (
    gregorian_to_julian_day,
    julian_day_to_gregorian,
    require_timezone,
    ymd_from_jd,
)
from .leap_month import LunarMonth, anchor_window
from .newmoon import get_lunar_month_start_index, new_moon_julian_day

log = logging.getLogger(__name__)


# ============================================================
# Public types
# ============================================================

@dataclass(frozen=True)
class LunarDate:
    """
    Lunisolar date (year / month / day / leap).

    year follows the usual convention: the Gregorian year in which that
    lunar year's month 1 begins.
    """
    year: int
    month: int
    day: int
    is_leap: bool = False


# ============================================================
# Month lookup
# ============================================================

def _month_containing(jd: int, timezone: float, config: EngineConfig) -> LunarMonth:
    k = get_lunar_month_start_index(jd, timezone, config=config)
    start = new_moon_julian_day(k, timezone)
    gy, _, _ = ymd_from_jd(start)

    # month 11 of gy starts the window when the lunation is on/after it
    for wy in (gy, gy - 1):
        w = anchor_window(wy, timezone, config=config)
        if w.start_index <= k < w.end_index:
            return w.months[k - w.start_index]

    raise ConvergenceError(f"lunation k={k} is not covered by the anchor windows of {gy - 1}..{gy}", field="jd", value=jd)


def lunar_year_months(
    year: int,
    timezone: float = DEFAULT_TIMEZONE,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[LunarMonth]:
    """
    Months 1..12 (plus the leap month, if any) of lunar `year`, in order.

    Months 1..10 come from the window anchored on year-1; months 11 and 12
    (and a leap 11/12) from the window anchored on year.
    """
    _require_lunar_year(year, config)
    tz = require_timezone(timezone, config=config)

    out: List[LunarMonth] = []
    for wy in (year - 1, year):
        out.extend(m for m in anchor_window(wy, tz, config=config).months if m.year == year)
    return out


def leap_month_of_year(
    year: int,
    timezone: float = DEFAULT_TIMEZONE,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Optional[int]:
    """Number of the leap month of lunar `year`, or None for a 12-month year."""
    for m in lunar_year_months(year, timezone, config=config):
        if m.is_leap:
            return m.month
    return None


def _find_month(year: int, month: int, is_leap: bool, timezone: float, config: EngineConfig) -> LunarMonth:
    if not 1 <= month <= 12:
        raise InvalidLunarDateError(f"lunar month must be in 1..12 (got {month})", field="month", value=month)

    for m in lunar_year_months(year, timezone, config=config):
        if m.month == month and m.is_leap == bool(is_leap):
            return m

    leap = leap_month_of_year(year, timezone, config=config)
    if leap is None:
        msg = f"lunar year {year} has no leap month"
    else:
        msg = f"lunar year {year} has leap month {leap}, not {month}"
    raise InvalidLunarDateError(msg, field="is_leap", value=is_leap)


def lunar_month_length(
    year: int,
    month: int,
    is_leap: bool = False,
    timezone: float = DEFAULT_TIMEZONE,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> int:
    """29 or 30."""
    tz = require_timezone(timezone, config=config)
    return _find_month(year, month, is_leap, tz, config).length


def _require_lunar_year(year: int, config: EngineConfig) -> None:
    # lunar year min_year-1 covers Gregorian January/February of min_year
    lo = config.min_year - 1
    if not lo <= year <= config.max_year:
        raise OutOfRangeError(
            f"lunar year must be in {lo}..{config.max_year} (got {year})",
            field="year",
            value=year,
        )


# ============================================================
# Conversions
# ============================================================

def julian_day_to_lunar(
    jd: int,
    timezone: float = DEFAULT_TIMEZONE,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> LunarDate:
    tz = require_timezone(timezone, config=config)
    m = _month_containing(int(jd), tz, config)
    return LunarDate(year=m.year, month=m.month, day=int(jd) - m.start_jd + 1, is_leap=m.is_leap)


def gregorian_to_lunar(
    year: int,
    month: int,
    day: int,
    timezone: float = DEFAULT_TIMEZONE,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> LunarDate:
    """
    Gregorian date -> lunar date for a fixed UTC offset (hours).

    Raises
    ------
    InvalidGregorianDateError
        impossible calendar date.
    OutOfRangeError
        year outside the supported era or timezone outside -12..+14.
    """
    jd = gregorian_to_julian_day(year, month, day, config=config)
    return julian_day_to_lunar(jd, timezone, config=config)


def date_to_lunar(
    d: date,
    timezone: float = DEFAULT_TIMEZONE,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> LunarDate:
    return gregorian_to_lunar(d.year, d.month, d.day, timezone, config=config)


def lunar_to_julian_day(
    year: int,
    month: int,
    day: int,
    is_leap: bool = False,
    timezone: float = DEFAULT_TIMEZONE,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> int:
    if not 1 <= day <= 30:
        raise InvalidLunarDateError(f"lunar day must be in 1..30 (got {day})", field="day", value=day)
    tz = require_timezone(timezone, config=config)
    m = _find_month(year, month, is_leap, tz, config)
    if day > m.length:
        raise InvalidLunarDateError(
            f"lunar month {'leap ' if m.is_leap else ''}{month}/{year} has {m.length} days (got {day})",
            field="day",
            value=day,
        )
    return m.start_jd + day - 1


def lunar_to_gregorian(
    year: int,
    month: int,
    day: int,
    is_leap: bool = False,
    timezone: float = DEFAULT_TIMEZONE,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> date:
    """
    Lunar date -> Gregorian date.

    is_leap selects the intercalary month; asking for a leap month the year
    does not have raises InvalidLunarDateError.
    """
    jd = lunar_to_julian_day(year, month, day, is_leap, timezone, config=config)
    return julian_day_to_gregorian(jd, config=config)


def approximate_gregorian_year(lunar: LunarDate) -> int:
    """
    Cheap guess of the Gregorian year a lunar date falls in.

    Month 12 mostly lands in January of the next year; everything else is
    taken to be in `lunar.year`. Not authoritative: use lunar_to_gregorian
    when the exact date matters.
    """
    return lunar.year + 1 if lunar.month == 12 else lunar.year


def gregorian_to_lunar_between(
    start: date,
    end: date,
    timezone: float = DEFAULT_TIMEZONE,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Iterable[Tuple[date, LunarDate]]:
    """
    [start, end) converted day by day.

    Walks the lunation list instead of converting every day from scratch.
    """
    if not (start < end):
        return []

    tz = require_timezone(timezone, config=config)
    jd0 = gregorian_to_julian_day(start.year, start.month, start.day, config=config)
    last = end - timedelta(days=1)
    gregorian_to_julian_day(last.year, last.month, last.day, config=config)
    out: List[Tuple[date, LunarDate]] = []

    month: Optional[LunarMonth] = None
    d = start
    jd = jd0
    while d < end:
        if month is None or not month.contains(jd):
            month = _month_containing(jd, tz, config)
        out.append((d, LunarDate(year=month.year, month=month.month, day=jd - month.start_jd + 1, is_leap=month.is_leap)))
        d += timedelta(days=1)
        jd += 1

    log.debug("converted %d days %s..%s tz=%+g", len(out), start, end, tz)
    return out
