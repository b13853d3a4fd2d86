# src/amlich/features/month_grid.py
"""
Month view: a 6-week (42-cell) Gregorian grid starting on Sunday.

Cells before/after the requested month are filled from the neighbouring
months and flagged with is_current_month=False.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from amlich.core.config import DEFAULT_CONFIG, EngineConfig
from amlich.core.julian import days_in_month, jd_from_ymd, require_gregorian, require_timezone, weekday
from amlich.core.lunisolar import LunarDate, approximate_gregorian_year, julian_day_to_lunar

GRID_CELLS = 42


@dataclass(frozen=True)
class CalendarLunar:
    year: int          # approximate Gregorian year of the lunar date
    month: int
    day: int
    is_leap: bool


@dataclass(frozen=True)
class CalendarDay:
    year: int
    month: int
    day: int
    is_current_month: bool
    lunar: Optional[CalendarLunar] = None


@dataclass(frozen=True)
class CalendarMonth:
    year: int
    month: int
    days: List[CalendarDay]
    days_in_month: int
    first_day_of_month: int   # 0 = Sunday


def _prev_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def _next_month(year: int, month: int) -> tuple[int, int]:
    return (year + 1, 1) if month == 12 else (year, month + 1)


def _lunar_cell(ld: LunarDate) -> CalendarLunar:
    return CalendarLunar(
        year=approximate_gregorian_year(ld),
        month=ld.month,
        day=ld.day,
        is_leap=ld.is_leap,
    )


def build_month_grid(
    year: int,
    month: int,
    timezone: float = 0.0,
    *,
    with_lunar: bool = True,
    config: EngineConfig = DEFAULT_CONFIG,
) -> CalendarMonth:
    """
    42 cells: trailing days of the previous month, the month itself, then
    leading days of the next month. Each cell carries its lunar date when
    with_lunar is set.
    """
    require_gregorian(year, month, 1, config=config)
    tz = require_timezone(timezone, config=config)

    n = days_in_month(year, month)
    jd_first = jd_from_ymd(year, month, 1)
    first_dow = weekday(jd_first)

    py, pm = _prev_month(year, month)
    ny, nm = _next_month(year, month)
    prev_n = days_in_month(py, pm)

    cells: List[tuple[int, int, int, bool]] = []
    for i in range(first_dow - 1, -1, -1):
        cells.append((py, pm, prev_n - i, False))
    for d in range(1, n + 1):
        cells.append((year, month, d, True))
    for d in range(1, GRID_CELLS - len(cells) + 1):
        cells.append((ny, nm, d, False))

    # neighbouring cells may sit just outside the era; they are consecutive days
    days: List[CalendarDay] = []
    jd = jd_first - first_dow
    for (y, m, d, current) in cells:
        lunar = _lunar_cell(julian_day_to_lunar(jd, tz, config=config)) if with_lunar else None
        days.append(CalendarDay(year=y, month=m, day=d, is_current_month=current, lunar=lunar))
        jd += 1

    return CalendarMonth(
        year=year,
        month=month,
        days=days,
        days_in_month=n,
        first_day_of_month=first_dow,
    )
