from __future__ import annotations

from datetime import date, timedelta

import pytest

from amlich.core.errors import InvalidGregorianDateError, InvalidLunarDateError, OutOfRangeError
from amlich.core.julian import jd_from_ymd
from amlich.core.lunisolar import (
    LunarDate,
    approximate_gregorian_year,
    date_to_lunar,
    gregorian_to_lunar,
    gregorian_to_lunar_between,
    julian_day_to_lunar,
    leap_month_of_year,
    lunar_month_length,
    lunar_to_gregorian,
    lunar_year_months,
)


# ============================================================
# Reference dates (UTC+7 unless stated)
# ============================================================

@pytest.mark.parametrize(
    "ymd, expected",
    [
        ((2023, 1, 22), LunarDate(2023, 1, 1, False)),
        ((2023, 3, 22), LunarDate(2023, 2, 1, True)),
        ((2023, 2, 20), LunarDate(2023, 2, 1, False)),
        ((2023, 1, 21), LunarDate(2022, 12, 30, False)),
        ((2000, 2, 5), LunarDate(2000, 1, 1, False)),
        ((2020, 1, 25), LunarDate(2020, 1, 1, False)),
        ((2021, 2, 12), LunarDate(2021, 1, 1, False)),
        ((2022, 2, 1), LunarDate(2022, 1, 1, False)),
        ((2024, 2, 10), LunarDate(2024, 1, 1, False)),
        ((2025, 1, 29), LunarDate(2025, 1, 1, False)),
        ((2026, 2, 17), LunarDate(2026, 1, 1, False)),
        ((2020, 5, 23), LunarDate(2020, 4, 1, True)),
        ((2023, 9, 29), LunarDate(2023, 8, 15, False)),
    ],
)
def test_reference_dates(ymd, expected):
    assert gregorian_to_lunar(*ymd, timezone=7) == expected


@pytest.mark.parametrize(
    "tz, tet",
    [
        (7, date(1985, 1, 21)),
        (8, date(1985, 2, 20)),
        (7, date(1968, 1, 29)),
        (8, date(1968, 1, 30)),
    ],
)
def test_new_year_depends_on_timezone(tz, tet):
    assert date_to_lunar(tet, tz) == LunarDate(tet.year, 1, 1, False)
    assert lunar_to_gregorian(tet.year, 1, 1, False, tz) == tet


def test_leap_flag_selects_a_different_month():
    leap = lunar_to_gregorian(2023, 2, 1, True, 7)
    regular = lunar_to_gregorian(2023, 2, 1, False, 7)
    assert leap == date(2023, 3, 22)
    assert regular == date(2023, 2, 20)
    assert leap != regular


@pytest.mark.parametrize(
    "year, leap",
    [
        (2012, 4),
        (2014, 9),
        (2017, 6),
        (2020, 4),
        (2021, None),
        (2022, None),
        (2023, 2),
        (2024, None),
        (2025, 6),
    ],
)
def test_leap_month_of_year(year, leap):
    assert leap_month_of_year(year, 7) == leap


# ============================================================
# Properties
# ============================================================

def _sample_dates(start: date, end: date, step: int):
    d = start
    while d <= end:
        yield d
        d += timedelta(days=step)


@pytest.mark.parametrize("tz", [-12, -5, 0, 5.5, 7, 8, 9, 14])
def test_round_trip(tz):
    for d in _sample_dates(date(1990, 1, 1), date(2035, 12, 31), 11):
        ld = gregorian_to_lunar(d.year, d.month, d.day, tz)
        assert lunar_to_gregorian(ld.year, ld.month, ld.day, ld.is_leap, tz) == d


def test_round_trip_across_era():
    for d in _sample_dates(date(1200, 1, 1), date(2999, 12, 31), 367):
        ld = date_to_lunar(d, 7)
        assert lunar_to_gregorian(ld.year, ld.month, ld.day, ld.is_leap, 7) == d


def test_era_edges():
    first = gregorian_to_lunar(1200, 1, 1, 7)
    assert first.year == 1199
    assert lunar_to_gregorian(first.year, first.month, first.day, first.is_leap, 7) == date(1200, 1, 1)

    last = gregorian_to_lunar(2999, 12, 31, 7)
    assert lunar_to_gregorian(last.year, last.month, last.day, last.is_leap, 7) == date(2999, 12, 31)


@pytest.mark.parametrize("tz", [7, 8])
def test_at_most_one_leap_month_per_year(tz):
    for year in range(1950, 2060):
        months = lunar_year_months(year, tz)
        leaps = [m for m in months if m.is_leap]
        assert len(leaps) <= 1
        assert len(months) == 12 + len(leaps)
        assert sorted({m.month for m in months}) == list(range(1, 13))
        if leaps:
            assert leaps[0].month == leap_month_of_year(year, tz)


def test_day_never_exceeds_month_length():
    for m in lunar_year_months(2023, 7):
        assert m.length in (29, 30)
        first = julian_day_to_lunar(m.start_jd, 7)
        last = julian_day_to_lunar(m.end_jd - 1, 7)
        assert first.day == 1
        assert last.day == m.length
        assert (last.month, last.is_leap) == (m.month, m.is_leap)
        assert lunar_month_length(m.year, m.month, m.is_leap, 7) == m.length


def test_lunar_day_is_monotonic_within_month():
    rows = list(gregorian_to_lunar_between(date(2023, 1, 1), date(2024, 1, 1), 7))
    assert len(rows) == 365
    for (d0, l0), (d1, l1) in zip(rows, rows[1:]):
        if l1.day == 1:
            continue
        assert (l1.year, l1.month, l1.is_leap) == (l0.year, l0.month, l0.is_leap)
        assert l1.day == l0.day + 1


def test_between_matches_single_conversion():
    for d, ld in gregorian_to_lunar_between(date(2022, 12, 15), date(2023, 4, 15), 7):
        assert ld == date_to_lunar(d, 7)


def test_between_empty_range():
    assert list(gregorian_to_lunar_between(date(2023, 1, 2), date(2023, 1, 1), 7)) == []


def test_julian_day_entry_point():
    assert julian_day_to_lunar(jd_from_ymd(2023, 1, 22), 7) == LunarDate(2023, 1, 1, False)


def test_approximate_gregorian_year():
    assert approximate_gregorian_year(LunarDate(2022, 12, 30)) == 2023
    assert approximate_gregorian_year(LunarDate(2023, 1, 1)) == 2023
    assert approximate_gregorian_year(LunarDate(2023, 11, 5)) == 2023


# ============================================================
# Errors
# ============================================================

def test_nonexistent_leap_month():
    with pytest.raises(InvalidLunarDateError) as ei:
        lunar_to_gregorian(2023, 3, 1, True, 7)
    assert ei.value.field == "is_leap"
    with pytest.raises(InvalidLunarDateError):
        lunar_to_gregorian(2024, 2, 1, True, 7)


@pytest.mark.parametrize("month, day", [(0, 1), (13, 1), (1, 0), (1, 31)])
def test_invalid_lunar_fields(month, day):
    with pytest.raises(InvalidLunarDateError) as ei:
        lunar_to_gregorian(2023, month, day, False, 7)
    assert ei.value.field in ("month", "day")


def test_day_30_in_short_month():
    short = next(m for m in lunar_year_months(2023, 7) if m.length == 29)
    with pytest.raises(InvalidLunarDateError) as ei:
        lunar_to_gregorian(short.year, short.month, 30, short.is_leap, 7)
    assert ei.value.field == "day"
    assert ei.value.value == 30


def test_invalid_gregorian_input():
    with pytest.raises(InvalidGregorianDateError):
        gregorian_to_lunar(2023, 2, 30, 7)


@pytest.mark.parametrize("ymd", [(1199, 6, 1), (3000, 1, 1)])
def test_out_of_range_gregorian(ymd):
    with pytest.raises(OutOfRangeError):
        gregorian_to_lunar(*ymd, timezone=7)


def test_out_of_range_lunar_year():
    with pytest.raises(OutOfRangeError):
        lunar_to_gregorian(1100, 1, 1, False, 7)


def test_out_of_range_timezone():
    with pytest.raises(OutOfRangeError):
        gregorian_to_lunar(2023, 1, 22, 15)
