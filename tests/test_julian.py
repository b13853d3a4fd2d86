from __future__ import annotations

from datetime import date

import pytest

from amlich.core.errors import InvalidGregorianDateError, OutOfRangeError
from amlich.core.julian import (
    days_in_month,
    gregorian_to_julian_day,
    is_leap_year,
    jd_from_ymd,
    julian_day_to_gregorian,
    require_timezone,
    weekday,
)


@pytest.mark.parametrize(
    "ymd, jd",
    [
        ((2000, 1, 1), 2451545),
        ((1582, 10, 15), 2299161),
        ((1900, 1, 1), 2415021),
        ((2023, 1, 22), 2459967),
    ],
)
def test_known_julian_days(ymd, jd):
    assert gregorian_to_julian_day(*ymd) == jd
    assert julian_day_to_gregorian(jd) == date(*ymd)


def test_proleptic_gregorian_before_1582():
    # no Julian-calendar switch: consecutive days stay consecutive across 1582
    assert gregorian_to_julian_day(1582, 10, 15) - gregorian_to_julian_day(1582, 10, 4) == 11
    assert julian_day_to_gregorian(jd_from_ymd(1300, 3, 1) - 1) == date(1300, 2, 28)


def test_round_trip_across_era():
    lo = gregorian_to_julian_day(1200, 1, 1)
    hi = gregorian_to_julian_day(2999, 12, 31)
    for jd in range(lo, hi + 1, 997):
        d = julian_day_to_gregorian(jd)
        assert gregorian_to_julian_day(d.year, d.month, d.day) == jd
    assert julian_day_to_gregorian(hi) == date(2999, 12, 31)


def test_round_trip_matches_stdlib_ordinals():
    base = date(2000, 1, 1)
    for offset in (-290000, -12345, -1, 0, 1, 59, 365, 100000, 365000):
        jd = 2451545 + offset
        assert julian_day_to_gregorian(jd).toordinal() == base.toordinal() + offset


def test_leap_years():
    assert is_leap_year(2000)
    assert is_leap_year(2024)
    assert not is_leap_year(1900)
    assert not is_leap_year(2023)
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2100, 2) == 28


@pytest.mark.parametrize("ymd", [(2023, 2, 29), (2023, 4, 31), (2023, 13, 1), (2023, 0, 10), (2023, 1, 0)])
def test_invalid_gregorian_dates(ymd):
    with pytest.raises(InvalidGregorianDateError) as ei:
        gregorian_to_julian_day(*ymd)
    assert ei.value.field in ("month", "day")


@pytest.mark.parametrize("ymd", [(1199, 12, 31), (3000, 1, 1), (-50, 1, 1)])
def test_out_of_range_years(ymd):
    with pytest.raises(OutOfRangeError) as ei:
        gregorian_to_julian_day(*ymd)
    assert ei.value.field == "year"
    assert ei.value.value == ymd[0]


def test_julian_day_to_gregorian_out_of_range():
    with pytest.raises(OutOfRangeError):
        julian_day_to_gregorian(jd_from_ymd(3000, 1, 1))


def test_weekday_sunday_is_zero():
    assert weekday(2451545) == 6        # 2000-01-01, Saturday
    assert weekday(jd_from_ymd(2026, 2, 1)) == 0
    assert weekday(jd_from_ymd(2023, 1, 2)) == 1


@pytest.mark.parametrize("tz", [-12, 0, 7, 5.5, 14])
def test_timezone_range_ok(tz):
    assert require_timezone(tz) == float(tz)


@pytest.mark.parametrize("tz", [-12.5, 14.5, float("nan")])
def test_timezone_range_rejected(tz):
    with pytest.raises(OutOfRangeError):
        require_timezone(tz)
