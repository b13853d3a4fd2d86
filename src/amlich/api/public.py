from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from amlich.core.config import default_timezone
from amlich.core.errors import LunarCalendarError
from amlich.core.lunisolar import (
    approximate_gregorian_year,
    gregorian_to_lunar,
    leap_month_of_year,
    lunar_to_gregorian,
)
from amlich.features.month_grid import CalendarMonth, build_month_grid

log = logging.getLogger("amlich.api.public")

CALENDAR_NAMES = ("Gregorian", "Lunar")

IntLike = Union[int, str]


# ============================================================
# Response Models
# ============================================================
class LunarDateModel(BaseModel):
    year: int
    month: int
    day: int
    is_leap: bool = Field(default=False, description="true for the intercalary month")


class GregorianDateModel(BaseModel):
    year: int
    month: int
    day: int
    iso: date


class ConversionResponse(BaseModel):
    timezone: float
    gregorian: GregorianDateModel
    lunar: LunarDateModel
    approx_gregorian_year: int
    leap_month: Optional[int] = Field(default=None, description="leap month of the lunar year, if any")


class CalendarLunarModel(BaseModel):
    year: int = Field(description="approximate Gregorian year of the lunar date")
    month: int
    day: int
    is_leap: bool


class CalendarDayModel(BaseModel):
    day: int
    is_current_month: bool
    lunar_date: Optional[CalendarLunarModel] = None


class CalendarMetadata(BaseModel):
    days_in_month: int
    first_day_of_month: int = Field(description="0 = Sunday")


class CalendarResponse(BaseModel):
    year: int
    month: int
    calendar_type: str
    days: List[CalendarDayModel]
    metadata: CalendarMetadata


class ErrorResponse(BaseModel):
    error: str
    field: Optional[str] = None
    value: Optional[Any] = None


# ============================================================
# Helpers: parsing & errors
# ============================================================
class _ParamError(ValueError):
    def __init__(self, name: str, value: Any) -> None:
        super().__init__(f"Missing or invalid parameter: {name}")
        self.name = name
        self.value = value


def is_calendar_name(x: Any) -> bool:
    return isinstance(x, str) and x in CALENDAR_NAMES


def _parse_int(name: str, x: Optional[IntLike]) -> int:
    if isinstance(x, bool) or x is None:
        raise _ParamError(name, x)
    if isinstance(x, int):
        return x
    try:
        return int(str(x).strip(), 10)
    except ValueError:
        raise _ParamError(name, x) from None


def _parse_bool(name: str, x: Union[bool, str, None]) -> bool:
    if x is None or isinstance(x, bool):
        return bool(x)
    s = str(x).strip().lower()
    if s in ("1", "true", "yes", "y", "on"):
        return True
    if s in ("", "0", "false", "no", "n", "off"):
        return False
    raise _ParamError(name, x)


def _parse_tz(x: Union[float, str, None]) -> float:
    if x is None or (isinstance(x, str) and not x.strip()):
        return default_timezone()
    try:
        return float(x)
    except (TypeError, ValueError):
        raise _ParamError("timezone", x) from None


def _error_payload(e: Exception) -> Dict[str, Any]:
    if isinstance(e, _ParamError):
        body = ErrorResponse(error=str(e), field=e.name, value=e.value)
    elif isinstance(e, LunarCalendarError):
        body = ErrorResponse(error=str(e), field=e.field, value=e.value)
    else:
        body = ErrorResponse(error=str(e))
    log.warning("request failed: %s (field=%s value=%r)", body.error, body.field, body.value)
    return body.model_dump(mode="json")


def _conversion(d: date, lunar, tz: float) -> ConversionResponse:
    return ConversionResponse(
        timezone=tz,
        gregorian=GregorianDateModel(year=d.year, month=d.month, day=d.day, iso=d),
        lunar=LunarDateModel(year=lunar.year, month=lunar.month, day=lunar.day, is_leap=lunar.is_leap),
        approx_gregorian_year=approximate_gregorian_year(lunar),
        leap_month=leap_month_of_year(lunar.year, tz),
    )


# =========================================================
# Public JSON API (function-style)
# =========================================================
def convert_gregorian(
    year: Optional[IntLike],
    month: Optional[IntLike],
    day: Optional[IntLike],
    *,
    timezone: Union[float, str, None] = None,
) -> Dict[str, Any]:
    """
    Gregorian -> lunar. Returns a JSON-ready dict; failures come back as
    {"error": ..., "field": ..., "value": ...} instead of raising.
    """
    try:
        y = _parse_int("year", year)
        m = _parse_int("month", month)
        d = _parse_int("day", day)
        tz = _parse_tz(timezone)
        lunar = gregorian_to_lunar(y, m, d, tz)
        return _conversion(date(y, m, d), lunar, tz).model_dump(mode="json")
    except (_ParamError, LunarCalendarError) as e:
        return _error_payload(e)


def convert_lunar(
    year: Optional[IntLike],
    month: Optional[IntLike],
    day: Optional[IntLike],
    is_leap: Union[bool, str, None] = False,
    *,
    timezone: Union[float, str, None] = None,
) -> Dict[str, Any]:
    """Lunar -> Gregorian, same payload shape as convert_gregorian."""
    try:
        y = _parse_int("year", year)
        m = _parse_int("month", month)
        d = _parse_int("day", day)
        leap = _parse_bool("is_leap", is_leap)
        tz = _parse_tz(timezone)
        g = lunar_to_gregorian(y, m, d, leap, tz)
        lunar = gregorian_to_lunar(g.year, g.month, g.day, tz)
        return _conversion(g, lunar, tz).model_dump(mode="json")
    except (_ParamError, LunarCalendarError) as e:
        return _error_payload(e)


def _calendar_response(grid: CalendarMonth, calendar_type: str) -> CalendarResponse:
    days: List[CalendarDayModel] = []
    for c in grid.days:
        lunar_date = None
        if c.lunar is not None:
            lunar_date = CalendarLunarModel(
                year=c.lunar.year,
                month=c.lunar.month,
                day=c.lunar.day,
                is_leap=c.lunar.is_leap,
            )
        days.append(CalendarDayModel(day=c.day, is_current_month=c.is_current_month, lunar_date=lunar_date))

    return CalendarResponse(
        year=grid.year,
        month=grid.month,
        calendar_type=calendar_type,
        days=days,
        metadata=CalendarMetadata(
            days_in_month=grid.days_in_month,
            first_day_of_month=grid.first_day_of_month,
        ),
    )


def get_calendar(
    year: Optional[IntLike],
    month: Optional[IntLike],
    calendar: Optional[str] = "Gregorian",
    *,
    timezone: Union[float, str, None] = None,
) -> Dict[str, Any]:
    """
    42-cell month view. "Gregorian" decorates every cell with its lunar date;
    "Lunar" returns the bare grid.
    """
    try:
        y = _parse_int("year", year)
        m = _parse_int("month", month)
        if not is_calendar_name(calendar):
            raise _ParamError("calendar", calendar)
        tz = _parse_tz(timezone)
        grid = build_month_grid(y, m, tz, with_lunar=(calendar == "Gregorian"))
        return _calendar_response(grid, str(calendar)).model_dump(mode="json")
    except (_ParamError, LunarCalendarError) as e:
        return _error_payload(e)
