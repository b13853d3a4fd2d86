# src/amlich/core/leap_month.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Tuple

from .astronomy import SYNODIC_MONTH
from .config import DEFAULT_CONFIG, EngineConfig
from .errors import ConvergenceError
from .julian import jd_from_ymd
from .newmoon import nearest_lunation_index, new_moon_julian_day
from .solarterms import major_term_sector

log = logging.getLogger(__name__)

# JD of 1900-01-01 (noon); month-11 search estimates lunations from here
_ANCHOR_EPOCH_JD = 2415021.0
# sector 9 starts at 270 deg (winter solstice)
_WINTER_SOLSTICE_SECTOR = 9


# ============================
# Data models
# ============================

@dataclass(frozen=True)
class LunarMonth:
    """
    One labeled lunation: days [start_jd, end_jd).

    year is the lunar year the month belongs to (months 11 and 12 keep the
    year of the solstice they follow; the count rolls over at month 1).
    """
    index: int          # lunation number k (0 = 1900-01-01 new moon)
    start_jd: int
    end_jd: int
    year: int
    month: int
    is_leap: bool

    @property
    def length(self) -> int:
        return self.end_jd - self.start_jd

    def contains(self, jd: int) -> bool:
        return self.start_jd <= jd < self.end_jd


@dataclass(frozen=True)
class MonthLabel:
    month_no: int              # 1..12, 11 is the anchor month at winter solstice
    is_leap: bool
    year_offset: int           # 0 before the 12 -> 1 roll-over, 1 after


@dataclass(frozen=True)
class LeapDecision:
    """
    leap_span_pos: 0-based position within the window (None if 12 lunations)
    no_zhongqi_positions: every position whose lunation holds no principal term
    """
    leap_span_pos: Optional[int]
    no_zhongqi_positions: List[int]


@dataclass(frozen=True)
class AnchorWindow:
    """Lunations from month 11 of `year` up to (not including) month 11 of `year + 1`."""
    year: int
    start_index: int
    end_index: int
    decision: LeapDecision
    months: Tuple[LunarMonth, ...]

    @property
    def span_count(self) -> int:
        return self.end_index - self.start_index


# ============================
# Month-11 anchor
# ============================

@lru_cache(maxsize=1024)
def _month_11_start(year: int, timezone: float) -> int:
    off = jd_from_ymd(year, 12, 31) - _ANCHOR_EPOCH_JD
    k = math.floor(off / SYNODIC_MONTH)
    nm = new_moon_julian_day(k, timezone)
    # a lunation starting at/after the solstice cannot be month 11; take the previous one
    if major_term_sector(nm, timezone) >= _WINTER_SOLSTICE_SECTOR:
        nm = new_moon_julian_day(k - 1, timezone)
    return nm


def month_11_start(year: int, timezone: float) -> int:
    """
    Julian Day Number of the new moon starting the lunar month that contains
    the winter solstice of Gregorian `year`.

    No era check: windows at the edges of the era need the neighbouring anchors.
    """
    return _month_11_start(int(year), float(timezone))


# ============================
# Zhongqi presence
# ============================

def has_major_term(k: int, timezone: float) -> bool:
    """
    True if lunation k holds at least one principal term.

    Compared on local day boundaries: the 30-degree sector at the start of the
    lunation differs from the sector at the start of the next one.
    """
    a = major_term_sector(new_moon_julian_day(k, timezone), timezone)
    b = major_term_sector(new_moon_julian_day(k + 1, timezone), timezone)
    return a != b


def decide_leap_month(
    start_index: int,
    span_count: int,
    timezone: float,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> LeapDecision:
    """
    Choose the leap lunation of a window starting at month 11.

    - 12 lunations: no leap month, even if some lunation lacks a principal term.
    - 13 lunations: the first lunation after month 11 without a principal term.
      When several qualify the earliest wins. This is the convention the
      published calendars follow, not something the astronomy forces.
    """
    no_zh = [pos for pos in range(span_count) if not has_major_term(start_index + pos, timezone)]

    if span_count == 12:
        return LeapDecision(leap_span_pos=None, no_zhongqi_positions=no_zh)

    limit = min(span_count, config.lunisolar.leap_scan_limit - 1)
    candidates = [pos for pos in no_zh if 1 <= pos < limit]
    if not candidates:
        raise ConvergenceError(
            f"13-lunation window at k={start_index} has no lunation without a principal term",
            field="k",
            value=start_index,
        )
    if len(candidates) > 1:
        log.debug(
            "several lunations without a principal term at k=%d: positions=%s; earliest wins",
            start_index, candidates,
        )
    return LeapDecision(leap_span_pos=candidates[0], no_zhongqi_positions=no_zh)


# ============================
# Month numbering
# ============================

def assign_month_numbers(
    span_count: int,
    *,
    leap_span_pos: Optional[int],
    anchor_month_no: int = 11,
) -> List[MonthLabel]:
    """
    Assign month numbers to the lunations of one window.
    Rules:
      - position 0 is anchor_month_no (winter-solstice month => 11).
      - each next position increments the month number (wrap 12 -> 1);
        the wrap also moves the lunar year forward by one.
      - the leap position repeats the previous month number and does NOT
        advance the cycle.
    """
    if span_count <= 0:
        return []

    labels: List[MonthLabel] = []
    cur = int(anchor_month_no)
    year_offset = 0

    for pos in range(span_count):
        if pos == 0:
            labels.append(MonthLabel(month_no=cur, is_leap=False, year_offset=year_offset))
            continue

        if leap_span_pos is not None and pos == leap_span_pos:
            labels.append(MonthLabel(month_no=cur, is_leap=True, year_offset=year_offset))
            continue

        if cur == 12:
            cur = 1
            year_offset += 1
        else:
            cur += 1
        labels.append(MonthLabel(month_no=cur, is_leap=False, year_offset=year_offset))

    return labels


@lru_cache(maxsize=512)
def _anchor_window(year: int, timezone: float, config: EngineConfig) -> AnchorWindow:
    a11 = month_11_start(year, timezone)
    b11 = month_11_start(year + 1, timezone)
    k0 = nearest_lunation_index(a11)
    k1 = nearest_lunation_index(b11)
    span_count = k1 - k0
    if span_count not in (12, 13):
        raise ConvergenceError(
            f"anchor window for {year} holds {span_count} lunations (expected 12 or 13)",
            field="year",
            value=year,
        )

    decision = decide_leap_month(k0, span_count, timezone, config=config)
    labels = assign_month_numbers(
        span_count,
        leap_span_pos=decision.leap_span_pos,
        anchor_month_no=config.lunisolar.anchor_month_no,
    )

    months = tuple(
        LunarMonth(
            index=k0 + pos,
            start_jd=new_moon_julian_day(k0 + pos, timezone),
            end_jd=new_moon_julian_day(k0 + pos + 1, timezone),
            year=year + lab.year_offset,
            month=lab.month_no,
            is_leap=lab.is_leap,
        )
        for pos, lab in enumerate(labels)
    )
    if decision.leap_span_pos is not None:
        leap = months[decision.leap_span_pos]
        log.debug(
            "anchor window %d tz=%+g: leap month %d of lunar year %d at jd=%d (no zhongqi positions %s)",
            year, timezone, leap.month, leap.year, leap.start_jd, decision.no_zhongqi_positions,
        )
    return AnchorWindow(year=year, start_index=k0, end_index=k1, decision=decision, months=months)


def anchor_window(year: int, timezone: float, *, config: EngineConfig = DEFAULT_CONFIG) -> AnchorWindow:
    """
    Label every lunation between the month-11 anchors of `year` and `year + 1`.
    """
    return _anchor_window(int(year), float(timezone), config)
