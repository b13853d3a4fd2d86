# src/amlich/core/solarterms.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import List

from .astronomy import angdiff180, norm360, sun_longitude_deg
from .config import DEFAULT_CONFIG, EngineConfig
from .errors import OutOfRangeError
from .julian import jd_from_ymd, require_timezone, require_year
from .rootfind import bisect_first_nonnegative

log = logging.getLogger(__name__)

# term 0 is the winter solstice; the sequence then runs 15 degrees at a time.
WINTER_SOLSTICE_DEG = 270.0
TERM_STEP_DEG = 15.0
TERM_COUNT = 24

TROPICAL_YEAR = 365.2422
# approximate solar longitude at 0h Jan 1
_JAN1_LONGITUDE = 280.5


@dataclass(frozen=True)
class SolarTerm:
    """
    One of the 24 solar terms.

    jd is the local day on which the longitude crossing happens.
    is_major is True for the 12 principal terms (zhongqi, multiples of 30 deg).
    """
    index: int
    longitude: float
    jd: int

    @property
    def is_major(self) -> bool:
        return self.index % 2 == 0


def term_longitude(term_index: int) -> float:
    if not 0 <= term_index < TERM_COUNT:
        raise OutOfRangeError(
            f"term_index must be in 0..{TERM_COUNT - 1} (got {term_index})",
            field="term_index",
            value=term_index,
        )
    return norm360(WINTER_SOLSTICE_DEG + TERM_STEP_DEG * term_index)


def sun_longitude(jd: float, timezone: float = 0.0) -> float:
    """
    Solar longitude (degrees, [0, 360)) for a local-reckoning Julian date.

    The UT instant is jd - timezone/24.
    """
    return sun_longitude_deg(jd - timezone / 24.0)


def sun_longitude_at_day_start(jd: int, timezone: float) -> float:
    """Solar longitude at local midnight starting day jd."""
    return sun_longitude(jd - 0.5, timezone)


def major_term_sector(jd: int, timezone: float) -> int:
    """
    30-degree sector (0..11) of the Sun at the start of day jd.

    Two days with different sectors have at least one principal term between them.
    """
    return int(sun_longitude_at_day_start(jd, timezone) / 30.0)


def solar_term_index(jd: int, timezone: float) -> int:
    """Index (0..23) of the latest solar term crossed on or before day jd."""
    lon_end = sun_longitude_at_day_start(jd + 1, timezone)
    return int(norm360(lon_end - WINTER_SOLSTICE_DEG) / TERM_STEP_DEG) % TERM_COUNT


@lru_cache(maxsize=2048)
def _solar_term_day(term_index: int, year: int, timezone: float, window_days: int, max_iter: int) -> int:
    target = term_longitude(term_index)

    # mean-motion estimate measured from Jan 1; keeps every term inside `year`
    est = jd_from_ymd(year, 1, 1) + round(norm360(target - _JAN1_LONGITUDE) / 360.0 * TROPICAL_YEAR)

    def f(day: int) -> float:
        return angdiff180(sun_longitude_at_day_start(day, timezone) - target)

    res = bisect_first_nonnegative(f, est - window_days, est + window_days, max_iter=max_iter)
    log.debug(
        "solar term %d (%.0f deg) year=%d tz=%+g -> jd=%d (%d iterations)",
        term_index, target, year, timezone, res.day - 1, res.iterations,
    )
    # first day that starts past the target; the crossing happened the day before
    return res.day - 1


def get_solar_term_julian_day(
    term_index: int,
    year: int,
    timezone: float,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> int:
    """
    Julian Day Number of the local day on which the Sun crosses the longitude
    of `term_index` within Gregorian `year`.

    Raises
    ------
    OutOfRangeError
        term_index outside 0..23, year outside the era or bad timezone.
    ConvergenceError
        the bounded bisection could not bracket or finish.
    """
    term_longitude(term_index)
    require_year(year, config=config)
    tz = require_timezone(timezone, config=config)
    cfg = config.solarterm
    return _solar_term_day(term_index, year, tz, cfg.window_days, cfg.max_iter)


def winter_solstice_julian_day(year: int, timezone: float, *, config: EngineConfig = DEFAULT_CONFIG) -> int:
    return get_solar_term_julian_day(0, year, timezone, config=config)


def solar_terms_for_year(year: int, timezone: float, *, config: EngineConfig = DEFAULT_CONFIG) -> List[SolarTerm]:
    """All 24 solar terms falling in Gregorian `year`, in date order."""
    out: List[SolarTerm] = []
    for i in range(TERM_COUNT):
        jd = get_solar_term_julian_day(i, year, timezone, config=config)
        out.append(SolarTerm(index=i, longitude=term_longitude(i), jd=jd))
    out.sort(key=lambda t: t.jd)
    return out
