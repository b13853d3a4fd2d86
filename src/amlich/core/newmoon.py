# src/amlich/core/newmoon.py
from __future__ import annotations

import math
from functools import lru_cache

from .astronomy import NEW_MOON_INDEX_EPOCH, SYNODIC_MONTH, new_moon_jd
from .config import DEFAULT_CONFIG, EngineConfig
from .errors import ConvergenceError
from .julian import require_timezone


def new_moon_instant(k: int) -> float:
    """UT Julian date of new moon number k (k=0 is 1900-01-01)."""
    return new_moon_jd(int(k))


@lru_cache(maxsize=8192)
def _new_moon_day(k: int, timezone: float) -> int:
    return math.floor(new_moon_jd(k) + 0.5 + timezone / 24.0)


def new_moon_julian_day(k: int, timezone: float) -> int:
    """
    Julian Day Number of the local calendar day containing new moon k.
    """
    return _new_moon_day(int(k), float(timezone))


def estimate_lunation_index(jd: float) -> int:
    """Lunation index whose new moon most likely starts on or before jd."""
    return math.floor((jd - NEW_MOON_INDEX_EPOCH) / SYNODIC_MONTH)


def nearest_lunation_index(jd: float) -> int:
    """Lunation index of the new moon closest to day jd."""
    return math.floor((jd - NEW_MOON_INDEX_EPOCH) / SYNODIC_MONTH + 0.5)


def get_lunar_month_start_index(
    jd: int,
    timezone: float,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> int:
    """
    Find k such that new_moon_julian_day(k) <= jd < new_moon_julian_day(k + 1).

    Starts from the synodic-period estimate and walks at most
    `config.newmoon.month_start_max_steps` lunations in either direction.
    """
    tz = require_timezone(timezone, config=config)
    k = estimate_lunation_index(jd)
    for _ in range(config.newmoon.month_start_max_steps + 1):
        if new_moon_julian_day(k + 1, tz) <= jd:
            k += 1
        elif new_moon_julian_day(k, tz) > jd:
            k -= 1
        else:
            return k
    raise ConvergenceError(
        f"no lunation bracket for jd={jd} within {config.newmoon.month_start_max_steps} steps",
        field="jd",
        value=jd,
    )
