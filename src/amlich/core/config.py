# src/amlich/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

AMLICH_TZ_ENV = "AMLICH_TZ"
AMLICH_EPHEMERIS_PATH_ENV = "AMLICH_EPHEMERIS_PATH"

# UTC+7 (Indochina Time) is the reference zone of the published tables.
DEFAULT_TIMEZONE = 7.0


@dataclass(frozen=True)
class SolarTermConfig:
    """
    Bounds for the solar-term crossing search.
    All units are days / iterations.
    """
    window_days: int = 20
    max_iter: int = 40


@dataclass(frozen=True)
class NewMoonConfig:
    # local correction after the synodic-period estimate
    month_start_max_steps: int = 3


@dataclass(frozen=True)
class LuniSolarConfig:
    """
    Lunisolar labeling bounds.

    A window between two month-11 anchors holds 12 or 13 lunations, so the
    zhongqi scan never needs more than `leap_scan_limit` steps.
    """
    leap_scan_limit: int = 14
    anchor_month_no: int = 11


@dataclass(frozen=True)
class EngineConfig:
    min_year: int = 1200
    max_year: int = 2999
    min_timezone: float = -12.0
    max_timezone: float = 14.0

    solarterm: SolarTermConfig = field(default_factory=SolarTermConfig)
    newmoon: NewMoonConfig = field(default_factory=NewMoonConfig)
    lunisolar: LuniSolarConfig = field(default_factory=LuniSolarConfig)


DEFAULT_CONFIG = EngineConfig()


def default_timezone() -> float:
    """
    Timezone used by the tools and the public API when none is given.
    Reads AMLICH_TZ (hours east of UTC); falls back to +7.
    """
    raw = os.environ.get(AMLICH_TZ_ENV, "").strip()
    if not raw:
        return DEFAULT_TIMEZONE
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{AMLICH_TZ_ENV} must be a number of hours (got {raw!r})") from None


def ephemeris_path_from_env() -> Optional[Path]:
    raw = os.environ.get(AMLICH_EPHEMERIS_PATH_ENV, "").strip()
    if not raw:
        return None
    return Path(raw).expanduser()
