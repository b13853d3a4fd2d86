# src/amlich/core/astronomy.py
from __future__ import annotations

import math

# Astronomical Algorithms (Meeus, 1998), low-precision series.
# Coefficients are the ones used by the published Vietnamese/Chinese tables;
# changing any of them changes month boundaries.

DR = math.pi / 180.0

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0

# new moon index 0 = 1900-01-01 13:52 UT
NEW_MOON_EPOCH_JD = 2415020.75933
SYNODIC_MONTH = 29.530588853
# epoch used for index estimation from a day number (epoch + half day + tz bias)
NEW_MOON_INDEX_EPOCH = 2415021.076998695
LUNATIONS_PER_CENTURY = 1236.85


def norm360(deg: float) -> float:
    x = deg % 360.0
    return x + 360.0 if x < 0 else x


def angdiff180(deg: float) -> float:
    """Map angle to (-180, 180]."""
    x = (deg + 180.0) % 360.0 - 180.0
    return 180.0 if x == -180.0 else x


def sun_longitude_deg(jd_ut: float) -> float:
    """
    Geocentric ecliptic longitude of the Sun (degrees, [0, 360)) at a UT Julian date.

    Mean longitude plus the equation of center; no nutation or aberration.
    Error is a few arc-minutes over 1200..3000, enough for day-level decisions
    and nowhere near ephemeris grade.
    """
    t = (jd_ut - J2000) / DAYS_PER_CENTURY
    t2 = t * t
    m = 357.52910 + 35999.05030 * t - 0.0001559 * t2 - 0.00000048 * t * t2
    l0 = 280.46645 + 36000.76983 * t + 0.0003032 * t2
    dl = (1.914600 - 0.004817 * t - 0.000014 * t2) * math.sin(DR * m)
    dl += (0.019993 - 0.000101 * t) * math.sin(DR * 2 * m) + 0.000290 * math.sin(DR * 3 * m)
    return norm360(l0 + dl)


def _delta_t_days(t: float) -> float:
    """ΔT (days) as a polynomial in centuries since 1900."""
    t2 = t * t
    t3 = t2 * t
    if t < -11:
        return 0.001 + 0.000839 * t + 0.0002261 * t2 - 0.00000845 * t3 - 0.000000081 * t * t3
    return -0.000278 + 0.000265 * t + 0.000262 * t2


def new_moon_jd(k: int) -> float:
    """
    UT Julian date of the k-th new moon after the 1900-01-01 reference new moon.

    Mean lunation plus the principal periodic terms of the Sun's and Moon's
    anomalies and the Moon's argument of latitude.
    """
    t = k / LUNATIONS_PER_CENTURY
    t2 = t * t
    t3 = t2 * t

    jd1 = NEW_MOON_EPOCH_JD + 29.53058868 * k + 0.0001178 * t2 - 0.000000155 * t3
    jd1 += 0.00033 * math.sin((166.56 + 132.87 * t - 0.009173 * t2) * DR)

    m = 359.2242 + 29.10535608 * k - 0.0000333 * t2 - 0.00000347 * t3      # sun anomaly
    mpr = 306.0253 + 385.81691806 * k + 0.0107306 * t2 + 0.00001236 * t3   # moon anomaly
    f = 21.2964 + 390.67050646 * k - 0.0016528 * t2 - 0.00000239 * t3      # moon latitude arg

    c1 = (0.1734 - 0.000393 * t) * math.sin(m * DR) + 0.0021 * math.sin(2 * DR * m)
    c1 = c1 - 0.4068 * math.sin(mpr * DR) + 0.0161 * math.sin(DR * 2 * mpr)
    c1 = c1 - 0.0004 * math.sin(DR * 3 * mpr)
    c1 = c1 + 0.0104 * math.sin(DR * 2 * f) - 0.0051 * math.sin(DR * (m + mpr))
    c1 = c1 - 0.0074 * math.sin(DR * (m - mpr)) + 0.0004 * math.sin(DR * (2 * f + m))
    c1 = c1 - 0.0004 * math.sin(DR * (2 * f - m)) - 0.0006 * math.sin(DR * (2 * f + mpr))
    c1 = c1 + 0.0010 * math.sin(DR * (2 * f - mpr)) + 0.0005 * math.sin(DR * (2 * mpr + m))

    return jd1 + c1 - _delta_t_days(t)
