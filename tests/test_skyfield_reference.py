from __future__ import annotations

import os
from pathlib import Path

import pytest

from amlich.core.astronomy import angdiff180, sun_longitude_deg
from amlich.core.julian import jd_from_ymd

pytest.importorskip("skyfield")


def _find_ephemeris_path() -> Path | None:
    env = os.environ.get("AMLICH_EPHEMERIS_PATH")
    if env:
        p = Path(env).expanduser()
        if p.exists():
            return p

    repo = Path(__file__).resolve().parents[1]
    for name in ("de440s.bsp", "de421.bsp"):
        p = repo / "data" / name
        if p.exists():
            return p
    return None


def _require_provider():
    p = _find_ephemeris_path()
    if p is None:
        pytest.skip("ephemeris not found (set AMLICH_EPHEMERIS_PATH or place data/de440s.bsp)")
    from amlich.core.providers.skyfield_provider import SkyfieldProvider

    return SkyfieldProvider(ephemeris_path=p)


def test_series_within_a_few_arcminutes_of_ephemeris():
    provider = _require_provider()
    jds = [jd_from_ymd(y, m, 1) + 0.25 for y in range(1950, 2050, 7) for m in (1, 4, 7, 10)]
    jds = [jd for jd in jds if provider.covers(jd)]
    assert jds

    refs = provider.sun_longitude_deg_many(jds)
    for jd, ref in zip(jds, refs):
        assert abs(angdiff180(sun_longitude_deg(jd) - ref)) < 0.05


def test_scalar_and_batch_agree():
    provider = _require_provider()
    jd = jd_from_ymd(2023, 12, 22) + 0.1
    assert provider.sun_longitude_deg(jd) == pytest.approx(provider.sun_longitude_deg_many([jd])[0])
