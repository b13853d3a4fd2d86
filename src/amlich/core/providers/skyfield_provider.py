from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union
import logging

from skyfield.api import Loader

from amlich.core.config import ephemeris_path_from_env

log = logging.getLogger(__name__)


# ----------------------------
# Ephemeris path resolution
# ----------------------------
def _project_data_dir() -> Path:
    return Path(__file__).resolve().parents[4] / "data"


def _default_ephemeris_path() -> Path:
    """
    Prefer de440s (longer coverage) if present; otherwise fall back to de421.
    """
    data_dir = _project_data_dir()
    p440s = data_dir / "de440s.bsp"
    p421 = data_dir / "de421.bsp"
    return p440s if p440s.exists() else p421


def resolve_ephemeris_path(
    *,
    ephemeris_path: Optional[Path] = None,
    ephemeris: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Resolution priority:
      1) ephemeris_path (Path) if provided
      2) AMLICH_EPHEMERIS_PATH
      3) ephemeris (str|Path): absolute as is, relative under the project data dir
      4) default: prefer de440s if present else de421
    """
    if ephemeris_path is not None:
        return ephemeris_path

    env = ephemeris_path_from_env()
    if env is not None:
        return env

    if ephemeris is not None:
        p = ephemeris if isinstance(ephemeris, Path) else Path(ephemeris)
        if p.is_absolute():
            return p
        return _project_data_dir() / p

    return _default_ephemeris_path()


@dataclass(frozen=True)
class SkyfieldProvider:
    """
    Ephemeris-grade solar longitude, used to cross-check the truncated series.

    Longitudes are apparent, on the true ecliptic and equinox of date.
    The conversion engine never calls this.
    """

    ephemeris_path: Optional[Path] = None
    ephemeris: Optional[Union[str, Path]] = None

    def __post_init__(self) -> None:
        resolved = resolve_ephemeris_path(ephemeris_path=self.ephemeris_path, ephemeris=self.ephemeris)
        object.__setattr__(self, "ephemeris_path", resolved)

        if not resolved.exists():
            raise FileNotFoundError(
                f"Ephemeris not found: {resolved}\n"
                f"Place de440s.bsp or de421.bsp under {_project_data_dir()}, "
                "set AMLICH_EPHEMERIS_PATH, or pass ephemeris_path=Path(...)."
            )

        loader = Loader(str(resolved.parent))
        eph = loader(resolved.name)
        ts = loader.timescale()

        from skyfield.framelib import ecliptic_frame  # true ecliptic and equinox of date

        object.__setattr__(self, "_eph", eph)
        object.__setattr__(self, "_ts", ts)
        object.__setattr__(self, "_earth", eph["earth"])
        object.__setattr__(self, "_sun", eph["sun"])
        object.__setattr__(self, "_frame", ecliptic_frame)

        start_jd, end_jd = self._coverage_jd()
        object.__setattr__(self, "_start_jd", start_jd)
        object.__setattr__(self, "_end_jd", end_jd)
        log.debug("loaded %s covering jd %.1f..%.1f", resolved, start_jd, end_jd)

    def _coverage_jd(self) -> Tuple[float, float]:
        segments = getattr(self._eph, "spk", None)
        if segments is None or not getattr(segments, "segments", None):
            return float("-inf"), float("inf")
        segs = segments.segments
        return min(s.start_jd for s in segs), max(s.end_jd for s in segs)

    def covers(self, jd_ut: float) -> bool:
        return self._start_jd <= jd_ut <= self._end_jd

    def _check_range(self, jd_ut: float) -> None:
        if not self.covers(jd_ut):
            raise ValueError(
                "Requested instant is outside ephemeris coverage.\n"
                f"  requested: jd {jd_ut:.5f}\n"
                f"  ephemeris: {self.ephemeris_path}\n"
                f"  coverage : jd {self._start_jd:.1f} .. {self._end_jd:.1f}"
            )

    def sun_longitude_deg(self, jd_ut: float) -> float:
        self._check_range(jd_ut)
        t = self._ts.ut1_jd(jd_ut)
        obs = self._earth.at(t).observe(self._sun).apparent()
        _lat, lon, _dist = obs.frame_latlon(self._frame)
        return float(lon.degrees % 360.0)

    def sun_longitude_deg_many(self, jds_ut: Sequence[float]) -> List[float]:
        if not jds_ut:
            return []
        self._check_range(min(jds_ut))
        self._check_range(max(jds_ut))
        t = self._ts.ut1_jd(list(jds_ut))
        obs = self._earth.at(t).observe(self._sun).apparent()
        _lat, lon, _dist = obs.frame_latlon(self._frame)
        return [float(x) for x in lon.degrees % 360.0]
