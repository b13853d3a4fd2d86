from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Iterable, Optional, Tuple

from amlich.core.config import default_timezone, ephemeris_path_from_env


@dataclass(frozen=True)
class EphemerisConfig:
    path: Optional[Path]
    skip_reason: Optional[str]


def add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--date", help="YYYY-MM-DD")
    parser.add_argument("--start", help="YYYY-MM-DD")
    parser.add_argument("--end", help="YYYY-MM-DD")
    parser.add_argument("--tz", type=float, default=None, help="UTC offset in hours (default: $AMLICH_TZ or +7)")
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--verbose", action="store_true")


def setup_logging(args: argparse.Namespace) -> None:
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def resolve_tz(args: argparse.Namespace) -> float:
    return default_timezone() if args.tz is None else float(args.tz)


def parse_date(s: str) -> date:
    return date.fromisoformat(s)


def iter_dates(start: date, end: date) -> Iterable[date]:
    cur = start
    while cur <= end:
        yield cur
        cur = cur + timedelta(days=1)


def resolve_ephemeris(path_arg: str) -> EphemerisConfig:
    raw = (path_arg or "").strip()
    p = Path(raw).expanduser() if raw else ephemeris_path_from_env()
    if p is None:
        for name in ("de440s.bsp", "de421.bsp"):
            local = Path("data") / name
            if local.exists():
                return EphemerisConfig(path=local, skip_reason=None)
        return EphemerisConfig(
            path=None,
            skip_reason="ephemeris not found. set AMLICH_EPHEMERIS_PATH, pass --ephemeris-path, or place data/de440s.bsp.",
        )
    if p.exists():
        return EphemerisConfig(path=p, skip_reason=None)
    return EphemerisConfig(path=None, skip_reason=f"ephemeris_path not found: {p}")


def resolve_date_range(args: argparse.Namespace) -> Tuple[Optional[date], Optional[date]]:
    if args.start and args.end:
        return parse_date(args.start), parse_date(args.end)
    if args.date:
        d = parse_date(args.date)
        return d, d
    return None, None


def dump_json(obj: object) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2))


def skip(msg: str) -> None:
    print(f"SKIP: {msg}")
    sys.exit(0)
