from __future__ import annotations

"""
Lunisolar check script.

Uses:
- amlich.core.lunisolar.gregorian_to_lunar_between
"""

import argparse
from datetime import timedelta

from amlich.core.lunisolar import gregorian_to_lunar_between

from tools.common import add_common_args, dump_json, resolve_date_range, resolve_tz, setup_logging


def _format_label(month: int, day: int, is_leap: bool) -> str:
    return f"{month:02d}{'L' if is_leap else ''}/{day:02d}"


def main() -> None:
    parser = argparse.ArgumentParser(description="Gregorian -> lunar check")
    add_common_args(parser)
    args = parser.parse_args()
    setup_logging(args)

    start, end = resolve_date_range(args)
    if start is None or end is None:
        parser.error("--date or --start/--end required")
    tz = resolve_tz(args)

    rows = []
    for cur, l in gregorian_to_lunar_between(start, end + timedelta(days=1), tz):
        label = _format_label(l.month, l.day, l.is_leap)
        if args.json:
            rows.append(
                {
                    "date": cur.isoformat(),
                    "year": l.year,
                    "month": l.month,
                    "day": l.day,
                    "leap": l.is_leap,
                    "label": label,
                }
            )
        else:
            sep = "\n" if rows and l.day == 1 else ""
            print(f"{sep}{cur.isoformat()}  L={label}  year={l.year}")
            rows.append(cur)

    if args.json:
        dump_json({"tz": tz, "rows": rows})


if __name__ == "__main__":
    main()
