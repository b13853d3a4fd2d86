from __future__ import annotations

"""
Leap month check script.

Uses:
- amlich.core.leap_month.anchor_window (month-11 anchored windows)
- amlich.core.julian.ymd_from_jd
"""

import argparse

from amlich.core.julian import ymd_from_jd
from amlich.core.leap_month import anchor_window

from tools.common import add_common_args, dump_json, resolve_date_range, resolve_tz, setup_logging


def _years_from_args(args, start, end) -> list[int]:
    if args.year:
        return [int(args.year)]
    if start and end:
        return list(range(start.year, end.year + 1))
    return []


def _iso(jd: int) -> str:
    y, m, d = ymd_from_jd(jd)
    return f"{y:04d}-{m:02d}-{d:02d}"


def main() -> None:
    parser = argparse.ArgumentParser(description="Leap month check (windows between month-11 anchors)")
    add_common_args(parser)
    parser.add_argument("--year", type=int, help="anchor year (Gregorian year of the first month 11)")
    args = parser.parse_args()
    setup_logging(args)

    start, end = resolve_date_range(args)
    years = _years_from_args(args, start, end)
    if not years:
        parser.error("--year or --date or --start/--end required")
    tz = resolve_tz(args)

    out_rows = []
    for year in years:
        w = anchor_window(year, tz)
        dec = w.decision

        leap_info = None
        if dec.leap_span_pos is not None:
            m = w.months[dec.leap_span_pos]
            leap_info = {
                "pos": dec.leap_span_pos,
                "lunar_year": m.year,
                "month_no": m.month,
                "start": _iso(m.start_jd),
            }

        row = {
            "year": year,
            "span_count": w.span_count,
            "leap": leap_info,
            "no_zhongqi_positions": dec.no_zhongqi_positions,
        }
        if args.verbose:
            row["months"] = [
                {
                    "pos": i,
                    "k": m.index,
                    "year": m.year,
                    "month": m.month,
                    "leap": m.is_leap,
                    "start": _iso(m.start_jd),
                    "days": m.length,
                }
                for i, m in enumerate(w.months)
            ]
        out_rows.append(row)

        if not args.json:
            if leap_info is None:
                print(f"{year}: leap=none span_count={w.span_count}")
            else:
                print(
                    f"{year}: leap_pos={leap_info['pos']} month_no={leap_info['month_no']} "
                    f"lunar_year={leap_info['lunar_year']} start={leap_info['start']} span_count={w.span_count}"
                )
            if args.verbose:
                print(f"  no_zh={dec.no_zhongqi_positions}")
                for r in row["months"]:
                    flag = "L" if r["leap"] else " "
                    print(f"  [{r['pos']:02d}] {r['start']}  {r['month']:02d}{flag} ({r['year']}) {r['days']}d")

    if args.json:
        dump_json({"tz": tz, "years": out_rows})


if __name__ == "__main__":
    main()
