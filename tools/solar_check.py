from __future__ import annotations

"""
Solar term check script.

Uses:
- amlich.core.solarterms.solar_terms_for_year / sun_longitude
- amlich.core.providers.skyfield_provider.SkyfieldProvider (with --compare)
"""

import argparse

from amlich.core.julian import ymd_from_jd
from amlich.core.solarterms import solar_terms_for_year, sun_longitude

from tools.common import add_common_args, dump_json, resolve_ephemeris, resolve_tz, setup_logging, skip


def main() -> None:
    parser = argparse.ArgumentParser(description="24 solar terms check")
    add_common_args(parser)
    parser.add_argument("--year", type=int, required=True, help="Gregorian year")
    parser.add_argument("--compare", action="store_true", help="compare longitudes against a JPL ephemeris")
    parser.add_argument("--ephemeris-path", default="")
    args = parser.parse_args()
    setup_logging(args)
    tz = resolve_tz(args)

    provider = None
    if args.compare:
        eph = resolve_ephemeris(args.ephemeris_path)
        if eph.skip_reason:
            skip(eph.skip_reason)
        from amlich.core.providers.skyfield_provider import SkyfieldProvider

        provider = SkyfieldProvider(ephemeris_path=eph.path)

    rows = []
    for term in solar_terms_for_year(args.year, tz):
        y, m, d = ymd_from_jd(term.jd)
        # longitude at local midnight ending the crossing day
        jd_ut = term.jd + 0.5 - tz / 24.0
        row = {
            "index": term.index,
            "longitude": term.longitude,
            "major": term.is_major,
            "date": f"{y:04d}-{m:02d}-{d:02d}",
            "series_deg": round(sun_longitude(term.jd + 0.5, tz), 6),
        }
        if provider is not None:
            ref = provider.sun_longitude_deg(jd_ut)
            row["ephemeris_deg"] = round(ref, 6)
            row["diff_arcmin"] = round(((row["series_deg"] - ref + 180.0) % 360.0 - 180.0) * 60.0, 3)
        rows.append(row)

    if args.json:
        dump_json({"year": args.year, "tz": tz, "terms": rows})
        return

    for r in rows:
        kind = "major" if r["major"] else "minor"
        extra = f"  diff={r['diff_arcmin']:+.3f}'" if "diff_arcmin" in r else ""
        print(f"{r['date']}  term={r['index']:02d} {r['longitude']:5.1f}deg {kind}{extra}")


if __name__ == "__main__":
    main()
