from __future__ import annotations

import argparse
import datetime as dt
import json
import logging
from typing import Optional

from badi_core.errors import BadiDateError
from badi_core.occasions import occasions_on
from services.calendar_services import convert_badi, convert_gregorian, year_occasions
from settings import LOG_LEVEL

logger = logging.getLogger(__name__)


def _print_date(badi, as_json: bool) -> None:
    if as_json:
        data = badi.to_dict()
        data["occasions"] = [o.to_dict() for o in badi.occasions()]
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return
    print(f"{badi.long_comma_format()}  ({badi.gregorian_date.isoformat()})")
    for occasion in occasions_on(badi.year.bahai_era, badi.month, badi.day.number):
        print(f"  - {occasion.title}")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Convert dates between the Gregorian and Badi calendars.")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    sub = parser.add_subparsers(dest="command", required=True)

    p_badi = sub.add_parser("to-badi", help="Gregorian date -> Badi date")
    p_badi.add_argument("date", type=dt.date.fromisoformat, help="Gregorian date YYYY-MM-DD")

    p_greg = sub.add_parser("to-gregorian", help="Badi date -> Gregorian date")
    p_greg.add_argument("year", type=int)
    p_greg.add_argument("month", type=int, help="1..19, or -1 for Ayyam-i-Ha")
    p_greg.add_argument("day", type=int)

    p_occ = sub.add_parser("occasions", help="List the occasions of a Badi year")
    p_occ.add_argument("year", type=int)
    p_occ.add_argument("--holy-days", action="store_true", help="Only days on which work is suspended")

    args = parser.parse_args(argv)
    logging.basicConfig(level=LOG_LEVEL.upper(), format="[%(levelname)s] %(message)s")

    try:
        if args.command == "to-badi":
            _print_date(convert_gregorian(args.date), args.json)
        elif args.command == "to-gregorian":
            _print_date(convert_badi(args.year, args.month, args.day), args.json)
        else:
            rows = year_occasions(args.year, work_suspended_only=args.holy_days)
            if args.json:
                payload = [{**r, "occasion": r["occasion"].to_dict()} for r in rows]
                print(json.dumps(payload, ensure_ascii=False, indent=2))
            else:
                for r in rows:
                    print(f"{r['badiDate']:<10} {r['gregorianDate']}  {r['occasion'].title}")
    except BadiDateError as exc:
        logger.error("%s", exc)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
