"""
CLI wrapper for compute_profile().

Usage:
    python3 wuxing/run.py --birth-date YYYY-MM-DD
    python3 wuxing/run.py --birth-year 2000 --birth-month 5 --birth-day 15
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from wuxing.bazi import BirthDate, compute_profile

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser():
    parser = argparse.ArgumentParser(description="Compute a five-element profile from a birth date.")
    parser.add_argument("--birth-date", dest="birth_date", help="YYYY-MM-DD")
    parser.add_argument("--birth-year", dest="birth_year", type=int)
    parser.add_argument("--birth-month", dest="birth_month", type=int, help="1-12")
    parser.add_argument("--birth-day", dest="birth_day", type=int, help="1-31")
    parser.add_argument("--log-level", dest="log_level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def parse_birth_date(parser, args) -> BirthDate:
    parts = (args.birth_year, args.birth_month, args.birth_day)
    if args.birth_date is not None:
        if any(p is not None for p in parts):
            parser.error("use either --birth-date or --birth-year/--birth-month/--birth-day, not both")
        try:
            return BirthDate.from_string(args.birth_date)
        except ValueError as e:
            parser.error(str(e))
    if any(p is None for p in parts):
        parser.error("--birth-date or all of --birth-year, --birth-month, --birth-day are required")
    return BirthDate(*parts)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    birth_date = parse_birth_date(parser, args)
    result = compute_profile(birth_date)

    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
