#!/usr/bin/env python3
"""
CLI tool to look up one date.

Usage:
    python scripts/check_holiday.py 2024-10-10

Prints the same JSON object the Lambda handler returns.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Add src directory to path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from dotenv import load_dotenv

# Load environment variables
load_dotenv(Path(__file__).parent.parent / ".env")

from holidaybook.core.lookup import HolidayLookup, parse_query_date
from holidaybook.errors import HolidayBookError
from holidaybook.logging_config import setup_logging, get_logger
from holidaybook.models import to_json
from holidaybook.settings import get_settings
from holidaybook.source import HolidayApiClient
from holidaybook.store import get_store

logger = get_logger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()

    parser = argparse.ArgumentParser(description="Check whether a date is a holiday in Taiwan")
    parser.add_argument("date", help="YYYY-MM-DD, YYYY/MM/DD or YYYYMMDD")
    args = parser.parse_args(argv)

    try:
        day = parse_query_date(args.date)
    except ValueError as e:
        logger.error("%s", e)
        return 2

    try:
        settings = get_settings()
        lookup = HolidayLookup(
            source=HolidayApiClient.from_settings(settings),
            store=get_store(settings),
            cache_key=settings.CACHE_KEY,
        )
        resolved = lookup.lookup(day)
    except HolidayBookError as e:
        logger.error("Lookup failed: %s", e)
        return 1

    print(to_json(resolved))
    return 0


if __name__ == "__main__":
    sys.exit(main())
