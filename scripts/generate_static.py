#!/usr/bin/env python3
"""
CLI tool to generate the static holiday JSON files.

Usage:
    python scripts/generate_static.py [--start 2024-01-01] [--end 2026-12-31]

Options:
    --start, -s       First date to generate (default: START_DATE or 2024-01-01)
    --end, -e         Last date to generate (default: today + --years)
    --years, -y       Years after today to generate when --end is omitted
    --output, -o      Output directory (default: OUTPUT_DIRECTORY or docs)
    --test-data, -t   Fallback dataset used when the API is unreachable
"""

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

# Add src directory to path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from dotenv import load_dotenv

# Load environment variables
load_dotenv(Path(__file__).parent.parent / ".env")

from holidaybook.core.generator import StaticGenerator
from holidaybook.errors import HolidayBookError
from holidaybook.logging_config import setup_logging, get_logger
from holidaybook.settings import check_output_directory, get_settings
from holidaybook.source import HolidayApiClient

logger = get_logger(__name__)


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {value!r}")


def _output_dir(value: str) -> str:
    try:
        return check_output_directory(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()

    parser = argparse.ArgumentParser(
        description="Generate static holiday JSON files"
    )
    parser.add_argument("--start", "-s", type=_iso_date, default=None,
                        help="First date to generate (YYYY-MM-DD)")
    parser.add_argument("--end", "-e", type=_iso_date, default=None,
                        help="Last date to generate (YYYY-MM-DD)")
    parser.add_argument("--years", "-y", type=int, default=None,
                        help="Years after today to generate when --end is omitted")
    parser.add_argument("--output", "-o", type=_output_dir, default=None,
                        help="Output directory")
    parser.add_argument("--test-data", "-t", default=None,
                        help="Fallback dataset file used when the API is unreachable")
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except HolidayBookError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    start = args.start or settings.START_DATE
    output_dir = Path(args.output or settings.OUTPUT_DIRECTORY)
    years = args.years if args.years is not None else settings.YEARS_TO_GENERATE

    logger.info("Holiday Book Static Generator")
    logger.info("=" * 50)
    logger.info("Source: %s", settings.HOLIDAY_API_URL)
    logger.info("Output: %s", output_dir)

    try:
        generator = StaticGenerator(
            source=HolidayApiClient.from_settings(settings),
            output_dir=output_dir,
            fallback_path=Path(args.test_data or settings.HOLIDAY_TEST_DATA_PATH),
            years_to_generate=years,
        )
        result = generator.generate(start=start, end=args.end)
    except HolidayBookError as e:
        logger.error("Static generation failed: %s", e, exc_info=True)
        return 1

    logger.info("=" * 50)
    logger.info("Range: %s .. %s", result.start.isoformat(), result.end.isoformat())
    logger.info("Generated %d daily, %d monthly and %d yearly files in '%s'",
                result.day_files, result.month_files, result.year_files, output_dir)
    if result.used_fallback:
        logger.warning("Data came from the fallback file, not the live API")
    return 0


if __name__ == "__main__":
    sys.exit(main())
