"""
Static holiday site generator.

Writes one JSON file per day (YYYY-MM-DD.json), per month (YYYY-MM.json)
and per year (YYYY.json) into an output directory that is recreated on
every run. Can be invoked from the CLI script or any other batch driver.
"""

import shutil
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Dict, Optional

from holidaybook.aggregator import aggregate_by_month, aggregate_by_year
from holidaybook.errors import ConfigurationError, UpstreamError
from holidaybook.logging_config import get_logger
from holidaybook.models import Dataset, parse_date, to_json
from holidaybook.parser import parse
from holidaybook.resolver import resolve_range
from holidaybook.settings import check_output_directory
from holidaybook.source import HolidayApiClient

logger = get_logger(__name__)


def default_end_date(today: date, years: int) -> date:
    """Same month and day, `years` later (Feb 29 becomes Feb 28)."""
    try:
        return today.replace(year=today.year + years)
    except ValueError:
        return today.replace(year=today.year + years, day=28)


@dataclass
class GenerationResult:
    start: date
    end: date
    records: int
    day_files: int
    month_files: int
    year_files: int
    used_fallback: bool

    def to_dict(self) -> Dict[str, object]:
        return {
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'records': self.records,
            'day_files': self.day_files,
            'month_files': self.month_files,
            'year_files': self.year_files,
            'used_fallback': self.used_fallback,
        }


class StaticGenerator:
    """
    Generates the static holiday JSON files.

    Args:
        source: Upstream API client
        output_dir: Directory to (re)create and fill
        fallback_path: Local copy of the dataset used when the API is down
        years_to_generate: Default range length when no end date is given
        today: Clock used for the default range end

    Raises:
        ConfigurationError: If output_dir is unsafe to delete (empty, a root,
            contains "..", or is the working directory or one of its parents)
    """

    def __init__(
        self,
        source: HolidayApiClient,
        output_dir: Path,
        fallback_path: Optional[Path] = None,
        years_to_generate: int = 2,
        today: Callable[[], date] = date.today
    ):
        self.source = source
        self.output_dir = self._checked_output_dir(output_dir)
        self.fallback_path = Path(fallback_path) if fallback_path else None
        self.years_to_generate = years_to_generate
        self.today = today
        self._used_fallback = False

    @staticmethod
    def _checked_output_dir(output_dir) -> Path:
        try:
            check_output_directory(str(output_dir))
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        path = Path(output_dir)
        cwd = Path.cwd().resolve()
        resolved = path.resolve()
        if resolved == cwd or resolved in cwd.parents:
            raise ConfigurationError(
                f"output directory {str(output_dir)!r} contains the working directory"
            )
        return path

    def fetch_dataset(self) -> Dataset:
        """
        Fetch and parse the dataset, falling back to the local copy.

        Raises:
            UpstreamError: If the API fails and there is no fallback file
            ParseError: If the payload cannot be decoded
        """
        self._used_fallback = False
        try:
            raw = self.source.fetch_raw()
        except UpstreamError as e:
            if self.fallback_path is None or not self.fallback_path.is_file():
                raise
            logger.warning(
                "Failed to fetch from API, using fallback data",
                extra={'error_message': str(e), 'fallback_path': str(self.fallback_path)}
            )
            raw = self.fallback_path.read_bytes()
            self._used_fallback = True

        dataset = parse(raw)
        logger.info("Fetched holiday records", extra={'records': len(dataset)})
        return dataset

    def _path(self, name: str) -> Path:
        base = self.output_dir.resolve()
        path = (base / name).resolve()
        if path.parent != base:
            raise ValueError(f"Output file {name!r} escapes {base}")
        return path

    def _reset_output_dir(self) -> None:
        if self.output_dir.exists():
            shutil.rmtree(self.output_dir)
        self.output_dir.mkdir(parents=True)

    def _write(self, name: str, content: str) -> None:
        self._path(name).write_text(content, encoding='utf-8')

    def generate(
        self,
        start: date,
        end: Optional[date] = None,
        dataset: Optional[Dataset] = None
    ) -> GenerationResult:
        """
        Resolve the range and write all files.

        Args:
            start: First date to generate
            end: Last date (inclusive). Defaults to today + years_to_generate.
            dataset: Pre-parsed dataset. Fetched when not given.

        Raises:
            InvalidRangeError: If start is after end
        """
        self._used_fallback = False

        if end is None:
            end = default_end_date(self.today(), self.years_to_generate)

        if dataset is None:
            dataset = self.fetch_dataset()

        # Resolve before touching the output directory so a bad range keeps the old files
        days = resolve_range(dataset, start, end)

        self._reset_output_dir()

        for day in days:
            self._write(f"{parse_date(day.date).isoformat()}.json", to_json(day))

        months = aggregate_by_month(days)
        for month, month_days in months.items():
            self._write(f"{month}.json", to_json(month_days))

        years = aggregate_by_year(days)
        for year, year_days in years.items():
            self._write(f"{year:04d}.json", to_json(year_days))

        result = GenerationResult(
            start=start,
            end=end,
            records=len(dataset),
            day_files=len(days),
            month_files=len(months),
            year_files=len(years),
            used_fallback=self._used_fallback,
        )
        logger.info("Static generation complete", extra=result.to_dict())
        return result
