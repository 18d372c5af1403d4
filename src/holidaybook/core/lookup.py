"""
Single-date holiday lookup.

Reads the raw dataset from the cache (fetching and caching it on a miss),
parses it once per instance and resolves dates against it.
"""

import time
from datetime import date, datetime
from typing import Callable, Optional

from holidaybook.logging_config import get_logger
from holidaybook.models import Dataset, ResolvedDay
from holidaybook.parser import parse
from holidaybook.resolver import resolve
from holidaybook.source import HolidayApiClient
from holidaybook.store import RawStore

logger = get_logger(__name__)

QUERY_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%Y%m%d")


def parse_query_date(text: Optional[str]) -> date:
    """
    Parse a date given by a caller.

    Accepts YYYY-MM-DD, YYYY/MM/DD and YYYYMMDD.

    Raises:
        ValueError: If text is empty or in none of those formats
    """
    if text is None or not str(text).strip():
        raise ValueError("date is required")

    value = str(text).strip()
    for fmt in QUERY_DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt).date()
        except ValueError:
            continue
        # strptime accepts single-digit fields, the formats above do not
        if parsed.strftime(fmt) == value:
            return parsed

    raise ValueError(f"Unrecognized date: {value!r}")


class HolidayLookup:
    """
    Answer "is this date a holiday?" from the cached dataset.

    The parsed dataset is kept on the instance. When max_age_seconds is set
    it is dropped after that long and the store is read again, so a
    long-lived instance picks up a refreshed cache.
    """

    def __init__(
        self,
        source: HolidayApiClient,
        store: RawStore,
        cache_key: str,
        max_age_seconds: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.source = source
        self.store = store
        self.cache_key = cache_key
        self.max_age_seconds = max_age_seconds
        self.clock = clock
        self._dataset: Optional[Dataset] = None
        self._loaded_at: Optional[float] = None

    def load_raw(self) -> bytes:
        """Read the raw dataset from the cache, fetching it on a miss."""
        raw = self.store.read(self.cache_key)
        if raw is not None:
            logger.info("Loaded dataset from cache", extra={'cache_key': self.cache_key})
            return raw

        raw = self.source.fetch_raw()
        logger.info("Writing dataset to cache", extra={'cache_key': self.cache_key})
        self.store.write(self.cache_key, raw)
        return raw

    def _is_stale(self) -> bool:
        if self._dataset is None:
            return True
        if self.max_age_seconds is None:
            return False
        return self.clock() - self._loaded_at > self.max_age_seconds

    def load_dataset(self) -> Dataset:
        """
        Get the parsed dataset, loading it on first use and after it expires.

        Raises:
            ParseError: If the cached or fetched payload cannot be decoded
            UpstreamError: If the dataset is not cached and cannot be fetched
        """
        if self._is_stale():
            dataset = parse(self.load_raw())
            logger.info(
                "Parsed holiday dataset",
                extra={'records': len(dataset), 'declared_count': dataset.count}
            )
            self._dataset = dataset
            self._loaded_at = self.clock()
        return self._dataset

    def lookup(self, day: date) -> ResolvedDay:
        resolved = resolve(self.load_dataset(), day)
        logger.info(
            "Resolved date",
            extra={'date': resolved.date, 'is_holiday': int(resolved.is_holiday)}
        )
        return resolved
