"""
Group resolved days by month and by year.
"""

from datetime import date
from typing import Callable, Dict, Iterable, List, TypeVar

from holidaybook.errors import InternalInvariantViolation
from holidaybook.models import ResolvedDay, parse_date

K = TypeVar("K")


def aggregate_by_month(days: Iterable[ResolvedDay]) -> Dict[str, List[ResolvedDay]]:
    """
    Group days under "YYYY-MM" keys.

    Groups come back in ascending key order, each sorted by date.

    Raises:
        InternalInvariantViolation: If a day's date is not YYYYMMDD
    """
    return _group(days, lambda d: f"{d.year:04d}-{d.month:02d}")


def aggregate_by_year(days: Iterable[ResolvedDay]) -> Dict[int, List[ResolvedDay]]:
    """Group days under their year, same ordering as aggregate_by_month."""
    return _group(days, lambda d: d.year)


def _group(days: Iterable[ResolvedDay], key_of: Callable[[date], K]) -> Dict[K, List[ResolvedDay]]:
    groups: Dict[K, List[ResolvedDay]] = {}
    for day in days:
        groups.setdefault(key_of(_parse_day(day)), []).append(day)

    # sorted() is stable, so duplicate dates keep their input order
    return {key: sorted(groups[key], key=lambda d: d.date) for key in sorted(groups)}


def _parse_day(day: ResolvedDay) -> date:
    try:
        return parse_date(day.date)
    except ValueError as e:
        raise InternalInvariantViolation(
            f"resolved day has unparseable date {day.date!r}"
        ) from e
