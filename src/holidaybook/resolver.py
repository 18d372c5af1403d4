"""
Holiday resolution: effective status of a calendar date.
"""

from dataclasses import replace
from datetime import date, timedelta
from typing import Dict, List, Optional

from holidaybook.errors import InvalidRangeError
from holidaybook.models import (
    ARMED_FORCES_DAY,
    WEEKEND_CATEGORY,
    Dataset,
    HolidayRecord,
    IsHoliday,
    ResolvedDay,
    format_date,
)


def resolve(dataset: Dataset, day: date) -> ResolvedDay:
    """
    Resolve the holiday status of one date.

    The first record whose date matches wins. Dates with no record are not
    holidays; weekends get the weekend category.
    """
    key = format_date(day)
    match = next((r for r in dataset.records if r.date == key), None)
    return _resolved(day, key, match)


def resolve_range(dataset: Dataset, start: date, end: date) -> List[ResolvedDay]:
    """
    Resolve every date from start to end inclusive, ascending.

    Raises:
        InvalidRangeError: If start is after end
    """
    if start > end:
        raise InvalidRangeError(f"start {start.isoformat()} is after end {end.isoformat()}")

    # First match per date, same tie-break as resolve()
    index: Dict[str, HolidayRecord] = {}
    for record in dataset.records:
        index.setdefault(record.date, record)

    days: List[ResolvedDay] = []
    current = start
    while current <= end:
        key = format_date(current)
        days.append(_resolved(current, key, index.get(key)))
        current += timedelta(days=1)
    return days


def _resolved(day: date, key: str, record: Optional[HolidayRecord]) -> ResolvedDay:
    if record is None:
        return ResolvedDay(
            date=key,
            is_holiday=IsHoliday.NO,
            category=WEEKEND_CATEGORY if day.weekday() >= 5 else "",
        )

    resolved = ResolvedDay(
        id=record.id,
        date=record.date,
        name=record.name,
        is_holiday=record.is_holiday,
        category=record.category,
        description=record.description,
    )
    if resolved.name == ARMED_FORCES_DAY:
        resolved = replace(resolved, is_holiday=IsHoliday.NO)
    return resolved
