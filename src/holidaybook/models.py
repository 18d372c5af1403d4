"""
Holiday data model.

The upstream dataset marks each day with a localized yes/no glyph, while the
files and HTTP responses we produce use the integers 0 and 1. Reading and
writing therefore go through two separate tables rather than one codec.
"""

import json
from dataclasses import dataclass
from datetime import date, datetime
from enum import IntEnum
from typing import Any, Dict, Iterable, Optional, Tuple, Union

DATE_FORMAT = "%Y%m%d"

# Category used for Saturdays and Sundays that have no dataset entry
WEEKEND_CATEGORY = "星期六、星期日"

# Armed Forces Day is listed as a holiday but is not a day off for the public
ARMED_FORCES_DAY = "軍人節"


class IsHoliday(IntEnum):
    NO = 0
    YES = 1


# Wire glyphs -> enum
IS_HOLIDAY_TOKENS: Dict[str, IsHoliday] = {
    "否": IsHoliday.NO,
    "是": IsHoliday.YES,
}

# Enum -> output integer
IS_HOLIDAY_OUTPUT: Dict[IsHoliday, int] = {
    IsHoliday.NO: 0,
    IsHoliday.YES: 1,
}


def decode_is_holiday(value: Any) -> Optional[IsHoliday]:
    """
    Map an ``isHoliday`` value from a payload to the enum.

    Accepts the upstream glyphs and the integers 0/1 written by
    :func:`encode_is_holiday`. Returns None for anything else so the caller
    can report where the bad value came from.
    """
    if isinstance(value, str):
        return IS_HOLIDAY_TOKENS.get(value)
    if isinstance(value, int) and not isinstance(value, bool):
        for member, number in IS_HOLIDAY_OUTPUT.items():
            if number == value:
                return member
    return None


def encode_is_holiday(value: IsHoliday) -> int:
    return IS_HOLIDAY_OUTPUT[value]


def format_date(day: date) -> str:
    """Format a date as YYYYMMDD."""
    return day.strftime(DATE_FORMAT)


def parse_date(text: str) -> date:
    """
    Parse a YYYYMMDD string.

    strptime alone accepts short fields such as "2024011", so the length and
    digits are checked first.

    Raises:
        ValueError: If text is not exactly 8 ASCII digits forming a valid date
    """
    if not isinstance(text, str) or len(text) != 8 or not text.isascii() or not text.isdigit():
        raise ValueError(f"{text!r} is not YYYYMMDD")
    return datetime.strptime(text, DATE_FORMAT).date()


@dataclass(frozen=True)
class HolidayRecord:
    """One entry of the upstream dataset."""

    date: str
    is_holiday: IsHoliday
    id: int = 0
    name: str = ""
    category: str = ""
    description: str = ""


@dataclass(frozen=True)
class Dataset:
    """
    Parsed upstream dataset.

    ``count``, ``sort``, ``limit`` and ``offset`` are copied from the payload
    for logging only; resolution never looks at them.
    """

    records: Tuple[HolidayRecord, ...] = ()
    count: Optional[int] = None
    sort: str = ""
    limit: Optional[int] = None
    offset: Optional[int] = None

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)


@dataclass(frozen=True)
class ResolvedDay:
    """Effective holiday status of one calendar date."""

    date: str
    is_holiday: IsHoliday = IsHoliday.NO
    id: int = 0
    name: str = ""
    category: str = ""
    description: str = ""

    @property
    def holiday(self) -> bool:
        return self.is_holiday is IsHoliday.YES


def encode_day(day: ResolvedDay) -> Dict[str, Any]:
    """Build the output object for one resolved day."""
    return {
        "_id": day.id,
        "date": day.date,
        "name": day.name,
        "isHoliday": encode_is_holiday(day.is_holiday),
        "holidaycategory": day.category,
        "description": day.description,
    }


def to_json(days: Union[ResolvedDay, Iterable[ResolvedDay]]) -> str:
    """Serialize one day as an object, or several days as an array."""
    if isinstance(days, ResolvedDay):
        payload: Any = encode_day(days)
    else:
        payload = [encode_day(d) for d in days]
    return json.dumps(payload, ensure_ascii=False)
