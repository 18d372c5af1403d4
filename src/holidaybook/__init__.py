"""
holidaybook - Taiwan public holiday lookup.

Parse the data.taipei holiday dataset:
    from holidaybook import parse

    dataset = parse(raw_bytes)

Resolve dates:
    from holidaybook import resolve, resolve_range

    day = resolve(dataset, date(2024, 1, 1))
    days = resolve_range(dataset, date(2024, 1, 1), date(2024, 12, 31))

Group and serialize:
    from holidaybook import aggregate_by_month, to_json

    for month, month_days in aggregate_by_month(days).items():
        print(month, to_json(month_days))
"""

from .aggregator import aggregate_by_month, aggregate_by_year
from .errors import (
    ConfigurationError,
    HolidayBookError,
    InternalInvariantViolation,
    InvalidRangeError,
    ParseError,
    ParseErrorKind,
    UpstreamError,
)
from .models import (
    Dataset,
    HolidayRecord,
    IsHoliday,
    ResolvedDay,
    decode_is_holiday,
    encode_day,
    encode_is_holiday,
    to_json,
)
from .parser import parse
from .resolver import resolve, resolve_range

__version__ = "0.1.0"
__all__ = [
    "aggregate_by_month",
    "aggregate_by_year",
    "ConfigurationError",
    "HolidayBookError",
    "InternalInvariantViolation",
    "InvalidRangeError",
    "ParseError",
    "ParseErrorKind",
    "UpstreamError",
    "Dataset",
    "HolidayRecord",
    "IsHoliday",
    "ResolvedDay",
    "decode_is_holiday",
    "encode_day",
    "encode_is_holiday",
    "to_json",
    "parse",
    "resolve",
    "resolve_range",
]
