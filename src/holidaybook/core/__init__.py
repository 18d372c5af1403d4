"""
Core business logic for holidaybook.

These modules wire the parser, resolver and aggregator to the data source
and cache, and are invoked from both the Lambda handler and the CLI scripts.
"""

from .generator import GenerationResult, StaticGenerator, default_end_date
from .lookup import HolidayLookup, parse_query_date

__all__ = [
    "GenerationResult",
    "HolidayLookup",
    "StaticGenerator",
    "default_end_date",
    "parse_query_date",
]
