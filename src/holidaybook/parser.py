"""
Decoder for the data.taipei holiday dataset.

Expected payload:

    {
        "result": {
            "limit": 1000, "offset": 1316, "count": 400, "sort": "",
            "results": [
                {"_id": 1, "date": "20240101", "name": "開國紀念日",
                 "isHoliday": "是", "holidaycategory": "放假之紀念日及節日",
                 "description": "..."},
                ...
            ]
        }
    }
"""

import json
from typing import Any, Dict, Optional, Union

from holidaybook.errors import ParseError, ParseErrorKind
from holidaybook.models import Dataset, HolidayRecord, decode_is_holiday, parse_date


def parse(raw: Union[bytes, str]) -> Dataset:
    """
    Decode a raw upstream payload into a Dataset.

    Args:
        raw: UTF-8 encoded JSON (bytes) or already decoded text

    Returns:
        Dataset with records in payload order

    Raises:
        ParseError: If the payload is not JSON, lacks ``result.results`` or a
            required record field, or holds an unknown ``isHoliday`` value
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(ParseErrorKind.MALFORMED_JSON, f"payload is not UTF-8: {e}") from e

    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseError(ParseErrorKind.MALFORMED_JSON, str(e)) from e

    if not isinstance(document, dict):
        raise ParseError(ParseErrorKind.MALFORMED_JSON, "top level must be an object")

    result = document.get("result")
    if not isinstance(result, dict):
        raise ParseError(ParseErrorKind.MISSING_FIELD, "missing object 'result'")

    results = result.get("results")
    if not isinstance(results, list):
        raise ParseError(ParseErrorKind.MISSING_FIELD, "'result.results' must be an array")

    records = [_parse_record(index, item) for index, item in enumerate(results)]

    return Dataset(
        records=tuple(records),
        count=_optional_int(result.get("count")),
        sort=result.get("sort") or "",
        limit=_optional_int(result.get("limit")),
        offset=_optional_int(result.get("offset")),
    )


def _parse_record(index: int, item: Any) -> HolidayRecord:
    if not isinstance(item, dict):
        raise ParseError(ParseErrorKind.MISSING_FIELD, f"record {index} is not an object")

    for required in ("date", "isHoliday"):
        if required not in item:
            raise ParseError(ParseErrorKind.MISSING_FIELD, f"record {index} has no '{required}'")

    date_str = item["date"]
    if not isinstance(date_str, str):
        raise ParseError(ParseErrorKind.MISSING_FIELD, f"record {index} 'date' is not a string")
    try:
        parse_date(date_str)
    except ValueError as e:
        raise ParseError(ParseErrorKind.INVALID_DATE, f"record {index} date {date_str!r}: {e}") from e

    is_holiday = decode_is_holiday(item["isHoliday"])
    if is_holiday is None:
        raise ParseError(
            ParseErrorKind.INVALID_ENUM_VALUE,
            f"record {index} isHoliday {item['isHoliday']!r} is not recognized"
        )

    record_id = item.get("_id", 0)
    if record_id is None:
        record_id = 0
    if isinstance(record_id, bool) or not isinstance(record_id, int):
        raise ParseError(ParseErrorKind.MISSING_FIELD, f"record {index} '_id' is not an integer")

    return HolidayRecord(
        id=record_id,
        date=date_str,
        name=_text(item, "name"),
        is_holiday=is_holiday,
        category=_text(item, "holidaycategory"),
        description=_text(item, "description"),
    )


def _text(item: Dict[str, Any], key: str) -> str:
    value = item.get(key)
    if value is None:
        return ""
    return str(value)


def _optional_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None
