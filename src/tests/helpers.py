"""
Shared helpers for building upstream payloads in tests.
"""

import json
from typing import Any, Dict, List

API_URL = (
    "https://data.taipei/api/v1/dataset/964e936d-d971-4567-a467-aa67b930f98e"
    "?scope=resourceAquire&offset=1316&limit=1000"
)
TEST_CONFIG_TABLE = 'holidaybook-test-config'


def make_record(date: str, name: str = "", is_holiday: Any = "否",
                category: str = "", description: str = "", record_id: int = 1) -> Dict[str, Any]:
    """Build one upstream record."""
    return {
        "_id": record_id,
        "date": date,
        "name": name,
        "isHoliday": is_holiday,
        "holidaycategory": category,
        "description": description,
    }


def make_payload(records: List[Dict[str, Any]]) -> bytes:
    """Wrap records in the data.taipei envelope and encode as UTF-8."""
    document = {
        "result": {
            "limit": 1000,
            "offset": 1316,
            "count": len(records),
            "sort": "",
            "results": records,
        }
    }
    return json.dumps(document, ensure_ascii=False).encode('utf-8')
