"""
AWS Lambda handler entry point for the holiday lookup API.

Invoked through API Gateway (proxy integration):
- GET  /check-holiday?date=2024-01-01
- POST /check-holiday with body {"date": "2024-01-01"}

Handlers:
- handler: Single-date holiday lookup
"""

import base64
import json
import os
import sys
from typing import Any, Dict, Optional

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

# Setup logging - must be done before importing other modules
from holidaybook.logging_config import setup_logging, get_logger

# Initialize logging for Lambda (JSON format for CloudWatch Insights)
setup_logging(json_format=True)
logger = get_logger(__name__)

JSON_HEADERS = {'Content-Type': 'application/json; charset=utf-8'}

# Reused across invocations of a warm container
_lookup = None


def get_lookup():
    """Build the lookup service once per container."""
    global _lookup
    if _lookup is None:
        from holidaybook.core.lookup import HolidayLookup
        from holidaybook.settings import get_settings
        from holidaybook.source import HolidayApiClient
        from holidaybook.store import get_store

        settings = get_settings()
        _lookup = HolidayLookup(
            source=HolidayApiClient.from_settings(settings),
            store=get_store(settings),
            cache_key=settings.CACHE_KEY,
            max_age_seconds=settings.CACHE_MAX_AGE_SECONDS,
        )
    return _lookup


def reset_lookup() -> None:
    """Drop the cached lookup service (used by tests)."""
    global _lookup
    _lookup = None


def _response(status_code: int, body: Any) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': dict(JSON_HEADERS),
        'body': body if isinstance(body, str) else json.dumps(body, ensure_ascii=False),
    }


def _error(status_code: int, error: str, message: str) -> Dict[str, Any]:
    return _response(status_code, {'error': error, 'error_message': message})


def _requested_date(event: Dict[str, Any]) -> Optional[str]:
    """Pull the date from the query string, falling back to a JSON body."""
    params = event.get('queryStringParameters') or {}
    if params.get('date'):
        return params['date']

    body = event.get('body')
    if not body:
        return None
    # binascii.Error, UnicodeDecodeError and JSONDecodeError are all ValueErrors
    try:
        if event.get('isBase64Encoded'):
            body = base64.b64decode(body).decode('utf-8')
        payload = json.loads(body)
    except ValueError:
        return None
    if isinstance(payload, dict) and payload.get('date'):
        return str(payload['date'])
    return None


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Holiday lookup Lambda handler.

    Event parameters:
    - queryStringParameters.date or JSON body "date": YYYY-MM-DD, YYYY/MM/DD or YYYYMMDD
    - dry_run: bool - Return without loading data (for smoke tests)

    Returns:
        API Gateway response:
        - 200: Resolved day as JSON
        - 400: Missing or invalid date
        - 500: Dataset could not be fetched or parsed
    """
    event = event or {}
    logger.info("Holiday lookup invoked", extra={'event_keys': list(event.keys())})

    if event.get('dry_run'):
        logger.info("Dry run requested, returning success")
        return _response(200, {'dry_run': True, 'status': 'ok'})

    from holidaybook.core.lookup import parse_query_date
    from holidaybook.models import encode_day

    date_str = _requested_date(event)
    try:
        day = parse_query_date(date_str)
    except ValueError as e:
        logger.warning("Rejected request", extra={'date': date_str, 'error_message': str(e)})
        return _error(400, 'InvalidDate', str(e))

    logger.info("Query for date", extra={'date': day.isoformat()})

    try:
        resolved = get_lookup().lookup(day)
        return _response(200, encode_day(resolved))

    except Exception as e:
        logger.error(
            "Holiday lookup failed",
            extra={'error': type(e).__name__, 'error_message': str(e)},
            exc_info=True
        )
        return _error(500, type(e).__name__, str(e))
