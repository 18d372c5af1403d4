"""
Client for the data.taipei holiday dataset API.

The client is built once by the caller (Lambda container or CLI run) and
passed to whatever needs it.
"""

import time
from typing import Optional

import requests

from holidaybook.errors import UpstreamError
from holidaybook.logging_config import get_logger
from holidaybook.settings import Settings

logger = get_logger(__name__)

# Status codes worth retrying; other 4xx answers fail straight away
RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class HolidayApiClient:
    """
    Fetches the raw holiday dataset.

    Retries connection errors, timeouts, 429 and 5xx with exponential
    backoff. The body is returned untouched; decoding is the parser's job.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_base: float = 1.0,
        max_backoff: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        self.url = url
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.backoff_base = backoff_base
        self.max_backoff = max_backoff
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "HolidayApiClient":
        return cls(
            url=settings.HOLIDAY_API_URL,
            timeout=settings.HOLIDAY_API_TIMEOUT,
            max_retries=settings.HOLIDAY_API_MAX_RETRIES,
        )

    def _backoff(self, attempt: int) -> float:
        return min(self.backoff_base * (2 ** attempt), self.max_backoff)

    def fetch_raw(self) -> bytes:
        """
        Download the dataset.

        Returns:
            Response body as bytes

        Raises:
            UpstreamError: If every attempt failed or the API refused the request
        """
        last_error: Optional[str] = None
        last_status: Optional[int] = None

        for attempt in range(self.max_retries):
            try:
                logger.info(
                    "Fetching holiday dataset",
                    extra={'url': self.url, 'attempt': attempt + 1}
                )
                response = self.session.get(self.url, timeout=self.timeout)
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                last_error = f"{type(e).__name__}: {e}"
                last_status = None
            except requests.exceptions.RequestException as e:
                raise UpstreamError(f"Request failed: {e}") from e
            else:
                if response.status_code < 400:
                    logger.info(
                        "Fetched holiday dataset",
                        extra={'bytes': len(response.content), 'status_code': response.status_code}
                    )
                    return response.content

                last_status = response.status_code
                last_error = f"HTTP {response.status_code}"
                if response.status_code not in RETRYABLE_STATUS:
                    raise UpstreamError(
                        f"Holiday API answered {response.status_code}",
                        status_code=response.status_code
                    )

            if attempt + 1 < self.max_retries:
                wait_time = self._backoff(attempt)
                logger.warning(
                    "Holiday API error: %s. Waiting %.1fs (retry %d/%d)",
                    last_error, wait_time, attempt + 1, self.max_retries - 1
                )
                time.sleep(wait_time)

        raise UpstreamError(
            f"Max retries exceeded: {last_error}",
            status_code=last_status
        )
