"""
Default HTTP fetcher: GET a URL and hand back the raw response body.

Anything with a ``fetch(url) -> bytes`` method can stand in for it.
"""

import logging
import time
from typing import Optional

import requests

from .errors import TransportError
from .query import redact

logger = logging.getLogger(__name__)

USER_AGENT = "eveapi-python (+https://github.com/eveapi/eveapi)"


class HttpFetcher:
    """Fetch XML documents over HTTP with simple retry logic."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay

    def fetch(self, url: str) -> bytes:
        """
        Download one document.

        5xx responses and request exceptions are retried with a linear
        backoff. A 4xx response that still carries an API document is
        returned, since the document holds the error code and message.

        Raises:
            TransportError: If every attempt failed.
        """
        last_error: Optional[Exception] = None
        for attempt in range(self.max_retries):
            if attempt > 0:
                time.sleep(self.retry_delay * attempt)
            try:
                logger.debug(f"GET {redact(url)} (attempt {attempt + 1})")
                response = self.session.get(
                    url, headers={"User-Agent": USER_AGENT}, timeout=self.timeout
                )
                if 400 <= response.status_code < 500 and b"<eveapi" in response.content:
                    return response.content
                response.raise_for_status()
                return response.content
            except requests.HTTPError as e:
                last_error = e
                if e.response is not None and e.response.status_code < 500:
                    break
                logger.warning(f"HTTP error for {redact(url)}: {e}")
            except requests.RequestException as e:
                last_error = e
                logger.warning(f"Request failed for {redact(url)}: {e}")

        raise TransportError(f"Request to {redact(url)} failed: {last_error}") from last_error
