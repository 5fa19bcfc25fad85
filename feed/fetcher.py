"""HTTP fetcher for calendar feeds."""
import logging
from typing import Optional

import requests

from processor.exceptions import FetchError

logger = logging.getLogger(__name__)


class FeedFetcher:
    """Retrieves raw feed bytes with a single HTTP GET."""

    USER_AGENT = "calendar-feed/1.0"

    def __init__(self, timeout: Optional[float] = None, session: requests.Session = None):
        """
        Initialize the fetcher.

        Args:
            timeout: HTTP request timeout in seconds (default: transport default)
            session: Optional requests session to reuse
        """
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, url: str) -> bytes:
        """
        Fetch a feed.

        Args:
            url: Feed request URL

        Returns:
            Response body as bytes

        Raises:
            FetchError: On network errors, timeouts and non-2xx responses
        """
        logger.info(f"Fetching calendar feed: {url}")
        try:
            response = self.session.get(
                url,
                headers={'User-Agent': self.USER_AGENT},
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Calendar feed request failed for {url}: {e}")
            raise FetchError(url, str(e)) from e

        logger.info(f"Fetched {len(response.content)} bytes from {url}")
        return response.content
