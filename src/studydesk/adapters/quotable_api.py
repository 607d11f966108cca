"""Quotable API adapter - HTTP client for random quotes."""

import logging

import requests

from studydesk.config import QUOTE_API_URL
from studydesk.core.errors import CollaboratorError
from studydesk.core.records import Quote

logger = logging.getLogger(__name__)


class QuotableAdapter:
    """
    Quotable API adapter.

    Implements QuoteSource protocol. No fallback here - failures are
    raised as CollaboratorError for the quote selector to absorb.
    """

    def __init__(
        self,
        url: str = QUOTE_API_URL,
        timeout: float = 5.0,
        session: requests.Session | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch_random(self, tags: tuple[str, ...]) -> Quote:
        """Fetch a random quote tagged with the given tags."""
        params = {"tags": ",".join(tags)} if tags else {}
        try:
            resp = self._session.get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Quote request failed: {e}")
            raise CollaboratorError(f"Quote request failed: {e}") from e

        if resp.status_code != 200:
            raise CollaboratorError(f"Quote API returned {resp.status_code}: {resp.text[:200]}")

        try:
            data = resp.json()
            # /quotes/random returns a list, /random a single object
            if isinstance(data, list):
                data = data[0]
            return Quote(text=data["content"], author=data.get("author") or "Unknown")
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise CollaboratorError(f"Unexpected quote payload: {e}") from e
