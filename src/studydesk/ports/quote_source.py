"""Remote quote source interface."""

from typing import Protocol

from studydesk.core.records import Quote


class QuoteSource(Protocol):
    """Interface for fetching a random quote. May fail."""

    def fetch_random(self, tags: tuple[str, ...]) -> Quote:
        """Fetch a random quote matching any of the tags."""
        ...
