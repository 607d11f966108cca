"""Quote of the day selection and favorite dedup - no I/O dependencies."""

import random
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

from .records import FavoriteQuote, Quote

DEFAULT_TAGS = ("education", "wisdom", "success")

FALLBACK_QUOTES = [
    Quote("The beautiful thing about learning is that no one can take it away from you.", "B.B. King"),
    Quote("Education is the most powerful weapon which you can use to change the world.", "Nelson Mandela"),
    Quote(
        "The more that you read, the more things you will know. "
        "The more that you learn, the more places you'll go.",
        "Dr. Seuss",
    ),
    Quote("Live as if you were to die tomorrow. Learn as if you were to live forever.", "Mahatma Gandhi"),
    Quote("The mind is not a vessel to be filled, but a fire to be kindled.", "Plutarch"),
    Quote("You don't have to be great to start, but you have to start to be great.", "Zig Ziglar"),
    Quote("The expert in anything was once a beginner.", "Helen Hayes"),
    Quote("The only person who is educated is the one who has learned how to learn and change.", "Carl Rogers"),
    Quote("Education is not preparation for life; education is life itself.", "John Dewey"),
    Quote("The difference between ordinary and extraordinary is that little extra.", "Jimmy Johnson"),
    Quote("Believe you can and you're halfway there.", "Theodore Roosevelt"),
    Quote("Your time is limited, don't waste it living someone else's life.", "Steve Jobs"),
    Quote("Failure is the opportunity to begin again more intelligently.", "Henry Ford"),
    Quote("The future belongs to those who believe in the beauty of their dreams.", "Eleanor Roosevelt"),
    Quote(
        "Success is not final, failure is not fatal: It is the courage to continue that counts.",
        "Winston Churchill",
    ),
]


class QuoteState(Enum):
    """Where a quote request currently stands."""

    FETCHING = "fetching"
    RESOLVED = "resolved"  # Remote source answered
    FALLBACK = "fallback"  # Local pool used after a failure


@dataclass
class QuoteOutcome:
    """Result of a quote request. ``quote`` is always set."""

    state: QuoteState
    quote: Quote
    error: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.state is QuoteState.FALLBACK


class QuoteSelector:
    """
    Fetches a quote from a remote source, falling back to a local pool.

    ``fetch`` is any callable taking a tuple of tags and returning a Quote;
    whatever it raises is absorbed and turned into a FALLBACK outcome.
    """

    def __init__(
        self,
        fetch: Callable[[tuple[str, ...]], Quote],
        pool: list[Quote] | None = None,
        rng: random.Random | None = None,
        tags: tuple[str, ...] = DEFAULT_TAGS,
    ):
        self.fetch = fetch
        self.pool = list(pool) if pool is not None else list(FALLBACK_QUOTES)
        if not self.pool:
            raise ValueError("Fallback quote pool must contain at least one quote")
        self.rng = rng or random.Random()
        self.tags = tags
        self.state = QuoteState.FETCHING
        self.outcome: QuoteOutcome | None = None

    def fallback(self, error: str) -> QuoteOutcome:
        quote = self.rng.choice(self.pool)
        return self._settle(QuoteOutcome(QuoteState.FALLBACK, quote, error))

    def request(self) -> QuoteOutcome:
        self.state = QuoteState.FETCHING
        try:
            quote = self.fetch(self.tags)
        except Exception as e:
            return self.fallback(f"{type(e).__name__}: {e}")

        if not isinstance(quote, Quote) or not quote.text.strip():
            return self.fallback("Quote source returned an empty quote")
        return self._settle(QuoteOutcome(QuoteState.RESOLVED, quote))

    def _settle(self, outcome: QuoteOutcome) -> QuoteOutcome:
        self.state = outcome.state
        self.outcome = outcome
        return outcome


def select_quote(
    fetch: Callable[[tuple[str, ...]], Quote],
    pool: list[Quote] | None = None,
    rng: random.Random | None = None,
    tags: tuple[str, ...] = DEFAULT_TAGS,
) -> QuoteOutcome:
    """One-shot quote request. Never raises on fetch failure."""
    return QuoteSelector(fetch, pool, rng, tags).request()


def is_duplicate_favorite(favorites: list[FavoriteQuote], candidate: Quote) -> bool:
    """True if some favorite has the same text and author, whatever its id or timestamp."""
    return any(f.text == candidate.text and f.author == candidate.author for f in favorites)


def new_favorite(id: str, quote: Quote, owner_id: str, saved_at: datetime) -> FavoriteQuote:
    return FavoriteQuote(id=id, text=quote.text, author=quote.author, saved_at=saved_at, owner_id=owner_id)


def remove_favorite(favorites: list[FavoriteQuote], favorite_id: str) -> list[FavoriteQuote]:
    return [f for f in favorites if f.id != favorite_id]


def share_text(quote: Quote) -> str:
    return f'"{quote.text}" - {quote.author}'
