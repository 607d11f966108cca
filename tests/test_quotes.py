"""Tests for quote selection and favorites."""

import random
from datetime import datetime

import pytest

from studydesk.core.errors import CollaboratorError
from studydesk.core.quotes import (
    DEFAULT_TAGS,
    FALLBACK_QUOTES,
    QuoteSelector,
    QuoteState,
    is_duplicate_favorite,
    new_favorite,
    remove_favorite,
    select_quote,
    share_text,
)
from studydesk.core.records import FavoriteQuote, Quote

REMOTE = Quote("Stay hungry, stay foolish.", "Stewart Brand")


def fetch_ok(tags):
    return REMOTE


def fetch_fails(tags):
    raise CollaboratorError("Quote API returned 503")


class TestSelectQuote:
    def test_resolved(self):
        outcome = select_quote(fetch_ok)
        assert outcome.state is QuoteState.RESOLVED
        assert outcome.quote == REMOTE
        assert outcome.error is None
        assert outcome.is_fallback is False

    def test_passes_tags(self):
        seen = []

        def fetch(tags):
            seen.append(tags)
            return REMOTE

        select_quote(fetch, tags=("wisdom",))
        assert seen == [("wisdom",)]

    def test_default_tags(self):
        assert DEFAULT_TAGS == ("education", "wisdom", "success")

    def test_fallback_on_collaborator_error(self):
        outcome = select_quote(fetch_fails)
        assert outcome.state is QuoteState.FALLBACK
        assert outcome.quote in FALLBACK_QUOTES
        assert "503" in outcome.error

    def test_fallback_on_any_exception(self):
        def fetch(tags):
            raise ConnectionError("network unreachable")

        outcome = select_quote(fetch)
        assert outcome.is_fallback
        assert outcome.quote in FALLBACK_QUOTES

    def test_fallback_on_empty_quote(self):
        outcome = select_quote(lambda tags: Quote("  ", "Nobody"))
        assert outcome.is_fallback

    def test_fallback_is_deterministic_with_seeded_rng(self):
        pool = [Quote("a", "A"), Quote("b", "B"), Quote("c", "C")]
        first = select_quote(fetch_fails, pool, random.Random(42)).quote
        second = select_quote(fetch_fails, pool, random.Random(42)).quote
        assert first == second
        assert first in pool

    def test_single_quote_pool(self):
        pool = [Quote("only", "One")]
        assert select_quote(fetch_fails, pool).quote == pool[0]

    def test_empty_pool_rejected(self):
        with pytest.raises(ValueError):
            QuoteSelector(fetch_ok, pool=[])

    def test_fallback_pool_size(self):
        assert len(FALLBACK_QUOTES) == 15


class TestQuoteSelectorStates:
    def test_starts_fetching(self):
        selector = QuoteSelector(fetch_ok)
        assert selector.state is QuoteState.FETCHING
        assert selector.outcome is None

    def test_fetching_while_request_in_flight(self):
        states = []
        selector = None

        def fetch(tags):
            states.append(selector.state)
            return REMOTE

        selector = QuoteSelector(fetch)
        selector.request()
        assert states == [QuoteState.FETCHING]
        assert selector.state is QuoteState.RESOLVED

    def test_refresh_after_fallback(self):
        calls = iter([fetch_fails, fetch_ok])
        selector = QuoteSelector(lambda tags: next(calls)(tags))
        assert selector.request().state is QuoteState.FALLBACK
        assert selector.request().state is QuoteState.RESOLVED
        assert selector.outcome.quote == REMOTE


class TestFavorites:
    @pytest.fixture
    def favorites(self):
        return [
            FavoriteQuote(id="f1", text=REMOTE.text, author=REMOTE.author, saved_at=datetime(2024, 1, 1)),
            FavoriteQuote(id="f2", text="Other", author="Someone"),
        ]

    def test_duplicate_regardless_of_id_and_timestamp(self, favorites):
        assert is_duplicate_favorite(favorites, Quote(REMOTE.text, REMOTE.author)) is True

    def test_same_text_other_author_is_not_duplicate(self, favorites):
        assert is_duplicate_favorite(favorites, Quote(REMOTE.text, "Steve Jobs")) is False

    def test_empty_favorites(self):
        assert is_duplicate_favorite([], REMOTE) is False

    def test_new_favorite(self):
        now = datetime(2024, 1, 8)
        fav = new_favorite("f9", REMOTE, "user1", now)
        assert fav.quote == REMOTE
        assert fav.saved_at == now
        assert fav.owner_id == "user1"

    def test_remove_favorite(self, favorites):
        assert [f.id for f in remove_favorite(favorites, "f1")] == ["f2"]
        assert len(favorites) == 2

    def test_share_text(self):
        assert share_text(REMOTE) == '"Stay hungry, stay foolish." - Stewart Brand'
