"""Shared pytest fixtures for FairBet engine tests."""

from datetime import datetime, timedelta, timezone

import pytest

from fairbet.config import Settings
from fairbet.lines.models import APIBet, BookPrice
from fairbet.monitoring import configure_logging

NOW = datetime(2026, 1, 15, 19, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Configure structlog for test output."""
    configure_logging("development")


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def test_settings():
    """Settings independent of the developer's environment and .env file."""
    return Settings(
        api_base_url="http://fairbet.test",
        api_key="test_key",
        page_size=500,
        max_concurrent_pages=3,
        request_timeout=5.0,
        allowed_books=[],
        min_books_for_stats=3,
    )


@pytest.fixture
def make_price():
    """Factory for BookPrice objects observed at NOW."""

    def _make(book: str, price: int, **annotations) -> BookPrice:
        return BookPrice(book=book, price=price, observed_at=NOW, **annotations)

    return _make


@pytest.fixture
def make_bet(make_price):
    """Factory for APIBet objects.

    ``prices`` maps book name to American odds. Defaults describe the
    Celtics @ Lakers game used across the suite.
    """

    def _make(
        selection_key: str,
        prices: dict[str, int],
        market_key: str = "h2h",
        line: float | None = None,
        game_id: int = 1001,
        league: str = "NBA",
        home_team: str = "Los Angeles Lakers",
        away_team: str = "Boston Celtics",
        hours_ahead: float = 2,
        **fields,
    ) -> APIBet:
        return APIBet(
            game_id=game_id,
            league_code=league,
            home_team=home_team,
            away_team=away_team,
            game_date=NOW + timedelta(hours=hours_ahead),
            market_key=market_key,
            selection_key=selection_key,
            line_value=line,
            books=[make_price(book, price) for book, price in prices.items()],
            **fields,
        )

    return _make


@pytest.fixture
def moneyline_pair(make_bet):
    """Lakers/Celtics moneyline priced by two sharp books and three soft books."""
    lakers = make_bet(
        "team:los_angeles_lakers",
        {"Pinnacle": 130, "Circa": 128, "DraftKings": 125, "FanDuel": 145, "Novig": 140},
    )
    celtics = make_bet(
        "team:boston_celtics",
        {"Pinnacle": -142, "Circa": -140, "DraftKings": -145, "FanDuel": -160, "Novig": -150},
    )
    return lakers, celtics
