"""Deterministic mock odds pages for development, demos and tests.

Every game is priced by two sharp books and several soft books around a known
fair probability, so the engine produces HIGH confidence fair odds and a
handful of soft-book prices with positive EV. One NCAAB moneyline is listed
without its opposite side to exercise the "EV unavailable" path.

Usage:
    provider = MockDataProvider()
    page = await provider.fetch_odds(limit=500, offset=0)
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fairbet.lines.models import APIBet, BetsResponse, BookPrice, FairBetLeague
from fairbet.lines.odds import probability_to_american

# Books quoted on every mock market, in fetch order
MOCK_SPORTSBOOKS = [
    "Pinnacle",
    "Circa",
    "DraftKings",
    "FanDuel",
    "BetMGM",
    "Caesars",
    "Novig",
]

# Per-book (margin, skew): margin is split across both sides, skew shifts
# probability from the first side to the second
_BOOK_PRICING = {
    "Pinnacle": (0.02, 0.0),
    "Circa": (0.025, 0.004),
    "DraftKings": (0.045, 0.015),
    "FanDuel": (0.045, -0.03),
    "BetMGM": (0.05, 0.02),
    "Caesars": (0.045, -0.01),
    "Novig": (0.01, 0.025),
}


@dataclass(frozen=True)
class MockGame:
    """Scheduled game with the fair probabilities used to price it."""

    game_id: int
    league: FairBetLeague
    home_team: str
    away_team: str
    hours_ahead: float
    home_win_prob: float
    home_spread: float
    total: float


MOCK_GAMES = [
    MockGame(1001, FairBetLeague.NBA, "Los Angeles Lakers", "Boston Celtics", 2, 0.42, 3.5, 224.5),
    MockGame(1002, FairBetLeague.NBA, "Denver Nuggets", "Phoenix Suns", 3, 0.61, -4.5, 229.5),
    MockGame(1003, FairBetLeague.NBA, "Miami Heat", "New York Knicks", 26, 0.48, 1.5, 211.5),
    MockGame(2001, FairBetLeague.NHL, "Toronto Maple Leafs", "Montreal Canadiens", 4, 0.63, -1.5, 6.5),
    MockGame(2002, FairBetLeague.NHL, "Edmonton Oilers", "Calgary Flames", 28, 0.57, -1.5, 6.5),
    MockGame(3001, FairBetLeague.NCAAB, "Duke Blue Devils", "North Carolina Tar Heels", 5, 0.55, -2.5, 148.5),
]

# Moneyline listed with one side only
ONE_SIDED_GAME = MockGame(
    3002, FairBetLeague.NCAAB, "Kansas Jayhawks", "Baylor Bears", 30, 0.58, -3.0, 141.5
)


def _slug(team: str) -> str:
    return team.lower().replace(" ", "_")


def _price_pair(fair_prob: float, book: str) -> tuple[int, int]:
    """Quote both sides of a market with the book's margin and skew."""
    margin, skew = _BOOK_PRICING[book]
    first = min(max(fair_prob + margin / 2 - skew, 0.02), 0.98)
    second = min(max(1.0 - fair_prob + margin / 2 + skew, 0.02), 0.98)
    return probability_to_american(first), probability_to_american(second)


class MockDataProvider:
    """Page source serving a fixed, deterministic set of mock bets.

    Implements the same ``fetch_odds`` interface as FairBetAPIClient.

    Attributes:
        now: Anchor time for game start times and observations
        delay: Simulated latency per page in seconds
    """

    def __init__(self, now: datetime | None = None, delay: float = 0.0) -> None:
        self.now = now or datetime.now(timezone.utc)
        self.delay = delay

    @property
    def sportsbooks(self) -> list[str]:
        return list(MOCK_SPORTSBOOKS)

    def _bet(
        self,
        game: MockGame,
        market_key: str,
        selection_key: str,
        line: float | None,
        prices: list[int],
    ) -> APIBet:
        return APIBet(
            game_id=game.game_id,
            league_code=game.league.value,
            home_team=game.home_team,
            away_team=game.away_team,
            game_date=self.now + timedelta(hours=game.hours_ahead),
            market_key=market_key,
            selection_key=selection_key,
            line_value=line,
            books=[
                BookPrice(book=book, price=price, observed_at=self.now)
                for book, price in zip(MOCK_SPORTSBOOKS, prices)
            ],
        )

    def _game_bets(self, game: MockGame) -> list[APIBet]:
        home_key = f"team:{_slug(game.home_team)}"
        away_key = f"team:{_slug(game.away_team)}"

        markets = [
            # (market, fair prob of first side, first key, second key, first line, second line)
            ("h2h", game.home_win_prob, home_key, away_key, None, None),
            ("spreads", 0.5, home_key, away_key, game.home_spread, -game.home_spread),
            ("totals", 0.5, "total:over", "total:under", game.total, game.total),
        ]

        bets = []
        for market_key, fair_prob, first_key, second_key, first_line, second_line in markets:
            quotes = [_price_pair(fair_prob, book) for book in MOCK_SPORTSBOOKS]
            bets.append(self._bet(game, market_key, first_key, first_line, [q[0] for q in quotes]))
            bets.append(self._bet(game, market_key, second_key, second_line, [q[1] for q in quotes]))
        return bets

    def get_mock_bets(self, league: FairBetLeague | str | None = None) -> list[APIBet]:
        """All mock bets, optionally restricted to one league."""
        bets: list[APIBet] = []
        for game in MOCK_GAMES:
            bets.extend(self._game_bets(game))

        one_sided = ONE_SIDED_GAME
        quotes = [_price_pair(one_sided.home_win_prob, book) for book in MOCK_SPORTSBOOKS]
        bets.append(
            self._bet(
                one_sided,
                "h2h",
                f"team:{_slug(one_sided.home_team)}",
                None,
                [q[0] for q in quotes],
            )
        )

        if league is not None:
            code = str(getattr(league, "value", league)).upper()
            bets = [bet for bet in bets if bet.league_code.upper() == code]
        return bets

    def get_mock_bets_response(self) -> BetsResponse:
        bets = self.get_mock_bets()
        return BetsResponse(bets=bets, total=len(bets), books_available=self.sportsbooks)

    async def fetch_odds(
        self,
        league: FairBetLeague | str | None = None,
        limit: int = 500,
        offset: int = 0,
    ) -> BetsResponse:
        """Serve one page of mock bets.

        Args:
            league: Optional league filter
            limit: Bets per page
            offset: Bets to skip

        Returns:
            BetsResponse slice with the full dataset size as ``total``
        """
        if self.delay:
            await asyncio.sleep(self.delay)
        bets = self.get_mock_bets(league)
        return BetsResponse(
            bets=bets[offset : offset + limit],
            total=len(bets),
            books_available=self.sportsbooks,
        )
