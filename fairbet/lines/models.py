"""Pydantic models for odds pages returned by the FairBet odds service.

All prices are American odds integers. Values in the invalid zone (-100, 100)
are auto-corrected on validation, so no model ever holds an invalid price.

Optional server annotations (``ev_percent``, ``true_prob``, ``is_sharp`` on a
book price; ``true_prob``, ``confidence``, ``ev_disabled_reason`` on a bet) are
preferred by the orchestrator over local computation when present.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fairbet.lines.odds import AmericanOdds, american_to_probability, correct_american_odds
from fairbet.monitoring import get_logger

log = get_logger()


class FairBetLeague(str, Enum):
    """Leagues served by the odds service."""

    NBA = "NBA"
    NHL = "NHL"
    NCAAB = "NCAAB"


class MarketKey(str, Enum):
    """Market types on the wire.

    - "h2h": Head-to-head (moneyline)
    - "spreads": Point spread betting
    - "totals": Over/under total points
    """

    H2H = "h2h"
    SPREADS = "spreads"
    TOTALS = "totals"

    @property
    def display_name(self) -> str:
        return {"h2h": "Moneyline", "spreads": "Spread", "totals": "Total"}[self.value]


class BookPrice(BaseModel):
    """Price quote from a single sportsbook.

    Attributes:
        book: Sportsbook name as sent by the service (e.g., "DraftKings")
        price: American odds, auto-corrected into the valid domain
        observed_at: When the price was observed
        ev_percent: Server-computed EV percent for this book, if any
        true_prob: Server-computed fair probability, if any
        is_sharp: Server flag marking the book as a sharp reference
    """

    model_config = ConfigDict(frozen=True)

    book: str
    price: int
    observed_at: datetime
    ev_percent: float | None = None
    true_prob: float | None = None
    is_sharp: bool | None = None

    @field_validator("price", mode="before")
    @classmethod
    def validate_american_odds(cls, v: Any) -> int:
        """Round wire values to integers and snap invalid prices to +/-100.

        Args:
            v: Raw price from the payload

        Returns:
            Valid American odds

        Raises:
            ValueError: If the price is missing, non-numeric or not finite
        """
        if v is None or isinstance(v, bool):
            raise ValueError(f"price must be a number, got {v!r}")
        try:
            value = float(v)
        except (TypeError, ValueError):
            raise ValueError(f"price must be a number, got {v!r}")
        if not math.isfinite(value):
            raise ValueError(f"price must be finite, got {v!r}")
        return correct_american_odds(int(round(value)))

    @property
    def american_odds(self) -> AmericanOdds:
        return AmericanOdds(self.price)

    @property
    def implied_probability(self) -> float:
        return american_to_probability(self.price)


class APIBet(BaseModel):
    """One side of one market for one game, priced by several books.

    Attributes:
        game_id: Service game identifier
        league_code: League code ("NBA", "NHL", ...)
        home_team: Home team display name
        away_team: Away team display name
        game_date: Scheduled start time
        market_key: Market type ("h2h", "spreads", "totals", ...)
        selection_key: Side identifier (e.g., "team:los_angeles_lakers", "total:over")
        line_value: Spread/total line, None for moneylines
        books: Book prices in fetch order
        true_prob: Server fair probability for this side, if annotated
        confidence: Server confidence tier ("high", "medium", "low", "none")
        ev_disabled_reason: Server explanation when EV is not available
    """

    model_config = ConfigDict(frozen=True)

    game_id: int
    league_code: str
    home_team: str
    away_team: str
    game_date: datetime
    market_key: str
    selection_key: str
    line_value: float | None = None
    books: list[BookPrice] = Field(default_factory=list)
    true_prob: float | None = None
    confidence: str | None = None
    ev_disabled_reason: str | None = None

    @field_validator("books", mode="before")
    @classmethod
    def drop_invalid_prices(cls, v: Any) -> Any:
        """Skip book entries whose price cannot be read instead of failing the bet.

        A single malformed quote (null, non-numeric, NaN) must not reject the
        whole page, so such entries are logged and dropped.
        """
        if not isinstance(v, list):
            return v

        books = []
        for entry in v:
            try:
                books.append(BookPrice.model_validate(entry))
            except ValidationError as e:
                book = entry.get("book") if isinstance(entry, dict) else getattr(entry, "book", None)
                log.warning("book_price_dropped", book=book, error=str(e.errors()[0]["msg"]))
        return books

    @property
    def id(self) -> str:
        """Stable identity used for dedup, caching and parlay selection."""
        line = self.line_value if self.line_value is not None else 0.0
        return f"{self.game_id}_{self.market_key}_{self.selection_key}_{line}"

    @property
    def market(self) -> MarketKey | None:
        try:
            return MarketKey(self.market_key)
        except ValueError:
            return None

    @property
    def commence_time(self) -> datetime:
        return self.game_date

    @property
    def selection(self) -> str:
        """Display name of the side parsed from ``selection_key``.

        "team:los_angeles_lakers" resolves to the matching home/away team name,
        "total:over" to "Over". Unknown slugs are title-cased.
        """
        parts = self.selection_key.split(":")
        if len(parts) < 2:
            return self.selection_key

        raw = ":".join(parts[1:])
        if raw == "over":
            return "Over"
        if raw == "under":
            return "Under"

        normalized = raw.replace("_", " ").lower()
        for team in (self.home_team, self.away_team):
            team_lower = team.lower()
            nickname = team_lower.split()[-1] if team_lower.split() else team_lower
            if normalized in team_lower or nickname in normalized:
                return team

        return normalized.title()

    @property
    def matchup_display(self) -> str:
        return f"{self.away_team} @ {self.home_team}"

    @property
    def selection_display(self) -> str:
        if self.line_value:
            sign = "+" if self.line_value > 0 else ""
            return f"{self.selection} {sign}{self.line_value:g}"
        return self.selection

    @property
    def best_book(self) -> BookPrice | None:
        """Book paying the most (highest profit per unit) for this side."""
        if not self.books:
            return None
        return max(self.books, key=lambda b: b.american_odds.profit_per_unit)

    @property
    def has_server_ev(self) -> bool:
        """True when the service pre-computed EV for at least one book."""
        return any(book.ev_percent is not None for book in self.books)

    @property
    def has_server_annotations(self) -> bool:
        """True when the service supplied EV or a fair probability for this side.

        A bet-level ``true_prob`` or a per-book ``true_prob`` is enough: the
        per-book EV can be derived from it without local vig removal.
        """
        if self.has_server_ev or self.true_prob is not None:
            return True
        return any(book.true_prob is not None for book in self.books)

    def filtering_books(self, allowed_books: set[str]) -> "APIBet":
        """Return a copy keeping only books in ``allowed_books`` (case-insensitive)."""
        allowed = {book.lower() for book in allowed_books}
        return self.model_copy(
            update={"books": [b for b in self.books if b.book.lower() in allowed]}
        )


class BetsResponse(BaseModel):
    """One page of bets from ``/api/fairbet/odds``.

    Attributes:
        bets: Bets on this page
        total: Total bets available across all pages
        books_available: Books present in the dataset
    """

    bets: list[APIBet] = Field(default_factory=list)
    total: int = 0
    books_available: list[str] = Field(default_factory=list)
