"""Bet groups: the atomic wagering proposition, independent of any sportsbook.

A BetGroup holds the mutually exclusive selections of one market (home/away,
over/under). Books only supply prices for a group; they do not define it.
"""

from dataclasses import dataclass, field
from enum import Enum

from fairbet.lines.keys import build_bet_group_key, build_selection_key, format_line
from fairbet.lines.models import BookPrice


class SelectionSide(str, Enum):
    """Side of a selection within a bet group."""

    HOME = "home"
    AWAY = "away"
    OVER = "over"
    UNDER = "under"
    DRAW = "draw"

    @property
    def paired_side(self) -> "SelectionSide | None":
        """Opposite side, or None for sides without a direct pair (draw)."""
        return _PAIRED_SIDES.get(self)


_PAIRED_SIDES = {
    SelectionSide.HOME: SelectionSide.AWAY,
    SelectionSide.AWAY: SelectionSide.HOME,
    SelectionSide.OVER: SelectionSide.UNDER,
    SelectionSide.UNDER: SelectionSide.OVER,
}


class PairingStatus(str, Enum):
    """Whether a bet group has prices on every side from a common book."""

    PAIRED = "paired"  # At least one book prices every side
    ONE_SIDED = "one_sided"  # Some side has no prices at all
    UNPAIRED = "unpaired"  # Every side priced, but never by the same book


@dataclass(frozen=True)
class Selection:
    """A specific outcome within a BetGroup.

    Attributes:
        selection_key: Canonical key ``{bet_group_key}:{side}``
        bet_group_key: Key of the owning group
        side: Side of the market this selection represents
        label: Human-readable label (e.g., "LAL -3.5")
        prices: Book prices in fetch order
    """

    selection_key: str
    bet_group_key: str
    side: SelectionSide
    label: str
    prices: tuple[BookPrice, ...] = ()

    @property
    def has_prices(self) -> bool:
        return bool(self.prices)

    @property
    def book_keys(self) -> set[str]:
        return {price.book.lower() for price in self.prices}

    def price_for(self, book: str) -> BookPrice | None:
        """First price quoted by ``book`` (case-insensitive)."""
        book_lower = book.lower()
        for price in self.prices:
            if price.book.lower() == book_lower:
                return price
        return None


@dataclass(frozen=True)
class BetGroup:
    """A single wagering proposition with 2+ mutually exclusive selections.

    Attributes:
        bet_group_key: Canonical group key
        game_id: Canonical game id (``league:date:AWAY-HOME``)
        market_key: Market type
        subject_id: Player subject id for props, None for team markets
        line: Line value, None for moneylines
        pairing_status: Pairing status derived from selection prices
        selections: Selections in side order
        league: League code used for sharp book lookup
    """

    bet_group_key: str
    game_id: str
    market_key: str
    subject_id: str | None
    line: float | None
    pairing_status: PairingStatus
    selections: tuple[Selection, ...] = field(default_factory=tuple)
    league: str | None = None

    def selection_for(self, side: SelectionSide) -> Selection | None:
        for selection in self.selections:
            if selection.side == side:
                return selection
        return None

    def paired_selection(self, selection: Selection) -> Selection | None:
        paired_side = selection.side.paired_side
        if paired_side is None:
            return None
        return self.selection_for(paired_side)

    @property
    def all_book_keys(self) -> set[str]:
        books: set[str] = set()
        for selection in self.selections:
            books |= selection.book_keys
        return books

    @property
    def books_pricing_all_sides(self) -> set[str]:
        """Books quoting every selection (required for vig removal)."""
        if len(self.selections) < 2:
            return set()
        common = set(self.selections[0].book_keys)
        for selection in self.selections[1:]:
            common &= selection.book_keys
        return common

    @property
    def total_quotes(self) -> int:
        return sum(len(selection.prices) for selection in self.selections)

    @property
    def can_compute_fair_odds(self) -> bool:
        return self.pairing_status == PairingStatus.PAIRED

    @property
    def league_code(self) -> str:
        """League from the explicit field, else the game id prefix."""
        if self.league:
            return self.league.lower()
        return self.game_id.split(":")[0] if self.game_id else "default"


def determine_pairing_status(selections: list[Selection]) -> PairingStatus:
    """Derive pairing status from selection prices."""
    if len(selections) < 2:
        return PairingStatus.ONE_SIDED

    if not any(s.has_prices for s in selections):
        return PairingStatus.UNPAIRED
    if not all(s.has_prices for s in selections):
        return PairingStatus.ONE_SIDED

    first_books = selections[0].book_keys
    for selection in selections[1:]:
        if first_books & selection.book_keys:
            return PairingStatus.PAIRED
    return PairingStatus.UNPAIRED


def build_label(
    market_key: str,
    side: SelectionSide,
    line: float | None = None,
    home_team: str | None = None,
    away_team: str | None = None,
    player_name: str | None = None,
) -> str:
    """Build a human-readable selection label.

    Examples:
        "LAL -3.5", "BOS +3.5", "Over 220.5", "LAL ML",
        "LeBron James Over 25.5 Points"
    """
    if market_key in ("spread", "spreads"):
        # line is the home team's line; the away side gets the negation
        if line is None or side not in (SelectionSide.HOME, SelectionSide.AWAY):
            return side.value.capitalize()
        if side == SelectionSide.HOME:
            return f"{home_team or 'Home'} {line:+.1f}"
        return f"{away_team or 'Away'} {-line:+.1f}"

    if market_key in ("total", "totals"):
        if line is None:
            return side.value.capitalize()
        return f"{side.value.capitalize()} {format_line(line)}"

    if market_key == "h2h":
        if side == SelectionSide.HOME:
            return f"{home_team or 'Home'} ML"
        if side == SelectionSide.AWAY:
            return f"{away_team or 'Away'} ML"
        return side.value.capitalize()

    if player_name and line is not None:
        stat = market_key.removeprefix("player_").replace("_", " ").title()
        return f"{player_name} {side.value.capitalize()} {format_line(line)} {stat}"
    return side.value.capitalize()


class BetGroupFactory:
    """Factory for creating BetGroups from per-side price lists."""

    @staticmethod
    def _build(
        game_id: str,
        market_key: str,
        subject_id: str | None,
        line: float | None,
        sides: list[tuple[SelectionSide, str, list[BookPrice]]],
        league: str | None = None,
    ) -> BetGroup:
        bet_group_key = build_bet_group_key(game_id, market_key, subject_id, line)
        selections = [
            Selection(
                selection_key=build_selection_key(bet_group_key, side.value),
                bet_group_key=bet_group_key,
                side=side,
                label=label,
                prices=tuple(prices),
            )
            for side, label, prices in sides
        ]
        return BetGroup(
            bet_group_key=bet_group_key,
            game_id=game_id,
            market_key=market_key,
            subject_id=subject_id,
            line=line,
            pairing_status=determine_pairing_status(selections),
            selections=tuple(selections),
            league=league,
        )

    @classmethod
    def create_spread(
        cls,
        game_id: str,
        line: float,
        home_team: str,
        away_team: str,
        home_prices: list[BookPrice],
        away_prices: list[BookPrice],
        league: str | None = None,
    ) -> BetGroup:
        """Spread group for the home team's ``line``, keyed on its absolute value."""
        return cls._build(
            game_id,
            "spread",
            None,
            abs(line),
            [
                (SelectionSide.HOME, build_label("spread", SelectionSide.HOME, line, home_team, away_team), home_prices),
                (SelectionSide.AWAY, build_label("spread", SelectionSide.AWAY, line, home_team, away_team), away_prices),
            ],
            league,
        )

    @classmethod
    def create_total(
        cls,
        game_id: str,
        line: float,
        over_prices: list[BookPrice],
        under_prices: list[BookPrice],
        league: str | None = None,
    ) -> BetGroup:
        return cls._build(
            game_id,
            "total",
            None,
            line,
            [
                (SelectionSide.OVER, build_label("total", SelectionSide.OVER, line), over_prices),
                (SelectionSide.UNDER, build_label("total", SelectionSide.UNDER, line), under_prices),
            ],
            league,
        )

    @classmethod
    def create_moneyline(
        cls,
        game_id: str,
        home_team: str,
        away_team: str,
        home_prices: list[BookPrice],
        away_prices: list[BookPrice],
        league: str | None = None,
    ) -> BetGroup:
        return cls._build(
            game_id,
            "h2h",
            None,
            None,
            [
                (SelectionSide.HOME, build_label("h2h", SelectionSide.HOME, None, home_team, away_team), home_prices),
                (SelectionSide.AWAY, build_label("h2h", SelectionSide.AWAY, None, home_team, away_team), away_prices),
            ],
            league,
        )

    @classmethod
    def build_single(
        cls,
        game_id: str,
        market_key: str,
        line: float | None,
        side: SelectionSide,
        label: str,
        prices: list[BookPrice],
        league: str | None = None,
    ) -> BetGroup:
        """One-sided group for a selection whose counter-side is unknown."""
        return cls._build(game_id, market_key, None, line, [(side, label, prices)], league)

    @classmethod
    def create_player_prop(
        cls,
        game_id: str,
        market_key: str,
        subject_id: str,
        player_name: str,
        line: float,
        over_prices: list[BookPrice],
        under_prices: list[BookPrice],
        league: str | None = None,
    ) -> BetGroup:
        return cls._build(
            game_id,
            market_key,
            subject_id,
            line,
            [
                (SelectionSide.OVER, build_label(market_key, SelectionSide.OVER, line, player_name=player_name), over_prices),
                (SelectionSide.UNDER, build_label(market_key, SelectionSide.UNDER, line, player_name=player_name), under_prices),
            ],
            league,
        )
