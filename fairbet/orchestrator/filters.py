"""Filter and sort logic for evaluated bets.

Provides filtering by league, market, EV and data quality, plus sorting
and filter summary helpers.
"""

from dataclasses import dataclass
from enum import Enum

from fairbet.analysis.fair_odds import FairOddsConfidence
from fairbet.lines.models import APIBet
from fairbet.orchestrator.evaluation import BetEVResult

# Book quotes a bet needs before it is displayed or counted
MIN_BOOKS_FOR_DISPLAY = 3


class SortOption(str, Enum):
    BEST_EV = "best_ev"
    GAME_TIME = "game_time"
    LEAGUE = "league"


@dataclass
class FilterState:
    """Active filters of the odds comparison view.

    Attributes:
        league: League code to keep (case-insensitive), None for all
        market: Market key to keep, None for all
        positive_ev_only: Keep only bets with positive EV (any confidence)
        hide_limited_data: Keep only medium/high confidence bets
        sort: Sort order
        min_books: Book quotes required per bet
    """

    league: str | None = None
    market: str | None = None
    positive_ev_only: bool = False
    hide_limited_data: bool = True
    sort: SortOption = SortOption.BEST_EV
    min_books: int = MIN_BOOKS_FOR_DISPLAY


def _confidence(ev_results: dict[str, BetEVResult], bet: APIBet) -> FairOddsConfidence:
    result = ev_results.get(bet.id)
    return result.confidence if result is not None else FairOddsConfidence.NONE


def best_ev_percent(ev_results: dict[str, BetEVResult], bet: APIBet) -> float:
    result = ev_results.get(bet.id)
    return result.best_ev_percent if result is not None else 0.0


def filter_bets(
    bets: list[APIBet],
    ev_results: dict[str, BetEVResult],
    state: FilterState,
) -> list[APIBet]:
    """Filter bets by the active filter state.

    Combines all filters with AND logic and keeps input order.

    Args:
        bets: Bets in dataset order
        ev_results: EV cache keyed by bet id
        state: Active filters

    Returns:
        Filtered list of bets (may be empty)
    """
    filtered = [bet for bet in bets if len(bet.books) >= state.min_books]

    if state.hide_limited_data:
        filtered = [bet for bet in filtered if _confidence(ev_results, bet).is_reliable]

    if state.league is not None:
        league_upper = state.league.upper()
        filtered = [bet for bet in filtered if bet.league_code.upper() == league_upper]

    if state.market is not None:
        filtered = [bet for bet in filtered if bet.market_key == state.market]

    if state.positive_ev_only:
        filtered = [bet for bet in filtered if best_ev_percent(ev_results, bet) > 0]

    return filtered


def sort_bets(
    bets: list[APIBet],
    ev_results: dict[str, BetEVResult],
    sort: SortOption = SortOption.BEST_EV,
) -> list[APIBet]:
    """Sort bets (stable, so ties keep dataset order).

    Args:
        bets: Bets to sort
        ev_results: EV cache keyed by bet id
        sort: Best EV descending, game time ascending, or league code ascending

    Returns:
        New sorted list
    """
    if sort == SortOption.GAME_TIME:
        return sorted(bets, key=lambda bet: bet.commence_time)
    if sort == SortOption.LEAGUE:
        return sorted(bets, key=lambda bet: bet.league_code)
    return sorted(bets, key=lambda bet: best_ev_percent(ev_results, bet), reverse=True)


def get_filter_summary(state: FilterState) -> str:
    """Generate human-readable filter summary.

    Returns:
        Filter summary string (e.g., "league=NBA, +EV only")
        Returns empty string if no filters active
    """
    parts = []

    if state.league:
        parts.append(f"league={state.league.upper()}")

    if state.market:
        parts.append(f"market={state.market}")

    if state.positive_ev_only:
        parts.append("+EV only")

    if not state.hide_limited_data:
        parts.append("including limited data")

    return ", ".join(parts)
