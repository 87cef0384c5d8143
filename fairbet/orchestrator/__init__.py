"""Orchestration of paginated fetches, the EV cache, filters and parlay state."""

from fairbet.orchestrator.evaluation import BetEVResult, evaluate_bet, result_from_server
from fairbet.orchestrator.filters import FilterState, SortOption, filter_bets, sort_bets
from fairbet.orchestrator.odds_comparison import (
    BetsPageSource,
    LeagueBreakdown,
    OddsComparisonService,
)

__all__ = [
    "OddsComparisonService",
    "BetsPageSource",
    "LeagueBreakdown",
    "BetEVResult",
    "evaluate_bet",
    "result_from_server",
    "FilterState",
    "SortOption",
    "filter_bets",
    "sort_bets",
]
