"""Fair odds and expected value analysis.

This module provides the mathematical core of the engine:
- Sharp book classification
- Fair odds via median aggregation and vig removal
- Per-book fee schedules
- Fee-aware expected value per book
- Parlay fair odds
"""

from fairbet.analysis.ev_calculator import (
    BetGroupEVResult,
    BookEVResult,
    SelectionEVResult,
    compute_bet_group_ev,
    compute_book_ev,
    compute_selection_ev,
)
from fairbet.analysis.fair_odds import (
    BetGroupFairOdds,
    FairOddsConfidence,
    FairOddsResult,
    calculate_edge,
    calculate_ev_percent,
    compute_fair_odds,
    get_market_vig,
    has_positive_edge,
    remove_vig,
)
from fairbet.analysis.fees import BookFeeConfig, FeeModel, FeeType, DEFAULT_FEE_SCHEDULE
from fairbet.analysis.parlay import ParlayLeg, ParlayState, combine_parlay
from fairbet.analysis.sharp_books import SHARP_BOOKS_BY_SPORT, BookClassifier

__all__ = [
    # Sharp books
    "BookClassifier",
    "SHARP_BOOKS_BY_SPORT",
    # Fair odds
    "FairOddsConfidence",
    "FairOddsResult",
    "BetGroupFairOdds",
    "compute_fair_odds",
    "remove_vig",
    "get_market_vig",
    "calculate_edge",
    "calculate_ev_percent",
    "has_positive_edge",
    # Fees
    "FeeType",
    "BookFeeConfig",
    "FeeModel",
    "DEFAULT_FEE_SCHEDULE",
    # EV calculation
    "BookEVResult",
    "SelectionEVResult",
    "BetGroupEVResult",
    "compute_book_ev",
    "compute_selection_ev",
    "compute_bet_group_ev",
    # Parlay
    "ParlayLeg",
    "ParlayState",
    "combine_parlay",
]
