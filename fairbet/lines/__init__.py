"""Lines - odds page models, conversion, keys, bet groups and pairing.

This module provides:
- Pydantic models for odds pages (APIBet, BookPrice, BetsResponse)
- American odds conversion functions
- Canonical key builders for games, bet groups and selections
- BetGroup construction and opposite-side pairing
"""

from fairbet.lines.groups import (
    BetGroup,
    BetGroupFactory,
    PairingStatus,
    Selection,
    SelectionSide,
)
from fairbet.lines.keys import (
    build_bet_group_key,
    build_game_id,
    build_selection_key,
    normalize_player_id,
    normalize_team_code,
)
from fairbet.lines.models import APIBet, BetsResponse, BookPrice, FairBetLeague, MarketKey
from fairbet.lines.odds import (
    AmericanOdds,
    american_to_probability,
    probability_to_american,
    profit_per_unit_stake,
)
from fairbet.lines.pairing import build_pair_group, pair_bets, pairing_key

__all__ = [
    # Models
    "APIBet",
    "BookPrice",
    "BetsResponse",
    "FairBetLeague",
    "MarketKey",
    # Odds conversion
    "AmericanOdds",
    "american_to_probability",
    "probability_to_american",
    "profit_per_unit_stake",
    # Keys
    "build_game_id",
    "build_bet_group_key",
    "build_selection_key",
    "normalize_team_code",
    "normalize_player_id",
    # Groups and pairing
    "BetGroup",
    "BetGroupFactory",
    "PairingStatus",
    "Selection",
    "SelectionSide",
    "build_pair_group",
    "pair_bets",
    "pairing_key",
]
