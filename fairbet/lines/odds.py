"""Odds format conversion and validation utilities.

Converts between different odds formats:
- American: +200, -150 (US betting standard)
- Decimal: 3.0, 1.67 (European/Australian standard)
- Implied Probability: 0.33, 0.60 (mathematical probability)

American odds are the canonical representation in this engine. Valid American
odds are <= -100 or >= +100; anything in between is auto-corrected to the
nearest boundary by ``AmericanOdds``. Degenerate inputs never raise: they
collapse to even money (+100).
"""

import math
from dataclasses import dataclass

EVEN_MONEY = 100


def is_valid_american_odds(odds: int) -> bool:
    """Check that American odds are in the valid domain.

    Examples:
        >>> is_valid_american_odds(-110)
        True
        >>> is_valid_american_odds(50)
        False
    """
    return odds <= -100 or odds >= 100


def correct_american_odds(value: int) -> int:
    """Snap a value in the invalid zone (-100, 100) to the nearest boundary.

    0 and positive values below 100 become +100, negative values above -100
    become -100. Valid values are returned unchanged.

    Examples:
        >>> correct_american_odds(-99)
        -100
        >>> correct_american_odds(0)
        100
        >>> correct_american_odds(-110)
        -110
    """
    if is_valid_american_odds(value):
        return value
    return EVEN_MONEY if value >= 0 else -EVEN_MONEY


def american_to_probability(odds: int) -> float:
    """Convert American odds to implied probability.

    Args:
        odds: American format odds (e.g., +150, -110)

    Returns:
        Implied probability (break-even win rate, vig included)

    Examples:
        >>> round(american_to_probability(-110), 4)
        0.5238
        >>> american_to_probability(150)
        0.4
    """
    if odds < 0:
        return -odds / (-odds + 100.0)
    return 100.0 / (odds + 100.0)


def probability_to_american(probability: float) -> int:
    """Convert a probability to American odds.

    Probabilities above 0.5 produce favourite (negative) prices, 0.5 and below
    produce underdog (positive) prices, so even money round-trips as +100.

    Args:
        probability: Win probability

    Returns:
        American odds, always in the valid domain. Degenerate input
        (<= 0, >= 1 or non-finite) returns +100.

    Examples:
        >>> probability_to_american(0.6)
        -150
        >>> probability_to_american(0.25)
        300
        >>> probability_to_american(1.0)
        100
    """
    if not math.isfinite(probability) or probability <= 0.0 or probability >= 1.0:
        return EVEN_MONEY

    if probability > 0.5:
        odds = -int(round(probability / (1.0 - probability) * 100.0))
        return min(odds, -EVEN_MONEY)

    odds = int(round((1.0 - probability) / probability * 100.0))
    return max(odds, EVEN_MONEY)


def profit_per_unit_stake(odds: int) -> float:
    """Profit won on a $1 stake at the given American odds.

    Examples:
        >>> profit_per_unit_stake(150)
        1.5
        >>> round(profit_per_unit_stake(-110), 4)
        0.9091
    """
    if odds > 0:
        return odds / 100.0
    if odds < 0:
        return 100.0 / abs(odds)
    return 0.0


def american_to_decimal(odds: int) -> float:
    """Convert American odds to decimal odds (total payout per unit staked).

    Examples:
        >>> american_to_decimal(200)
        3.0
        >>> american_to_decimal(-200)
        1.5
    """
    if odds == 0:
        return 0.0
    return profit_per_unit_stake(odds) + 1.0


def decimal_to_american(decimal_odds: float) -> int:
    """Convert decimal odds to American odds via implied probability.

    Non-finite values and decimal odds <= 1.0 return +100.

    Examples:
        >>> decimal_to_american(2.5)
        150
        >>> decimal_to_american(1.5)
        -200
    """
    if not math.isfinite(decimal_odds) or decimal_odds <= 1.0:
        return EVEN_MONEY
    return probability_to_american(1.0 / decimal_odds)


def format_american_odds(odds: int) -> str:
    """Display string with explicit sign ("+150", "-110")."""
    return f"+{odds}" if odds > 0 else str(odds)


@dataclass(frozen=True)
class AmericanOdds:
    """American odds price, auto-corrected into the valid domain on construction.

    Attributes:
        value: Signed American price (<= -100 or >= +100)
    """

    value: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", correct_american_odds(int(self.value)))

    @property
    def implied_probability(self) -> float:
        return american_to_probability(self.value)

    @property
    def decimal_odds(self) -> float:
        return american_to_decimal(self.value)

    @property
    def profit_per_unit(self) -> float:
        return profit_per_unit_stake(self.value)

    @property
    def display(self) -> str:
        return format_american_odds(self.value)

    @classmethod
    def from_probability(cls, probability: float) -> "AmericanOdds":
        return cls(probability_to_american(probability))

    @classmethod
    def from_decimal(cls, decimal_odds: float) -> "AmericanOdds":
        return cls(decimal_to_american(decimal_odds))
