"""Parlay fair odds from independent legs.

Legs are assumed independent, so the combined fair probability is the product
of leg probabilities. The combined estimate is only as trustworthy as its
weakest leg, so confidence is the minimum leg confidence. A leg with no fair
probability leaves the parlay without one.
"""

from dataclasses import dataclass

from fairbet.analysis.fair_odds import FairOddsConfidence
from fairbet.lines.odds import EVEN_MONEY, probability_to_american


@dataclass(frozen=True)
class ParlayLeg:
    """One selected bet in a parlay.

    Attributes:
        bet_id: Stable bet identity
        fair_probability: Fair probability of the leg, None when unavailable
        confidence: Confidence of the leg's fair probability
    """

    bet_id: str
    fair_probability: float | None
    confidence: FairOddsConfidence = FairOddsConfidence.NONE


@dataclass(frozen=True)
class ParlayState:
    """Combined parlay estimate.

    Attributes:
        bet_ids: Selected bet ids in selection order
        probability: Combined fair probability, None when a leg has none
        american_odds: Combined fair American odds, None when a leg has none
        confidence: Weakest leg confidence
    """

    bet_ids: tuple[str, ...]
    probability: float | None
    american_odds: int | None
    confidence: FairOddsConfidence

    @property
    def leg_count(self) -> int:
        return len(self.bet_ids)

    @property
    def is_empty(self) -> bool:
        return not self.bet_ids

    @property
    def is_available(self) -> bool:
        return self.probability is not None


EMPTY_PARLAY = ParlayState(
    bet_ids=(),
    probability=0.5,
    american_odds=EVEN_MONEY,
    confidence=FairOddsConfidence.NONE,
)


def combine_parlay(legs: list[ParlayLeg]) -> ParlayState:
    """Combine legs into a parlay fair probability.

    Args:
        legs: Legs in selection order

    Returns:
        ParlayState. No legs gives 0.5 / +100 / NONE. A leg without a fair
        probability makes the whole parlay unavailable: no probability, no
        odds and confidence NONE.

    Example:
        >>> legs = [ParlayLeg("a", 0.5, FairOddsConfidence.HIGH),
        ...         ParlayLeg("b", 0.5, FairOddsConfidence.MEDIUM)]
        >>> state = combine_parlay(legs)
        >>> state.probability, state.american_odds, state.confidence.label
        (0.25, 300, 'medium')
    """
    if not legs:
        return EMPTY_PARLAY

    bet_ids = tuple(leg.bet_id for leg in legs)
    if any(leg.fair_probability is None for leg in legs):
        return ParlayState(
            bet_ids=bet_ids,
            probability=None,
            american_odds=None,
            confidence=FairOddsConfidence.NONE,
        )

    probability = 1.0
    confidence = FairOddsConfidence.HIGH
    for leg in legs:
        probability *= leg.fair_probability
        confidence = min(confidence, leg.confidence)

    return ParlayState(
        bet_ids=bet_ids,
        probability=probability,
        american_odds=probability_to_american(probability),
        confidence=FairOddsConfidence(confidence),
    )
