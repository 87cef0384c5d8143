"""Tests for parlay fair odds."""

from fairbet.analysis.fair_odds import FairOddsConfidence
from fairbet.analysis.parlay import ParlayLeg, combine_parlay


class TestCombineParlay:
    """Tests for combine_parlay."""

    def test_two_even_legs(self):
        """0.5 x 0.5 = 0.25, +300, weaker confidence."""
        state = combine_parlay([
            ParlayLeg("a", 0.5, FairOddsConfidence.HIGH),
            ParlayLeg("b", 0.5, FairOddsConfidence.MEDIUM),
        ])

        assert abs(state.probability - 0.25) < 1e-12
        assert state.american_odds == 300
        assert state.confidence == FairOddsConfidence.MEDIUM
        assert state.bet_ids == ("a", "b")
        assert state.leg_count == 2

    def test_empty_is_even_money(self):
        state = combine_parlay([])
        assert state.probability == 0.5
        assert state.american_odds == 100
        assert state.confidence == FairOddsConfidence.NONE
        assert state.is_empty
        assert state.is_available

    def test_leg_without_fair_probability(self):
        """One unknown leg leaves the parlay with no number at all."""
        state = combine_parlay([
            ParlayLeg("a", 0.6, FairOddsConfidence.HIGH),
            ParlayLeg("b", None),
        ])
        assert state.confidence == FairOddsConfidence.NONE
        assert state.probability is None
        assert state.american_odds is None
        assert not state.is_available
        assert not state.is_empty
        assert state.leg_count == 2

    def test_single_unknown_leg(self):
        state = combine_parlay([ParlayLeg("a", None)])
        assert not state.is_available
        assert state.bet_ids == ("a",)

    def test_three_legs(self):
        state = combine_parlay([
            ParlayLeg("a", 0.6, FairOddsConfidence.HIGH),
            ParlayLeg("b", 0.5, FairOddsConfidence.LOW),
            ParlayLeg("c", 0.5, FairOddsConfidence.HIGH),
        ])
        assert abs(state.probability - 0.15) < 1e-12
        assert state.confidence == FairOddsConfidence.LOW
        assert state.american_odds == 567
