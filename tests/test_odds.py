"""Tests for odds conversion and American odds validation.

Covers American/probability/decimal conversion, round trips, auto-correction
of invalid prices and clamping of degenerate inputs.
"""

import math

import pytest

from fairbet.lines.odds import (
    AmericanOdds,
    american_to_decimal,
    american_to_probability,
    correct_american_odds,
    decimal_to_american,
    format_american_odds,
    is_valid_american_odds,
    probability_to_american,
    profit_per_unit_stake,
)


class TestAmericanToProbability:
    """Tests for american_to_probability."""

    def test_standard_juice(self):
        """-110 implies 52.38%."""
        assert abs(american_to_probability(-110) - 0.5238) < 0.001

    def test_even_money(self):
        assert american_to_probability(100) == 0.5

    def test_underdog(self):
        assert abs(american_to_probability(150) - 0.4) < 1e-10

    def test_favorite(self):
        assert abs(american_to_probability(-200) - 2 / 3) < 1e-10


class TestProbabilityToAmerican:
    """Tests for probability_to_american."""

    @pytest.mark.parametrize("odds", [-150, 200, -110, 100])
    def test_round_trip(self, odds):
        """Representative prices survive a round trip through probability."""
        assert probability_to_american(american_to_probability(odds)) == odds

    def test_half_is_even_money(self):
        assert probability_to_american(0.5) == 100

    def test_favorite_is_negative(self):
        assert probability_to_american(0.6) == -150

    def test_underdog_is_positive(self):
        assert probability_to_american(0.25) == 300

    @pytest.mark.parametrize("probability", [0.0, 1.0, -0.2, 1.5, math.nan, math.inf])
    def test_degenerate_inputs_are_even_money(self, probability):
        """Out-of-range and non-finite probabilities clamp to +100."""
        assert probability_to_american(probability) == 100

    def test_result_always_valid(self):
        """Every probability maps into the valid domain."""
        for i in range(1, 100):
            assert is_valid_american_odds(probability_to_american(i / 100))


class TestAutoCorrection:
    """Tests for AmericanOdds auto-correction."""

    @pytest.mark.parametrize(
        "raw,expected",
        [(-99, -100), (99, 100), (0, 100), (-1, -100), (50, 100), (-110, -110), (150, 150)],
    )
    def test_correction(self, raw, expected):
        assert AmericanOdds(raw).value == expected

    def test_correct_american_odds_keeps_valid(self):
        assert correct_american_odds(-100) == -100
        assert correct_american_odds(100) == 100

    def test_is_valid(self):
        assert is_valid_american_odds(-110)
        assert is_valid_american_odds(100)
        assert not is_valid_american_odds(50)
        assert not is_valid_american_odds(0)


class TestProfitAndDecimal:
    """Tests for profit per unit stake and decimal conversion."""

    def test_profit_positive_odds(self):
        assert profit_per_unit_stake(150) == 1.5

    def test_profit_negative_odds(self):
        assert profit_per_unit_stake(-200) == 0.5

    def test_profit_zero_is_zero(self):
        """The invalid price 0 yields no profit instead of dividing by zero."""
        assert profit_per_unit_stake(0) == 0.0

    def test_american_to_decimal(self):
        assert american_to_decimal(200) == 3.0
        assert american_to_decimal(-200) == 1.5

    def test_decimal_to_american(self):
        assert decimal_to_american(2.5) == 150
        assert decimal_to_american(1.5) == -200

    @pytest.mark.parametrize("decimal_odds", [1.0, 0.5, math.nan])
    def test_decimal_degenerate(self, decimal_odds):
        assert decimal_to_american(decimal_odds) == 100


class TestAmericanOdds:
    """Tests for the AmericanOdds value object."""

    def test_properties(self):
        odds = AmericanOdds(-110)
        assert abs(odds.implied_probability - 0.5238) < 0.001
        assert abs(odds.profit_per_unit - 0.9091) < 0.001
        assert abs(odds.decimal_odds - 1.9091) < 0.001
        assert odds.display == "-110"

    def test_display_positive(self):
        assert AmericanOdds(150).display == "+150"
        assert format_american_odds(100) == "+100"

    def test_from_probability(self):
        assert AmericanOdds.from_probability(0.4).value == 150

    def test_from_decimal(self):
        assert AmericanOdds.from_decimal(3.0).value == 200

    def test_frozen(self):
        odds = AmericanOdds(120)
        with pytest.raises(AttributeError):
            odds.value = 130
