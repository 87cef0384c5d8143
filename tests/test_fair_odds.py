"""Tests for the fair odds engine.

Validates median aggregation across sharp books, proportional vig removal,
confidence grading and the "no estimate" cases.
"""

import pytest

from fairbet.analysis.fair_odds import (
    FairOddsConfidence,
    calculate_edge,
    calculate_ev_percent,
    compute_fair_odds,
    get_market_vig,
    has_positive_edge,
    median,
    remove_vig,
)
from fairbet.analysis.sharp_books import BookClassifier
from fairbet.lines.groups import BetGroupFactory, SelectionSide

GAME_ID = "nba:2026-01-15:BOS-LAL"


@pytest.fixture
def make_total(make_price):
    """Total group from {book: (over, under)} prices."""

    def _make(quotes: dict[str, tuple[int | None, int | None]], **price_fields):
        over = [make_price(b, o, **price_fields) for b, (o, _) in quotes.items() if o is not None]
        under = [make_price(b, u, **price_fields) for b, (_, u) in quotes.items() if u is not None]
        return BetGroupFactory.create_total(GAME_ID, 220.5, over, under, league="NBA")

    return _make


class TestRemoveVig:
    """Tests for remove_vig and get_market_vig."""

    def test_standard_line(self):
        """-110/-110 (0.5238 each) normalizes to 50/50."""
        fair = remove_vig([0.5238, 0.5238])
        assert abs(fair[0] - 0.5) < 0.001
        assert abs(sum(fair) - 1.0) < 1e-10

    def test_favorite_keeps_higher_probability(self):
        fair = remove_vig([0.6, 0.45])
        assert fair[0] > fair[1]
        assert abs(sum(fair) - 1.0) < 1e-10

    def test_requires_two_outcomes(self):
        with pytest.raises(ValueError, match="at least 2 outcomes"):
            remove_vig([0.55])

    def test_market_vig(self):
        assert abs(get_market_vig([0.5238, 0.5238]) - 0.0476) < 0.001


class TestMedian:
    """Tests for median."""

    def test_odd_count(self):
        assert median([0.3, 0.9, 0.5]) == 0.5

    def test_even_count(self):
        assert abs(median([0.4, 0.6]) - 0.5) < 1e-12

    def test_empty(self):
        assert median([]) == 0.0


class TestComputeFairOdds:
    """Tests for compute_fair_odds."""

    def test_two_sharp_books_high_confidence(self, make_total):
        group = make_total({"Pinnacle": (-110, -110), "Circa": (-110, -110)})
        result = compute_fair_odds(group)

        assert result is not None
        assert result.confidence == FairOddsConfidence.HIGH
        assert result.book_count == 2
        for selection in result.selections:
            assert abs(selection.fair_probability - 0.5) < 0.001
            assert selection.fair_american_odds == 100
        assert abs(result.market_vig - 0.0476) < 0.001

    def test_one_sharp_book_medium_confidence(self, make_total):
        group = make_total({"Pinnacle": (-110, -110), "DraftKings": (-105, -115)})
        result = compute_fair_odds(group)

        assert result.confidence == FairOddsConfidence.MEDIUM
        assert result.selections[0].books_used == ("pinnacle",)
        assert abs(result.selections[0].fair_probability - 0.5) < 0.001

    def test_soft_consensus_low_confidence(self, make_total):
        """No sharp coverage but 4 total quotes gives a LOW estimate."""
        group = make_total({"DraftKings": (-110, -110), "FanDuel": (-115, -105)})
        result = compute_fair_odds(group)

        assert result.confidence == FairOddsConfidence.LOW
        assert abs(sum(s.fair_probability for s in result.selections) - 1.0) < 1e-10

    def test_too_few_quotes_is_absent(self, make_total):
        """Absent, not zero: no sharp books and only 2 quotes."""
        group = make_total({"DraftKings": (-110, -110)})
        assert compute_fair_odds(group) is None

    def test_sharp_book_must_quote_every_side(self, make_total):
        """Pinnacle on one side only does not count as sharp coverage."""
        group = make_total({"Pinnacle": (-110, None), "DraftKings": (-110, -110)})
        result = compute_fair_odds(group)
        assert result.confidence == FairOddsConfidence.LOW

    def test_one_sided_group_is_absent(self, make_price):
        group = BetGroupFactory.build_single(
            GAME_ID, "h2h", None, SelectionSide.HOME, "LAL ML",
            [make_price("Pinnacle", 120), make_price("Circa", 118)],
        )
        assert compute_fair_odds(group) is None

    def test_median_resists_outlier(self, make_total):
        """One off-market sharp line moves the median only halfway."""
        group = make_total({
            "Pinnacle": (-110, -110),
            "Circa": (-110, -110),
            "BetCRIS": (-200, 160),
        })
        result = compute_fair_odds(group)

        over = result.fair_odds_for(SelectionSide.OVER)
        assert result.confidence == FairOddsConfidence.HIGH
        assert abs(over.fair_probability - 0.5) < 0.001

    def test_server_sharp_flag(self, make_total):
        """A price flagged is_sharp counts even when the book is not listed."""
        group = make_total({"Novig": (-110, -110), "DraftKings": (-120, 100)}, is_sharp=True)
        result = compute_fair_odds(group)
        assert result.confidence == FairOddsConfidence.HIGH

    def test_custom_classifier(self, make_total):
        group = make_total({"Novig": (-110, -110), "DraftKings": (-120, 100)})
        result = compute_fair_odds(group, BookClassifier({"nba": ["novig"]}))
        assert result.confidence == FairOddsConfidence.MEDIUM
        assert result.selections[0].books_used == ("novig",)

    def test_favorite_probability(self, make_price):
        group = BetGroupFactory.create_moneyline(
            GAME_ID, "LAL", "BOS",
            home_prices=[make_price("Pinnacle", -150), make_price("Circa", -150)],
            away_prices=[make_price("Pinnacle", 130), make_price("Circa", 130)],
            league="NBA",
        )
        result = compute_fair_odds(group)
        home = result.fair_odds_for(SelectionSide.HOME)
        away = result.fair_odds_for(SelectionSide.AWAY)

        assert home.fair_probability > 0.5
        assert home.fair_american_odds < 0
        assert away.fair_american_odds > 0
        assert abs(home.fair_probability + away.fair_probability - 1.0) < 1e-10


class TestConfidence:
    """Tests for FairOddsConfidence ordering and parsing."""

    def test_ordering(self):
        assert FairOddsConfidence.NONE < FairOddsConfidence.LOW < FairOddsConfidence.MEDIUM < FairOddsConfidence.HIGH

    def test_from_label(self):
        assert FairOddsConfidence.from_label("High") == FairOddsConfidence.HIGH
        assert FairOddsConfidence.from_label("medium") == FairOddsConfidence.MEDIUM
        assert FairOddsConfidence.from_label("bogus") == FairOddsConfidence.NONE
        assert FairOddsConfidence.from_label(None) == FairOddsConfidence.NONE

    def test_reliable_grades(self):
        assert FairOddsConfidence.HIGH.is_reliable
        assert FairOddsConfidence.MEDIUM.is_reliable
        assert not FairOddsConfidence.LOW.is_reliable


class TestEdge:
    """Tests for edge helpers."""

    def test_calculate_edge(self):
        assert abs(calculate_edge(100, 0.55) - 0.05) < 1e-10

    def test_ev_percent_ratio(self):
        assert abs(calculate_ev_percent(100, 0.55) - 10.0) < 1e-9

    def test_has_positive_edge(self):
        assert has_positive_edge(150, 0.45)
        assert not has_positive_edge(-200, 0.6)
