"""Tests for opposite-side pairing of bets."""

from fairbet.lines.groups import PairingStatus, SelectionSide
from fairbet.lines.pairing import (
    OppositeSelection,
    build_pair_group,
    opposite_selection,
    pair_bets,
    pairing_key,
    side_for_bet,
)


class TestPairingKey:
    """Tests for pairing_key."""

    def test_opposite_spread_sides_share_key(self, make_bet):
        lakers = make_bet("team:los_angeles_lakers", {"DraftKings": -110}, "spreads", -3.5)
        celtics = make_bet("team:boston_celtics", {"DraftKings": -110}, "spreads", 3.5)
        assert pairing_key(lakers) == pairing_key(celtics)

    def test_total_sides_share_key(self, make_bet):
        over = make_bet("total:over", {"DraftKings": -110}, "totals", 224.5)
        under = make_bet("total:under", {"DraftKings": -110}, "totals", 224.5)
        assert pairing_key(over) == pairing_key(under)

    def test_differs_across_markets(self, make_bet):
        h2h = make_bet("team:los_angeles_lakers", {"DraftKings": 120})
        spread = make_bet("team:los_angeles_lakers", {"DraftKings": -110}, "spreads", -3.5)
        assert pairing_key(h2h) != pairing_key(spread)

    def test_differs_across_lines(self, make_bet):
        a = make_bet("total:over", {"DraftKings": -110}, "totals", 224.5)
        b = make_bet("total:over", {"DraftKings": -110}, "totals", 225.5)
        assert pairing_key(a) != pairing_key(b)


class TestOppositeSelection:
    """Tests for opposite_selection."""

    def test_moneyline(self, make_bet):
        lakers = make_bet("team:los_angeles_lakers", {"DraftKings": 120})
        assert opposite_selection(lakers) == OppositeSelection("Boston Celtics", None)

    def test_spread_negates_line(self, make_bet):
        lakers = make_bet("team:los_angeles_lakers", {"DraftKings": -110}, "spreads", -3.5)
        assert opposite_selection(lakers) == OppositeSelection("Boston Celtics", 3.5)

    def test_total_flips_side(self, make_bet):
        over = make_bet("total:over", {"DraftKings": -110}, "totals", 224.5)
        assert opposite_selection(over) == OppositeSelection("Under", 224.5)

    def test_unknown_market(self, make_bet):
        prop = make_bet("total:over", {"DraftKings": -110}, "player_points", 25.5)
        assert opposite_selection(prop) is None


class TestPairBets:
    """Tests for pair_bets."""

    def test_moneyline_pairs_both_ways(self, moneyline_pair):
        lakers, celtics = moneyline_pair
        pairs = pair_bets([lakers, celtics])
        assert pairs[lakers.id] == celtics.id
        assert pairs[celtics.id] == lakers.id

    def test_one_sided_is_excluded(self, moneyline_pair):
        lakers, _ = moneyline_pair
        assert pair_bets([lakers]) == {}

    def test_bet_without_books_is_excluded(self, make_bet, moneyline_pair):
        lakers, _ = moneyline_pair
        empty = make_bet("team:boston_celtics", {})
        assert pair_bets([lakers, empty]) == {}

    def test_spread_requires_negated_line(self, make_bet):
        """Both sides at -3.5 are not opposite selections."""
        lakers = make_bet("team:los_angeles_lakers", {"DraftKings": -110}, "spreads", -3.5)
        celtics = make_bet("team:boston_celtics", {"DraftKings": -110}, "spreads", -3.5)
        assert pair_bets([lakers, celtics]) == {}

    def test_pairs_across_games_stay_separate(self, make_bet):
        over_a = make_bet("total:over", {"DraftKings": -110}, "totals", 224.5, game_id=1)
        under_b = make_bet("total:under", {"DraftKings": -110}, "totals", 224.5, game_id=2)
        assert pair_bets([over_a, under_b]) == {}

    def test_totals_pair(self, make_bet):
        over = make_bet("total:over", {"DraftKings": -110}, "totals", 224.5)
        under = make_bet("total:under", {"DraftKings": -110}, "totals", 224.5)
        assert pair_bets([over, under]) == {over.id: under.id, under.id: over.id}


class TestBuildPairGroup:
    """Tests for build_pair_group."""

    def test_side_for_bet(self, moneyline_pair, make_bet):
        lakers, celtics = moneyline_pair
        assert side_for_bet(lakers) == SelectionSide.HOME
        assert side_for_bet(celtics) == SelectionSide.AWAY
        over = make_bet("total:over", {"DraftKings": -110}, "totals", 224.5)
        assert side_for_bet(over) == SelectionSide.OVER

    def test_moneyline_group(self, moneyline_pair):
        lakers, celtics = moneyline_pair
        group = build_pair_group(lakers, celtics)

        assert group.pairing_status == PairingStatus.PAIRED
        assert group.market_key == "h2h"
        assert group.game_id == "nba:2026-01-15:BOSTON CELTICS-LOS ANGELES LAKERS"
        home = group.selection_for(SelectionSide.HOME)
        assert home.price_for("pinnacle").price == 130
        assert group.selection_for(SelectionSide.AWAY).price_for("Pinnacle").price == -142

    def test_spread_group_from_away_side(self, make_bet):
        """The group keeps the home team's line whichever side is evaluated."""
        lakers = make_bet("team:los_angeles_lakers", {"Pinnacle": -110}, "spreads", -3.5)
        celtics = make_bet("team:boston_celtics", {"Pinnacle": -110}, "spreads", 3.5)
        group = build_pair_group(celtics, lakers)

        assert group.line == 3.5
        assert group.selection_for(SelectionSide.HOME).label == "Los Angeles Lakers -3.5"
        assert group.selection_for(SelectionSide.AWAY).label == "Boston Celtics +3.5"

    def test_without_counterpart_is_one_sided(self, moneyline_pair):
        lakers, _ = moneyline_pair
        group = build_pair_group(lakers)
        assert group.pairing_status == PairingStatus.ONE_SIDED
        assert len(group.selections) == 1
