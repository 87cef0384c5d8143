"""Pairing of opposite-side bets for vig removal.

The odds service delivers each side of a market as a separate bet. Fair odds
need both sides, so bets are grouped by a side-agnostic pairing key and matched
with their opposite selection (other team, flipped over/under, negated spread).

Bets that cannot be matched are simply left out of the pairing map; a missing
side is the common case, not an error.
"""

from collections import defaultdict
from typing import NamedTuple

from fairbet.lines.groups import BetGroup, BetGroupFactory, SelectionSide
from fairbet.lines.keys import build_game_id, format_line
from fairbet.lines.models import APIBet

LINE_TOLERANCE = 1e-6


class OppositeSelection(NamedTuple):
    """Selection name and line of the counter-side of a bet."""

    name: str
    line: float | None


def pairing_key(bet: APIBet) -> str:
    """Side-agnostic key shared by every selection of one game/market/line.

    Spread lines are keyed on their absolute value so -3.5 and +3.5 collide.

    Example:
        >>> pairing_key(lakers_minus_3_5) == pairing_key(celtics_plus_3_5)
        True
    """
    line_part = format_line(abs(bet.line_value)) if bet.line_value is not None else ""
    return f"{bet.league_code.lower()}|{bet.game_id}|{bet.market_key}|{line_part}"


def opposite_selection(bet: APIBet) -> OppositeSelection | None:
    """Find the counter-side of a bet.

    Returns:
        - h2h: the other team, no line
        - totals: "Under" for "Over" (and vice versa) at the same line
        - spreads: the other team at the negated line
        - anything else (props, alternates): None
    """
    selection = bet.selection

    if bet.market_key in ("h2h", "spreads"):
        if selection == bet.home_team:
            other = bet.away_team
        elif selection == bet.away_team:
            other = bet.home_team
        else:
            return None
        if bet.market_key == "spreads":
            line = -bet.line_value if bet.line_value is not None else None
            return OppositeSelection(other, line)
        return OppositeSelection(other, None)

    if bet.market_key == "totals":
        lowered = selection.lower()
        if lowered == "over":
            return OppositeSelection("Under", bet.line_value)
        if lowered == "under":
            return OppositeSelection("Over", bet.line_value)

    return None


def _same_line(a: float | None, b: float | None) -> bool:
    if a is None or b is None:
        return a is None and b is None
    return abs(a - b) < LINE_TOLERANCE


def pair_bets(bets: list[APIBet]) -> dict[str, str]:
    """Pair every bet with its opposite side.

    Args:
        bets: Bets from one or more pages

    Returns:
        Mapping of bet id to the id of its matched counterpart. Bets without
        price data or without a matching counterpart are absent.
    """
    by_key: dict[str, list[APIBet]] = defaultdict(list)
    for bet in bets:
        if not bet.books:
            continue
        by_key[pairing_key(bet)].append(bet)

    pairs: dict[str, str] = {}
    for group in by_key.values():
        if len(group) < 2:
            continue

        for bet in group:
            opposite = opposite_selection(bet)
            if opposite is None:
                continue
            for candidate in group:
                if candidate.id == bet.id:
                    continue
                if candidate.selection != opposite.name:
                    continue
                if bet.market_key != "h2h" and not _same_line(candidate.line_value, opposite.line):
                    continue
                pairs[bet.id] = candidate.id
                break

    return pairs


def side_for_bet(bet: APIBet) -> SelectionSide | None:
    """Map a bet onto a group side (home/away or over/under)."""
    selection = bet.selection
    if bet.market_key == "totals" or selection.lower() in ("over", "under"):
        lowered = selection.lower()
        if lowered == "over":
            return SelectionSide.OVER
        if lowered == "under":
            return SelectionSide.UNDER
        return None
    if selection == bet.home_team:
        return SelectionSide.HOME
    if selection == bet.away_team:
        return SelectionSide.AWAY
    return None


def build_pair_group(bet: APIBet, counterpart: APIBet | None = None) -> BetGroup:
    """Build a BetGroup from a bet and its (optional) matched counterpart.

    Without a counterpart the group holds a single selection and is therefore
    one-sided, which the fair odds engine reports as unavailable.

    Args:
        bet: Bet being evaluated
        counterpart: Opposite side from ``pair_bets``, if any

    Returns:
        BetGroup keyed with canonical game/group/selection keys
    """
    game_id = build_game_id(bet.league_code, bet.game_date, bet.away_team, bet.home_team)
    side = side_for_bet(bet) or SelectionSide.HOME
    prices_by_side = {side: list(bet.books)}
    if counterpart is not None:
        counter_side = side_for_bet(counterpart) or side.paired_side
        if counter_side is not None and counter_side != side:
            prices_by_side[counter_side] = list(counterpart.books)

    league = bet.league_code

    if bet.market_key == "totals" and bet.line_value is not None and len(prices_by_side) == 2:
        return BetGroupFactory.create_total(
            game_id,
            bet.line_value,
            over_prices=prices_by_side.get(SelectionSide.OVER, []),
            under_prices=prices_by_side.get(SelectionSide.UNDER, []),
            league=league,
        )

    if bet.market_key == "spreads" and bet.line_value is not None and len(prices_by_side) == 2:
        home_line = bet.line_value if side == SelectionSide.HOME else -bet.line_value
        return BetGroupFactory.create_spread(
            game_id,
            home_line,
            bet.home_team,
            bet.away_team,
            home_prices=prices_by_side.get(SelectionSide.HOME, []),
            away_prices=prices_by_side.get(SelectionSide.AWAY, []),
            league=league,
        )

    if bet.market_key == "h2h" and len(prices_by_side) == 2:
        return BetGroupFactory.create_moneyline(
            game_id,
            bet.home_team,
            bet.away_team,
            home_prices=prices_by_side.get(SelectionSide.HOME, []),
            away_prices=prices_by_side.get(SelectionSide.AWAY, []),
            league=league,
        )

    return BetGroupFactory.build_single(
        game_id,
        bet.market_key,
        bet.line_value,
        side,
        bet.selection_display,
        list(bet.books),
        league=league,
    )
