"""Fee-aware expected value per book.

For a selection with fair probability p and a book price:
    gross_profit = profit per unit stake at the book's American odds
    net_profit   = gross_profit after the book's fee on winnings
    EV           = p × net_profit - (1 - p)
    EV%          = EV × 100

Each book is evaluated independently. When fair odds are unavailable, every
book still gets a result (EV exactly 0, fee fields populated) and the selection
carries ``fair_available=False`` plus a reason string. That is a different
thing from a computed EV of zero and callers must check the flag.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from fairbet.analysis.fair_odds import BetGroupFairOdds, FairOddsConfidence, FairOddsResult
from fairbet.analysis.fees import FeeModel
from fairbet.lines.groups import BetGroup, PairingStatus, Selection
from fairbet.lines.odds import profit_per_unit_stake

# Reasons EV is unavailable for a selection
DISABLED_ONE_SIDED = "Only one side of this market is priced"
DISABLED_UNPAIRED = "No book prices both sides of this market"
DISABLED_INSUFFICIENT_DATA = "Not enough sharp or consensus pricing to estimate fair odds"
DISABLED_MISSING_SELECTION = "No fair odds for this selection"


@dataclass(frozen=True)
class BookEVResult:
    """EV of one book's price on one selection.

    Attributes:
        book: Sportsbook name
        american_odds: Book price
        gross_profit: Profit per unit stake before fees
        net_profit: Profit per unit stake after fees
        ev: Expected value per unit stake
        ev_percent: ``ev`` as a percentage
        fee_applied: Whether the book charges a fee
        fee_rate: Fee rate on winnings (0.0 for fee-free books)
    """

    book: str
    american_odds: int
    gross_profit: float
    net_profit: float
    ev: float
    ev_percent: float
    fee_applied: bool = False
    fee_rate: float = 0.0

    @property
    def has_positive_ev(self) -> bool:
        return self.ev > 0

    @property
    def ev_percent_display(self) -> str:
        return f"{self.ev_percent:+.1f}%"


@dataclass(frozen=True)
class SelectionEVResult:
    """EV of every book quoting one selection."""

    selection_key: str
    fair_available: bool
    fair_probability: float | None
    fair_american_odds: int | None
    books: tuple[BookEVResult, ...]
    best_by_ev: BookEVResult | None = None
    best_by_price: BookEVResult | None = None
    disabled_reason: str | None = None
    confidence: FairOddsConfidence = FairOddsConfidence.NONE

    @property
    def best_ev_percent(self) -> float:
        if self.best_by_ev is not None:
            return self.best_by_ev.ev_percent
        return max((b.ev_percent for b in self.books), default=0.0)


@dataclass(frozen=True)
class BetGroupEVResult:
    """EV results for every selection of a bet group."""

    bet_group_key: str
    selections: tuple[SelectionEVResult, ...]
    fair_available: bool
    confidence: FairOddsConfidence
    computed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def result_for(self, selection_key: str) -> SelectionEVResult | None:
        for result in self.selections:
            if result.selection_key == selection_key:
                return result
        return None


def compute_book_ev(
    book: str,
    american_odds: int,
    fair_probability: float | None,
    fee_model: FeeModel,
) -> BookEVResult:
    """Compute fee-adjusted EV for one book.

    Args:
        book: Sportsbook name
        american_odds: Book price
        fair_probability: Fair win probability, or None when unavailable
        fee_model: Fee lookup

    Returns:
        BookEVResult (EV exactly 0 when ``fair_probability`` is None)

    Example:
        >>> round(compute_book_ev("fanduel", 100, 0.55, FeeModel()).ev_percent, 4)
        10.0
    """
    fee = fee_model.config_for(book)
    gross = profit_per_unit_stake(american_odds)
    net = fee.apply_fee(gross)

    if fair_probability is None:
        ev = 0.0
    else:
        ev = fair_probability * net - (1.0 - fair_probability)

    return BookEVResult(
        book=book,
        american_odds=american_odds,
        gross_profit=gross,
        net_profit=net,
        ev=ev,
        ev_percent=ev * 100.0,
        fee_applied=fee.charges_fee,
        fee_rate=fee.rate,
    )


def _first_max(results: list[BookEVResult], key) -> BookEVResult | None:
    # Strict comparison keeps the earliest book on ties
    best = None
    for result in results:
        if best is None or key(result) > key(best):
            best = result
    return best


def compute_selection_ev(
    selection: Selection,
    fair_result: FairOddsResult | None,
    fee_model: FeeModel | None = None,
    disabled_reason: str | None = None,
) -> SelectionEVResult:
    """Compute EV for every book quoting a selection.

    Args:
        selection: Selection with book prices (fetch order)
        fair_result: Fair odds for the selection, or None when unavailable
        fee_model: Fee lookup (default schedule when omitted)
        disabled_reason: Reason reported when ``fair_result`` is None

    Returns:
        SelectionEVResult with ``best_by_ev`` (first book with the highest
        strictly positive EV) and ``best_by_price`` (first book paying the most)
    """
    fee_model = fee_model or FeeModel()
    fair_prob = fair_result.fair_probability if fair_result is not None else None

    books = [
        compute_book_ev(price.book, price.price, fair_prob, fee_model)
        for price in selection.prices
    ]

    best_by_price = _first_max(books, key=lambda r: r.gross_profit)

    if fair_result is None:
        return SelectionEVResult(
            selection_key=selection.selection_key,
            fair_available=False,
            fair_probability=None,
            fair_american_odds=None,
            books=tuple(books),
            best_by_ev=None,
            best_by_price=best_by_price,
            disabled_reason=disabled_reason or DISABLED_INSUFFICIENT_DATA,
        )

    positive = [r for r in books if r.ev > 0]
    return SelectionEVResult(
        selection_key=selection.selection_key,
        fair_available=True,
        fair_probability=fair_result.fair_probability,
        fair_american_odds=fair_result.fair_american_odds,
        books=tuple(books),
        best_by_ev=_first_max(positive, key=lambda r: r.ev),
        best_by_price=best_by_price,
        confidence=fair_result.confidence,
    )


def disabled_reason_for(bet_group: BetGroup) -> str:
    """Explain why a group has no fair odds."""
    if len(bet_group.selections) < 2 or bet_group.pairing_status == PairingStatus.ONE_SIDED:
        return DISABLED_ONE_SIDED
    if bet_group.pairing_status == PairingStatus.UNPAIRED:
        return DISABLED_UNPAIRED
    return DISABLED_INSUFFICIENT_DATA


def compute_bet_group_ev(
    bet_group: BetGroup,
    fair_odds: BetGroupFairOdds | None,
    fee_model: FeeModel | None = None,
) -> BetGroupEVResult:
    """Compute EV for every selection of a bet group.

    Args:
        bet_group: Group whose selections carry book prices
        fair_odds: Output of ``compute_fair_odds``, or None when unavailable
        fee_model: Fee lookup (default schedule when omitted)

    Returns:
        BetGroupEVResult stamped with the computation time
    """
    fee_model = fee_model or FeeModel()
    reason = None if fair_odds is not None else disabled_reason_for(bet_group)

    results = []
    for selection in bet_group.selections:
        fair_result = fair_odds.result_for(selection.selection_key) if fair_odds else None
        selection_reason = reason
        if fair_odds is not None and fair_result is None:
            selection_reason = DISABLED_MISSING_SELECTION
        results.append(
            compute_selection_ev(selection, fair_result, fee_model, selection_reason)
        )

    return BetGroupEVResult(
        bet_group_key=bet_group.bet_group_key,
        selections=tuple(results),
        fair_available=fair_odds is not None,
        confidence=fair_odds.confidence if fair_odds else FairOddsConfidence.NONE,
    )
