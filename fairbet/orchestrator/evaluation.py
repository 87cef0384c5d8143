"""Per-bet EV evaluation feeding the orchestrator's cache.

A bet is evaluated once, either from server annotations (authoritative when
any book carries ``ev_percent`` or the service supplies ``true_prob``) or
locally by pairing it with its opposite side and running the fair odds and EV
engines.
"""

from dataclasses import dataclass

from fairbet.analysis.ev_calculator import SelectionEVResult, compute_bet_group_ev, compute_selection_ev
from fairbet.analysis.fair_odds import FairOddsConfidence, FairOddsResult, compute_fair_odds
from fairbet.analysis.fees import FeeModel
from fairbet.analysis.sharp_books import BookClassifier
from fairbet.lines.groups import SelectionSide
from fairbet.lines.models import APIBet
from fairbet.lines.odds import probability_to_american
from fairbet.lines.pairing import build_pair_group, side_for_bet

SOURCE_SERVER = "server"
SOURCE_LOCAL = "local"

# Tier assumed for server EV that arrives without a confidence label
DEFAULT_SERVER_CONFIDENCE = FairOddsConfidence.LOW

SERVER_EV_UNAVAILABLE = "Server EV not available"


@dataclass(frozen=True)
class BetEVResult:
    """Cached EV summary of one bet.

    Attributes:
        bet_id: Stable bet identity
        best_ev_percent: Highest EV percent across books (0.0 when unavailable)
        confidence: Confidence of the fair probability
        fair_available: Whether a fair probability exists
        fair_probability: Fair probability, if available
        fair_american_odds: Fair American odds, if available
        best_book_by_ev: Book with the highest strictly positive EV
        best_book_by_price: Book paying the most
        disabled_reason: Why EV is unavailable
        source: "server" or "local"
        selection: Full per-book breakdown for local results
    """

    bet_id: str
    best_ev_percent: float
    confidence: FairOddsConfidence
    fair_available: bool
    fair_probability: float | None = None
    fair_american_odds: int | None = None
    best_book_by_ev: str | None = None
    best_book_by_price: str | None = None
    disabled_reason: str | None = None
    source: str = SOURCE_LOCAL
    selection: SelectionEVResult | None = None

    @property
    def has_positive_ev(self) -> bool:
        return self.fair_available and self.best_ev_percent > 0

    @property
    def is_reliably_positive(self) -> bool:
        """Positive EV backed by medium or high confidence (counts in stats)."""
        return self.has_positive_ev and self.confidence.is_reliable


def result_from_server(bet: APIBet, fee_model: FeeModel | None = None) -> BetEVResult:
    """Build a result from server annotations on the bet and its books.

    Per-book ``ev_percent`` values are used as given. When the server only
    supplies a fair probability (``true_prob`` on the bet or on a book), the
    per-book EV is derived from it with the fee schedule.

    Args:
        bet: Bet carrying server annotations
        fee_model: Fee lookup for derived EV (default schedule when omitted)

    Returns:
        BetEVResult with ``source`` set to "server"
    """
    fair_prob = bet.true_prob
    if fair_prob is None:
        fair_prob = next((b.true_prob for b in bet.books if b.true_prob is not None), None)

    if bet.confidence:
        confidence = FairOddsConfidence.from_label(bet.confidence)
    else:
        confidence = DEFAULT_SERVER_CONFIDENCE

    if not bet.has_server_ev and fair_prob is not None:
        return _result_from_server_probability(bet, fair_prob, confidence, fee_model)

    annotated = [book for book in bet.books if book.ev_percent is not None]
    best_ev = max(annotated, key=lambda b: b.ev_percent, default=None)
    positive = [book for book in annotated if book.ev_percent > 0]
    best_positive = max(positive, key=lambda b: b.ev_percent, default=None)

    best_price = bet.best_book
    return BetEVResult(
        bet_id=bet.id,
        best_ev_percent=best_ev.ev_percent if best_ev is not None else 0.0,
        confidence=confidence,
        fair_available=fair_prob is not None or best_ev is not None,
        fair_probability=fair_prob,
        fair_american_odds=probability_to_american(fair_prob) if fair_prob is not None else None,
        best_book_by_ev=best_positive.book if best_positive is not None else None,
        best_book_by_price=best_price.book if best_price is not None else None,
        disabled_reason=bet.ev_disabled_reason,
        source=SOURCE_SERVER,
    )


def _result_from_server_probability(
    bet: APIBet,
    fair_prob: float,
    confidence: FairOddsConfidence,
    fee_model: FeeModel | None,
) -> BetEVResult:
    selection = build_pair_group(bet).selections[0]
    fair_result = FairOddsResult(
        selection_key=selection.selection_key,
        fair_probability=fair_prob,
        fair_american_odds=probability_to_american(fair_prob),
        confidence=confidence,
        book_count=len(selection.prices),
    )
    result = compute_selection_ev(selection, fair_result, fee_model)

    return BetEVResult(
        bet_id=bet.id,
        best_ev_percent=max((b.ev_percent for b in result.books), default=0.0),
        confidence=confidence,
        fair_available=True,
        fair_probability=fair_prob,
        fair_american_odds=result.fair_american_odds,
        best_book_by_ev=result.best_by_ev.book if result.best_by_ev else None,
        best_book_by_price=result.best_by_price.book if result.best_by_price else None,
        disabled_reason=bet.ev_disabled_reason,
        source=SOURCE_SERVER,
        selection=result,
    )


def evaluate_bet(
    bet: APIBet,
    counterpart: APIBet | None,
    classifier: BookClassifier,
    fee_model: FeeModel,
) -> BetEVResult:
    """Compute a bet's EV locally from its prices and its counterpart's.

    Args:
        bet: Bet to evaluate
        counterpart: Opposite side from pairing, if present in the dataset
        classifier: Sharp book allow-list
        fee_model: Fee lookup

    Returns:
        BetEVResult; ``fair_available`` is False for one-sided or thinly
        priced markets
    """
    group = build_pair_group(bet, counterpart)
    fair_odds = compute_fair_odds(group, classifier)
    group_ev = compute_bet_group_ev(group, fair_odds, fee_model)

    selection = group.selection_for(side_for_bet(bet) or SelectionSide.HOME)
    result = group_ev.result_for(selection.selection_key) if selection else None
    if result is None:
        result = group_ev.selections[0]

    if result.fair_available:
        best_ev = max((b.ev_percent for b in result.books), default=0.0)
    else:
        best_ev = 0.0

    return BetEVResult(
        bet_id=bet.id,
        best_ev_percent=best_ev,
        confidence=result.confidence,
        fair_available=result.fair_available,
        fair_probability=result.fair_probability,
        fair_american_odds=result.fair_american_odds,
        best_book_by_ev=result.best_by_ev.book if result.best_by_ev else None,
        best_book_by_price=result.best_by_price.book if result.best_by_price else None,
        disabled_reason=result.disabled_reason,
        source=SOURCE_LOCAL,
        selection=result,
    )
