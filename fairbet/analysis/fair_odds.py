"""Fair odds from sharp book prices via median aggregation and vig removal.

Uses the margin-proportional method on per-side medians:
1. Convert each sharp book's American price to an implied probability
2. Per side, take the median across sharp books quoting every side
   (robust to one outlier line)
3. Sum the per-side medians (will be > 1.0 due to vig/margin)
4. Divide each median by the total to get fair probabilities (sum to 1.0)

Confidence reflects how much independent sharp evidence backs the estimate:
    HIGH    2+ sharp books quote every side
    MEDIUM  exactly 1 sharp book quotes every side
    LOW     no sharp coverage, but 3+ quotes across the pair (soft consensus)
    (none)  not enough data; no result is produced at all

Example:
    Two sharp books at -110/-110:
    - Implied probs per side: 0.5238, 0.5238 = 104.76% (4.76% vig)
    - Fair probs: 0.50, 0.50, confidence HIGH
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum

from fairbet.analysis.sharp_books import (
    MIN_SHARP_BOOKS_FOR_HIGH_CONFIDENCE,
    MIN_SHARP_BOOKS_FOR_MEDIUM_CONFIDENCE,
    BookClassifier,
)
from fairbet.lines.groups import BetGroup, Selection, SelectionSide
from fairbet.lines.odds import american_to_probability, probability_to_american

# Total quotes across a pair needed for a soft-book consensus estimate
MIN_QUOTES_FOR_CONSENSUS = 3


class FairOddsConfidence(IntEnum):
    """Reliability grade of a fair odds estimate, ordered NONE < LOW < MEDIUM < HIGH."""

    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.lower()

    @property
    def is_reliable(self) -> bool:
        """Medium and high estimates count toward aggregate statistics."""
        return self >= FairOddsConfidence.MEDIUM

    @classmethod
    def from_label(cls, label: str | None) -> "FairOddsConfidence":
        """Parse a tier label ("high", "Medium", ...); unknown labels are NONE."""
        if not label:
            return cls.NONE
        try:
            return cls[label.strip().upper()]
        except KeyError:
            return cls.NONE


@dataclass(frozen=True)
class FairOddsResult:
    """Fair odds for one selection.

    Attributes:
        selection_key: Selection the estimate belongs to
        fair_probability: Vig-free probability
        fair_american_odds: ``fair_probability`` as American odds
        confidence: Confidence grade of the estimate
        book_count: Number of books that contributed
        books_used: Contributing books (lower-case)
        vig_removed: Overround of the aggregated market (e.g., 0.0476)
    """

    selection_key: str
    fair_probability: float
    fair_american_odds: int
    confidence: FairOddsConfidence
    book_count: int
    books_used: tuple[str, ...] = ()
    vig_removed: float = 0.0

    @property
    def display_odds(self) -> str:
        if self.fair_american_odds > 0:
            return f"+{self.fair_american_odds}"
        return str(self.fair_american_odds)


@dataclass(frozen=True)
class BetGroupFairOdds:
    """Fair odds for every selection of a bet group."""

    bet_group_key: str
    selections: tuple[FairOddsResult, ...]
    market_vig: float
    confidence: FairOddsConfidence
    book_count: int
    computed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def result_for(self, selection_key: str) -> FairOddsResult | None:
        for result in self.selections:
            if result.selection_key == selection_key:
                return result
        return None

    def fair_odds_for(self, side: SelectionSide) -> FairOddsResult | None:
        suffix = f":{side.value}"
        for result in self.selections:
            if result.selection_key.endswith(suffix):
                return result
        return None


def median(values: list[float]) -> float:
    """Median of a list (mean of the middle pair for even counts, 0.0 if empty)."""
    if not values:
        return 0.0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2.0
    return ordered[mid]


def remove_vig(implied_probs: list[float]) -> list[float]:
    """Remove bookmaker vig by proportional normalization.

    Args:
        implied_probs: Implied probabilities of every outcome of one market

    Returns:
        Fair probabilities summing to 1.0

    Raises:
        ValueError: If fewer than 2 outcomes (can't calculate vig)

    Example:
        >>> remove_vig([0.5238, 0.5238])
        [0.5, 0.5]
    """
    if len(implied_probs) < 2:
        raise ValueError(
            "Need at least 2 outcomes to remove vig. "
            f"Got {len(implied_probs)} outcome(s)."
        )

    total = sum(implied_probs)
    if total <= 0:
        return [1.0 / len(implied_probs)] * len(implied_probs)
    return [prob / total for prob in implied_probs]


def get_market_vig(implied_probs: list[float]) -> float:
    """Overround of a market as a fraction (0.0476 for -110/-110)."""
    return sum(implied_probs) - 1.0


def _sharp_books_quoting_all_sides(
    bet_group: BetGroup, classifier: BookClassifier
) -> list[str]:
    sport = bet_group.league_code
    sharp = []
    for book in sorted(bet_group.books_pricing_all_sides):
        flagged = any(
            (price := selection.price_for(book)) is not None and price.is_sharp
            for selection in bet_group.selections
        )
        if flagged or classifier.is_sharp(book, sport):
            sharp.append(book)
    return sharp


def _median_probability(selection: Selection, books: list[str] | None) -> float:
    if books is None:
        probs = [american_to_probability(price.price) for price in selection.prices]
    else:
        probs = [
            american_to_probability(selection.price_for(book).price)
            for book in books
        ]
    return median(probs)


def compute_fair_odds(
    bet_group: BetGroup, classifier: BookClassifier | None = None
) -> BetGroupFairOdds | None:
    """Compute fair odds for a bet group.

    Args:
        bet_group: Paired group with 2+ selections
        classifier: Sharp book allow-list (default per-sport lists)

    Returns:
        BetGroupFairOdds, or None when there is not enough data for any
        estimate (group not paired, or no sharp coverage and fewer than 3 quotes)
    """
    selections = list(bet_group.selections)
    if len(selections) < 2 or not bet_group.can_compute_fair_odds:
        return None

    classifier = classifier or BookClassifier()
    sharp_books = _sharp_books_quoting_all_sides(bet_group, classifier)

    if len(sharp_books) >= MIN_SHARP_BOOKS_FOR_MEDIUM_CONFIDENCE:
        raw_probs = [_median_probability(s, sharp_books) for s in selections]
        books_used = tuple(sharp_books)
        if len(sharp_books) >= MIN_SHARP_BOOKS_FOR_HIGH_CONFIDENCE:
            confidence = FairOddsConfidence.HIGH
        else:
            confidence = FairOddsConfidence.MEDIUM
    elif bet_group.total_quotes >= MIN_QUOTES_FOR_CONSENSUS:
        raw_probs = [_median_probability(s, None) for s in selections]
        books_used = tuple(sorted(bet_group.all_book_keys))
        confidence = FairOddsConfidence.LOW
    else:
        return None

    fair_probs = remove_vig(raw_probs)
    market_vig = get_market_vig(raw_probs)

    results = tuple(
        FairOddsResult(
            selection_key=selection.selection_key,
            fair_probability=fair_prob,
            fair_american_odds=probability_to_american(fair_prob),
            confidence=confidence,
            book_count=len(books_used),
            books_used=books_used,
            vig_removed=market_vig,
        )
        for selection, fair_prob in zip(selections, fair_probs)
    )

    return BetGroupFairOdds(
        bet_group_key=bet_group.bet_group_key,
        selections=results,
        market_vig=market_vig,
        confidence=confidence,
        book_count=len(books_used),
    )


def calculate_edge(price: int, fair_probability: float) -> float:
    """Fair probability minus the book's implied probability."""
    return fair_probability - american_to_probability(price)


def calculate_ev_percent(price: int, fair_probability: float) -> float:
    """Ratio-based edge: ``(p_fair / implied - 1) * 100``.

    A quick measure of relative mispricing. The stake-accurate, fee-aware EV
    lives in ``ev_calculator.compute_book_ev``.
    """
    implied = american_to_probability(price)
    if implied <= 0:
        return 0.0
    return (fair_probability / implied - 1.0) * 100.0


def has_positive_edge(price: int, fair_probability: float) -> bool:
    return calculate_edge(price, fair_probability) > 0
