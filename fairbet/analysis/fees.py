"""Per-book fee schedules.

Traditional sportsbooks build their margin into the price. Peer-to-peer
platforms and exchanges instead charge a commission on net winnings, which has
to be taken out of the profit before EV is computed.

Books missing from the schedule are treated as fee-free, so a gap in fee data
never blocks EV display.
"""

from dataclasses import dataclass
from enum import Enum


class FeeType(str, Enum):
    NONE = "none"  # Traditional sportsbook, no explicit fee
    PERCENT_ON_WINNINGS = "percent_on_winnings"  # P2P/exchange commission on net profit


@dataclass(frozen=True)
class BookFeeConfig:
    """Fee profile of one book.

    Attributes:
        fee_type: How the fee is charged
        rate: Fee rate (0.02 = 2% of winnings)
    """

    fee_type: FeeType = FeeType.NONE
    rate: float = 0.0

    @property
    def charges_fee(self) -> bool:
        return self.fee_type != FeeType.NONE

    def apply_fee(self, gross_profit: float) -> float:
        """Net profit after the fee.

        Example:
            >>> BookFeeConfig(FeeType.PERCENT_ON_WINNINGS, 0.02).apply_fee(1.0)
            0.98
        """
        if self.fee_type == FeeType.PERCENT_ON_WINNINGS:
            return gross_profit * (1.0 - self.rate)
        return gross_profit


NO_FEE = BookFeeConfig()

DEFAULT_FEE_SCHEDULE: dict[str, BookFeeConfig] = {
    "draftkings": NO_FEE,
    "fanduel": NO_FEE,
    "betmgm": NO_FEE,
    "caesars": NO_FEE,
    "pointsbet": NO_FEE,
    "bet365": NO_FEE,
    "pinnacle": NO_FEE,
    "circa": NO_FEE,
    "betcris": NO_FEE,
    "betrivers": NO_FEE,
    "unibet": NO_FEE,
    "wynnbet": NO_FEE,
    "superbook": NO_FEE,
    # P2P platforms - 2% of winnings
    "novig": BookFeeConfig(FeeType.PERCENT_ON_WINNINGS, 0.02),
    "prophetx": BookFeeConfig(FeeType.PERCENT_ON_WINNINGS, 0.02),
    # Exchanges - 1% of winnings
    "betfair": BookFeeConfig(FeeType.PERCENT_ON_WINNINGS, 0.01),
    "smarkets": BookFeeConfig(FeeType.PERCENT_ON_WINNINGS, 0.01),
}


class FeeModel:
    """Case-insensitive lookup of book fee profiles."""

    def __init__(self, schedule: dict[str, BookFeeConfig] | None = None) -> None:
        source = schedule if schedule is not None else DEFAULT_FEE_SCHEDULE
        self._schedule = {book.lower(): config for book, config in source.items()}

    def config_for(self, book: str) -> BookFeeConfig:
        """Fee profile for a book, defaulting to no fee."""
        return self._schedule.get(book.lower(), NO_FEE)
