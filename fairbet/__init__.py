"""FairBet - fair odds and expected value engine for sportsbook odds comparison."""

__version__ = "0.1.0"
