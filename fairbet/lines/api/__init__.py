"""Odds service clients."""

from fairbet.lines.api.fairbet_api import FairBetAPIClient, FairBetAPIError

__all__ = ["FairBetAPIClient", "FairBetAPIError"]
