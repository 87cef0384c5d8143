"""Metrics dataclasses for observability of the fetch/compute cycle.

Provides dataclasses for tracking:
- Page fetch progress (requested/completed/failed/discarded pages)
- EV cache behaviour (fresh computations vs reused entries)

Usage:
    from fairbet.monitoring.metrics import FetchMetrics, EVCacheMetrics

    fm = FetchMetrics(pages_requested=3, pages_completed=3)
    cm = EVCacheMetrics(computed=1200, reused=500)
    print(f"Reuse rate: {cm.reuse_rate}%")
"""

from dataclasses import dataclass


@dataclass
class FetchMetrics:
    """Counters for one refresh cycle of paginated fetches.

    Attributes:
        pages_requested: Page requests dispatched (first page included)
        pages_completed: Pages that arrived successfully
        pages_failed: Pages whose request raised
        pages_discarded: Completed pages dropped (stale generation or after a failure)
        bets_appended: Bets merged into the displayed dataset
    """

    pages_requested: int = 0
    pages_completed: int = 0
    pages_failed: int = 0
    pages_discarded: int = 0
    bets_appended: int = 0

    def to_dict(self) -> dict:
        """Export metrics as dictionary for reporting."""
        return {
            "pages_requested": self.pages_requested,
            "pages_completed": self.pages_completed,
            "pages_failed": self.pages_failed,
            "pages_discarded": self.pages_discarded,
            "bets_appended": self.bets_appended,
        }


@dataclass
class EVCacheMetrics:
    """Track how EV results enter the append-only cache.

    Attributes:
        computed: Results computed locally (fair odds + EV engines)
        server: Results taken from server annotations
        reused: Lookups served from an existing entry
    """

    computed: int = 0
    server: int = 0
    reused: int = 0

    @property
    def reuse_rate(self) -> float:
        """Percentage of cache operations served from existing entries.

        Returns 0.0 if no cache operations have occurred.
        """
        total = self.computed + self.server + self.reused
        return round(self.reused / total * 100, 1) if total > 0 else 0.0

    def to_dict(self) -> dict:
        """Export metrics as dictionary for reporting."""
        return {
            "computed": self.computed,
            "server": self.server,
            "reused": self.reused,
            "reuse_rate": self.reuse_rate,
        }
