"""Tests for fetch and EV cache metrics dataclasses."""

import pytest

from fairbet.monitoring.metrics import EVCacheMetrics, FetchMetrics


class TestFetchMetrics:
    """Tests for FetchMetrics dataclass."""

    def test_defaults(self):
        metrics = FetchMetrics()
        assert metrics.pages_requested == 0
        assert metrics.pages_discarded == 0

    def test_to_dict(self):
        metrics = FetchMetrics(pages_requested=3, pages_completed=2, pages_failed=1, bets_appended=1000)
        d = metrics.to_dict()

        assert d == {
            "pages_requested": 3,
            "pages_completed": 2,
            "pages_failed": 1,
            "pages_discarded": 0,
            "bets_appended": 1000,
        }


class TestEVCacheMetrics:
    """Tests for EVCacheMetrics dataclass."""

    def test_reuse_rate(self):
        metrics = EVCacheMetrics(computed=60, server=20, reused=20)
        assert metrics.reuse_rate == 20.0

    def test_empty(self):
        """Empty metrics return 0.0 for the reuse rate."""
        assert EVCacheMetrics().reuse_rate == 0.0

    def test_all_reused(self):
        assert EVCacheMetrics(reused=50).reuse_rate == 100.0

    def test_to_dict(self):
        """to_dict includes all fields and the computed rate."""
        d = EVCacheMetrics(computed=10, server=5, reused=2).to_dict()

        assert d["computed"] == 10
        assert d["server"] == 5
        assert d["reused"] == 2
        assert d["reuse_rate"] == pytest.approx(11.8, rel=0.01)  # 2/17*100
