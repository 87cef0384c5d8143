"""Tests for the CLI commands.

These tests verify:
1. scan and parlay run end to end on the mock dataset
2. Filters are reflected in the output
3. A missing API key exits with an error instead of a traceback
"""

import pytest
from typer.testing import CliRunner

from fairbet.cli.main import cli
from fairbet.config import get_settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Fresh settings without an API key for every test."""
    monkeypatch.setenv("FAIRBET_API_KEY", "")
    monkeypatch.setenv("NO_COLOR", "1")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestScanCommand:
    """Tests for fairbet scan."""

    def test_scan_mock(self):
        result = runner.invoke(cli, ["scan", "--mock"])

        assert result.exit_code == 0
        assert "Dataset" in result.output
        assert "Qualified bets" in result.output
        assert "Fair Odds Comparison" in result.output

    def test_scan_with_filters(self):
        result = runner.invoke(cli, ["scan", "--mock", "--league", "NHL", "--positive-only"])

        assert result.exit_code == 0
        assert "league=NHL" in result.output

    def test_scan_no_matches(self):
        result = runner.invoke(cli, ["scan", "--mock", "--market", "player_points"])

        assert result.exit_code == 0
        assert "Showing 0 bets" in result.output

    def test_scan_sort_option(self):
        result = runner.invoke(cli, ["scan", "--mock", "--sort", "game_time", "-n", "0"])
        assert result.exit_code == 0

    def test_scan_without_api_key(self):
        result = runner.invoke(cli, ["scan"])

        assert result.exit_code == 1
        assert "FAIRBET_API_KEY" in result.output


class TestParlayCommand:
    """Tests for fairbet parlay."""

    def test_parlay_top(self):
        result = runner.invoke(cli, ["parlay", "--mock", "--top", "2"])

        assert result.exit_code == 0
        assert "2-Leg Parlay" in result.output
        assert "Fair odds:" in result.output

    def test_parlay_by_id(self):
        result = runner.invoke(cli, ["parlay", "--mock", "1001_totals_total:over_224.5"])

        assert result.exit_code == 0
        assert "1-Leg Parlay" in result.output

    def test_parlay_with_one_sided_leg(self):
        result = runner.invoke(cli, ["parlay", "--mock", "--top", "1", "3002_h2h_team:kansas_jayhawks_0.0"])

        assert result.exit_code == 0
        assert "2-Leg Parlay" in result.output
        assert "n/a" in result.output
        assert "Fair probability" not in result.output

    def test_parlay_requires_selection(self):
        result = runner.invoke(cli, ["parlay", "--mock"])

        assert result.exit_code == 1
        assert "No bets selected" in result.output

    def test_parlay_unknown_id(self):
        result = runner.invoke(cli, ["parlay", "--mock", "not-a-bet"])

        assert result.exit_code == 1
        assert "Unknown bet id" in result.output


class TestVersionCommand:
    """Tests for fairbet version."""

    def test_version(self):
        result = runner.invoke(cli, ["version"])

        assert result.exit_code == 0
        assert "FairBet Engine" in result.output
        assert "FAIRBET_API_KEY" in result.output
