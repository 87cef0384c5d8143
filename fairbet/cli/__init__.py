"""CLI package for the FairBet engine.

Provides the scan/parlay command line interface.
"""

from fairbet.cli.main import cli

__all__ = ["cli"]
