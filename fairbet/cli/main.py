"""Typer CLI entry point for the FairBet engine.

Commands:
- fairbet scan --league NBA --positive-only
- fairbet parlay <bet id> <bet id>
- fairbet version
"""

import asyncio
import os
from typing import List, Optional

from dotenv import load_dotenv

# Load .env file before anything else
load_dotenv()

import typer
from rich.console import Console

from fairbet import __version__
from fairbet.cli.formatters import format_bets_table, format_parlay_panel, format_stats_panel
from fairbet.config import get_settings
from fairbet.lines.api import FairBetAPIClient, FairBetAPIError
from fairbet.monitoring import configure_logging
from fairbet.orchestrator import OddsComparisonService, SortOption
from fairbet.orchestrator.filters import get_filter_summary

# Create Typer app
cli = typer.Typer(
    name="fairbet",
    help="""FairBet - Fair odds and expected value across sportsbooks.

WHAT IT DOES:
  Pairs both sides of every market, removes the vig from sharp book prices
  (Pinnacle, Circa, BetCRIS) to estimate fair odds, and compares every
  book's price against them, net of exchange/P2P fees.

QUICK START:
  fairbet scan --mock
  fairbet scan --league NBA --positive-only
  fairbet parlay --mock --top 3
""",
    add_completion=False,
)

# Rich console for formatted output
# Disable colors if NO_COLOR env var is set (standard convention)
console = Console(no_color=os.getenv("NO_COLOR") is not None)


def _build_service(mock: bool, league: Optional[str]) -> OddsComparisonService:
    settings = get_settings()
    if mock:
        return OddsComparisonService(settings=settings, league=league)
    client = FairBetAPIClient(settings=settings)
    return OddsComparisonService(page_source=client, settings=settings, league=league)


async def _load(service: OddsComparisonService, mock: bool) -> None:
    if mock:
        await service.load_mock_data()
    else:
        await service.refresh()


def _load_or_exit(mock: bool, league: Optional[str]) -> OddsComparisonService:
    try:
        service = _build_service(mock, league)
        asyncio.run(_load(service, mock))
    except FairBetAPIError as e:
        console.print(f"[bold red]Error:[/bold red] {e}", style="red")
        raise typer.Exit(code=1)

    if service.error_message:
        console.print(f"[bold red]Error:[/bold red] {service.error_message}", style="red")
        console.print("Retry later, or use --mock to explore sample data.")
        raise typer.Exit(code=1)
    return service


@cli.command()
def scan(
    league: Optional[str] = typer.Option(None, "--league", "-l", help="League to show (NBA, NHL, NCAAB)"),
    market: Optional[str] = typer.Option(None, "--market", "-m", help="Market to show (h2h, spreads, totals)"),
    positive_only: bool = typer.Option(False, "--positive-only", "-p", help="Only bets with positive EV"),
    include_limited: bool = typer.Option(False, "--include-limited", help="Include low-confidence bets"),
    sort: SortOption = typer.Option(SortOption.BEST_EV, "--sort", "-s", help="Sort order"),
    limit: int = typer.Option(20, "--limit", "-n", help="Show top N bets (0 for all)"),
    mock: bool = typer.Option(False, "--mock", help="Use built-in sample data instead of the API"),
    show_ids: bool = typer.Option(False, "--ids", help="Show bet ids (for fairbet parlay)"),
):
    """Fetch all odds pages and list bets by expected value.

    \b
    EXAMPLES:
      fairbet scan --mock                       # Sample data, best EV first
      fairbet scan -l NBA -m spreads -p         # NBA spreads with +EV
      fairbet scan --sort game_time -n 0        # Everything, by start time

    \b
    UNDERSTANDING EV:
      +2.5% EV = For every $100 bet, expect $2.50 profit long-term
      Only MEDIUM/HIGH confidence bets count as reliable +EV
    """
    service = _load_or_exit(mock, None)

    service.filters.league = league
    service.filters.market = market
    service.filters.positive_ev_only = positive_only
    service.filters.hide_limited_data = not include_limited
    service.set_sort(sort)

    bets = service.displayed_bets
    if limit:
        bets = bets[:limit]

    console.print(format_stats_panel(service))
    console.print(
        format_bets_table(
            bets,
            service.ev_cache,
            filter_summary=get_filter_summary(service.filters),
            show_ids=show_ids,
        )
    )


@cli.command()
def parlay(
    bet_ids: Optional[List[str]] = typer.Argument(None, help="Bet ids to combine (see fairbet scan --ids)"),
    top: int = typer.Option(0, "--top", "-t", help="Use the top N bets by EV instead of explicit ids"),
    mock: bool = typer.Option(False, "--mock", help="Use built-in sample data instead of the API"),
):
    """Combine bets into a parlay and show its fair odds.

    \b
    EXAMPLES:
      fairbet parlay --mock --top 2
      fairbet parlay 1001_h2h_team:boston_celtics_0.0 1002_totals_total:over_229.5
    """
    service = _load_or_exit(mock, None)

    selected = list(bet_ids or [])
    if top:
        selected.extend(bet.id for bet in service.displayed_bets[:top])

    if not selected:
        console.print("[yellow]No bets selected.[/yellow] Pass bet ids or --top N.")
        raise typer.Exit(code=1)

    for bet_id in selected:
        if service.bet(bet_id) is None:
            console.print(f"[yellow]Unknown bet id:[/yellow] {bet_id}")
            continue
        if not service.is_in_parlay(bet_id):
            service.toggle_parlay(bet_id)

    if not service.parlay_bets:
        console.print("[bold red]Error:[/bold red] none of the bet ids were found", style="red")
        raise typer.Exit(code=1)

    console.print(format_parlay_panel(service.parlay_state, service.parlay_bets, service.ev_cache))


@cli.command()
def version():
    """Show version and configuration info."""
    settings = get_settings()
    console.print(f"[bold cyan]FairBet Engine[/bold cyan] v{__version__}")
    console.print()
    console.print("[bold]Configuration:[/bold]")
    console.print(f"  API: {settings.api_base_url}")
    console.print(f"  API key: {'✓ configured' if settings.api_key else '✗ missing FAIRBET_API_KEY'}")
    console.print(f"  Page size: {settings.page_size} ({settings.max_concurrent_pages} concurrent)")
    books = ", ".join(settings.allowed_books) if settings.allowed_books else "all"
    console.print(f"  Books: {books}")


def main():
    """Entry point for CLI."""
    # Configure structured logging
    configure_logging(get_settings().log_mode)

    cli()


if __name__ == "__main__":
    main()
