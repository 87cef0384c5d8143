"""Rich table formatters for the odds comparison display.

Formats evaluated bets into terminal tables with color-coded confidence
levels, a dataset statistics panel and a parlay summary panel.
"""

from rich.panel import Panel
from rich.table import Table

from fairbet.analysis.fair_odds import FairOddsConfidence
from fairbet.analysis.parlay import ParlayState
from fairbet.lines.models import APIBet
from fairbet.lines.odds import format_american_odds
from fairbet.orchestrator.evaluation import BetEVResult
from fairbet.orchestrator.odds_comparison import OddsComparisonService


def format_bets_table(
    bets: list[APIBet],
    ev_results: dict[str, BetEVResult],
    filter_summary: str = "",
    show_ids: bool = False,
) -> Table:
    """Format bets as a Rich table in the given (already sorted) order.

    Args:
        bets: Bets to display
        ev_results: EV cache keyed by bet id
        filter_summary: Active filters for the caption
        show_ids: Add a column with bet ids (for ``fairbet parlay``)

    Returns:
        Rich Table
    """
    table = Table(
        title="Fair Odds Comparison",
        caption=f"Filters: {filter_summary}" if filter_summary else None,
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Matchup", justify="left", style="white")
    table.add_column("Selection", justify="left", style="yellow")
    table.add_column("Fair", justify="right", style="cyan")
    table.add_column("Best Price", justify="right", style="magenta")
    table.add_column("EV %", justify="right")
    table.add_column("Confidence", justify="center")
    if show_ids:
        table.add_column("Bet ID", style="dim")

    if not bets:
        empty = ["", "[dim]No bets match the current filters[/dim]", "", "", "", "", ""]
        if show_ids:
            empty.append("")
        table.add_row(*empty)
        return table

    for idx, bet in enumerate(bets, start=1):
        result = ev_results.get(bet.id)
        row = [
            str(idx),
            bet.matchup_display,
            bet.selection_display,
            _format_fair(result),
            _format_best_price(bet, result),
            _format_ev(result),
            _format_confidence(result.confidence if result else FairOddsConfidence.NONE),
        ]
        if show_ids:
            row.append(bet.id)
        table.add_row(*row)

    return table


def format_stats_panel(service: OddsComparisonService) -> Panel:
    """Dataset statistics: qualified bets, reliable +EV count, rarity, best EV."""
    best_ev = service.best_ev_available
    best_bet = service.best_bet

    lines = [
        f"Qualified bets: [bold]{service.total_bets_count}[/bold]",
        f"Reliable +EV: [bold green]{service.positive_ev_count}[/bold green]"
        f" ({service.positive_ev_rarity:.1f}%)",
        f"Best EV: [bold]{best_ev:+.1f}%[/bold]" if best_ev is not None else "Best EV: [dim]n/a[/dim]",
    ]
    if best_bet is not None:
        lines.append(f"Best bet: {best_bet.matchup_display} - {best_bet.selection_display}")

    for breakdown in service.league_breakdown:
        lines.append(
            f"  {breakdown.league}: {breakdown.total} bets, {breakdown.positive_ev} +EV"
        )

    lines.append(
        f"Showing {service.filtered_total_count} bets"
        f" ({service.filtered_positive_ev_count} reliable +EV)"
    )

    return Panel("\n".join(lines), title="Dataset", border_style="cyan")


def format_parlay_panel(
    state: ParlayState,
    bets: list[APIBet],
    ev_results: dict[str, BetEVResult],
) -> Panel:
    """Parlay legs with per-leg fair odds and the combined estimate."""
    lines = [f"[bold]{state.leg_count}-Leg Parlay[/bold]", ""]

    for bet in bets:
        result = ev_results.get(bet.id)
        lines.append(f"{bet.matchup_display}: {bet.selection_display} ({_format_fair(result)})")

    lines.append("")
    if state.is_available:
        lines.append(f"Fair odds: [bold]{format_american_odds(state.american_odds)}[/bold]")
        lines.append(f"Fair probability: {state.probability * 100:.1f}%")
    else:
        lines.append("Fair odds: [dim]n/a[/dim] (a leg has no fair odds)")
    lines.append(f"Confidence: {_format_confidence(state.confidence)}")

    return Panel("\n".join(lines), title="Parlay", border_style="green")


def _format_fair(result: BetEVResult | None) -> str:
    if result is None or result.fair_american_odds is None:
        return "[dim]n/a[/dim]"
    return format_american_odds(result.fair_american_odds)


def _format_best_price(bet: APIBet, result: BetEVResult | None) -> str:
    best = bet.best_book
    if best is None:
        return "[dim]n/a[/dim]"
    book = result.best_book_by_ev if result and result.best_book_by_ev else best.book
    price = next((b.price for b in bet.books if b.book == book), best.price)
    return f"{format_american_odds(price)} {book}"


def _format_ev(result: BetEVResult | None) -> str:
    if result is None or not result.fair_available:
        return "[dim]n/a[/dim]"
    if result.best_ev_percent > 0:
        return f"[bold green]{result.best_ev_percent:+.1f}%[/bold green]"
    return f"[red]{result.best_ev_percent:+.1f}%[/red]"


def _format_confidence(confidence: FairOddsConfidence) -> str:
    """Color-code confidence level.

    Args:
        confidence: Confidence grade

    Returns:
        Rich markup string with color coding
    """
    if confidence == FairOddsConfidence.HIGH:
        return "[bold green]HIGH[/bold green]"
    elif confidence == FairOddsConfidence.MEDIUM:
        return "[yellow]MEDIUM[/yellow]"
    elif confidence == FairOddsConfidence.LOW:
        return "[dim]LOW[/dim]"
    else:
        return "[dim]NONE[/dim]"
