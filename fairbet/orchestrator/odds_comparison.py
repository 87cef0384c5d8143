"""Odds comparison orchestrator: paginated fetch, incremental EV and stats.

The service loads every page of bets for the current view:

1. The first page (offset 0) is fetched, evaluated and exposed on its own so
   results show up after one round trip.
2. Remaining offsets are dispatched in ascending order through a bounded pool
   (``max_concurrent_pages``). Pages may complete out of order but are appended
   strictly in offset order.
3. Each append evaluates only bet ids not yet in the EV cache; existing entries
   are never recomputed until the next full reset.

``refresh()`` cancels the in-flight cycle (and its pending page requests)
before starting a new one. Every append after an ``await`` checks the fetch
generation, so a cancelled cycle never merges into the dataset.
"""

import asyncio
from dataclasses import dataclass
from typing import Protocol

from fairbet.analysis.fair_odds import FairOddsConfidence
from fairbet.analysis.fees import FeeModel
from fairbet.analysis.parlay import ParlayLeg, ParlayState, combine_parlay
from fairbet.analysis.sharp_books import BookClassifier
from fairbet.config import Settings, get_settings
from fairbet.lines.mock_data import MockDataProvider
from fairbet.lines.models import APIBet, BetsResponse, FairBetLeague
from fairbet.lines.pairing import pair_bets
from fairbet.monitoring import (
    EVCacheMetrics,
    FetchMetrics,
    bind_fetch_generation,
    get_logger,
    unbind_fetch_generation,
)
from fairbet.orchestrator.evaluation import BetEVResult, evaluate_bet, result_from_server
from fairbet.orchestrator.filters import FilterState, SortOption, filter_bets, sort_bets

log = get_logger()


class BetsPageSource(Protocol):
    """Anything that serves pages of bets (API client, mock provider, test fake)."""

    async def fetch_odds(
        self,
        league: FairBetLeague | str | None = None,
        limit: int = 500,
        offset: int = 0,
    ) -> BetsResponse: ...


@dataclass(frozen=True)
class LeagueBreakdown:
    """Qualified and reliably positive bet counts for one league."""

    league: str
    total: int
    positive_ev: int


class OddsComparisonService:
    """Fetches all bet pages and keeps an incrementally computed EV cache.

    Attributes:
        all_bets: Full dataset in offset order
        ev_cache: EV result per bet id (append-only until reset)
        pairs: Bet id to counterpart bet id, recomputed per page
        filters: Active filter/sort state
        is_loading: First page in flight
        is_loading_more: Background pages in flight
        error_message: Set when the first page fails and no dataset exists
        fetch_metrics: Counters of the latest fetch cycle
        cache_metrics: EV cache counters since the last reset
    """

    def __init__(
        self,
        page_source: BetsPageSource | None = None,
        settings: Settings | None = None,
        classifier: BookClassifier | None = None,
        fee_model: FeeModel | None = None,
        mock_provider: MockDataProvider | None = None,
        league: FairBetLeague | str | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.mock_provider = mock_provider or MockDataProvider()
        self.page_source: BetsPageSource = page_source or self.mock_provider
        self.classifier = classifier or BookClassifier()
        self.fee_model = fee_model or FeeModel()
        self.league = league
        self.allowed_books = {book.lower() for book in self.settings.allowed_books}

        self.all_bets: list[APIBet] = []
        self.ev_cache: dict[str, BetEVResult] = {}
        self.pairs: dict[str, str] = {}
        self.books_available: list[str] = []
        self.total_available = 0

        self.filters = FilterState(min_books=self.settings.min_books_for_stats)
        self.is_loading = False
        self.is_loading_more = False
        self.error_message: str | None = None

        self.fetch_metrics = FetchMetrics()
        self.cache_metrics = EVCacheMetrics()

        self._bets_by_id: dict[str, APIBet] = {}
        self._parlay_ids: list[str] = []
        self._generation = 0
        self._load_task: asyncio.Task | None = None

    # ------------------------------------------------------------------
    # Fetch cycle
    # ------------------------------------------------------------------

    @property
    def generation(self) -> int:
        return self._generation

    async def refresh(self) -> None:
        """Cancel any in-flight cycle and load every page again.

        Returns once the new cycle finishes, or silently if a later refresh
        cancels it.
        """
        self._generation += 1
        generation = self._generation
        await self._cancel_load()

        task = asyncio.create_task(self._load(generation))
        self._load_task = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise

        if not task.cancelled():
            task.result()

    async def load_all_data(self) -> None:
        """Alias of ``refresh`` for the initial load."""
        await self.refresh()

    async def load_mock_data(self) -> None:
        """Switch to the mock provider's dataset (full reset)."""
        self._generation += 1
        await self._cancel_load()
        self.page_source = self.mock_provider

        response = self.mock_provider.get_mock_bets_response()
        self._reset(response)
        self._append_page(response.bets)
        self.is_loading = False
        self.is_loading_more = False
        log.info("mock_data_loaded", bet_count=len(self.all_bets))

    async def cancel(self) -> None:
        """Cancel the in-flight cycle without starting a new one."""
        self._generation += 1
        await self._cancel_load()
        self.is_loading = False
        self.is_loading_more = False

    async def _cancel_load(self) -> None:
        task = self._load_task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})
            log.info("fetch_cycle_cancelled")
        self._load_task = None

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _load(self, generation: int) -> None:
        bind_fetch_generation(generation)
        metrics = FetchMetrics()
        self.fetch_metrics = metrics
        page_size = self.settings.page_size

        self.is_loading = True
        self.error_message = None
        try:
            metrics.pages_requested += 1
            try:
                first = await self.page_source.fetch_odds(
                    league=self.league, limit=page_size, offset=0
                )
            except asyncio.CancelledError:
                raise
            except Exception as e:
                metrics.pages_failed += 1
                if not self._is_current(generation):
                    return
                if self.all_bets:
                    log.warning("first_page_failed_keeping_dataset", error=str(e), bet_count=len(self.all_bets))
                else:
                    self.error_message = str(e) or type(e).__name__
                    log.error("first_page_failed", error=self.error_message)
                return

            if not self._is_current(generation):
                metrics.pages_discarded += 1
                return

            metrics.pages_completed += 1
            self._reset(first)
            metrics.bets_appended += self._append_page(first.bets)
            self.is_loading = False
            log.info("first_page_loaded", bet_count=len(first.bets), total=first.total)

            if len(first.bets) < page_size:
                return
            offsets = list(range(page_size, first.total, page_size))
            if offsets:
                await self._load_remaining(generation, offsets, metrics)
        finally:
            if self._is_current(generation):
                self.is_loading = False
                self.is_loading_more = False
            log.info("fetch_cycle_finished", **metrics.to_dict())
            unbind_fetch_generation()

    async def _load_remaining(
        self, generation: int, offsets: list[int], metrics: FetchMetrics
    ) -> None:
        semaphore = asyncio.Semaphore(self.settings.max_concurrent_pages)
        page_size = self.settings.page_size

        async def fetch_page(offset: int) -> BetsResponse:
            async with semaphore:
                metrics.pages_requested += 1
                return await self.page_source.fetch_odds(
                    league=self.league, limit=page_size, offset=offset
                )

        self.is_loading_more = True
        # Created in ascending order, so the semaphore dispatches ascending offsets
        tasks = {offset: asyncio.create_task(fetch_page(offset)) for offset in offsets}
        appended: set[int] = set()
        try:
            for offset in offsets:
                try:
                    page = await tasks[offset]
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    metrics.pages_failed += 1
                    log.warning("background_page_failed", offset=offset, error=str(e))
                    return

                if not self._is_current(generation):
                    return

                metrics.pages_completed += 1
                metrics.bets_appended += self._append_page(page.bets)
                appended.add(offset)
                log.info("page_appended", offset=offset, bet_count=len(page.bets), total_bets=len(self.all_bets))
        finally:
            metrics.pages_discarded += self._drain(tasks, appended)

    @staticmethod
    def _drain(tasks: dict[int, asyncio.Task], appended: set[int]) -> int:
        """Cancel pending page tasks; count completed pages never appended."""
        discarded = 0
        for offset, task in tasks.items():
            if not task.done():
                task.cancel()
            elif task.cancelled() or offset in appended:
                continue
            elif task.exception() is None:
                discarded += 1
        return discarded

    # ------------------------------------------------------------------
    # Dataset and EV cache
    # ------------------------------------------------------------------

    def _reset(self, response: BetsResponse) -> None:
        self.all_bets = []
        self.ev_cache = {}
        self.pairs = {}
        self._bets_by_id = {}
        self.cache_metrics = EVCacheMetrics()
        self.total_available = response.total
        self.books_available = self._allowed(response.books_available)
        self.error_message = None

    def _allowed(self, books: list[str]) -> list[str]:
        if not self.allowed_books:
            return list(books)
        return [book for book in books if book.lower() in self.allowed_books]

    def _append_page(self, bets: list[APIBet]) -> int:
        """Append a page and evaluate its new bet ids.

        Returns:
            Number of bets appended
        """
        if self.allowed_books:
            bets = [bet.filtering_books(self.allowed_books) for bet in bets]
            bets = [bet for bet in bets if bet.books]

        new_bets = []
        for bet in bets:
            if bet.id in self._bets_by_id:
                self.cache_metrics.reused += 1
                continue
            self._bets_by_id[bet.id] = bet
            new_bets.append(bet)

        self.all_bets.extend(new_bets)
        self.pairs = pair_bets(self.all_bets)

        for bet in new_bets:
            self.ev_cache[bet.id] = self._evaluate(bet)

        return len(new_bets)

    def _evaluate(self, bet: APIBet) -> BetEVResult:
        if bet.has_server_annotations:
            self.cache_metrics.server += 1
            return result_from_server(bet, self.fee_model)

        counterpart_id = self.pairs.get(bet.id)
        counterpart = self._bets_by_id.get(counterpart_id) if counterpart_id else None
        self.cache_metrics.computed += 1
        return evaluate_bet(bet, counterpart, self.classifier, self.fee_model)

    def ev_result(self, bet_id: str) -> BetEVResult | None:
        return self.ev_cache.get(bet_id)

    def confidence(self, bet: APIBet) -> FairOddsConfidence:
        result = self.ev_cache.get(bet.id)
        return result.confidence if result is not None else FairOddsConfidence.NONE

    def best_ev(self, bet: APIBet) -> float:
        result = self.ev_cache.get(bet.id)
        return result.best_ev_percent if result is not None else 0.0

    def bet(self, bet_id: str) -> APIBet | None:
        return self._bets_by_id.get(bet_id)

    # ------------------------------------------------------------------
    # Filters and statistics
    # ------------------------------------------------------------------

    def set_sort(self, sort: SortOption | str) -> None:
        self.filters.sort = SortOption(sort)

    @property
    def displayed_bets(self) -> list[APIBet]:
        filtered = filter_bets(self.all_bets, self.ev_cache, self.filters)
        return sort_bets(filtered, self.ev_cache, self.filters.sort)

    def _is_reliably_positive(self, bet: APIBet) -> bool:
        result = self.ev_cache.get(bet.id)
        return result is not None and result.is_reliably_positive

    @property
    def qualified_bets(self) -> list[APIBet]:
        """Bets with enough book quotes to count in statistics."""
        return [bet for bet in self.all_bets if len(bet.books) >= self.settings.min_books_for_stats]

    @property
    def total_bets_count(self) -> int:
        return len(self.qualified_bets)

    @property
    def positive_ev_count(self) -> int:
        return sum(1 for bet in self.qualified_bets if self._is_reliably_positive(bet))

    @property
    def positive_ev_rarity(self) -> float:
        """Reliably positive bets as a percentage of qualified bets."""
        total = self.total_bets_count
        if total == 0:
            return 0.0
        return self.positive_ev_count / total * 100.0

    @property
    def best_ev_available(self) -> float | None:
        values = [self.best_ev(bet) for bet in self.qualified_bets if bet.id in self.ev_cache]
        return max(values, default=None)

    @property
    def best_bet(self) -> APIBet | None:
        qualified = self.qualified_bets
        if not qualified:
            return None
        return max(qualified, key=self.best_ev)

    @property
    def league_breakdown(self) -> list[LeagueBreakdown]:
        """Qualified and reliably positive counts per league, in first-seen order."""
        totals: dict[str, list[int]] = {}
        for bet in self.qualified_bets:
            counts = totals.setdefault(bet.league_code.upper(), [0, 0])
            counts[0] += 1
            if self._is_reliably_positive(bet):
                counts[1] += 1
        return [
            LeagueBreakdown(league=league, total=total, positive_ev=positive)
            for league, (total, positive) in totals.items()
        ]

    @property
    def filtered_total_count(self) -> int:
        return len(self.displayed_bets)

    @property
    def filtered_positive_ev_count(self) -> int:
        return sum(1 for bet in self.displayed_bets if self._is_reliably_positive(bet))

    # ------------------------------------------------------------------
    # Parlay
    # ------------------------------------------------------------------

    def toggle_parlay(self, bet_id: str) -> bool:
        """Add or remove a bet from the parlay.

        Returns:
            True if the bet is now in the parlay
        """
        if bet_id in self._parlay_ids:
            self._parlay_ids.remove(bet_id)
            return False
        self._parlay_ids.append(bet_id)
        return True

    def clear_parlay(self) -> None:
        self._parlay_ids.clear()

    def is_in_parlay(self, bet_id: str) -> bool:
        return bet_id in self._parlay_ids

    @property
    def parlay_ids(self) -> list[str]:
        return list(self._parlay_ids)

    @property
    def parlay_bets(self) -> list[APIBet]:
        """Selected bets still present in the dataset, in selection order."""
        return [self._bets_by_id[bet_id] for bet_id in self._parlay_ids if bet_id in self._bets_by_id]

    @property
    def parlay_state(self) -> ParlayState:
        legs = []
        for bet_id in self._parlay_ids:
            result = self.ev_cache.get(bet_id)
            if result is None or result.fair_probability is None:
                legs.append(ParlayLeg(bet_id, None))
            else:
                legs.append(ParlayLeg(bet_id, result.fair_probability, result.confidence))
        return combine_parlay(legs)
