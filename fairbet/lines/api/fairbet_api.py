"""FairBet odds service client for fetching pages of bets.

This module provides an async client for ``/api/fairbet/odds`` with retry
logic for transient errors. Pages are requested by ``limit``/``offset`` and
validated into ``BetsResponse`` models.
"""

import time

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from fairbet.config import Settings, get_settings
from fairbet.lines.models import BetsResponse, FairBetLeague
from fairbet.monitoring import get_logger

log = get_logger()

API_KEY_HEADER = "X-API-Key"
ODDS_PATH = "/api/fairbet/odds"
MAX_PAGE_SIZE = 500


class FairBetAPIError(ValueError):
    """Non-retryable odds service failure (missing or rejected API key)."""


class FairBetAPIClient:
    """Async client for the FairBet odds service.

    Fetches bet pages with automatic retry on transient errors (timeouts,
    connection failures, non-2xx responses). A rejected API key is reported
    immediately as FairBetAPIError.

    Attributes:
        base_url: Service base URL
        timeout: Per-request timeout in seconds
        last_total: ``total`` reported by the most recent page
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the odds service client.

        Args:
            api_key: Key sent in the X-API-Key header. Defaults to
                     FAIRBET_API_KEY from settings.
            base_url: Service base URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            settings: Settings to read defaults from

        Raises:
            FairBetAPIError: If no API key is provided or configured.
        """
        settings = settings or get_settings()

        self.api_key = api_key or settings.api_key
        if not self.api_key:
            raise FairBetAPIError(
                "FAIRBET_API_KEY not found in environment. "
                "Set it in .env or pass api_key parameter."
            )

        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.last_total: int | None = None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=8),
        retry=retry_if_exception_type((httpx.HTTPError, httpx.TimeoutException)),
    )
    async def fetch_odds(
        self,
        league: FairBetLeague | str | None = None,
        limit: int = MAX_PAGE_SIZE,
        offset: int = 0,
    ) -> BetsResponse:
        """Fetch one page of bets.

        Args:
            league: Optional league filter (NBA, NHL, NCAAB)
            limit: Bets per page (max 500)
            offset: Bets to skip

        Returns:
            BetsResponse with the page's bets and the dataset total.

        Raises:
            FairBetAPIError: If the service rejects the API key (401).
            httpx.HTTPError: Wrapped in tenacity.RetryError after 3 failed attempts.
            pydantic.ValidationError: If response data fails validation.
        """
        start_time = time.perf_counter()

        params: dict[str, str | int] = {
            "limit": min(limit, MAX_PAGE_SIZE),
            "offset": offset,
            "has_fair": "true",
        }
        if league is not None:
            params["league"] = getattr(league, "value", league)

        log.info("fairbet_api_request_started", offset=offset, limit=params["limit"], league=params.get("league"))

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(
                f"{self.base_url}{ODDS_PATH}",
                params=params,
                headers={"Accept": "application/json", API_KEY_HEADER: self.api_key},
            )
            if response.status_code == 401:
                log.error("fairbet_api_unauthorized", offset=offset)
                raise FairBetAPIError("Unauthorized: invalid or missing API key")
            response.raise_for_status()

        page = BetsResponse.model_validate(response.json())
        self.last_total = page.total

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        log.info(
            "fairbet_api_request_completed",
            offset=offset,
            bet_count=len(page.bets),
            total=page.total,
            duration_ms=duration_ms,
        )

        return page
