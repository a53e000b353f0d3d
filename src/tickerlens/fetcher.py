"""QuoteFetcher — per-ticker orchestration: cache -> provider -> indicators."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import date, timedelta
from typing import Callable

from tickerlens.cache import (
    FUNDAMENTALS_TTL_SECONDS,
    QUOTE_TTL_SECONDS,
    CacheBackend,
    MemoryCache,
)
from tickerlens.errors import (
    EnrichmentError,
    TimeoutFailure,
    UpstreamRequestFailure,
    ValidationFailure,
)
from tickerlens.indicators import compute_technical_snapshot
from tickerlens.models.bar import DailyBar
from tickerlens.models.quote import Fundamentals, Quote
from tickerlens.models.ticker import Market, classify_market, normalize_ticker
from tickerlens.providers.base import BaseQuoteProvider
from tickerlens.quality import clean_daily_bars, validate_bars
from tickerlens.universe import ReferenceUniverse

logger = logging.getLogger(__name__)

NOTE_FOREIGN_UNAVAILABLE = "Overseas quote failed or unavailable"
NOTE_UNRECOGNIZED_TICKER = "Unrecognized ticker symbol"
NOTE_REQUEST_ERROR = "Quote request error"


class QuoteFetcher:
    """Fetch one enriched quote per ticker without ever raising.

    Domestic tickers get spot quote, fundamentals and a technical snapshot
    (three concurrent upstream calls); foreign tickers get a spot quote from
    the first exchange that prices them. Failures become ``Quote.note``.

    Usage::

        fetcher = QuoteFetcher(provider, universe)
        quote = await fetcher.fetch("5930")   # -> Quote(ticker="5930", ...)
    """

    def __init__(
        self,
        provider: BaseQuoteProvider,
        universe: ReferenceUniverse | None = None,
        *,
        quote_cache: CacheBackend | None = None,
        fundamentals_cache: CacheBackend | None = None,
        lookback_days: int = 60,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.provider = provider
        self.universe = universe or ReferenceUniverse()
        self.quote_cache = quote_cache if quote_cache is not None else MemoryCache(QUOTE_TTL_SECONDS)
        self.fundamentals_cache = (
            fundamentals_cache
            if fundamentals_cache is not None
            else MemoryCache(FUNDAMENTALS_TTL_SECONDS)
        )
        self.lookback_days = lookback_days
        self._today = today

    async def fetch(self, ticker: str) -> Quote:
        """Enriched quote keyed by the caller's original ``ticker`` string."""
        try:
            quote = await self._fetch_normalized(normalize_ticker(ticker))
        except EnrichmentError as exc:
            logger.warning("Quote for %r failed: %s", ticker, exc)
            quote = Quote(ticker=ticker, note=str(exc) or NOTE_REQUEST_ERROR)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error fetching quote for %r", ticker)
            quote = Quote(ticker=ticker, note=str(exc) or NOTE_REQUEST_ERROR)
        return replace(quote, ticker=ticker)

    async def _fetch_normalized(self, ticker: str) -> Quote:
        market = classify_market(ticker)
        if market is Market.DOMESTIC:
            return await self._fetch_domestic(ticker)
        if market is Market.FOREIGN:
            return await self._fetch_foreign(ticker)
        raise ValidationFailure(NOTE_UNRECOGNIZED_TICKER)

    # ------------------------------------------------------------ domestic

    async def _fetch_domestic(self, ticker: str) -> Quote:
        cached = self.quote_cache.get(ticker)
        if cached is not None:
            logger.debug("Quote cache hit for %s", ticker)
            return cached

        spot, fundamentals, bars = await asyncio.gather(
            self.provider.get_domestic_quote(ticker),
            self._fundamentals(ticker),
            self._daily_bars(ticker),
            return_exceptions=True,
        )

        if isinstance(spot, BaseException):
            if isinstance(spot, UpstreamRequestFailure):
                # Failed spot quotes share the short quote TTL.
                quote = Quote(ticker=ticker, note=str(spot))
                self.quote_cache.set(ticker, quote)
                return quote
            raise spot

        if isinstance(fundamentals, BaseException):
            logger.warning("Fundamentals for %s unavailable: %s", ticker, fundamentals)
            fundamentals = None
        if isinstance(bars, BaseException):
            logger.warning("Daily bars for %s unavailable: %s", ticker, bars)
            bars = []

        quote = replace(
            spot,
            ticker=ticker,
            fundamentals=fundamentals,
            technical=compute_technical_snapshot(bars),
        )
        self.quote_cache.set(ticker, quote)
        return quote

    async def _fundamentals(self, ticker: str) -> Fundamentals | None:
        cached = self.fundamentals_cache.get(ticker)
        if cached is not None:
            return cached
        fundamentals = await self.provider.get_domestic_fundamentals(ticker)
        if fundamentals is not None:
            self.fundamentals_cache.set(ticker, fundamentals)
        return fundamentals

    async def _daily_bars(self, ticker: str) -> list[DailyBar]:
        end = self._today()
        start = end - timedelta(days=self.lookback_days)
        raw = await self.provider.get_domestic_daily_bars(ticker, start, end)

        bars = clean_daily_bars(raw)
        if len(bars) != len(raw):
            logger.debug("Dropped %d malformed or duplicate bars for %s", len(raw) - len(bars), ticker)
        if bars:
            result = validate_bars(bars)
            if not result.passed:
                logger.warning(
                    "Daily bars for %s failed checks: %s",
                    ticker, "; ".join(c.message for c in result.failed_checks),
                )
        return bars

    # ------------------------------------------------------------- foreign

    async def _fetch_foreign(self, ticker: str) -> Quote:
        cached = self.quote_cache.get(ticker)
        if cached is not None:
            logger.debug("Quote cache hit for %s", ticker)
            return cached

        for exchange in self.universe.exchanges_to_try(ticker):
            try:
                quote = await self.provider.get_foreign_quote(ticker, exchange)
            except (UpstreamRequestFailure, TimeoutFailure) as exc:
                logger.debug("%s on %s failed: %s", ticker, exchange, exc)
                continue
            if quote is None or not quote.price or quote.price <= 0:
                continue

            quote = replace(quote, ticker=ticker, note=f"EXCD {exchange}")
            self.quote_cache.set(ticker, quote)
            return quote

        return Quote(ticker=ticker, note=NOTE_FOREIGN_UNAVAILABLE)
