"""EnrichmentManager — central orchestrator for quotes, candidates and scores."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from tickerlens.cache import CacheBackend, MemoryCache, NoCache
from tickerlens.config import EnrichmentConfig, QuoteProviderType
from tickerlens.fetcher import QuoteFetcher
from tickerlens.models.candidate import Candidate
from tickerlens.models.quote import Quote
from tickerlens.providers import create_provider
from tickerlens.providers.base import BaseQuoteProvider
from tickerlens.scheduler import fetch_all, not_configured
from tickerlens.scoring import ScoreBreakdown, score_breakdown
from tickerlens.universe import ReferenceUniverse, load_universe
from tickerlens.verifier import parse_candidates, verify

logger = logging.getLogger(__name__)


class EnrichmentManager:
    """Central orchestrator: universe + caches + provider -> fetcher -> scheduler.

    Usage::

        from tickerlens import create_manager_from_env
        async with create_manager_from_env() as mgr:
            candidates = mgr.verify(mgr.parse_candidates(model_output["candidates"]))
            quotes = await mgr.fetch_all([c.ticker for c in candidates])
            scores = mgr.score_all(candidates, quotes)

    Without credentials no provider is built and ``fetch_all`` answers every
    ticker with a not-configured note.
    """

    def __init__(
        self,
        config: EnrichmentConfig,
        universe: ReferenceUniverse | None = None,
        provider: BaseQuoteProvider | None = None,
    ) -> None:
        self.config = config
        self.universe = universe if universe is not None else load_universe(config.universe_dir)

        # Build caches
        self.quote_cache: CacheBackend
        self.fundamentals_cache: CacheBackend
        if config.cache_enabled:
            self.quote_cache = MemoryCache(ttl_seconds=config.quote_ttl_seconds)
            self.fundamentals_cache = MemoryCache(ttl_seconds=config.fundamentals_ttl_seconds)
        else:
            self.quote_cache = NoCache()
            self.fundamentals_cache = NoCache()

        # Build provider
        self.provider: BaseQuoteProvider | None = provider
        if self.provider is None and config.is_configured:
            kwargs: dict[str, Any] = {}
            if config.provider is QuoteProviderType.KIS:
                kwargs = {
                    "app_key": config.app_key,
                    "app_secret": config.app_secret,
                    "base_url": config.resolved_base_url,
                    "timeout": config.request_timeout_seconds,
                    "request_delay": config.request_delay_seconds,
                    "token_attempts": config.token_attempts,
                    "token_backoff": config.token_backoff_seconds,
                }
            self.provider = create_provider(config.provider, **kwargs)
        elif self.provider is None:
            logger.warning("Quote service credentials missing; quotes will not be fetched")

        self.fetcher: QuoteFetcher | None = None
        if self.provider is not None:
            self.fetcher = QuoteFetcher(
                self.provider,
                self.universe,
                quote_cache=self.quote_cache,
                fundamentals_cache=self.fundamentals_cache,
                lookback_days=config.daily_lookback_days,
            )

    async def __aenter__(self) -> EnrichmentManager:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def is_configured(self) -> bool:
        return self.fetcher is not None

    # --------------------------------------------------------------- quotes

    async def fetch(self, ticker: str) -> Quote:
        """Single enriched quote; never raises."""
        return (await self.fetch_all([ticker]))[0]

    async def fetch_all(self, tickers: Sequence[str]) -> list[Quote]:
        """Exactly one Quote per input ticker, in input order, never raising."""
        tickers = list(tickers)
        if self.fetcher is None:
            return not_configured(tickers)
        return await fetch_all(tickers, self.fetcher.fetch, concurrency=self.config.concurrency)

    # ----------------------------------------------------------- candidates

    def parse_candidates(self, items: Iterable[Any]) -> list[Candidate]:
        """Coerce raw model output into unverified candidates."""
        return parse_candidates(items)

    def verify(self, candidates: Iterable[Candidate]) -> list[Candidate]:
        """Verify against the reference universe and truncate."""
        return verify(candidates, self.universe, limit=self.config.max_candidates)

    # -------------------------------------------------------------- scoring

    def score(self, candidate: Candidate, quote: Quote | None = None) -> ScoreBreakdown:
        """Narrative, market and quality parts plus the blended final score."""
        return score_breakdown(candidate, quote)

    def score_all(
        self, candidates: Iterable[Candidate], quotes: Iterable[Quote],
    ) -> list[ScoreBreakdown]:
        """Score candidates against quotes matched by ticker; unmatched get no quote."""
        by_ticker = {q.ticker.upper(): q for q in quotes}
        return [score_breakdown(c, by_ticker.get(c.ticker.upper())) for c in candidates]

    # ---------------------------------------------------------------- cache

    def clear_cache(self, ticker: str) -> None:
        self.quote_cache.clear(ticker)
        self.fundamentals_cache.clear(ticker)

    def clear_all_cache(self) -> None:
        self.quote_cache.clear_all()
        self.fundamentals_cache.clear_all()

    async def close(self) -> None:
        if self.provider is not None:
            await self.provider.close()
