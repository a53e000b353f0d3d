"""Abstract base class for upstream quote providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from tickerlens.models.bar import DailyBar
from tickerlens.models.quote import Fundamentals, Quote


class BaseQuoteProvider(ABC):
    """Abstract base for upstream quote services.

    Providers return raw upstream data keyed by the normalized ticker and
    raise ``EnrichmentError`` subclasses on failure; caching, scoring and
    failure-to-note conversion live in ``QuoteFetcher``.
    """

    # --- Domestic ---

    @abstractmethod
    async def get_domestic_quote(self, ticker: str) -> Quote:
        """Spot quote (price, change percent, volume) for a 6-digit ticker.

        Raises:
            UpstreamRequestFailure: The upstream rejected the request.
        """
        ...

    @abstractmethod
    async def get_domestic_fundamentals(self, ticker: str) -> Fundamentals | None:
        """Latest ROE/EPS/BPS, or None when the upstream has no row."""
        ...

    @abstractmethod
    async def get_domestic_daily_bars(
        self, ticker: str, start: date, end: date,
    ) -> list[DailyBar]:
        """Daily bars between ``start`` and ``end`` inclusive, in any order."""
        ...

    # --- Foreign ---

    @abstractmethod
    async def get_foreign_quote(self, ticker: str, exchange: str) -> Quote | None:
        """Spot quote on one exchange, or None when that exchange has no price."""
        ...

    # --- Lifecycle ---

    async def close(self) -> None:
        """Release network resources."""
