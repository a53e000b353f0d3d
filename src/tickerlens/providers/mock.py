"""Mock provider for testing and offline runs — no credentials required."""

from __future__ import annotations

from datetime import date, timedelta

from tickerlens.models.bar import DailyBar
from tickerlens.models.quote import Fundamentals, Quote
from tickerlens.providers.base import BaseQuoteProvider


class MockProvider(BaseQuoteProvider):
    """In-memory provider that returns configurable static data.

    Use ``set_domestic_quote``, ``set_daily_bars`` etc. to pre-load data,
    ``set_failure`` to make every call for a ticker raise, or leave defaults
    for synthetic data. Every call is recorded in ``calls``.
    """

    default_exchange = "NAS"

    def __init__(self) -> None:
        self._domestic_quotes: dict[str, Quote] = {}
        self._fundamentals: dict[str, Fundamentals | None] = {}
        self._bars: dict[str, list[DailyBar]] = {}
        self._foreign_quotes: dict[tuple[str, str], Quote | None] = {}
        self._failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, str]] = []

    # --- Pre-load helpers ---

    def set_domestic_quote(self, ticker: str, quote: Quote) -> None:
        self._domestic_quotes[ticker.upper()] = quote

    def set_fundamentals(self, ticker: str, fundamentals: Fundamentals | None) -> None:
        self._fundamentals[ticker.upper()] = fundamentals

    def set_daily_bars(self, ticker: str, bars: list[DailyBar]) -> None:
        self._bars[ticker.upper()] = bars

    def set_foreign_quote(self, ticker: str, exchange: str, quote: Quote | None) -> None:
        self._foreign_quotes[(ticker.upper(), exchange.upper())] = quote

    def set_failure(self, ticker: str, error: Exception) -> None:
        self._failures[ticker.upper()] = error

    def call_count(self, method: str | None = None) -> int:
        return sum(1 for name, _ in self.calls if method is None or name == method)

    # --- Provider implementation ---

    def _record(self, method: str, ticker: str) -> str:
        key = ticker.upper()
        self.calls.append((method, key))
        if key in self._failures:
            raise self._failures[key]
        return key

    async def get_domestic_quote(self, ticker: str) -> Quote:
        key = self._record("domestic_quote", ticker)
        if key in self._domestic_quotes:
            return self._domestic_quotes[key]
        return Quote(ticker=key, price=70000.0, change_percent=1.25, volume=1_000_000.0)

    async def get_domestic_fundamentals(self, ticker: str) -> Fundamentals | None:
        key = self._record("domestic_fundamentals", ticker)
        if key in self._fundamentals:
            return self._fundamentals[key]
        return Fundamentals(roe=10.5, eps=5000.0, bps=50000.0)

    async def get_domestic_daily_bars(
        self, ticker: str, start: date, end: date,
    ) -> list[DailyBar]:
        key = self._record("domestic_daily_bars", ticker)
        if key in self._bars:
            return list(self._bars[key])
        return self._generate_bars(start, end)

    async def get_foreign_quote(self, ticker: str, exchange: str) -> Quote | None:
        key = self._record(f"foreign_quote:{exchange.upper()}", ticker)
        lookup = (key, exchange.upper())
        if lookup in self._foreign_quotes:
            return self._foreign_quotes[lookup]
        if any(t == key for t, _ in self._foreign_quotes):
            return None
        if exchange.upper() != self.default_exchange:
            return None
        return Quote(ticker=key, price=150.0, change_percent=-0.5, volume=5_000_000.0)

    # --- Synthetic data generation ---

    @staticmethod
    def _generate_bars(start: date, end: date) -> list[DailyBar]:
        """One slowly rising bar per weekday in the range."""
        bars: list[DailyBar] = []
        current = start
        price = 70000.0
        while current <= end:
            if current.weekday() < 5:
                bars.append(DailyBar(
                    date=current.strftime("%Y%m%d"),
                    open=price,
                    high=price * 1.01,
                    low=price * 0.99,
                    close=price * 1.002,
                    volume=1_000_000,
                ))
                price *= 1.002
            current += timedelta(days=1)
        return bars
