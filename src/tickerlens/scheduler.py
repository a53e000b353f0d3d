"""Bounded-concurrency batch fetching."""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Awaitable, Callable, Sequence

from tickerlens.models.quote import Quote

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 2
NOTE_NOT_CONFIGURED = "Quote service credentials not configured"
NOTE_WORKER_ERROR = "Quote request error"

FetchFn = Callable[[str], Awaitable[Quote]]


async def fetch_all(
    tickers: Sequence[str],
    fetch: FetchFn,
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> list[Quote]:
    """Run ``fetch`` for every ticker with at most ``concurrency`` in flight.

    Workers claim the next unclaimed index from a shared cursor and write
    into that index's slot, so the result has one Quote per input, in input
    order. A failing fetch only degrades its own slot.
    """
    if not tickers:
        return []

    results: list[Quote | None] = [None] * len(tickers)
    cursor = itertools.count()

    async def worker() -> None:
        while True:
            index = next(cursor)
            if index >= len(tickers):
                return
            ticker = tickers[index]
            try:
                results[index] = await fetch(ticker)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Fetch for %r escaped the fetcher", ticker)
                results[index] = Quote(ticker=ticker, note=str(exc) or NOTE_WORKER_ERROR)

    workers = max(1, min(concurrency, len(tickers)))
    await asyncio.gather(*(worker() for _ in range(workers)))

    return [
        quote if quote is not None else Quote(ticker=ticker, note=NOTE_WORKER_ERROR)
        for ticker, quote in zip(tickers, results)
    ]


def not_configured(tickers: Sequence[str]) -> list[Quote]:
    """One not-configured Quote per ticker; performs no I/O."""
    return [Quote(ticker=ticker, note=NOTE_NOT_CONFIGURED) for ticker in tickers]
