"""Daily bar (OHLCV) data model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DailyBar:
    """Single trading day.

    Attributes:
        date: Trading date as ``YYYYMMDD`` (sorts lexicographically).
        open: Opening price.
        high: High price.
        low: Low price.
        close: Closing price.
        volume: Traded volume.
    """

    date: str
    open: float
    high: float
    low: float
    close: float
    volume: int
