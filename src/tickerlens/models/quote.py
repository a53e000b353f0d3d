"""Quote data model with optional fundamentals and technical context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Fundamentals:
    """Domestic fundamentals. ``None`` means unknown, never zero.

    Attributes:
        roe: Return on equity (percent).
        eps: Earnings per share.
        bps: Book value per share.
    """

    roe: float | None = None
    eps: float | None = None
    bps: float | None = None

    def to_dict(self) -> dict[str, float]:
        return _compact({"roe": self.roe, "eps": self.eps, "bps": self.bps})


@dataclass(frozen=True)
class TechnicalSnapshot:
    """Indicators derived from a daily bar sequence.

    A degraded snapshot (fewer than 60 bars) carries only ``market_score``.

    Attributes:
        market_score: Composite technical score in [0, 100].
        rsi: RSI(14).
        ma20: 20-day simple moving average of closes.
        ma60: 60-day simple moving average of closes.
        vol_ratio: 3-day / 20-day average volume.
        atr_pct: ATR(14) as a fraction of the last close.
    """

    market_score: int
    rsi: float | None = None
    ma20: float | None = None
    ma60: float | None = None
    vol_ratio: float | None = None
    atr_pct: float | None = None

    @property
    def degraded(self) -> bool:
        return self.ma60 is None

    def to_dict(self) -> dict[str, float]:
        return _compact({
            "marketScore": self.market_score,
            "rsi": self.rsi,
            "ma20": self.ma20,
            "ma60": self.ma60,
            "volRatio": self.vol_ratio,
            "atrPct": self.atr_pct,
        })


@dataclass(frozen=True)
class Quote:
    """Per-ticker enrichment result.

    Failures are carried in ``note`` instead of raising; a failed quote has
    no price fields.

    Attributes:
        ticker: Ticker as supplied by the caller (or normalized, inside the
            fetcher and caches).
        price: Last price.
        change_percent: Change versus previous close, in percent.
        volume: Accumulated volume.
        fundamentals: Domestic fundamentals, if fetched.
        technical: Technical snapshot, if enough bars were available.
        note: Human-readable status for degraded or failed results.
    """

    ticker: str
    price: float | None = None
    change_percent: float | None = None
    volume: float | None = None
    fundamentals: Fundamentals | None = None
    technical: TechnicalSnapshot | None = None
    note: str | None = None

    @property
    def ok(self) -> bool:
        return self.price is not None

    def to_dict(self) -> dict[str, Any]:
        """Wire shape consumed by the presentation layer; absent fields omitted."""
        return _compact({
            "ticker": self.ticker,
            "price": self.price,
            "changePercent": self.change_percent,
            "volume": self.volume,
            "fundamentals": self.fundamentals.to_dict() if self.fundamentals else None,
            "technical": self.technical.to_dict() if self.technical else None,
            "note": self.note,
        })


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}
