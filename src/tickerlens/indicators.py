"""Technical indicators and the composite market score.

All functions are pure and expect bars ordered ascending by date (see
``quality.clean_daily_bars``). Indicators return ``None`` when the bar
window is too short.

Composite score sub-scores:
    trend       +/-5 close vs MA20, +/-5 MA20 vs MA60
    momentum    10-day return x 50, clamped to [-20, 20]
    volume      ratio > 2.0: +10, > 1.5: +6, < 0.5: -6
    rsi         RSI > 75: -7, RSI < 25: -6
    volatility  ATR% > 0.10: -7, > 0.07: -4

``market_score = round((raw + 30) / 60 * 100)`` clamped to [0, 100].
"""

from __future__ import annotations

import math
from typing import Sequence, Union

import pandas as pd

from tickerlens.models.bar import DailyBar
from tickerlens.models.quote import TechnicalSnapshot

RSI_PERIOD = 14
ATR_PERIOD = 14
MOMENTUM_LOOKBACK = 10
SHORT_MA = 20
LONG_MA = 60

MIN_BARS_FOR_SNAPSHOT = 20
MIN_BARS_FOR_SCORE = 60
DEGRADED_SCORE = 50

BarsLike = Union[Sequence[DailyBar], pd.DataFrame]
SeriesLike = Union[Sequence[float], pd.Series]


def bars_to_frame(bars: Sequence[DailyBar]) -> pd.DataFrame:
    records = [
        {
            "date": b.date,
            "open": b.open,
            "high": b.high,
            "low": b.low,
            "close": b.close,
            "volume": b.volume,
        }
        for b in bars
    ]
    return pd.DataFrame(records, columns=["date", "open", "high", "low", "close", "volume"])


def _frame(bars: BarsLike) -> pd.DataFrame:
    if isinstance(bars, pd.DataFrame):
        return bars
    return bars_to_frame(bars)


def _series(values: SeriesLike) -> pd.Series:
    if isinstance(values, pd.Series):
        return values.reset_index(drop=True).astype(float)
    return pd.Series(list(values), dtype=float)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------- indicators

def moving_average(closes: SeriesLike, period: int) -> float | None:
    """Arithmetic mean of the last ``period`` closes."""
    series = _series(closes)
    if period <= 0 or len(series) < period:
        return None
    return float(series.iloc[-period:].mean())


def rsi14(closes: SeriesLike) -> float | None:
    """RSI over the last 14 day-over-day changes (simple averages)."""
    series = _series(closes)
    if len(series) < RSI_PERIOD + 1:
        return None
    changes = series.iloc[-(RSI_PERIOD + 1):].diff().dropna()
    avg_gain = float(changes.clip(lower=0).sum()) / RSI_PERIOD
    avg_loss = float(-changes.clip(upper=0).sum()) / RSI_PERIOD
    if avg_loss == 0:
        return 100.0
    return 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)


def volume_ratio(volumes: SeriesLike) -> float | None:
    """Mean of the last 3 volumes over the mean of the last 20."""
    series = _series(volumes)
    if len(series) < SHORT_MA:
        return None
    avg3 = float(series.iloc[-3:].mean())
    avg20 = float(series.iloc[-SHORT_MA:].mean())
    # A zero mean on either side carries no signal.
    if not avg3 or not avg20:
        return None
    return avg3 / avg20


def atr_percent(bars: BarsLike) -> float | None:
    """ATR(14) divided by the last close.

    The first bar of the 14-day window uses its own close as the previous
    close.
    """
    frame = _frame(bars)
    if len(frame) < ATR_PERIOD + 1:
        return None
    recent = frame.iloc[-ATR_PERIOD:]
    high = recent["high"].astype(float)
    low = recent["low"].astype(float)
    close = recent["close"].astype(float)
    prev_close = close.shift(1).fillna(close)

    true_range = pd.concat(
        [high - low, (high - prev_close).abs(), (low - prev_close).abs()],
        axis=1,
    ).max(axis=1)

    last_close = float(frame["close"].iloc[-1]) or 1.0
    return float(true_range.mean()) / last_close


# ---------------------------------------------------------------- sub-scores

def trend_score(last_close: float, ma20: float | None, ma60: float | None) -> int:
    score = 0
    if ma20 is not None:
        score += 5 if last_close > ma20 else -5
        if ma60 is not None:
            score += 5 if ma20 > ma60 else -5
    return score


def momentum_score(closes: SeriesLike) -> float:
    series = _series(closes)
    if len(series) < MOMENTUM_LOOKBACK + 1:
        return 0.0
    base = float(series.iloc[-(MOMENTUM_LOOKBACK + 1)])
    change = (float(series.iloc[-1]) - base) / base
    return _clamp(change * 50, -20.0, 20.0)


def volume_score(ratio: float | None) -> int:
    if ratio is None:
        return 0
    if ratio > 2.0:
        return 10
    if ratio > 1.5:
        return 6
    if ratio < 0.5:
        return -6
    return 0


def rsi_penalty(rsi: float | None) -> int:
    if rsi is None:
        return 0
    if rsi > 75:
        return -7
    if rsi < 25:
        return -6
    return 0


def volatility_penalty(atr_pct: float | None) -> int:
    if atr_pct is None:
        return 0
    if atr_pct > 0.10:
        return -7
    if atr_pct > 0.07:
        return -4
    return 0


# ------------------------------------------------------------------ scoring

def composite_score(bars: BarsLike) -> TechnicalSnapshot:
    """Full technical snapshot, or the degraded default below 60 bars."""
    frame = _frame(bars)
    if len(frame) < MIN_BARS_FOR_SCORE:
        return TechnicalSnapshot(market_score=DEGRADED_SCORE)

    closes = frame["close"].astype(float).reset_index(drop=True)
    last_close = float(closes.iloc[-1])
    ma20 = moving_average(closes, SHORT_MA)
    ma60 = moving_average(closes, LONG_MA)
    rsi = rsi14(closes)
    vol_ratio = volume_ratio(frame["volume"])
    atr_pct = atr_percent(frame)

    raw = (
        trend_score(last_close, ma20, ma60)
        + momentum_score(closes)
        + volume_score(vol_ratio)
        + rsi_penalty(rsi)
        + volatility_penalty(atr_pct)
    )
    market_score = round_half_up(((raw + 30) / 60) * 100)

    return TechnicalSnapshot(
        market_score=int(_clamp(market_score, 0, 100)),
        rsi=rsi,
        ma20=ma20,
        ma60=ma60,
        vol_ratio=vol_ratio,
        atr_pct=atr_pct,
    )


def compute_technical_snapshot(bars: BarsLike) -> TechnicalSnapshot | None:
    """Snapshot to attach to a quote; ``None`` below 20 bars."""
    if len(bars) < MIN_BARS_FOR_SNAPSHOT:
        return None
    return composite_score(bars)
