"""Final candidate score: narrative blended with market data.

Breakdown (each part in [0, 100]):
    narrative   candidate score from the causal-chain model
    market      domestic: technical market score when present; otherwise
                50 + change_percent x 2; 50 without a quote
    quality     domestic only: 0.5 ROE + 0.3 EPS + 0.2 BPS sub-scores,
                each 50 when the figure is unknown

final = 0.6 narrative + 0.4 market                   (foreign)
final = 0.5 narrative + 0.3 market + 0.2 quality     (domestic)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tickerlens.indicators import round_half_up
from tickerlens.models.candidate import Candidate
from tickerlens.models.quote import Fundamentals, Quote
from tickerlens.models.ticker import Market

NEUTRAL_SCORE = 50
NEGATIVE_ROE_CAP = 40


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-candidate score components.

    Attributes:
        narrative: Model score, clamped and rounded.
        market: Market-data score.
        quality: Fundamentals score; None for foreign candidates.
        final: Weighted blend of the parts.
    """

    narrative: int
    market: int
    quality: int | None
    final: int

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "narrative": self.narrative,
            "market": self.market,
            "final": self.final,
        }
        if self.quality is not None:
            data["quality"] = self.quality
        return data


def market_component(candidate: Candidate, quote: Quote | None) -> int:
    if quote is None:
        return NEUTRAL_SCORE
    if candidate.market is Market.DOMESTIC and quote.technical is not None:
        return round_half_up(_clamp(quote.technical.market_score))
    if quote.change_percent is not None:
        return round_half_up(_clamp(50 + quote.change_percent * 2))
    return NEUTRAL_SCORE


def quality_component(fundamentals: Fundamentals | None) -> int:
    """Blend ROE, EPS and BPS sub-scores; unknown figures score 50."""
    roe = fundamentals.roe if fundamentals else None
    eps = fundamentals.eps if fundamentals else None
    bps = fundamentals.bps if fundamentals else None

    roe_score = _clamp(40 + roe * 2) if roe is not None else NEUTRAL_SCORE
    if roe is not None and roe < 0:
        roe_score = min(roe_score, NEGATIVE_ROE_CAP)
    eps_score = (
        _clamp(50 + _sign(eps) * min(30.0, abs(eps) / 200)) if eps is not None else NEUTRAL_SCORE
    )
    bps_score = _clamp(40 + min(40.0, bps / 5000)) if bps is not None else NEUTRAL_SCORE

    return round_half_up(roe_score * 0.5 + eps_score * 0.3 + bps_score * 0.2)


def score_breakdown(candidate: Candidate, quote: Quote | None = None) -> ScoreBreakdown:
    """Score one candidate against its (possibly failed or missing) quote."""
    narrative = round_half_up(_clamp(candidate.score))
    market = market_component(candidate, quote)

    if candidate.market is not Market.DOMESTIC:
        final = round_half_up(narrative * 0.6 + market * 0.4)
        return ScoreBreakdown(narrative=narrative, market=market, quality=None, final=final)

    quality = quality_component(quote.fundamentals if quote else None)
    final = round_half_up(narrative * 0.5 + market * 0.3 + quality * 0.2)
    return ScoreBreakdown(narrative=narrative, market=market, quality=quality, final=final)


def final_score(candidate: Candidate, quote: Quote | None = None) -> int:
    return score_breakdown(candidate, quote).final
