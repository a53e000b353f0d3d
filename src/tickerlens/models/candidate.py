"""Candidate equity data model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tickerlens.models.ticker import Market


@dataclass(frozen=True)
class Candidate:
    """Equity proposed by the causal-chain model.

    Created unverified from model output and replaced exactly once by the
    verifier.

    Attributes:
        ticker: Ticker symbol as proposed (or as corrected by the verifier).
        name: Display name.
        market: Market scope.
        rationale: Why the candidate is linked to the headline.
        score: Narrative score in [0, 100].
        confidence: Model confidence in [0, 1].
        verified: Whether the ticker exists in the reference universe.
        stage_tag: Causal-chain stage the candidate belongs to.
        stage_reason: Link between the candidate and that stage.
    """

    ticker: str
    name: str
    market: Market = Market.UNKNOWN
    rationale: str = ""
    score: float = 0.0
    confidence: float = 0.5
    verified: bool = False
    stage_tag: str | None = None
    stage_reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "ticker": self.ticker,
            "name": self.name,
            "market": self.market.value,
            "rationale": self.rationale,
            "score": self.score,
            "confidence": self.confidence,
            "verified": self.verified,
        }
        if self.stage_tag:
            data["stageTag"] = self.stage_tag
        if self.stage_reason:
            data["stageReason"] = self.stage_reason
        return data
