"""tickerlens — Market data enrichment for model-proposed stock candidates.

Verifies candidate tickers against a reference universe and enriches them
with spot quotes, fundamentals and a technical snapshot from the Korea
Investment Open API (domestic and US-listed symbols).

Quick start::

    from tickerlens import create_manager_from_env
    async with create_manager_from_env(".env") as mgr:
        candidates = mgr.verify(mgr.parse_candidates(raw["candidates"]))
        quotes = await mgr.fetch_all([c.ticker for c in candidates])
        scores = mgr.score_all(candidates, quotes)
"""

from __future__ import annotations

from pathlib import Path

from tickerlens.config import EnrichmentConfig, QuoteProviderType
from tickerlens.errors import (
    AuthFailure,
    EnrichmentError,
    EnrichmentErrorCode,
    TimeoutFailure,
    UpstreamRequestFailure,
    ValidationFailure,
)
from tickerlens.indicators import composite_score, compute_technical_snapshot
from tickerlens.manager import EnrichmentManager
from tickerlens.models.bar import DailyBar
from tickerlens.models.candidate import Candidate
from tickerlens.models.quote import Fundamentals, Quote, TechnicalSnapshot
from tickerlens.models.ticker import Market
from tickerlens.scoring import ScoreBreakdown, final_score, score_breakdown
from tickerlens.universe import ReferenceUniverse, load_universe

__version__ = "0.1.0"

__all__ = [
    # Manager
    "EnrichmentManager",
    "create_manager_from_env",
    # Config
    "EnrichmentConfig",
    "QuoteProviderType",
    # Errors
    "EnrichmentError",
    "EnrichmentErrorCode",
    "AuthFailure",
    "UpstreamRequestFailure",
    "TimeoutFailure",
    "ValidationFailure",
    # Models
    "Candidate",
    "DailyBar",
    "Fundamentals",
    "Market",
    "Quote",
    "TechnicalSnapshot",
    # Universe
    "ReferenceUniverse",
    "load_universe",
    # Indicators
    "composite_score",
    "compute_technical_snapshot",
    # Scoring
    "ScoreBreakdown",
    "final_score",
    "score_breakdown",
]


def create_manager_from_env(env_file: Path | str | None = None) -> EnrichmentManager:
    """Zero-config factory — reads credentials and settings from env vars.

    See :meth:`EnrichmentConfig.from_env` for the variables consulted.
    """
    return EnrichmentManager(EnrichmentConfig.from_env(env_file))
