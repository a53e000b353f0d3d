"""Candidate coercion and verification against the reference universe."""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Any, Iterable, Mapping

from tickerlens.indicators import round_half_up
from tickerlens.models.candidate import Candidate
from tickerlens.models.ticker import Market, is_domestic
from tickerlens.universe import ReferenceUniverse

logger = logging.getLogger(__name__)

MAX_CANDIDATES = 12
DEFAULT_NAME = "Unknown"
DEFAULT_RATIONALE = "No rationale provided"


def _finite_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _infer_market(ticker: str) -> Market:
    if is_domestic(ticker):
        return Market.DOMESTIC
    return Market.FOREIGN if ticker else Market.UNKNOWN


def parse_candidate(raw: Mapping[str, Any]) -> Candidate:
    """Build an unverified Candidate from one model output item.

    Score falls back to 0 and confidence to 0.5 when not a finite number;
    both are clamped. An UNKNOWN market is inferred from the ticker shape.
    """
    ticker = _text(raw.get("ticker"))
    market = Market.parse(raw.get("market"))
    if market is Market.UNKNOWN:
        market = _infer_market(ticker)

    score = _finite_number(raw.get("score"))
    confidence = _finite_number(raw.get("confidence"))

    return Candidate(
        ticker=ticker,
        name=_text(raw.get("name")) or DEFAULT_NAME,
        market=market,
        rationale=_text(raw.get("rationale")) or DEFAULT_RATIONALE,
        score=float(max(0, min(100, round_half_up(score)))) if score is not None else 0.0,
        confidence=max(0.0, min(1.0, confidence)) if confidence is not None else 0.5,
        verified=False,
        stage_tag=_text(raw.get("stage_tag")) or None,
        stage_reason=_text(raw.get("stage_reason")) or None,
    )


def parse_candidates(items: Iterable[Any]) -> list[Candidate]:
    """Coerce model output items; non-mapping items are skipped."""
    candidates: list[Candidate] = []
    for item in items:
        if not isinstance(item, Mapping):
            logger.warning("Skipping candidate item of type %s", type(item).__name__)
            continue
        candidates.append(parse_candidate(item))
    return candidates


def verify_candidate(candidate: Candidate, universe: ReferenceUniverse) -> Candidate:
    """Check membership; repair unverified domestic tickers by name."""
    ticker = candidate.ticker.upper()
    if candidate.market is Market.DOMESTIC:
        verified = universe.is_domestic_ticker(ticker)
    elif candidate.market is Market.FOREIGN:
        verified = universe.is_foreign_ticker(ticker)
    else:
        verified = False

    if verified or candidate.market is not Market.DOMESTIC:
        if not verified:
            logger.debug("Candidate %s (%s) not in universe", ticker, candidate.market.value)
        return replace(candidate, verified=verified)

    resolved = universe.resolve_domestic_name(candidate.name)
    if resolved:
        logger.info("Resolved %r to %s by name (was %s)", candidate.name, resolved, candidate.ticker)
        return replace(candidate, ticker=resolved, market=Market.DOMESTIC, verified=True)

    logger.debug("Candidate %s (%r) could not be verified", ticker, candidate.name)
    return replace(candidate, verified=False)


def verify(
    candidates: Iterable[Candidate],
    universe: ReferenceUniverse,
    *,
    limit: int = MAX_CANDIDATES,
) -> list[Candidate]:
    """Verify every candidate, then keep the first ``limit`` in order."""
    return [verify_candidate(c, universe) for c in candidates][:limit]
