"""Enrichment data models."""

from tickerlens.models.bar import DailyBar
from tickerlens.models.candidate import Candidate
from tickerlens.models.quote import Fundamentals, Quote, TechnicalSnapshot
from tickerlens.models.ticker import Market, classify_market, is_domestic, normalize_ticker
from tickerlens.models.token import AccessToken

__all__ = [
    "AccessToken",
    "Candidate",
    "DailyBar",
    "Fundamentals",
    "Market",
    "Quote",
    "TechnicalSnapshot",
    "classify_market",
    "is_domestic",
    "normalize_ticker",
]
