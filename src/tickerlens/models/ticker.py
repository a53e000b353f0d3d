"""Ticker symbols and market classification."""

from __future__ import annotations

import re
from enum import Enum

_DOMESTIC_RE = re.compile(r"^\d{6}$")
_SHORT_DOMESTIC_RE = re.compile(r"^\d{1,6}$")
_FOREIGN_RE = re.compile(r"^[A-Z0-9.]{1,10}$")

# Legacy market tags still emitted by the candidate model.
_MARKET_ALIASES = {
    "KR": "DOMESTIC",
    "US": "FOREIGN",
}


class Market(Enum):
    """Market scope of a ticker."""

    DOMESTIC = "DOMESTIC"
    FOREIGN = "FOREIGN"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: object) -> Market:
        """Parse a market tag, accepting ``KR``/``US``; anything else is UNKNOWN."""
        if isinstance(value, Market):
            return value
        tag = str(value or "").strip().upper()
        tag = _MARKET_ALIASES.get(tag, tag)
        try:
            return cls(tag)
        except ValueError:
            return cls.UNKNOWN


def normalize_ticker(ticker: str) -> str:
    """Uppercase and trim; zero-pad 1-6 digit symbols to 6 digits."""
    clean = ticker.strip().upper()
    if _SHORT_DOMESTIC_RE.match(clean):
        return clean.zfill(6)
    return clean


def is_domestic(ticker: str) -> bool:
    return bool(_DOMESTIC_RE.match(ticker))


def classify_market(ticker: str) -> Market:
    """Classify an already-normalized ticker by its shape."""
    if _DOMESTIC_RE.match(ticker):
        return Market.DOMESTIC
    if _FOREIGN_RE.match(ticker):
        return Market.FOREIGN
    return Market.UNKNOWN
