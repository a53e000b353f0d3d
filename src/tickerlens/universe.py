"""Reference universe of valid tickers, domestic names and foreign exchanges.

The files are produced by an offline build step and read once at start-up:

    kr.json               ["005930", ...]
    us.json               ["AAPL", ...]
    kr_name_map.json      {"SAMSUNGELECTRONICS": "005930", ...}
    us_exchange_map.json  {"AAPL": "NAS", ...}
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)

DOMESTIC_TICKERS_FILE = "kr.json"
FOREIGN_TICKERS_FILE = "us.json"
DOMESTIC_NAME_MAP_FILE = "kr_name_map.json"
FOREIGN_EXCHANGE_MAP_FILE = "us_exchange_map.json"

# Tried in order when a foreign ticker has no known exchange.
FOREIGN_EXCHANGES = ("NAS", "NYS", "AMS")

_NAME_STRIP_RE = re.compile(r"[\s()\[\].\-·]")


def normalize_name(value: str) -> str:
    """Uppercase and strip whitespace, brackets, periods, hyphens and middle dots."""
    return _NAME_STRIP_RE.sub("", value.upper()).strip()


@dataclass(frozen=True)
class ReferenceUniverse:
    """Immutable lookup tables for ticker validation and routing.

    Attributes:
        domestic_tickers: Valid 6-digit domestic tickers.
        foreign_tickers: Valid foreign tickers (uppercase).
        domestic_names: Normalized company name -> domestic ticker.
        foreign_exchanges: Foreign ticker -> exchange code.
    """

    domestic_tickers: frozenset[str] = frozenset()
    foreign_tickers: frozenset[str] = frozenset()
    domestic_names: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    foreign_exchanges: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(
        cls,
        domestic_tickers: Iterable[str] = (),
        foreign_tickers: Iterable[str] = (),
        domestic_names: Mapping[str, str] | None = None,
        foreign_exchanges: Mapping[str, str] | None = None,
    ) -> ReferenceUniverse:
        """Create a universe, uppercasing tickers and normalizing name keys."""
        names: dict[str, str] = {}
        for name, ticker in (domestic_names or {}).items():
            key = normalize_name(str(name))
            if key and key not in names:
                names[key] = str(ticker).strip()
        exchanges = {
            str(t).strip().upper(): str(x).strip().upper()
            for t, x in (foreign_exchanges or {}).items()
        }
        return cls(
            domestic_tickers=frozenset(str(t).strip().upper() for t in domestic_tickers),
            foreign_tickers=frozenset(str(t).strip().upper() for t in foreign_tickers),
            domestic_names=MappingProxyType(names),
            foreign_exchanges=MappingProxyType(exchanges),
        )

    def is_domestic_ticker(self, ticker: str) -> bool:
        return ticker.upper() in self.domestic_tickers

    def is_foreign_ticker(self, ticker: str) -> bool:
        return ticker.upper() in self.foreign_tickers

    def resolve_domestic_name(self, name: str) -> str | None:
        key = normalize_name(name)
        if not key:
            return None
        return self.domestic_names.get(key)

    def exchange_for(self, ticker: str) -> str | None:
        return self.foreign_exchanges.get(ticker.upper())

    def exchanges_to_try(self, ticker: str) -> tuple[str, ...]:
        """Known exchange first and only; otherwise the fixed fallback order."""
        known = self.exchange_for(ticker)
        return (known,) if known else FOREIGN_EXCHANGES


def _read_json(path: Path, expected: type) -> Any:
    if not path.exists():
        logger.warning("Universe file missing: %s", path)
        return expected()
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, expected):
        raise ValueError(f"{path.name}: expected a JSON {expected.__name__}")
    return data


def load_universe(directory: Path | str) -> ReferenceUniverse:
    """Load the four universe files from ``directory``.

    Missing files load as empty tables; malformed files raise ``ValueError``.
    """
    base = Path(directory)
    universe = ReferenceUniverse.build(
        domestic_tickers=_read_json(base / DOMESTIC_TICKERS_FILE, list),
        foreign_tickers=_read_json(base / FOREIGN_TICKERS_FILE, list),
        domestic_names=_read_json(base / DOMESTIC_NAME_MAP_FILE, dict),
        foreign_exchanges=_read_json(base / FOREIGN_EXCHANGE_MAP_FILE, dict),
    )
    logger.info(
        "Loaded universe from %s: %d domestic, %d foreign, %d names",
        base,
        len(universe.domestic_tickers),
        len(universe.foreign_tickers),
        len(universe.domestic_names),
    )
    return universe
