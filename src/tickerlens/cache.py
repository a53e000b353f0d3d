"""In-memory TTL caches for quotes and fundamentals."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any, Callable

QUOTE_TTL_SECONDS = 20.0
FUNDAMENTALS_TTL_SECONDS = 24 * 60 * 60.0


class CacheBackend(ABC):
    """Abstract per-ticker cache interface."""

    @abstractmethod
    def get(self, ticker: str) -> Any | None:
        """Return the cached value, or None on miss or expiry."""
        ...

    @abstractmethod
    def set(self, ticker: str, value: Any) -> None:
        """Store a value under the backend's TTL."""
        ...

    @abstractmethod
    def clear(self, ticker: str) -> None:
        ...

    @abstractmethod
    def clear_all(self) -> None:
        ...


class NoCache(CacheBackend):
    """No-op cache — always misses."""

    def get(self, ticker):  # type: ignore[override]
        return None

    def set(self, ticker, value):  # type: ignore[override]
        pass

    def clear(self, ticker):  # type: ignore[override]
        pass

    def clear_all(self):
        pass


class MemoryCache(CacheBackend):
    """Unbounded in-memory TTL cache keyed by normalized ticker.

    Expiry is checked lazily on read.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl_seconds
        self._clock = clock
        self._store: dict[str, tuple[float, Any]] = {}

    def __len__(self) -> int:
        return len(self._store)

    @staticmethod
    def _key(ticker: str) -> str:
        return ticker.upper()

    def get(self, ticker: str) -> Any | None:
        key = self._key(ticker)
        entry = self._store.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._store[key]
            return None
        return value

    def set(self, ticker: str, value: Any) -> None:
        self._store[self._key(ticker)] = (self._clock() + self.ttl, value)

    def clear(self, ticker: str) -> None:
        self._store.pop(self._key(ticker), None)

    def clear_all(self) -> None:
        self._store.clear()
