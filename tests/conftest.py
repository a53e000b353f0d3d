"""Shared fixtures for tickerlens tests."""

from __future__ import annotations

import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

# Ensure src/ is on the path for editable-style imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from tickerlens.models.bar import DailyBar
from tickerlens.providers.mock import MockProvider
from tickerlens.universe import ReferenceUniverse


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_bars(closes, volume: int = 1_000_000, start: date = date(2024, 1, 1)) -> list[DailyBar]:
    """One bar per calendar day with a +/-1% high/low band around each close."""
    bars = []
    for i, close in enumerate(closes):
        bars.append(DailyBar(
            date=(start + timedelta(days=i)).strftime("%Y%m%d"),
            open=close,
            high=close * 1.01,
            low=close * 0.99,
            close=close,
            volume=volume,
        ))
    return bars


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()


@pytest.fixture
def sample_bars() -> list[DailyBar]:
    """5 consecutive daily bars."""
    return make_bars([100.0, 101.0, 100.5, 102.0, 103.0])


@pytest.fixture
def rising_bars() -> list[DailyBar]:
    """60 days of strictly increasing closes."""
    return make_bars([100.0 + i for i in range(60)])


@pytest.fixture
def universe() -> ReferenceUniverse:
    return ReferenceUniverse.build(
        domestic_tickers=["005930", "000660", "035420"],
        foreign_tickers=["AAPL", "NVDA", "BRK.B", "IBM"],
        domestic_names={
            "Samsung Electronics": "005930",
            "SK Hynix": "000660",
            "NAVER": "035420",
        },
        foreign_exchanges={"AAPL": "NAS", "NVDA": "NAS", "BRK.B": "NYS"},
    )
