"""Tests for daily bar sanitising and validation."""

from tickerlens.models.bar import DailyBar
from tickerlens.quality import clean_daily_bars, validate_bars


def _make_bar(day: str, close: float = 100.0, **kwargs) -> DailyBar:
    defaults = dict(date=day, open=100.0, high=101.0, low=99.0, close=close, volume=1000)
    defaults.update(kwargs)
    return DailyBar(**defaults)


class TestCleanDailyBars:
    def test_sorted_ascending(self):
        bars = [_make_bar("20240103"), _make_bar("20240101"), _make_bar("20240102")]
        assert [b.date for b in clean_daily_bars(bars)] == ["20240101", "20240102", "20240103"]

    def test_last_duplicate_wins(self):
        bars = [_make_bar("20240101", close=100.0), _make_bar("20240101", close=100.5)]
        cleaned = clean_daily_bars(bars)
        assert len(cleaned) == 1
        assert cleaned[0].close == 100.5

    def test_drops_malformed(self):
        bars = [
            _make_bar(""),
            _make_bar("20240101", close=0.0),
            _make_bar("20240102", close=-5.0),
            _make_bar("20240103", close=float("nan")),
            _make_bar("20240104"),
        ]
        assert [b.date for b in clean_daily_bars(bars)] == ["20240104"]


class TestValidateBars:
    def test_empty(self):
        result = validate_bars([])
        assert not result.passed
        assert result.failed_checks[0].name == "not_empty"

    def test_valid(self, sample_bars):
        assert validate_bars(sample_bars).passed

    def test_negative_volume(self):
        result = validate_bars([_make_bar("20240101", volume=-1)])
        assert [c.name for c in result.failed_checks] == ["volume_sanity"]

    def test_date_order(self):
        result = validate_bars([_make_bar("20240102"), _make_bar("20240101")])
        assert [c.name for c in result.failed_checks] == ["date_order"]

    def test_ohlc_consistency(self):
        result = validate_bars([_make_bar("20240101", high=98.0)])
        assert "ohlc_consistency" in [c.name for c in result.failed_checks]

    def test_nan_detected(self):
        result = validate_bars([_make_bar("20240101", open=float("inf"))])
        finite = next(c for c in result.checks if c.name == "finite_prices")
        assert not finite.passed

    def test_date_format(self):
        result = validate_bars([_make_bar("2024-01-01")])
        assert [c.name for c in result.failed_checks] == ["date_format"]
