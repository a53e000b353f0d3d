"""Tests for the MockProvider — contract tests for the provider interface."""

from datetime import date

import pytest

from tickerlens.config import QuoteProviderType
from tickerlens.errors import UpstreamRequestFailure
from tickerlens.models.bar import DailyBar
from tickerlens.models.quote import Fundamentals, Quote
from tickerlens.providers import PROVIDER_CLASSES, create_provider
from tickerlens.providers.mock import MockProvider


class TestMockProviderDomestic:
    @pytest.mark.asyncio
    async def test_default_quote(self, mock_provider):
        quote = await mock_provider.get_domestic_quote("005930")
        assert isinstance(quote, Quote)
        assert quote.price > 0

    @pytest.mark.asyncio
    async def test_generated_bars_skip_weekends(self, mock_provider):
        # 2024-01-06 and 2024-01-07 are a weekend.
        bars = await mock_provider.get_domestic_daily_bars(
            "005930", date(2024, 1, 1), date(2024, 1, 7),
        )
        assert len(bars) == 5
        assert all(isinstance(b, DailyBar) for b in bars)
        assert bars[0].date == "20240101"

    @pytest.mark.asyncio
    async def test_preset_data(self, mock_provider, sample_bars):
        mock_provider.set_fundamentals("005930", Fundamentals(roe=1.0))
        mock_provider.set_daily_bars("005930", sample_bars)
        assert (await mock_provider.get_domestic_fundamentals("005930")).roe == 1.0
        bars = await mock_provider.get_domestic_daily_bars(
            "005930", date(2024, 1, 1), date(2024, 1, 5),
        )
        assert bars == sample_bars

    @pytest.mark.asyncio
    async def test_failure(self, mock_provider):
        mock_provider.set_failure("000000", UpstreamRequestFailure("nope"))
        with pytest.raises(UpstreamRequestFailure):
            await mock_provider.get_domestic_quote("000000")
        assert mock_provider.call_count("domestic_quote") == 1


class TestMockProviderForeign:
    @pytest.mark.asyncio
    async def test_default_only_on_nas(self, mock_provider):
        assert (await mock_provider.get_foreign_quote("AAPL", "NAS")).price == 150.0
        assert await mock_provider.get_foreign_quote("AAPL", "NYS") is None

    @pytest.mark.asyncio
    async def test_records_exchange(self, mock_provider):
        await mock_provider.get_foreign_quote("aapl", "nys")
        assert mock_provider.calls == [("foreign_quote:NYS", "AAPL")]


class TestRegistry:
    def test_all_types_registered(self):
        assert set(PROVIDER_CLASSES) == set(QuoteProviderType)

    def test_create_mock(self):
        assert isinstance(create_provider(QuoteProviderType.MOCK), MockProvider)
