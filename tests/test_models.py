"""Tests for data models and ticker helpers."""

import pytest

from tickerlens.models.candidate import Candidate
from tickerlens.models.quote import Fundamentals, Quote, TechnicalSnapshot
from tickerlens.models.ticker import Market, classify_market, is_domestic, normalize_ticker
from tickerlens.models.token import AccessToken


class TestTicker:
    @pytest.mark.parametrize("raw, expected", [
        ("5930", "005930"),
        (" 005930 ", "005930"),
        ("aapl", "AAPL"),
        ("brk.b", "BRK.B"),
        ("1234567", "1234567"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_ticker(raw) == expected

    @pytest.mark.parametrize("ticker, market", [
        ("005930", Market.DOMESTIC),
        ("AAPL", Market.FOREIGN),
        ("BRK.B", Market.FOREIGN),
        ("1234567", Market.FOREIGN),
        ("ABCDEFGHIJK", Market.UNKNOWN),
        ("AB-C", Market.UNKNOWN),
        ("", Market.UNKNOWN),
    ])
    def test_classify(self, ticker, market):
        assert classify_market(ticker) is market

    def test_is_domestic(self):
        assert is_domestic("000660")
        assert not is_domestic("660")

    @pytest.mark.parametrize("tag, market", [
        ("KR", Market.DOMESTIC),
        ("us", Market.FOREIGN),
        ("DOMESTIC", Market.DOMESTIC),
        ("JP", Market.UNKNOWN),
        (None, Market.UNKNOWN),
        (Market.FOREIGN, Market.FOREIGN),
    ])
    def test_market_parse(self, tag, market):
        assert Market.parse(tag) is market


class TestQuote:
    def test_to_dict_omits_absent(self):
        assert Quote(ticker="X", note="n/a").to_dict() == {"ticker": "X", "note": "n/a"}

    def test_to_dict_nested(self):
        quote = Quote(
            ticker="005930",
            price=70000.0,
            change_percent=1.5,
            volume=10.0,
            fundamentals=Fundamentals(roe=9.0),
            technical=TechnicalSnapshot(market_score=61, rsi=55.0),
        )
        assert quote.to_dict() == {
            "ticker": "005930",
            "price": 70000.0,
            "changePercent": 1.5,
            "volume": 10.0,
            "fundamentals": {"roe": 9.0},
            "technical": {"marketScore": 61, "rsi": 55.0},
        }

    def test_ok(self):
        assert Quote(ticker="X", price=1.0).ok
        assert not Quote(ticker="X", note="failed").ok


class TestAccessToken:
    def test_freshness(self):
        token = AccessToken(token="secret", expires_at=1000.0)
        assert token.is_fresh(940.0, 60.0)
        assert not token.is_fresh(941.0, 60.0)

    def test_repr_hides_token(self):
        assert "secret" not in repr(AccessToken(token="secret", expires_at=1.0))


class TestCandidate:
    def test_to_dict(self):
        c = Candidate(ticker="AAPL", name="Apple", market=Market.FOREIGN, stage_tag="demand")
        data = c.to_dict()
        assert data["market"] == "FOREIGN"
        assert data["stageTag"] == "demand"
        assert "stageReason" not in data
