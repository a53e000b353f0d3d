"""Tests for candidate coercion and verification."""

import pytest

from tickerlens.models.candidate import Candidate
from tickerlens.models.ticker import Market
from tickerlens.verifier import (
    DEFAULT_NAME,
    DEFAULT_RATIONALE,
    MAX_CANDIDATES,
    parse_candidate,
    parse_candidates,
    verify,
    verify_candidate,
)


class TestParseCandidate:
    def test_full_item(self):
        c = parse_candidate({
            "ticker": " 005930 ",
            "name": "Samsung Electronics",
            "market": "KR",
            "rationale": "Memory demand",
            "score": "87.5",
            "confidence": 0.8,
            "stage_tag": "supply",
            "stage_reason": "DRAM shortage",
        })
        assert c.ticker == "005930"
        assert c.market is Market.DOMESTIC
        assert c.score == 88.0
        assert c.confidence == 0.8
        assert c.stage_tag == "supply"
        assert not c.verified

    def test_defaults(self):
        c = parse_candidate({"ticker": "AAPL"})
        assert c.name == DEFAULT_NAME
        assert c.rationale == DEFAULT_RATIONALE
        assert c.score == 0.0
        assert c.confidence == 0.5
        assert c.stage_tag is None

    def test_clamping(self):
        c = parse_candidate({"ticker": "AAPL", "score": 140, "confidence": -2})
        assert c.score == 100.0
        assert c.confidence == 0.0

    def test_non_numeric(self):
        c = parse_candidate({"ticker": "AAPL", "score": "high", "confidence": float("nan")})
        assert c.score == 0.0
        assert c.confidence == 0.5

    def test_bool_is_not_a_number(self):
        assert parse_candidate({"ticker": "AAPL", "score": True}).score == 0.0

    @pytest.mark.parametrize("ticker, market", [
        ("000660", Market.DOMESTIC),
        ("NVDA", Market.FOREIGN),
        ("", Market.UNKNOWN),
    ])
    def test_market_inferred_from_shape(self, ticker, market):
        assert parse_candidate({"ticker": ticker, "market": "??"}).market is market

    def test_skips_non_mappings(self):
        items = [{"ticker": "AAPL"}, "NVDA", None, {"ticker": "005930"}]
        assert [c.ticker for c in parse_candidates(items)] == ["AAPL", "005930"]


class TestVerify:
    def test_domestic_member(self, universe):
        c = Candidate(ticker="005930", name="Samsung", market=Market.DOMESTIC)
        assert verify_candidate(c, universe).verified

    def test_foreign_member_case_insensitive(self, universe):
        c = Candidate(ticker="nvda", name="Nvidia", market=Market.FOREIGN)
        result = verify_candidate(c, universe)
        assert result.verified
        assert result.ticker == "nvda"

    def test_name_fallback(self, universe):
        c = Candidate(ticker="000000", name="Samsung Electronics", market=Market.DOMESTIC)
        result = verify_candidate(c, universe)
        assert result.ticker == "005930"
        assert result.market is Market.DOMESTIC
        assert result.verified

    def test_name_fallback_normalizes_punctuation(self, universe):
        c = Candidate(ticker="999999", name="SK-hynix", market=Market.DOMESTIC)
        assert verify_candidate(c, universe).ticker == "000660"

    def test_unresolved_domestic(self, universe):
        c = Candidate(ticker="999999", name="Nowhere Corp", market=Market.DOMESTIC)
        result = verify_candidate(c, universe)
        assert result.ticker == "999999"
        assert not result.verified

    def test_foreign_never_corrected(self, universe):
        c = Candidate(ticker="FAKE", name="Samsung Electronics", market=Market.FOREIGN)
        result = verify_candidate(c, universe)
        assert result.ticker == "FAKE"
        assert not result.verified

    def test_unknown_market(self, universe):
        c = Candidate(ticker="005930", name="Samsung Electronics", market=Market.UNKNOWN)
        assert not verify_candidate(c, universe).verified

    def test_input_not_mutated(self, universe):
        c = Candidate(ticker="000000", name="Samsung Electronics", market=Market.DOMESTIC)
        verify_candidate(c, universe)
        assert c.ticker == "000000"

    def test_truncates_preserving_order(self, universe):
        candidates = [
            Candidate(ticker=f"T{i}", name=f"Name {i}", market=Market.FOREIGN)
            for i in range(20)
        ]
        result = verify(candidates, universe)
        assert len(result) == MAX_CANDIDATES
        assert [c.ticker for c in result] == [f"T{i}" for i in range(12)]

    def test_custom_limit(self, universe):
        candidates = [Candidate(ticker="AAPL", name="Apple", market=Market.FOREIGN)] * 5
        assert len(verify(candidates, universe, limit=3)) == 3
