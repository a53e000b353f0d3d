"""Tests for the final candidate score and its breakdown."""

import pytest

from tickerlens.models.candidate import Candidate
from tickerlens.models.quote import Fundamentals, Quote, TechnicalSnapshot
from tickerlens.models.ticker import Market
from tickerlens.scoring import (
    NEUTRAL_SCORE,
    ScoreBreakdown,
    final_score,
    market_component,
    quality_component,
    score_breakdown,
)


def _domestic(score: float = 80.0) -> Candidate:
    return Candidate(ticker="005930", name="Samsung Electronics", market=Market.DOMESTIC, score=score)


def _foreign(score: float = 80.0) -> Candidate:
    return Candidate(ticker="NVDA", name="Nvidia", market=Market.FOREIGN, score=score)


class TestMarketComponent:
    def test_no_quote_is_neutral(self):
        assert market_component(_foreign(), None) == NEUTRAL_SCORE

    def test_change_percent(self):
        assert market_component(_foreign(), Quote(ticker="NVDA", change_percent=5.0)) == 60
        assert market_component(_foreign(), Quote(ticker="NVDA", change_percent=-40.0)) == 0
        assert market_component(_foreign(), Quote(ticker="NVDA", change_percent=40.0)) == 100

    def test_domestic_prefers_technical(self):
        quote = Quote(
            ticker="005930", change_percent=1.25, technical=TechnicalSnapshot(market_score=72),
        )
        assert market_component(_domestic(), quote) == 72

    def test_foreign_ignores_technical(self):
        quote = Quote(ticker="NVDA", change_percent=0.0, technical=TechnicalSnapshot(market_score=90))
        assert market_component(_foreign(), quote) == 50

    def test_failed_quote_is_neutral(self):
        assert market_component(_domestic(), Quote(ticker="005930", note="failed")) == 50


class TestQualityComponent:
    def test_unknown_fundamentals_are_neutral(self):
        assert quality_component(None) == 50
        assert quality_component(Fundamentals()) == 50

    def test_full_fundamentals(self):
        # roe 60, eps 70, bps 50
        assert quality_component(Fundamentals(roe=10.0, eps=4000.0, bps=50000.0)) == 61

    def test_negative_roe(self):
        # roe 30 (capped at 40), eps and bps unknown
        assert quality_component(Fundamentals(roe=-5.0)) == 40
        assert quality_component(Fundamentals(roe=-100.0)) == 25

    def test_eps_sign_and_cap(self):
        # eps -30 -> 20, cap 30 away from 50
        assert quality_component(Fundamentals(eps=-1_000_000.0)) == 41
        assert quality_component(Fundamentals(eps=0.0)) == 50

    def test_bps_cap(self):
        # bps capped at 80
        assert quality_component(Fundamentals(bps=1e12)) == 56


class TestScoreBreakdown:
    def test_foreign_blend(self):
        breakdown = score_breakdown(_foreign(70.0), Quote(ticker="NVDA", change_percent=5.0))
        assert breakdown == ScoreBreakdown(narrative=70, market=60, quality=None, final=66)
        assert "quality" not in breakdown.to_dict()

    def test_foreign_without_quote(self):
        assert final_score(_foreign(80.0)) == 68

    def test_domestic_blend(self):
        quote = Quote(
            ticker="005930",
            technical=TechnicalSnapshot(market_score=72),
            fundamentals=Fundamentals(roe=10.0, eps=4000.0, bps=50000.0),
        )
        breakdown = score_breakdown(_domestic(80.0), quote)
        assert (breakdown.market, breakdown.quality) == (72, 61)
        # 40 + 21.6 + 12.2
        assert breakdown.final == 74

    def test_domestic_without_quote(self):
        breakdown = score_breakdown(_domestic(80.0))
        assert breakdown.quality == 50
        assert breakdown.final == 65

    def test_narrative_clamped(self):
        assert score_breakdown(_foreign(150.0)).narrative == 100
        assert score_breakdown(_foreign(-3.0)).narrative == 0

    @pytest.mark.parametrize("score", [0.0, 37.0, 100.0])
    def test_final_in_range(self, score):
        quote = Quote(ticker="005930", change_percent=-99.0, fundamentals=Fundamentals(roe=-50.0))
        assert 0 <= final_score(_domestic(score), quote) <= 100
