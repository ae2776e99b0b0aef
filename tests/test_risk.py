"""Tests for concentration and diversification metrics."""

from __future__ import annotations

import pytest

from folio.config.schema import RiskWeightsConfig
from folio.portfolio.holdings import CashHolding, SecurityHolding
from folio.portfolio.risk import (
    compute_risk_metrics,
    diversification_score,
    herfindahl_index,
)


class TestHerfindahl:

    def test_single_sector(self):
        assert herfindahl_index([1.0]) == pytest.approx(1.0)

    def test_even_split(self):
        assert herfindahl_index([0.25] * 4) == pytest.approx(0.25)

    def test_empty(self):
        assert herfindahl_index([]) == 0.0


class TestDiversificationScore:

    def test_single_holding_is_low(self):
        # 30 × 1/20 + 0 + 0 = 1.5
        assert diversification_score(1, 100.0, 1.0) == 2

    def test_ideal_portfolio(self):
        assert diversification_score(20, 0.0, 0.0) == 100

    def test_breadth_capped(self):
        assert diversification_score(200, 5.0, 0.1) == diversification_score(20, 5.0, 0.1)

    def test_custom_weights(self):
        weights = RiskWeightsConfig(holding_count=0, top_holding=0, sector=100)
        assert diversification_score(1, 100.0, 0.5, weights) == 50

    def test_half_point_rounds_up(self):
        # 30 × 4/20 + 30 × 0.75 + 0 = 28.5
        assert diversification_score(4, 25.0, 1.0) == 29

    def test_clamped(self):
        assert diversification_score(0, 150.0, 2.0) == 0


class TestComputeRiskMetrics:

    def test_one_holding(self):
        risk = compute_risk_metrics([SecurityHolding("a", "AAPL", 10, 1.0, 10.0)], 1)
        assert risk.top_holding_concentration == pytest.approx(100.0)
        assert risk.sector_concentration == pytest.approx(1.0)
        assert risk.sector_concentration_points == pytest.approx(10_000)
        assert 0 <= risk.diversification_score <= 20

    def test_mixed(self, mixed_holdings):
        risk = compute_risk_metrics(mixed_holdings, 2)
        total = 5800.0
        expected_hhi = (3000 / total) ** 2 + (1800 / total) ** 2 + (1000 / total) ** 2
        assert risk.top_holding_concentration == pytest.approx(2000 / total * 100)
        assert risk.sector_concentration == pytest.approx(expected_hhi)
        assert risk.account_count == 2

    def test_empty_portfolio(self):
        risk = compute_risk_metrics([], 3)
        assert risk.diversification_score == 0
        assert risk.top_holding_concentration == 0.0
        assert risk.account_count == 3

    def test_four_equal_holdings_one_sector(self):
        holdings = [
            SecurityHolding("a", symbol, 1, 10.0, 10.0, sector="Technology")
            for symbol in ("AAPL", "MSFT", "NVDA", "AMD")
        ]
        risk = compute_risk_metrics(holdings, 1)
        assert risk.top_holding_concentration == pytest.approx(25.0)
        assert risk.sector_concentration == pytest.approx(1.0)
        assert risk.diversification_score == 29

    def test_negative_cash_ignored(self):
        risk = compute_risk_metrics(
            [SecurityHolding("a", "X", 1, 1.0, 100.0), CashHolding("a", -100.0)], 1,
        )
        assert risk.top_holding_concentration == pytest.approx(100.0)
