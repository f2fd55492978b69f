# tests/test_risk.py
"""
Tests for concentration risk, portfolio VaR, mock VaR and drawdowns
"""

import numpy as np
import pytest

from aurora.quant_engine.models import Holding, RiskStatus
from aurora.quant_engine.returns import stdev
from aurora.quant_engine.risk import (
    ConcentrationRiskAnalyzer,
    DrawdownAnalyzer,
    MockVaRCalculator,
    analyze_concentration_risk,
    calculate_portfolio_var,
    combine_returns,
    normalize_weights,
    portfolio_var,
)
from aurora.utils.exceptions import ValidationError


class TestHolding:
    def test_value_derived_from_balance_and_price(self):
        holding = Holding.from_mapping({"symbol": "SOL", "balance": 2.0, "price": 150.0})
        assert holding.value_usd == 300.0

    def test_unpriced_holding_is_zero(self):
        holding = Holding.from_mapping({"symbol": "BONK", "balance": 1_000_000})
        assert holding.value_usd == 0.0

    def test_provider_fields_pass_through(self):
        holding = Holding.from_mapping({"symbol": "JUP", "valueUSD": 10.0, "mint": "JUPyiwrY"})
        payload = holding.to_dict()

        assert payload["mint"] == "JUPyiwrY"
        assert payload["valueUSD"] == 10.0

    def test_negative_value_rejected(self):
        with pytest.raises(ValidationError):
            Holding(symbol="SOL", value_usd=-1.0)

    def test_symbol_required(self):
        with pytest.raises(ValidationError):
            Holding.from_mapping({"valueUSD": 5.0})


class TestConcentrationRisk:
    def test_zero_total_is_low(self):
        report = analyze_concentration_risk([], 0)

        assert report.status == RiskStatus.LOW
        assert report.risky_assets == []
        assert report.message == "Portfolio value is zero or contains only unpriced assets."

    def test_dominant_asset_flagged(self):
        holdings = [
            {"symbol": "A", "valueUSD": 80.0},
            {"symbol": "B", "valueUSD": 20.0},
        ]
        report = analyze_concentration_risk(holdings, 100.0)

        assert report.status == RiskStatus.HIGH
        assert [a.symbol for a in report.risky_assets] == ["A"]
        assert report.risky_assets[0].percentage == pytest.approx(0.8)
        assert report.message == (
            "Portfolio has high concentration risk in the following asset(s): A."
        )

    def test_threshold_is_inclusive(self):
        holdings = [{"symbol": s, "valueUSD": 25.0} for s in ("A", "B", "C", "D")]
        report = analyze_concentration_risk(holdings, 100.0)

        assert report.status == RiskStatus.HIGH
        assert len(report.risky_assets) == 4

    def test_sorted_by_share_with_stable_ties(self):
        holdings = [
            {"symbol": "A", "valueUSD": 30.0},
            {"symbol": "B", "valueUSD": 30.0},
            {"symbol": "C", "valueUSD": 40.0},
        ]
        report = analyze_concentration_risk(holdings, 100.0)

        assert [a.symbol for a in report.risky_assets] == ["C", "A", "B"]
        assert report.message.endswith("asset(s): C, A, B.")

    def test_diversified_portfolio_is_low(self):
        holdings = [{"symbol": f"T{i}", "valueUSD": 10.0} for i in range(10)]
        report = analyze_concentration_risk(holdings, 100.0)

        assert report.status == RiskStatus.LOW
        assert report.message == "Portfolio has low concentration risk."
        assert report.risky_assets == []

    def test_zero_value_holdings_not_flagged(self, sample_holdings):
        holdings = sample_holdings + [{"symbol": "DUST", "valueUSD": 0.0}]
        report = analyze_concentration_risk(holdings, 1000.0)

        symbols = [a.symbol for a in report.risky_assets]
        assert "DUST" not in symbols
        assert symbols == ["SOL", "USDC"]

    def test_custom_threshold(self):
        holdings = [{"symbol": "A", "valueUSD": 60.0}, {"symbol": "B", "valueUSD": 40.0}]
        report = ConcentrationRiskAnalyzer(threshold=0.5).analyze(holdings, 100.0)

        assert [a.symbol for a in report.risky_assets] == ["A"]

    def test_to_dict(self):
        report = analyze_concentration_risk([{"symbol": "A", "valueUSD": 100.0}], 100.0)
        payload = report.to_dict()

        assert payload["status"] == "High"
        assert payload["riskyAssets"][0]["isHighRisk"] is True
        assert payload["riskyAssets"][0]["percentage"] == 1.0


class TestPortfolioVaR:
    def test_normalize_weights(self):
        assert normalize_weights([1, 3]) == [0.25, 0.75]
        assert normalize_weights([0, 0]) == [0.0, 0.0]

    def test_no_series(self):
        result = portfolio_var([], [])
        assert result.sigma == 0 and result.var == 0

    def test_single_point_series(self):
        result = portfolio_var([1.0], [[100.0]])
        assert result.to_dict() == {"sigma": 0.0, "VaR": 0.0}

    def test_series_truncated_to_shortest(self):
        long_series = [100.0, 110.0, 99.0, 108.9]
        flat_series = [50.0, 50.0, 50.0]

        result = portfolio_var([0.5, 0.5], [long_series, flat_series])

        # Only the first two returns of the long series survive alignment
        expected_sigma = stdev([0.05, -0.05])
        assert result.sigma == pytest.approx(expected_sigma)
        assert result.var == pytest.approx(1.645 * expected_sigma)

    def test_missing_weight_contributes_zero(self):
        a = [100.0, 105.0, 98.0, 101.0]
        b = [10.0, 20.0, 5.0, 40.0]

        assert portfolio_var([1.0], [a, b]).sigma == pytest.approx(portfolio_var([1.0], [a]).sigma)

    def test_combine_returns(self):
        combined = combine_returns([0.5, 0.5], [[0.1, 0.2, 0.3], [0.3, 0.0]])
        np.testing.assert_allclose(combined, [0.2, 0.1])

    def test_combine_returns_numpy(self):
        combined = combine_returns(np.array([0.5, 0.5]), np.array([[0.1, 0.2], [0.3, 0.0]]))
        np.testing.assert_allclose(combined, [0.2, 0.1])

    def test_numpy_inputs(self):
        series = [[100.0, 110.0, 99.0], [50.0, 55.0, 50.0]]
        expected = portfolio_var([0.5, 0.5], series)

        result = portfolio_var(np.array([0.5, 0.5]), np.array(series))

        assert result.sigma == pytest.approx(expected.sigma)
        assert result.var == pytest.approx(expected.var)

    def test_numpy_series_only(self):
        closes = [100.0, 110.0, 99.0]
        result = portfolio_var([1.0], np.array([closes]))

        assert result.var == pytest.approx(portfolio_var([1.0], [closes]).var)
        assert result.var > 0

    def test_confidence_tiers(self):
        series = [[100.0, 102.0, 97.0, 103.0, 99.0]]

        r95 = portfolio_var([1.0], series, 0.95)
        r99 = portfolio_var([1.0], series, 0.99)

        assert r99.sigma == pytest.approx(r95.sigma)
        assert r99.var > r95.var
        assert r99.var == pytest.approx(2.33 * r99.sigma)


class TestMockVaR:
    def test_empty_portfolio(self):
        report = calculate_portfolio_var([], 1, 0.95)

        assert report.var_value_usd == 0
        assert report.status == RiskStatus.LOW

    def test_one_day_horizon(self):
        report = calculate_portfolio_var([{"symbol": "SOL", "valueUSD": 1000.0}], 1, 0.95)

        assert report.var_value_usd == pytest.approx(50.0)
        # 50 is not strictly greater than 5% of 1000
        assert report.status == RiskStatus.LOW
        assert report.message == (
            "Calculated VaR indicates a potential loss of up to $50.00 "
            "with a 95% confidence over 1 day(s)."
        )

    @pytest.mark.parametrize(
        "horizon,expected_var,expected_status",
        [
            (2, 100.0, RiskStatus.MEDIUM),
            (3, 150.0, RiskStatus.HIGH),
            (7, 350.0, RiskStatus.HIGH),
        ],
    )
    def test_horizon_tiers(self, horizon, expected_var, expected_status):
        report = calculate_portfolio_var([{"symbol": "SOL", "valueUSD": 1000.0}], horizon, 0.99)

        assert report.var_value_usd == pytest.approx(expected_var)
        assert report.status == expected_status
        assert "99% confidence" in report.message

    def test_records_without_symbol(self):
        report = calculate_portfolio_var([{"valueUSD": 1000}], 1, 0.95)

        assert report.var_value_usd == pytest.approx(50.0)
        assert report.status == RiskStatus.LOW

    def test_negative_value_rejected(self):
        with pytest.raises(ValidationError):
            calculate_portfolio_var([{"valueUSD": -10.0}], 1, 0.95)

    def test_classify_is_strict(self):
        calculator = MockVaRCalculator()

        assert calculator.classify(100.0, 1000.0) == RiskStatus.MEDIUM
        assert calculator.classify(100.01, 1000.0) == RiskStatus.HIGH
        assert calculator.classify(50.01, 1000.0) == RiskStatus.MEDIUM

    def test_value_derived_from_balances(self):
        balances = [{"symbol": "SOL", "balance": 10.0, "price": 100.0}]
        report = MockVaRCalculator(volatility_factor=0.1).calculate_portfolio_var(balances, 1, 0.95)

        assert report.var_value_usd == pytest.approx(100.0)
        assert report.to_dict()["vaRValueUSD"] == pytest.approx(100.0)


class TestDrawdown:
    def test_monotone_curve_has_no_drawdown(self):
        assert DrawdownAnalyzer().max_drawdown_pct([1000.0, 1100.0, 1200.0]) == 0

    def test_largest_decline_wins(self):
        values = [1000.0, 1200.0, 900.0, 1100.0, 600.0, 700.0]
        assert DrawdownAnalyzer().max_drawdown_pct(values) == pytest.approx(50.0)

    def test_short_curves(self):
        analyzer = DrawdownAnalyzer()
        assert analyzer.max_drawdown_pct([]) == 0
        assert analyzer.max_drawdown_pct([1000.0]) == 0

    def test_zero_peak_ignored(self):
        assert DrawdownAnalyzer().max_drawdown_pct([0.0, 0.0, 0.0]) == 0

    def test_drawdown_series(self):
        drawdowns = DrawdownAnalyzer().calculate_drawdowns([100.0, 120.0, 90.0])
        np.testing.assert_allclose(drawdowns, [0.0, 0.0, -0.25])
