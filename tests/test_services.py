# tests/test_services.py
"""
Tests for the risk and backtest services
"""

import pytest
from conftest import FakeHoldingsProvider, FakeTransactionsProvider, make_transactions

from aurora.backtesting import BacktestEngine
from aurora.quant_engine.behavior import BehaviorProfile
from aurora.quant_engine.models import RiskStatus
from aurora.quant_engine.risk import portfolio_var
from aurora.services import BacktestService, RiskService
from aurora.utils.exceptions import InvalidInputError


class TestSimulatePortfolioVaR:
    """Test the portfolio VaR simulation entry point"""

    def test_weights_are_normalized(self):
        out = RiskService().simulate_portfolio_var(
            [[100, 101, 99, 102], [50, 50.5, 51, 50]], [1, 3]
        )
        assert out["weights"] == [0.25, 0.75]

    def test_matches_core_calculation(self):
        series = [[100.0, 104.0, 97.0, 101.0], [20.0, 21.0, 19.5, 20.5]]
        out = RiskService().simulate_portfolio_var(series, [0.6, 0.4], 0.99)
        expected = portfolio_var([0.6, 0.4], series, 0.99)

        assert out["sigma"] == pytest.approx(expected.sigma)
        assert out["VaR"] == pytest.approx(expected.var)

    def test_default_confidence(self):
        series = [[100.0, 104.0, 97.0, 101.0]]
        out = RiskService().simulate_portfolio_var(series, [1.0])

        assert out["VaR"] == pytest.approx(1.645 * out["sigma"])

    def test_weights_must_match_series(self):
        with pytest.raises(InvalidInputError, match="weights length must equal number of series"):
            RiskService().simulate_portfolio_var([[1.0, 2.0], [3.0, 4.0]], [1.0])

    @pytest.mark.parametrize(
        "series,weights",
        [
            ([], [1.0]),
            ([[1.0, 2.0]], []),
            ([[1.0, -2.0]], [1.0]),
            ([[1.0, 0.0]], [1.0]),
        ],
    )
    def test_malformed_payload(self, series, weights):
        with pytest.raises(InvalidInputError):
            RiskService().simulate_portfolio_var(series, weights)


class TestHoldingsAnalysis:
    def test_analyze_holdings(self, wallet_address):
        holdings = [
            {"symbol": "SOL", "balance": 2.0, "price": 150.0},
            {"symbol": "USDC", "balance": 100.0, "price": 1.0},
            {"symbol": "BONK", "balance": 5_000_000.0, "price": None},
        ]
        snapshot = RiskService().analyze_holdings(holdings, wallet=wallet_address)

        assert snapshot.total_value_usd == pytest.approx(400.0)
        assert snapshot.concentration_risk.status == RiskStatus.HIGH
        assert [a.symbol for a in snapshot.concentration_risk.risky_assets] == ["SOL", "USDC"]

        payload = snapshot.to_dict()
        assert payload["wallet"] == wallet_address
        assert payload["totalPortfolioValueUSD"] == pytest.approx(400.0)
        assert payload["balances"][2]["valueUSD"] == 0.0

    def test_empty_wallet(self):
        snapshot = RiskService().analyze_holdings([])

        assert snapshot.total_value_usd == 0
        assert snapshot.concentration_risk.status == RiskStatus.LOW
        assert snapshot.to_dict()["userBehavior"] is None

    def test_behavior_attached_when_transactions_given(self, sample_holdings):
        snapshot = RiskService().analyze_holdings(
            sample_holdings, transactions=make_transactions(*["DEX_SWAP"] * 5)
        )

        assert snapshot.user_behavior.profile == BehaviorProfile.ACTIVE_TRADER
        assert snapshot.to_dict()["userBehavior"]["metrics"]["swapCount"] == 5

    def test_no_transactions_is_inactive(self, sample_holdings):
        snapshot = RiskService().analyze_holdings(sample_holdings, transactions=[])
        assert snapshot.to_dict()["userBehavior"]["profile"] == "Inactive"


class TestWalletAnalytics:
    @pytest.mark.asyncio
    async def test_get_wallet_analytics(self, wallet_address, sample_holdings):
        holdings = FakeHoldingsProvider(sample_holdings)
        transactions = FakeTransactionsProvider(make_transactions("STAKE_SOL"))
        service = RiskService(holdings_provider=holdings, transactions_provider=transactions)

        snapshot = await service.get_wallet_analytics(wallet_address)

        assert holdings.wallets == [wallet_address]
        assert transactions.wallets == [wallet_address]
        assert snapshot.wallet == wallet_address
        assert snapshot.total_value_usd == pytest.approx(1000.0)
        assert snapshot.user_behavior.profile == BehaviorProfile.LONG_TERM_HOLDER

    @pytest.mark.asyncio
    async def test_invalid_address(self):
        service = RiskService(
            holdings_provider=FakeHoldingsProvider([]),
            transactions_provider=FakeTransactionsProvider([]),
        )
        with pytest.raises(InvalidInputError):
            await service.get_wallet_analytics("short")

    @pytest.mark.asyncio
    async def test_requires_transactions_provider(self, wallet_address):
        service = RiskService(holdings_provider=FakeHoldingsProvider([]))
        with pytest.raises(RuntimeError):
            await service.get_wallet_analytics(wallet_address)


class TestWalletVaR:
    @pytest.mark.asyncio
    async def test_calculate_wallet_var(self, wallet_address):
        provider = FakeHoldingsProvider([{"symbol": "SOL", "valueUSD": 1000.0}])
        report = await RiskService(holdings_provider=provider).calculate_wallet_var(
            wallet_address, time_horizon_days=3, confidence_level=0.99
        )

        assert provider.wallets == [wallet_address]
        assert report.var_value_usd == pytest.approx(150.0)
        assert report.status == RiskStatus.HIGH
        assert "99% confidence over 3 day(s)" in report.message

    @pytest.mark.asyncio
    async def test_defaults(self, wallet_address):
        provider = FakeHoldingsProvider([{"symbol": "SOL", "valueUSD": 1000.0}])
        report = await RiskService(holdings_provider=provider).calculate_wallet_var(wallet_address)

        assert report.var_value_usd == pytest.approx(50.0)
        assert report.status == RiskStatus.LOW
        assert report.message.endswith("with a 95% confidence over 1 day(s).")

    @pytest.mark.asyncio
    async def test_invalid_address(self):
        service = RiskService(holdings_provider=FakeHoldingsProvider([]))
        with pytest.raises(InvalidInputError, match="wallet_address|walletAddress"):
            await service.calculate_wallet_var("short")

    @pytest.mark.asyncio
    async def test_invalid_confidence(self, wallet_address):
        service = RiskService(holdings_provider=FakeHoldingsProvider([]))
        with pytest.raises(InvalidInputError):
            await service.calculate_wallet_var(wallet_address, confidence_level=1.5)

    @pytest.mark.asyncio
    async def test_requires_provider(self, wallet_address):
        with pytest.raises(RuntimeError):
            await RiskService().calculate_wallet_var(wallet_address)


class TestBacktestService:
    @pytest.mark.asyncio
    async def test_run(self, flat_and_doubling_provider):
        service = BacktestService(BacktestEngine(flat_and_doubling_provider))
        out = await service.run(
            {
                "assets": ["usd-coin", "solana"],
                "weights": [1, 1],
                "startDate": "2024-01-01",
                "endDate": "2024-01-03",
            }
        )

        assert out["summary"] == {
            "totalReturn": "50.00",
            "maxDrawdown": "0.00",
            "startDate": "2024-01-01",
            "endDate": "2024-01-03",
        }
        assert [p["value"] for p in out["portfolioPerformance"]] == pytest.approx(
            [1000.0, 1250.0, 1500.0]
        )

    @pytest.mark.asyncio
    async def test_missing_fields(self, flat_and_doubling_provider):
        service = BacktestService(BacktestEngine(flat_and_doubling_provider))
        with pytest.raises(InvalidInputError, match="BacktestRequest"):
            await service.run({"assets": ["solana"], "startDate": "2024-01-01"})

    @pytest.mark.asyncio
    async def test_engine_errors_propagate(self, flat_and_doubling_provider):
        service = BacktestService(BacktestEngine(flat_and_doubling_provider))
        with pytest.raises(InvalidInputError, match="must match in length"):
            await service.run(
                {
                    "assets": ["solana", "usd-coin"],
                    "weights": [1.0],
                    "startDate": "2024-01-01",
                    "endDate": "2024-01-03",
                }
            )
