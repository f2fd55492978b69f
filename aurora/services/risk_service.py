# aurora/services/risk_service.py
"""
Risk service: validation and orchestration around the pure risk core

The quant functions never raise on degenerate input; this layer is where
malformed requests are rejected with InvalidInputError before any
computation runs.
"""

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger

from aurora.config.settings import get_settings
from aurora.quant_engine.behavior import UserBehavior, classify_user_behavior
from aurora.quant_engine.models import ConcentrationReport, Holding, VaRReport, coerce_holdings
from aurora.quant_engine.risk.concentration import ConcentrationRiskAnalyzer
from aurora.quant_engine.risk.mock_var import MockVaRCalculator
from aurora.quant_engine.risk.var_calculator import normalize_weights, portfolio_var
from aurora.services.schemas import (
    PortfolioSimulationRequest,
    WalletRequest,
    WalletVaRRequest,
    parse_request,
)
from aurora.utils.exceptions import InvalidInputError

settings = get_settings()


class HoldingsProvider(Protocol):
    """Chain-indexer adapter returning a wallet's USD-valued holdings"""

    async def get_holdings(self, wallet_address: str) -> list[Holding | Mapping[str, Any]]: ...


class TransactionsProvider(Protocol):
    """Chain-indexer adapter returning a wallet's classified transactions"""

    async def get_transactions(self, wallet_address: str) -> list[Mapping[str, Any]]: ...


@dataclass(frozen=True)
class WalletRiskSnapshot:
    holdings: list[Holding]
    total_value_usd: float
    concentration_risk: ConcentrationReport
    wallet: str | None = None
    user_behavior: UserBehavior | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "wallet": self.wallet,
            "balances": [h.to_dict() for h in self.holdings],
            "totalPortfolioValueUSD": self.total_value_usd,
            "concentrationRisk": self.concentration_risk.to_dict(),
            "userBehavior": self.user_behavior.to_dict() if self.user_behavior else None,
            **self.extra,
        }


class RiskService:
    """
    Entry points used by the API layer for risk reports
    """

    def __init__(
        self,
        holdings_provider: HoldingsProvider | None = None,
        var_calculator: MockVaRCalculator | None = None,
        concentration_analyzer: ConcentrationRiskAnalyzer | None = None,
        transactions_provider: TransactionsProvider | None = None,
    ):
        self.holdings_provider = holdings_provider
        self.transactions_provider = transactions_provider
        self.var_calculator = var_calculator or MockVaRCalculator(
            settings.MOCK_VOLATILITY_FACTOR
        )
        self.concentration_analyzer = concentration_analyzer or ConcentrationRiskAnalyzer(
            settings.CONCENTRATION_RISK_THRESHOLD
        )

    def simulate_portfolio_var(
        self,
        series: list[list[float]],
        weights: list[float],
        confidence: float | None = None,
    ) -> dict[str, Any]:
        """
        Parametric VaR over caller-supplied close series

        Raises:
            InvalidInputError: If the payload is malformed or the number of
                weights differs from the number of series
        """
        request = parse_request(
            PortfolioSimulationRequest,
            {"series": series, "weights": weights, "confidence": confidence},
        )

        if len(request.weights) != len(request.series):
            raise InvalidInputError("weights length must equal number of series")

        normalized = normalize_weights(request.weights)
        confidence = request.confidence if request.confidence is not None else 0.95
        result = portfolio_var(normalized, request.series, confidence)

        return {"weights": normalized, **result.to_dict()}

    def analyze_holdings(
        self,
        holdings: Iterable[Holding | Mapping[str, Any]],
        wallet: str | None = None,
        transactions: Iterable[Mapping[str, Any]] | None = None,
    ) -> WalletRiskSnapshot:
        """
        Value a wallet's holdings and run the concentration check

        When transactions are given the snapshot also carries the wallet's
        behavior profile.
        """
        valued = coerce_holdings(holdings)
        total_value_usd = sum(h.value_usd for h in valued)

        return WalletRiskSnapshot(
            holdings=valued,
            total_value_usd=total_value_usd,
            concentration_risk=self.concentration_analyzer.analyze(valued, total_value_usd),
            wallet=wallet,
            user_behavior=(
                classify_user_behavior(transactions) if transactions is not None else None
            ),
        )

    async def get_wallet_analytics(self, wallet_address: str) -> WalletRiskSnapshot:
        """
        Holdings, concentration risk and behavior profile for a wallet

        Raises:
            InvalidInputError: If the wallet address is malformed
            RuntimeError: If the holdings or transactions provider is missing
        """
        request = parse_request(WalletRequest, {"walletAddress": wallet_address})

        if self.holdings_provider is None or self.transactions_provider is None:
            raise RuntimeError("RiskService needs holdings and transactions providers")

        holdings, transactions = await asyncio.gather(
            self.holdings_provider.get_holdings(request.wallet_address),
            self.transactions_provider.get_transactions(request.wallet_address),
        )
        logger.info(
            f"Wallet analytics for {request.wallet_address}: "
            f"{len(holdings)} holdings, {len(transactions)} transactions"
        )
        return self.analyze_holdings(holdings, request.wallet_address, transactions)

    async def calculate_wallet_var(
        self,
        wallet_address: str,
        time_horizon_days: float | None = None,
        confidence_level: float | None = None,
    ) -> VaRReport:
        """
        Mock VaR for a wallet's current holdings

        Raises:
            InvalidInputError: On an invalid request
            RuntimeError: If no holdings provider is configured
        """
        request = parse_request(
            WalletVaRRequest,
            {
                "walletAddress": wallet_address,
                "timeHorizonDays": time_horizon_days,
                "confidenceLevel": confidence_level,
            },
        )

        if self.holdings_provider is None:
            raise RuntimeError("RiskService has no holdings provider configured")

        balances = await self.holdings_provider.get_holdings(request.wallet_address)
        logger.info(f"Calculating mock VaR for {request.wallet_address} ({len(balances)} holdings)")

        return self.var_calculator.calculate_portfolio_var(
            balances,
            request.time_horizon_days or settings.DEFAULT_TIME_HORIZON_DAYS,
            request.confidence_level or settings.VAR_CONFIDENCE_LEVEL,
        )
