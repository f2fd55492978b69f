# aurora/services/__init__.py
"""
Service layer consumed by the API boundary

RiskService:
- simulate_portfolio_var: validated parametric VaR over close series
- analyze_holdings: wallet valuation + concentration risk (+ behavior)
- get_wallet_analytics: holdings and behavior from the chain providers
- calculate_wallet_var: mock VaR from a holdings provider

RecommendationService:
- recommend / recommend_for_wallet: ranked staking, swap and LP ideas

BacktestService:
- run: validated weighted-basket backtest
"""

from aurora.services.backtest_service import BacktestService
from aurora.services.recommendation_service import (
    QuoteProvider,
    Recommendation,
    RecommendationService,
)
from aurora.services.risk_service import (
    HoldingsProvider,
    RiskService,
    TransactionsProvider,
    WalletRiskSnapshot,
)

__all__ = [
    "BacktestService",
    "HoldingsProvider",
    "QuoteProvider",
    "Recommendation",
    "RecommendationService",
    "RiskService",
    "TransactionsProvider",
    "WalletRiskSnapshot",
]
