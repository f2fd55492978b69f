# aurora/backtesting/__init__.py
"""
Backtesting Module for Aurora Risk Lab

BacktestEngine:
- Replays historical OHLC closes for a weighted basket
- Equity curve normalized to a $1000 baseline
- Total return and maximum drawdown summary

Usage:
    from aurora.backtesting import BacktestEngine
    from aurora.data_engine import CoinGeckoOHLCCollector, InMemoryCache

    engine = BacktestEngine(CoinGeckoOHLCCollector(cache=InMemoryCache()))
    result = await engine.run_backtest(
        ["solana", "usd-coin"], [0.6, 0.4], "2024-01-01", "2024-03-01"
    )
    print(result.summary.total_return_pct)
"""

from aurora.backtesting.engine import (
    BacktestEngine,
    BacktestResult,
    BacktestSummary,
    PortfolioPoint,
    horizon_days,
    normalize_positive_weights,
)

__all__ = [
    "BacktestEngine",
    "BacktestResult",
    "BacktestSummary",
    "PortfolioPoint",
    "horizon_days",
    "normalize_positive_weights",
]
