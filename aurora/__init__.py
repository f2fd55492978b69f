# aurora/__init__.py
"""
Aurora Risk Lab - wallet risk & portfolio analytics for Solana holdings

Subpackages:
- quant_engine: return statistics, concentration risk, VaR, drawdowns, staking
- backtesting: weighted-basket backtest over historical OHLC data
- data_engine: CoinGecko OHLC collector and cache backends
- services: validated entry points for the API layer
- config / utils: settings, logging, validation and formatting helpers
"""

__version__ = "1.0.0"


def get_package_info() -> dict:
    """Package metadata reported by health endpoints."""
    return {
        "name": "aurora-risk",
        "version": __version__,
        "subpackages": ["backtesting", "config", "data_engine", "quant_engine", "services", "utils"],
    }


__all__ = ["__version__", "get_package_info"]
