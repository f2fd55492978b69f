# aurora/data_engine/collectors/__init__.py
"""
Historical price collectors
"""

from aurora.data_engine.collectors.base_collector import (
    BaseOHLCCollector,
    PriceHistoryProvider,
    RateLimitedError,
    bars_to_frame,
)
from aurora.data_engine.collectors.coingecko_collector import CoinGeckoOHLCCollector

__all__ = [
    "BaseOHLCCollector",
    "CoinGeckoOHLCCollector",
    "PriceHistoryProvider",
    "RateLimitedError",
    "bars_to_frame",
]
