# aurora/data_engine/__init__.py
"""
Data Engine for Aurora Risk Lab

Collectors fetch historical OHLC candles (CoinGecko) with retries, rate
limiting and an injected cache. Storage holds the cache backends.

Usage:
    from aurora.data_engine import CoinGeckoOHLCCollector, InMemoryCache

    collector = CoinGeckoOHLCCollector(cache=InMemoryCache())
    bars = await collector.fetch_many(["solana", "usd-coin"], days=30)
"""

from aurora.data_engine.collectors import (
    BaseOHLCCollector,
    CoinGeckoOHLCCollector,
    PriceHistoryProvider,
)
from aurora.data_engine.storage import InMemoryCache, OHLCCache, RedisCache

__all__ = [
    "BaseOHLCCollector",
    "CoinGeckoOHLCCollector",
    "PriceHistoryProvider",
    "InMemoryCache",
    "OHLCCache",
    "RedisCache",
]
