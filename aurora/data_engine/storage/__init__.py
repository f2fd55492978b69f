# aurora/data_engine/storage/__init__.py
"""
Cache backends injected into the price collectors
"""

from aurora.data_engine.storage.cache import InMemoryCache, OHLCCache, RedisCache

__all__ = ["InMemoryCache", "OHLCCache", "RedisCache"]
