# aurora/data_engine/collectors/base_collector.py
"""
Base class for historical OHLC collectors
Provides caching, rate limiting, retries and concurrent batch fetching
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Protocol

import polars as pl
import requests
from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from aurora.config.settings import get_settings
from aurora.data_engine.storage.cache import OHLCCache
from aurora.quant_engine.models import OHLCBar

settings = get_settings()

OHLC_COLUMNS = ["time", "open", "high", "low", "close"]


class RateLimitedError(Exception):
    """Raised when the upstream API answers 429"""

    pass


class PriceHistoryProvider(Protocol):
    """Anything the backtest engine can pull OHLC history from"""

    async def fetch_ohlc(self, asset_id: str, days: int) -> list[OHLCBar] | None: ...

    async def fetch_many(
        self, asset_ids: list[str], days: int
    ) -> dict[str, list[OHLCBar] | None]: ...


def bars_to_frame(bars: list[OHLCBar]) -> pl.DataFrame:
    """
    Convert provider bars to a typed Polars DataFrame

    Args:
        bars: ``[timestamp_ms, open, high, low, close]`` rows

    Returns:
        DataFrame with columns time (Int64) and open/high/low/close (Float64)
    """
    columns: dict[str, list] = {name: [] for name in OHLC_COLUMNS}
    for bar in bars:
        padded = list(bar) + [None] * (len(OHLC_COLUMNS) - len(bar))
        columns["time"].append(int(padded[0]) if padded[0] is not None else None)
        for name, value in zip(OHLC_COLUMNS[1:], padded[1:5]):
            columns[name].append(float(value) if value is not None else None)

    return pl.DataFrame(
        columns,
        schema={
            "time": pl.Int64,
            "open": pl.Float64,
            "high": pl.Float64,
            "low": pl.Float64,
            "close": pl.Float64,
        },
    )


class BaseOHLCCollector(ABC):
    """
    Abstract base class for OHLC collectors
    All collectors must implement the collect() method
    """

    def __init__(
        self,
        name: str,
        rate_limit: int = 30,
        cache: OHLCCache | None = None,
        cache_ttl: int | None = None,
        max_concurrent: int | None = None,
        max_attempts: int = 3,
        retry_wait: Any = None,
    ):
        """
        Args:
            name: Collector identifier
            rate_limit: Max requests per minute
            cache: Injected cache; None disables caching
            cache_ttl: Cache TTL in seconds (default: OHLC_CACHE_TTL)
            max_concurrent: Max in-flight requests in fetch_many
            max_attempts: Attempts per asset before giving up
            retry_wait: tenacity wait strategy between attempts
        """
        self.name = name
        self.rate_limit = rate_limit
        self.cache = cache
        self.cache_ttl = cache_ttl or settings.OHLC_CACHE_TTL
        self.max_concurrent = max_concurrent or settings.OHLC_MAX_CONCURRENT
        self.max_attempts = max_attempts
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=4, max=10)
        self._request_timestamps: list[datetime] = []
        logger.info(f"Initialized {name} collector with rate limit {rate_limit}/min")

    @abstractmethod
    async def collect(self, asset_id: str, days: int) -> list[OHLCBar] | None:
        """
        Collect OHLC bars for one asset

        Args:
            asset_id: Provider asset identifier
            days: Number of days of history

        Returns:
            Bars ordered oldest first, or None when the provider has no data
        """
        pass

    def validate_data(self, bars: list[OHLCBar] | None) -> bool:
        """
        Validate collected bars: non-empty, chronological, some closes present
        """
        if not bars:
            return False

        try:
            df = bars_to_frame(bars)
        except (TypeError, ValueError) as e:
            logger.error(f"Malformed OHLC rows from {self.name}: {e}")
            return False

        if df["time"].null_count() > 0 or not df["time"].is_sorted():
            logger.error(f"OHLC timestamps from {self.name} are missing or out of order")
            return False

        if df["close"].null_count() == df.height:
            logger.error(f"OHLC rows from {self.name} have no close prices")
            return False

        return True

    @staticmethod
    def cache_key(asset_id: str, days: int) -> str:
        return f"{asset_id}_{days}d"

    async def _check_rate_limit(self):
        """
        Enforce rate limiting
        """
        now = datetime.now()
        minute_ago = now - timedelta(minutes=1)

        # Remove old timestamps
        self._request_timestamps = [ts for ts in self._request_timestamps if ts > minute_ago]

        if len(self._request_timestamps) >= self.rate_limit:
            wait_time = (self._request_timestamps[0] - minute_ago).total_seconds()
            logger.warning(f"Rate limit reached for {self.name}, waiting {wait_time:.2f}s")
            await asyncio.sleep(wait_time + 0.1)

        self._request_timestamps.append(now)

    async def collect_with_retry(self, asset_id: str, days: int) -> list[OHLCBar] | None:
        """
        Collect bars with automatic retry on network errors and 429s

        Returns:
            Validated bars or None if the provider returned nothing usable

        Raises:
            The last network error once attempts are exhausted
        """
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.retry_wait,
            retry=retry_if_exception_type((requests.RequestException, RateLimitedError)),
            reraise=True,
        ):
            with attempt:
                await self._check_rate_limit()

                logger.info(f"Collecting {days}d OHLC for {asset_id} from {self.name}")
                bars = await self.collect(asset_id, days)

                if not bars:
                    logger.warning(f"No data collected for {asset_id} from {self.name}")
                    return None

                if not self.validate_data(bars):
                    logger.error(f"Data validation failed for {asset_id} from {self.name}")
                    return None

                logger.success(f"Successfully collected {len(bars)} bars for {asset_id}")
                return bars

    async def fetch_ohlc(self, asset_id: str, days: int) -> list[OHLCBar] | None:
        """
        Cache-first OHLC lookup; failures collapse to None

        Only successful results are cached.
        """
        key = self.cache_key(asset_id, days)

        if self.cache is not None:
            cached = await self.cache.get(key)
            if cached is not None:
                logger.debug(f"[Cache Hit] Serving OHLC data for {asset_id} from cache")
                return cached

        try:
            bars = await self.collect_with_retry(asset_id, days)
        except RateLimitedError:
            logger.error(f"[Rate Limit] {self.name} rate limited {asset_id}; using None")
            return None
        except Exception as e:
            logger.error(f"Error fetching OHLC for {asset_id} from {self.name}: {e}")
            return None

        if bars is not None and self.cache is not None:
            await self.cache.put(key, bars, self.cache_ttl)

        return bars

    async def fetch_many(
        self,
        asset_ids: list[str],
        days: int,
    ) -> dict[str, list[OHLCBar] | None]:
        """
        Fetch OHLC for several assets concurrently

        One failing asset never aborts the batch; its entry is None.

        Args:
            asset_ids: Asset identifiers
            days: Number of days of history

        Returns:
            Mapping of every requested asset id to its bars or None
        """
        unique_ids = list(dict.fromkeys(asset_ids))
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def fetch_one(asset_id: str):
            async with semaphore:
                return await self.fetch_ohlc(asset_id, days)

        fetched = await asyncio.gather(
            *(fetch_one(asset_id) for asset_id in unique_ids),
            return_exceptions=True,
        )

        results: dict[str, list[OHLCBar] | None] = {}
        for asset_id, data in zip(unique_ids, fetched):
            if isinstance(data, BaseException):
                logger.error(f"Failed to collect {asset_id}: {data}")
                data = None
            results[asset_id] = data

        successful = sum(1 for data in results.values() if data)
        logger.info(f"Batch collection complete: {successful}/{len(unique_ids)} successful")
        return results
