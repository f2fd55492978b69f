# aurora/data_engine/collectors/coingecko_collector.py
"""
CoinGecko OHLC collector - historical candles for the backtest engine

Endpoint: GET /coins/{id}/ohlc?vs_currency=usd&days={days}
Response: [[timestamp_ms, open, high, low, close], ...] oldest first.
"""

import asyncio

import requests
from loguru import logger

from aurora.config.settings import get_settings
from aurora.data_engine.collectors.base_collector import BaseOHLCCollector, RateLimitedError
from aurora.data_engine.storage.cache import OHLCCache
from aurora.quant_engine.models import OHLCBar

settings = get_settings()


class CoinGeckoOHLCCollector(BaseOHLCCollector):
    """
    Collector for the CoinGecko public API
    """

    def __init__(
        self,
        cache: OHLCCache | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        rate_limit: int | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
        vs_currency: str = "usd",
        **kwargs,
    ):
        """
        Initialize CoinGecko collector

        Args:
            cache: Injected OHLC cache
            api_key: Demo API key (defaults to settings)
            base_url: API root (defaults to settings)
            rate_limit: Max requests per minute (defaults to settings)
            timeout: HTTP timeout in seconds
            session: requests session (a fresh one by default)
            vs_currency: Quote currency
        """
        super().__init__(
            name="CoinGecko",
            rate_limit=rate_limit or settings.COINGECKO_RATE_LIMIT,
            cache=cache,
            **kwargs,
        )
        self.api_key = api_key or settings.COINGECKO_API_KEY
        self.base_url = (base_url or settings.COINGECKO_API_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self.vs_currency = vs_currency

    def _request(self, asset_id: str, days: int) -> requests.Response:
        headers = {"accept": "application/json"}
        if self.api_key:
            headers["x-cg-demo-api-key"] = self.api_key

        return self.session.get(
            f"{self.base_url}/coins/{asset_id}/ohlc",
            params={"vs_currency": self.vs_currency, "days": days},
            headers=headers,
            timeout=self.timeout,
        )

    async def collect(self, asset_id: str, days: int) -> list[OHLCBar] | None:
        """
        Collect OHLC candles from CoinGecko

        Args:
            asset_id: CoinGecko coin id (e.g. "solana")
            days: Number of days of history

        Returns:
            Bars ordered oldest first, or None on a non-retryable API error

        Raises:
            RateLimitedError: On HTTP 429
            requests.RequestException: On network failures
        """
        loop = asyncio.get_event_loop()
        response = await loop.run_in_executor(None, self._request, asset_id, days)

        if response.status_code == 429:
            raise RateLimitedError(f"CoinGecko returned 429 for {asset_id}")

        if response.status_code != 200:
            logger.error(f"CoinGecko API error for {asset_id}: {response.status_code}")
            return None

        data = response.json()
        if not isinstance(data, list):
            logger.error(f"Unexpected CoinGecko payload for {asset_id}: {type(data).__name__}")
            return None

        bars = [list(row) for row in data if isinstance(row, (list, tuple))]
        bars.sort(key=lambda row: row[0] if row and row[0] is not None else 0)
        return bars
