# aurora/backtesting/engine.py
"""
Weighted-basket backtest engine

Replays historical OHLC closes for a basket of assets into an equity
curve normalized to a $1000 starting value, then summarizes total return
and maximum drawdown.

The first asset is the base: its bars define the iteration index and the
output timestamps. Every asset contributes ``weight * close[i] / close[0]``
at index ``i``; assets whose history is missing or shorter than the base
simply contribute nothing at that index.
"""

import math
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import pandas as pd
from loguru import logger

from aurora.config.logging_config import log_backtest_run, timed_operation
from aurora.config.settings import get_settings
from aurora.data_engine.collectors.base_collector import PriceHistoryProvider
from aurora.quant_engine.models import OHLC_CLOSE, OHLC_TIMESTAMP, OHLCBar
from aurora.quant_engine.risk.drawdown import DrawdownAnalyzer
from aurora.utils.exceptions import InvalidInputError
from aurora.utils.formatting import format_fixed
from aurora.utils.validation import (
    validate_asset_ids,
    validate_date_range,
    validate_weights_length,
)

settings = get_settings()

MS_PER_DAY = 24 * 60 * 60 * 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class PortfolioPoint:
    """One point of the equity curve"""

    date: int  # epoch milliseconds
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "value": self.value}


@dataclass(frozen=True)
class BacktestSummary:
    total_return_pct: str
    max_drawdown_pct: str
    start_date: Any
    end_date: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalReturn": self.total_return_pct,
            "maxDrawdown": self.max_drawdown_pct,
            "startDate": self.start_date,
            "endDate": self.end_date,
        }


@dataclass
class BacktestResult:
    """
    Complete backtest results
    """

    summary: BacktestSummary
    portfolio_performance: list[PortfolioPoint] = field(default_factory=list)

    @property
    def values(self) -> list[float]:
        return [point.value for point in self.portfolio_performance]

    def to_dict(self) -> dict[str, Any]:
        return {
            "portfolioPerformance": [p.to_dict() for p in self.portfolio_performance],
            "summary": self.summary.to_dict(),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Equity curve indexed by UTC timestamp, with its drawdown series"""
        index = pd.to_datetime([p.date for p in self.portfolio_performance], unit="ms", utc=True)
        df = pd.DataFrame({"value": self.values}, index=index)
        df.index.name = "date"
        df["drawdown"] = DrawdownAnalyzer().calculate_drawdowns(df["value"].to_numpy())
        return df


def normalize_positive_weights(weights: Sequence[float]) -> list[float]:
    """Divide by the sum when it is positive; otherwise keep weights as given"""
    total = sum(weights)
    if total > 0:
        return [w / total for w in weights]
    return list(weights)


def horizon_days(start_ms: int, end_ms: int) -> int:
    """Whole days covering the range, at least one"""
    return max(1, math.ceil((end_ms - start_ms) / MS_PER_DAY))


def _close_at(bars: list[OHLCBar] | None, i: int) -> float | None:
    if not bars or i >= len(bars):
        return None
    bar = bars[i]
    if bar is None or len(bar) <= OHLC_CLOSE:
        return None
    return bar[OHLC_CLOSE]


class BacktestEngine:
    """
    Replay a weighted allocation against historical OHLC data
    """

    def __init__(
        self,
        price_provider: PriceHistoryProvider,
        baseline_value: float | None = None,
        clock: Callable[[], int] = _now_ms,
    ):
        """
        Args:
            price_provider: Source of OHLC history (e.g. CoinGeckoOHLCCollector)
            baseline_value: Starting portfolio value (default: $1000)
            clock: Returns "now" in epoch milliseconds for bars without a timestamp
        """
        self.price_provider = price_provider
        self.baseline_value = baseline_value or settings.BACKTEST_BASELINE_VALUE
        self.clock = clock
        self.drawdown_analyzer = DrawdownAnalyzer()

    def build_timeline(
        self,
        assets: Sequence[str],
        weights: Sequence[float],
        historical: dict[str, list[OHLCBar] | None],
    ) -> list[PortfolioPoint]:
        """
        Aggregate per-asset cumulative returns into the equity curve

        Raises:
            InvalidInputError: If the base asset has no OHLC data
        """
        base_bars = historical.get(assets[0])
        if not base_bars:
            raise InvalidInputError("No OHLC data found for base asset.")

        timeline = []
        for i, base_bar in enumerate(base_bars):
            total = 0.0

            for k, asset in enumerate(assets):
                bars = historical.get(asset)
                close = _close_at(bars, i)
                start = _close_at(bars, 0)
                if close is None or start is None or start == 0:
                    continue
                total += weights[k] * (close / start)

            timestamp = base_bar[OHLC_TIMESTAMP] if base_bar else None
            timeline.append(
                PortfolioPoint(
                    date=int(timestamp) if timestamp is not None else self.clock(),
                    value=total * self.baseline_value,
                )
            )

        for asset in assets[1:]:
            bars = historical.get(asset)
            if not bars or len(bars) < len(base_bars):
                logger.debug(
                    f"History for {asset} covers {len(bars or [])}/{len(base_bars)} base bars"
                )

        return timeline

    def summarize(
        self,
        timeline: list[PortfolioPoint],
        start_date: Any,
        end_date: Any,
    ) -> BacktestSummary:
        """Total return and max drawdown, both as 2-decimal percent strings"""
        start_value = timeline[0].value if timeline else self.baseline_value
        end_value = timeline[-1].value if timeline else start_value

        total_return = (end_value - start_value) / start_value * 100 if start_value else 0.0
        max_drawdown = self.drawdown_analyzer.max_drawdown_pct([p.value for p in timeline])

        return BacktestSummary(
            total_return_pct=format_fixed(total_return),
            max_drawdown_pct=format_fixed(max_drawdown),
            start_date=start_date,
            end_date=end_date,
        )

    async def run_backtest(
        self,
        assets: Sequence[str],
        weights: Sequence[float],
        start_date: Any,
        end_date: Any,
    ) -> BacktestResult:
        """
        Run a backtest for a weighted basket

        Args:
            assets: Asset identifiers; the first one is the base asset
            weights: One weight per asset, normalized when they sum above 0
            start_date: ISO string, datetime/date or epoch ms
            end_date: ISO string, datetime/date or epoch ms

        Returns:
            BacktestResult with the equity curve and summary

        Raises:
            InvalidInputError: On mismatched inputs, a bad date range or
                missing base-asset history
        """
        if not assets or weights is None or len(assets) != len(weights):
            raise InvalidInputError("Assets and weights are required and must match in length.")

        assets = validate_asset_ids(assets)
        weights = validate_weights_length(weights, len(assets))
        start_ms, end_ms = validate_date_range(start_date, end_date)

        weights = normalize_positive_weights(weights)
        days = horizon_days(start_ms, end_ms)

        with timed_operation(f"OHLC fetch for {len(assets)} asset(s) over {days}d", "DEBUG"):
            historical = await self.price_provider.fetch_many(list(assets), days)

        timeline = self.build_timeline(assets, weights, historical)
        summary = self.summarize(timeline, start_date, end_date)

        result = BacktestResult(summary=summary, portfolio_performance=timeline)
        log_backtest_run(list(assets), start_date, end_date, summary.to_dict())
        return result
