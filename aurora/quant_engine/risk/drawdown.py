# aurora/quant_engine/risk/drawdown.py
"""
Drawdown Analysis Module

Drawdown is the peak-to-trough decline of an equity curve, measured from
the running peak. The backtest summary reports the largest such decline
as a percentage.
"""

from collections.abc import Sequence

import numpy as np


class DrawdownAnalyzer:
    """
    Drawdown analysis for equity curves
    """

    def calculate_drawdowns(self, values: Sequence[float]) -> np.ndarray:
        """
        Calculate the drawdown series from an equity curve

        Drawdown = (Current Value - Peak Value) / Peak Value

        Args:
            values: Equity curve values

        Returns:
            Array of drawdown values (zero or negative)
        """
        values = np.asarray(values, dtype=float)
        if values.size == 0:
            return values

        running_max = np.maximum.accumulate(values)
        with np.errstate(divide="ignore", invalid="ignore"):
            drawdowns = np.where(running_max > 0, (values - running_max) / running_max, 0.0)

        return drawdowns

    def max_drawdown_pct(self, values: Sequence[float]) -> float:
        """
        Largest peak-to-trough decline, in percent

        The running peak starts at the first value. Fewer than two points,
        or a curve whose peak never rises above zero, yields 0.

        Args:
            values: Equity curve values, oldest first

        Returns:
            Maximum drawdown as a positive percentage
        """
        if values is None or len(values) < 2:
            return 0.0

        peak = values[0]
        max_dd = 0.0

        for value in values:
            if value > peak:
                peak = value
            if peak <= 0:
                continue
            drawdown = (peak - value) / peak * 100
            if drawdown > max_dd:
                max_dd = drawdown

        return float(max_dd)
