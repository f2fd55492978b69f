# aurora/quant_engine/returns.py
"""
Return-series statistics

Pure primitives used by the risk analyzers and the staking analysis:
- Percentage (simple) returns from a raw price series
- Sample standard deviation
- Two-tier z-score parametric VaR

None of these functions raise on degenerate input; they return empty or
zero results instead.
"""

import math
from collections.abc import Sequence

import numpy as np

Z_SCORE_95 = 1.645
Z_SCORE_99 = 2.33


def pct_returns(series: Sequence[float | None]) -> list[float]:
    """
    Convert raw prices to period-over-period fractional returns

    A return is computed for each adjacent ``(prev, curr)`` pair where both
    points are defined and ``prev`` is non-zero. Non-finite results are
    dropped.

    Args:
        series: Chronologically ordered prices, oldest first

    Returns:
        List of returns, at most ``len(series) - 1`` long
    """
    if series is None or len(series) < 2:
        return []

    returns = []
    for prev, curr in zip(series[:-1], series[1:]):
        if prev is None or curr is None or prev == 0:
            continue
        r = (curr - prev) / prev
        if math.isfinite(r):
            returns.append(float(r))

    return returns


def stdev(values: Sequence[float]) -> float:
    """
    Sample standard deviation (n - 1 divisor)

    Returns 0 for fewer than two values.
    """
    if values is None or len(values) < 2:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float), ddof=1))


def z_score(confidence: float) -> float:
    """
    Z multiplier for parametric VaR

    Only two tiers exist: 2.33 for exactly 0.99, 1.645 for anything else.
    """
    return Z_SCORE_99 if confidence == 0.99 else Z_SCORE_95


def parametric_var(returns: Sequence[float], confidence: float = 0.95) -> float:
    """
    Parametric VaR as ``z * stdev(returns)``

    Args:
        returns: Fractional returns
        confidence: 0.99 selects z=2.33, anything else z=1.645

    Returns:
        VaR as a positive fraction, 0 for empty input
    """
    if returns is None or len(returns) == 0:
        return 0.0
    return z_score(confidence) * stdev(returns)
