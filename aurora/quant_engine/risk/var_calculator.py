# aurora/quant_engine/risk/var_calculator.py
"""
Portfolio Value at Risk (VaR) Calculator

Parametric VaR over a weighted combination of per-asset return series.

Per-asset price series are converted to simple returns and aligned by
truncating every series to the shortest one (no calendar alignment, no
interpolation). The portfolio return at each step is the weighted sum of
the asset returns, and VaR is ``z * stdev`` of that series with the
two-tier z-score from ``aurora.quant_engine.returns``.

This is a simplified variance model: no covariance estimation and no
holding-period scaling. Longer-history assets lose their extra data.
"""

from collections.abc import Sequence

import numpy as np
from loguru import logger

from aurora.quant_engine.models import PortfolioVaRResult
from aurora.quant_engine.returns import parametric_var, pct_returns, stdev


def normalize_weights(weights: Sequence[float]) -> list[float]:
    """
    Scale weights to proportions summing to 1

    A zero sum leaves the weights unchanged.
    """
    weights = [float(w) for w in weights]
    total = sum(weights)
    if total == 0:
        return weights
    return [w / total for w in weights]


def combine_returns(
    weights: Sequence[float | None],
    returns: Sequence[Sequence[float]],
) -> np.ndarray:
    """
    Weighted sum of aligned return series

    Every series is truncated to the shortest length. A missing weight or
    element contributes zero.
    """
    if len(returns) == 0:
        return np.array([], dtype=float)

    length = min(len(r) for r in returns)
    if length <= 0:
        return np.array([], dtype=float)

    portfolio = np.zeros(length, dtype=float)
    for k, asset_returns in enumerate(returns):
        weight = weights[k] if k < len(weights) else None
        if weight is None:
            continue
        column = np.array(
            [x if x is not None else 0.0 for x in asset_returns[:length]],
            dtype=float,
        )
        portfolio += weight * column

    return portfolio


def portfolio_var(
    weights: Sequence[float],
    series: Sequence[Sequence[float]],
    confidence: float = 0.95,
) -> PortfolioVaRResult:
    """
    Calculate portfolio sigma and parametric VaR

    Callers must pass one weight per series; this function does not
    validate lengths and never raises.

    Args:
        weights: Portfolio weights, one per series
        series: Raw price series per asset, oldest first
        confidence: 0.99 selects z=2.33, anything else z=1.645

    Returns:
        PortfolioVaRResult with sigma and VaR as fractions
    """
    returns = [pct_returns(s) for s in (series if series is not None else [])]
    portfolio_returns = combine_returns(weights if weights is not None else [], returns)

    if portfolio_returns.size == 0:
        return PortfolioVaRResult(sigma=0.0, var=0.0)

    sigma = stdev(portfolio_returns)
    var = parametric_var(portfolio_returns, confidence)

    logger.debug(
        f"Portfolio VaR over {portfolio_returns.size} aligned returns: "
        f"sigma={sigma:.6f}, VaR={var:.6f} (CL={confidence})"
    )

    return PortfolioVaRResult(sigma=sigma, var=var)
