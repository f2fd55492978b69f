# aurora/quant_engine/risk/__init__.py
"""
Risk Analysis Module for Aurora Risk Lab

ConcentrationRiskAnalyzer:
- Flags holdings at or above 25% of portfolio value

portfolio_var:
- Parametric VaR over a weighted combination of per-asset return series

MockVaRCalculator:
- Fixed-volatility VaR placeholder with Low/Medium/High tiers

DrawdownAnalyzer:
- Running-peak drawdown series and maximum drawdown

Usage:
    from aurora.quant_engine.risk import analyze_concentration_risk, portfolio_var

    report = analyze_concentration_risk(holdings, total_value_usd)
    result = portfolio_var([0.5, 0.5], [sol_closes, usdc_closes], confidence=0.99)
"""

from aurora.quant_engine.risk.concentration import (
    CONCENTRATION_RISK_THRESHOLD,
    ConcentrationRiskAnalyzer,
    analyze_concentration_risk,
)
from aurora.quant_engine.risk.drawdown import DrawdownAnalyzer
from aurora.quant_engine.risk.mock_var import MockVaRCalculator, calculate_portfolio_var
from aurora.quant_engine.risk.var_calculator import (
    combine_returns,
    normalize_weights,
    portfolio_var,
)

__all__ = [
    "CONCENTRATION_RISK_THRESHOLD",
    "ConcentrationRiskAnalyzer",
    "analyze_concentration_risk",
    "DrawdownAnalyzer",
    "MockVaRCalculator",
    "calculate_portfolio_var",
    "combine_returns",
    "normalize_weights",
    "portfolio_var",
]
