# aurora/quant_engine/__init__.py
"""
Quantitative engine for Aurora Risk Lab

- returns: return-series statistics and two-tier parametric VaR
- risk: concentration risk, portfolio VaR, mock VaR, drawdowns
- staking: SOL staking yield/volatility analysis
- behavior: wallet behavior profile from classified transactions
- models: transient domain records (holdings, reports)
"""

from aurora.quant_engine.behavior import BehaviorProfile, UserBehavior, classify_user_behavior
from aurora.quant_engine.models import (
    ConcentrationReport,
    Holding,
    OHLCBar,
    PortfolioVaRResult,
    RiskStatus,
    RiskyAsset,
    VaRReport,
    position_value_usd,
)
from aurora.quant_engine.returns import parametric_var, pct_returns, stdev, z_score
from aurora.quant_engine.staking import StakingAnalysis, analyze_sol_staking

__all__ = [
    "ConcentrationReport",
    "Holding",
    "OHLCBar",
    "PortfolioVaRResult",
    "RiskStatus",
    "RiskyAsset",
    "VaRReport",
    "parametric_var",
    "pct_returns",
    "stdev",
    "z_score",
    "StakingAnalysis",
    "analyze_sol_staking",
    "BehaviorProfile",
    "UserBehavior",
    "classify_user_behavior",
    "position_value_usd",
]
