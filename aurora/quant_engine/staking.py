# aurora/quant_engine/staking.py
"""
SOL staking yield and volatility analysis

Projects a year of staking yield at the current APY and grades the risk
of holding SOL by its annualized close-to-close volatility.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from aurora.quant_engine.returns import pct_returns, stdev

DAYS_PER_YEAR = 365
HIGH_VOLATILITY = 1.5
MODERATE_VOLATILITY = 0.8


@dataclass(frozen=True)
class StakingAnalysis:
    yield_sol: float
    yield_usd: float
    volatility: float
    risk_level: str
    summary: str
    apy: float | None = None

    def to_dict(self) -> dict:
        return {
            "yield": self.yield_sol,
            "yieldUsd": self.yield_usd,
            "volatility": self.volatility,
            "riskLevel": self.risk_level,
            "apy": self.apy,
            "summary": self.summary,
        }


def annualized_volatility(closes: Sequence[float]) -> float:
    """Daily-return standard deviation scaled by sqrt(365)"""
    return stdev(pct_returns(closes)) * math.sqrt(DAYS_PER_YEAR)


def classify_volatility(volatility: float) -> str:
    if volatility > HIGH_VOLATILITY:
        return "High"
    if volatility > MODERATE_VOLATILITY:
        return "Moderate"
    return "Low"


def analyze_sol_staking(
    sol_balance: float,
    apy: float,
    current_price: float | None,
    closes: Sequence[float],
) -> StakingAnalysis:
    """
    Analyze the reward and risk of staking a SOL balance

    Args:
        sol_balance: SOL amount held
        apy: Current staking APY as a fraction (e.g. 0.07)
        current_price: Current SOL price in USD
        closes: Historical daily closes, oldest first

    Returns:
        StakingAnalysis with projected yield, volatility and risk level
    """
    if sol_balance <= 0:
        return StakingAnalysis(
            yield_sol=0.0,
            yield_usd=0.0,
            volatility=0.0,
            risk_level="N/A",
            summary="No SOL to stake.",
        )

    if not current_price or closes is None or len(closes) < 2:
        logger.warning("Staking analysis skipped: missing SOL price or history")
        return StakingAnalysis(
            yield_sol=0.0,
            yield_usd=0.0,
            volatility=0.0,
            risk_level="Data Unavailable",
            summary="Could not fetch required data for analysis.",
        )

    projected_sol = sol_balance * apy
    projected_usd = projected_sol * current_price
    volatility = annualized_volatility(closes)

    summary = (
        f"Based on historical data, SOL has a volatility of {volatility:.2f}. "
        f"Staking could yield {projected_sol:.2f} SOL or ~${projected_usd:.2f} annually "
        f"at a current APY of {apy * 100:.2f}%."
    )

    return StakingAnalysis(
        yield_sol=projected_sol,
        yield_usd=projected_usd,
        volatility=volatility,
        risk_level=classify_volatility(volatility),
        summary=summary,
        apy=apy,
    )
