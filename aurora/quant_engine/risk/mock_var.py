# aurora/quant_engine/risk/mock_var.py
"""
Mock single-number VaR model

Placeholder model used by the wallet risk endpoint until real price
history feeds the VaR estimate: a fixed daily volatility assumption is
scaled by the time horizon and the portfolio value.

Status tiers compare strictly (``>``) against 10% and 5% of the portfolio
value. With the default 5% factor a one-day horizon lands exactly on the
5% line and therefore reports ``Low``.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from aurora.quant_engine.models import Holding, RiskStatus, VaRReport, position_value_usd
from aurora.utils.formatting import format_currency, format_number

MOCK_VOLATILITY_FACTOR = 0.05  # 5% potential daily loss
HIGH_RISK_SHARE = 0.10
MEDIUM_RISK_SHARE = 0.05


class MockVaRCalculator:
    """
    Simplified VaR: ``total_value * volatility_factor * horizon_days``
    """

    def __init__(self, volatility_factor: float = MOCK_VOLATILITY_FACTOR):
        self.volatility_factor = volatility_factor

    def classify(self, var_value_usd: float, total_value_usd: float) -> RiskStatus:
        if var_value_usd > total_value_usd * HIGH_RISK_SHARE:
            return RiskStatus.HIGH
        if var_value_usd > total_value_usd * MEDIUM_RISK_SHARE:
            return RiskStatus.MEDIUM
        return RiskStatus.LOW

    def calculate_portfolio_var(
        self,
        balances: Iterable[Holding | Mapping[str, Any]],
        time_horizon_days: float,
        confidence_level: float,
    ) -> VaRReport:
        """
        Calculate the mock portfolio VaR

        Args:
            balances: Holdings or provider dicts carrying valueUSD
                (or balance and price)
            time_horizon_days: Horizon in days (e.g. 1, 7)
            confidence_level: Confidence level, only echoed in the message

        Returns:
            VaRReport with the USD loss estimate and its status tier
        """
        # Only values matter here; symbol-less records are accepted
        balances = balances if balances is not None else []
        total_value_usd = sum(position_value_usd(b) for b in balances)

        var_value_usd = total_value_usd * self.volatility_factor * time_horizon_days
        status = self.classify(var_value_usd, total_value_usd)

        logger.debug(
            f"Mock VaR: total=${total_value_usd:.2f}, horizon={time_horizon_days}d, "
            f"VaR=${var_value_usd:.2f}, status={status.value}"
        )

        return VaRReport(
            status=status,
            message=(
                "Calculated VaR indicates a potential loss of up to "
                f"{format_currency(var_value_usd)} with a "
                f"{format_number(confidence_level * 100)}% confidence over "
                f"{format_number(time_horizon_days)} day(s)."
            ),
            var_value_usd=var_value_usd,
        )


def calculate_portfolio_var(
    balances: Iterable[Holding | Mapping[str, Any]],
    time_horizon_days: float,
    confidence_level: float,
) -> VaRReport:
    """Functional shortcut using the default 5% volatility factor"""
    return MockVaRCalculator().calculate_portfolio_var(
        balances, time_horizon_days, confidence_level
    )
