# aurora/quant_engine/risk/concentration.py
"""
Concentration Risk Analysis

Flags holdings that make up a disproportionate share of the wallet's USD
value. A single fixed threshold is used: any asset at or above 25% of the
portfolio is considered a concentration risk.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from aurora.quant_engine.models import (
    ConcentrationReport,
    Holding,
    RiskStatus,
    RiskyAsset,
    coerce_holdings,
)

CONCENTRATION_RISK_THRESHOLD = 0.25  # 25%

ZERO_VALUE_MESSAGE = "Portfolio value is zero or contains only unpriced assets."
LOW_RISK_MESSAGE = "Portfolio has low concentration risk."


class ConcentrationRiskAnalyzer:
    """
    Classify a wallet's concentration risk from its USD-valued holdings
    """

    def __init__(self, threshold: float = CONCENTRATION_RISK_THRESHOLD):
        """
        Args:
            threshold: Portfolio share at or above which an asset is risky
        """
        self.threshold = threshold

    def analyze(
        self,
        holdings: Iterable[Holding | Mapping[str, Any]],
        total_value_usd: float,
    ) -> ConcentrationReport:
        """
        Analyze concentration risk

        Args:
            holdings: Holdings (or provider dicts) with USD values
            total_value_usd: Total portfolio value in USD

        Returns:
            ConcentrationReport with risky assets sorted by share, largest first
        """
        if total_value_usd == 0:
            return ConcentrationReport(
                status=RiskStatus.LOW,
                message=ZERO_VALUE_MESSAGE,
                risky_assets=[],
            )

        flagged = []
        for holding in coerce_holdings(holdings):
            percentage = holding.value_usd / total_value_usd
            if percentage >= self.threshold:
                flagged.append(RiskyAsset(holding=holding, percentage=percentage))

        # sorted() is stable, so equal shares keep their input order
        risky_assets = sorted(flagged, key=lambda a: a.percentage, reverse=True)

        if not risky_assets:
            return ConcentrationReport(status=RiskStatus.LOW, message=LOW_RISK_MESSAGE)

        symbols = ", ".join(asset.symbol for asset in risky_assets)
        logger.debug(f"Concentration risk flagged: {symbols}")

        return ConcentrationReport(
            status=RiskStatus.HIGH,
            message=(
                "Portfolio has high concentration risk in the following "
                f"asset(s): {symbols}."
            ),
            risky_assets=risky_assets,
        )


def analyze_concentration_risk(
    holdings: Iterable[Holding | Mapping[str, Any]],
    total_value_usd: float,
    threshold: float = CONCENTRATION_RISK_THRESHOLD,
) -> ConcentrationReport:
    """Functional shortcut for ConcentrationRiskAnalyzer.analyze"""
    return ConcentrationRiskAnalyzer(threshold).analyze(holdings, total_value_usd)
