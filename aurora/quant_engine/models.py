# aurora/quant_engine/models.py
"""
Domain records shared by the risk and backtesting components

All records are transient: built per analysis call from caller-supplied
data and discarded after the response is serialized.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from aurora.utils.exceptions import ValidationError
from aurora.utils.validation import validate_non_negative

# Bar layout returned by the historical price provider:
# [timestamp_ms, open, high, low, close]
OHLCBar = list[float | None]

OHLC_TIMESTAMP = 0
OHLC_CLOSE = 4

_HOLDING_FIELDS = {"symbol", "valueUSD", "value_usd", "balance", "price"}


class RiskStatus(str, Enum):
    """Discrete risk buckets reported to the dashboard"""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class Holding:
    """
    One asset position at a point in time

    ``value_usd`` is precomputed by the holdings provider. A zero value is
    valid (unpriced or empty position). Provider fields the risk layer does
    not use are kept in ``extra`` for passthrough.
    """

    symbol: str
    value_usd: float = 0.0
    balance: float | None = None
    price: float | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.symbol:
            raise ValidationError("Holding symbol is required")
        validate_non_negative(self.value_usd, f"valueUSD for {self.symbol}")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Holding":
        """
        Build a holding from a loosely-shaped provider record.

        ``valueUSD`` (or ``value_usd``) wins when present; otherwise the value
        is derived as ``balance * price`` with a missing price counted as 0.
        """
        if isinstance(raw, Holding):
            return raw

        extra = {k: v for k, v in raw.items() if k not in _HOLDING_FIELDS}

        return cls(
            symbol=raw.get("symbol"),
            value_usd=position_value_usd(raw),
            balance=raw.get("balance"),
            price=raw.get("price"),
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        payload = dict(self.extra)
        payload.update({"symbol": self.symbol, "valueUSD": self.value_usd})
        if self.balance is not None:
            payload["balance"] = self.balance
        if self.price is not None:
            payload["price"] = self.price
        return payload


def position_value_usd(raw: "Holding | Mapping[str, Any]") -> float:
    """
    USD value of a holding or provider record, without requiring a symbol

    Raises:
        ValidationError: If the value is negative or not finite
    """
    if isinstance(raw, Holding):
        return raw.value_usd

    value = raw.get("valueUSD", raw.get("value_usd"))
    if value is None:
        value = (raw.get("balance") or 0.0) * (raw.get("price") or 0.0)
    return validate_non_negative(float(value), "valueUSD")


def coerce_holdings(holdings) -> list[Holding]:
    """Accept Holding instances or provider dicts"""
    return [Holding.from_mapping(h) for h in (holdings if holdings is not None else [])]


@dataclass(frozen=True)
class RiskyAsset:
    """A holding flagged by the concentration check"""

    holding: Holding
    percentage: float

    @property
    def symbol(self) -> str:
        return self.holding.symbol

    @property
    def value_usd(self) -> float:
        return self.holding.value_usd

    def to_dict(self) -> dict[str, Any]:
        payload = self.holding.to_dict()
        payload.update({"percentage": self.percentage, "isHighRisk": True})
        return payload


@dataclass(frozen=True)
class ConcentrationReport:
    status: RiskStatus
    message: str
    risky_assets: list[RiskyAsset] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "riskyAssets": [asset.to_dict() for asset in self.risky_assets],
        }


@dataclass(frozen=True)
class VaRReport:
    status: RiskStatus
    message: str
    var_value_usd: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "vaRValueUSD": self.var_value_usd,
        }


@dataclass(frozen=True)
class PortfolioVaRResult:
    sigma: float
    var: float

    def to_dict(self) -> dict[str, float]:
        return {"sigma": self.sigma, "VaR": self.var}
