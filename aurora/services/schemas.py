# aurora/services/schemas.py
"""
Request models for the service layer

Field aliases match the JSON payloads sent by the dashboard
(``walletAddress``, ``startDate`` ...); snake_case names are accepted too.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat
from pydantic import ValidationError as PydanticValidationError

from aurora.utils.exceptions import InvalidInputError


class PortfolioSimulationRequest(BaseModel):
    """Parametric VaR simulation over raw close series"""

    model_config = ConfigDict(populate_by_name=True)

    # Price history per asset (close prices)
    series: list[list[PositiveFloat]] = Field(..., min_length=1)
    # Weights, normalized before use
    weights: list[float] = Field(..., min_length=1)
    confidence: float | None = None


class WalletRequest(BaseModel):
    """Wallet-scoped request with no other parameters"""

    model_config = ConfigDict(populate_by_name=True)

    wallet_address: str = Field(..., min_length=30, alias="walletAddress")


class WalletVaRRequest(WalletRequest):
    """Mock VaR for a wallet's current holdings"""

    time_horizon_days: PositiveFloat | None = Field(None, alias="timeHorizonDays")
    confidence_level: float | None = Field(None, ge=0.01, le=0.99, alias="confidenceLevel")


class BacktestRequest(BaseModel):
    """Weighted-basket backtest"""

    model_config = ConfigDict(populate_by_name=True)

    assets: list[str] = Field(..., min_length=1)
    weights: list[float] = Field(..., min_length=1)
    start_date: datetime | date | int | str = Field(..., alias="startDate")
    end_date: datetime | date | int | str = Field(..., alias="endDate")


def parse_request(model: type[BaseModel], payload: dict) -> BaseModel:
    """
    Validate a payload, turning pydantic errors into InvalidInputError
    """
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise InvalidInputError(f"Invalid {model.__name__}: {details}") from e
