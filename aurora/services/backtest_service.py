# aurora/services/backtest_service.py
"""
Backtest service: request validation in front of BacktestEngine
"""

from typing import Any

from aurora.backtesting.engine import BacktestEngine
from aurora.services.schemas import BacktestRequest, parse_request


class BacktestService:
    def __init__(self, engine: BacktestEngine):
        self.engine = engine

    async def run(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Validate a ``{assets, weights, startDate, endDate}`` payload and run it

        Raises:
            InvalidInputError: On a malformed payload or engine precondition failure
        """
        request = parse_request(BacktestRequest, payload)
        result = await self.engine.run_backtest(
            request.assets,
            request.weights,
            request.start_date,
            request.end_date,
        )
        return result.to_dict()
