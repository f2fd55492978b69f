# aurora/services/recommendation_service.py
"""
Ranked yield and risk recommendations for a wallet

Rules (lower priority number ranks first):

1. Staking: SOL holders profiled as DeFi Participant or Long-term Holder
   get a liquid-staking swap SOL -> JitoSOL.
2. Risk Management: when one position exceeds 50% of the portfolio,
   swap 20% of it into USDC.
3. Yield Farming: DeFi Participants and Active Traders holding both SOL
   and USDC, with at least two positions worth over $100 in total, get a
   SOL/USDC liquidity suggestion.
4. General: fallback when nothing else applies and the wallet holds
   anything at all.

Swap rules attach a route quote from the injected QuoteProvider. A quote
failure drops that recommendation; the other rules still run.
"""

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger

from aurora.quant_engine.behavior import BehaviorProfile, classify_user_behavior
from aurora.quant_engine.models import Holding, coerce_holdings
from aurora.services.risk_service import HoldingsProvider, TransactionsProvider
from aurora.services.schemas import WalletRequest, parse_request

JITOSOL_MINT = "J1toso1uCk3RLmjorhTtrVwY9HJ7X8V9yYac6Y7kGCPn"

SYMBOL_TO_MINT = {
    "SOL": "So11111111111111111111111111111111111111112",
    "WSOL": "So11111111111111111111111111111111111111112",
    "USDC": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
    "USDT": "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",
    "RAY": "4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R",
}

SWAP_CONCENTRATION_THRESHOLD = 0.5
SWAP_FRACTION = 0.2
LIQUIDITY_MIN_PORTFOLIO_USD = 100.0

STAKING_PROFILES = {BehaviorProfile.DEFI_PARTICIPANT, BehaviorProfile.LONG_TERM_HOLDER}
LIQUIDITY_PROFILES = {BehaviorProfile.DEFI_PARTICIPANT, BehaviorProfile.ACTIVE_TRADER}


def resolve_mint(symbol_or_mint: str) -> str:
    """Known symbols map to their mint; anything else is assumed to be a mint"""
    return SYMBOL_TO_MINT.get(symbol_or_mint, symbol_or_mint)


class QuoteProvider(Protocol):
    """DEX aggregator adapter (e.g. Jupiter) returning a route quote"""

    async def get_route_quote(self, input_mint: str, output_mint: str, amount: str) -> Any: ...


@dataclass(frozen=True)
class Recommendation:
    kind: str
    title: str
    description: str
    priority: int
    action: dict[str, Any] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        payload = {
            "type": self.kind,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
        }
        if self.action is not None:
            payload["action"] = self.action
        return payload


def position_value(holding: Holding) -> float:
    """``balance * price`` when both are known, else the reported USD value"""
    if holding.balance is not None and holding.price is not None:
        return holding.balance * holding.price
    return holding.value_usd


def _find(holdings: list[Holding], symbol: str) -> Holding | None:
    return next((h for h in holdings if h.symbol == symbol), None)


def _largest(holdings: list[Holding]) -> Holding | None:
    # First position wins ties
    largest = None
    for holding in holdings:
        if largest is None or position_value(holding) > position_value(largest):
            largest = holding
    return largest


class RecommendationService:
    """
    Rule engine turning holdings and behavior into ranked recommendations
    """

    def __init__(
        self,
        quote_provider: QuoteProvider | None = None,
        holdings_provider: HoldingsProvider | None = None,
        transactions_provider: TransactionsProvider | None = None,
    ):
        """
        Args:
            quote_provider: Route quotes for swap actions; without one the
                swap actions carry no quote
            holdings_provider: Needed by recommend_for_wallet
            transactions_provider: Needed by recommend_for_wallet
        """
        self.quote_provider = quote_provider
        self.holdings_provider = holdings_provider
        self.transactions_provider = transactions_provider

    async def _quote(self, from_symbol: str, to_mint: str, amount: float) -> Any:
        if self.quote_provider is None:
            return None
        return await self.quote_provider.get_route_quote(
            resolve_mint(from_symbol), to_mint, f"{amount:.6f}"
        )

    async def _staking_rule(
        self, holdings: list[Holding], profile: BehaviorProfile
    ) -> Recommendation | None:
        sol = _find(holdings, "SOL")
        if sol is None or not sol.balance or sol.balance <= 0 or profile not in STAKING_PROFILES:
            return None

        try:
            quote = await self._quote("SOL", JITOSOL_MINT, sol.balance)
        except Exception as e:
            logger.error(f"Failed to get route quote for JitoSOL: {e}")
            return None

        return Recommendation(
            kind="Staking",
            title="Earn yield with liquid staking via Jito",
            description=(
                "Convert your SOL to JitoSOL to earn staking rewards and MEV revenue "
                "while keeping your assets liquid."
            ),
            priority=1,
            action={
                "protocol": "Jupiter",
                "type": "stake",
                "fromToken": "SOL",
                "toToken": "JitoSOL",
                "jupiterQuote": quote,
            },
        )

    async def _concentration_rule(
        self, holdings: list[Holding], total_value_usd: float
    ) -> Recommendation | None:
        largest = _largest(holdings)
        if largest is None or total_value_usd <= 0:
            return None
        if position_value(largest) / total_value_usd <= SWAP_CONCENTRATION_THRESHOLD:
            return None

        symbol = largest.symbol
        try:
            quote = await self._quote(
                symbol, resolve_mint("USDC"), (largest.balance or 0.0) * SWAP_FRACTION
            )
        except Exception as e:
            logger.error(f"Failed to get route quote for {symbol}: {e}")
            return None

        return Recommendation(
            kind="Risk Management",
            title=f"Reduce concentration in {symbol}",
            description=(
                f"Your portfolio is heavily concentrated in {symbol}. Diversify by swapping "
                "a portion into a stablecoin like USDC to reduce risk."
            ),
            priority=2,
            action={
                "protocol": "Jupiter",
                "type": "swap",
                "fromToken": symbol,
                "toToken": "USDC",
                "jupiterQuote": quote,
            },
        )

    @staticmethod
    def _liquidity_rule(
        holdings: list[Holding], total_value_usd: float, profile: BehaviorProfile
    ) -> Recommendation | None:
        balanced = len(holdings) >= 2 and total_value_usd > LIQUIDITY_MIN_PORTFOLIO_USD
        has_pair = _find(holdings, "SOL") is not None and _find(holdings, "USDC") is not None
        if profile not in LIQUIDITY_PROFILES or not balanced or not has_pair:
            return None

        return Recommendation(
            kind="Yield Farming",
            title="Earn yield on your SOL and USDC",
            description="Provide liquidity to the SOL/USDC pool on Orca to earn trading fees.",
            priority=3,
            action={"protocol": "Orca", "type": "addLiquidity", "tokens": ["SOL", "USDC"]},
        )

    async def recommend(
        self,
        holdings: Iterable[Holding | Mapping[str, Any]],
        transactions: Iterable[Mapping[str, Any]] | None,
    ) -> list[Recommendation]:
        """
        Apply every rule and rank the results

        Args:
            holdings: Holdings (or provider dicts) with balance and price
            transactions: Classified transactions used for the behavior profile

        Returns:
            Recommendations sorted by priority
        """
        positions = coerce_holdings(holdings)
        profile = classify_user_behavior(transactions).profile
        total_value_usd = sum(position_value(h) for h in positions)

        candidates = [
            await self._staking_rule(positions, profile),
            await self._concentration_rule(positions, total_value_usd),
            self._liquidity_rule(positions, total_value_usd, profile),
        ]
        recommendations = [r for r in candidates if r is not None]

        if not recommendations and positions:
            recommendations.append(
                Recommendation(
                    kind="General",
                    title="Welcome to the AI Yield and Risk Optimizer!",
                    description=(
                        "No specific recommendations were found for your portfolio. Consider "
                        "exploring the available DeFi and staking opportunities to get started."
                    ),
                    priority=4,
                )
            )

        logger.debug(
            f"{len(recommendations)} recommendation(s) for profile {profile.value} "
            f"over {len(positions)} position(s)"
        )
        return sorted(recommendations, key=lambda r: r.priority)

    async def recommend_for_wallet(self, wallet_address: str) -> list[Recommendation]:
        """
        Fetch holdings and transactions for a wallet, then recommend

        Raises:
            InvalidInputError: If the wallet address is malformed
            RuntimeError: If the holdings or transactions provider is missing
        """
        request = parse_request(WalletRequest, {"walletAddress": wallet_address})

        if self.holdings_provider is None or self.transactions_provider is None:
            raise RuntimeError("RecommendationService needs holdings and transactions providers")

        holdings, transactions = await asyncio.gather(
            self.holdings_provider.get_holdings(request.wallet_address),
            self.transactions_provider.get_transactions(request.wallet_address),
        )
        return await self.recommend(holdings, transactions)
