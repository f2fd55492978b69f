# aurora/quant_engine/behavior.py
"""
On-chain behavior classification

Classifies a wallet from its recent classified transactions (Helius-style
records with a ``category`` and a list of ``instructions``). The profile
feeds the recommendation rules.

Profiles are checked in a fixed order and a later match overrides an
earlier one:

    DeFi Participant < Active Trader < Degen Explorer < NFT Collector
    < Long-term Holder

A wallet with no transactions is Inactive.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

ACTIVE_TRADER_MIN_SWAPS = 5
DEGEN_MIN_PROGRAMS = 11
HOLDER_MAX_TRANSACTIONS = 5


class BehaviorProfile(str, Enum):
    INACTIVE = "Inactive"
    DEFAULT = "Default User"
    DEFI_PARTICIPANT = "DeFi Participant"
    ACTIVE_TRADER = "Active Trader"
    DEGEN_EXPLORER = "Degen Explorer"
    NFT_COLLECTOR = "NFT Collector"
    LONG_TERM_HOLDER = "Long-term Holder"


@dataclass
class BehaviorMetrics:
    total_transactions: int = 0
    swap_count: int = 0
    nft_count: int = 0
    defi_count: int = 0
    staking_count: int = 0
    unique_programs: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "totalTransactions": self.total_transactions,
            "swapCount": self.swap_count,
            "nftCount": self.nft_count,
            "defiCount": self.defi_count,
            "stakingCount": self.staking_count,
            "uniquePrograms": self.unique_programs,
        }


@dataclass(frozen=True)
class UserBehavior:
    profile: BehaviorProfile
    metrics: BehaviorMetrics = field(default_factory=BehaviorMetrics)

    def to_dict(self) -> dict[str, Any]:
        return {"profile": self.profile.value, "metrics": self.metrics.to_dict()}


def _tally(transactions: list[Mapping[str, Any]]) -> BehaviorMetrics:
    metrics = BehaviorMetrics(total_transactions=len(transactions))
    programs: set[str] = set()

    for tx in transactions:
        for ix in tx.get("instructions") or []:
            program_id = ix.get("programId")
            if program_id:
                programs.add(program_id)

        category = str(tx.get("category") or "").upper()
        if category == "DEX_SWAP":
            metrics.swap_count += 1
            metrics.defi_count += 1
        elif "NFT" in category:
            metrics.nft_count += 1
        elif "STAKE" in category:
            metrics.staking_count += 1
        elif "DEFI" in category:
            metrics.defi_count += 1

    metrics.unique_programs = len(programs)
    return metrics


def _profile_for(metrics: BehaviorMetrics) -> BehaviorProfile:
    profile = BehaviorProfile.DEFAULT

    if metrics.defi_count > 0 or metrics.staking_count > 0:
        profile = BehaviorProfile.DEFI_PARTICIPANT
    if metrics.swap_count >= ACTIVE_TRADER_MIN_SWAPS:
        profile = BehaviorProfile.ACTIVE_TRADER
    if metrics.unique_programs >= DEGEN_MIN_PROGRAMS:
        profile = BehaviorProfile.DEGEN_EXPLORER
    if metrics.nft_count > 0:
        profile = BehaviorProfile.NFT_COLLECTOR
    # Staking alone does not rule out a holder
    if (
        0 < metrics.total_transactions <= HOLDER_MAX_TRANSACTIONS
        and metrics.defi_count == 0
        and metrics.swap_count == 0
        and metrics.nft_count == 0
    ):
        profile = BehaviorProfile.LONG_TERM_HOLDER

    return profile


def classify_user_behavior(
    transactions: Iterable[Mapping[str, Any]] | None,
) -> UserBehavior:
    """
    Classify a wallet's behavior from its classified transactions

    Records missing ``category`` or ``instructions`` count toward the total
    but toward no category.

    Args:
        transactions: Transaction records, newest first or any order

    Returns:
        UserBehavior with the profile and the underlying counts
    """
    transactions = list(transactions) if transactions is not None else []
    if not transactions:
        return UserBehavior(profile=BehaviorProfile.INACTIVE)

    metrics = _tally(transactions)
    return UserBehavior(profile=_profile_for(metrics), metrics=metrics)
