"""
Balance lookup and per-channel aggregation.

Balances are read as of the poll start block ("until_block" cutoff), so
STX moved or stacked after the poll opened does not change a vote's
weight.
"""

import asyncio
from decimal import Decimal
from typing import Iterable, List, Sequence, Tuple

from poll_auditor.balances.models import ZERO, BalanceInfo, ChannelSummary
from poll_auditor.config import MICRO_STX_PER_STX, PollConfig
from poll_auditor.shared.logging import get_logger
from poll_auditor.shared.services.stacks_api import StacksApiClient
from poll_auditor.votes.models import CrossChainVotes

logger = get_logger(__name__)

SCALE = Decimal(MICRO_STX_PER_STX)


def derive_balance_info(
    address: str, raw_locked: int, raw_balance: int
) -> BalanceInfo:
    """
    Convert raw micro-STX values into a BalanceInfo.

    locked is 0 unless raw_locked > 0, total is 0 unless raw_balance > 0,
    and unlocked is balance - locked only when the balance is positive and
    covers the locked amount.
    """
    locked = Decimal(raw_locked) / SCALE if raw_locked > 0 else ZERO
    total = Decimal(raw_balance) / SCALE if raw_balance > 0 else ZERO
    if raw_balance > 0 and raw_balance >= raw_locked:
        unlocked = Decimal(raw_balance - raw_locked) / SCALE
    else:
        unlocked = ZERO
    return BalanceInfo(
        address=address, locked=locked, unlocked=unlocked, total=total
    )


class BalanceAggregator:
    """Fetches participant balances as of the poll start block."""

    def __init__(self, config: PollConfig, api: StacksApiClient):
        self._api = api
        self._until_block = config.start_block
        # shared by every fetch_balances call, including concurrent ones
        self._semaphore = asyncio.Semaphore(config.max_concurrent_requests)

    async def fetch_balance(self, address: str) -> BalanceInfo:
        raw_locked, raw_balance = await self._api.get_stx_balance(
            address, self._until_block
        )
        return derive_balance_info(address, raw_locked, raw_balance)

    async def fetch_balances(
        self, addresses: Sequence[str]
    ) -> List[BalanceInfo]:
        """
        Fetch balances concurrently.

        At most max_concurrent_requests lookups run at once across all
        callers of this aggregator.

        Returns:
            BalanceInfo list in the order of addresses
        """
        async def fetch_one(address: str) -> BalanceInfo:
            async with self._semaphore:
                return await self.fetch_balance(address)

        infos = await asyncio.gather(*(fetch_one(a) for a in addresses))
        logger.info(f"Fetched {len(infos)} balances at block {self._until_block}")
        return list(infos)


def summarize_primary(
    infos: Iterable[BalanceInfo],
) -> Tuple[ChannelSummary, List[BalanceInfo]]:
    """
    Summarize STX-channel voters.

    Voters with an empty balance at the start block are dropped before
    counting and summing.

    Returns:
        (summary, counted voters)
    """
    counted = [info for info in infos if info.total > 0]
    summary = ChannelSummary(
        count=len(counted),
        stacked_total=sum((i.locked for i in counted), ZERO),
        unstacked_total=sum((i.unlocked for i in counted), ZERO),
        grand_total=sum((i.total for i in counted), ZERO),
    )
    return summary, counted


def summarize_secondary(
    votes: CrossChainVotes,
    infos: Sequence[BalanceInfo],
    stacked_only: bool = True,
) -> ChannelSummary:
    """
    Summarize BTC-channel votes (no balance filter).

    The count is the number of unique payout addresses that voted and have
    a registry entry, so a pool address backing many stackers is one vote.
    Amounts are summed over the balances of the deduplicated participants.
    With stacked_only, the channel credits stacked STX only: unstacked is
    0 and the total metric is the locked sum.

    Args:
        votes: Resolved BTC votes of one side
        infos: Balances of votes.participants
        stacked_only: Credit locked STX only
    """
    count = len(votes.matched_payout_addresses)
    stacked = sum((i.locked for i in infos), ZERO)
    if stacked_only:
        return ChannelSummary(
            count=count,
            stacked_total=stacked,
            unstacked_total=ZERO,
            grand_total=stacked,
        )
    return ChannelSummary(
        count=count,
        stacked_total=stacked,
        unstacked_total=sum((i.unlocked for i in infos), ZERO),
        grand_total=sum((i.total for i in infos), ZERO),
    )
