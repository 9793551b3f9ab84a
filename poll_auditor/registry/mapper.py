"""
Stake-registry mapping from BTC payout addresses to Stacks stackers.

A BTC vote is cast from a PoX payout address. To credit it to Stacks
participants, the PoX registry of every configured reward cycle is walked
(cycle -> signers -> stackers) and each stacker is recorded under the
payout address it stacks to.
"""

from typing import Dict, Iterable, List, Sequence

from poll_auditor.shared.addresses import (
    normalize_btc_address,
    normalize_stacks_address,
)
from poll_auditor.shared.logging import get_logger
from poll_auditor.shared.services.stacks_api import StacksApiClient

logger = get_logger(__name__)

# payout address -> stacker addresses, duplicates kept
StakeRegistryIndex = Dict[str, List[str]]


class StakeRegistryMapper:
    """Builds and queries the payout address index of the PoX registry."""

    def __init__(self, api: StacksApiClient):
        self._api = api

    async def build_index(self, cycles: Iterable[int]) -> StakeRegistryIndex:
        """
        Walk all signers and stackers of the given reward cycles.

        Cycles, signers and stackers are processed in the order given by
        the caller and by the API, so the list order under each payout
        address is deterministic. Any fetch failure propagates; no partial
        index is returned.

        Args:
            cycles: Reward cycle ids, in the order to process them

        Returns:
            Mapping payout address -> stacker addresses
        """
        cycles = tuple(cycles)
        index: StakeRegistryIndex = {}

        for cycle in cycles:
            signers = await self._api.get_cycle_signers(cycle)
            for signer in signers:
                stackers = await self._api.get_signer_stackers(
                    cycle, signer["signing_key"]
                )
                for stacker in stackers:
                    payout_address = normalize_btc_address(stacker["pox_address"])
                    index.setdefault(payout_address, []).append(
                        normalize_stacks_address(stacker["stacker_address"])
                    )

        logger.info(
            f"Built stake registry index: {len(index)} payout addresses "
            f"across {len(cycles)} cycles"
        )
        return index

    @staticmethod
    def lookup(index: StakeRegistryIndex, payout_address: str) -> Sequence[str]:
        """
        Stackers backing a payout address.

        A miss returns an empty tuple, so a missing key and an empty list
        are consumed the same way.
        """
        return index.get(normalize_btc_address(payout_address)) or ()
