"""
Stacks API service module (Hiro API).

Provides the paginated reads the tally depends on:
- transactions of a vote address
- STX balance of an address as of a block height
- signers of a PoX reward cycle and the stackers behind each signer

All list endpoints use offset pagination (limit/offset with a "total"
field in every page). Every request goes through the run's RetryPolicy;
exhausting it raises RetryExhaustedException and aborts the run.
"""

from typing import Any, Dict, List, Optional, Tuple

import httpx

from poll_auditor.config import PollConfig
from poll_auditor.shared.logging import get_logger
from poll_auditor.shared.retry import RetryPolicy
from poll_auditor.shared.services.http_client import JsonApiClient

logger = get_logger(__name__)


class StacksApiClient(JsonApiClient):
    """Async client for the Hiro Stacks API."""

    def __init__(
        self,
        config: PollConfig,
        retry_policy: Optional[RetryPolicy] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(
            config.stacks_api_url,
            retry_policy
            or RetryPolicy.fixed(config.retry_limit, config.retry_delay),
            headers=config.stacks_headers,
            client=client,
        )
        self.page_limit = config.page_limit

    async def paginate(
        self, path: str, label: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Resolve an offset-paginated endpoint into its complete result list.

        Args:
            path: Endpoint path relative to the API base URL
            label: Optional description used in progress logs

        Returns:
            Concatenated "results" of every page, in upstream order
        """
        results: List[Dict[str, Any]] = []
        offset = 0
        total: Optional[int] = None

        while total is None or offset < total:
            page = await self.fetch_json(
                path, {"limit": self.page_limit, "offset": offset}
            )
            total = int(page["total"])
            results.extend(page["results"])
            offset += self.page_limit
            if label:
                logger.info(f"Fetched {min(offset, total)}/{total} {label}")

        return results

    async def get_address_transactions(
        self, address: str
    ) -> List[Dict[str, Any]]:
        """All transactions touching an address (v2 wrapped records)."""
        return await self.paginate(
            f"/extended/v2/addresses/{address}/transactions",
            label=f"STX tx for {address}",
        )

    async def get_stx_balance(
        self, address: str, until_block: int
    ) -> Tuple[int, int]:
        """
        Raw STX balance of an address as of a block height.

        Returns:
            (raw_locked, raw_balance) in micro-STX
        """
        data = await self.fetch_json(
            f"/extended/v1/address/{address}/stx",
            {"until_block": until_block},
        )
        return int(data["locked"]), int(data["balance"])

    async def get_cycle_signers(self, cycle: int) -> List[Dict[str, Any]]:
        return await self.paginate(
            f"/extended/v2/pox/cycles/{cycle}/signers",
            label=f"signers for cycle {cycle}",
        )

    async def get_signer_stackers(
        self, cycle: int, signing_key: str
    ) -> List[Dict[str, Any]]:
        return await self.paginate(
            f"/extended/v2/pox/cycles/{cycle}/signers/{signing_key}/stackers"
        )
