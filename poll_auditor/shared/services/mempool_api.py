"""
mempool.space API service module.

Reads the Bitcoin transactions sent to the BTC vote addresses. The address
endpoint returns a single list of transactions; each exposes a
"status.confirmed" flag and a "vin" list whose entries carry the spent
output ("prevout") and its "scriptpubkey_address".
"""

from typing import Any, Dict, List, Optional

import httpx

from poll_auditor.config import PollConfig
from poll_auditor.shared.logging import get_logger
from poll_auditor.shared.retry import RetryPolicy
from poll_auditor.shared.services.http_client import JsonApiClient

logger = get_logger(__name__)


class MempoolApiClient(JsonApiClient):
    """Async client for the mempool.space REST API."""

    def __init__(
        self,
        config: PollConfig,
        retry_policy: Optional[RetryPolicy] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(
            config.mempool_api_url,
            retry_policy
            or RetryPolicy.fixed(config.retry_limit, config.retry_delay),
            client=client,
        )
        self.page_limit = config.page_limit

    async def get_address_transactions(
        self, address: str
    ) -> List[Dict[str, Any]]:
        txs = await self.fetch_json(
            f"/address/{address}/txs", {"limit": self.page_limit}
        )
        logger.info(f"Fetched {len(txs)} BTC tx for {address}")
        return txs
