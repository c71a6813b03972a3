"""
Helius data source.

Account reads go through the Helius-hosted JSON-RPC endpoint; history
comes from the enhanced-transactions indexer, which orders by the block
timestamp it records.  Records from this source therefore carry
``unit="timestamp"`` and must never be compared with slot-ordered ones.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ._retry import async_http_get
from .base import pick_newest
from .solana_rpc import SolanaRpcClient
from ..errors import RpcError
from ..models import AccountSnapshot, ChangeRecord, OrderUnit

logger = logging.getLogger(__name__)

_RPC_URLS = {
    "mainnet-beta": "https://mainnet.helius-rpc.com/?api-key={key}",
    "devnet": "https://devnet.helius-rpc.com/?api-key={key}",
}
_API_URLS = {
    "mainnet-beta": "https://api.helius.xyz",
    "devnet": "https://api-devnet.helius.xyz",
}


class HeliusClient:
    """Helius-backed ``ChainDataSource`` (timestamp ordering)."""

    order_unit: OrderUnit = "timestamp"

    def __init__(
        self,
        api_key: str,
        cluster: str = "mainnet-beta",
        timeout: int = 15,
        *,
        max_retries: int = 3,
        history_limit: int = 1,
    ) -> None:
        if cluster not in _API_URLS:
            raise ValueError(f"Unsupported Helius cluster: {cluster}")
        self._api_key = api_key
        self._api_base = _API_URLS[cluster]
        self._timeout = timeout
        self._max_retries = max_retries
        self._history_limit = history_limit
        self._client: httpx.AsyncClient | None = None
        self._rpc = SolanaRpcClient(
            _RPC_URLS[cluster].format(key=api_key),
            timeout=timeout,
            max_retries=max_retries,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        await self._rpc.close()
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_account_owner_and_data(
        self, address: str
    ) -> Optional[AccountSnapshot]:
        return await self._rpc.get_account_owner_and_data(address)

    async def get_latest_change(self, address: str) -> Optional[ChangeRecord]:
        """Return the newest indexed transaction touching *address*.

        The indexer returns transactions newest first; the greatest
        timestamp on the page is taken.
        """
        client = await self._get_client()
        result = await async_http_get(
            client,
            f"{self._api_base}/v0/addresses/{address}/transactions",
            params={"api-key": self._api_key, "limit": self._history_limit},
            max_retries=self._max_retries,
            label="Helius transactions",
        )
        if result is None:
            return None
        if not isinstance(result, list):
            raise RpcError(f"Helius transactions: unexpected body {result!r}")
        return pick_newest([_to_change_record(tx) for tx in result])


def _to_change_record(tx: Any) -> ChangeRecord:
    try:
        timestamp = int(tx["timestamp"])
        slot = tx.get("slot")
        return ChangeRecord(
            signature=tx["signature"],
            order=timestamp,
            unit="timestamp",
            block_time=timestamp,
            slot=int(slot) if slot is not None else None,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise RpcError(f"malformed Helius transaction {tx!r}") from exc
