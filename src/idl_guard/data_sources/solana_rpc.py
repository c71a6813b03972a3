"""
Solana RPC data source for IDL Guard.

Uses the standard JSON-RPC interface.  The public
``api.mainnet-beta.solana.com`` endpoint works but is rate-limited.
Uses ``httpx`` for async HTTP with bounded retry + exponential backoff.

Change records from this source are ordered by ledger slot.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Optional

import httpx

from ._retry import async_http_post_json
from .base import pick_newest
from ..errors import RpcError
from ..models import AccountSnapshot, ChangeRecord, OrderUnit

logger = logging.getLogger(__name__)

# Retry configuration
_MAX_RETRIES = 3
_BACKOFF_BASE = 1.5  # seconds


class SolanaRpcClient:
    """Async Solana JSON-RPC client implementing ``ChainDataSource``."""

    order_unit: OrderUnit = "slot"

    def __init__(
        self,
        endpoint: str,
        timeout: int = 15,
        *,
        max_retries: int = _MAX_RETRIES,
        history_limit: int = 1,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._max_retries = max_retries
        self._history_limit = history_limit
        self._client: httpx.AsyncClient | None = None
        self._id_counter = 0

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_account_owner_and_data(
        self, address: str
    ) -> Optional[AccountSnapshot]:
        """Fetch owner + raw data of *address* via ``getAccountInfo``.

        Returns ``None`` when the account does not exist.
        """
        result = await self._call(
            "getAccountInfo",
            [address, {"encoding": "base64"}],
        )
        if not isinstance(result, dict):
            raise RpcError(f"getAccountInfo: unexpected result {result!r}")
        value = result.get("value")
        if value is None:
            return None
        return AccountSnapshot(
            owner=value.get("owner", ""),
            data=decode_account_data(value.get("data")),
        )

    async def get_latest_change(self, address: str) -> Optional[ChangeRecord]:
        """Return the newest signature touching *address*.

        ``getSignaturesForAddress`` returns signatures newest first; with a
        page size above one the highest slot on the page is taken instead
        of trusting position.
        """
        result = await self._call(
            "getSignaturesForAddress",
            [address, {"limit": self._history_limit}],
        )
        if result is None:
            return None
        if not isinstance(result, list):
            raise RpcError(f"getSignaturesForAddress: unexpected result {result!r}")
        records = [_to_change_record(entry) for entry in result]
        return pick_newest(records)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _call(self, method: str, params: list[Any] | dict) -> Any:
        """JSON-RPC call with bounded retry.  Errors propagate."""
        self._id_counter += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._id_counter,
            "method": method,
            "params": params,
        }
        client = await self._get_client()
        return await async_http_post_json(
            client, self._endpoint, json_payload=payload,
            max_retries=self._max_retries, backoff_base=_BACKOFF_BASE,
            label=f"Solana RPC ({method})",
        )


def decode_account_data(data: Any) -> bytes:
    """Decode the ``data`` member of a base64-encoded ``getAccountInfo`` value.

    The node answers ``[<base64>, "base64"]``; a bare string is accepted too.
    """
    if data is None:
        return b""
    if isinstance(data, list):
        if not data:
            return b""
        encoded, encoding = data[0], data[1] if len(data) > 1 else "base64"
        if encoding != "base64":
            raise RpcError(f"unsupported account data encoding {encoding!r}")
        return _b64decode(encoded)
    if isinstance(data, str):
        return _b64decode(data)
    raise RpcError(f"unexpected account data format {type(data).__name__}")


def _b64decode(encoded: str) -> bytes:
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise RpcError(f"invalid base64 account data: {exc}") from exc


def _to_change_record(entry: Any) -> ChangeRecord:
    try:
        slot = int(entry["slot"])
        return ChangeRecord(
            signature=entry["signature"],
            order=slot,
            unit="slot",
            block_time=entry.get("blockTime"),
            slot=slot,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise RpcError(f"malformed signature entry {entry!r}") from exc
