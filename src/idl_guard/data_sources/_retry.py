"""
Shared async HTTP helpers with bounded retry.

Used by the Solana RPC and Helius sources.  Rate-limit (429), server (5xx)
and connection errors are retried with exponential backoff up to
*max_retries* attempts; after that the last error is raised.  Nothing is
swallowed: callers always get either a parsed body or an exception.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import httpx

from ..errors import RpcError

logger = logging.getLogger(__name__)


def _parse_retry_after(resp: httpx.Response, default: float) -> float:
    """Extract wait time from a ``Retry-After`` header, or use *default*.

    The header may be an integer (seconds) or an HTTP-date.  We only handle
    the integer form since that's what most APIs emit.
    """
    raw = resp.headers.get("retry-after")
    if raw is not None:
        try:
            return max(float(raw), 0.5)
        except (ValueError, TypeError):
            pass
    return default


def _parse_json(resp: httpx.Response, label: str) -> Any:
    try:
        return resp.json()
    except ValueError as exc:
        raise RpcError(f"{label}: invalid JSON body") from exc


def _is_retryable(exc: Exception) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, httpx.RequestError)


async def _send(
    send,
    *,
    max_retries: int,
    backoff_base: float,
    label: str,
) -> httpx.Response:
    last_exc: Optional[Exception] = None
    for attempt in range(max_retries):
        last_attempt = attempt == max_retries - 1
        try:
            resp = await send()
            if resp.status_code == 429 and not last_attempt:
                # Prefer server-provided Retry-After, else exponential backoff
                wait = _parse_retry_after(resp, backoff_base * (2 ** attempt))
                logger.warning("%s rate-limited, retry in %.1fs", label, wait)
                await asyncio.sleep(wait)
                continue
            resp.raise_for_status()
            return resp
        except (httpx.HTTPStatusError, httpx.RequestError) as exc:
            last_exc = exc
            if isinstance(exc, httpx.HTTPStatusError):
                logger.warning("%s HTTP %s", label, exc.response.status_code)
            else:
                logger.warning("%s request failed: %s", label, exc)
            if last_attempt or not _is_retryable(exc):
                raise
            await asyncio.sleep(backoff_base * (2 ** attempt))
    raise RpcError(f"{label}: all retries exhausted") from last_exc


async def async_http_get(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Optional[dict[str, Any]] = None,
    max_retries: int = 3,
    backoff_base: float = 1.0,
    label: str = "HTTP",
) -> Any:
    """GET *url* and return the parsed JSON body.

    Raises ``httpx.HTTPError`` when the request ultimately fails.
    """
    resp = await _send(
        lambda: client.get(url, params=params),
        max_retries=max_retries,
        backoff_base=backoff_base,
        label=label,
    )
    return _parse_json(resp, label)


async def async_http_post_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    json_payload: Any,
    max_retries: int = 3,
    backoff_base: float = 1.5,
    label: str = "RPC",
) -> Any:
    """POST a JSON-RPC *json_payload* and return its ``result`` member.

    A JSON-RPC ``error`` member raises ``RpcError`` without retrying; the
    node answered, so asking again would not change the answer.
    """
    resp = await _send(
        lambda: client.post(url, json=json_payload),
        max_retries=max_retries,
        backoff_base=backoff_base,
        label=label,
    )
    body = _parse_json(resp, label)
    if not isinstance(body, dict):
        raise RpcError(f"{label}: unexpected response body {body!r}")
    if "error" in body:
        logger.warning("%s error: %s", label, body["error"])
        raise RpcError(f"{label} error: {body['error']}")
    if "result" not in body:
        raise RpcError(f"{label}: response has no result")
    return body["result"]
