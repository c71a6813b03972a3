"""
Latest-change lookups.

``latest_change`` asks the data source for the newest event touching one
account; ``fetch_latest_changes`` runs the ProgramData and IDL lookups as
two concurrent tasks and joins them before anything is compared.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from .constants import LABEL_IDL, LABEL_PROGRAM_DATA
from .data_sources.base import ChainDataSource
from .errors import FetchError, RpcError
from .models import ChangeRecord

logger = logging.getLogger(__name__)


async def latest_change(
    source: ChainDataSource, address: str, label: str
) -> Optional[ChangeRecord]:
    """Return the most recent change for *address*, or ``None`` if it has none.

    Transport and RPC failures (timeouts included) raise ``FetchError``, as
    does a record whose ordering unit differs from the source's.
    """
    try:
        record = await source.get_latest_change(address)
    except (httpx.HTTPError, RpcError) as exc:
        logger.error("Error fetching history for %s: %s", label, exc)
        raise FetchError(address, label, str(exc)) from exc

    if record is not None and record.unit != source.order_unit:
        raise FetchError(
            address, label,
            f"source ordered by {source.order_unit} returned a {record.unit} record",
        )
    if record is None:
        logger.info("No history found for %s (%s)", label, address)
    else:
        logger.debug("Latest %s change: %s @ %s %d", label, record.signature, record.unit, record.order)
    return record


async def fetch_latest_changes(
    source: ChainDataSource, program_data: str, idl_account: str
) -> tuple[Optional[ChangeRecord], Optional[ChangeRecord]]:
    """Fetch both latest changes concurrently.

    If either lookup fails the other is cancelled and the error propagates;
    a single record cannot produce a verdict.
    """
    tasks = [
        asyncio.create_task(latest_change(source, program_data, LABEL_PROGRAM_DATA)),
        asyncio.create_task(latest_change(source, idl_account, LABEL_IDL)),
    ]
    try:
        program_change, idl_change = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return program_change, idl_change
