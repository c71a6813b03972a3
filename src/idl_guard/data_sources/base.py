"""
Abstract chain-data collaborator.

The core only talks to this protocol, so the concrete transport (raw
JSON-RPC or the Helius indexer) is wired in by ``build_data_source``.
Both lookups of a run must go through the same instance, which keeps the
ordering unit of the two change records identical.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..models import AccountSnapshot, ChangeRecord, OrderUnit


@runtime_checkable
class ChainDataSource(Protocol):
    order_unit: OrderUnit

    async def get_account_owner_and_data(
        self, address: str
    ) -> Optional[AccountSnapshot]:
        """Return the account's owner and data, or ``None`` if it does not exist."""
        ...

    async def get_latest_change(self, address: str) -> Optional[ChangeRecord]:
        """Return the newest change touching *address*, or ``None`` if it has none."""
        ...

    async def close(self) -> None:
        ...


def pick_newest(records: list[ChangeRecord]) -> Optional[ChangeRecord]:
    """Select the record with the greatest ordering field.

    Sources request newest-first pages; this keeps the choice correct even
    when a page with several entries is not strictly ordered.  The first
    entry wins ties.
    """
    newest: Optional[ChangeRecord] = None
    for record in records:
        if newest is None or record.order > newest.order:
            newest = record
    return newest
