"""Shared test fixtures for the IDL Guard test suite."""

from __future__ import annotations

import sys
import os

# Ensure src/ is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import struct
from typing import Optional, Union

import pytest
from solders.pubkey import Pubkey

from idl_guard.constants import BPF_LOADER_UPGRADEABLE
from idl_guard.models import AccountSnapshot, ChangeRecord


PROGRAM_ID = "Fg6PaFpoGXkYsidMpWTK6W2BeZ7FEfcYkg476zPFsLnS"
PROGRAM_DATA = Pubkey(bytes(range(1, 33)))


def program_account_data(tag: int = 3, program_data: Pubkey = PROGRAM_DATA) -> bytes:
    """Build upgradeable-loader program account data."""
    return struct.pack("<I", tag) + bytes(program_data)


def slot_record(slot: int, signature: str = "sig") -> ChangeRecord:
    return ChangeRecord(
        signature=f"{signature}{slot}", order=slot, unit="slot",
        block_time=1_700_000_000 + slot, slot=slot,
    )


class FakeDataSource:
    """In-memory ``ChainDataSource`` for orchestration tests."""

    order_unit = "slot"

    def __init__(
        self,
        accounts: Optional[dict[str, AccountSnapshot]] = None,
        changes: Optional[dict[str, Union[ChangeRecord, Exception, None]]] = None,
    ) -> None:
        self.accounts = accounts or {}
        self.changes = changes or {}
        self.account_calls: list[str] = []
        self.history_calls: list[str] = []
        self.closed = False

    async def get_account_owner_and_data(self, address: str) -> Optional[AccountSnapshot]:
        self.account_calls.append(address)
        return self.accounts.get(address)

    async def get_latest_change(self, address: str) -> Optional[ChangeRecord]:
        self.history_calls.append(address)
        value = self.changes.get(address)
        if isinstance(value, Exception):
            raise value
        return value

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def program() -> Pubkey:
    return Pubkey.from_string(PROGRAM_ID)


@pytest.fixture
def upgradeable_account() -> AccountSnapshot:
    return AccountSnapshot(owner=BPF_LOADER_UPGRADEABLE, data=program_account_data())
