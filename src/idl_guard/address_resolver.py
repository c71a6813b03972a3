"""
Address resolution for the staleness check.

Two addresses are derived from the program address:

- the ProgramData account, read from the program account's data when the
  program is owned by the upgradeable loader;
- the Anchor IDL account, a pure function of the program address.

Program account layout (upgradeable loader)::

    [0..4)   : u32 little-endian state tag  (PROGRAM_STATE_TAG)
    [4..36)  : ProgramData Pubkey
"""

from __future__ import annotations

import logging
import struct
from typing import Optional

import httpx
from solders.pubkey import Pubkey

from .constants import (
    BPF_LOADER_UPGRADEABLE,
    IDL_SEED,
    LABEL_PROGRAM,
    PROGRAM_DATA_OFFSET,
    PROGRAM_STATE_TAG,
    PUBKEY_LENGTH,
)
from .data_sources.base import ChainDataSource
from .errors import FetchError, NotFoundError, RpcError, UnexpectedOwnerError

logger = logging.getLogger(__name__)


def parse_program_account(data: bytes) -> Optional[Pubkey]:
    """Return the ProgramData address stored in a program account's *data*.

    Returns ``None`` for any state tag other than ``PROGRAM_STATE_TAG`` or a
    buffer too short to hold the tag and key.  Never raises.
    """
    end = PROGRAM_DATA_OFFSET + PUBKEY_LENGTH
    if len(data) < PROGRAM_DATA_OFFSET:
        return None
    (tag,) = struct.unpack_from("<I", data, 0)
    if tag != PROGRAM_STATE_TAG or len(data) < end:
        return None
    return Pubkey.from_bytes(bytes(data[PROGRAM_DATA_OFFSET:end]))


async def resolve_program_data(
    source: ChainDataSource,
    program: Pubkey,
    *,
    on_unexpected_owner: str = "skip",
) -> Optional[Pubkey]:
    """Find the ProgramData address of *program*, or ``None`` if immutable.

    Raises ``NotFoundError`` when the program account does not exist.  A
    program not owned by the upgradeable loader returns ``None`` under the
    ``"skip"`` policy and raises ``UnexpectedOwnerError`` under ``"fail"``.
    """
    address = str(program)
    try:
        account = await source.get_account_owner_and_data(address)
    except (httpx.HTTPError, RpcError) as exc:
        raise FetchError(address, LABEL_PROGRAM, str(exc)) from exc

    if account is None:
        raise NotFoundError(address)

    if account.owner != BPF_LOADER_UPGRADEABLE:
        if on_unexpected_owner == "fail":
            raise UnexpectedOwnerError(address, account.owner)
        logger.info("Program %s is owned by %s, not the upgradeable loader", address, account.owner)
        return None

    program_data = parse_program_account(account.data)
    if program_data is None:
        logger.info("Program %s account is not in the Program state", address)
    return program_data


def resolve_idl_address(program: Pubkey) -> Pubkey:
    """Derive the Anchor IDL account address of *program*."""
    base, _bump = Pubkey.find_program_address([], program)
    return Pubkey.create_with_seed(base, IDL_SEED, program)
