"""
Centralized constants for IDL Guard.

Solana protocol addresses and the fixed values used to locate the
ProgramData and IDL accounts of an upgradeable program.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Solana Program Addresses (immutable — part of the Solana protocol)
# ---------------------------------------------------------------------------

BPF_LOADER_UPGRADEABLE = "BPFLoaderUpgradeab1e11111111111111111111111"

# ---------------------------------------------------------------------------
# Account layouts
# ---------------------------------------------------------------------------

# Program account: u32 LE state tag followed by the ProgramData pubkey
PROGRAM_STATE_TAG: int = 3
PROGRAM_DATA_OFFSET: int = 4
PUBKEY_LENGTH: int = 32

# Anchor stores the IDL at create_with_seed(pda([], program), IDL_SEED, program)
IDL_SEED = "anchor:idl"

# ---------------------------------------------------------------------------
# Labels used in logs and FetchError diagnostics
# ---------------------------------------------------------------------------

LABEL_PROGRAM = "Program"
LABEL_PROGRAM_DATA = "ProgramData"
LABEL_IDL = "IdlAccount"
