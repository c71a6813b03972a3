"""
Pydantic models used throughout IDL Guard.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


OrderUnit = Literal["slot", "timestamp"]


# ---------------------------------------------------------------------------
# Configuration (resolved once at the boundary, never mutated)
# ---------------------------------------------------------------------------
class CheckConfig(BaseModel):
    """Everything a single check run needs, resolved by ``config.py``."""

    model_config = ConfigDict(frozen=True)

    program_id: str = Field(..., description="Base-58 program address")
    rpc_url: Optional[str] = Field(None, description="Solana JSON-RPC endpoint")
    helius_api_key: Optional[str] = Field(None, description="Helius API key")
    cluster: Literal["mainnet-beta", "devnet"] = "mainnet-beta"
    request_timeout: int = Field(15, ge=1)
    max_retries: int = Field(3, ge=1)
    history_page_size: int = Field(1, ge=1)
    on_missing_program_history: Literal["fail", "warn"] = "fail"
    on_unexpected_owner: Literal["skip", "fail"] = "skip"
    output_format: Literal["text", "json"] = "text"

    @property
    def source_kind(self) -> str:
        return "helius" if self.helius_api_key else "rpc"


# ---------------------------------------------------------------------------
# Chain data
# ---------------------------------------------------------------------------
class AccountSnapshot(BaseModel):
    """Owner and raw data of an on-chain account."""

    model_config = ConfigDict(frozen=True)

    owner: str
    data: bytes = b""


class ChangeRecord(BaseModel):
    """Most recent state-changing event observed for an account."""

    model_config = ConfigDict(frozen=True)

    signature: str
    order: int = Field(..., description="Ledger slot or Unix timestamp")
    unit: OrderUnit = "slot"
    block_time: Optional[int] = None
    slot: Optional[int] = None


# ---------------------------------------------------------------------------
# Verdict
# ---------------------------------------------------------------------------
class Verdict(str, Enum):
    OK = "OK"
    OUTDATED = "OUTDATED"
    INDETERMINATE = "INDETERMINATE"


class Assessment(BaseModel):
    verdict: Verdict
    reason: str = ""


# ---------------------------------------------------------------------------
# Report / outcome
# ---------------------------------------------------------------------------
class CheckReport(BaseModel):
    """Everything the report formatter renders."""

    program_id: str
    program_data: str
    idl_account: str
    program_change: Optional[ChangeRecord] = None
    idl_change: Optional[ChangeRecord] = None
    assessment: Assessment


class CheckOutcome(BaseModel):
    """Terminal state of a check run."""

    status: Literal["ok", "outdated", "indeterminate", "not_applicable", "error"]
    exit_code: int = Field(..., ge=0, le=1)
    message: str = ""
    report: Optional[CheckReport] = None
