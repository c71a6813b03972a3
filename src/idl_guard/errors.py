"""
Error taxonomy for IDL Guard.

Every failure the check can hit is one of these.  The orchestrator turns
any ``IdlGuardError`` into a failing outcome (exit code 1); nothing here is
recovered from silently.
"""

from __future__ import annotations


class IdlGuardError(Exception):
    """Base class for all expected check failures."""


class ConfigError(IdlGuardError):
    """Missing or malformed required input.  Raised before any network call."""


class NotFoundError(IdlGuardError):
    """The target account does not exist on chain."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Program account {address} not found")
        self.address = address


class UnexpectedOwnerError(IdlGuardError):
    """The program account is not owned by the upgradeable loader."""

    def __init__(self, address: str, owner: str) -> None:
        super().__init__(
            f"Expected BPF loader, got: {owner} for program {address}"
        )
        self.address = address
        self.owner = owner


class FetchError(IdlGuardError):
    """Transport or RPC failure while reading chain data for *address*."""

    def __init__(self, address: str, label: str, message: str) -> None:
        super().__init__(f"Error fetching {label} ({address}): {message}")
        self.address = address
        self.label = label
        self.message = message


class IndeterminateError(IdlGuardError):
    """One side of the comparison has no history."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class RpcError(Exception):
    """JSON-RPC error body or exhausted transport retries.

    Raised by the data sources; translated to ``FetchError`` by the
    resolver and history fetcher, which know the address and label.
    """
