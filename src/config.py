"""
Project configuration for IDL Guard.

This module is the only place that reads the process environment.  Logging
settings are module-level values; everything a check run needs is resolved
by ``load_check_config`` into a frozen ``CheckConfig`` that is passed into
the orchestrator explicitly.

Each check setting is taken from, in order: the explicit argument (CLI
flag), the environment variable, then the GitHub Action input variable
(``INPUT_<NAME>``, which Actions sets from ``with:`` inputs).
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from solders.pubkey import Pubkey

from idl_guard.errors import ConfigError
from idl_guard.models import CheckConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _parse_int(name: str, default: str, *, minimum: int = 1) -> int:
    """Parse an env var as an int and enforce a minimum."""
    raw = os.getenv(name, default)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.error("Invalid value for %s: %r – using default %s", name, raw, default)
        value = int(default)
    if value < minimum:
        logger.warning("%s=%d is below minimum %d – clamped", name, value, minimum)
        value = minimum
    return value


def _lookup(explicit: Optional[str], env_name: str, input_name: str) -> Optional[str]:
    """Resolve a setting from an explicit value, env var or Action input."""
    for value in (explicit, os.getenv(env_name), os.getenv(f"INPUT_{input_name}")):
        if value is not None and value.strip():
            return value.strip()
    return None


def _choice(value: Optional[str], name: str, allowed: tuple[str, ...], default: str) -> str:
    if value is None:
        return default
    value = value.lower()
    if value not in allowed:
        raise ConfigError(
            f"Invalid {name}: {value!r} (expected one of {', '.join(allowed)})"
        )
    return value


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# ---------------------------------------------------------------------------
# Helius clusters
# ---------------------------------------------------------------------------
CLUSTERS: tuple[str, ...] = ("mainnet-beta", "devnet")


# ---------------------------------------------------------------------------
# Check configuration
# ---------------------------------------------------------------------------

def load_check_config(
    *,
    program_id: Optional[str] = None,
    rpc_url: Optional[str] = None,
    helius_api_key: Optional[str] = None,
    cluster: Optional[str] = None,
    on_missing_program_history: Optional[str] = None,
    on_unexpected_owner: Optional[str] = None,
    output_format: str = "text",
) -> CheckConfig:
    """Resolve and validate the configuration of one check run.

    Raises ``ConfigError`` for missing or malformed inputs, and when both
    a JSON-RPC URL and a Helius key are supplied: one run uses exactly one
    data source.
    """
    program_id = _lookup(program_id, "PROGRAM_ID", "PROGRAM-ID")
    rpc_url = _lookup(rpc_url, "RPC_URL", "RPC-URL")
    helius_api_key = _lookup(helius_api_key, "HELIUS_API_KEY", "HELIUS-API-KEY")

    missing = []
    if not program_id:
        missing.append("PROGRAM_ID")
    if not rpc_url and not helius_api_key:
        missing.append("RPC_URL or HELIUS_API_KEY")
    if missing:
        raise ConfigError("Missing required inputs: " + ", ".join(missing))

    if rpc_url and helius_api_key:
        raise ConfigError(
            "Configure either RPC_URL or HELIUS_API_KEY, not both: "
            "the two lookups must use the same data source"
        )

    try:
        Pubkey.from_string(program_id)
    except ValueError as exc:
        raise ConfigError(f"Invalid PROGRAM_ID {program_id!r}: {exc}") from exc

    return CheckConfig(
        program_id=program_id,
        rpc_url=rpc_url,
        helius_api_key=helius_api_key,
        cluster=_choice(
            _lookup(cluster, "SOLANA_CLUSTER", "CLUSTER"),
            "cluster", CLUSTERS, "mainnet-beta",
        ),
        request_timeout=_parse_int("REQUEST_TIMEOUT", "15", minimum=1),
        max_retries=_parse_int("RPC_MAX_RETRIES", "3", minimum=1),
        history_page_size=_parse_int("HISTORY_PAGE_SIZE", "1", minimum=1),
        on_missing_program_history=_choice(
            _lookup(on_missing_program_history, "ON_MISSING_PROGRAM_HISTORY",
                    "ON-MISSING-PROGRAM-HISTORY"),
            "on_missing_program_history", ("fail", "warn"), "fail",
        ),
        on_unexpected_owner=_choice(
            _lookup(on_unexpected_owner, "ON_UNEXPECTED_OWNER", "ON-UNEXPECTED-OWNER"),
            "on_unexpected_owner", ("skip", "fail"), "skip",
        ),
        output_format=_choice(output_format, "output format", ("text", "json"), "text"),
    )
