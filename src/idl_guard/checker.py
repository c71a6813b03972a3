"""
Orchestrator for the IDL staleness check.

Sequence::

    ValidateInputs -> ResolveAddresses -> FetchHistories -> Compare -> Report

``run_check`` returns a ``CheckOutcome`` carrying the exit code; it never
calls ``sys.exit`` and never writes the report itself.  The report is
attached to every outcome reached after both addresses are known.
"""

from __future__ import annotations

import logging

from solders.pubkey import Pubkey

from .address_resolver import resolve_idl_address, resolve_program_data
from .comparator import assess
from .data_sources.base import ChainDataSource
from .errors import ConfigError, IdlGuardError, IndeterminateError
from .history import fetch_latest_changes
from .models import CheckConfig, CheckOutcome, CheckReport, Verdict

logger = logging.getLogger(__name__)


def _parse_program_id(program_id: str) -> Pubkey:
    try:
        return Pubkey.from_string(program_id)
    except ValueError as exc:
        raise ConfigError(f"Invalid program id {program_id!r}: {exc}") from exc


def _error(exc: Exception) -> CheckOutcome:
    logger.error("%s", exc)
    return CheckOutcome(status="error", exit_code=1, message=str(exc))


async def run_check(config: CheckConfig, source: ChainDataSource) -> CheckOutcome:
    """Run one staleness check against *source*."""
    # ValidateInputs
    try:
        program = _parse_program_id(config.program_id)
    except ConfigError as exc:
        return _error(exc)

    # ResolveAddresses
    try:
        program_data = await resolve_program_data(
            source, program, on_unexpected_owner=config.on_unexpected_owner
        )
    except IdlGuardError as exc:
        return _error(exc)

    if program_data is None:
        message = (
            "Program is not upgradeable (no ProgramData account found). "
            "IDL checks are not applicable for immutable programs."
        )
        logger.warning(message)
        return CheckOutcome(status="not_applicable", exit_code=0, message=message)

    idl_account = resolve_idl_address(program)
    logger.info("ProgramData: %s, IDL account: %s", program_data, idl_account)

    # FetchHistories
    try:
        program_change, idl_change = await fetch_latest_changes(
            source, str(program_data), str(idl_account)
        )
    except IdlGuardError as exc:
        return _error(exc)

    # Compare
    assessment = assess(program_change, idl_change)
    report = CheckReport(
        program_id=str(program),
        program_data=str(program_data),
        idl_account=str(idl_account),
        program_change=program_change,
        idl_change=idl_change,
        assessment=assessment,
    )

    if assessment.verdict == Verdict.OUTDATED:
        logger.error("IDL is OUTDATED for program %s", program)
        return CheckOutcome(
            status="outdated", exit_code=1, message=assessment.reason, report=report
        )
    if assessment.verdict == Verdict.OK:
        return CheckOutcome(status="ok", exit_code=0, message=assessment.reason, report=report)

    # INDETERMINATE
    indeterminate = IndeterminateError(assessment.reason)
    if program_change is None and config.on_missing_program_history == "warn":
        logger.warning("Cannot determine IDL freshness: %s", indeterminate)
        return CheckOutcome(
            status="indeterminate", exit_code=0, message=str(indeterminate), report=report
        )
    logger.error("Cannot determine IDL freshness: %s", indeterminate)
    return CheckOutcome(
        status="indeterminate", exit_code=1, message=str(indeterminate), report=report
    )
