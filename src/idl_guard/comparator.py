"""
Freshness comparison between the program binary and its IDL.
"""

from __future__ import annotations

from typing import Optional

from .models import Assessment, ChangeRecord, Verdict

REASON_NO_PROGRAM_HISTORY = "no history for program data account"
REASON_NO_IDL_HISTORY = "IDL account uninitialized or has no history"
REASON_OUTDATED = "The program was upgraded AFTER the last IDL update."
REASON_OK = "IDL is up-to-date or newer than the last program binary deployment."


def assess(
    program_change: Optional[ChangeRecord],
    idl_change: Optional[ChangeRecord],
) -> Assessment:
    """Decide whether the IDL is older than the last program deployment.

    Missing history on either side is INDETERMINATE.  Otherwise the program
    side must be strictly newer for OUTDATED; a tie is OK.
    """
    if program_change is None:
        return Assessment(verdict=Verdict.INDETERMINATE, reason=REASON_NO_PROGRAM_HISTORY)
    if idl_change is None:
        return Assessment(verdict=Verdict.INDETERMINATE, reason=REASON_NO_IDL_HISTORY)
    if program_change.unit != idl_change.unit:
        raise ValueError(
            f"Cannot compare {program_change.unit} with {idl_change.unit} ordering"
        )
    if program_change.order > idl_change.order:
        return Assessment(verdict=Verdict.OUTDATED, reason=REASON_OUTDATED)
    return Assessment(verdict=Verdict.OK, reason=REASON_OK)


def compare(
    program_change: Optional[ChangeRecord],
    idl_change: Optional[ChangeRecord],
) -> Verdict:
    return assess(program_change, idl_change).verdict
