"""
Status report rendering.

Pure functions: they build the text and never write it anywhere.
"""

from __future__ import annotations

from typing import Optional

from .models import ChangeRecord, CheckReport, Verdict

_RULE = "=" * 60
_THIN_RULE = "-" * 60


def _change_lines(title: str, change: Optional[ChangeRecord]) -> list[str]:
    lines = [f"  {title}:"]
    if change is None:
        lines.append("    [No Data]")
        return lines
    if change.unit == "timestamp":
        lines.append(f"    Timestamp  : {change.order}")
    lines.append(f"    Slot       : {change.slot if change.slot is not None else 'n/a'}")
    lines.append(f"    Block Time : {change.block_time if change.block_time is not None else 'n/a'}")
    lines.append(f"    Signature  : {change.signature}")
    return lines


def render_text(report: CheckReport) -> str:
    """Render *report* as the human-readable status report."""
    verdict = report.assessment.verdict
    lines = [
        _RULE,
        "  STATUS REPORT",
        _RULE,
        f"  Program ID   : {report.program_id}",
        f"  ProgramData  : {report.program_data}",
        f"  Idl Account  : {report.idl_account}",
        _THIN_RULE,
    ]
    lines += _change_lines("Latest Program Upgrade", report.program_change)
    lines += _change_lines("Latest IDL Upgrade", report.idl_change)
    lines.append(_RULE)
    lines.append(f"  RESULT: {verdict.value}")
    if report.assessment.reason:
        lines.append(f"  {report.assessment.reason}")
    if verdict == Verdict.OUTDATED:
        lines.append("  Developers may be integrating against stale types.")
        lines.append(
            f"  ACTION: anchor idl upgrade {report.program_id} -f target/idl/<program>.json"
        )
    return "\n".join(lines)


def render_json(report: CheckReport) -> str:
    """Render *report* as indented JSON."""
    return report.model_dump_json(indent=2)


def render(report: CheckReport, output_format: str = "text") -> str:
    if output_format == "json":
        return render_json(report)
    return render_text(report)
