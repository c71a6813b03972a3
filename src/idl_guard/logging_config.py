"""
Logging configuration for IDL Guard.

Supports two formats:
- ``text`` (default): human-readable log lines
- ``json``: structured JSON for CI log aggregation

Every record is stamped with the program under check, so logs from a CI
job that checks several programs can be told apart.  Logs go to stderr;
stdout is reserved for the status report.
"""

from __future__ import annotations

import json as json_mod
import logging
import sys
from contextvars import ContextVar

# Program address of the check currently running
program_id_ctx: ContextVar[str] = ContextVar("program_id", default="-")


def short_program_id(program_id: str) -> str:
    """Abbreviate a base-58 address for text log lines (``Fg6P…sLnS``)."""
    if len(program_id) <= 12:
        return program_id
    return f"{program_id[:4]}…{program_id[-4:]}"


class JSONFormatter(logging.Formatter):
    """Emit each log record as a single JSON line carrying the full program id."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "program": program_id_ctx.get("-"),
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json_mod.dumps(entry, default=str)


class _ProgramFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.program = short_program_id(program_id_ctx.get("-"))  # type: ignore[attr-defined]
        return True


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Configure the root logger."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] [%(program)s] %(name)s %(message)s",
                defaults={"program": "-"},
            )
        )
    handler.addFilter(_ProgramFilter())
    root.addHandler(handler)
