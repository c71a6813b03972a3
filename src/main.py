"""
Command line interface for IDL Guard.

Checks whether a program's on-chain Anchor IDL was updated after the last
deployment of the program binary.

Usage::

    python src/main.py --program-id <PROGRAM_ID> --rpc-url <RPC_URL>
    python src/main.py --program-id <PROGRAM_ID> --helius-api-key <KEY> --cluster devnet

Exit code 0 means up to date (or not applicable), 1 means outdated,
indeterminate, or a configuration / transport error.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

# Ensure ``src/`` is on the import path
sys.path.insert(0, os.path.dirname(__file__))

from dotenv import load_dotenv

# A .env file is read before config looks at the environment and never
# overrides variables that are already set (e.g. in CI)
load_dotenv()

import config  # noqa: E402
from idl_guard.checker import run_check  # noqa: E402
from idl_guard.data_sources import build_data_source  # noqa: E402
from idl_guard.errors import ConfigError  # noqa: E402
from idl_guard.logging_config import program_id_ctx, setup_logging  # noqa: E402
from idl_guard.models import CheckConfig  # noqa: E402
from idl_guard.report import render  # noqa: E402

logger = logging.getLogger("idl_guard")


async def _run(check_config: CheckConfig) -> int:
    """Async entry point.  Returns the process exit code."""
    source = build_data_source(check_config)
    try:
        outcome = await run_check(check_config, source)
    finally:
        await source.close()

    if outcome.report is not None:
        print(render(outcome.report, check_config.output_format))
    elif check_config.output_format == "json":
        print(outcome.model_dump_json(indent=2))
    else:
        print(outcome.message)
    return outcome.exit_code


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Detect an on-chain Anchor IDL that is older than its program"
    )
    parser.add_argument(
        "--program-id",
        help="Program address to check (env: PROGRAM_ID)",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--rpc-url",
        help="Solana JSON-RPC endpoint (env: RPC_URL)",
    )
    source.add_argument(
        "--helius-api-key",
        help="Helius API key, used instead of --rpc-url (env: HELIUS_API_KEY)",
    )
    parser.add_argument(
        "--cluster",
        choices=config.CLUSTERS,
        help="Helius cluster (env: SOLANA_CLUSTER, default mainnet-beta)",
    )
    parser.add_argument(
        "--on-missing-program-history",
        choices=("fail", "warn"),
        help="Outcome when the ProgramData account has no history (default fail)",
    )
    parser.add_argument(
        "--on-unexpected-owner",
        choices=("skip", "fail"),
        help="Outcome when the program is not owned by the upgradeable loader (default skip)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Output the report as JSON",
    )
    return parser


def main() -> None:
    """Entry point for the CLI."""
    args = _build_parser().parse_args()
    setup_logging(config.LOG_LEVEL, config.LOG_FORMAT)

    try:
        check_config = config.load_check_config(
            program_id=args.program_id,
            rpc_url=args.rpc_url,
            helius_api_key=args.helius_api_key,
            cluster=args.cluster,
            on_missing_program_history=args.on_missing_program_history,
            on_unexpected_owner=args.on_unexpected_owner,
            output_format="json" if args.as_json else "text",
        )
    except ConfigError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    program_id_ctx.set(check_config.program_id)
    try:
        exit_code = asyncio.run(_run(check_config))
    except Exception:
        logger.exception("Unhandled error")
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
