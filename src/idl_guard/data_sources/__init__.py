"""
Chain data sources.

``build_data_source`` wires exactly one concrete transport from the
resolved configuration; both lookups of a run share it.
"""

from __future__ import annotations

import logging

from .base import ChainDataSource
from .helius import HeliusClient
from .solana_rpc import SolanaRpcClient
from ..models import CheckConfig

logger = logging.getLogger(__name__)

__all__ = ["ChainDataSource", "HeliusClient", "SolanaRpcClient", "build_data_source"]


def build_data_source(config: CheckConfig) -> ChainDataSource:
    """Create the data source selected by *config*."""
    if config.source_kind == "helius":
        logger.debug("Using Helius data source (%s)", config.cluster)
        return HeliusClient(
            config.helius_api_key,
            cluster=config.cluster,
            timeout=config.request_timeout,
            max_retries=config.max_retries,
            history_limit=config.history_page_size,
        )
    if config.source_kind == "rpc" and config.rpc_url:
        logger.debug("Using Solana RPC data source")
        return SolanaRpcClient(
            config.rpc_url,
            timeout=config.request_timeout,
            max_retries=config.max_retries,
            history_limit=config.history_page_size,
        )
    raise ValueError("CheckConfig has no data source configured")
