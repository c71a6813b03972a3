"""Tests for the Helius data source."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from idl_guard.data_sources import HeliusClient, SolanaRpcClient, build_data_source
from idl_guard.errors import RpcError
from idl_guard.models import AccountSnapshot, CheckConfig


@pytest.fixture
def helius():
    return HeliusClient("KEY", cluster="devnet", timeout=5)


class TestGetLatestChange:

    @pytest.mark.asyncio
    async def test_timestamp_ordering(self, helius):
        txs = [{"signature": "sigH", "timestamp": 1700000123, "slot": 250000000}]
        with patch(
            "idl_guard.data_sources.helius.async_http_get",
            new_callable=AsyncMock, return_value=txs,
        ) as get:
            record = await helius.get_latest_change("addr")
        assert record.unit == "timestamp"
        assert record.order == 1700000123
        assert record.block_time == 1700000123
        assert record.slot == 250000000
        url = get.call_args.args[1]
        assert url == "https://api-devnet.helius.xyz/v0/addresses/addr/transactions"
        assert get.call_args.kwargs["params"] == {"api-key": "KEY", "limit": 1}

    @pytest.mark.asyncio
    async def test_empty_history(self, helius):
        with patch(
            "idl_guard.data_sources.helius.async_http_get",
            new_callable=AsyncMock, return_value=[],
        ):
            assert await helius.get_latest_change("addr") is None

    @pytest.mark.asyncio
    async def test_unexpected_body(self, helius):
        with patch(
            "idl_guard.data_sources.helius.async_http_get",
            new_callable=AsyncMock, return_value={"error": "invalid api key"},
        ):
            with pytest.raises(RpcError):
                await helius.get_latest_change("addr")


class TestAccounts:

    @pytest.mark.asyncio
    async def test_delegates_to_rpc(self, helius):
        snapshot = AccountSnapshot(owner="owner", data=b"\x03")
        with patch.object(
            helius._rpc, "get_account_owner_and_data",
            new_callable=AsyncMock, return_value=snapshot,
        ):
            assert await helius.get_account_owner_and_data("prog") == snapshot
        assert helius._rpc._endpoint == "https://devnet.helius-rpc.com/?api-key=KEY"

    def test_unknown_cluster(self):
        with pytest.raises(ValueError):
            HeliusClient("KEY", cluster="testnet")

    @pytest.mark.asyncio
    async def test_close_closes_both_clients(self, helius):
        helius._rpc.close = AsyncMock()
        mock_client = MagicMock()
        mock_client.is_closed = False
        mock_client.aclose = AsyncMock()
        helius._client = mock_client
        await helius.close()
        helius._rpc.close.assert_awaited_once()
        mock_client.aclose.assert_awaited_once()


class TestBuildDataSource:

    def test_rpc(self):
        source = build_data_source(CheckConfig(program_id="p", rpc_url="https://rpc.example.com"))
        assert isinstance(source, SolanaRpcClient)
        assert source.order_unit == "slot"

    def test_helius(self):
        source = build_data_source(CheckConfig(program_id="p", helius_api_key="KEY"))
        assert isinstance(source, HeliusClient)
        assert source.order_unit == "timestamp"

    def test_none(self):
        with pytest.raises(ValueError):
            build_data_source(CheckConfig(program_id="p"))
