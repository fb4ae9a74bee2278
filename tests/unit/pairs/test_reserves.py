"""Tests for reading pair reserves over JSON-RPC."""

import json

import httpx
import pytest
from eth_abi import encode  # type: ignore[attr-defined]

from ecorouter.chain.rpc import JsonRpcClient
from ecorouter.errors import ReserveFetchError
from ecorouter.pairs.reserves import (
    GET_RESERVES_SELECTOR,
    JsonRpcReserveSource,
    Reserves,
)
from tests.helpers import TEST_PLATFORM

PAIR = "0x" + "12" * 20


def _source(handler) -> JsonRpcReserveSource:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return JsonRpcReserveSource(JsonRpcClient("https://node.test", client=http))


def _respond(payload: dict):
    return lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, **payload})


class TestJsonRpcReserveSource:
    @pytest.mark.asyncio
    async def test_decodes_get_reserves(self):
        calls = []
        encoded = "0x" + encode(["uint112", "uint112", "uint32"], [10**21, 2 * 10**12, 77]).hex()

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(json.loads(request.content))
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": encoded})

        reserves = await _source(handler).get_reserves(PAIR, TEST_PLATFORM)

        assert reserves == Reserves(10**21, 2 * 10**12, 77)
        assert calls[0]["method"] == "eth_call"
        assert calls[0]["params"][0] == {"to": PAIR, "data": GET_RESERVES_SELECTOR}

    @pytest.mark.asyncio
    async def test_empty_result_means_no_pair(self):
        """Calling an address without code returns empty data."""
        assert await _source(_respond({"result": "0x"})).get_reserves(PAIR, TEST_PLATFORM) is None

    @pytest.mark.asyncio
    async def test_revert_means_no_pair(self):
        source = _source(_respond({"error": {"code": -32000, "message": "execution reverted"}}))
        assert await source.get_reserves(PAIR, TEST_PLATFORM) is None

    @pytest.mark.asyncio
    async def test_revert_with_data_means_no_pair(self):
        error = {"code": 3, "message": "execution reverted", "data": "0x08c379a0"}
        assert await _source(_respond({"error": error})).get_reserves(PAIR, TEST_PLATFORM) is None

    @pytest.mark.parametrize(
        "error",
        [
            {"code": -32005, "message": "limit exceeded"},
            {"code": 429, "message": "Too Many Requests"},
            {"code": -32000, "message": "header not found"},
        ],
    )
    @pytest.mark.asyncio
    async def test_node_error_raises(self, error):
        source = _source(_respond({"error": error}))
        with pytest.raises(ReserveFetchError):
            await source.get_reserves(PAIR, TEST_PLATFORM)

    @pytest.mark.asyncio
    async def test_transport_failure_raises(self):
        source = _source(lambda request: httpx.Response(503))
        with pytest.raises(ReserveFetchError):
            await source.get_reserves(PAIR, TEST_PLATFORM)

    @pytest.mark.asyncio
    async def test_truncated_result_raises(self):
        source = _source(_respond({"result": "0x" + "00" * 31}))
        with pytest.raises(ReserveFetchError):
            await source.get_reserves(PAIR, TEST_PLATFORM)

    @pytest.mark.asyncio
    async def test_non_hex_result_raises(self):
        source = _source(_respond({"result": "0xzz"}))
        with pytest.raises(ReserveFetchError):
            await source.get_reserves(PAIR, TEST_PLATFORM)
