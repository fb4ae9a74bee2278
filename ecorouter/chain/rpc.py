"""Minimal async JSON-RPC client for EVM nodes.

Only the two calls the router needs are wrapped (``eth_call`` and
``eth_estimateGas``); anything else goes through ``call``.
"""

from __future__ import annotations

import itertools
from typing import Any

import httpx
import structlog

from ecorouter.errors import RpcError

logger = structlog.get_logger()


class JsonRpcClient:
    """JSON-RPC 2.0 over HTTP.

    The client owns its ``httpx.AsyncClient`` unless one is passed in, in
    which case closing is left to the caller.
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            url: Node endpoint
            timeout_seconds: Per-request timeout
            client: Optional shared HTTP client (used by tests with a mock transport)
        """
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._ids = itertools.count(1)

    async def call(self, method: str, params: list[Any]) -> Any:
        """Send one request and return its ``result``.

        Raises:
            RpcError: On transport failure, a non-2xx status, malformed JSON or
                an error response
        """
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            response = await self._client.post(self.url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise RpcError(f"{method} request failed: {e}") from e
        except ValueError as e:
            raise RpcError(f"{method} returned invalid JSON") from e

        if not isinstance(body, dict):
            raise RpcError(f"{method} returned an unexpected payload")
        error = body.get("error")
        if error is not None:
            logger.debug("rpc_error_response", method=method, error=error)
            if isinstance(error, dict):
                raise RpcError(
                    str(error.get("message", "unknown error")),
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise RpcError(str(error))
        if "result" not in body:
            raise RpcError(f"{method} response has no result")
        return body["result"]

    async def eth_call(self, call: dict[str, str], block: str = "latest") -> str:
        result = await self.call("eth_call", [call, block])
        if not isinstance(result, str):
            raise RpcError("eth_call returned a non-hex result")
        return result

    async def estimate_gas(self, call: dict[str, str]) -> int:
        """Gas estimate for a call object, as an int."""
        result = await self.call("eth_estimateGas", [call])
        try:
            return int(result, 16)
        except (TypeError, ValueError) as e:
            raise RpcError(f"eth_estimateGas returned {result!r}") from e

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["JsonRpcClient"]
