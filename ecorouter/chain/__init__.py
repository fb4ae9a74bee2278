"""On-chain access over JSON-RPC."""

from ecorouter.chain.rpc import JsonRpcClient

__all__ = ["JsonRpcClient"]
