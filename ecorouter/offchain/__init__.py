"""Off-chain quote aggregators."""

from ecorouter.offchain.zerox import ZeroXClient, ZeroXTrade

__all__ = ["ZeroXClient", "ZeroXTrade"]
