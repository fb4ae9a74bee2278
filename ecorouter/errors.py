"""Error classes for the routing core.

Discovery-phase errors (fetches, AMM math) are caught inside the router and
degrade to fewer candidates. Only user-initiated operations let them escape.
"""


class EcoRouterError(Exception):
    """Base error for eco-router operations."""

    pass


class InvalidPairError(EcoRouterError, ValueError):
    """Pair tokens are identical, on different chains, or not canonically ordered."""

    pass


class InsufficientReservesError(EcoRouterError):
    """Pair cannot provide the requested output amount."""

    pass


class InsufficientInputAmountError(EcoRouterError):
    """Input amount is too small to produce any output."""

    pass


class PlatformUnsupportedError(EcoRouterError):
    """Platform has no deployment on the requested chain."""

    def __init__(self, platform: str, chain_id: int) -> None:
        super().__init__(f"{platform} does not support chain {chain_id}")
        self.platform = platform
        self.chain_id = chain_id


class FetchError(EcoRouterError):
    """A collaborator call over the network failed."""

    pass


class RpcError(FetchError):
    """JSON-RPC transport failure or error response."""

    def __init__(self, message: str, code: int | None = None, data: object = None) -> None:
        super().__init__(message)
        self.code = code
        self.data = data

    @property
    def is_revert(self) -> bool:
        """Whether the node reports the call itself as reverted.

        Code 3 carries revert data; geth answers a bare revert with -32000 and an
        "execution reverted" message. Other coded errors (rate limits, missing
        blocks) are node failures.
        """
        if self.code is None:
            return False
        if self.code == 3:
            return True
        if isinstance(self.data, str) and self.data.startswith("0x") and len(self.data) > 2:
            return True
        return "execution reverted" in str(self).lower()


class ReserveFetchError(FetchError):
    """Reserves of a pair could not be fetched."""

    pass


class QuoteFetchError(FetchError):
    """Off-chain quote could not be fetched or parsed."""

    pass
