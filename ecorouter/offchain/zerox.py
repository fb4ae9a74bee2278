"""0x swap API client.

Fetches a firm quote from ``GET /swap/v1/quote`` and turns it into a
``ZeroXTrade``. The quote already carries the calldata to execute, so the
trade only hands it back when asked for a swap transaction.

API reference: https://0x.org/docs/0x-swap-api/api-references/get-swap-v1-quote
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError

from ecorouter.constants import BIPS_BASE
from ecorouter.errors import PlatformUnsupportedError, QuoteFetchError
from ecorouter.models.currency import Currency, CurrencyAmount, NativeCurrency
from ecorouter.models.platform import ZeroXPlatform
from ecorouter.models.trade import (
    Breakdown,
    BreakdownFill,
    SwapOptions,
    Trade,
    TradeType,
    UnsignedTransaction,
)
from ecorouter.models.types import Address, Bytes, Uint256, normalize_address

logger = structlog.get_logger()


class ZeroXSourceShare(BaseModel):
    """Share of the fill routed through one liquidity source."""

    name: str
    proportion: Decimal = Field(ge=0, le=1)


class ZeroXQuoteResponse(BaseModel):
    """Fields of the quote response the router relies on."""

    to: Address
    data: Bytes
    value: Uint256 = "0"
    sell_amount: Uint256 = Field(alias="sellAmount")
    buy_amount: Uint256 = Field(alias="buyAmount")
    estimated_gas: Uint256 | None = Field(default=None, alias="estimatedGas")
    sources: list[ZeroXSourceShare] = Field(default_factory=list)

    model_config = {"populate_by_name": True, "extra": "ignore"}


@dataclass(frozen=True)
class ZeroXTrade(Trade):
    """Trade quoted by the 0x API, executed with the quote's own calldata.

    Attributes:
        transaction: Pre-built swap transaction from the quote
        gas_estimate: 0x's gas estimate, if provided
    """

    details: Breakdown
    platform: ZeroXPlatform
    transaction: UnsignedTransaction
    gas_estimate: int | None = None

    def swap_transaction(self, options: SwapOptions) -> UnsignedTransaction:
        # Slippage was fixed when the quote was requested
        logger.debug(
            "zerox_swap_transaction",
            recipient=options.recipient,
            slippage_bps=options.allowed_slippage_bps,
        )
        return self.transaction


def _token_param(currency: Currency) -> str:
    if isinstance(currency, NativeCurrency):
        return currency.symbol
    return currency.address


def breakdown_from_sources(sources: list[ZeroXSourceShare]) -> Breakdown:
    """Breakdown of the sources that received a non-zero share."""
    return Breakdown(
        fills=tuple(
            BreakdownFill(name=source.name, percentage=source.proportion * 100)
            for source in sources
            if source.proportion > 0
        )
    )


class ZeroXClient:
    """Async client for the 0x swap API."""

    def __init__(
        self,
        platform: ZeroXPlatform,
        api_key: str | None = None,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            platform: 0x platform configuration (API URL per chain)
            api_key: Optional API key sent as ``0x-api-key``
            timeout_seconds: Per-request timeout
            client: Optional shared HTTP client
        """
        self.platform = platform
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._headers = {"0x-api-key": api_key} if api_key else None

    async def _get(self, url: str, params: dict[str, str]) -> dict[str, Any]:
        try:
            response = await self._client.get(url, params=params, headers=self._headers)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise QuoteFetchError(
                f"0x quote failed with status {e.response.status_code}: {e.response.text!r}"
            ) from e
        except httpx.HTTPError as e:
            raise QuoteFetchError(f"0x quote request failed: {e}") from e
        except ValueError as e:
            raise QuoteFetchError("0x quote returned invalid JSON") from e
        if not isinstance(body, dict):
            raise QuoteFetchError("0x quote returned an unexpected payload")
        return body

    async def quote(
        self,
        chain_id: int,
        currency_in: Currency,
        currency_out: Currency,
        amount: CurrencyAmount,
        trade_type: TradeType,
        slippage_bps: int,
    ) -> ZeroXTrade:
        """Fetch a quote and build the corresponding trade.

        Args:
            chain_id: Chain of the swap
            currency_in: Currency sold
            currency_out: Currency bought
            amount: Sell amount for EXACT_INPUT, buy amount for EXACT_OUTPUT
            trade_type: Which side is fixed
            slippage_bps: Slippage tolerance in basis points

        Raises:
            PlatformUnsupportedError: If 0x is not available on the chain
            QuoteFetchError: On HTTP failure or an unparseable response
        """
        if not self.platform.supports_chain(chain_id):
            raise PlatformUnsupportedError(self.platform.name, chain_id)

        amount_key = "sellAmount" if trade_type == TradeType.EXACT_INPUT else "buyAmount"
        params = {
            "sellToken": _token_param(currency_in),
            "buyToken": _token_param(currency_out),
            amount_key: str(amount.raw),
            "slippagePercentage": str(Decimal(slippage_bps) / BIPS_BASE),
        }
        url = f"{self.platform.api_url(chain_id)}/swap/v1/quote"
        logger.debug("zerox_quote_request", chain_id=chain_id, **params)
        body = await self._get(url, params)

        try:
            quote = ZeroXQuoteResponse.model_validate(body)
            details = breakdown_from_sources(quote.sources)
        except (ValidationError, ValueError) as e:
            raise QuoteFetchError(f"Malformed 0x quote: {e}") from e

        return ZeroXTrade(
            platform=self.platform,
            trade_type=trade_type,
            input_amount=CurrencyAmount(currency_in, int(quote.sell_amount)),
            output_amount=CurrencyAmount(currency_out, int(quote.buy_amount)),
            details=details,
            transaction=UnsignedTransaction(
                chain_id=chain_id,
                to=normalize_address(quote.to),
                data=quote.data,
                value=int(quote.value),
            ),
            gas_estimate=int(quote.estimated_gas) if quote.estimated_gas is not None else None,
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = [
    "ZeroXClient",
    "ZeroXQuoteResponse",
    "ZeroXSourceShare",
    "ZeroXTrade",
    "breakdown_from_sources",
]
