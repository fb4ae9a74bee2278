"""Pydantic models of the quote API.

Amounts travel as decimal strings (uint256), addresses as 0x-prefixed hex.
Trade details are a discriminated union on ``kind``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Discriminator, Field, Tag

from ecorouter.chains import ChainConfig
from ecorouter.models.currency import Currency, CurrencyAmount, NativeCurrency, Token
from ecorouter.models.trade import Trade, TradeType
from ecorouter.models.types import Address, Uint256
from ecorouter.routing.poller import TradeRequest


class CurrencyModel(BaseModel):
    """A currency; a null address means the chain's native currency."""

    address: Address | None = Field(default=None, description="Token address, null for native")
    decimals: int = Field(default=18, ge=0, le=77)
    symbol: str | None = None

    def to_currency(self, chain: ChainConfig) -> Currency:
        if self.address is None:
            return chain.native
        return Token(chain.chain_id, self.address, self.decimals, self.symbol)

    @classmethod
    def from_currency(cls, currency: Currency) -> CurrencyModel:
        if isinstance(currency, NativeCurrency):
            return cls(address=None, decimals=currency.decimals, symbol=currency.symbol)
        return cls(address=currency.address, decimals=currency.decimals, symbol=currency.symbol)


class QuoteRequest(BaseModel):
    """Swap to quote across all platforms of a chain."""

    chain_id: int = Field(alias="chainId")
    currency_in: CurrencyModel = Field(alias="currencyIn")
    currency_out: CurrencyModel = Field(alias="currencyOut")
    amount: Uint256 = Field(
        description="Input amount for exactInput, output amount for exactOutput"
    )
    trade_type: TradeType = Field(default=TradeType.EXACT_INPUT, alias="tradeType")
    multihop: bool = True
    slippage_bps: int = Field(default=50, ge=0, lt=10000, alias="slippageBps")

    model_config = {"populate_by_name": True}

    def to_trade_request(self, chain: ChainConfig) -> TradeRequest:
        """Convert to the router's request type.

        Raises:
            ValueError: If the currencies or amount are invalid for the chain
        """
        currency_in = self.currency_in.to_currency(chain)
        currency_out = self.currency_out.to_currency(chain)
        fixed = currency_in if self.trade_type == TradeType.EXACT_INPUT else currency_out
        return TradeRequest(
            chain_id=chain.chain_id,
            currency_in=currency_in,
            currency_out=currency_out,
            amount=CurrencyAmount(fixed, int(self.amount)),
            trade_type=self.trade_type,
            multihop=self.multihop,
            slippage_bps=self.slippage_bps,
        )


class RouteDetails(BaseModel):
    kind: Literal["route"] = "route"
    path: list[Address]
    symbols: list[str | None]


class BreakdownFillModel(BaseModel):
    name: str
    percentage: str


class BreakdownDetails(BaseModel):
    kind: Literal["breakdown"] = "breakdown"
    fills: list[BreakdownFillModel]


def _get_details_kind(v: dict[str, Any] | RouteDetails | BreakdownDetails) -> str:
    """Discriminator function for the trade details union."""
    if isinstance(v, dict):
        return str(v.get("kind", "route"))
    return v.kind


TradeDetailsModel = Annotated[
    Annotated[RouteDetails, Tag("route")] | Annotated[BreakdownDetails, Tag("breakdown")],
    Discriminator(_get_details_kind),
]


class TradeModel(BaseModel):
    """One platform's best trade."""

    platform: str
    trade_type: TradeType = Field(alias="tradeType")
    currency_in: CurrencyModel = Field(alias="currencyIn")
    currency_out: CurrencyModel = Field(alias="currencyOut")
    input_amount: Uint256 = Field(alias="inputAmount")
    output_amount: Uint256 = Field(alias="outputAmount")
    execution_price: str = Field(alias="executionPrice", description="Output per input, raw units")
    details: TradeDetailsModel

    model_config = {"populate_by_name": True}

    @classmethod
    def from_trade(cls, trade: Trade) -> TradeModel:
        """Serialize a trade.

        Raises:
            TypeError: If the trade details are of an unknown kind
        """
        details: RouteDetails | BreakdownDetails
        kind = getattr(trade.details, "kind", None)
        if kind == "route":
            details = RouteDetails(
                path=[token.address for token in trade.details.path],
                symbols=[token.symbol for token in trade.details.path],
            )
        elif kind == "breakdown":
            details = BreakdownDetails(
                fills=[
                    BreakdownFillModel(name=fill.name, percentage=str(fill.percentage))
                    for fill in trade.details.fills
                ]
            )
        else:
            raise TypeError(f"Unknown trade details kind: {kind!r}")

        price = trade.execution_price
        return cls(
            platform=trade.platform.name,
            trade_type=trade.trade_type,
            currency_in=CurrencyModel.from_currency(trade.input_amount.currency),
            currency_out=CurrencyModel.from_currency(trade.output_amount.currency),
            input_amount=trade.input_amount.raw,
            output_amount=trade.output_amount.raw,
            execution_price=f"{price.numerator}/{price.denominator}",
            details=details,
        )


class QuoteResponse(BaseModel):
    """Ranked trades, best first. Empty when nothing could be quoted."""

    trades: list[TradeModel] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> QuoteResponse:
        return cls(trades=[])


__all__ = [
    "BreakdownDetails",
    "CurrencyModel",
    "QuoteRequest",
    "QuoteResponse",
    "RouteDetails",
    "TradeModel",
]
