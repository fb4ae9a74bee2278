"""API endpoints for the eco-router."""

import structlog
from fastapi import APIRouter, Depends

from ecorouter.aggregator import Aggregator, get_default_aggregator
from ecorouter.api.schemas import QuoteRequest, QuoteResponse, TradeModel
from ecorouter.chains import CHAINS

logger = structlog.get_logger()

router = APIRouter()


def get_aggregator() -> Aggregator:
    """Dependency provider for the aggregator instance.

    Override this in tests to inject a fake aggregator:
        app.dependency_overrides[get_aggregator] = lambda: fake_aggregator
    """
    return get_default_aggregator()


@router.post("/quote")
async def quote(
    request: QuoteRequest,
    aggregator: Aggregator = Depends(get_aggregator),
) -> QuoteResponse:
    """Quote a swap on every platform of the chain.

    Error Handling:
        - Invalid request schema: Returns 422 Validation Error (Pydantic)
        - Unknown chain or inconsistent currencies: Returns empty trades
        - Routing exception: Logs error, returns empty trades
    """
    logger.info(
        "received_quote_request",
        chain_id=request.chain_id,
        trade_type=request.trade_type.value,
        multihop=request.multihop,
    )

    chain = CHAINS.get(request.chain_id)
    if chain is None:
        logger.warning("unsupported_chain", chain_id=request.chain_id)
        return QuoteResponse.empty()

    try:
        trade_request = request.to_trade_request(chain)
    except ValueError as e:
        logger.warning("invalid_quote_request", chain_id=request.chain_id, error=str(e))
        return QuoteResponse.empty()

    try:
        trades = await aggregator.quote(trade_request)
    except Exception:
        # Return empty response rather than 500 error
        logger.exception("quote_error", chain_id=request.chain_id)
        return QuoteResponse.empty()

    return QuoteResponse(trades=[TradeModel.from_trade(trade) for trade in trades])
