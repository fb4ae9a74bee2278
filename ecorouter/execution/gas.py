"""Gas estimation for swap transactions.

Estimates are padded with a fixed margin before being used as a gas limit.
When an estimate fails, the transaction is replayed with ``eth_call`` to
recover the revert reason and turn it into a message a user can act on.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

import structlog
from eth_abi import decode  # type: ignore[attr-defined]
from eth_abi.exceptions import DecodingError

from ecorouter.constants import BIPS_BASE, GAS_MARGIN_BPS
from ecorouter.errors import RpcError

if TYPE_CHECKING:
    from ecorouter.chain.rpc import JsonRpcClient
    from ecorouter.models.trade import SwapOptions, Trade, UnsignedTransaction

logger = structlog.get_logger()

# Error(string) selector used by require() reverts
ERROR_STRING_SELECTOR = "0x08c379a0"

SLIPPAGE_REVERT_REASONS = frozenset(
    {
        "DXswapRouter: INSUFFICIENT_OUTPUT_AMOUNT",
        "DXswapRouter: EXCESSIVE_INPUT_AMOUNT",
        "UniswapV2Router: INSUFFICIENT_OUTPUT_AMOUNT",
        "UniswapV2Router: EXCESSIVE_INPUT_AMOUNT",
    }
)

SLIPPAGE_FAILURE_MESSAGE = (
    "This transaction will not succeed either due to price movement or fee on transfer. "
    "Try increasing your slippage tolerance."
)
UNEXPECTED_ESTIMATE_FAILURE_MESSAGE = "Unexpected issue with estimating the gas. Please try again."


class GasEstimator(Protocol):
    """Anything that can estimate the gas of a transaction."""

    async def estimate_gas(self, transaction: UnsignedTransaction, sender: str) -> int: ...


class JsonRpcGasEstimator:
    """Estimates gas with ``eth_estimateGas``."""

    def __init__(self, client: JsonRpcClient) -> None:
        self.client = client

    async def estimate_gas(self, transaction: UnsignedTransaction, sender: str) -> int:
        return await self.client.estimate_gas(transaction.to_rpc(sender))


def calculate_gas_margin(estimate: int) -> int:
    """Add the safety margin (10%) to a gas estimate."""
    return estimate * (BIPS_BASE + GAS_MARGIN_BPS) // BIPS_BASE


async def _estimate_one(
    trade: Trade, options: SwapOptions, estimator: GasEstimator, sender: str
) -> int | None:
    try:
        transaction = trade.swap_transaction(options)
        estimate = await estimator.estimate_gas(transaction, sender)
    except Exception as e:
        logger.warning(
            "gas_estimate_failed",
            platform=trade.platform.name,
            error=str(e),
        )
        return None
    return calculate_gas_margin(estimate)


async def estimate_swap_gas(
    trades: Sequence[Trade],
    options: SwapOptions,
    estimator: GasEstimator,
    sender: str,
) -> list[int | None]:
    """Estimate the gas limit of each trade's swap transaction.

    Args:
        trades: Ranked trades
        options: Swap options used to build the transactions
        estimator: Gas estimator
        sender: Account that would submit the swaps

    Returns:
        One padded gas limit per trade, None where the estimate failed
    """
    return list(
        await asyncio.gather(
            *(_estimate_one(trade, options, estimator, sender) for trade in trades)
        )
    )


def decode_revert_reason(data: object) -> str | None:
    """Extract the message of an ``Error(string)`` revert payload."""
    if not isinstance(data, str) or not data.startswith(ERROR_STRING_SELECTOR):
        return None
    try:
        (reason,) = decode(["string"], bytes.fromhex(data[len(ERROR_STRING_SELECTOR) :]))
    except (DecodingError, ValueError):
        return None
    return reason


def describe_swap_failure(reason: str | None) -> str:
    """User-facing explanation of a router revert reason."""
    if reason in SLIPPAGE_REVERT_REASONS:
        return SLIPPAGE_FAILURE_MESSAGE
    return (
        f"The transaction cannot succeed due to error: {reason}. "
        "This is probably an issue with one of the tokens you are swapping."
    )


async def explain_estimate_failure(
    transaction: UnsignedTransaction, client: JsonRpcClient, sender: str
) -> str:
    """Replay a transaction whose gas estimate failed and explain why.

    Returns:
        A message describing the revert, or a generic message when the call
        unexpectedly succeeds
    """
    try:
        await client.eth_call(transaction.to_rpc(sender))
    except RpcError as e:
        reason = decode_revert_reason(e.data) or str(e)
        logger.debug("swap_call_reverted", to=transaction.to, reason=reason)
        return describe_swap_failure(reason)
    logger.debug("swap_call_succeeded_after_failed_estimate", to=transaction.to)
    return UNEXPECTED_ESTIMATE_FAILURE_MESSAGE


__all__ = [
    "GasEstimator",
    "JsonRpcGasEstimator",
    "calculate_gas_margin",
    "decode_revert_reason",
    "describe_swap_failure",
    "estimate_swap_gas",
    "explain_estimate_failure",
]
