"""Base classes for AMM implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SwapResult:
    """Result of simulating a swap through a single pair.

    ``pair_after`` is a fresh pair snapshot with the post-swap reserves; the
    simulated pair itself is never modified.
    """

    amount_in: int
    amount_out: int
    pair_after: Any


class AMM(ABC):
    """Abstract base class for AMM invariant math.

    Implementations may extend the base method signatures with additional
    optional parameters. For example, UniswapV2 adds a fee_multiplier
    parameter to support forks with different fees.
    """

    @abstractmethod
    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate output amount for a given input.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount
        """
        ...

    @abstractmethod
    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate required input for a desired output.

        Args:
            amount_out: Desired output token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Required input token amount
        """
        ...


__all__ = ["AMM", "SwapResult"]
