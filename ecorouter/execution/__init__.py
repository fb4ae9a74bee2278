"""Helpers to prepare the execution of a chosen trade."""

from ecorouter.execution.gas import (
    GasEstimator,
    JsonRpcGasEstimator,
    calculate_gas_margin,
    describe_swap_failure,
    estimate_swap_gas,
)

__all__ = [
    "GasEstimator",
    "JsonRpcGasEstimator",
    "calculate_gas_margin",
    "describe_swap_failure",
    "estimate_swap_gas",
]
