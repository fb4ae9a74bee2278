"""Router configuration.

Configuration is a frozen dataclass so it can be passed explicitly to the
sources and the poller. ``RouterConfig.from_env`` builds one from
``ECOROUTER_*`` environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

ENV_PREFIX = "ECOROUTER_"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class RouterConfig:
    """Routing policy and tuning knobs.

    Attributes:
        multihop: Whether routes may go through intermediate tokens
        slippage_bps: Default slippage tolerance in basis points
        zerox_debounce_seconds: Delay before firing an off-chain quote request
        max_hops_multihop: Hop limit when multihop is enabled
        max_hops_single: Hop limit when multihop is disabled
        max_results_per_platform: Trades kept per platform by the search engine
        request_timeout_seconds: Timeout for outgoing HTTP / JSON-RPC requests
        zerox_api_key: Optional 0x API key
    """

    multihop: bool = True
    slippage_bps: int = 50
    zerox_debounce_seconds: float = 0.5
    max_hops_multihop: int = 3
    max_hops_single: int = 1
    max_results_per_platform: int = 1
    request_timeout_seconds: float = 10.0
    zerox_api_key: str | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.slippage_bps < 10000:
            raise ValueError("slippage_bps must be in [0, 10000)")
        if self.max_hops_single < 1 or self.max_hops_multihop < self.max_hops_single:
            raise ValueError("hop limits must satisfy 1 <= single <= multihop")
        if self.max_results_per_platform < 1:
            raise ValueError("max_results_per_platform must be positive")
        if self.zerox_debounce_seconds < 0:
            raise ValueError("zerox_debounce_seconds must be non-negative")

    def max_hops(self, multihop: bool | None = None) -> int:
        """Hop limit for a request: 3 with multihop, 1 without (by default)."""
        enabled = self.multihop if multihop is None else multihop
        return self.max_hops_multihop if enabled else self.max_hops_single

    @classmethod
    def from_env(cls) -> RouterConfig:
        """Build a config from environment variables, falling back to defaults."""
        defaults = cls()
        return cls(
            multihop=_env_bool("MULTIHOP", defaults.multihop),
            slippage_bps=int(
                os.environ.get(ENV_PREFIX + "SLIPPAGE_BPS", str(defaults.slippage_bps))
            ),
            zerox_debounce_seconds=float(
                os.environ.get(
                    ENV_PREFIX + "ZEROX_DEBOUNCE_SECONDS", str(defaults.zerox_debounce_seconds)
                )
            ),
            request_timeout_seconds=float(
                os.environ.get(
                    ENV_PREFIX + "REQUEST_TIMEOUT_SECONDS", str(defaults.request_timeout_seconds)
                )
            ),
            zerox_api_key=os.environ.get(ENV_PREFIX + "ZEROX_API_KEY") or None,
        )


def rpc_url_for_chain(chain_id: int) -> str | None:
    """JSON-RPC endpoint for a chain from ``ECOROUTER_RPC_URL_<CHAIN_ID>``."""
    return os.environ.get(f"{ENV_PREFIX}RPC_URL_{chain_id}") or None


DEFAULT_CONFIG = RouterConfig()

__all__ = ["DEFAULT_CONFIG", "RouterConfig", "rpc_url_for_chain"]
