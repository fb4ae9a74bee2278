"""Concurrent polling of all platforms for one swap request.

Every call to ``update`` starts one fetch task per supported platform. Tasks
of debounced sources sleep first; a newer request cancels them if they have
not fired yet. Fetches already in flight are never cancelled, but their result
is dropped when it lands for a request that is no longer current.

All state lives on the event loop thread, so no locking is needed.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

import structlog

from ecorouter.models.currency import Currency, CurrencyAmount, currency_equals
from ecorouter.models.platform import Platform
from ecorouter.models.trade import Trade, TradeType
from ecorouter.routing.ranking import merge_and_rank
from ecorouter.routing.sources import TradeSource

logger = structlog.get_logger()


@dataclass(frozen=True)
class TradeRequest:
    """Everything that identifies a swap quote request.

    Two requests comparing equal get the same trades, so equality decides
    whether a landing result is still current.

    Attributes:
        chain_id: Chain of the swap
        currency_in: Currency sold
        currency_out: Currency bought
        amount: Input amount for EXACT_INPUT, output amount for EXACT_OUTPUT
        trade_type: Which side is fixed
        multihop: Allow routes through intermediate tokens
        slippage_bps: Slippage tolerance in basis points
    """

    chain_id: int
    currency_in: Currency
    currency_out: Currency
    amount: CurrencyAmount
    trade_type: TradeType
    multihop: bool = True
    slippage_bps: int = 50

    def __post_init__(self) -> None:
        if {self.currency_in.chain_id, self.currency_out.chain_id} != {self.chain_id}:
            raise ValueError(f"Currencies must be on chain {self.chain_id}")
        fixed = self.currency_in if self.trade_type == TradeType.EXACT_INPUT else self.currency_out
        if not currency_equals(self.amount.currency, fixed):
            raise ValueError("Amount currency does not match the fixed side of the trade")
        if not 0 <= self.slippage_bps < 10000:
            raise ValueError("slippage_bps must be in [0, 10000)")


class PlatformStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"  # waiting for the debounce delay
    LOADING = "loading"
    READY = "ready"
    UNSUPPORTED = "unsupported"
    FAILED = "failed"


@dataclass(frozen=True)
class PlatformState:
    """Latest known outcome of one platform."""

    platform: Platform
    status: PlatformStatus = PlatformStatus.IDLE
    trade: Trade | None = None
    error: str | None = None
    request: TradeRequest | None = None


@dataclass
class _Fetch:
    request: TradeRequest
    task: asyncio.Task[None] | None = None
    fired: bool = False


UpdateCallback = Callable[[TradeRequest, list[Trade]], None]


class MultiPlatformPoller:
    """Polls every trade source for the latest request and ranks the results."""

    def __init__(
        self,
        sources: Sequence[TradeSource],
        on_update: UpdateCallback | None = None,
        *,
        debounce: bool = True,
    ) -> None:
        """Initialize the poller.

        Args:
            sources: Trade sources in platform enumeration order (ranking tie-break)
            on_update: Called with the current ranking whenever a platform lands a result
            debounce: Honor the debounce delay of sources; one-shot callers turn it off
        """
        self.sources = list(sources)
        self.on_update = on_update
        self.debounce = debounce
        self._current: TradeRequest | None = None
        self._states = [PlatformState(source.platform) for source in self.sources]
        self._fetches: list[_Fetch | None] = [None] * len(self.sources)
        self._in_flight: set[asyncio.Task[None]] = set()

    @property
    def current_request(self) -> TradeRequest | None:
        return self._current

    def platform_states(self) -> list[PlatformState]:
        return list(self._states)

    def update(self, request: TradeRequest, *, force: bool = False) -> None:
        """Make ``request`` current and start fetching it on every platform.

        Re-submitting the current request is a no-op unless ``force`` is set.
        Must be called from a running event loop.
        """
        if request == self._current and not force:
            return
        self._current = request

        for index, source in enumerate(self.sources):
            self._retire(index)

            if not source.supports(request.chain_id):
                self._states[index] = PlatformState(
                    source.platform, PlatformStatus.UNSUPPORTED, request=request
                )
                continue

            fetch = _Fetch(request)
            debounced = self._delay(source) > 0
            self._states[index] = PlatformState(
                source.platform,
                PlatformStatus.PENDING if debounced else PlatformStatus.LOADING,
                request=request,
            )
            fetch.task = asyncio.create_task(
                self._run(index, source, fetch), name=f"fetch-{source.platform.name}"
            )
            self._fetches[index] = fetch

    def _delay(self, source: TradeSource) -> float:
        return source.debounce_seconds if self.debounce else 0.0

    def _retire(self, index: int) -> None:
        """Drop the fetch of a platform: cancel it if it has not fired yet."""
        fetch = self._fetches[index]
        self._fetches[index] = None
        if fetch is None or fetch.task is None or fetch.task.done():
            return
        if not fetch.fired:
            fetch.task.cancel()
            return
        self._in_flight.add(fetch.task)
        fetch.task.add_done_callback(self._in_flight.discard)

    async def _run(self, index: int, source: TradeSource, fetch: _Fetch) -> None:
        delay = self._delay(source)
        if delay > 0:
            await asyncio.sleep(delay)
        fetch.fired = True
        if fetch.request == self._current:
            self._states[index] = PlatformState(
                source.platform, PlatformStatus.LOADING, request=fetch.request
            )

        try:
            trade = await source.best_trade(fetch.request)
        except Exception as e:
            if fetch.request != self._current:
                logger.debug("stale_failure_discarded", platform=source.platform.name)
                return
            logger.warning(
                "platform_fetch_failed",
                platform=source.platform.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            self._states[index] = PlatformState(
                source.platform, PlatformStatus.FAILED, error=str(e), request=fetch.request
            )
            self._notify()
            return

        if fetch.request != self._current:
            logger.debug("stale_result_discarded", platform=source.platform.name)
            return
        self._states[index] = PlatformState(
            source.platform, PlatformStatus.READY, trade=trade, request=fetch.request
        )
        self._notify()

    def _notify(self) -> None:
        if self.on_update is None or self._current is None:
            return
        try:
            self.on_update(self._current, self.ranked_trades())
        except Exception:
            logger.exception("on_update_callback_failed")

    def ranked_trades(self) -> list[Trade]:
        """Ranked trades landed so far for the current request."""
        if self._current is None:
            return []
        trades = [
            state.trade
            for state in self._states
            if state.status == PlatformStatus.READY and state.request == self._current
        ]
        return merge_and_rank(trades, self._current.trade_type)

    def _pending_tasks(self) -> list[asyncio.Task[None]]:
        return [
            fetch.task
            for fetch in self._fetches
            if fetch is not None and fetch.task is not None and not fetch.task.done()
        ]

    async def settle(self) -> list[Trade]:
        """Wait until every platform has answered the current request.

        Returns:
            The ranked trades of the current request
        """
        while pending := self._pending_tasks():
            await asyncio.gather(*pending, return_exceptions=True)
        return self.ranked_trades()

    async def best_trades(self, request: TradeRequest) -> list[Trade]:
        """Fetch ``request`` on every platform and return the ranked trades."""
        self.update(request)
        return await self.settle()

    async def close(self) -> None:
        """Cancel every outstanding fetch."""
        tasks = self._pending_tasks() + list(self._in_flight)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._fetches = [None] * len(self.sources)
        self._in_flight.clear()


__all__ = [
    "MultiPlatformPoller",
    "PlatformState",
    "PlatformStatus",
    "TradeRequest",
    "UpdateCallback",
]
