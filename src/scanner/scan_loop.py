"""Scan loop: pulls candidates from the feed on a fixed cadence.

Each tick runs the full pipeline for one observation:

1. Feed: fetch one candidate token
2. Risk model: score the security snapshot
3. Policy: reject tokens that fail any eligibility check
4. Store: upsert the token by address
5. Alerts: classify, store and dispatch one alert
6. Hub: broadcast a ``new_token`` event to live subscribers

Ticks are serialized; a failing tick is logged and dropped without
affecting the schedule.
"""

import asyncio
import time
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from loguru import logger

from src.scanner.alerts import AlertDispatcher, classify_alert
from src.scanner.exceptions import FeedError, StoreError
from src.scanner.feed import TokenFeed
from src.scanner.filters import rejection_reason
from src.scanner.metrics import ScanMetrics
from src.scanner.models import AlertRecord, Policy, ScoredAsset
from src.scanner.notifications import NotificationHub
from src.scanner.risk import score_observation
from src.scanner.store import Store


class ScanState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class TickResult:
    accepted: bool = False
    asset: ScoredAsset | None = None
    alert: AlertRecord | None = None
    rejection: str | None = None
    error: str | None = None  # "feed" | "store" | "unexpected"


class ScanLoop:
    """Owns the active policy and the recurring scan task.

    ``start()`` and ``stop()`` are serialized by a lifecycle lock. ``stop()``
    joins the scheduler task, so an in-flight tick finishes but no new tick
    begins once it returns.
    """

    def __init__(
        self,
        *,
        feed: TokenFeed,
        store: Store,
        hub: NotificationHub,
        dispatcher: AlertDispatcher | None = None,
        policy: Policy | None = None,
        interval_sec: float = 10.0,
        metrics: ScanMetrics | None = None,
    ) -> None:
        self._feed = feed
        self._store = store
        self._hub = hub
        self._dispatcher = dispatcher or AlertDispatcher()
        self._policy = policy or Policy()
        self._interval = interval_sec
        self._metrics = metrics or ScanMetrics()

        self._state = ScanState.IDLE
        self._task: asyncio.Task | None = None
        self._stop_event: asyncio.Event | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._tick_lock = asyncio.Lock()
        self._lifecycle_lock = asyncio.Lock()

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is ScanState.RUNNING

    @property
    def policy(self) -> Policy:
        return self._policy

    @property
    def metrics(self) -> ScanMetrics:
        return self._metrics

    def status(self) -> dict[str, Any]:
        return {
            "state": self._state.value,
            "interval_sec": self._interval,
            "filters": self._policy.to_public(),
            "metrics": self._metrics.get_summary(),
        }

    async def start(self, policy_override: dict[str, Any] | None = None) -> Policy:
        """Begin scanning with ``policy_override`` merged into the current policy.

        No-op when already running. Raises PolicyValidationError (scan not
        started) if the override is malformed.
        """
        async with self._lifecycle_lock:
            if self._state is ScanState.RUNNING:
                logger.debug("[SCAN] start() ignored, already running")
                return self._policy

            policy = self._policy.merged(policy_override)
            self._policy = policy
            self._state = ScanState.RUNNING
            self._loop = asyncio.get_running_loop()
            stop_event = asyncio.Event()
            self._stop_event = stop_event
            logger.info(f"[SCAN] Starting token scan with filters: {policy.to_public()}")

            try:
                await self._store.save_policy(policy)
            except StoreError as e:
                logger.warning(f"[SCAN] Could not record scan settings: {e}")

            first_tick_at = self._loop.time()
            await self.run_tick()
            self._task = asyncio.create_task(
                self._run(stop_event, first_tick_at), name="scan_loop"
            )
            return policy

    async def stop(self) -> None:
        """Cancel the schedule and wait for any in-flight tick. Idempotent."""
        async with self._lifecycle_lock:
            if self._state is ScanState.IDLE:
                return
            self._state = ScanState.IDLE
            if self._stop_event:
                self._stop_event.set()
            task, self._task = self._task, None
            if task:
                await task
            logger.info("[SCAN] Stopped token scanning")

    def stop_threadsafe(self, timeout: float | None = None) -> None:
        """Stop from a thread other than the event loop's; blocks until stopped.

        Returns at once when the owning loop is not running, since nothing
        could execute the stop there.
        """
        loop = self._loop
        if loop is None or loop.is_closed() or not loop.is_running():
            logger.debug("[SCAN] stop_threadsafe() skipped, event loop not running")
            return
        future = asyncio.run_coroutine_threadsafe(self.stop(), loop)
        future.result(timeout)

    async def _run(self, stop_event: asyncio.Event, last_tick_at: float) -> None:
        loop = asyncio.get_running_loop()
        while True:
            # Fixed cadence: the interval is measured from the previous tick's start
            delay = max(0.0, last_tick_at + self._interval - loop.time())
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=delay)
                return
            except TimeoutError:
                pass
            if stop_event.is_set():
                return
            last_tick_at = loop.time()
            await self.run_tick()

    async def run_tick(self) -> TickResult:
        """Run one pipeline pass. Never raises."""
        async with self._tick_lock:
            # Policy captured once: a concurrent start() cannot change it mid-tick
            policy = self._policy
            started = time.monotonic()
            try:
                result = await self._tick(policy)
            except Exception as e:
                logger.exception(f"[SCAN] Unexpected tick error: {e}")
                result = TickResult(error="unexpected")

            latency_ms = (time.monotonic() - started) * 1000
            self._metrics.record_tick(
                latency_ms,
                accepted=result.accepted,
                rejection=result.rejection,
                error=result.error,
            )
            return result

    async def _tick(self, policy: Policy) -> TickResult:
        try:
            observation = await self._feed.next()
        except FeedError as e:
            logger.warning(f"[SCAN] Feed error: {e}")
            return TickResult(error="feed")
        except Exception as e:
            logger.error(f"[SCAN] Unexpected feed error: {e}")
            return TickResult(error="feed")

        scored = score_observation(observation)
        reason = rejection_reason(observation, policy)
        if reason:
            logger.debug(
                f"[SCAN] Rejected {scored.symbol} {scored.address[:12]} "
                f"score={scored.risk_score} reason={reason}"
            )
            return TickResult(asset=scored, rejection=reason)

        try:
            await self._store.upsert_asset(scored)
        except StoreError as e:
            logger.error(f"[SCAN] Token upsert failed, tick dropped: {e}")
            return TickResult(asset=scored, error="store")

        alert = classify_alert(scored)
        try:
            alert = await self._store.insert_alert(alert)
        except StoreError as e:
            logger.error(f"[SCAN] Alert insert failed for {scored.address[:12]}: {e}")
            return TickResult(asset=scored, error="store")

        try:
            await self._dispatcher.dispatch(alert, scored)
        except Exception as e:
            logger.warning(f"[ALERT] Dispatch failed: {e}")

        broadcast = await self._hub.broadcast(scored.to_event())
        self._metrics.record_broadcast(broadcast.delivered, broadcast.failed)

        return TickResult(accepted=True, asset=scored, alert=alert)
