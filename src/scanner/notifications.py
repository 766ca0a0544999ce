"""Live notification fan-out to connected subscribers.

Delivery is at-most-once: each broadcast attempts one bounded send per open
subscriber, with no retries. A slow or broken subscriber only loses its own
copy of the event.
"""

import asyncio
from dataclasses import dataclass
from threading import Lock
from typing import Any, Protocol

from loguru import logger


class Subscriber(Protocol):
    """Transport handle for one connected client (e.g. a WebSocket)."""

    @property
    def is_open(self) -> bool: ...

    async def send(self, event: dict[str, Any]) -> None: ...


@dataclass
class BroadcastResult:
    delivered: int = 0
    skipped: int = 0
    failed: int = 0


class NotificationHub:
    """Registry of live subscribers.

    The hub only holds back-references: it never closes a subscriber, it just
    stops sending to ones that are closed. The set is guarded by a lock and
    broadcasts iterate over a snapshot, so connects and disconnects can
    happen while a broadcast is in flight.
    """

    def __init__(self, *, send_timeout_sec: float = 2.0) -> None:
        self._subscribers: set[Subscriber] = set()
        self._lock = Lock()
        self._send_timeout = send_timeout_sec

    def add(self, subscriber: Subscriber) -> None:
        with self._lock:
            self._subscribers.add(subscriber)
            count = len(self._subscribers)
        logger.info(f"[HUB] Subscriber connected ({count} live)")

    def remove(self, subscriber: Subscriber) -> None:
        with self._lock:
            self._subscribers.discard(subscriber)
            count = len(self._subscribers)
        logger.info(f"[HUB] Subscriber disconnected ({count} live)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def __contains__(self, subscriber: object) -> bool:
        with self._lock:
            return subscriber in self._subscribers

    async def broadcast(self, event: dict[str, Any]) -> BroadcastResult:
        """Send ``event`` to every open subscriber. Never raises on delivery errors."""
        with self._lock:
            snapshot = list(self._subscribers)

        result = BroadcastResult()
        if not snapshot:
            return result

        # Concurrent sends: one stalled subscriber cannot hold up the rest
        outcomes = await asyncio.gather(*(self._deliver(s, event) for s in snapshot))
        for outcome in outcomes:
            setattr(result, outcome, getattr(result, outcome) + 1)

        if result.failed or result.skipped:
            logger.debug(
                f"[HUB] Broadcast: {result.delivered} delivered, "
                f"{result.skipped} closed, {result.failed} failed"
            )
        return result

    async def _deliver(self, subscriber: Subscriber, event: dict[str, Any]) -> str:
        if not subscriber.is_open:
            with self._lock:
                self._subscribers.discard(subscriber)
            return "skipped"
        try:
            await asyncio.wait_for(subscriber.send(event), timeout=self._send_timeout)
        except TimeoutError:
            logger.warning(f"[HUB] Send timed out after {self._send_timeout}s, skipping subscriber")
            return "failed"
        except Exception as e:
            logger.warning(f"[HUB] Delivery failed: {e}")
            return "failed"
        return "delivered"
