"""Scan pipeline metrics: tick outcomes, error kinds, broadcast delivery.

Counters accumulate during runtime and are read by the scan status and
health endpoints.
"""

import time
from threading import Lock


class ScanMetrics:
    """Runtime counters for the scan loop.

    Thread-safe via a simple lock: the scan loop writes from the event loop,
    ``stop_threadsafe`` callers and the API may read concurrently.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._start_time: float = time.monotonic()
        self._ticks: int = 0
        self._accepted: int = 0
        self._rejected: int = 0
        self._errors: dict[str, int] = {}
        self._rejections: dict[str, int] = {}
        self._delivered: int = 0
        self._delivery_failures: int = 0
        self._last_tick_ms: float = 0.0
        self._last_tick_at: float | None = None

    def record_tick(
        self,
        latency_ms: float,
        *,
        accepted: bool = False,
        rejection: str | None = None,
        error: str | None = None,
    ) -> None:
        with self._lock:
            self._ticks += 1
            self._last_tick_ms = latency_ms
            self._last_tick_at = time.monotonic()
            if error:
                self._errors[error] = self._errors.get(error, 0) + 1
            elif accepted:
                self._accepted += 1
            else:
                self._rejected += 1
                if rejection:
                    self._rejections[rejection] = self._rejections.get(rejection, 0) + 1

    def record_broadcast(self, delivered: int, failed: int) -> None:
        with self._lock:
            self._delivered += delivered
            self._delivery_failures += failed

    @property
    def ticks(self) -> int:
        return self._ticks

    def get_summary(self) -> dict:
        with self._lock:
            return {
                "uptime_sec": int(time.monotonic() - self._start_time),
                "ticks": self._ticks,
                "accepted": self._accepted,
                "rejected": self._rejected,
                "errors": dict(self._errors),
                "rejections": dict(self._rejections),
                "delivered": self._delivered,
                "delivery_failures": self._delivery_failures,
                "last_tick_ms": round(self._last_tick_ms, 1),
                "last_tick_age_sec": (
                    round(time.monotonic() - self._last_tick_at, 1)
                    if self._last_tick_at is not None
                    else None
                ),
            }
