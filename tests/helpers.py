"""Test doubles for the feed and subscriber seams."""

import asyncio
from typing import Any

from src.scanner.feed import TokenFeed
from src.scanner.models import AssetObservation


class StubFeed(TokenFeed):
    """Replays a list of observations (or exceptions); repeats the last item."""

    def __init__(self, items: list[AssetObservation | Exception]) -> None:
        self._items = list(items)
        self.calls = 0

    async def next(self) -> AssetObservation:
        self.calls += 1
        item = self._items.pop(0) if len(self._items) > 1 else self._items[0]
        if isinstance(item, Exception):
            raise item
        return item


class FakeSubscriber:
    def __init__(self, *, is_open: bool = True, fail: bool = False, delay: float = 0.0) -> None:
        self.is_open = is_open
        self._fail = fail
        self._delay = delay
        self.received: list[dict[str, Any]] = []

    async def send(self, event: dict[str, Any]) -> None:
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._fail:
            raise ConnectionResetError("peer gone")
        self.received.append(event)


class SlowFeed(StubFeed):
    """StubFeed whose every fetch takes ``delay`` seconds."""

    def __init__(self, items: list[AssetObservation | Exception], *, delay: float) -> None:
        super().__init__(items)
        self._delay = delay

    async def next(self) -> AssetObservation:
        await asyncio.sleep(self._delay)
        return await super().next()
