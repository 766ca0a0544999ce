"""Tests for the notification hub."""

import asyncio

import pytest

from src.scanner.notifications import NotificationHub
from tests.helpers import FakeSubscriber

EVENT = {"type": "new_token", "data": {"address": "abc"}}


@pytest.fixture
def hub():
    return NotificationHub(send_timeout_sec=0.2)


@pytest.mark.asyncio
async def test_broadcast_reaches_all_open_subscribers(hub):
    subs = [FakeSubscriber() for _ in range(3)]
    for s in subs:
        hub.add(s)
    result = await hub.broadcast(EVENT)
    assert result.delivered == 3
    assert all(s.received == [EVENT] for s in subs)


@pytest.mark.asyncio
async def test_broadcast_without_subscribers_is_noop(hub):
    result = await hub.broadcast(EVENT)
    assert (result.delivered, result.skipped, result.failed) == (0, 0, 0)


@pytest.mark.asyncio
async def test_closed_subscriber_skipped_and_dropped(hub):
    closed = FakeSubscriber(is_open=False)
    live = FakeSubscriber()
    hub.add(closed)
    hub.add(live)

    result = await hub.broadcast(EVENT)

    assert result.delivered == 1
    assert result.skipped == 1
    assert closed.received == []
    assert closed not in hub
    assert live in hub


@pytest.mark.asyncio
async def test_failing_subscriber_does_not_abort_others(hub):
    broken = FakeSubscriber(fail=True)
    live = [FakeSubscriber(), FakeSubscriber()]
    hub.add(broken)
    for s in live:
        hub.add(s)

    result = await hub.broadcast(EVENT)

    assert result.failed == 1
    assert result.delivered == 2
    assert all(s.received == [EVENT] for s in live)


@pytest.mark.asyncio
async def test_stalled_subscriber_times_out_without_starving_others(hub):
    stalled = FakeSubscriber(delay=10)
    live = FakeSubscriber()
    hub.add(stalled)
    hub.add(live)

    loop = asyncio.get_running_loop()
    started = loop.time()
    result = await hub.broadcast(EVENT)
    elapsed = loop.time() - started

    assert elapsed < 2
    assert result.failed == 1
    assert result.delivered == 1
    assert live.received == [EVENT]
    assert stalled.received == []


@pytest.mark.asyncio
async def test_subscriber_added_during_broadcast_not_in_snapshot(hub):
    late = FakeSubscriber()

    class JoiningSubscriber(FakeSubscriber):
        async def send(self, event):
            hub.add(late)
            await super().send(event)

    hub.add(JoiningSubscriber())
    result = await hub.broadcast(EVENT)
    assert result.delivered == 1
    assert late.received == []
    assert late in hub


def test_add_remove(hub):
    sub = FakeSubscriber()
    hub.add(sub)
    assert len(hub) == 1
    hub.remove(sub)
    assert len(hub) == 0
    hub.remove(sub)  # idempotent
    assert len(hub) == 0
