"""Runtime objects shared between the scan loop and the API.

Built once at startup and held on ``app.state.scanner``; there is no
module-level scanner instance.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.settings import settings
from src.scanner.alerts import AlertDispatcher
from src.scanner.feed import SimulatedFeed, TokenFeed
from src.scanner.metrics import ScanMetrics
from src.scanner.models import Policy
from src.scanner.notifications import NotificationHub
from src.scanner.scan_loop import ScanLoop
from src.scanner.store import Store


@dataclass
class ScannerContext:
    store: Store
    hub: NotificationHub
    scan_loop: ScanLoop
    dispatcher: AlertDispatcher
    metrics: ScanMetrics
    redis: object | None = None


def build_context(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    redis=None,
    feed: TokenFeed | None = None,
    policy: Policy | None = None,
    interval_sec: float | None = None,
) -> ScannerContext:
    store = Store(session_factory)
    hub = NotificationHub(send_timeout_sec=settings.scan_send_timeout_sec)
    dispatcher = AlertDispatcher(redis=redis, channel=settings.alert_channel)
    metrics = ScanMetrics()
    scan_loop = ScanLoop(
        feed=feed or SimulatedFeed(policy_source=lambda: scan_loop.policy),
        store=store,
        hub=hub,
        dispatcher=dispatcher,
        policy=policy or Policy.from_settings(),
        interval_sec=interval_sec if interval_sec is not None else settings.scan_interval_sec,
        metrics=metrics,
    )
    return ScannerContext(
        store=store,
        hub=hub,
        scan_loop=scan_loop,
        dispatcher=dispatcher,
        metrics=metrics,
        redis=redis,
    )
