"""Session-per-call store used by the scan loop and the API.

Each operation opens its own session, commits on success and surfaces any
database failure as ``StoreError``. There are no retries: a failed write is
reported once and the next scan tick tries again.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.scanner import persistence
from src.scanner.exceptions import StoreError
from src.scanner.models import AlertRecord, PersistedAsset, Policy, ScoredAsset


class Store:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
                await session.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"{operation} failed: {e}") from e

    async def ping(self) -> None:
        async with self._session("ping") as session:
            await session.execute(text("SELECT 1"))

    async def upsert_asset(
        self, asset: ScoredAsset, *, now: datetime | None = None
    ) -> PersistedAsset:
        async with self._session("upsert_asset") as session:
            token = await persistence.upsert_token(session, asset, now=now)
            return persistence.token_to_asset(token)

    async def insert_alert(self, alert: AlertRecord) -> AlertRecord:
        async with self._session("insert_alert") as session:
            row = await persistence.insert_alert(session, alert)
            return persistence.alert_to_record(row)

    async def save_policy(self, policy: Policy) -> None:
        async with self._session("save_policy") as session:
            await persistence.save_scan_settings(session, policy)

    async def get_asset(self, address: str) -> PersistedAsset | None:
        async with self._session("get_asset") as session:
            token = await persistence.get_token_by_address(session, address)
            return persistence.token_to_asset(token) if token else None

    async def query_assets(
        self, limit: int = 50, risk_level: str | None = None
    ) -> list[PersistedAsset]:
        async with self._session("query_assets") as session:
            tokens = await persistence.list_tokens(session, limit=limit, risk_level=risk_level)
            return [persistence.token_to_asset(t) for t in tokens]

    async def query_alerts(
        self, limit: int = 100, alert_type: str | None = None
    ) -> list[AlertRecord]:
        async with self._session("query_alerts") as session:
            alerts = await persistence.list_alerts(session, limit=limit, alert_type=alert_type)
            return [persistence.alert_to_record(a) for a in alerts]

    async def counts_by_tier(self) -> dict[str, int]:
        async with self._session("counts_by_tier") as session:
            return await persistence.count_tokens_by_level(session)

    async def count_alerts(self) -> int:
        async with self._session("count_alerts") as session:
            return await persistence.count_alerts(session)
