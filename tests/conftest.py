"""Shared test fixtures."""

from collections.abc import AsyncGenerator
from datetime import datetime

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.models.base import Base
from src.scanner.models import AssetObservation, SecuritySnapshot
from src.scanner.store import Store


@pytest_asyncio.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory SQLite database per test.

    StaticPool keeps the single in-memory connection alive so every session
    sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def store(session_factory) -> Store:
    return Store(session_factory)


def _observation(**kwargs) -> AssetObservation:
    security_defaults = {
        "liquidity_locked": True,
        "mint_disabled": True,
        "freeze_disabled": True,
        "top10_holders_pct": 25.0,
        "contract_age_hours": 10.0,
    }
    for key in list(security_defaults):
        if key in kwargs:
            security_defaults[key] = kwargs.pop(key)

    defaults = {
        "address": "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU",
        "name": "BONK",
        "symbol": "BONK",
        "market_cap": 10000.0,
        "volume_24h": 2000.0,
        "liquidity": 5000.0,
        "price_change_24h": 12.5,
        "holders": 420,
        "security": SecuritySnapshot(**security_defaults),
        "timestamp": datetime(2026, 10, 17, 12, 0, 0),
    }
    defaults.update(kwargs)
    return AssetObservation(**defaults)


@pytest.fixture
def make_observation():
    """Factory for observations; security fields can be passed flat."""
    return _observation
