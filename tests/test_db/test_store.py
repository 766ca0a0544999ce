"""Test the store and persistence layer against in-memory SQLite."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from src.models.scan_settings import ScanSettings
from src.scanner.alerts import classify_alert
from src.scanner.exceptions import StoreError
from src.scanner.models import AlertRecord, AlertType, Policy
from src.scanner.persistence import asset_to_row, upsert_token
from src.scanner.risk import score_observation
from src.scanner.store import Store

T0 = datetime(2026, 10, 17, 12, 0, 0)


def _alert(address: str, kind: AlertType, ts: datetime) -> AlertRecord:
    return AlertRecord(token_address=address, alert_type=kind, message=kind.value, timestamp=ts)


@pytest.mark.asyncio
async def test_upsert_token_creates_new(db_session, make_observation):
    token = await upsert_token(db_session, score_observation(make_observation()), now=T0)
    assert token.id is not None
    assert token.first_detected == T0
    assert token.risk_level == "safe"


@pytest.mark.asyncio
async def test_upsert_keeps_first_detected_and_advances_last_updated(store, make_observation):
    first = await store.upsert_asset(score_observation(make_observation(holders=100)), now=T0)
    later = T0 + timedelta(seconds=30)
    second = await store.upsert_asset(
        score_observation(make_observation(holders=250, mint_disabled=False)), now=later
    )

    assert second.first_detected == first.first_detected == T0
    assert second.last_updated == later
    assert second.holders == 250
    assert second.security.mint_disabled is False
    assert second.risk_score == first.risk_score - 25
    assert len(await store.query_assets()) == 1


@pytest.mark.asyncio
async def test_get_asset_missing_returns_none(store):
    assert await store.get_asset("nope") is None


@pytest.mark.asyncio
async def test_query_assets_newest_first_with_tier_filter(store, make_observation):
    await store.upsert_asset(score_observation(make_observation(address="a1")), now=T0)
    await store.upsert_asset(
        score_observation(
            make_observation(
                address="a2",
                liquidity_locked=False,
                mint_disabled=False,
                freeze_disabled=False,
            )
        ),
        now=T0 + timedelta(seconds=1),
    )
    await store.upsert_asset(
        score_observation(make_observation(address="a3")), now=T0 + timedelta(seconds=2)
    )

    assert [a.address for a in await store.query_assets()] == ["a3", "a2", "a1"]
    assert [a.address for a in await store.query_assets(limit=2)] == ["a3", "a2"]
    assert [a.address for a in await store.query_assets(risk_level="high")] == ["a2"]
    assert [a.address for a in await store.query_assets(risk_level="moderate")] == []


@pytest.mark.asyncio
async def test_alerts_newest_first_with_kind_filter(store, make_observation):
    await store.upsert_asset(score_observation(make_observation()), now=T0)
    address = make_observation().address
    await store.insert_alert(_alert(address, AlertType.NEW_TOKEN, T0))
    await store.insert_alert(_alert(address, AlertType.HIGH_RISK, T0 + timedelta(seconds=1)))
    await store.insert_alert(_alert(address, AlertType.NEW_TOKEN, T0 + timedelta(seconds=2)))

    alerts = await store.query_alerts()
    assert [a.timestamp for a in alerts] == [
        T0 + timedelta(seconds=2),
        T0 + timedelta(seconds=1),
        T0,
    ]
    assert all(a.id is not None for a in alerts)
    assert len(await store.query_alerts(alert_type="new_token")) == 2
    assert len(await store.query_alerts(limit=1)) == 1
    assert await store.count_alerts() == 3


@pytest.mark.asyncio
async def test_insert_alert_from_classifier(store, make_observation):
    scored = score_observation(make_observation())
    await store.upsert_asset(scored)
    stored = await store.insert_alert(classify_alert(scored, now=T0))
    assert stored.alert_type is AlertType.SAFE_OPPORTUNITY
    assert stored.timestamp == T0


@pytest.mark.asyncio
async def test_counts_by_tier_zero_filled(store, make_observation):
    assert await store.counts_by_tier() == {"safe": 0, "moderate": 0, "high": 0}

    await store.upsert_asset(score_observation(make_observation(address="s1")))
    await store.upsert_asset(score_observation(make_observation(address="s2")))
    await store.upsert_asset(
        score_observation(make_observation(address="m1", liquidity_locked=False))
    )
    assert await store.counts_by_tier() == {"safe": 2, "moderate": 1, "high": 0}


@pytest.mark.asyncio
async def test_save_policy_records_audit_row(store, session_factory):
    await store.save_policy(Policy(min_cap=None, top_holders_limit=40))

    async with session_factory() as session:
        row = (await session.execute(select(ScanSettings))).scalar_one()
    assert row.min_cap is None
    assert row.max_cap == 15000
    assert row.top_holders_limit == 40
    assert row.liquidity_locked is True
    assert row.started_at is not None


@pytest.mark.asyncio
async def test_asset_to_row_is_flat(store, make_observation):
    asset = await store.upsert_asset(score_observation(make_observation()), now=T0)
    row = asset_to_row(asset)
    assert row["top10_holders"] == 25.0
    assert row["liquidity_locked"] is True
    assert row["risk_level"] == "safe"
    assert row["first_detected"] == T0.isoformat()


@pytest.mark.asyncio
async def test_ping(store):
    await store.ping()


class _BrokenSession:
    async def __aenter__(self):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    async def __aexit__(self, *exc):
        return False


@pytest.mark.asyncio
async def test_database_failure_surfaces_as_store_error(make_observation):
    store = Store(lambda: _BrokenSession())
    with pytest.raises(StoreError, match="upsert_asset failed"):
        await store.upsert_asset(score_observation(make_observation()))
    with pytest.raises(StoreError):
        await store.ping()


def test_free_text_columns_are_unbounded():
    from sqlalchemy import Text

    from src.models.alert import Alert
    from src.models.token import Token

    for column in (Token.address, Token.name, Token.symbol, Alert.token_address, Alert.message):
        assert isinstance(column.property.columns[0].type, Text)


@pytest.mark.asyncio
async def test_long_name_and_address_round_trip(store, make_observation):
    address = "A" * 120
    name = "VERY LONG MEME NAME " * 20
    scored = score_observation(make_observation(address=address, name=name))
    await store.upsert_asset(scored)
    stored = await store.insert_alert(classify_alert(scored, now=T0))

    assert (await store.get_asset(address)).name == name
    assert stored.message.endswith(f"{name} - All security checks passed")
