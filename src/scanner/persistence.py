"""Data persistence layer: maps scanner models to SQLAlchemy models."""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import desc, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.alert import Alert
from src.models.scan_settings import ScanSettings
from src.models.token import Token
from src.scanner.models import (
    AlertRecord,
    AlertType,
    PersistedAsset,
    Policy,
    RiskLevel,
    ScoredAsset,
    SecuritySnapshot,
)


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in DateTime columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def _sanitize(val: str | None) -> str | None:
    """Strip null bytes and control chars that PostgreSQL rejects."""
    if val is None:
        return None
    return val.replace("\x00", "").strip()


def _dialect_insert(session: AsyncSession):
    if session.get_bind().dialect.name == "postgresql":
        return pg_insert
    return sqlite_insert


async def upsert_token(
    session: AsyncSession,
    asset: ScoredAsset,
    *,
    now: datetime | None = None,
) -> Token:
    """Insert or update a token by address, returning the DB record.

    ``first_detected`` is only written on insert; every other column,
    including ``last_updated``, is overwritten on conflict.
    """
    now = now or utcnow()
    security = asset.security
    values = {
        "address": asset.address,
        "name": _sanitize(asset.name),
        "symbol": _sanitize(asset.symbol),
        "market_cap": asset.market_cap,
        "volume_24h": asset.volume_24h,
        "liquidity": asset.liquidity,
        "price_change_24h": asset.price_change_24h,
        "holders": asset.holders,
        "liquidity_locked": security.liquidity_locked,
        "mint_disabled": security.mint_disabled,
        "freeze_disabled": security.freeze_disabled,
        "top10_holders": security.top10_holders_pct,
        "contract_age": security.contract_age_hours,
        "risk_score": asset.risk_score,
        "risk_level": asset.risk_level.value,
        "first_detected": now,
        "last_updated": now,
    }
    update = {k: v for k, v in values.items() if k not in ("address", "first_detected")}

    insert = _dialect_insert(session)
    stmt = (
        insert(Token)
        .values(**values)
        .on_conflict_do_update(index_elements=["address"], set_=update)
        .returning(Token)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    await session.flush()
    return result.scalar_one()


async def insert_alert(session: AsyncSession, alert: AlertRecord) -> Alert:
    row = Alert(
        token_address=alert.token_address,
        alert_type=alert.alert_type.value,
        message=alert.message,
        timestamp=alert.timestamp,
    )
    session.add(row)
    await session.flush()
    return row


async def save_scan_settings(session: AsyncSession, policy: Policy) -> ScanSettings:
    row = ScanSettings(
        min_cap=policy.min_cap,
        max_cap=policy.max_cap,
        min_volume=policy.min_volume,
        min_liquidity=policy.min_liquidity,
        liquidity_locked=policy.require_liquidity_locked,
        mint_disabled=policy.require_mint_disabled,
        freeze_disabled=policy.require_freeze_disabled,
        top_holders_limit=policy.top_holders_limit,
        started_at=utcnow(),
    )
    session.add(row)
    await session.flush()
    return row


async def get_token_by_address(session: AsyncSession, address: str) -> Token | None:
    result = await session.execute(select(Token).where(Token.address == address))
    return result.scalar_one_or_none()


async def list_tokens(
    session: AsyncSession, *, limit: int = 50, risk_level: str | None = None
) -> list[Token]:
    """Most recently updated first."""
    query = select(Token)
    if risk_level:
        query = query.where(Token.risk_level == risk_level)
    query = query.order_by(desc(Token.last_updated), desc(Token.id)).limit(limit)
    result = await session.execute(query)
    return list(result.scalars().all())


async def list_alerts(
    session: AsyncSession, *, limit: int = 100, alert_type: str | None = None
) -> list[Alert]:
    """Most recent first."""
    query = select(Alert)
    if alert_type:
        query = query.where(Alert.alert_type == alert_type)
    query = query.order_by(desc(Alert.timestamp), desc(Alert.id)).limit(limit)
    result = await session.execute(query)
    return list(result.scalars().all())


async def count_tokens_by_level(session: AsyncSession) -> dict[str, int]:
    result = await session.execute(
        select(Token.risk_level, func.count(Token.id)).group_by(Token.risk_level)
    )
    counts = {level.value: 0 for level in RiskLevel}
    for level, count in result.all():
        counts[level] = count
    return counts


async def count_alerts(session: AsyncSession) -> int:
    result = await session.execute(select(func.count(Alert.id)))
    return result.scalar_one()


def token_to_asset(token: Token) -> PersistedAsset:
    return PersistedAsset(
        address=token.address,
        name=token.name,
        symbol=token.symbol,
        market_cap=token.market_cap or 0.0,
        volume_24h=token.volume_24h or 0.0,
        liquidity=token.liquidity or 0.0,
        price_change_24h=token.price_change_24h or 0.0,
        holders=token.holders or 0,
        security=SecuritySnapshot(
            liquidity_locked=bool(token.liquidity_locked),
            mint_disabled=bool(token.mint_disabled),
            freeze_disabled=bool(token.freeze_disabled),
            top10_holders_pct=token.top10_holders or 0.0,
            contract_age_hours=token.contract_age or 0.0,
        ),
        timestamp=token.last_updated,
        risk_score=token.risk_score,
        risk_level=RiskLevel(token.risk_level),
        first_detected=token.first_detected,
        last_updated=token.last_updated,
    )


def alert_to_record(alert: Alert) -> AlertRecord:
    return AlertRecord(
        id=alert.id,
        token_address=alert.token_address,
        alert_type=AlertType(alert.alert_type),
        message=alert.message or "",
        timestamp=alert.timestamp,
    )


def asset_to_row(asset: PersistedAsset) -> dict[str, Any]:
    """Flat snake_case row, the shape served by the token endpoints."""
    security = asset.security
    return {
        "address": asset.address,
        "name": asset.name,
        "symbol": asset.symbol,
        "market_cap": asset.market_cap,
        "volume_24h": asset.volume_24h,
        "liquidity": asset.liquidity,
        "price_change_24h": asset.price_change_24h,
        "holders": asset.holders,
        "liquidity_locked": security.liquidity_locked,
        "mint_disabled": security.mint_disabled,
        "freeze_disabled": security.freeze_disabled,
        "top10_holders": security.top10_holders_pct,
        "contract_age": security.contract_age_hours,
        "risk_score": asset.risk_score,
        "risk_level": asset.risk_level.value,
        "first_detected": asset.first_detected.isoformat(),
        "last_updated": asset.last_updated.isoformat(),
    }
