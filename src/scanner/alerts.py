"""Alert classification and dispatch for accepted tokens.

Every accepted token yields exactly one alert. Dispatch channels:
- Console log (always on)
- Redis pubsub (if redis available)

Unlike token rows, alerts are never deduplicated: re-detecting a token on a
later tick produces a new alert.
"""

import json
from datetime import UTC, datetime

from loguru import logger

from src.scanner.models import AlertRecord, AlertType, RiskLevel, ScoredAsset


def classify_alert(asset: ScoredAsset, *, now: datetime | None = None) -> AlertRecord:
    """Map a scored, accepted token to its alert kind and message."""
    alert_type = AlertType.NEW_TOKEN
    message = f"New {asset.risk_level} risk token detected: {asset.name}"

    if asset.risk_level is RiskLevel.HIGH:
        alert_type = AlertType.HIGH_RISK
        message = f"⚠️ HIGH RISK: {asset.name} - Review security parameters"
    elif asset.risk_level is RiskLevel.SAFE:
        alert_type = AlertType.SAFE_OPPORTUNITY
        message = f"✅ SAFE: {asset.name} - All security checks passed"

    return AlertRecord(
        token_address=asset.address,
        alert_type=alert_type,
        message=message,
        timestamp=now or datetime.now(UTC).replace(tzinfo=None),
    )


class AlertDispatcher:
    """Fans stored alerts out to side channels.

    Channel failures are logged and never propagate into the scan tick.
    """

    def __init__(self, *, redis=None, channel: str = "alerts:tokens") -> None:
        self._redis = redis
        self._channel = channel
        self._total_sent: int = 0

    async def dispatch(self, alert: AlertRecord, asset: ScoredAsset) -> None:
        self._total_sent += 1
        _log_alert(alert, asset)
        if self._redis is not None:
            await self._publish_redis(alert, asset)

    async def _publish_redis(self, alert: AlertRecord, asset: ScoredAsset) -> None:
        try:
            payload = json.dumps({
                "address": alert.token_address,
                "symbol": asset.symbol,
                "type": alert.alert_type.value,
                "message": alert.message,
                "risk_score": asset.risk_score,
                "risk_level": asset.risk_level.value,
                "ts": alert.timestamp.isoformat(),
            })
            await self._redis.publish(self._channel, payload)
        except Exception as e:
            logger.debug(f"[ALERT] Redis publish failed: {e}")

    @property
    def total_sent(self) -> int:
        return self._total_sent


def _log_alert(alert: AlertRecord, asset: ScoredAsset) -> None:
    mcap_str = f"${int(asset.market_cap):,}"
    liq_str = f"${int(asset.liquidity):,}"
    logger.info(
        f"[ALERT] {alert.alert_type.value.upper()} "
        f"{asset.symbol or asset.address[:12]} "
        f"score={asset.risk_score} mcap={mcap_str} liq={liq_str} "
        f"| {alert.message}"
    )
