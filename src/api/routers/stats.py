"""Aggregate counts for the dashboard header."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from src.api.dependencies import get_store
from src.scanner.models import RiskLevel
from src.scanner.store import Store

router = APIRouter(prefix="/api", tags=["stats"])

RECENT_ALERTS = 10


@router.get("/stats")
async def stats(store: Store = Depends(get_store)) -> dict[str, Any]:
    by_tier = await store.counts_by_tier()
    total_alerts = await store.count_alerts()
    recent = await store.query_alerts(limit=RECENT_ALERTS)
    return {
        "totalTokens": sum(by_tier.values()),
        "safeTokens": by_tier[RiskLevel.SAFE.value],
        "moderateRisk": by_tier[RiskLevel.MODERATE.value],
        "highRisk": by_tier[RiskLevel.HIGH.value],
        "totalAlerts": total_alerts,
        "recentAlerts": [a.model_dump(mode="json") for a in recent],
    }
