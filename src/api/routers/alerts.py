"""Alert log endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_store
from src.scanner.models import AlertType
from src.scanner.store import Store

router = APIRouter(prefix="/api/alerts", tags=["alerts"])


@router.get("")
async def list_alerts(
    store: Store = Depends(get_store),
    limit: int = Query(100, ge=1, le=1000),
    alert_type: AlertType | None = Query(None, alias="type"),
) -> list[dict[str, Any]]:
    """Most recent alerts first, optionally filtered by kind."""
    alerts = await store.query_alerts(
        limit=limit, alert_type=alert_type.value if alert_type else None
    )
    return [a.model_dump(mode="json") for a in alerts]
