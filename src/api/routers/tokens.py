"""Token endpoints: list and detail."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.dependencies import get_store
from src.scanner.models import RiskLevel
from src.scanner.persistence import asset_to_row
from src.scanner.store import Store

router = APIRouter(prefix="/api/tokens", tags=["tokens"])


@router.get("")
async def list_tokens(
    store: Store = Depends(get_store),
    limit: int = Query(50, ge=1, le=500),
    risk_level: RiskLevel | None = Query(None, alias="riskLevel"),
) -> list[dict[str, Any]]:
    """Recently detected tokens, most recently updated first."""
    assets = await store.query_assets(
        limit=limit, risk_level=risk_level.value if risk_level else None
    )
    return [asset_to_row(a) for a in assets]


@router.get("/{address}")
async def token_detail(address: str, store: Store = Depends(get_store)) -> dict[str, Any]:
    asset = await store.get_asset(address)
    if not asset:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Token not found")
    return asset_to_row(asset)
