"""Scanner domain models.

Field names are snake_case in Python; the wire format (WebSocket events and
the scan control API) uses the camelCase aliases of the original dashboard.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from src.scanner.exceptions import PolicyValidationError


class RiskLevel(StrEnum):
    SAFE = "safe"
    MODERATE = "moderate"
    HIGH = "high"


class AlertType(StrEnum):
    NEW_TOKEN = "new_token"
    HIGH_RISK = "high_risk"
    SAFE_OPPORTUNITY = "safe_opportunity"


class SecuritySnapshot(BaseModel):
    """On-chain security attributes used by the risk model."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    liquidity_locked: bool = Field(alias="liquidityLocked")
    mint_disabled: bool = Field(alias="mintDisabled")
    freeze_disabled: bool = Field(alias="freezeDisabled")
    top10_holders_pct: float = Field(alias="top10Holders", ge=0, le=100)
    contract_age_hours: float = Field(alias="contractAge", ge=0)


class AssetObservation(BaseModel):
    """One candidate token produced by the feed on a scan tick."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    address: str = Field(min_length=1)
    name: str
    symbol: str
    market_cap: float = Field(alias="marketCap", ge=0)
    volume_24h: float = Field(alias="volume24h", ge=0)
    liquidity: float = Field(ge=0)
    price_change_24h: float = Field(alias="priceChange24h")
    holders: int = Field(ge=0)
    security: SecuritySnapshot
    timestamp: datetime


class ScoredAsset(AssetObservation):
    risk_score: int = Field(alias="riskScore", ge=0, le=100)
    risk_level: RiskLevel = Field(alias="riskLevel")

    def to_event(self) -> dict[str, Any]:
        """Notification payload pushed to live subscribers."""
        return {"type": "new_token", "data": self.model_dump(mode="json", by_alias=True)}


class PersistedAsset(ScoredAsset):
    first_detected: datetime = Field(alias="firstDetected")
    last_updated: datetime = Field(alias="lastUpdated")


class AlertRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | None = None  # assigned by the store
    token_address: str
    alert_type: AlertType
    message: str
    timestamp: datetime


class Policy(BaseModel):
    """Eligibility thresholds. ``None`` disables the corresponding bound.

    Immutable: reconfiguration builds a new instance via :meth:`merged`.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    min_cap: float | None = Field(5000.0, alias="minCap", ge=0)
    max_cap: float | None = Field(15000.0, alias="maxCap", ge=0)
    min_volume: float | None = Field(1000.0, alias="minVolume", ge=0)
    min_liquidity: float | None = Field(3000.0, alias="minLiquidity", ge=0)
    require_liquidity_locked: bool = Field(True, alias="liquidityLocked")
    require_mint_disabled: bool = Field(True, alias="mintDisabled")
    require_freeze_disabled: bool = Field(True, alias="freezeDisabled")
    top_holders_limit: float | None = Field(30.0, alias="topHoldersLimit", ge=0, le=100)

    @model_validator(mode="after")
    def _check_cap_range(self) -> Policy:
        if self.min_cap is not None and self.max_cap is not None and self.min_cap > self.max_cap:
            raise ValueError("minCap must not exceed maxCap")
        return self

    @classmethod
    def from_settings(cls) -> Policy:
        from config.settings import settings

        return cls(
            min_cap=settings.default_min_cap,
            max_cap=settings.default_max_cap,
            min_volume=settings.default_min_volume,
            min_liquidity=settings.default_min_liquidity,
            require_liquidity_locked=settings.default_require_liquidity_locked,
            require_mint_disabled=settings.default_require_mint_disabled,
            require_freeze_disabled=settings.default_require_freeze_disabled,
            top_holders_limit=settings.default_top_holders_limit,
        )

    def merged(self, override: dict[str, Any] | None) -> Policy:
        """Shallow-merge ``override`` (camelCase or snake_case keys) into a new policy.

        Raises PolicyValidationError for unknown keys or out-of-range values.
        """
        if not override:
            return self
        if not isinstance(override, dict):
            raise PolicyValidationError("Policy override must be an object")

        data = self.model_dump(by_alias=True)
        aliases = {name: f.alias for name, f in type(self).model_fields.items()}
        for key, value in override.items():
            data[aliases.get(key, key)] = value
        try:
            return type(self).model_validate(data)
        except ValidationError as e:
            raise PolicyValidationError(
                f"Invalid policy override: {e.error_count()} error(s)",
                errors=e.errors(include_url=False, include_context=False),
            ) from e

    def to_public(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
