"""Security risk model: 0-100 score and discrete risk tier.

Starts at 100 and subtracts fixed penalties for failed security conditions:

- Liquidity not locked: -30
- Mint authority still enabled: -25
- Freeze authority still enabled: -20
- Top-10 holder concentration: >30% -15, >25% -10, >20% -5
- Contract age: <1h -10, <6h -5

Liquidity and 24h volume are accepted but do not affect the score yet;
they are the extension point for a market-aware model.
"""

from dataclasses import dataclass

from src.scanner.models import AssetObservation, RiskLevel, ScoredAsset, SecuritySnapshot

SAFE_THRESHOLD = 70
MODERATE_THRESHOLD = 40


@dataclass(frozen=True)
class RiskAssessment:
    score: int
    level: RiskLevel


def _concentration_penalty(top10_pct: float) -> int:
    if top10_pct > 30:
        return 15
    if top10_pct > 25:
        return 10
    if top10_pct > 20:
        return 5
    return 0


def _age_penalty(age_hours: float) -> int:
    if age_hours < 1:
        return 10
    if age_hours < 6:
        return 5
    return 0


def risk_level_for(score: int) -> RiskLevel:
    if score >= SAFE_THRESHOLD:
        return RiskLevel.SAFE
    if score >= MODERATE_THRESHOLD:
        return RiskLevel.MODERATE
    return RiskLevel.HIGH


def compute_risk_score(
    security: SecuritySnapshot,
    *,
    liquidity: float | None = None,
    volume_24h: float | None = None,
) -> RiskAssessment:
    """Score a security snapshot. Pure and deterministic."""
    score = 100

    if not security.liquidity_locked:
        score -= 30
    if not security.mint_disabled:
        score -= 25
    if not security.freeze_disabled:
        score -= 20

    score -= _concentration_penalty(security.top10_holders_pct)
    score -= _age_penalty(security.contract_age_hours)

    score = max(0, min(100, score))
    return RiskAssessment(score=score, level=risk_level_for(score))


def score_observation(observation: AssetObservation) -> ScoredAsset:
    """Attach risk score and tier to an observation."""
    assessment = compute_risk_score(
        observation.security,
        liquidity=observation.liquidity,
        volume_24h=observation.volume_24h,
    )
    return ScoredAsset(
        **observation.model_dump(),
        risk_score=assessment.score,
        risk_level=assessment.level,
    )
