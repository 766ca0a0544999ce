"""Eligibility policy checks for candidate tokens.

All checks are conjunctive and evaluated in a fixed order; the first
failing check rejects the token. A check only applies when its policy
bound is set (or its flag is on).
"""

from src.scanner.models import AssetObservation, Policy


def rejection_reason(observation: AssetObservation, policy: Policy) -> str | None:
    """Return the name of the first failing check, or None if the token passes."""
    security = observation.security

    if policy.min_cap is not None and observation.market_cap < policy.min_cap:
        return "market_cap_below_min"
    if policy.max_cap is not None and observation.market_cap > policy.max_cap:
        return "market_cap_above_max"
    if policy.min_volume is not None and observation.volume_24h < policy.min_volume:
        return "volume_below_min"
    if policy.min_liquidity is not None and observation.liquidity < policy.min_liquidity:
        return "liquidity_below_min"

    if policy.require_liquidity_locked and not security.liquidity_locked:
        return "liquidity_not_locked"
    if policy.require_mint_disabled and not security.mint_disabled:
        return "mint_enabled"
    if policy.require_freeze_disabled and not security.freeze_disabled:
        return "freeze_enabled"

    # Strict: a token exactly at the limit is rejected
    if (
        policy.top_holders_limit is not None
        and security.top10_holders_pct >= policy.top_holders_limit
    ):
        return "top_holders_concentrated"

    return None


def passes_filters(observation: AssetObservation, policy: Policy) -> bool:
    return rejection_reason(observation, policy) is None
