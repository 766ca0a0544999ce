"""Tests for scanner models: policy merging and observation invariants."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from src.scanner.exceptions import PolicyValidationError
from src.scanner.models import Policy, SecuritySnapshot
from src.scanner.risk import score_observation


class TestPolicyMerge:
    def test_defaults(self):
        policy = Policy()
        assert policy.min_cap == 5000
        assert policy.max_cap == 15000
        assert policy.min_volume == 1000
        assert policy.min_liquidity == 3000
        assert policy.require_liquidity_locked is True
        assert policy.top_holders_limit == 30

    def test_camel_case_override_keeps_other_fields(self):
        merged = Policy().merged({"minCap": 1000, "mintDisabled": False})
        assert merged.min_cap == 1000
        assert merged.require_mint_disabled is False
        assert merged.max_cap == 15000
        assert merged.require_freeze_disabled is True

    def test_snake_case_override(self):
        merged = Policy().merged({"top_holders_limit": 50})
        assert merged.top_holders_limit == 50

    def test_merge_is_relative_to_current_policy(self):
        first = Policy().merged({"minVolume": 10})
        second = first.merged({"maxCap": 20000})
        assert second.min_volume == 10
        assert second.max_cap == 20000

    def test_empty_override_returns_same_policy(self):
        policy = Policy()
        assert policy.merged(None) is policy
        assert policy.merged({}) is policy

    def test_null_disables_bound(self):
        assert Policy().merged({"maxCap": None}).max_cap is None

    def test_original_policy_unchanged(self):
        policy = Policy()
        policy.merged({"minCap": 1})
        assert policy.min_cap == 5000

    @pytest.mark.parametrize(
        "override",
        [
            {"minCap": -1},
            {"topHoldersLimit": 101},
            {"minCap": 20000},  # above default maxCap
            {"minVolume": "lots"},
            {"unknownField": 1},
        ],
    )
    def test_malformed_override_raises(self, override):
        with pytest.raises(PolicyValidationError) as exc_info:
            Policy().merged(override)
        assert exc_info.value.errors

    def test_non_dict_override_raises(self):
        with pytest.raises(PolicyValidationError):
            Policy().merged(["minCap", 1])  # type: ignore[arg-type]

    def test_policy_is_immutable(self):
        with pytest.raises(ValidationError):
            Policy().min_cap = 1  # type: ignore[misc]

    def test_to_public_uses_wire_names(self):
        public = Policy().to_public()
        assert public["minCap"] == 5000
        assert public["liquidityLocked"] is True
        assert "min_cap" not in public


class TestObservationInvariants:
    @pytest.mark.parametrize(
        "field,value",
        [("market_cap", -1), ("volume_24h", -0.1), ("liquidity", -5), ("holders", -1)],
    )
    def test_negative_market_values_rejected(self, make_observation, field, value):
        with pytest.raises(ValidationError):
            make_observation(**{field: value})

    @pytest.mark.parametrize("pct", [-1, 100.5])
    def test_concentration_out_of_range_rejected(self, pct):
        with pytest.raises(ValidationError):
            SecuritySnapshot(
                liquidity_locked=True, mint_disabled=True, freeze_disabled=True,
                top10_holders_pct=pct, contract_age_hours=1,
            )

    def test_negative_age_rejected(self):
        with pytest.raises(ValidationError):
            SecuritySnapshot(
                liquidity_locked=True, mint_disabled=True, freeze_disabled=True,
                top10_holders_pct=10, contract_age_hours=-1,
            )

    def test_camel_case_input_accepted(self):
        sec = SecuritySnapshot.model_validate({
            "liquidityLocked": True, "mintDisabled": False, "freezeDisabled": True,
            "top10Holders": 12.5, "contractAge": 3,
        })
        assert sec.mint_disabled is False
        assert sec.top10_holders_pct == 12.5


def test_event_payload_uses_wire_names(make_observation):
    scored = score_observation(make_observation(timestamp=datetime(2026, 10, 17, 9, 30)))
    event = scored.to_event()
    assert event["type"] == "new_token"
    data = event["data"]
    assert data["marketCap"] == 10000.0
    assert data["riskScore"] == 95
    assert data["riskLevel"] == "safe"
    assert data["security"]["top10Holders"] == 25.0
    assert data["timestamp"] == "2026-10-17T09:30:00"
