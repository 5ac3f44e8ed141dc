"""
Tests for rule pack and carrier pack loading.

Validates:
- Bundled packs load and parse
- Malformed YAML and missing files fail with load errors
- Schema violations (duplicate ids, missing default carrier) fail validation
- Strict mode rejects triggers that can never fire
"""
import json

import pytest
import yaml

from claimiq.config import DEFAULT_CARRIER_PACK, DEFAULT_RULE_PACK
from claimiq.exceptions import CarrierPackError, RulePackLoadError, RulePackValidationError
from claimiq.models import (
    AddLineItem,
    Always,
    ClaimContext,
    Never,
    OtherAction,
    RequireDocument,
    RiskLevel,
)
from claimiq.engine import RuleEngine
from claimiq.packs import CarrierPackLoader, RulePackLoader


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def minimal_rule_pack():
    return {
        "schema_version": "1.0.0",
        "name": "test-pack",
        "rules": [
            {
                "id": "steep",
                "name": "SteepSlope",
                "trigger": {"path": "roof.slope", "op": ">", "value": 6},
                "action": {"type": "add_line_item", "item": "Steep charge", "priority": "medium"},
            },
            {
                "name": "Always Flag",
                "trigger": {"always": True},
                "action": {"type": "flag", "message": "Check it"},
            },
        ],
    }


@pytest.fixture
def minimal_carrier_pack():
    return {
        "carriers": [
            {"name": "default", "summary": "Be thorough"},
            {"name": "Acme", "summary": "Be fast", "risk_level": "high", "success_rate": 0.6},
        ],
    }


# ============================================================================
# BUNDLED PACKS
# ============================================================================

class TestBundledRulePack:
    """The shipped roofing rule pack."""

    @pytest.fixture(scope="class")
    def rules(self):
        return RulePackLoader(strict=True).load(DEFAULT_RULE_PACK)

    def test_loads_in_strict_mode(self, rules):
        assert len(rules) == 30

    def test_ids_unique(self, rules):
        ids = [r.id for r in rules]
        assert len(ids) == len(set(ids))

    def test_ids_are_slugs(self, rules):
        ids = {r.id for r in rules}
        assert "drip-edge-code-requirement" in ids
        assert "noaa-hail-trace-correlation" in ids

    def test_no_never_triggers(self, rules):
        assert not any(isinstance(r.trigger, Never) for r in rules)

    def test_always_rules(self, rules):
        always = sorted(r.name for r in rules if isinstance(r.trigger, Always))
        assert always == ["CodeEnforcementRule", "DripEdgeCodeRequirement"]

    def test_action_kinds(self, rules):
        by_name = {r.name: r for r in rules}
        assert isinstance(by_name["DripEdgeCodeRequirement"].action, AddLineItem)
        assert isinstance(by_name["SupplementRequiresComparison"].action, RequireDocument)
        assert by_name["SupplementRequiresComparison"].action.document == "scope_comparison"
        assert isinstance(by_name["CodeEnforcementRule"].action, OtherAction)
        assert by_name["FunctionalHailDamageThreshold"].action.actions == ("full_replacement",)

    def test_high_value_rule_fires(self, rules):
        engine = RuleEngine(rules)
        context = ClaimContext(
            claim_id="CLM-1",
            values={"estimate": {"total": 62000}, "docs": {"engineering_report": False}},
        )
        names = [r.name for r in engine.evaluate_rules_for_claim(context)]
        assert "HighValueClaimNeedsEngineering" in names
        assert "FastTrackLowValueClaims" not in names


class TestBundledCarrierPack:
    """The shipped carrier strategy pack."""

    def test_loads(self):
        profiles = CarrierPackLoader().load(DEFAULT_CARRIER_PACK)
        names = [p.name for p in profiles]
        assert names[0] == "default"
        assert "State Farm" in names
        assert len(profiles) == 11

    def test_success_rates_in_range(self):
        for profile in CarrierPackLoader().load(DEFAULT_CARRIER_PACK):
            if profile.success_rate is not None:
                assert 0.0 <= profile.success_rate <= 1.0


# ============================================================================
# RULE PACK LOADING
# ============================================================================

class TestRulePackLoader:
    """Tests for RulePackLoader."""

    def test_load_yaml_file(self, tmp_path, minimal_rule_pack):
        path = tmp_path / "rules.yaml"
        path.write_text(yaml.dump(minimal_rule_pack))

        rules = RulePackLoader().load(path)

        assert [r.id for r in rules] == ["steep", "always-flag"]
        assert rules[0].action.item == "Steep charge"
        assert rules[0].action.payload["priority"] == "medium"

    def test_load_json_file(self, tmp_path, minimal_rule_pack):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps(minimal_rule_pack))
        assert len(RulePackLoader().load(path)) == 2

    def test_load_string(self, minimal_rule_pack):
        assert len(RulePackLoader().load_string(yaml.dump(minimal_rule_pack))) == 2

    def test_file_not_found(self, tmp_path):
        with pytest.raises(RulePackLoadError):
            RulePackLoader().load(tmp_path / "missing.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("rules: [\n  - name: broken\n    trigger: {")
        with pytest.raises(RulePackLoadError):
            RulePackLoader().load(path)

    def test_not_a_mapping(self):
        with pytest.raises(RulePackValidationError):
            RulePackLoader().load_data(["not", "a", "pack"])

    def test_missing_name(self, minimal_rule_pack):
        del minimal_rule_pack["name"]
        with pytest.raises(RulePackValidationError) as exc_info:
            RulePackLoader().load_data(minimal_rule_pack)
        assert exc_info.value.details["errors"]

    def test_duplicate_ids(self, minimal_rule_pack):
        minimal_rule_pack["rules"][1]["id"] = "steep"
        with pytest.raises(RulePackValidationError):
            RulePackLoader().load_data(minimal_rule_pack)

    def test_duplicate_slugs(self, minimal_rule_pack):
        minimal_rule_pack["rules"].append(dict(minimal_rule_pack["rules"][1]))
        with pytest.raises(RulePackValidationError):
            RulePackLoader().load_data(minimal_rule_pack)

    def test_trigger_must_be_mapping(self, minimal_rule_pack):
        minimal_rule_pack["rules"][0]["trigger"] = "roof.slope > 6"
        with pytest.raises(RulePackValidationError):
            RulePackLoader().load_data(minimal_rule_pack)

    def test_lenient_keeps_unfireable_rule(self, minimal_rule_pack):
        minimal_rule_pack["rules"][0]["trigger"] = {"path": "roof.slope", "op": "~", "value": 6}
        rules = RulePackLoader().load_data(minimal_rule_pack)
        assert len(rules) == 2

    def test_strict_rejects_unknown_operator(self, minimal_rule_pack):
        minimal_rule_pack["rules"][0]["trigger"] = {"path": "roof.slope", "op": "~", "value": 6}
        with pytest.raises(RulePackValidationError) as exc_info:
            RulePackLoader(strict=True).load_data(minimal_rule_pack)
        assert "steep" in exc_info.value.details["errors"]

    def test_strict_rejects_empty_trigger(self, minimal_rule_pack):
        minimal_rule_pack["rules"][0]["trigger"] = {}
        with pytest.raises(RulePackValidationError):
            RulePackLoader(strict=True).load_data(minimal_rule_pack)

    def test_strict_rejects_major_version(self, minimal_rule_pack):
        minimal_rule_pack["schema_version"] = "2.0.0"
        with pytest.raises(RulePackValidationError):
            RulePackLoader(strict=True).load_data(minimal_rule_pack)

    def test_minor_version_accepted(self, minimal_rule_pack):
        minimal_rule_pack["schema_version"] = "1.4.0"
        assert len(RulePackLoader(strict=True).load_data(minimal_rule_pack)) == 2

    def test_disabled_flag_preserved(self, minimal_rule_pack):
        minimal_rule_pack["rules"][0]["enabled"] = False
        assert RulePackLoader().load_data(minimal_rule_pack)[0].enabled is False


# ============================================================================
# CARRIER PACK LOADING
# ============================================================================

class TestCarrierPackLoader:
    """Tests for CarrierPackLoader."""

    def test_load_data(self, minimal_carrier_pack):
        profiles = CarrierPackLoader().load_data(minimal_carrier_pack)
        acme = profiles[1]
        assert acme.risk_level == RiskLevel.HIGH
        assert acme.success_rate == 0.6
        assert profiles[0].risk_level == RiskLevel.MEDIUM

    def test_missing_default(self, minimal_carrier_pack):
        minimal_carrier_pack["carriers"].pop(0)
        with pytest.raises(CarrierPackError):
            CarrierPackLoader().load_data(minimal_carrier_pack)

    def test_duplicate_carrier_case_insensitive(self, minimal_carrier_pack):
        minimal_carrier_pack["carriers"].append({"name": "ACME", "summary": "dup"})
        with pytest.raises(CarrierPackError):
            CarrierPackLoader().load_data(minimal_carrier_pack)

    def test_success_rate_out_of_range(self, minimal_carrier_pack):
        minimal_carrier_pack["carriers"][1]["success_rate"] = 1.5
        with pytest.raises(CarrierPackError):
            CarrierPackLoader().load_data(minimal_carrier_pack)

    def test_invalid_risk_level(self, minimal_carrier_pack):
        minimal_carrier_pack["carriers"][1]["risk_level"] = "extreme"
        with pytest.raises(CarrierPackError):
            CarrierPackLoader().load_data(minimal_carrier_pack)

    def test_file_not_found(self, tmp_path):
        with pytest.raises(CarrierPackError):
            CarrierPackLoader().load(tmp_path / "missing.yaml")
