"""
Tests for negotiation strategy selection.
"""
import pytest

from claimiq.config import DEFAULT_CARRIER_PACK
from claimiq.engine import NegotiationSelector
from claimiq.engine.negotiation import BEST_PRACTICES, FALLBACK_PROFILE, GENERIC_DENIAL, HIGH_VALUE
from claimiq.models import CarrierProfile, RiskLevel
from claimiq.packs import CarrierPackLoader


@pytest.fixture(scope="module")
def selector():
    return NegotiationSelector(CarrierPackLoader().load(DEFAULT_CARRIER_PACK))


class TestSuggestionCount:
    """The result always has 2-4 entries in a fixed order."""

    def test_carrier_only(self, selector):
        suggestions = selector.get_negotiation_suggestions("State Farm")
        assert len(suggestions) == 2
        assert suggestions[0].summary.startswith("State Farm strategy:")
        assert suggestions[1].summary == BEST_PRACTICES.summary

    def test_with_denial(self, selector):
        suggestions = selector.get_negotiation_suggestions("State Farm", denial_reason="Pricing dispute")
        assert len(suggestions) == 3
        assert suggestions[2].summary == "Resolve a pricing dispute"

    def test_with_denial_and_high_value(self, selector):
        suggestions = selector.get_negotiation_suggestions(
            "State Farm",
            claim_id="CLM-1003",
            denial_reason="Pricing dispute",
            estimate_value=62000,
        )
        assert len(suggestions) == 4
        assert suggestions[3].summary == HIGH_VALUE.summary
        assert suggestions[3].risk_level == RiskLevel.HIGH

    def test_high_value_without_denial(self, selector):
        suggestions = selector.get_negotiation_suggestions("USAA", estimate_value=75000)
        assert [s.summary for s in suggestions][-1] == HIGH_VALUE.summary
        assert len(suggestions) == 3

    def test_threshold_is_exclusive(self, selector):
        assert len(selector.get_negotiation_suggestions("USAA", estimate_value=50000)) == 2

    def test_empty_denial_ignored(self, selector):
        assert len(selector.get_negotiation_suggestions("USAA", denial_reason="")) == 2


class TestCarrierStrategy:
    """Tests for carrier lookup."""

    def test_state_farm_profile(self, selector):
        suggestion = selector.get_negotiation_suggestions("State Farm")[0]
        assert suggestion.risk_level == RiskLevel.LOW
        assert suggestion.expected_impact == "73% historical approval rate when these tactics are applied"
        assert "Anticipate pushback: Brittle test not failed sufficiently" in suggestion.steps
        assert "Include at least two building code citations" in suggestion.tactics

    def test_case_insensitive(self, selector):
        assert selector.get_carrier_strategy("state  FARM").name == "State Farm"

    def test_unknown_falls_back_to_default(self, selector):
        profile = selector.get_carrier_strategy("Acme Mutual")
        assert profile.name == "default"
        suggestion = selector.get_negotiation_suggestions("Acme Mutual")[0]
        assert suggestion.summary.startswith("default strategy:")
        assert suggestion.expected_impact is None

    def test_none_carrier(self, selector):
        assert selector.get_carrier_strategy(None).name == "default"

    def test_carriers_exclude_default(self, selector):
        assert "default" not in selector.carriers
        assert len(selector.carriers) == 10

    def test_no_profiles_uses_fallback(self):
        selector = NegotiationSelector()
        assert selector.get_carrier_strategy("State Farm") is FALLBACK_PROFILE
        assert selector.carriers == []

    def test_custom_profile(self):
        selector = NegotiationSelector([
            CarrierProfile(
                name="Acme",
                summary="Be brief",
                common_pushbacks=["Too expensive"],
                responses={"price": "Show supplier quotes"},
                success_rate=0.5,
            ),
        ])
        suggestion = selector.get_negotiation_suggestions("ACME")[0]
        assert suggestion.steps == ["Anticipate pushback: Too expensive", "Show supplier quotes"]
        assert suggestion.expected_impact.startswith("50%")


class TestDenialBuckets:
    """Tests for denial-reason classification."""

    @pytest.mark.parametrize("reason,summary", [
        ("Roof age exceeds 20 years", "Counter an age or wear-and-tear denial"),
        ("Normal wear and tear", "Counter an age or wear-and-tear denial"),
        ("Unit PRICING above carrier database", "Resolve a pricing dispute"),
        ("Labor costs disputed", "Resolve a pricing dispute"),
        ("Code upgrade not covered", "Establish code upgrade coverage"),
        ("Insufficient evidence", GENERIC_DENIAL.summary),
    ])
    def test_bucket(self, selector, reason, summary):
        suggestion = selector.get_negotiation_suggestions("USAA", denial_reason=reason)[2]
        assert suggestion.summary == summary

    @pytest.mark.parametrize("reason", ["Storm damage not verified", "Coverage lapsed", "Decoded invoice"])
    def test_no_substring_matches(self, selector, reason):
        suggestion = selector.get_negotiation_suggestions("USAA", denial_reason=reason)[2]
        assert suggestion.summary == GENERIC_DENIAL.summary


class TestIsolation:
    """Returned suggestions are copies."""

    def test_mutation_does_not_leak(self, selector):
        first = selector.get_negotiation_suggestions("USAA")
        first[1].steps.append("mutated")
        second = selector.get_negotiation_suggestions("USAA")
        assert "mutated" not in second[1].steps
        assert "mutated" not in BEST_PRACTICES.steps
