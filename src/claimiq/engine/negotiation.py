"""
ClaimIQ Negotiation Strategy Selector

Composes carrier-, denial- and value-specific negotiation suggestions.

Suggestions are returned in a fixed order:
1. The carrier strategy (default profile for unknown carriers)
2. General negotiation best practices
3. A denial-reason response, only when a denial reason is supplied
4. A high-value claim strategy, only when the estimate exceeds 50,000

Callers must not assume a fixed length; the result has 2-4 entries.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from ..models import (
    DEFAULT_CARRIER_KEY,
    CarrierProfile,
    NegotiationSuggestion,
    RiskLevel,
    carrier_key,
)

logger = logging.getLogger(__name__)

HIGH_VALUE_THRESHOLD = 50000.0

# Used when no carrier pack supplied a "default" profile
FALLBACK_PROFILE = CarrierProfile(
    name="default",
    summary="Document thoroughly and escalate through the adjuster's supervisor when stalled",
    tactics=[
        "Lead with photo evidence tied to the date of loss",
        "Cite the applicable building code for every disputed line item",
        "Request the carrier's reasoning in writing",
    ],
    risk_level=RiskLevel.MEDIUM,
)


# =============================================================================
# Fixed Suggestions
# =============================================================================

BEST_PRACTICES = NegotiationSuggestion(
    summary="General negotiation best practices",
    steps=[
        "Keep every exchange with the adjuster in writing",
        "Respond to each disputed line item individually",
        "Attach supporting photos and measurements to every response",
        "Set a follow-up date for each open item",
    ],
    tactics=[
        "Stay factual and avoid emotional language",
        "Reference the policy language the carrier is relying on",
        "Escalate to a field supervisor after two unanswered requests",
    ],
    risk_level=RiskLevel.LOW,
    expected_impact="Shortens dispute cycles and keeps the file audit-ready",
)

# (pattern, suggestion) checked in order against the denial reason
DENIAL_BUCKETS: tuple[tuple[re.Pattern, NegotiationSuggestion], ...] = (
    (
        re.compile(r"\b(age|aged|aging|wear)\b", re.IGNORECASE),
        NegotiationSuggestion(
            summary="Counter an age or wear-and-tear denial",
            steps=[
                "Document impact marks that are inconsistent with normal weathering",
                "Show mat fracture and granule loss patterns tied to the storm",
                "Provide weather data confirming the event on the date of loss",
            ],
            tactics=[
                "Separate storm damage from pre-existing wear line by line",
                "Request the adjuster's basis for attributing damage to age",
            ],
            risk_level=RiskLevel.MEDIUM,
            expected_impact="Reopens claims denied on age alone",
        ),
    ),
    (
        re.compile(r"\b(price|prices|pricing|cost|costs)\b", re.IGNORECASE),
        NegotiationSuggestion(
            summary="Resolve a pricing dispute",
            steps=[
                "Compare the carrier's unit prices against current regional price lists",
                "Attach supplier quotes for disputed materials",
                "Justify overhead and profit with the number of trades involved",
            ],
            tactics=[
                "Negotiate line items, not the total",
                "Ask the carrier to identify a contractor who will work at their price",
            ],
            risk_level=RiskLevel.LOW,
            expected_impact="Closes most of the gap on unit price disputes",
        ),
    ),
    (
        re.compile(r"\b(code|codes|upgrade|upgrades)\b", re.IGNORECASE),
        NegotiationSuggestion(
            summary="Establish code upgrade coverage",
            steps=[
                "Cite the specific IRC sections that apply to the replaced components",
                "Obtain a letter from the local building department",
                "Point to the policy's ordinance or law coverage",
            ],
            tactics=[
                "Show that the permit pull triggers the code requirement",
                "Price code items as separate line items",
            ],
            risk_level=RiskLevel.MEDIUM,
            expected_impact="Recovers code-required items the carrier excluded",
        ),
    ),
)

GENERIC_DENIAL = NegotiationSuggestion(
    summary="Respond to the denial",
    steps=[
        "Request the denial reason and cited policy language in writing",
        "Gather evidence addressing each point of the denial",
        "Submit a formal appeal with supporting documentation",
    ],
    tactics=[
        "Quote the policy language back to the carrier",
        "Offer a re-inspection with the adjuster present",
    ],
    risk_level=RiskLevel.MEDIUM,
)

HIGH_VALUE = NegotiationSuggestion(
    summary="High-value claim strategy",
    steps=[
        "Commission an independent engineering report",
        "Request a senior or large-loss adjuster",
        "Prepare a detailed scope with code citations for every trade",
    ],
    tactics=[
        "Involve a public adjuster or appraisal clause if the gap stays large",
        "Break the settlement into undisputed and disputed portions",
    ],
    risk_level=RiskLevel.HIGH,
    expected_impact="Protects settlement value on claims above $50,000",
)


# =============================================================================
# Selector
# =============================================================================

def _copy(suggestion: NegotiationSuggestion) -> NegotiationSuggestion:
    return NegotiationSuggestion(
        summary=suggestion.summary,
        steps=list(suggestion.steps),
        tactics=list(suggestion.tactics),
        risk_level=suggestion.risk_level,
        expected_impact=suggestion.expected_impact,
    )


class NegotiationSelector:
    """
    Carrier-aware negotiation suggestions.

    Usage:
        selector = NegotiationSelector(CarrierPackLoader().load(path))
        selector.get_negotiation_suggestions(carrier="State Farm", denial_reason="price dispute")
    """

    def __init__(self, profiles: Optional[Iterable[CarrierProfile]] = None):
        self._profiles: dict[str, CarrierProfile] = {}
        for profile in profiles or []:
            self._profiles[profile.key] = profile
        self.default_profile = self._profiles.get(DEFAULT_CARRIER_KEY, FALLBACK_PROFILE)

    @property
    def carriers(self) -> list[str]:
        return [p.name for p in self._profiles.values() if p.key != DEFAULT_CARRIER_KEY]

    def get_carrier_strategy(self, carrier: Optional[str]) -> CarrierProfile:
        """Profile for a carrier (case-insensitive), else the default profile."""
        return self._profiles.get(carrier_key(carrier), self.default_profile)

    def get_negotiation_suggestions(
        self,
        carrier: Optional[str],
        claim_id: Optional[str] = None,
        denial_reason: Optional[str] = None,
        estimate_value: Optional[float] = None,
    ) -> list[NegotiationSuggestion]:
        suggestions = [
            self._carrier_suggestion(carrier),
            _copy(BEST_PRACTICES),
        ]
        if denial_reason:
            suggestions.append(self._denial_suggestion(denial_reason))
        if estimate_value is not None and estimate_value > HIGH_VALUE_THRESHOLD:
            suggestions.append(_copy(HIGH_VALUE))

        logger.debug(
            "Claim %s: %d negotiation suggestions for carrier %r",
            claim_id, len(suggestions), carrier,
        )
        return suggestions

    def _carrier_suggestion(self, carrier: Optional[str]) -> NegotiationSuggestion:
        profile = self.get_carrier_strategy(carrier)
        display_name = carrier if profile.key != DEFAULT_CARRIER_KEY and carrier else profile.name

        steps = [f"Anticipate pushback: {pattern}" for pattern in profile.common_pushbacks]
        steps.extend(profile.responses.values())
        expected_impact = None
        if profile.success_rate is not None:
            expected_impact = (
                f"{round(profile.success_rate * 100)}% historical approval rate "
                f"when these tactics are applied"
            )

        return NegotiationSuggestion(
            summary=f"{display_name} strategy: {profile.summary}",
            steps=steps,
            tactics=list(profile.tactics),
            risk_level=profile.risk_level,
            expected_impact=expected_impact,
        )

    def _denial_suggestion(self, denial_reason: str) -> NegotiationSuggestion:
        for pattern, suggestion in DENIAL_BUCKETS:
            if pattern.search(denial_reason):
                return _copy(suggestion)
        return _copy(GENERIC_DENIAL)
