"""
ClaimIQ Action Planner

Turns a claim's lifecycle position and its triggered rules into a
prioritized list of next-action suggestions.

Key features:
- One template suggestion per allowed next state (INTAKE and IN_PRODUCTION
  have no template)
- Rule-synthesized suggestions for flag_risk / require_document /
  add_line_item actions
- Stable priority ordering: critical < high < medium < low, insertion order
  preserved within a priority
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..models import (
    AddLineItem,
    ClaimState,
    FlagRisk,
    NextActionSuggestion,
    Priority,
    RequireDocument,
    RuleDefinition,
)
from .state_machine import get_allowed_next_states

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionTemplate:
    label: str
    priority: Priority
    action_type: str
    description: str
    estimated_time: Optional[str] = None
    required_data: tuple[str, ...] = ()


# Keyed by the state the suggestion moves the claim into
STATE_TEMPLATES: dict[ClaimState, ActionTemplate] = {
    ClaimState.INSPECTED: ActionTemplate(
        label="Schedule Property Inspection",
        priority=Priority.HIGH,
        action_type="schedule_inspection",
        description="Book an on-site inspection to document roof and exterior damage",
        estimated_time="1-2 days",
        required_data=("property_address", "homeowner_contact"),
    ),
    ClaimState.ESTIMATE_DRAFTED: ActionTemplate(
        label="Generate AI Estimate",
        priority=Priority.HIGH,
        action_type="generate_estimate",
        description="Draft a line-item estimate from inspection measurements and photos",
        estimated_time="30 minutes",
        required_data=("measurements", "photos"),
    ),
    ClaimState.SUBMITTED: ActionTemplate(
        label="Submit to Insurance Carrier",
        priority=Priority.CRITICAL,
        action_type="submit_claim",
        description="Send the estimate and supporting documentation to the carrier",
        estimated_time="15 minutes",
        required_data=("estimate", "photos", "policy_number"),
    ),
    ClaimState.NEGOTIATING: ActionTemplate(
        label="Prepare Supplement Letter",
        priority=Priority.HIGH,
        action_type="generate_letter",
        description="Draft a supplement request for scope the carrier left out",
        estimated_time="1 hour",
        required_data=("carrier_estimate", "estimate"),
    ),
    ClaimState.APPROVED: ActionTemplate(
        label="Begin Production",
        priority=Priority.MEDIUM,
        action_type="begin_production",
        description="Order materials and schedule the crew",
        estimated_time="1 week",
    ),
    ClaimState.COMPLETE: ActionTemplate(
        label="Schedule Final Inspection",
        priority=Priority.MEDIUM,
        action_type="schedule_inspection",
        description="Verify completed work and collect completion photos",
        estimated_time="1 day",
        required_data=("completion_photos",),
    ),
    ClaimState.PAID: ActionTemplate(
        label="Close Claim",
        priority=Priority.LOW,
        action_type="close_claim",
        description="Reconcile final payment and archive the claim",
        estimated_time="15 minutes",
    ),
}


def sort_by_priority(suggestions: Iterable[NextActionSuggestion]) -> list[NextActionSuggestion]:
    """Stable sort by priority rank."""
    return sorted(suggestions, key=lambda s: s.priority.rank)


def _payload_description(rule: RuleDefinition) -> str:
    if rule.action.message:
        return rule.action.message
    return json.dumps(rule.action.to_dict(), sort_keys=True, default=str)


def _payload_priority(rule: RuleDefinition, default: Priority) -> Priority:
    raw = rule.action.payload.get("priority")
    try:
        return Priority(str(raw).lower()) if raw is not None else default
    except ValueError:
        return default


class ActionPlanner:
    """
    Builds next-action suggestions for a claim.

    Usage:
        planner = ActionPlanner()
        actions = planner.get_next_actions_for_claim(
            claim_id="CLM-1",
            state=ClaimState.SUBMITTED,
            rules=triggered_rules,
        )
    """

    def get_next_actions_for_claim(
        self,
        claim_id: str,
        state: Optional[ClaimState],
        rules: Sequence[RuleDefinition] = (),
    ) -> list[NextActionSuggestion]:
        suggestions: list[NextActionSuggestion] = []

        for next_state in get_allowed_next_states(state):
            template = STATE_TEMPLATES.get(next_state)
            if template is None:
                continue
            suggestions.append(NextActionSuggestion(
                id=f"{claim_id}:state-{next_state.value.lower()}",
                label=template.label,
                priority=template.priority,
                action_type=template.action_type,
                description=template.description,
                estimated_time=template.estimated_time,
                required_data=list(template.required_data),
            ))

        for rule in rules:
            suggestion = self._from_rule(claim_id, rule)
            if suggestion is not None:
                suggestions.append(suggestion)

        return self.prioritize_actions(suggestions)

    def prioritize_actions(
        self,
        suggestions: Iterable[NextActionSuggestion],
    ) -> list[NextActionSuggestion]:
        """Order suggestions for presentation. Currently priority rank only."""
        return sort_by_priority(suggestions)

    def _from_rule(
        self,
        claim_id: str,
        rule: RuleDefinition,
    ) -> Optional[NextActionSuggestion]:
        action = rule.action
        suggestion_id = f"{claim_id}:rule-{rule.id}"

        if isinstance(action, FlagRisk):
            return NextActionSuggestion(
                id=suggestion_id,
                label=f"Review Risk: {rule.name}",
                priority=_payload_priority(rule, Priority.HIGH),
                action_type="analyze_risk",
                description=_payload_description(rule),
            )
        if isinstance(action, RequireDocument):
            document = action.document or "supporting document"
            return NextActionSuggestion(
                id=suggestion_id,
                label=f"Upload Required Document: {document}",
                priority=_payload_priority(rule, Priority.HIGH),
                action_type="upload_document",
                description=_payload_description(rule),
                required_data=[action.document] if action.document else [],
            )
        if isinstance(action, AddLineItem):
            item = action.item or "missing line item"
            return NextActionSuggestion(
                id=suggestion_id,
                label=f"Add Line Item: {item}",
                priority=_payload_priority(rule, Priority.MEDIUM),
                action_type="add_line_item",
                description=_payload_description(rule),
            )
        return None
