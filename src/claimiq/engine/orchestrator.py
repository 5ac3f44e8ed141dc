"""
ClaimIQ Orchestrator

Top-level coordinator producing one consolidated recommendation per claim.

Pipeline:
1. Load the claim (ClaimNotFound propagates)
2. Current and allowed next states
3. Build the rule context and evaluate rules
4. Plan next actions and attach the best-utility agent to each
5. Similar claims, restricted to the claim's org
6. Heuristic intelligence score
7. Explanation for the top suggestion
8. Negotiation suggestions (carrier set, negotiate / full_intelligence only)
9. Action log entry
10. OrchestratorOutput

Similarity, negotiation and action logging are best-effort: failures and
timeouts are logged and replaced with an empty result.
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Sequence, TypeVar, Union

from ..exceptions import ClaimNotFound, OrgAccessDenied
from ..models import (
    NEGATIVE_ACTION_TYPES,
    POSITIVE_ACTION_TYPES,
    ClaimIntelligence,
    ClaimState,
    NegotiationSuggestion,
    NextActionSuggestion,
    OrchestratorOutput,
    RecommendedStrategy,
    RequestType,
    RuleDefinition,
    SimilarClaim,
    clamp01,
)
from .action_planner import ActionPlanner
from .agent_registry import AgentRegistry
from .explanation_builder import build_explanation, default_explanation
from .negotiation import NegotiationSelector
from .rule_engine import RuleEngine
from .similarity_search import SimilaritySearch
from .state_machine import ClaimStateMachine
from .utility_engine import UtilityEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")

ORCHESTRATOR_AGENT_ID = "orchestrator"
ORCHESTRATE_ACTION_TYPE = "orchestrate"

ADVANCED_STATES = frozenset({ClaimState.SUBMITTED, ClaimState.NEGOTIATING, ClaimState.APPROVED})
FINISHED_STATES = frozenset({ClaimState.COMPLETE, ClaimState.PAID})
NEGOTIATION_REQUESTS = frozenset({RequestType.NEGOTIATE, RequestType.FULL_INTELLIGENCE})


# =============================================================================
# Intelligence Heuristic
# =============================================================================

@dataclass(frozen=True)
class IntelligenceWeights:
    """Contributions of each signal to the approval score."""
    base: float = 0.5
    similar_bonus: float = 0.2
    similar_threshold: float = 0.7
    positive_rule_bonus: float = 0.15
    negative_rule_penalty: float = 0.15
    advanced_state_bonus: float = 0.1
    supplement_factor: float = 0.7
    strengthen_below: float = 0.4
    fast_track_above: float = 0.7


def compute_intelligence(
    current_state: Optional[ClaimState],
    triggered_rules: Sequence[RuleDefinition],
    similar_claims: Sequence[SimilarClaim],
    weights: IntelligenceWeights = IntelligenceWeights(),
) -> ClaimIntelligence:
    """
    Approval / risk heuristic.

    Starts at weights.base and adds or subtracts each signal once, then
    clamps to [0, 1]. risk = 1 - approval; supplement = approval * 0.7.
    """
    score = weights.base
    key_factors: list[str] = []
    warnings: list[str] = []

    strong_matches = [c for c in similar_claims if c.score > weights.similar_threshold]
    if strong_matches:
        score += weights.similar_bonus
        key_factors.append(f"{len(strong_matches)} similar successful claim(s)")

    positive = [r for r in triggered_rules if r.action.normalized_type in POSITIVE_ACTION_TYPES]
    if positive:
        score += weights.positive_rule_bonus
        key_factors.append(f"{len(positive)} positive rule signal(s)")

    negative = [r for r in triggered_rules if r.action.normalized_type in NEGATIVE_ACTION_TYPES]
    if negative:
        score -= weights.negative_rule_penalty
        key_factors.append(f"{len(negative)} risk rule signal(s)")
        warnings.extend(f"{rule.name}: {rule.action.message or rule.description}" for rule in negative)

    if current_state in ADVANCED_STATES:
        score += weights.advanced_state_bonus
        key_factors.append(f"Claim is in {current_state.value} stage")

    approval = clamp01(score)
    if approval < weights.strengthen_below:
        strategy = RecommendedStrategy.STRENGTHEN_DOCUMENTATION
    elif approval > weights.fast_track_above:
        strategy = RecommendedStrategy.FAST_TRACK
    else:
        strategy = RecommendedStrategy.STANDARD_PROCESSING

    return ClaimIntelligence(
        approval_likelihood=approval,
        supplement_success_probability=approval * weights.supplement_factor,
        risk_score=1 - approval,
        recommended_strategy=strategy,
        key_factors=key_factors,
        warnings=warnings or None,
    )


# =============================================================================
# Orchestrator
# =============================================================================

@dataclass
class Orchestrator:
    """
    Coordinates the engine components for a single claim.

    Usage:
        orchestrator = Orchestrator(
            claims=claim_store,
            state_machine=ClaimStateMachine(history),
            context_builder=DefaultClaimContextBuilder(claim_store, history),
            rule_engine=RuleEngine(rules),
        )
        result = orchestrator.orchestrate_claim("CLM-1", "ORG-1")
    """
    claims: Any
    state_machine: ClaimStateMachine
    context_builder: Any
    rule_engine: RuleEngine
    planner: ActionPlanner = field(default_factory=ActionPlanner)
    similarity: SimilaritySearch = field(default_factory=SimilaritySearch)
    negotiation: NegotiationSelector = field(default_factory=NegotiationSelector)
    registry: AgentRegistry = field(default_factory=AgentRegistry)
    utility: Optional[UtilityEngine] = None
    action_log: Any = None
    similar_limit: int = 5
    step_timeout: Optional[float] = None
    intelligence_weights: IntelligenceWeights = field(default_factory=IntelligenceWeights)
    step_workers: int = 4

    def __post_init__(self) -> None:
        if self.utility is None:
            self.utility = UtilityEngine(self.registry)
        self._executor: Optional[ThreadPoolExecutor] = None
        if self.step_timeout is not None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.step_workers,
                thread_name_prefix="claimiq-step",
            )

    def close(self) -> None:
        """Release the step worker pool without waiting on hung steps."""
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    # -------------------------------------------------------------------------
    # Best-effort steps
    # -------------------------------------------------------------------------

    def _degrade(self, step: str, fn: Callable[[], T], default: T) -> T:
        """Run fn; on error or timeout log a warning and return default."""
        if self._executor is None:
            try:
                return fn()
            except Exception as e:
                logger.warning("Step %s failed, using default: %s", step, e)
                return default

        future = self._executor.submit(fn)
        try:
            return future.result(timeout=self.step_timeout)
        except FutureTimeout:
            future.cancel()
            logger.warning("Step %s timed out after %.2fs, using default", step, self.step_timeout)
            return default
        except Exception as e:
            logger.warning("Step %s failed, using default: %s", step, e)
            return default

    def _assign_agents(
        self,
        suggestions: list[NextActionSuggestion],
        metrics: dict[str, Any],
    ) -> None:
        for suggestion in suggestions:
            agents = self.registry.get_agents_for_action_type(suggestion.action_type)
            if agents:
                suggestion.agent_id = self.utility.rank_agents(agents, metrics)[0].id

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def orchestrate_claim(
        self,
        claim_id: str,
        org_id: Optional[str] = None,
        request_type: Union[RequestType, str] = RequestType.FULL_INTELLIGENCE,
    ) -> OrchestratorOutput:
        """
        Produce the consolidated recommendation for a claim.

        Raises:
            ClaimNotFound: The claim does not exist
            OrgAccessDenied: org_id is given and does not own the claim
        """
        started = time.perf_counter()
        request_type = RequestType(request_type)

        claim = self.claims.find_claim(claim_id)
        if claim is None:
            raise ClaimNotFound(message=f"Claim '{claim_id}' not found", claim_id=claim_id)
        if org_id and claim.org_id != org_id:
            raise OrgAccessDenied(
                message=f"Claim '{claim_id}' does not belong to org '{org_id}'",
                claim_id=claim_id,
            )

        current_state = self.state_machine.get_current_state(claim_id)
        allowed_next_states = self.state_machine.get_allowed_next_states(current_state)

        context = self.context_builder.build(claim_id)
        triggered_rules = self.rule_engine.evaluate_rules_for_claim(context)

        next_actions = self.planner.get_next_actions_for_claim(
            claim_id=claim_id,
            state=current_state,
            rules=triggered_rules,
        )
        self._assign_agents(next_actions, context.values)

        similar_claims = self._degrade(
            "similarity",
            lambda: self.similarity.find_similar_claims(
                claim_id,
                self.similar_limit,
                org_id=claim.org_id,
            ),
            [],
        )

        intelligence = compute_intelligence(
            current_state,
            triggered_rules,
            similar_claims,
            self.intelligence_weights,
        )

        if next_actions:
            explanation = build_explanation(
                claim_id=claim_id,
                rules=triggered_rules,
                similar_cases=similar_claims,
                action_type=next_actions[0].action_type,
                confidence=intelligence.approval_likelihood,
            )
        else:
            explanation = default_explanation()

        negotiation_suggestions: Optional[list[NegotiationSuggestion]] = None
        if claim.carrier and request_type in NEGOTIATION_REQUESTS:
            negotiation_suggestions = self._degrade(
                "negotiation",
                lambda: self.negotiation.get_negotiation_suggestions(
                    carrier=claim.carrier,
                    claim_id=claim_id,
                    denial_reason=claim.denial_reason,
                    estimate_value=claim.estimated_value,
                ),
                [],
            )

        output = OrchestratorOutput(
            claim_id=claim_id,
            current_state=current_state,
            intelligence=intelligence,
            next_actions=next_actions,
            explanation=explanation,
            similar_claims=similar_claims,
            allowed_next_states=allowed_next_states,
            timestamp=datetime.now(timezone.utc),
            negotiation_suggestions=negotiation_suggestions,
        )

        if self.action_log is not None:
            self._degrade(
                "action_log",
                lambda: self.action_log.append(
                    claim_id=claim_id,
                    agent_id=ORCHESTRATOR_AGENT_ID,
                    action_type=ORCHESTRATE_ACTION_TYPE,
                    input_data={
                        "org_id": org_id or claim.org_id,
                        "request_type": request_type.value,
                    },
                    output_data={
                        "approval_likelihood": intelligence.approval_likelihood,
                        "recommended_strategy": intelligence.recommended_strategy.value,
                        "next_actions": len(next_actions),
                        "similar_claims": len(similar_claims),
                        "rules_triggered": [r.id for r in triggered_rules],
                    },
                ),
                None,
            )

        logger.info(
            "Orchestrated claim %s: approval=%.2f strategy=%s actions=%d",
            claim_id,
            intelligence.approval_likelihood,
            intelligence.recommended_strategy.value,
            len(next_actions),
            extra={
                "claim_id": claim_id,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return output

    def should_take_action(self, claim_id: str) -> bool:
        """False for COMPLETE / PAID claims, else whether any action is planned."""
        current_state = self.state_machine.get_current_state(claim_id)
        if current_state in FINISHED_STATES:
            return False
        return bool(self.planner.get_next_actions_for_claim(claim_id, current_state, []))
