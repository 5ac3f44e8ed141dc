"""
ClaimIQ Recommendation Models

Output records produced by the planner, explanation builder, negotiation
selector and orchestrator. Probability-like fields on ClaimIntelligence are
clamped to [0, 1] on construction.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from .enums import ClaimState, Priority, RecommendedStrategy, RiskLevel


def clamp01(value: float) -> float:
    """Clamp a value into [0, 1]."""
    return max(0.0, min(1.0, float(value)))


@dataclass
class NextActionSuggestion:
    """A prioritized next step for a claim."""
    id: str
    label: str
    priority: Priority
    action_type: str
    description: Optional[str] = None
    agent_id: Optional[str] = None
    estimated_time: Optional[str] = None
    required_data: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "priority": self.priority.value,
            "agent_id": self.agent_id,
            "action_type": self.action_type,
            "estimated_time": self.estimated_time,
            "required_data": list(self.required_data),
        }


@dataclass(frozen=True)
class SimilarClaim:
    """A historical claim ranked by embedding similarity."""
    claim_id: str
    score: float

    def to_dict(self) -> dict[str, Any]:
        return {"claim_id": self.claim_id, "score": self.score}


@dataclass(frozen=True)
class SimilarClaimDetail:
    """SimilarClaim joined with lightweight claim metadata."""
    claim_id: str
    score: float
    title: str = ""
    carrier: Optional[str] = None
    state: Optional[ClaimState] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "claim_id": self.claim_id,
            "score": self.score,
            "title": self.title,
            "carrier": self.carrier,
            "state": self.state.value if self.state else None,
        }


@dataclass
class ExplanationPayload:
    """Human-readable rationale for a recommendation."""
    reasoning: str
    rules_used: list[str] = field(default_factory=list)
    similar_cases: list[SimilarClaim] = field(default_factory=list)
    confidence_score: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "reasoning": self.reasoning,
            "rules_used": list(self.rules_used),
            "similar_cases": [c.to_dict() for c in self.similar_cases],
            "confidence_score": self.confidence_score,
        }


@dataclass
class NegotiationSuggestion:
    """A negotiation approach with concrete steps and tactics."""
    summary: str
    steps: list[str] = field(default_factory=list)
    tactics: list[str] = field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.MEDIUM
    expected_impact: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "steps": list(self.steps),
            "expected_impact": self.expected_impact,
            "tactics": list(self.tactics),
            "risk_level": self.risk_level.value,
        }


@dataclass
class ClaimIntelligence:
    """Aggregate approval / risk assessment for a claim."""
    approval_likelihood: float
    supplement_success_probability: float
    risk_score: float
    recommended_strategy: RecommendedStrategy
    key_factors: list[str] = field(default_factory=list)
    warnings: Optional[list[str]] = None

    def __post_init__(self) -> None:
        self.approval_likelihood = clamp01(self.approval_likelihood)
        self.supplement_success_probability = clamp01(self.supplement_success_probability)
        self.risk_score = clamp01(self.risk_score)

    def to_dict(self) -> dict[str, Any]:
        return {
            "approval_likelihood": self.approval_likelihood,
            "supplement_success_probability": self.supplement_success_probability,
            "risk_score": self.risk_score,
            "recommended_strategy": self.recommended_strategy.value,
            "key_factors": list(self.key_factors),
            "warnings": list(self.warnings) if self.warnings is not None else None,
        }


@dataclass
class OrchestratorOutput:
    """Consolidated result of one orchestration call."""
    claim_id: str
    intelligence: ClaimIntelligence
    next_actions: list[NextActionSuggestion]
    explanation: ExplanationPayload
    similar_claims: list[SimilarClaim]
    allowed_next_states: list[ClaimState]
    timestamp: datetime
    current_state: Optional[ClaimState] = None
    negotiation_suggestions: Optional[list[NegotiationSuggestion]] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "claim_id": self.claim_id,
            "current_state": self.current_state.value if self.current_state else None,
            "intelligence": self.intelligence.to_dict(),
            "next_actions": [a.to_dict() for a in self.next_actions],
            "explanation": self.explanation.to_dict(),
            "similar_claims": [c.to_dict() for c in self.similar_claims],
            "allowed_next_states": [s.value for s in self.allowed_next_states],
            "timestamp": self.timestamp.isoformat(),
        }
        if self.negotiation_suggestions is not None:
            result["negotiation_suggestions"] = [s.to_dict() for s in self.negotiation_suggestions]
        return result
