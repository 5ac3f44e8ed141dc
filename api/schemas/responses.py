"""Response schemas for the API."""

from typing import Any, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Structured error response."""
    error: str
    code: str
    details: Optional[dict[str, Any]] = None
    request_id: str


class HealthResponse(BaseModel):
    healthy: bool
    version: str
    rules_loaded: int
    carriers_loaded: int
    agents: int


# =============================================================================
# Orchestration
# =============================================================================

class NextAction(BaseModel):
    """A prioritized next step."""
    id: str
    label: str
    description: Optional[str] = None
    priority: str  # critical|high|medium|low
    agent_id: Optional[str] = None
    action_type: str
    estimated_time: Optional[str] = None
    required_data: list[str] = []


class SimilarClaimOut(BaseModel):
    claim_id: str
    score: float


class Explanation(BaseModel):
    reasoning: str
    rules_used: list[str]
    similar_cases: list[SimilarClaimOut]
    confidence_score: Optional[float] = None


class NegotiationSuggestionOut(BaseModel):
    summary: str
    steps: list[str]
    expected_impact: Optional[str] = None
    tactics: list[str]
    risk_level: str  # low|medium|high


class Intelligence(BaseModel):
    approval_likelihood: float
    supplement_success_probability: float
    risk_score: float
    recommended_strategy: str
    key_factors: list[str]
    warnings: Optional[list[str]] = None


class OrchestrateResponse(BaseModel):
    """Consolidated recommendation for one claim."""
    claim_id: str
    current_state: Optional[str] = None
    intelligence: Intelligence
    next_actions: list[NextAction]
    explanation: Explanation
    negotiation_suggestions: Optional[list[NegotiationSuggestionOut]] = None
    similar_claims: list[SimilarClaimOut]
    allowed_next_states: list[str]
    timestamp: str


class ShouldActResponse(BaseModel):
    claim_id: str
    current_state: Optional[str] = None
    should_act: bool


# =============================================================================
# Lifecycle
# =============================================================================

class StateResponse(BaseModel):
    claim_id: str
    current_state: Optional[str] = None
    allowed_next_states: list[str]


class HistoryEntry(BaseModel):
    claim_id: str
    org_id: str
    current_state: str
    previous_state: Optional[str] = None
    notes: Optional[str] = None
    created_at: str


class HistoryResponse(BaseModel):
    claim_id: str
    entries: list[HistoryEntry]


class SimilarClaimDetailOut(BaseModel):
    claim_id: str
    score: float
    title: str
    carrier: Optional[str] = None
    state: Optional[str] = None


class SimilarClaimsResponse(BaseModel):
    claim_id: str
    similar_claims: list[SimilarClaimDetailOut]


# =============================================================================
# Negotiation & Agents
# =============================================================================

class NegotiationResponse(BaseModel):
    carrier: Optional[str] = None
    suggestions: list[NegotiationSuggestionOut]


class UtilityModelOut(BaseModel):
    weights: dict[str, float]
    thresholds: dict[str, float]
    optimization_target: str


class Agent(BaseModel):
    id: str
    name: str
    description: str
    goal: str
    utility_model: UtilityModelOut
