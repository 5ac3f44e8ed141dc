"""
ClaimIQ - Claim Intelligence Orchestration Core

Decision support for roofing insurance claims: given a claim, ClaimIQ
produces next-best actions, an approval / risk assessment, carrier
negotiation tactics and a plain-language explanation.

Key Features:
- Claim lifecycle state machine with optimistic concurrency
- Rule engine over a small trigger DSL, loaded from YAML packs
- Utility-scored agent catalog
- Similar-claim search over embedding vectors
- Carrier-aware negotiation suggestions
- Best-effort orchestration: optional lookups degrade instead of failing

Quick Start:
    from claimiq.engine import (
        ClaimStateMachine, Orchestrator, RuleEngine,
    )
    from claimiq.packs import RulePackLoader
    from claimiq.stores import (
        DefaultClaimContextBuilder, InMemoryClaimStore, InMemoryStateHistoryStore,
    )

    claims = InMemoryClaimStore()
    history = InMemoryStateHistoryStore()
    orchestrator = Orchestrator(
        claims=claims,
        state_machine=ClaimStateMachine(history),
        context_builder=DefaultClaimContextBuilder(claims, history),
        rule_engine=RuleEngine(RulePackLoader().load(DEFAULT_RULE_PACK)),
    )
    result = orchestrator.orchestrate_claim("CLM-001", "ORG-1")

Version: 0.1.0
"""
from __future__ import annotations

__version__ = "0.1.0"

# =============================================================================
# Core Models (Re-exported for convenience)
# =============================================================================
from .models import (
    AgentDefinition,
    ClaimContext,
    ClaimIntelligence,
    ClaimRecord,
    ClaimState,
    ExplanationPayload,
    NegotiationSuggestion,
    NextActionSuggestion,
    OrchestratorOutput,
    Priority,
    RequestType,
    RuleDefinition,
    SimilarClaim,
    StateHistoryEntry,
)

# =============================================================================
# Configuration & Exceptions
# =============================================================================
from .config import DEFAULT_CARRIER_PACK, DEFAULT_RULE_PACK, Settings
from .exceptions import (
    AdminRequired,
    AgentAlreadyExists,
    AgentNotFound,
    AuthorizationError,
    CarrierPackError,
    ClaimIQError,
    ClaimNotFound,
    InvalidTransition,
    OrgAccessDenied,
    RateLimitExceeded,
    RulePackLoadError,
    RulePackValidationError,
    StateConflict,
)

__all__ = [
    "__version__",
    # Models
    "AgentDefinition",
    "ClaimContext",
    "ClaimIntelligence",
    "ClaimRecord",
    "ClaimState",
    "ExplanationPayload",
    "NegotiationSuggestion",
    "NextActionSuggestion",
    "OrchestratorOutput",
    "Priority",
    "RequestType",
    "RuleDefinition",
    "SimilarClaim",
    "StateHistoryEntry",
    # Configuration
    "DEFAULT_CARRIER_PACK",
    "DEFAULT_RULE_PACK",
    "Settings",
    # Exceptions
    "AdminRequired",
    "AgentAlreadyExists",
    "AgentNotFound",
    "AuthorizationError",
    "CarrierPackError",
    "ClaimIQError",
    "ClaimNotFound",
    "InvalidTransition",
    "OrgAccessDenied",
    "RateLimitExceeded",
    "RulePackLoadError",
    "RulePackValidationError",
    "StateConflict",
]
