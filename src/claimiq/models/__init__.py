"""
ClaimIQ Models

All domain models for the claim intelligence core:

    from claimiq.models import (
        # Enums
        ClaimState, Priority, RiskLevel, RequestType,
        # Rule DSL
        parse_trigger, Predicate, AllOf, AnyOf, RuleDefinition,
        # Claims
        ClaimRecord, ClaimContext, StateHistoryEntry,
        # Outputs
        NextActionSuggestion, ClaimIntelligence, OrchestratorOutput,
    )
"""
from __future__ import annotations

# =============================================================================
# Enums
# =============================================================================
from .enums import (
    ClaimState,
    ConditionOperator,
    Priority,
    RecommendedStrategy,
    RequestType,
    RiskLevel,
    RuleActionType,
)

# =============================================================================
# Trigger DSL
# =============================================================================
from .conditions import (
    AllOf,
    Always,
    AnyOf,
    Never,
    Predicate,
    Trigger,
    iter_problems,
    parse_trigger,
)

# =============================================================================
# Rules
# =============================================================================
from .rules import (
    NEGATIVE_ACTION_TYPES,
    POSITIVE_ACTION_TYPES,
    AddLineItem,
    Deny,
    Flag,
    FlagRisk,
    OtherAction,
    Recommend,
    RequireDocument,
    RuleAction,
    RuleDefinition,
    parse_action,
    slugify,
)

# =============================================================================
# Claims
# =============================================================================
from .claim import (
    MISSING,
    ClaimContext,
    ClaimRecord,
    StateHistoryEntry,
)

# =============================================================================
# Agents
# =============================================================================
from .agent import (
    AgentDefinition,
    UtilityModel,
)

# =============================================================================
# Carriers
# =============================================================================
from .carrier import (
    DEFAULT_CARRIER_KEY,
    CarrierProfile,
    carrier_key,
)

# =============================================================================
# Recommendations
# =============================================================================
from .recommendation import (
    ClaimIntelligence,
    ExplanationPayload,
    NegotiationSuggestion,
    NextActionSuggestion,
    OrchestratorOutput,
    SimilarClaim,
    SimilarClaimDetail,
    clamp01,
)

__all__ = [
    # Enums
    "ClaimState",
    "ConditionOperator",
    "Priority",
    "RecommendedStrategy",
    "RequestType",
    "RiskLevel",
    "RuleActionType",
    # Trigger DSL
    "AllOf",
    "Always",
    "AnyOf",
    "Never",
    "Predicate",
    "Trigger",
    "iter_problems",
    "parse_trigger",
    # Rules
    "NEGATIVE_ACTION_TYPES",
    "POSITIVE_ACTION_TYPES",
    "AddLineItem",
    "Deny",
    "Flag",
    "FlagRisk",
    "OtherAction",
    "Recommend",
    "RequireDocument",
    "RuleAction",
    "RuleDefinition",
    "parse_action",
    "slugify",
    # Claims
    "MISSING",
    "ClaimContext",
    "ClaimRecord",
    "StateHistoryEntry",
    # Agents
    "AgentDefinition",
    "UtilityModel",
    # Carriers
    "DEFAULT_CARRIER_KEY",
    "CarrierProfile",
    "carrier_key",
    # Recommendations
    "ClaimIntelligence",
    "ExplanationPayload",
    "NegotiationSuggestion",
    "NextActionSuggestion",
    "OrchestratorOutput",
    "SimilarClaim",
    "SimilarClaimDetail",
    "clamp01",
]
