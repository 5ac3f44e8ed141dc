"""
ClaimIQ Engine

Decision-support components coordinated by the Orchestrator.
"""
from __future__ import annotations

from .action_planner import STATE_TEMPLATES, ActionPlanner, sort_by_priority
from .agent_registry import ACTION_TYPE_AGENTS, DEFAULT_AGENTS, AgentRegistry
from .explanation_builder import (
    ACTION_LABELS,
    GENERIC_REASONING,
    build_explanation,
    default_explanation,
)
from .negotiation import NegotiationSelector
from .orchestrator import IntelligenceWeights, Orchestrator, compute_intelligence
from .rule_engine import RuleEngine, compare_values, evaluate_trigger
from .similarity_search import (
    HashingEmbedder,
    InMemoryEmbeddingStore,
    NullEmbeddingStore,
    SimilaritySearch,
    TextEmbedder,
    cosine_similarity,
)
from .state_machine import (
    TRANSITIONS,
    ClaimStateMachine,
    get_allowed_next_states,
    is_valid_transition,
)
from .utility_engine import ActionCandidate, HistoricalOutcome, UtilityEngine

__all__ = [
    # State machine
    "TRANSITIONS",
    "ClaimStateMachine",
    "get_allowed_next_states",
    "is_valid_transition",
    # Rules
    "RuleEngine",
    "compare_values",
    "evaluate_trigger",
    # Agents & utility
    "ACTION_TYPE_AGENTS",
    "DEFAULT_AGENTS",
    "AgentRegistry",
    "ActionCandidate",
    "HistoricalOutcome",
    "UtilityEngine",
    # Planning
    "STATE_TEMPLATES",
    "ActionPlanner",
    "sort_by_priority",
    # Similarity
    "HashingEmbedder",
    "InMemoryEmbeddingStore",
    "NullEmbeddingStore",
    "SimilaritySearch",
    "TextEmbedder",
    "cosine_similarity",
    # Negotiation
    "NegotiationSelector",
    # Explanation
    "ACTION_LABELS",
    "GENERIC_REASONING",
    "build_explanation",
    "default_explanation",
    # Orchestration
    "IntelligenceWeights",
    "Orchestrator",
    "compute_intelligence",
]
