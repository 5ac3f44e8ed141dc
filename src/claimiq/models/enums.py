"""
ClaimIQ Enumerations

All enums inherit from (str, Enum) for JSON serialization compatibility.
"""
from __future__ import annotations

from enum import Enum


# =============================================================================
# Claim Lifecycle
# =============================================================================

class ClaimState(str, Enum):
    """
    Lifecycle states of a claim.

    INTAKE -> INSPECTED -> ESTIMATE_DRAFTED -> SUBMITTED -> (NEGOTIATING <-> SUBMITTED)
    -> APPROVED -> IN_PRODUCTION -> COMPLETE -> PAID
    """
    INTAKE = "INTAKE"
    INSPECTED = "INSPECTED"
    ESTIMATE_DRAFTED = "ESTIMATE_DRAFTED"
    SUBMITTED = "SUBMITTED"
    NEGOTIATING = "NEGOTIATING"
    APPROVED = "APPROVED"
    IN_PRODUCTION = "IN_PRODUCTION"
    COMPLETE = "COMPLETE"
    PAID = "PAID"                    # Terminal


# =============================================================================
# Suggestions
# =============================================================================

class Priority(str, Enum):
    """Urgency of a next-action suggestion. Lower rank sorts first."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


class RiskLevel(str, Enum):
    """Risk of a negotiation approach backfiring with the carrier."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RecommendedStrategy(str, Enum):
    """Processing strategy derived from the approval likelihood."""
    STRENGTHEN_DOCUMENTATION = "strengthen_documentation"
    STANDARD_PROCESSING = "standard_processing"
    FAST_TRACK = "fast_track"


class RequestType(str, Enum):
    """What the caller wants out of an orchestration call."""
    FULL_INTELLIGENCE = "full_intelligence"
    NEXT_ACTIONS = "next_actions"
    NEGOTIATE = "negotiate"
    EXPLAIN = "explain"


# =============================================================================
# Rule DSL
# =============================================================================

class ConditionOperator(str, Enum):
    """Comparison operators for trigger predicates."""
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    EQ = "=="
    NE = "!="
    CONTAINS = "contains"
    IN = "in"
    UNKNOWN = "unknown"              # Unrecognized operator, always false

    @classmethod
    def parse(cls, raw: object) -> "ConditionOperator":
        try:
            op = cls(raw)
        except ValueError:
            return cls.UNKNOWN
        return op


class RuleActionType(str, Enum):
    """Closed set of rule action kinds the core reacts to."""
    RECOMMEND = "recommend"
    DENY = "deny"
    FLAG = "flag"
    FLAG_RISK = "flag_risk"
    REQUIRE_DOCUMENT = "require_document"
    ADD_LINE_ITEM = "add_line_item"
    OTHER = "other"
