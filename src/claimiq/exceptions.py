"""
ClaimIQ Exception Hierarchy

Domain-specific exceptions for the claim intelligence core.
All exceptions include error codes for tracking and logging.

Exception codes follow the pattern: CIQ_<CATEGORY>_<SPECIFIC>
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ClaimIQError(Exception):
    """
    Base exception for all ClaimIQ errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (CIQ_*)
        details: Additional context about the error
        claim_id: Associated claim ID if applicable
    """
    message: str
    code: str = "CIQ_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    claim_id: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.claim_id:
            parts.append(f"(claim: {self.claim_id})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/API responses."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.claim_id:
            result["claim_id"] = self.claim_id
        return result


# =============================================================================
# Claim / State Errors
# =============================================================================

@dataclass
class ClaimNotFound(ClaimIQError):
    """Requested claim does not exist in the claim store."""
    code: str = "CIQ_CLAIM_NOT_FOUND"


@dataclass
class InvalidTransition(ClaimIQError):
    """
    Requested state change is not in the transition table.

    details carries "attempted", "current" and "allowed" state values.
    """
    code: str = "CIQ_INVALID_TRANSITION"

    @property
    def attempted(self) -> Optional[str]:
        return self.details.get("attempted")

    @property
    def allowed(self) -> list[str]:
        return list(self.details.get("allowed", []))


@dataclass
class StateConflict(ClaimIQError):
    """
    State history changed between read and append (write-write race).

    Callers should re-read the current state and retry.
    """
    code: str = "CIQ_STATE_CONFLICT"


# =============================================================================
# Pack Errors
# =============================================================================

@dataclass
class RulePackLoadError(ClaimIQError):
    """Failed to read a rule pack from disk."""
    code: str = "CIQ_RULE_PACK_LOAD_ERROR"


@dataclass
class RulePackValidationError(ClaimIQError):
    """Rule pack failed schema or trigger validation."""
    code: str = "CIQ_RULE_PACK_VALIDATION_ERROR"


@dataclass
class CarrierPackError(ClaimIQError):
    """Carrier strategy pack could not be loaded or validated."""
    code: str = "CIQ_CARRIER_PACK_ERROR"


# =============================================================================
# Agent Errors
# =============================================================================

@dataclass
class AgentNotFound(ClaimIQError):
    """Referenced agent is not in the registry."""
    code: str = "CIQ_AGENT_NOT_FOUND"


@dataclass
class AgentAlreadyExists(ClaimIQError):
    """An agent with the same name is already registered."""
    code: str = "CIQ_AGENT_EXISTS"


# =============================================================================
# Transport Errors
# =============================================================================

@dataclass
class AuthorizationError(ClaimIQError):
    """Bearer token missing, unknown or not allowed for the resource."""
    code: str = "CIQ_UNAUTHORIZED"


@dataclass
class RateLimitExceeded(ClaimIQError):
    """Principal exhausted its request budget for the current window."""
    code: str = "CIQ_RATE_LIMITED"
    retry_after: float = 0.0


@dataclass
class OrgAccessDenied(ClaimIQError):
    """Principal is authenticated but the claim belongs to another org."""
    code: str = "CIQ_FORBIDDEN"


@dataclass
class AdminRequired(ClaimIQError):
    """Operation is restricted to configured admin principals."""
    code: str = "CIQ_ADMIN_REQUIRED"
