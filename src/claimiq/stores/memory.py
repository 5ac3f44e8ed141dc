"""
ClaimIQ In-Memory Stores

Thread-safe in-process implementations of the collaborator ports.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from ..exceptions import ClaimNotFound, StateConflict
from ..models import (
    ClaimContext,
    ClaimRecord,
    ClaimState,
    SimilarClaim,
    StateHistoryEntry,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Claims
# =============================================================================

class InMemoryClaimStore:
    """Claim records keyed by id."""

    def __init__(self, claims: Optional[Sequence[ClaimRecord]] = None):
        self._claims: dict[str, ClaimRecord] = {}
        for claim in claims or []:
            self.add(claim)

    def add(self, claim: ClaimRecord) -> ClaimRecord:
        self._claims[claim.id] = claim
        return claim

    def find_claim(self, claim_id: str) -> Optional[ClaimRecord]:
        return self._claims.get(claim_id)

    def all_claims(self) -> list[ClaimRecord]:
        return list(self._claims.values())


# =============================================================================
# State History
# =============================================================================

class InMemoryStateHistoryStore:
    """
    Append-only state history with compare-and-append.

    Entries are never mutated or removed.
    """

    def __init__(self) -> None:
        self._entries: dict[str, list[StateHistoryEntry]] = {}
        self._lock = threading.Lock()

    def append(
        self,
        entry: StateHistoryEntry,
        expected_previous: Optional[ClaimState] = None,
    ) -> StateHistoryEntry:
        with self._lock:
            history = self._entries.setdefault(entry.claim_id, [])
            actual = history[-1].current_state if history else None
            if actual != expected_previous:
                raise StateConflict(
                    message="Claim state changed before the transition was written",
                    details={
                        "expected": expected_previous.value if expected_previous else None,
                        "actual": actual.value if actual else None,
                        "attempted": entry.current_state.value,
                    },
                    claim_id=entry.claim_id,
                )
            history.append(entry)
        return entry

    def latest(self, claim_id: str) -> Optional[StateHistoryEntry]:
        with self._lock:
            history = self._entries.get(claim_id)
            return history[-1] if history else None

    def all_for_claim(self, claim_id: str) -> list[StateHistoryEntry]:
        with self._lock:
            return list(self._entries.get(claim_id, []))


# =============================================================================
# Context Builder
# =============================================================================

@dataclass
class DefaultClaimContextBuilder:
    """
    Flatten a claim record and its current state into a ClaimContext.

    Claim attributes are merged last so they can carry nested structures
    (roof, photos, docs, estimate ...) referenced by rule paths.
    """
    claims: Any
    history: Any

    def build(self, claim_id: str) -> ClaimContext:
        claim = self.claims.find_claim(claim_id)
        if claim is None:
            raise ClaimNotFound(message=f"Claim '{claim_id}' not found", claim_id=claim_id)

        latest = self.history.latest(claim_id)
        scalars = {
            "claim_id": claim.id,
            "org_id": claim.org_id,
            "carrier": claim.carrier,
            "state": latest.current_state.value if latest else None,
            "damage_type": claim.damage_type,
            "denial_reason": claim.denial_reason,
        }
        # Unset scalars are left out so rules on them fail closed
        values: dict[str, Any] = {k: v for k, v in scalars.items() if v is not None}
        values["estimate"] = (
            {"total": claim.estimated_value} if claim.estimated_value is not None else {}
        )
        for key, value in claim.attributes.items():
            if key == "estimate" and isinstance(value, dict):
                values["estimate"] = {**values["estimate"], **value}
            else:
                values[key] = value
        return ClaimContext(claim_id=claim.id, org_id=claim.org_id, values=values)


# =============================================================================
# Action Log
# =============================================================================

@dataclass(frozen=True)
class ActionLogEntry:
    claim_id: str
    agent_id: str
    action_type: str
    input_data: dict[str, Any] = field(hash=False)
    output_data: dict[str, Any] = field(hash=False)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "claim_id": self.claim_id,
            "agent_id": self.agent_id,
            "action_type": self.action_type,
            "input_data": dict(self.input_data),
            "output_data": dict(self.output_data),
            "created_at": self.created_at.isoformat(),
        }


class InMemoryActionLog:
    """Best-effort feedback sink for agent actions and outcomes."""

    def __init__(self) -> None:
        self._entries: list[ActionLogEntry] = []
        self._lock = threading.Lock()

    def append(
        self,
        claim_id: str,
        agent_id: str,
        action_type: str,
        input_data: dict[str, Any],
        output_data: dict[str, Any],
    ) -> None:
        entry = ActionLogEntry(
            claim_id=claim_id,
            agent_id=agent_id,
            action_type=action_type,
            input_data=dict(input_data),
            output_data=dict(output_data),
        )
        with self._lock:
            self._entries.append(entry)
        logger.debug("Logged %s/%s for claim %s", agent_id, action_type, claim_id)

    def entries(self, claim_id: Optional[str] = None) -> list[ActionLogEntry]:
        with self._lock:
            if claim_id is None:
                return list(self._entries)
            return [e for e in self._entries if e.claim_id == claim_id]
