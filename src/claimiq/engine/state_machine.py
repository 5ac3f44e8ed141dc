"""
ClaimIQ State Machine

Enforces the claim lifecycle transition graph over an append-only state
history. The current state of a claim is its most recent history entry.

Transitions are validated twice: once against the state read at the start of
the call, and again by the history store at append time. A writer that loses
the race gets StateConflict (retryable), not InvalidTransition.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..exceptions import InvalidTransition
from ..models import ClaimState, StateHistoryEntry
from ..stores.base import StateHistoryStore

logger = logging.getLogger(__name__)


# Directed, no self-loops. PAID is terminal.
TRANSITIONS: dict[ClaimState, tuple[ClaimState, ...]] = {
    ClaimState.INTAKE: (ClaimState.INSPECTED,),
    ClaimState.INSPECTED: (ClaimState.ESTIMATE_DRAFTED,),
    ClaimState.ESTIMATE_DRAFTED: (ClaimState.SUBMITTED,),
    ClaimState.SUBMITTED: (ClaimState.NEGOTIATING, ClaimState.APPROVED),
    ClaimState.NEGOTIATING: (ClaimState.APPROVED, ClaimState.SUBMITTED),
    ClaimState.APPROVED: (ClaimState.IN_PRODUCTION,),
    ClaimState.IN_PRODUCTION: (ClaimState.COMPLETE,),
    ClaimState.COMPLETE: (ClaimState.PAID,),
    ClaimState.PAID: (),
}

# A claim with no history may only enter the lifecycle at INTAKE
INITIAL_STATES: tuple[ClaimState, ...] = (ClaimState.INTAKE,)


def get_allowed_next_states(current: Optional[ClaimState]) -> list[ClaimState]:
    """Allowed targets from a state; [INTAKE] when there is no state yet."""
    if current is None:
        return list(INITIAL_STATES)
    return list(TRANSITIONS.get(current, ()))


def is_valid_transition(from_state: Optional[ClaimState], to_state: ClaimState) -> bool:
    return to_state in get_allowed_next_states(from_state)


def _invalid_transition(
    claim_id: str,
    current: Optional[ClaimState],
    attempted: str,
    allowed: list[ClaimState],
) -> InvalidTransition:
    return InvalidTransition(
        message=(
            f"Invalid transition from {current.value if current else 'none'} "
            f"to {attempted}. Allowed: {[s.value for s in allowed]}"
        ),
        details={
            "attempted": attempted,
            "current": current.value if current else None,
            "allowed": [s.value for s in allowed],
        },
        claim_id=claim_id,
    )


@dataclass
class ClaimStateMachine:
    """
    Lifecycle state machine backed by a state history store.

    Usage:
        machine = ClaimStateMachine(history=InMemoryStateHistoryStore())
        machine.transition_state("CLM-1", ClaimState.INTAKE, org_id="ORG-1")
        machine.get_current_state("CLM-1")   # ClaimState.INTAKE
    """
    history: StateHistoryStore

    def get_current_state(self, claim_id: str) -> Optional[ClaimState]:
        latest = self.history.latest(claim_id)
        return latest.current_state if latest else None

    def get_allowed_next_states(self, current: Optional[ClaimState]) -> list[ClaimState]:
        return get_allowed_next_states(current)

    def is_valid_transition(
        self,
        from_state: Optional[ClaimState],
        to_state: ClaimState,
    ) -> bool:
        return is_valid_transition(from_state, to_state)

    def transition_state(
        self,
        claim_id: str,
        new_state: ClaimState,
        notes: Optional[str] = None,
        org_id: str = "",
    ) -> StateHistoryEntry:
        """
        Move a claim to new_state by appending a history entry.

        Args:
            claim_id: Claim to transition
            new_state: Target state
            notes: Optional free-text note stored on the entry
            org_id: Owning organization recorded on the entry

        Returns:
            The appended StateHistoryEntry

        Raises:
            InvalidTransition: new_state is not reachable from the current state
            StateConflict: Another writer changed the state concurrently
        """
        latest = self.history.latest(claim_id)
        current = latest.current_state if latest else None
        allowed = get_allowed_next_states(current)

        try:
            new_state = ClaimState(new_state)
        except ValueError:
            raise _invalid_transition(claim_id, current, str(new_state), allowed) from None
        if new_state not in allowed:
            raise _invalid_transition(claim_id, current, new_state.value, allowed)

        entry = StateHistoryEntry(
            claim_id=claim_id,
            org_id=org_id or (latest.org_id if latest else ""),
            current_state=new_state,
            previous_state=current,
            notes=notes,
        )
        self.history.append(entry, expected_previous=current)
        logger.info(
            "Claim %s: %s -> %s",
            claim_id,
            current.value if current else "none",
            new_state.value,
        )
        return entry

    def get_state_history(self, claim_id: str) -> list[StateHistoryEntry]:
        return self.history.all_for_claim(claim_id)
