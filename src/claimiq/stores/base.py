"""
ClaimIQ Collaborator Ports

The core reads claims and writes state history through these interfaces.
Production deployments back them with a transactional store; the in-memory
adapters in memory.py are used for tests and the demo service.
"""
from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..models import (
    ClaimContext,
    ClaimRecord,
    ClaimState,
    SimilarClaim,
    StateHistoryEntry,
)


class ClaimStore(Protocol):
    def find_claim(self, claim_id: str) -> Optional[ClaimRecord]:
        ...


class StateHistoryStore(Protocol):
    def append(
        self,
        entry: StateHistoryEntry,
        expected_previous: Optional[ClaimState] = None,
    ) -> StateHistoryEntry:
        """
        Append an entry if the latest state still equals expected_previous.

        Raises:
            StateConflict: If another writer appended first
        """
        ...

    def latest(self, claim_id: str) -> Optional[StateHistoryEntry]:
        ...

    def all_for_claim(self, claim_id: str) -> list[StateHistoryEntry]:
        ...


class ClaimContextBuilder(Protocol):
    def build(self, claim_id: str) -> ClaimContext:
        ...


class EmbeddingStore(Protocol):
    def vector_for(self, claim_id: str) -> Optional[list[float]]:
        ...

    def top_k(
        self,
        vector: Sequence[float],
        k: int,
        exclude: Optional[set[str]] = None,
    ) -> list[SimilarClaim]:
        ...


class ActionLogSink(Protocol):
    def append(
        self,
        claim_id: str,
        agent_id: str,
        action_type: str,
        input_data: dict[str, Any],
        output_data: dict[str, Any],
    ) -> None:
        ...
