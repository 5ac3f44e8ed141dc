"""
ClaimIQ Stores

Collaborator ports and their in-memory adapters.
"""
from __future__ import annotations

from .base import (
    ActionLogSink,
    ClaimContextBuilder,
    ClaimStore,
    EmbeddingStore,
    StateHistoryStore,
)
from .memory import (
    ActionLogEntry,
    DefaultClaimContextBuilder,
    InMemoryActionLog,
    InMemoryClaimStore,
    InMemoryStateHistoryStore,
)

__all__ = [
    # Ports
    "ActionLogSink",
    "ClaimContextBuilder",
    "ClaimStore",
    "EmbeddingStore",
    "StateHistoryStore",
    # In-memory adapters
    "ActionLogEntry",
    "DefaultClaimContextBuilder",
    "InMemoryActionLog",
    "InMemoryClaimStore",
    "InMemoryStateHistoryStore",
]
