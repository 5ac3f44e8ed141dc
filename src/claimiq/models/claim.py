"""
ClaimIQ Claim Models

- ClaimRecord: the lightweight claim row supplied by the claim store
- ClaimContext: flexible attribute bag rules are evaluated against
- StateHistoryEntry: one append-only lifecycle transition
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from .enums import ClaimState


# Returned by ClaimContext.resolve when a path segment is missing
MISSING = object()


@dataclass
class ClaimRecord:
    """A claim as loaded from the claim store."""
    id: str
    org_id: str
    carrier: Optional[str] = None
    estimated_value: Optional[float] = None
    title: str = ""
    damage_type: Optional[str] = None
    denial_reason: Optional[str] = None
    attributes: dict[str, Any] = field(default_factory=dict)

    def embedding_text(self) -> str:
        """Free text describing the claim, used for similarity embedding."""
        parts = [self.title, self.damage_type or "", self.carrier or ""]
        description = self.attributes.get("description")
        if description:
            parts.append(str(description))
        return " ".join(p for p in parts if p)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "org_id": self.org_id,
            "carrier": self.carrier,
            "estimated_value": self.estimated_value,
            "title": self.title,
            "damage_type": self.damage_type,
            "denial_reason": self.denial_reason,
            "attributes": dict(self.attributes),
        }


@dataclass
class ClaimContext:
    """
    Evaluation environment for rule triggers.

    Values are addressed with dot-notation paths ("roof.slope"). Sequences
    also expose "length" so "photos.length" works on a list of photos.
    """
    claim_id: str
    org_id: str = ""
    values: dict[str, Any] = field(default_factory=dict)

    def resolve(self, path: str) -> Any:
        """
        Resolve a dot-notation path.

        Returns:
            The value, or MISSING when any segment does not exist
        """
        current: Any = self.values
        for part in path.split("."):
            if isinstance(current, dict):
                if part not in current:
                    return MISSING
                current = current[part]
            elif isinstance(current, (list, tuple, str)):
                if part == "length":
                    current = len(current)
                elif part.isdigit() and int(part) < len(current):
                    current = current[int(part)]
                else:
                    return MISSING
            else:
                return MISSING
        return current

    def get(self, path: str, default: Any = None) -> Any:
        value = self.resolve(path)
        return default if value is MISSING else value

    def to_dict(self) -> dict[str, Any]:
        return {"claim_id": self.claim_id, "org_id": self.org_id, "values": dict(self.values)}


@dataclass(frozen=True)
class StateHistoryEntry:
    """
    One append-only lifecycle transition.

    The latest entry for a claim defines its current state.
    """
    claim_id: str
    org_id: str
    current_state: ClaimState
    previous_state: Optional[ClaimState] = None
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "claim_id": self.claim_id,
            "org_id": self.org_id,
            "current_state": self.current_state.value,
            "previous_state": self.previous_state.value if self.previous_state else None,
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
        }
