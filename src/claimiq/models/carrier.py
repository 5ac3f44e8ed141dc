"""
ClaimIQ Carrier Models

Carrier negotiation profiles, loaded from the carrier strategy pack.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .enums import RiskLevel


DEFAULT_CARRIER_KEY = "default"


def carrier_key(name: Optional[str]) -> str:
    """Normalized lookup key for a carrier name."""
    return " ".join((name or "").lower().split())


@dataclass
class CarrierProfile:
    """How a carrier tends to push back and how to respond."""
    name: str
    summary: str
    tactics: list[str] = field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.MEDIUM
    common_pushbacks: list[str] = field(default_factory=list)
    responses: dict[str, str] = field(default_factory=dict)
    requirements: dict[str, Any] = field(default_factory=dict)
    success_rate: Optional[float] = None

    @property
    def key(self) -> str:
        return carrier_key(self.name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "summary": self.summary,
            "tactics": list(self.tactics),
            "risk_level": self.risk_level.value,
            "common_pushbacks": list(self.common_pushbacks),
            "responses": dict(self.responses),
            "requirements": dict(self.requirements),
            "success_rate": self.success_rate,
        }
