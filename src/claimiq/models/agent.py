"""
ClaimIQ Agent Models

An agent is a named strategy profile: a goal plus the utility weights used to
score it against claim outcome metrics.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class UtilityModel:
    """Weights, thresholds and optimization target for an agent."""
    weights: dict[str, float] = field(default_factory=dict, hash=False)
    thresholds: dict[str, float] = field(default_factory=dict, hash=False)
    optimization_target: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "weights": dict(self.weights),
            "thresholds": dict(self.thresholds),
            "optimization_target": self.optimization_target,
        }


@dataclass(frozen=True)
class AgentDefinition:
    """Immutable catalog entry."""
    id: str
    name: str
    description: str
    goal: str
    utility_model: UtilityModel = field(default_factory=UtilityModel)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "goal": self.goal,
            "utility_model": self.utility_model.to_dict(),
        }
