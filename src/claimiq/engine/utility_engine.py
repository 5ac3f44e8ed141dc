"""
ClaimIQ Utility Engine

Scores agents and candidate actions from weighted outcome metrics.

Metrics (with defaults when absent from the context):
    approval_rate          0.5
    cycle_time_days        30    -> normalized = min(1, 30 / max(days, 1))
    avg_payout             0     -> normalized = min(1, payout / 50000)
    customer_satisfaction  0.7

Weights come from the agent's utility model keys "approval", "cycle_time",
"payout" and "satisfaction" (0.4 / 0.3 / 0.2 / 0.1 when absent).
All scores are clamped to [0, 1].
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from ..models import AgentDefinition, clamp01
from .agent_registry import AgentRegistry

DEFAULT_WEIGHTS: dict[str, float] = {
    "approval": 0.4,
    "cycle_time": 0.3,
    "payout": 0.2,
    "satisfaction": 0.1,
}

DEFAULT_APPROVAL_RATE = 0.5
DEFAULT_CYCLE_TIME_DAYS = 30.0
DEFAULT_AVG_PAYOUT = 0.0
DEFAULT_CUSTOMER_SATISFACTION = 0.7

PAYOUT_CEILING = 50000.0
# Expected utility without history is discounted
NO_HISTORY_DISCOUNT = 0.8
MIN_COST = 0.1


@dataclass(frozen=True)
class ActionCandidate:
    """An action under consideration with its utility and cost."""
    action_type: str
    utility: float
    cost: float


@dataclass(frozen=True)
class HistoricalOutcome:
    """Observed outcomes for an action type."""
    success_rate: float
    avg_improvement: float


def _metric(context: Mapping[str, Any], key: str, default: float) -> float:
    value = context.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)


def normalize_metrics(context: Mapping[str, Any]) -> dict[str, float]:
    """Map raw claim/agent metrics onto [0, 1] scales."""
    cycle_time_days = _metric(context, "cycle_time_days", DEFAULT_CYCLE_TIME_DAYS)
    avg_payout = _metric(context, "avg_payout", DEFAULT_AVG_PAYOUT)
    return {
        "approval": clamp01(_metric(context, "approval_rate", DEFAULT_APPROVAL_RATE)),
        "cycle_time": clamp01(min(1.0, 30.0 / max(cycle_time_days, 1.0))),
        "payout": clamp01(min(1.0, avg_payout / PAYOUT_CEILING)),
        "satisfaction": clamp01(
            _metric(context, "customer_satisfaction", DEFAULT_CUSTOMER_SATISFACTION)
        ),
    }


class UtilityEngine:
    """
    Utility scoring for agents and actions.

    Usage:
        engine = UtilityEngine(registry)
        engine.calculate_utility(agent, {"approval_rate": 0.8})
        engine.select_best_action([ActionCandidate("negotiate", 0.7, 2.0), ...])
    """

    def __init__(self, registry: Optional[AgentRegistry] = None):
        self.registry = registry

    def calculate_utility(
        self,
        agent: Optional[AgentDefinition],
        context: Optional[Mapping[str, Any]] = None,
    ) -> float:
        metrics = normalize_metrics(context or {})
        weights = DEFAULT_WEIGHTS
        if agent is not None and agent.utility_model.weights:
            agent_weights = agent.utility_model.weights
            weights = {
                name: float(agent_weights.get(name, default))
                for name, default in DEFAULT_WEIGHTS.items()
            }
        return clamp01(sum(metrics[name] * weights[name] for name in DEFAULT_WEIGHTS))

    def calculate_expected_utility(
        self,
        action_type: str,
        context: Optional[Mapping[str, Any]] = None,
        historical_data: Optional[HistoricalOutcome] = None,
    ) -> float:
        """
        Expected utility of an action.

        Base utility is the best utility among agents mapped to the action
        type, or the default-weighted utility when none are mapped.
        """
        base_utility = self._base_utility(action_type, context)
        if historical_data is None:
            return clamp01(base_utility * NO_HISTORY_DISCOUNT)
        return clamp01(
            base_utility
            * historical_data.success_rate
            * (1 + historical_data.avg_improvement)
        )

    def _base_utility(
        self,
        action_type: str,
        context: Optional[Mapping[str, Any]],
    ) -> float:
        agents = self.registry.get_agents_for_action_type(action_type) if self.registry else []
        if not agents:
            return self.calculate_utility(None, context)
        return max(self.calculate_utility(agent, context) for agent in agents)

    def select_best_action(self, actions: Sequence[ActionCandidate]) -> str:
        """
        Action type with the best utility/cost ratio.

        Cost is floored at 0.1; the first candidate wins ties.
        Returns "" when there are no candidates.
        """
        if not actions:
            return ""
        ranked = sorted(
            actions,
            key=lambda a: a.utility / max(a.cost, MIN_COST),
            reverse=True,
        )
        return ranked[0].action_type

    def rank_agents(
        self,
        agents: Sequence[AgentDefinition],
        context: Optional[Mapping[str, Any]] = None,
    ) -> list[AgentDefinition]:
        """Agents ordered by utility, highest first (stable on ties)."""
        return sorted(agents, key=lambda a: self.calculate_utility(a, context), reverse=True)
