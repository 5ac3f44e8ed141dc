"""
ClaimIQ Agent Registry

Catalog of named agents. Reads go through list_agents / get_by_id /
get_by_name; additions go through create_agent, which serializes writers.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Iterable, Optional

from ..exceptions import AgentAlreadyExists, AgentNotFound
from ..models import AgentDefinition, UtilityModel, slugify

logger = logging.getLogger(__name__)


DEFAULT_AGENTS: tuple[AgentDefinition, ...] = (
    AgentDefinition(
        id="estimate",
        name="EstimateAgent",
        description="Builds line-item damage estimates from inspection data",
        goal="Produce complete, code-compliant estimates that carriers approve without revision",
        utility_model=UtilityModel(
            weights={"approval": 0.4, "cycle_time": 0.2, "payout": 0.3, "satisfaction": 0.1},
            thresholds={"min_line_items": 5, "max_variance": 0.15},
            optimization_target="estimate_accuracy",
        ),
    ),
    AgentDefinition(
        id="appeal",
        name="AppealAgent",
        description="Drafts appeal letters for denied or underpaid claims",
        goal="Overturn denials with persuasive, code-backed appeals",
        utility_model=UtilityModel(
            weights={
                "persuasiveness": 0.35,
                "code_compliance": 0.3,
                "success_rate": 0.25,
                "response_time": 0.1,
            },
            thresholds={"min_code_citations": 2},
            optimization_target="appeal_success_rate",
        ),
    ),
    AgentDefinition(
        id="supplement",
        name="SupplementAgent",
        description="Identifies missed scope and prepares supplement requests",
        goal="Recover every legitimately owed line item through supplements",
        utility_model=UtilityModel(
            weights={"approval": 0.3, "cycle_time": 0.1, "payout": 0.5, "satisfaction": 0.1},
            thresholds={"min_supplement_value": 500},
            optimization_target="supplement_recovery",
        ),
    ),
    AgentDefinition(
        id="negotiation",
        name="NegotiationAgent",
        description="Plans carrier negotiations using carrier-specific tactics",
        goal="Close the gap between carrier offer and documented claim value",
        utility_model=UtilityModel(
            weights={"approval": 0.35, "cycle_time": 0.15, "payout": 0.4, "satisfaction": 0.1},
            thresholds={"walk_away_ratio": 0.7},
            optimization_target="settlement_value",
        ),
    ),
    AgentDefinition(
        id="planner",
        name="PlannerAgent",
        description="Sequences next steps across the claim lifecycle",
        goal="Keep every claim moving to the next lifecycle state without stalls",
        utility_model=UtilityModel(
            weights={"approval": 0.3, "cycle_time": 0.5, "payout": 0.1, "satisfaction": 0.1},
            thresholds={"max_idle_days": 7},
            optimization_target="cycle_time",
        ),
    ),
    AgentDefinition(
        id="risk_analysis",
        name="RiskAnalysisAgent",
        description="Scores denial and dispute risk from claim signals",
        goal="Surface denial risk early enough to fix documentation gaps",
        utility_model=UtilityModel(
            weights={"detection_rate": 0.5, "false_positive_rate": 0.3, "coverage": 0.2},
            thresholds={"risk_alert": 0.6},
            optimization_target="risk_detection",
        ),
    ),
    AgentDefinition(
        id="claims_builder",
        name="ClaimsBuilderAgent",
        description="Assembles claim packets: photos, estimate, narrative, codes",
        goal="Submit complete claim packets on the first attempt",
        utility_model=UtilityModel(
            weights={"approval": 0.45, "cycle_time": 0.25, "payout": 0.15, "satisfaction": 0.15},
            thresholds={"min_photos": 5},
            optimization_target="first_pass_approval",
        ),
    ),
    AgentDefinition(
        id="orchestrator",
        name="OrchestratorAgent",
        description="Coordinates the other agents for a single claim",
        goal="Produce the consolidated recommendation with the highest expected utility",
        utility_model=UtilityModel(
            weights={"approval": 0.4, "cycle_time": 0.3, "payout": 0.2, "satisfaction": 0.1},
            thresholds={},
            optimization_target="overall_utility",
        ),
    ),
)

# Action type -> agent names, in preference order
ACTION_TYPE_AGENTS: dict[str, tuple[str, ...]] = {
    "generate_estimate": ("EstimateAgent", "ClaimsBuilderAgent"),
    "generate_letter": ("AppealAgent", "SupplementAgent"),
    "recommend_next_step": ("PlannerAgent", "OrchestratorAgent"),
    "negotiate": ("NegotiationAgent", "SupplementAgent"),
    "analyze_risk": ("RiskAnalysisAgent",),
}


class AgentRegistry:
    """
    In-process agent repository.

    Reads take a snapshot of the catalog; create_agent holds the writer lock
    for the duplicate check and the append.
    """

    def __init__(
        self,
        agents: Optional[Iterable[AgentDefinition]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._agents: tuple[AgentDefinition, ...] = tuple(
            DEFAULT_AGENTS if agents is None else agents
        )
        self._write_lock = threading.Lock()
        self._clock = clock

    # -------------------------------------------------------------------------
    # Read interface
    # -------------------------------------------------------------------------

    def list_agents(self) -> list[AgentDefinition]:
        return list(self._agents)

    def get_by_id(self, agent_id: str) -> Optional[AgentDefinition]:
        for agent in self._agents:
            if agent.id == agent_id:
                return agent
        return None

    def get_by_name(self, name: str) -> Optional[AgentDefinition]:
        for agent in self._agents:
            if agent.name == name:
                return agent
        return None

    def require(self, agent_id: str) -> AgentDefinition:
        agent = self.get_by_id(agent_id)
        if agent is None:
            raise AgentNotFound(
                message=f"Agent '{agent_id}' not found",
                details={"available": [a.id for a in self._agents]},
            )
        return agent

    def get_agents_for_action_type(self, action_type: str) -> list[AgentDefinition]:
        """Agents mapped to an action type; empty for unmapped types."""
        names = ACTION_TYPE_AGENTS.get(action_type, ())
        agents = [self.get_by_name(name) for name in names]
        return [a for a in agents if a is not None]

    # -------------------------------------------------------------------------
    # Admin path
    # -------------------------------------------------------------------------

    def create_agent(
        self,
        name: str,
        description: str,
        goal: str,
        utility_model: Optional[UtilityModel] = None,
    ) -> AgentDefinition:
        """
        Register a new agent with a "<slug>-<millis>" id.

        Raises:
            AgentAlreadyExists: An agent with this name is already registered
        """
        with self._write_lock:
            if self.get_by_name(name) is not None:
                raise AgentAlreadyExists(
                    message=f"Agent named '{name}' already exists",
                    details={"name": name},
                )
            agent = AgentDefinition(
                id=f"{slugify(name)}-{int(self._clock() * 1000)}",
                name=name,
                description=description,
                goal=goal,
                utility_model=utility_model or UtilityModel(),
            )
            self._agents = self._agents + (agent,)

        logger.info("Registered agent %s (%s)", agent.name, agent.id)
        return agent
