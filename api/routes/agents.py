"""Agent catalog endpoints."""

from fastapi import APIRouter, Depends

from api.dependencies import get_principal, get_services, require_admin
from api.schemas.requests import CreateAgentRequest
from api.schemas.responses import Agent
from api.services import Services
from claimiq.models import UtilityModel
from claimiq.transport import Principal

router = APIRouter(prefix="/agents", tags=["Agents"])


@router.get("", response_model=list[Agent])
async def list_agents(
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
):
    return [agent.to_dict() for agent in services.registry.list_agents()]


@router.get("/{agent_id}", response_model=Agent)
async def get_agent(
    agent_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
):
    return services.registry.require(agent_id).to_dict()


@router.post("", response_model=Agent, status_code=201)
async def create_agent(
    body: CreateAgentRequest,
    principal: Principal = Depends(require_admin),
    services: Services = Depends(get_services),
):
    """Register an agent (admins only). 409 when the name is taken."""
    agent = services.registry.create_agent(
        name=body.name,
        description=body.description,
        goal=body.goal,
        utility_model=UtilityModel(
            weights=dict(body.utility_model.weights),
            thresholds=dict(body.utility_model.thresholds),
            optimization_target=body.utility_model.optimization_target,
        ),
    )
    return agent.to_dict()
