"""Claim orchestration and lifecycle endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool

from api.dependencies import get_principal, get_services, load_claim_for
from api.schemas.requests import OrchestrateRequest, TransitionRequest
from api.schemas.responses import (
    HistoryEntry,
    HistoryResponse,
    OrchestrateResponse,
    ShouldActResponse,
    SimilarClaimsResponse,
    StateResponse,
)
from api.services import Services
from claimiq.transport import Principal

router = APIRouter(prefix="/claims", tags=["Claims"])

logger = logging.getLogger("claimiq.api")


@router.post(
    "/{claim_id}/orchestrate",
    response_model=OrchestrateResponse,
    response_model_exclude_unset=True,
)
async def orchestrate(
    claim_id: str,
    request: Request,
    body: Optional[OrchestrateRequest] = None,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
):
    """
    Run the full intelligence pipeline for a claim.

    Returns next actions, approval/risk intelligence, an explanation, similar
    claims and (for negotiate / full_intelligence requests on claims with a
    carrier) negotiation suggestions.
    """
    load_claim_for(principal, services, claim_id)
    body = body or OrchestrateRequest()
    # Time-boxed steps wait on worker threads; keep that off the event loop
    result = await run_in_threadpool(
        services.orchestrator.orchestrate_claim,
        claim_id=claim_id,
        org_id=principal.org_id,
        request_type=body.request_type,
    )
    logger.info(
        "Orchestration complete",
        extra={
            "request_id": getattr(request.state, "request_id", "unknown"),
            "claim_id": claim_id,
        },
    )
    return result.to_dict()


@router.get("/{claim_id}/should-act", response_model=ShouldActResponse)
async def should_act(
    claim_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
):
    """Whether the claim currently has anything to do."""
    load_claim_for(principal, services, claim_id)
    current = services.state_machine.get_current_state(claim_id)
    return ShouldActResponse(
        claim_id=claim_id,
        current_state=current.value if current else None,
        should_act=services.orchestrator.should_take_action(claim_id),
    )


@router.get("/{claim_id}/state", response_model=StateResponse)
async def get_state(
    claim_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
):
    load_claim_for(principal, services, claim_id)
    current = services.state_machine.get_current_state(claim_id)
    return StateResponse(
        claim_id=claim_id,
        current_state=current.value if current else None,
        allowed_next_states=[s.value for s in services.state_machine.get_allowed_next_states(current)],
    )


@router.post("/{claim_id}/transitions", response_model=HistoryEntry, status_code=201)
async def transition(
    claim_id: str,
    body: TransitionRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
):
    """
    Move the claim to a new state.

    422 when the transition is not allowed from the current state; 409 when
    another writer changed the state first (re-read and retry).
    """
    claim = load_claim_for(principal, services, claim_id)
    entry = services.state_machine.transition_state(
        claim_id,
        body.new_state,
        notes=body.notes,
        org_id=claim.org_id,
    )
    return entry.to_dict()


@router.get("/{claim_id}/history", response_model=HistoryResponse)
async def get_history(
    claim_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
):
    """State history in creation order."""
    load_claim_for(principal, services, claim_id)
    return HistoryResponse(
        claim_id=claim_id,
        entries=[e.to_dict() for e in services.state_machine.get_state_history(claim_id)],
    )


@router.get("/{claim_id}/similar", response_model=SimilarClaimsResponse)
async def get_similar(
    claim_id: str,
    limit: Optional[int] = Query(None, ge=1, le=50),
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
):
    """Similar historical claims with title, carrier and current state."""
    load_claim_for(principal, services, claim_id)
    details = services.similarity.get_similar_claims_with_details(
        claim_id,
        limit or services.settings.similar_limit,
        org_id=principal.org_id,
    )
    return SimilarClaimsResponse(
        claim_id=claim_id,
        similar_claims=[d.to_dict() for d in details],
    )
