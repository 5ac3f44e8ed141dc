"""Negotiation suggestion endpoints."""

from fastapi import APIRouter, Depends

from api.dependencies import get_principal, get_services, load_claim_for
from api.schemas.requests import NegotiationRequest
from api.schemas.responses import NegotiationResponse
from api.services import Services
from claimiq.transport import Principal

router = APIRouter(prefix="/negotiation", tags=["Negotiation"])


@router.post("/suggestions", response_model=NegotiationResponse)
async def negotiation_suggestions(
    body: NegotiationRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
):
    """
    Carrier, denial and value-specific negotiation suggestions (2-4 entries).

    Unknown carriers fall back to the default profile.
    """
    carrier = body.carrier
    denial_reason = body.denial_reason
    estimate_value = body.estimate_value
    if body.claim_id:
        claim = load_claim_for(principal, services, body.claim_id)
        carrier = carrier or claim.carrier
        denial_reason = denial_reason or claim.denial_reason
        estimate_value = estimate_value if estimate_value is not None else claim.estimated_value

    suggestions = services.negotiation.get_negotiation_suggestions(
        carrier=carrier,
        claim_id=body.claim_id,
        denial_reason=denial_reason,
        estimate_value=estimate_value,
    )
    return NegotiationResponse(
        carrier=carrier,
        suggestions=[s.to_dict() for s in suggestions],
    )
