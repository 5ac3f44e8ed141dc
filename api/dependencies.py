"""Request dependencies: services lookup, bearer auth, rate limiting, org access."""

from fastapi import Depends, Request

from claimiq.exceptions import AdminRequired, ClaimNotFound, OrgAccessDenied, RateLimitExceeded
from claimiq.models import ClaimRecord
from claimiq.transport import Principal, parse_bearer

from api.services import Services


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_principal(
    request: Request,
    services: Services = Depends(get_services),
) -> Principal:
    """
    Authenticate the bearer token, then charge the principal's rate limit.

    Raises:
        AuthorizationError: Missing or unknown token (401)
        RateLimitExceeded: Budget exhausted for the window (429)
    """
    token = parse_bearer(request.headers.get("Authorization"))
    principal = services.authorizer.verify(token)
    request.state.principal = principal

    settings = services.settings
    decision = services.rate_limiter.check(
        principal.id, settings.rate_limit, settings.rate_window_seconds
    )
    if not decision.allowed:
        raise RateLimitExceeded(
            message=f"Rate limit exceeded for principal '{principal.id}'",
            details={"limit": settings.rate_limit, "window_seconds": settings.rate_window_seconds},
            retry_after=decision.retry_after,
        )
    return principal


def load_claim_for(principal: Principal, services: Services, claim_id: str) -> ClaimRecord:
    """
    Claim owned by the principal's org.

    Raises:
        ClaimNotFound: No such claim (404)
        OrgAccessDenied: Claim belongs to another org (403)
    """
    claim = services.claims.find_claim(claim_id)
    if claim is None:
        raise ClaimNotFound(message=f"Claim '{claim_id}' not found", claim_id=claim_id)
    if claim.org_id != principal.org_id:
        raise OrgAccessDenied(
            message=f"Claim '{claim_id}' belongs to another organization",
            claim_id=claim_id,
        )
    return claim


def require_admin(
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> Principal:
    """
    Authenticated principal listed in CIQ_ADMIN_PRINCIPALS.

    Raises:
        AdminRequired: Principal is not an admin (403)
    """
    if principal.id not in services.settings.admin_principals:
        raise AdminRequired(message=f"Principal '{principal.id}' may not modify the agent catalog")
    return principal
